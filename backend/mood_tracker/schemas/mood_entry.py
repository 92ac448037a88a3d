"""Pydantic schemas for mood entries, listings and statistics."""
from __future__ import annotations
import re
from datetime import date, datetime, time
from typing import Annotated, Any, Optional
from pydantic import (
    BaseModel, BeforeValidator, Field, ValidationInfo, computed_field, field_serializer, field_validator,
)

from mood_tracker.schemas.user import UserBrief
from mood_tracker.services.mood_vocabulary import get_mood_description, get_mood_emoji

MOOD_LEVEL_MIN = 1
MOOD_LEVEL_MAX = 5
NOTES_MAX_LENGTH = 1000
ACTIVITY_MAX_LENGTH = 100
ACTIVITIES_MAX_ITEMS = 20

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def _parse_entry_time(value: Any) -> Any:
    """Accept ``HH:MM`` strings only; ``time`` objects pass through."""
    if value is None or isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise ValueError("The entry time field must match the format HH:MM.")
    match = _TIME_RE.match(value)
    if not match:
        raise ValueError("The entry time field must match the format HH:MM.")
    return time(int(match.group(1)), int(match.group(2)))


MoodLevel = Annotated[int, Field(ge=MOOD_LEVEL_MIN, le=MOOD_LEVEL_MAX)]
EntryTime = Annotated[time, BeforeValidator(_parse_entry_time)]
Activity = Annotated[str, Field(max_length=ACTIVITY_MAX_LENGTH)]


class MoodEntryCreate(BaseModel):
    mood_level: MoodLevel
    entry_date: Optional[date] = None
    entry_time: Optional[EntryTime] = None
    notes: Optional[str] = Field(None, max_length=NOTES_MAX_LENGTH)
    activities: Optional[list[Activity]] = Field(None, max_length=ACTIVITIES_MAX_ITEMS)


class MoodEntryUpdate(BaseModel):
    """Partial update — only supplied fields are validated and changed.

    ``notes`` and ``activities`` may be cleared with null; the other fields,
    when present, must carry a value.
    """

    mood_level: Optional[MoodLevel] = None
    entry_date: Optional[date] = None
    entry_time: Optional[EntryTime] = None
    notes: Optional[str] = Field(None, max_length=NOTES_MAX_LENGTH)
    activities: Optional[list[Activity]] = Field(None, max_length=ACTIVITIES_MAX_ITEMS)

    @field_validator("mood_level", "entry_date", "entry_time")
    @classmethod
    def not_null(cls, value, info: ValidationInfo):
        if value is None:
            raise ValueError(f"The {info.field_name} field cannot be null.")
        return value


class MoodEntryOut(BaseModel):
    id: int
    user_id: int
    mood_level: int
    entry_date: date
    entry_time: Optional[time] = None
    notes: Optional[str] = None
    activities: Optional[list[str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[UserBrief] = None

    model_config = {"from_attributes": True}

    @field_serializer("entry_time")
    def serialize_entry_time(self, value: Optional[time]) -> Optional[str]:
        return value.strftime("%H:%M") if value is not None else None

    @field_serializer("activities")
    def serialize_activities(self, value: Optional[list[str]]) -> list[str]:
        return list(value or [])

    @computed_field
    @property
    def mood_description(self) -> str:
        return get_mood_description(self.mood_level)

    @computed_field
    @property
    def mood_emoji(self) -> str:
        return get_mood_emoji(self.mood_level)


class MoodMeta(BaseModel):
    mood_description: str
    mood_emoji: str


class MoodEntryResponse(BaseModel):
    status: str = "success"
    data: MoodEntryOut
    meta: MoodMeta


class MoodEntryMessageResponse(MoodEntryResponse):
    message: str


class StatusMessageResponse(BaseModel):
    status: str = "success"
    message: str


class LatestEntryOut(BaseModel):
    mood_level: int
    entry_date: date
    mood_description: str
    mood_emoji: str


class MoodEntryPage(BaseModel):
    data: list[MoodEntryOut]
    current_page: int
    per_page: int
    total: int
    last_page: int


class MoodEntryListMeta(BaseModel):
    total_entries: int
    average_mood: float
    latest_entry: Optional[LatestEntryOut] = None


class MoodEntryListResponse(BaseModel):
    status: str = "success"
    data: MoodEntryPage
    meta: MoodEntryListMeta


class MonthSummary(BaseModel):
    count: int
    average: float


class DistributionItem(BaseModel):
    count: int
    description: str
    emoji: str


class MoodStats(BaseModel):
    total_entries: int
    average_mood: float
    latest_entry: Optional[MoodEntryOut] = None
    this_month: MonthSummary
    mood_distribution: dict[int, DistributionItem]


class MoodStatsResponse(BaseModel):
    status: str = "success"
    data: MoodStats
