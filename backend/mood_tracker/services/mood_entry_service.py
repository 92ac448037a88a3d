"""Mood entry service — owner-scoped CRUD, listing and statistics.

Every function receives the acting user explicitly and builds its query with
the owner filter applied; nothing here consults ambient request state.

- Ownership: an entry owned by someone else is reported as 403, never as
  missing, and is never touched.
- Defaults: omitted date/time are filled from "now" in the owner's timezone.
- Aggregates: averages are 0.0 over an empty set, never None.
"""
import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from sqlalchemy import extract, func
from sqlalchemy.orm import Query, Session

from mood_tracker import timezones
from mood_tracker.config import settings
from mood_tracker.exceptions import AuthorizationError, NotFoundError, ValidationError
from mood_tracker.models.mood_entry import MoodEntry
from mood_tracker.models.user import User
from mood_tracker.schemas.mood_entry import MoodEntryCreate, MoodEntryUpdate
from mood_tracker.services.mood_vocabulary import get_mood_description, get_mood_emoji

logger = logging.getLogger(__name__)

UNAUTHORIZED_ENTRY_MESSAGE = "Unauthorized access to mood entry"


@dataclass
class Page:
    items: list[MoodEntry]
    total: int
    current_page: int
    per_page: int

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))


def _owned(db: Session, user: User) -> Query:
    return db.query(MoodEntry).filter(MoodEntry.user_id == user.id)


def _today_for(user: User) -> date:
    return timezones.now_in(user.timezone).date()


def _check_not_future(user: User, entry_date: Optional[date]) -> None:
    if entry_date is not None and entry_date > _today_for(user):
        raise ValidationError({"entry_date": ["The entry date must be a date before or equal to today."]})


def _load_owned(db: Session, user: User, entry_id: int) -> MoodEntry:
    """Fetch an entry and enforce ownership."""
    entry = db.query(MoodEntry).filter(MoodEntry.id == entry_id).first()
    if not entry:
        raise NotFoundError("Mood entry not found")
    if entry.user_id != user.id:
        logger.warning("User %s attempted to access mood entry %s owned by another user", user.id, entry_id)
        raise AuthorizationError(UNAUTHORIZED_ENTRY_MESSAGE)
    return entry


def create_entry(db: Session, user: User, data: MoodEntryCreate) -> MoodEntry:
    """Persist a new entry for ``user``, defaulting date/time to now in their zone."""
    _check_not_future(user, data.entry_date)

    now_local = timezones.now_in(user.timezone)
    entry = MoodEntry(
        user_id=user.id,
        mood_level=data.mood_level,
        entry_date=data.entry_date or now_local.date(),
        entry_time=data.entry_time or now_local.time().replace(second=0, microsecond=0),
        notes=data.notes,
        activities=list(data.activities or []),
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info("Created mood entry %s (level %d) for user %s", entry.id, entry.mood_level, user.id)
    return entry


def get_entry(db: Session, user: User, entry_id: int) -> MoodEntry:
    return _load_owned(db, user, entry_id)


def update_entry(db: Session, user: User, entry_id: int, data: MoodEntryUpdate) -> MoodEntry:
    """Apply only the fields present in the request body."""
    entry = _load_owned(db, user, entry_id)

    updates = data.model_dump(exclude_unset=True)
    if "entry_date" in updates:
        _check_not_future(user, updates["entry_date"])
    if "activities" in updates:
        updates["activities"] = list(updates["activities"] or [])

    for field, value in updates.items():
        setattr(entry, field, value)
    db.commit()
    db.refresh(entry)
    logger.info("Updated mood entry %s for user %s (%s)", entry_id, user.id, ", ".join(sorted(updates)) or "no fields")
    return entry


def delete_entry(db: Session, user: User, entry_id: int) -> None:
    entry = _load_owned(db, user, entry_id)
    db.delete(entry)
    db.commit()
    logger.info("Deleted mood entry %s for user %s", entry_id, user.id)


def list_entries(
    db: Session,
    user: User,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    mood_level: Optional[int] = None,
    page: int = 1,
    per_page: Optional[int] = None,
) -> Page:
    """Filtered, newest-first page of the user's entries."""
    per_page = per_page or settings.DEFAULT_PER_PAGE
    query = _owned(db, user)
    if start_date:
        query = query.filter(MoodEntry.entry_date >= start_date)
    if end_date:
        query = query.filter(MoodEntry.entry_date <= end_date)
    if mood_level is not None:
        query = query.filter(MoodEntry.mood_level == mood_level)

    total = query.count()
    items = (
        query.order_by(
            MoodEntry.entry_date.desc(),
            MoodEntry.entry_time.desc().nulls_last(),
            MoodEntry.id.desc(),
        )
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )
    return Page(items=items, total=total, current_page=page, per_page=per_page)


def count_entries(db: Session, user: User) -> int:
    return _owned(db, user).count()


def average_mood_level(db: Session, user: User) -> float:
    """Unrounded mean mood level; 0.0 when the user has no entries."""
    avg = db.query(func.avg(MoodEntry.mood_level)).filter(MoodEntry.user_id == user.id).scalar()
    return float(avg) if avg is not None else 0.0


def latest_entry(db: Session, user: User) -> Optional[MoodEntry]:
    """Most recent entry by entry date; same-day ties go to the highest id."""
    return _owned(db, user).order_by(MoodEntry.entry_date.desc(), MoodEntry.id.desc()).first()


def get_stats(db: Session, user: User) -> dict[str, Any]:
    """Totals, averages, current-month summary and per-level distribution."""
    today = _today_for(user)
    month_query = db.query(func.count(MoodEntry.id), func.avg(MoodEntry.mood_level)).filter(
        MoodEntry.user_id == user.id,
        extract("year", MoodEntry.entry_date) == today.year,
        extract("month", MoodEntry.entry_date) == today.month,
    )
    month_count, month_avg = month_query.one()

    rows = (
        db.query(MoodEntry.mood_level, func.count(MoodEntry.id))
        .filter(MoodEntry.user_id == user.id)
        .group_by(MoodEntry.mood_level)
        .order_by(MoodEntry.mood_level)
        .all()
    )
    distribution = {
        level: {
            "count": count,
            "description": get_mood_description(level),
            "emoji": get_mood_emoji(level),
        }
        for level, count in rows
    }

    return {
        "total_entries": count_entries(db, user),
        "average_mood": average_mood_level(db, user),
        "latest_entry": latest_entry(db, user),
        "this_month": {
            "count": month_count or 0,
            "average": float(month_avg) if month_avg is not None else 0.0,
        },
        "mood_distribution": distribution,
    }
