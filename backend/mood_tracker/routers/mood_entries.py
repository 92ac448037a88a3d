"""Mood entry API routes — delegates to mood_entry_service for ownership and validation."""
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from mood_tracker.config import settings
from mood_tracker.database import get_db
from mood_tracker.dependencies import get_current_user
from mood_tracker.models.mood_entry import MoodEntry
from mood_tracker.models.user import User
from mood_tracker.schemas.mood_entry import (
    MOOD_LEVEL_MAX,
    MOOD_LEVEL_MIN,
    MoodEntryCreate,
    MoodEntryListResponse,
    MoodEntryMessageResponse,
    MoodEntryResponse,
    MoodEntryUpdate,
    MoodStatsResponse,
    StatusMessageResponse,
)
from mood_tracker.services import mood_entry_service
from mood_tracker.services.mood_vocabulary import get_mood_description, get_mood_emoji

logger = logging.getLogger(__name__)
router = APIRouter()


def _meta(entry: MoodEntry) -> dict:
    return {
        "mood_description": get_mood_description(entry.mood_level),
        "mood_emoji": get_mood_emoji(entry.mood_level),
    }


@router.get("/mood-entries", response_model=MoodEntryListResponse)
def list_mood_entries(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    mood_level: Optional[int] = Query(None, ge=MOOD_LEVEL_MIN, le=MOOD_LEVEL_MAX),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PER_PAGE, ge=1, le=settings.MAX_PER_PAGE),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Paginated entries, newest first, with optional date-range and level filters."""
    result = mood_entry_service.list_entries(
        db=db,
        user=user,
        start_date=start_date,
        end_date=end_date,
        mood_level=mood_level,
        page=page,
        per_page=per_page,
    )
    latest = mood_entry_service.latest_entry(db, user)
    return {
        "status": "success",
        "data": {
            "data": result.items,
            "current_page": result.current_page,
            "per_page": result.per_page,
            "total": result.total,
            "last_page": result.last_page,
        },
        "meta": {
            "total_entries": mood_entry_service.count_entries(db, user),
            "average_mood": mood_entry_service.average_mood_level(db, user),
            "latest_entry": (
                {"mood_level": latest.mood_level, "entry_date": latest.entry_date, **_meta(latest)}
                if latest is not None
                else None
            ),
        },
    }


@router.post("/mood-entries", response_model=MoodEntryMessageResponse, status_code=status.HTTP_201_CREATED)
def create_mood_entry(
    payload: MoodEntryCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record a mood; date and time default to now in the user's timezone."""
    entry = mood_entry_service.create_entry(db, user, payload)
    return {
        "status": "success",
        "message": "Mood entry created successfully",
        "data": entry,
        "meta": _meta(entry),
    }


@router.get("/mood-entries/{entry_id}", response_model=MoodEntryResponse)
def get_mood_entry(entry_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    entry = mood_entry_service.get_entry(db, user, entry_id)
    return {"status": "success", "data": entry, "meta": _meta(entry)}


@router.put("/mood-entries/{entry_id}", response_model=MoodEntryMessageResponse)
def update_mood_entry(
    entry_id: int,
    payload: MoodEntryUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update an entry (owner only, partial update)."""
    entry = mood_entry_service.update_entry(db, user, entry_id, payload)
    return {
        "status": "success",
        "message": "Mood entry updated successfully",
        "data": entry,
        "meta": _meta(entry),
    }


@router.delete("/mood-entries/{entry_id}", response_model=StatusMessageResponse)
def delete_mood_entry(entry_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Hard-delete an entry (owner only)."""
    mood_entry_service.delete_entry(db, user, entry_id)
    return {"status": "success", "message": "Mood entry deleted successfully"}


@router.get("/mood-entries-stats", response_model=MoodStatsResponse)
def mood_stats(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Totals, unrounded average, this month and per-level distribution."""
    return {"status": "success", "data": mood_entry_service.get_stats(db, user)}
