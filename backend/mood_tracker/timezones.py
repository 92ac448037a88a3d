"""IANA timezone helpers backed by pytz."""
from datetime import datetime
from typing import Optional

import pytz

from mood_tracker.config import settings


def is_valid_timezone(name: Optional[str]) -> bool:
    return bool(name) and name in pytz.all_timezones_set


def resolve_timezone(name: Optional[str]):
    """Return a pytz zone for ``name``, falling back to the app default."""
    if is_valid_timezone(name):
        return pytz.timezone(name)
    return pytz.timezone(settings.APP_TIMEZONE)


def utcnow() -> datetime:
    return datetime.now(pytz.utc)


def now_in(name: Optional[str]) -> datetime:
    """Current aware datetime in zone ``name`` (or the app default)."""
    return utcnow().astimezone(resolve_timezone(name))
