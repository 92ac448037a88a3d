"""User account service: registration, login, profile and password changes."""
import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

import bcrypt
import pytz
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mood_tracker import timezones
from mood_tracker.config import settings
from mood_tracker.exceptions import ValidationError
from mood_tracker.models.user import User
from mood_tracker.schemas.user import PasswordChange, ProfileUpdate, RegisterRequest
from mood_tracker.services import mood_entry_service, token_service
from mood_tracker.services.mood_vocabulary import get_mood_emoji

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "The provided credentials are incorrect."
EMAIL_TAKEN_MESSAGE = "The email has already been taken."


def _password_bytes(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes
    return password.encode("utf-8")[:72]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def round_half_up(value: float, places: str = "0.1") -> float:
    """Round halves away from zero (2.25 -> 2.3) instead of to even."""
    return float(Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP))


def _commit_user(db: Session, user: User) -> None:
    # Concurrent claims on one email surface here as IntegrityError
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Email uniqueness conflict on commit")
        raise ValidationError({"email": [EMAIL_TAKEN_MESSAGE]})
    db.refresh(user)


def _email_taken(db: Session, email: str, exclude_user_id: Optional[int] = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is not None


def get_timezone(user: User) -> str:
    """The user's zone name, or the app default when unset."""
    return user.timezone or settings.APP_TIMEZONE


def resolve_registration_timezone(explicit: Optional[str], header_hint: Optional[str]) -> str:
    """Explicit field → X-Timezone header → app default.

    An unknown zone in the header is skipped.
    """
    if explicit:
        return explicit
    if header_hint and timezones.is_valid_timezone(header_hint):
        return header_hint
    return settings.APP_TIMEZONE


def convert_time_to_user_timezone(user: User, time_str: str, date_str: Optional[str] = None) -> str:
    """Interpret ``HH:MM`` on ``date_str`` (default: today, UTC) as UTC and
    return the wall-clock ``HH:MM`` in the user's zone. Display only.
    """
    if date_str is None:
        date_str = timezones.utcnow().date().isoformat()
    naive = datetime.strptime(f"{date_str} {time_str}", "%Y-%m-%d %H:%M")
    local = pytz.utc.localize(naive).astimezone(pytz.timezone(get_timezone(user)))
    return local.strftime("%H:%M")


def register(db: Session, data: RegisterRequest, timezone_hint: Optional[str] = None) -> tuple[User, str]:
    """Create the account and issue its first token."""
    if _email_taken(db, data.email):
        raise ValidationError({"email": [EMAIL_TAKEN_MESSAGE]})

    user = User(
        name=data.name,
        email=data.email,
        password_hash=hash_password(data.password),
        timezone=resolve_registration_timezone(data.timezone, timezone_hint),
    )
    db.add(user)
    _commit_user(db, user)
    logger.info("Registered user %s (timezone %s)", user.id, user.timezone)

    token = token_service.issue_token(db, user)
    return user, token


def authenticate(db: Session, email: str, password: str) -> tuple[User, str]:
    """Check credentials and issue a new token; earlier tokens stay valid.

    Unknown email and wrong password fail identically.
    """
    user = db.query(User).filter(User.email == email).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise ValidationError({"email": [INVALID_CREDENTIALS_MESSAGE]})

    token = token_service.issue_token(db, user)
    logger.info("User %s logged in", user.id)
    return user, token


def update_profile(db: Session, user: User, data: ProfileUpdate) -> User:
    updates = data.model_dump(exclude_unset=True)
    if "email" in updates and _email_taken(db, updates["email"], exclude_user_id=user.id):
        raise ValidationError({"email": [EMAIL_TAKEN_MESSAGE]})

    for field, value in updates.items():
        setattr(user, field, value)
    _commit_user(db, user)
    logger.info("Updated profile for user %s (%s)", user.id, ", ".join(sorted(updates)) or "no fields")
    return user


def change_password(db: Session, user: User, data: PasswordChange) -> None:
    """Replace the password hash and revoke every token the user holds."""
    if not verify_password(data.current_password, user.password_hash):
        raise ValidationError({"current_password": ["The provided password is incorrect."]})

    user.password_hash = hash_password(data.password)
    db.commit()
    token_service.revoke_all_tokens(db, user)
    logger.info("Changed password for user %s", user.id)


def user_summary(db: Session, user: User) -> dict[str, Any]:
    """Profile fields plus latest mood emoji, rounded average and entry count."""
    latest = mood_entry_service.latest_entry(db, user)
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "timezone": user.timezone,
        "created_at": user.created_at,
        "latest_mood": get_mood_emoji(latest.mood_level) if latest is not None else None,
        "average_mood": round_half_up(mood_entry_service.average_mood_level(db, user)),
        "total_entries": mood_entry_service.count_entries(db, user),
    }
