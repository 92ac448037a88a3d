"""Bearer token issuance, lookup and revocation.

Tokens are opaque random strings; only their SHA-256 digest is stored.
Every request looks the token up again, so revocation is visible to the
very next request.
"""
import hashlib
import logging
import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from mood_tracker.models.access_token import PersonalAccessToken
from mood_tracker.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_NAME = "auth-token"


def _digest(plaintext: str) -> str:
    return hashlib.sha256(plaintext.encode("utf-8")).hexdigest()


def issue_token(db: Session, user: User, name: str = DEFAULT_TOKEN_NAME) -> str:
    """Create a new token for ``user`` and return its plaintext (shown once)."""
    plaintext = secrets.token_urlsafe(40)
    token = PersonalAccessToken(user_id=user.id, name=name, token_hash=_digest(plaintext))
    db.add(token)
    db.commit()
    logger.info("Issued token %s for user %s", token.id, user.id)
    return plaintext


def resolve_token(db: Session, plaintext: str) -> Optional[PersonalAccessToken]:
    """Return the stored token matching ``plaintext``, or None."""
    if not plaintext:
        return None
    token = (
        db.query(PersonalAccessToken)
        .filter(PersonalAccessToken.token_hash == _digest(plaintext))
        .first()
    )
    if token is None:
        return None
    token.last_used_at = datetime.now(timezone.utc)
    db.commit()
    return token


def revoke_token(db: Session, token: PersonalAccessToken) -> None:
    """Revoke a single token (logout)."""
    token_id, user_id = token.id, token.user_id
    db.delete(token)
    db.commit()
    logger.info("Revoked token %s for user %s", token_id, user_id)


def revoke_all_tokens(db: Session, user: User) -> int:
    """Revoke every token belonging to ``user``; returns how many were removed."""
    count = (
        db.query(PersonalAccessToken)
        .filter(PersonalAccessToken.user_id == user.id)
        .delete(synchronize_session=False)
    )
    db.commit()
    db.expire(user, ["access_tokens"])
    logger.info("Revoked all %d tokens for user %s", count, user.id)
    return count
