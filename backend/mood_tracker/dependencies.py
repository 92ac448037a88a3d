"""FastAPI dependencies that turn a bearer token into the acting user."""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from mood_tracker.database import get_db
from mood_tracker.exceptions import AuthenticationError
from mood_tracker.models.access_token import PersonalAccessToken
from mood_tracker.models.user import User
from mood_tracker.services import token_service

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> PersonalAccessToken:
    """Resolve the request's token or reject with 401 before any handler runs."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    token = token_service.resolve_token(db, credentials.credentials)
    if token is None:
        raise AuthenticationError()
    return token


def get_current_user(token: PersonalAccessToken = Depends(get_current_token)) -> User:
    return token.user
