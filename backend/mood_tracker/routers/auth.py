"""Authentication API routes — register, login, logout, token check."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session

from mood_tracker.database import get_db
from mood_tracker.dependencies import get_current_token, get_current_user
from mood_tracker.models.access_token import PersonalAccessToken
from mood_tracker.models.user import User
from mood_tracker.schemas.user import (
    AuthCheckResponse,
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
)
from mood_tracker.services import token_service, user_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    x_timezone: Optional[str] = Header(None),
    db: Session = Depends(get_db),
):
    """Create an account; the X-Timezone header only fills in a missing timezone."""
    user, token = user_service.register(db, payload, timezone_hint=x_timezone)
    return {"message": "Registration successful", "user": user, "token": token}


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a new bearer token."""
    user, token = user_service.authenticate(db, payload.email, payload.password)
    return {
        "message": "Login successful",
        "user": user_service.user_summary(db, user),
        "token": token,
    }


@router.post("/logout", response_model=MessageResponse)
def logout(
    token: PersonalAccessToken = Depends(get_current_token),
    db: Session = Depends(get_db),
):
    """Revoke only the token used for this request."""
    token_service.revoke_token(db, token)
    return {"message": "Logout successful"}


@router.get("/check", response_model=AuthCheckResponse)
def check(user: User = Depends(get_current_user)):
    return {"authenticated": True, "user": user}
