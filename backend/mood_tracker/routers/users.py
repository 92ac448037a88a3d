"""Profile API routes for the authenticated user."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mood_tracker.database import get_db
from mood_tracker.dependencies import get_current_user
from mood_tracker.models.user import User
from mood_tracker.schemas.user import (
    MessageResponse,
    PasswordChange,
    ProfileResponse,
    ProfileUpdate,
    UserResponse,
)
from mood_tracker.services import user_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=UserResponse)
def get_profile(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Profile with latest mood, rounded average and entry count."""
    return {"user": user_service.user_summary(db, user)}


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update name, email and/or timezone (partial update)."""
    user = user_service.update_profile(db, user, payload)
    return {"message": "Profile updated successfully", "user": user_service.user_summary(db, user)}


@router.put("/password", response_model=MessageResponse)
def change_password(
    payload: PasswordChange,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Change the password; every existing token is revoked."""
    user_service.change_password(db, user, payload)
    return {"message": "Password changed successfully. Please login again."}
