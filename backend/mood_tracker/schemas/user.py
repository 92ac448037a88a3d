"""Pydantic schemas for users and authentication."""
from __future__ import annotations
from datetime import datetime
from typing import Annotated, Optional
from pydantic import AfterValidator, BaseModel, EmailStr, Field, ValidationInfo, field_validator

from mood_tracker.timezones import is_valid_timezone

PASSWORD_MIN_LENGTH = 8


def _check_timezone(value: str) -> str:
    if not is_valid_timezone(value):
        raise ValueError("The timezone field must be a valid timezone.")
    return value


def _check_confirmation(value: str, info: ValidationInfo) -> str:
    password = info.data.get("password")
    if password is not None and value != password:
        raise ValueError("The password field confirmation does not match.")
    return value


TimezoneName = Annotated[str, AfterValidator(_check_timezone)]
PasswordConfirmation = Annotated[str, AfterValidator(_check_confirmation)]


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)
    password_confirmation: PasswordConfirmation
    timezone: Optional[TimezoneName] = None

    @field_validator("timezone", mode="before")
    @classmethod
    def blank_timezone_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
    """Partial update — only supplied fields are validated and changed."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    timezone: Optional[TimezoneName] = None

    @field_validator("name", "email", "timezone")
    @classmethod
    def not_null(cls, value, info: ValidationInfo):
        if value is None:
            raise ValueError(f"The {info.field_name} field must be a string.")
        return value


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)
    password_confirmation: PasswordConfirmation


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    timezone: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserSummary(UserOut):
    """User plus mood-derived fields (latest emoji, rounded average, count)."""

    latest_mood: Optional[str] = None
    average_mood: float = 0.0
    total_entries: int = 0


class UserBrief(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    message: str
    user: UserSummary
    token: str


class RegisterResponse(BaseModel):
    message: str
    user: UserOut
    token: str


class UserResponse(BaseModel):
    user: UserSummary


class ProfileResponse(BaseModel):
    message: str
    user: UserSummary


class MessageResponse(BaseModel):
    message: str


class AuthCheckUser(BaseModel):
    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}


class AuthCheckResponse(BaseModel):
    authenticated: bool
    user: AuthCheckUser
