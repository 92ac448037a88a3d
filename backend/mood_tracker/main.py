"""FastAPI application entry point."""
import logging
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from mood_tracker.config import settings
from mood_tracker.database import Base, engine
from mood_tracker.exceptions import (
    ValidationError,
    request_validation_error_handler,
    validation_error_handler,
)

# Import routers
from mood_tracker.routers import auth, users, mood_entries

# Import all models so Base.metadata knows about them
from mood_tracker.models.user import User                          # noqa: F401
from mood_tracker.models.mood_entry import MoodEntry               # noqa: F401
from mood_tracker.models.access_token import PersonalAccessToken   # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="Mood Tracker",
    description="Personal mood tracking — daily entries, history and statistics",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ValidationError, validation_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)

# Register routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(users.router, prefix="/api/user", tags=["User"])
app.include_router(mood_entries.router, prefix="/api", tags=["MoodEntries"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
