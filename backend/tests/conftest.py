"""Pytest fixtures — per-test SQLite database for fast, isolated tests."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from mood_tracker.config import settings
from mood_tracker.database import Base, get_db
from mood_tracker.main import app

# Import all models so they register with Base.metadata
from mood_tracker.models.user import User                          # noqa: F401
from mood_tracker.models.mood_entry import MoodEntry               # noqa: F401
from mood_tracker.models.access_token import PersonalAccessToken   # noqa: F401

SQLITE_URL = "sqlite:///./test.db"

# Cheap hashes keep the suite fast
settings.BCRYPT_ROUNDS = 4


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session bound to the test engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def register_user(
    client: TestClient,
    name: str = "Test User",
    email: str = "test@example.com",
    password: str = "password123",
    tz: str = None,
    headers: dict = None,
) -> dict:
    """POST /api/auth/register and return response JSON."""
    payload = {
        "name": name,
        "email": email,
        "password": password,
        "password_confirmation": password,
    }
    if tz is not None:
        payload["timezone"] = tz
    resp = client.post("/api/auth/register", json=payload, headers=headers or {})
    assert resp.status_code == 201, resp.text
    return resp.json()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def create_entry(client: TestClient, token: str, **fields) -> dict:
    """POST /api/mood-entries and return the entry JSON."""
    payload = {"mood_level": 3}
    payload.update(fields)
    resp = client.post("/api/mood-entries", json=payload, headers=auth_headers(token))
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]
