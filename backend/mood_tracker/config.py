"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./mood_tracker.db"
    APP_TIMEZONE: str = "UTC"  # IANA tz, fallback for users without one
    DEFAULT_PER_PAGE: int = 15
    MAX_PER_PAGE: int = 100
    BCRYPT_ROUNDS: int = 12
    CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
