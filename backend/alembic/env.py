"""Alembic environment for the mood tracker schema.

The URL comes from mood_tracker.config (DATABASE_URL or .env), so alembic.ini
carries none. SQLite targets run in batch mode since it cannot ALTER columns.
"""
from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context

from mood_tracker.config import settings
from mood_tracker.database import Base

# Import all models so they register with Base.metadata
from mood_tracker.models.user import User                          # noqa: F401
from mood_tracker.models.mood_entry import MoodEntry               # noqa: F401
from mood_tracker.models.access_token import PersonalAccessToken   # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=url.startswith("sqlite"),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
