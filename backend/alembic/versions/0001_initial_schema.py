"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2025-06-01

Creates all tables for the Mood Tracker application:
users, personal_access_tokens, mood_entries.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("timezone", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- personal_access_tokens ---
    op.create_table(
        "personal_access_tokens",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("token_hash", sa.String(64), nullable=False, unique=True),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_personal_access_tokens_user_id", "personal_access_tokens", ["user_id"])

    # --- mood_entries ---
    op.create_table(
        "mood_entries",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("mood_level", sa.Integer, nullable=False),
        sa.Column("entry_date", sa.Date, nullable=False),
        sa.Column("entry_time", sa.Time, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("activities", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("mood_level BETWEEN 1 AND 5", name="ck_mood_entries_mood_level"),
    )
    op.create_index("ix_mood_entries_user_id_entry_date", "mood_entries", ["user_id", "entry_date"])
    op.create_index("ix_mood_entries_user_id_mood_level", "mood_entries", ["user_id", "mood_level"])


def downgrade() -> None:
    op.drop_index("ix_mood_entries_user_id_mood_level", table_name="mood_entries")
    op.drop_index("ix_mood_entries_user_id_entry_date", table_name="mood_entries")
    op.drop_table("mood_entries")
    op.drop_index("ix_personal_access_tokens_user_id", table_name="personal_access_tokens")
    op.drop_table("personal_access_tokens")
    op.drop_table("users")
