"""MoodEntry ORM model."""
from sqlalchemy import (
    CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Integer, JSON, Text, Time,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from mood_tracker.database import Base


class MoodEntry(Base):
    __tablename__ = "mood_entries"
    __table_args__ = (
        CheckConstraint("mood_level BETWEEN 1 AND 5", name="ck_mood_entries_mood_level"),
        Index("ix_mood_entries_user_id_entry_date", "user_id", "entry_date"),
        Index("ix_mood_entries_user_id_mood_level", "user_id", "mood_level"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    mood_level = Column(Integer, nullable=False)  # 1=very bad … 5=very good
    entry_date = Column(Date, nullable=False)
    entry_time = Column(Time, nullable=True)  # wall-clock, stored as given
    notes = Column(Text, nullable=True)
    activities = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="mood_entries")
