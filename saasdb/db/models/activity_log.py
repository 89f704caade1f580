from __future__ import annotations

from datetime import date, datetime, time
from uuid import UUID

from sqlalchemy import (
    BOOLEAN,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class ActivityLogEntry(Base):
    __tablename__ = "activity_log"
    __table_args__ = (
        CheckConstraint(
            "mood_before IS NULL OR (mood_before >= 1 AND mood_before <= 10)",
            name="ck_activity_log_mood_before_range",
        ),
        CheckConstraint(
            "mood_after IS NULL OR (mood_after >= 1 AND mood_after <= 10)",
            name="ck_activity_log_mood_after_range",
        ),
        CheckConstraint(
            "difficulty_rating IS NULL OR (difficulty_rating >= 1 AND difficulty_rating <= 10)",
            name="ck_activity_log_difficulty_rating_range",
        ),
        Index("idx_activity_log_user", "user_id"),
        Index("idx_activity_log_date", "activity_date"),
        Index("idx_activity_log_type", "activity_type"),
        Index("idx_activity_log_user_date", "user_id", "activity_date"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    activity_date: Mapped[date] = mapped_column(Date, nullable=False)
    activity_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )

    activity_name: Mapped[str] = mapped_column(String(200), nullable=False)
    # pleasure, mastery, social, physical, values
    activity_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)

    mood_before: Mapped[int | None] = mapped_column(Integer, nullable=True)
    mood_after: Mapped[int | None] = mapped_column(Integer, nullable=True)
    emotions_before: Mapped[list[dict[str, object]]] = mapped_column(
        JSONB, nullable=False, server_default=text("'[]'::jsonb")
    )
    emotions_after: Mapped[list[dict[str, object]]] = mapped_column(
        JSONB, nullable=False, server_default=text("'[]'::jsonb")
    )

    was_planned: Mapped[bool] = mapped_column(BOOLEAN, nullable=False, server_default=text("false"))
    completed: Mapped[bool] = mapped_column(BOOLEAN, nullable=False, server_default=text("true"))
    difficulty_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    obstacles: Mapped[str | None] = mapped_column(Text, nullable=True)
    accomplishment_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    mood_entry_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("mood_entries.id", ondelete="SET NULL"),
        nullable=True,
    )
