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
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class ScheduledActivity(Base):
    __tablename__ = "activity_schedule"
    __table_args__ = (
        CheckConstraint(
            "expected_difficulty IS NULL OR (expected_difficulty >= 1 AND expected_difficulty <= 10)",
            name="ck_activity_schedule_expected_difficulty_range",
        ),
        CheckConstraint(
            "actual_difficulty IS NULL OR (actual_difficulty >= 1 AND actual_difficulty <= 10)",
            name="ck_activity_schedule_actual_difficulty_range",
        ),
        Index("idx_activity_schedule_user", "user_id"),
        Index("idx_activity_schedule_date", "planned_date"),
        Index("idx_activity_schedule_completed", "completed"),
        Index("idx_activity_schedule_user_date", "user_id", "planned_date"),
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
    therapist_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("therapists.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )

    planned_date: Mapped[date] = mapped_column(Date, nullable=False)
    planned_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    activity_name: Mapped[str] = mapped_column(String(200), nullable=False)
    activity_type: Mapped[str | None] = mapped_column(String(50), nullable=True)

    why_important: Mapped[str | None] = mapped_column(Text, nullable=True)
    expected_difficulty: Mapped[int | None] = mapped_column(Integer, nullable=True)
    potential_obstacles: Mapped[str | None] = mapped_column(Text, nullable=True)
    solutions: Mapped[str | None] = mapped_column(Text, nullable=True)

    completed: Mapped[bool] = mapped_column(BOOLEAN, nullable=False, server_default=text("false"))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    actual_difficulty: Mapped[int | None] = mapped_column(Integer, nullable=True)

    activity_log_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("activity_log.id", ondelete="SET NULL"),
        nullable=True,
    )

    is_homework: Mapped[bool] = mapped_column(BOOLEAN, nullable=False, server_default=text("false"))
    is_archived: Mapped[bool] = mapped_column(BOOLEAN, nullable=False, server_default=text("false"))
