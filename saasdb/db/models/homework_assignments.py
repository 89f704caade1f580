from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import (
    BOOLEAN,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class HomeworkAssignment(Base):
    __tablename__ = "homework_assignments"
    __table_args__ = (
        CheckConstraint(
            "status IN ('assigned','in_progress','completed','overdue','cancelled')",
            name="ck_homework_assignments_status",
        ),
        CheckConstraint(
            "homework_type IN ('thought_record','mood_log','behavioral_activation','exposure','custom')",
            name="ck_homework_assignments_homework_type",
        ),
        Index("idx_homework_user", "user_id"),
        Index("idx_homework_therapist", "therapist_id"),
        Index("idx_homework_status", "status"),
        Index("idx_homework_due_date", "due_date"),
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
    session_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("therapy_sessions.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    homework_type: Mapped[str] = mapped_column(String(50), nullable=False)

    assigned_date: Mapped[date] = mapped_column(
        Date, nullable=False, server_default=text("CURRENT_DATE")
    )
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    # once, daily, weekly, as_needed
    frequency: Mapped[str | None] = mapped_column(String(50), nullable=True)

    instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    resources: Mapped[list[dict[str, object]] | None] = mapped_column(JSONB, nullable=True)

    status: Mapped[str] = mapped_column(
        String(50), nullable=False, server_default=text("'assigned'")
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completion_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    therapist_reviewed: Mapped[bool] = mapped_column(
        BOOLEAN, nullable=False, server_default=text("false")
    )
    therapist_feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    therapist_reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    is_archived: Mapped[bool] = mapped_column(BOOLEAN, nullable=False, server_default=text("false"))
    reminders_enabled: Mapped[bool] = mapped_column(
        BOOLEAN, nullable=False, server_default=text("true")
    )
