from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, Text, text
from sqlalchemy.dialects.postgresql import ARRAY, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class ExposureAttempt(Base):
    __tablename__ = "exposure_attempts"
    __table_args__ = (
        CheckConstraint(
            "anxiety_before IS NULL OR (anxiety_before >= 0 AND anxiety_before <= 100)",
            name="ck_exposure_attempts_anxiety_before_range",
        ),
        CheckConstraint(
            "anxiety_peak IS NULL OR (anxiety_peak >= 0 AND anxiety_peak <= 100)",
            name="ck_exposure_attempts_anxiety_peak_range",
        ),
        CheckConstraint(
            "anxiety_after IS NULL OR (anxiety_after >= 0 AND anxiety_after <= 100)",
            name="ck_exposure_attempts_anxiety_after_range",
        ),
        CheckConstraint(
            "success_rating IS NULL OR (success_rating >= 1 AND success_rating <= 10)",
            name="ck_exposure_attempts_success_rating_range",
        ),
        Index("idx_exposure_attempts_step", "step_id"),
        Index("idx_exposure_attempts_date", "attempt_date"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    step_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("exposure_steps.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    attempt_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )

    anxiety_before: Mapped[int | None] = mapped_column(Integer, nullable=True)
    anxiety_peak: Mapped[int | None] = mapped_column(Integer, nullable=True)
    anxiety_after: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)

    safety_behaviors_used: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    safety_behaviors_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    learning_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    success_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
