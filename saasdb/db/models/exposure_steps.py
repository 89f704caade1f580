from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class ExposureStep(Base):
    __tablename__ = "exposure_steps"
    __table_args__ = (
        CheckConstraint(
            "expected_anxiety >= 0 AND expected_anxiety <= 100",
            name="ck_exposure_steps_expected_anxiety_range",
        ),
        CheckConstraint(
            "status IN ('not_started','in_progress','completed')",
            name="ck_exposure_steps_status",
        ),
        CheckConstraint("attempts >= 0", name="ck_exposure_steps_attempts_non_negative"),
        Index("idx_exposure_steps_hierarchy", "hierarchy_id"),
        Index("idx_exposure_steps_order", "step_order"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    hierarchy_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("exposure_hierarchies.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    situation: Mapped[str] = mapped_column(Text, nullable=False)
    expected_anxiety: Mapped[int] = mapped_column(Integer, nullable=False)
    # Lower is easier.
    step_order: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, server_default=text("'not_started'")
    )
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
