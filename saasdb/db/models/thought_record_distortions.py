from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Index, Integer, String, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class ThoughtRecordDistortion(Base):
    __tablename__ = "thought_record_distortions"
    __table_args__ = (
        CheckConstraint(
            "confidence IS NULL OR (confidence >= 0 AND confidence <= 1)",
            name="ck_thought_record_distortions_confidence_range",
        ),
        CheckConstraint(
            "identified_by IN ('user','ai','therapist')",
            name="ck_thought_record_distortions_identified_by",
        ),
        Index("idx_tr_distortions_record", "thought_record_id"),
        Index("idx_tr_distortions_distortion", "distortion_id"),
    )

    thought_record_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("thought_records.id", ondelete="CASCADE"),
        primary_key=True,
    )
    distortion_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("cognitive_distortions.id", ondelete="CASCADE"),
        primary_key=True,
    )
    confidence: Mapped[float | None] = mapped_column(Float, nullable=True)
    identified_by: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
