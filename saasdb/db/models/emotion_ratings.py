from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import BOOLEAN, CheckConstraint, DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class EmotionRating(Base):
    __tablename__ = "emotion_ratings"
    __table_args__ = (
        CheckConstraint(
            "intensity >= 0 AND intensity <= 100",
            name="ck_emotion_ratings_intensity_range",
        ),
        Index("idx_emotion_ratings_record", "thought_record_id"),
        Index("idx_emotion_ratings_emotion", "emotion"),
        Index("idx_emotion_ratings_date", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    thought_record_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("thought_records.id", ondelete="CASCADE"),
        nullable=False,
    )
    emotion: Mapped[str] = mapped_column(String(50), nullable=False)
    intensity: Mapped[int] = mapped_column(Integer, nullable=False)
    is_after_balancing: Mapped[bool] = mapped_column(
        BOOLEAN, nullable=False, server_default=text("false")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
