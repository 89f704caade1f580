from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class EmotionDefinition(Base):
    __tablename__ = "emotion_definitions"
    __table_args__ = (
        UniqueConstraint("name", name="uq_emotion_definitions_name"),
        UniqueConstraint("slug", name="uq_emotion_definitions_slug"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    slug: Mapped[str] = mapped_column(String(50), nullable=False)
    # primary, secondary
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    emoji: Mapped[str | None] = mapped_column(String(10), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    opposite_emotion_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("emotion_definitions.id"), nullable=True
    )
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
