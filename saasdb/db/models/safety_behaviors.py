from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    BOOLEAN,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class SafetyBehavior(Base):
    __tablename__ = "safety_behaviors"
    __table_args__ = (
        UniqueConstraint("user_id", "behavior", name="uq_safety_behaviors_user_behavior"),
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
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    behavior: Mapped[str] = mapped_column(String(200), nullable=False)
    situation: Mapped[str] = mapped_column(Text, nullable=False)
    fear_addressed: Mapped[str | None] = mapped_column(String(200), nullable=True)
    short_term_effect: Mapped[str | None] = mapped_column(Text, nullable=True)
    long_term_effect: Mapped[str | None] = mapped_column(Text, nullable=True)
    times_identified: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    is_target_for_change: Mapped[bool] = mapped_column(
        BOOLEAN, nullable=False, server_default=text("false")
    )
