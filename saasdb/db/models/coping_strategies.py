from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    BOOLEAN,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import ARRAY, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class CopingStrategy(Base):
    __tablename__ = "coping_strategies"
    __table_args__ = (
        CheckConstraint(
            "avg_effectiveness IS NULL OR (avg_effectiveness >= 0 AND avg_effectiveness <= 10)",
            name="ck_coping_strategies_avg_effectiveness_range",
        ),
        UniqueConstraint("user_id", "strategy_name", name="uq_coping_strategies_user_name"),
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
    strategy_name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    times_used: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    avg_effectiveness: Mapped[Decimal | None] = mapped_column(Numeric(4, 2), nullable=True)
    helpful_for: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    is_archived: Mapped[bool] = mapped_column(BOOLEAN, nullable=False, server_default=text("false"))
