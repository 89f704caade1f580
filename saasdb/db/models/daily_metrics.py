from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import BigInteger, Date, DateTime, Index, Integer, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


def _counter() -> Mapped[int]:
    return mapped_column(Integer, nullable=False, server_default=text("0"))


class DailyMetrics(Base):
    __tablename__ = "daily_metrics"
    __table_args__ = (
        UniqueConstraint("metric_date", name="uq_daily_metrics_metric_date"),
        Index("idx_daily_metrics_date", text("metric_date DESC")),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    metric_date: Mapped[date] = mapped_column(Date, nullable=False)

    total_users: Mapped[int] = _counter()
    new_users: Mapped[int] = _counter()
    active_users: Mapped[int] = _counter()

    free_users: Mapped[int] = _counter()
    pro_users: Mapped[int] = _counter()
    premium_users: Mapped[int] = _counter()

    revenue_cents: Mapped[int] = _counter()
    mrr_cents: Mapped[int] = _counter()

    total_actions: Mapped[int] = _counter()
    total_ai_calls: Mapped[int] = _counter()
    total_tokens_used: Mapped[int] = mapped_column(
        BigInteger, nullable=False, server_default=text("0")
    )

    ai_cost_cents: Mapped[int] = _counter()
    infrastructure_cost_cents: Mapped[int] = _counter()

    avg_session_duration_seconds: Mapped[int] = _counter()

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
