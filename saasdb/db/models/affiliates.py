from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    BOOLEAN,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class Affiliate(Base):
    __tablename__ = "affiliates"
    __table_args__ = (
        CheckConstraint("commission_tier IN (1, 2, 3)", name="ck_affiliates_commission_tier"),
        CheckConstraint(
            "commission_rate BETWEEN 0 AND 100",
            name="ck_affiliates_commission_rate_range",
        ),
        UniqueConstraint("affiliate_code", name="uq_affiliates_affiliate_code"),
        Index("idx_affiliates_code", "affiliate_code", postgresql_where=text("is_active = TRUE")),
        Index("idx_affiliates_user", "user_id"),
        Index("idx_affiliates_revenue", text("total_revenue_cents DESC")),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    user_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
    )
    affiliate_code: Mapped[str] = mapped_column(Text, nullable=False)
    commission_tier: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("1"))
    # percentage
    commission_rate: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("30"))
    total_referrals: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    total_revenue_cents: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("0")
    )
    total_commission_cents: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("0")
    )
    payout_method: Mapped[str | None] = mapped_column(Text, nullable=True)
    payout_details: Mapped[dict[str, object]] = mapped_column(
        JSONB, nullable=False, server_default=text("'{}'::jsonb")
    )
    metadata_: Mapped[dict[str, object]] = mapped_column(
        "metadata",
        JSONB,
        nullable=False,
        server_default=text("'{}'::jsonb"),
    )
    is_active: Mapped[bool] = mapped_column(BOOLEAN, nullable=False, server_default=text("true"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
