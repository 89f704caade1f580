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
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class AffiliateReferral(Base):
    __tablename__ = "affiliate_referrals"
    __table_args__ = (
        CheckConstraint(
            "revenue_cents >= 0 AND commission_cents >= 0",
            name="ck_affiliate_referrals_amounts_non_negative",
        ),
        CheckConstraint(
            "commission_paid_cents >= 0 AND commission_paid_cents <= commission_cents",
            name="ck_affiliate_referrals_paid_within_commission",
        ),
        UniqueConstraint(
            "affiliate_id",
            "referred_user_id",
            name="uq_affiliate_referrals_affiliate_user",
        ),
        Index("idx_affiliate_referrals_affiliate", "affiliate_id", text("referred_at DESC")),
        Index("idx_affiliate_referrals_user", "referred_user_id"),
        Index(
            "idx_affiliate_referrals_unpaid",
            "commission_paid",
            postgresql_where=text("commission_paid = FALSE"),
        ),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    affiliate_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("affiliates.id", ondelete="CASCADE"),
        nullable=False,
    )
    referred_user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    subscription_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    revenue_cents: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    commission_cents: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    commission_paid: Mapped[bool] = mapped_column(
        BOOLEAN, nullable=False, server_default=text("false")
    )
    commission_paid_cents: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("0")
    )
    referred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    converted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
