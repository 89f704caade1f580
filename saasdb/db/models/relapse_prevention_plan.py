from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import BOOLEAN, DateTime, ForeignKey, Index, Text, text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class RelapsePreventionPlan(Base):
    __tablename__ = "relapse_prevention_plan"
    __table_args__ = (Index("idx_relapse_prevention_plan_user", "user_id"),)

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
    therapist_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("therapists.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )

    early_warning_signs: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    moderate_warning_signs: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    crisis_warning_signs: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)

    self_care_strategies: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    social_support: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    professional_support: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)

    # [{"name": ..., "phone": ..., "relationship": ...}]
    emergency_contacts: Mapped[list[dict[str, object]] | None] = mapped_column(
        JSONB, nullable=True
    )
    is_active: Mapped[bool] = mapped_column(BOOLEAN, nullable=False, server_default=text("true"))
