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
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class CoreBelief(Base):
    __tablename__ = "core_beliefs"
    __table_args__ = (
        CheckConstraint(
            "current_belief_strength IS NULL OR "
            "(current_belief_strength >= 0 AND current_belief_strength <= 100)",
            name="ck_core_beliefs_current_strength_range",
        ),
        CheckConstraint(
            "alternative_strength IS NULL OR "
            "(alternative_strength >= 0 AND alternative_strength <= 100)",
            name="ck_core_beliefs_alternative_strength_range",
        ),
        Index("idx_core_beliefs_user", "user_id"),
        Index("idx_core_beliefs_type", "belief_type"),
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
    therapist_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("therapists.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )

    belief_statement: Mapped[str] = mapped_column(Text, nullable=False)
    # about_self, about_others, about_world
    belief_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    valence: Mapped[str | None] = mapped_column(String(50), nullable=True)
    current_belief_strength: Mapped[int | None] = mapped_column(Integer, nullable=True)

    evidence_for: Mapped[str | None] = mapped_column(Text, nullable=True)
    evidence_against: Mapped[str | None] = mapped_column(Text, nullable=True)
    alternative_belief: Mapped[str | None] = mapped_column(Text, nullable=True)
    alternative_strength: Mapped[int | None] = mapped_column(Integer, nullable=True)

    is_active_target: Mapped[bool] = mapped_column(
        BOOLEAN, nullable=False, server_default=text("true")
    )
    last_reviewed: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
