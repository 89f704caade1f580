from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class ValuesAssessment(Base):
    __tablename__ = "values_assessment"
    __table_args__ = (
        CheckConstraint(
            "importance IS NULL OR (importance >= 0 AND importance <= 10)",
            name="ck_values_assessment_importance_range",
        ),
        CheckConstraint(
            "current_satisfaction IS NULL OR (current_satisfaction >= 0 AND current_satisfaction <= 10)",
            name="ck_values_assessment_satisfaction_range",
        ),
        UniqueConstraint("user_id", "domain", name="uq_values_assessment_user_domain"),
        Index("idx_values_user", "user_id"),
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
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    domain: Mapped[str] = mapped_column(String(50), nullable=False)
    importance: Mapped[int | None] = mapped_column(Integer, nullable=True)
    current_satisfaction: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    goals: Mapped[str | None] = mapped_column(Text, nullable=True)
