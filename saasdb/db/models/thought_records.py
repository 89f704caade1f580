from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import BOOLEAN, CheckConstraint, DateTime, ForeignKey, Index, Text, text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class ThoughtRecord(Base):
    """One seven-column thought record.

    ``emotions`` and ``emotions_after`` hold JSON arrays of
    ``{"emotion": str, "intensity": 0..100}`` objects; the database only
    enforces the array shape, item shape is validated by
    :class:`saasdb.journal.schemas.EmotionIntensity`.
    """

    __tablename__ = "thought_records"
    __table_args__ = (
        CheckConstraint("jsonb_typeof(emotions) = 'array'", name="ck_thought_records_emotions_array"),
        CheckConstraint(
            "jsonb_typeof(emotions_after) = 'array'",
            name="ck_thought_records_emotions_after_array",
        ),
        Index("idx_thought_records_user", "user_id"),
        Index("idx_thought_records_date", "created_at"),
        Index("idx_thought_records_situation_date", "situation_date"),
        Index(
            "idx_thought_records_shared",
            "shared_with_therapist",
            postgresql_where=text("shared_with_therapist = true"),
        ),
        Index(
            "idx_thought_records_archived",
            "is_archived",
            postgresql_where=text("is_archived = false"),
        ),
        Index("idx_thought_records_emotions", "emotions", postgresql_using="gin"),
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

    situation: Mapped[str] = mapped_column(Text, nullable=False)
    situation_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    automatic_thoughts: Mapped[str] = mapped_column(Text, nullable=False)
    hot_thought: Mapped[str | None] = mapped_column(Text, nullable=True)
    emotions: Mapped[list[dict[str, object]]] = mapped_column(
        JSONB, nullable=False, server_default=text("'[]'::jsonb")
    )
    physical_sensations: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    evidence_for: Mapped[str | None] = mapped_column(Text, nullable=True)
    evidence_against: Mapped[str | None] = mapped_column(Text, nullable=True)
    balanced_thought: Mapped[str | None] = mapped_column(Text, nullable=True)
    emotions_after: Mapped[list[dict[str, object]]] = mapped_column(
        JSONB, nullable=False, server_default=text("'[]'::jsonb")
    )
    distortions: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    behavior_taken: Mapped[str | None] = mapped_column(Text, nullable=True)
    alternative_behavior: Mapped[str | None] = mapped_column(Text, nullable=True)

    therapist_assigned: Mapped[bool] = mapped_column(
        BOOLEAN, nullable=False, server_default=text("false")
    )
    session_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("therapy_sessions.id", ondelete="SET NULL"),
        nullable=True,
    )
    tags: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    is_archived: Mapped[bool] = mapped_column(BOOLEAN, nullable=False, server_default=text("false"))

    shared_with_therapist: Mapped[bool] = mapped_column(
        BOOLEAN, nullable=False, server_default=text("false")
    )
    therapist_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    therapist_reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
