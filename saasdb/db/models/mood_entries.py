from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    BOOLEAN,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    Text,
    Time,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from saasdb.db.models.base import Base


class MoodEntry(Base):
    __tablename__ = "mood_entries"
    __table_args__ = (
        CheckConstraint("jsonb_typeof(emotions) = 'array'", name="ck_mood_entries_emotions_array"),
        CheckConstraint(
            "overall_mood IS NULL OR (overall_mood >= 1 AND overall_mood <= 10)",
            name="ck_mood_entries_overall_mood_range",
        ),
        CheckConstraint(
            "energy_level IS NULL OR (energy_level >= 1 AND energy_level <= 10)",
            name="ck_mood_entries_energy_level_range",
        ),
        CheckConstraint(
            "sleep_quality IS NULL OR (sleep_quality >= 1 AND sleep_quality <= 10)",
            name="ck_mood_entries_sleep_quality_range",
        ),
        # One entry per user per date and time; a missing time counts as a value.
        UniqueConstraint(
            "user_id",
            "entry_date",
            "entry_time",
            name="uq_mood_entries_user_date_time",
            postgresql_nulls_not_distinct=True,
        ),
        Index("idx_mood_entries_user", "user_id"),
        Index("idx_mood_entries_date", "entry_date"),
        Index("idx_mood_entries_emotions", "emotions", postgresql_using="gin"),
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
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    entry_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )

    emotions: Mapped[list[dict[str, object]]] = mapped_column(
        JSONB, nullable=False, server_default=text("'[]'::jsonb")
    )
    overall_mood: Mapped[int | None] = mapped_column(Integer, nullable=True)

    physical_sensations: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    energy_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sleep_quality: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sleep_hours: Mapped[Decimal | None] = mapped_column(Numeric(3, 1), nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    triggers: Mapped[str | None] = mapped_column(Text, nullable=True)
    coping_used: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)

    crisis_level: Mapped[bool] = mapped_column(BOOLEAN, nullable=False, server_default=text("false"))
    medication_taken: Mapped[bool | None] = mapped_column(BOOLEAN, nullable=True)

    is_archived: Mapped[bool] = mapped_column(BOOLEAN, nullable=False, server_default=text("false"))
