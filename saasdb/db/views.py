"""Read-only selectables for the reporting views created by the migrations."""

from __future__ import annotations

from sqlalchemy import (
    BOOLEAN,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    Text,
    column,
    table,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID as PG_UUID

thought_records_summary = table(
    "thought_records_summary",
    column("id", PG_UUID(as_uuid=True)),
    column("user_id", PG_UUID(as_uuid=True)),
    column("created_at", DateTime(timezone=True)),
    column("situation_date", DateTime(timezone=True)),
    column("situation", Text),
    column("automatic_thoughts", Text),
    column("balanced_thought", Text),
    column("emotions", JSONB),
    column("emotions_after", JSONB),
    column("distortions", ARRAY(Text)),
    column("shared_with_therapist", BOOLEAN),
    column("avg_intensity_before", Numeric),
    column("avg_intensity_after", Numeric),
)

weekly_mood_summary = table(
    "weekly_mood_summary",
    column("user_id", PG_UUID(as_uuid=True)),
    column("week_start", Date),
    column("entries_count", Integer),
    column("avg_mood", Numeric),
    column("avg_energy", Numeric),
    column("avg_sleep_quality", Numeric),
    column("avg_sleep_hours", Numeric),
    column("crisis_count", Integer),
)

activity_effectiveness = table(
    "activity_effectiveness",
    column("user_id", PG_UUID(as_uuid=True)),
    column("activity_type", String),
    column("times_performed", Integer),
    column("avg_mood_improvement", Numeric),
    column("avg_difficulty", Numeric),
)

homework_completion_stats = table(
    "homework_completion_stats",
    column("user_id", PG_UUID(as_uuid=True)),
    column("total_assigned", Integer),
    column("completed", Integer),
    column("overdue", Integer),
    column("completion_rate", Numeric),
)

values_gap_analysis = table(
    "values_gap_analysis",
    column("user_id", PG_UUID(as_uuid=True)),
    column("domain", String),
    column("importance", Integer),
    column("current_satisfaction", Integer),
    column("gap", Integer),
    column("priority_level", Text),
)

ALL_VIEWS = (
    thought_records_summary,
    weekly_mood_summary,
    activity_effectiveness,
    homework_completion_stats,
    values_gap_analysis,
)
