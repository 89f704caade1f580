"""m4_cbt_mood_tracking

Revision ID: 9e6c3a8d4b57
Revises: 7d4b1e6f2a35
Create Date: 2026-09-01 09:30:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "9e6c3a8d4b57"
down_revision: str | None = "7d4b1e6f2a35"
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

EMOTION_DEFINITIONS = (
    ("Happiness", "happiness", "primary", "\U0001F60A", "Feeling joyful, content, or pleased", 1),
    ("Sadness", "sadness", "primary", "\U0001F622", "Feeling down, low, or grief", 2),
    ("Anxiety", "anxiety", "primary", "\U0001F630", "Feeling worried, nervous, or fearful", 3),
    ("Anger", "anger", "primary", "\U0001F620", "Feeling frustrated, irritated, or enraged", 4),
    ("Shame", "shame", "primary", "\U0001F614", "Feeling embarrassed, guilty, or inadequate", 5),
    ("Disgust", "disgust", "primary", "\U0001F922", "Feeling revolted or repelled", 6),
    ("Loneliness", "loneliness", "secondary", "\U0001F61E", "Feeling isolated or disconnected", 10),
    ("Hopelessness", "hopelessness", "secondary", "\U0001F614", "Feeling without hope or optimism", 11),
    ("Excitement", "excitement", "secondary", "\U0001F929", "Feeling energized and enthusiastic", 12),
    ("Contentment", "contentment", "secondary", "\U0001F60C", "Feeling peaceful and satisfied", 13),
    ("Overwhelm", "overwhelm", "secondary", "\U0001F635", "Feeling unable to cope with demands", 14),
    ("Pride", "pride", "secondary", "\U0001F60A", "Feeling accomplished or satisfied with oneself", 15),
    ("Fear", "fear", "secondary", "\U0001F628", "Feeling threatened or in danger", 16),
    ("Jealousy", "jealousy", "secondary", "\U0001F612", "Feeling envious of others", 17),
    ("Gratitude", "gratitude", "secondary", "\U0001F64F", "Feeling thankful and appreciative", 18),
    ("Confusion", "confusion", "secondary", "\U0001F615", "Feeling uncertain or unclear", 19),
)

PHYSICAL_SENSATIONS = (
    ("Heart racing", "heart_racing", "cardiovascular", ["anxiety", "panic", "excitement"]),
    ("Tightness in chest", "chest_tightness", "cardiovascular", ["anxiety", "panic", "sadness"]),
    ("Stomach discomfort", "stomach_discomfort", "gastrointestinal", ["anxiety", "disgust"]),
    ("Nausea", "nausea", "gastrointestinal", ["anxiety", "disgust", "fear"]),
    ("Muscle tension", "muscle_tension", "muscular", ["anxiety", "anger", "stress"]),
    ("Headache", "headache", "other", ["stress", "overwhelm", "anger"]),
    ("Fatigue", "fatigue", "other", ["sadness", "depression", "overwhelm"]),
    ("Restlessness", "restlessness", "other", ["anxiety", "anger"]),
    ("Difficulty breathing", "difficulty_breathing", "respiratory", ["anxiety", "panic"]),
    ("Shallow breathing", "shallow_breathing", "respiratory", ["anxiety", "stress"]),
    ("Sweating", "sweating", "other", ["anxiety", "fear", "panic"]),
    ("Trembling", "trembling", "muscular", ["anxiety", "fear"]),
    ("Warmth/flushing", "warmth", "cardiovascular", ["shame", "anger", "embarrassment"]),
    ("Cold hands/feet", "cold_extremities", "cardiovascular", ["anxiety", "fear"]),
)


def _range_check(column: str, low: int, high: int, table: str) -> sa.CheckConstraint:
    return sa.CheckConstraint(
        f"{column} IS NULL OR ({column} >= {low} AND {column} <= {high})",
        name=f"ck_{table}_{column}_range",
    )


def upgrade() -> None:
    op.create_table(
        "mood_entries",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("entry_time", sa.Time(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("emotions", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("overall_mood", sa.Integer(), nullable=True),
        sa.Column("physical_sensations", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("energy_level", sa.Integer(), nullable=True),
        sa.Column("sleep_quality", sa.Integer(), nullable=True),
        sa.Column("sleep_hours", sa.Numeric(3, 1), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("triggers", sa.Text(), nullable=True),
        sa.Column("coping_used", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("crisis_level", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("medication_taken", sa.Boolean(), nullable=True),
        sa.Column("is_archived", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.CheckConstraint("jsonb_typeof(emotions) = 'array'", name="ck_mood_entries_emotions_array"),
        _range_check("overall_mood", 1, 10, "mood_entries"),
        _range_check("energy_level", 1, 10, "mood_entries"),
        _range_check("sleep_quality", 1, 10, "mood_entries"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "user_id",
            "entry_date",
            "entry_time",
            name="uq_mood_entries_user_date_time",
            postgresql_nulls_not_distinct=True,
        ),
    )
    op.create_index("idx_mood_entries_user", "mood_entries", ["user_id"])
    op.create_index("idx_mood_entries_date", "mood_entries", ["entry_date"])
    op.create_index("idx_mood_entries_emotions", "mood_entries", ["emotions"], postgresql_using="gin")

    op.create_table(
        "activity_log",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("activity_date", sa.Date(), nullable=False),
        sa.Column("activity_time", sa.Time(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("activity_name", sa.String(200), nullable=False),
        sa.Column("activity_type", sa.String(50), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("mood_before", sa.Integer(), nullable=True),
        sa.Column("mood_after", sa.Integer(), nullable=True),
        sa.Column(
            "emotions_before",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column(
            "emotions_after",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("was_planned", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("difficulty_rating", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("obstacles", sa.Text(), nullable=True),
        sa.Column("accomplishment_notes", sa.Text(), nullable=True),
        sa.Column("mood_entry_id", postgresql.UUID(as_uuid=True), nullable=True),
        _range_check("mood_before", 1, 10, "activity_log"),
        _range_check("mood_after", 1, 10, "activity_log"),
        _range_check("difficulty_rating", 1, 10, "activity_log"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["mood_entry_id"], ["mood_entries.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_activity_log_user", "activity_log", ["user_id"])
    op.create_index("idx_activity_log_date", "activity_log", ["activity_date"])
    op.create_index("idx_activity_log_type", "activity_log", ["activity_type"])
    op.create_index("idx_activity_log_user_date", "activity_log", ["user_id", "activity_date"])

    op.create_table(
        "activity_schedule",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("therapist_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("planned_date", sa.Date(), nullable=False),
        sa.Column("planned_time", sa.Time(), nullable=True),
        sa.Column("activity_name", sa.String(200), nullable=False),
        sa.Column("activity_type", sa.String(50), nullable=True),
        sa.Column("why_important", sa.Text(), nullable=True),
        sa.Column("expected_difficulty", sa.Integer(), nullable=True),
        sa.Column("potential_obstacles", sa.Text(), nullable=True),
        sa.Column("solutions", sa.Text(), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("actual_difficulty", sa.Integer(), nullable=True),
        sa.Column("activity_log_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("is_homework", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_archived", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        _range_check("expected_difficulty", 1, 10, "activity_schedule"),
        _range_check("actual_difficulty", 1, 10, "activity_schedule"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["therapist_id"], ["therapists.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["activity_log_id"], ["activity_log.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_activity_schedule_user", "activity_schedule", ["user_id"])
    op.create_index("idx_activity_schedule_date", "activity_schedule", ["planned_date"])
    op.create_index("idx_activity_schedule_completed", "activity_schedule", ["completed"])
    op.create_index("idx_activity_schedule_user_date", "activity_schedule", ["user_id", "planned_date"])

    emotion_definitions = op.create_table(
        "emotion_definitions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("slug", sa.String(50), nullable=False),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("emoji", sa.String(10), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("opposite_emotion_id", sa.Integer(), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["opposite_emotion_id"], ["emotion_definitions.id"]),
        sa.UniqueConstraint("name", name="uq_emotion_definitions_name"),
        sa.UniqueConstraint("slug", name="uq_emotion_definitions_slug"),
    )
    op.bulk_insert(
        emotion_definitions,
        [
            {
                "name": name,
                "slug": slug,
                "category": category,
                "emoji": emoji,
                "description": description,
                "display_order": display_order,
            }
            for name, slug, category, emoji, description, display_order in EMOTION_DEFINITIONS
        ],
    )

    sensations = op.create_table(
        "physical_sensation_definitions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("commonly_associated_with", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("name", name="uq_physical_sensation_definitions_name"),
        sa.UniqueConstraint("slug", name="uq_physical_sensation_definitions_slug"),
    )
    op.bulk_insert(
        sensations,
        [
            {
                "name": name,
                "slug": slug,
                "category": category,
                "commonly_associated_with": associated,
            }
            for name, slug, category, associated in PHYSICAL_SENSATIONS
        ],
    )

    op.create_table(
        "coping_strategies",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("strategy_name", sa.String(200), nullable=False),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("times_used", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("avg_effectiveness", sa.Numeric(4, 2), nullable=True),
        sa.Column("helpful_for", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("is_archived", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.CheckConstraint(
            "avg_effectiveness IS NULL OR (avg_effectiveness >= 0 AND avg_effectiveness <= 10)",
            name="ck_coping_strategies_avg_effectiveness_range",
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "strategy_name", name="uq_coping_strategies_user_name"),
    )

    op.execute(
        """
        CREATE TRIGGER trg_mood_entries_updated_at
        BEFORE UPDATE ON mood_entries
        FOR EACH ROW
        EXECUTE FUNCTION set_updated_at();
        """
    )

    op.execute(
        """
        CREATE VIEW weekly_mood_summary AS
        SELECT
            user_id,
            date_trunc('week', entry_date)::date AS week_start,
            COUNT(*)::integer AS entries_count,
            AVG(overall_mood) AS avg_mood,
            AVG(energy_level) AS avg_energy,
            AVG(sleep_quality) AS avg_sleep_quality,
            AVG(sleep_hours) AS avg_sleep_hours,
            SUM(CASE WHEN crisis_level THEN 1 ELSE 0 END)::integer AS crisis_count
        FROM mood_entries
        WHERE is_archived = false
        GROUP BY user_id, date_trunc('week', entry_date);
        """
    )
    op.execute(
        """
        CREATE VIEW activity_effectiveness AS
        SELECT
            user_id,
            activity_type,
            COUNT(*)::integer AS times_performed,
            AVG(mood_after - mood_before) AS avg_mood_improvement,
            AVG(difficulty_rating) AS avg_difficulty
        FROM activity_log
        WHERE completed = true
          AND mood_before IS NOT NULL
          AND mood_after IS NOT NULL
        GROUP BY user_id, activity_type;
        """
    )

    op.execute(
        """
        CREATE OR REPLACE FUNCTION get_emotion_trend(
            p_user_id uuid,
            p_emotion varchar(50),
            p_days integer DEFAULT 30
        )
        RETURNS TABLE (date date, avg_intensity numeric, count integer)
        LANGUAGE plpgsql
        STABLE
        AS $$
        BEGIN
            RETURN QUERY
            SELECT
                me.entry_date,
                AVG((e->>'intensity')::int)::numeric,
                COUNT(*)::integer
            FROM mood_entries me
            CROSS JOIN LATERAL jsonb_array_elements(me.emotions) AS e
            WHERE me.user_id = p_user_id
              AND me.is_archived = false
              AND me.entry_date >= CURRENT_DATE - p_days
              AND lower(e->>'emotion') = lower(p_emotion)
            GROUP BY 1
            ORDER BY 1;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION get_ba_adherence(p_user_id uuid, p_weeks integer DEFAULT 4)
        RETURNS TABLE (
            week_start date,
            planned_activities integer,
            completed_activities integer,
            adherence_rate numeric
        )
        LANGUAGE plpgsql
        STABLE
        AS $$
        BEGIN
            RETURN QUERY
            SELECT
                date_trunc('week', s.planned_date)::date,
                COUNT(*)::integer,
                SUM(CASE WHEN s.completed THEN 1 ELSE 0 END)::integer,
                ROUND(SUM(CASE WHEN s.completed THEN 1 ELSE 0 END)::numeric / COUNT(*) * 100, 2)
            FROM activity_schedule s
            WHERE s.user_id = p_user_id
              AND s.is_archived = false
              AND s.planned_date >= CURRENT_DATE - (p_weeks * 7)
            GROUP BY 1
            ORDER BY 1;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION record_daily_mood(
            p_user_id uuid,
            p_entry_date date,
            p_overall_mood integer,
            p_emotions jsonb,
            p_energy_level integer DEFAULT NULL,
            p_sleep_quality integer DEFAULT NULL,
            p_notes text DEFAULT NULL,
            p_entry_time time DEFAULT NULL
        )
        RETURNS uuid
        LANGUAGE plpgsql
        AS $$
        DECLARE
            v_mood_entry_id uuid;
        BEGIN
            INSERT INTO mood_entries AS me (
                user_id, entry_date, entry_time, overall_mood, emotions,
                energy_level, sleep_quality, notes
            )
            VALUES (
                p_user_id, p_entry_date, p_entry_time, p_overall_mood,
                COALESCE(p_emotions, '[]'::jsonb), p_energy_level, p_sleep_quality, p_notes
            )
            ON CONFLICT ON CONSTRAINT uq_mood_entries_user_date_time DO UPDATE SET
                overall_mood = EXCLUDED.overall_mood,
                emotions = EXCLUDED.emotions,
                energy_level = EXCLUDED.energy_level,
                sleep_quality = EXCLUDED.sleep_quality,
                notes = EXCLUDED.notes
            RETURNING me.id INTO v_mood_entry_id;

            RETURN v_mood_entry_id;
        END;
        $$;
        """
    )


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS record_daily_mood(uuid, date, integer, jsonb, integer, integer, text, time);")
    op.execute("DROP FUNCTION IF EXISTS get_ba_adherence(uuid, integer);")
    op.execute("DROP FUNCTION IF EXISTS get_emotion_trend(uuid, varchar, integer);")
    op.execute("DROP VIEW IF EXISTS activity_effectiveness;")
    op.execute("DROP VIEW IF EXISTS weekly_mood_summary;")
    op.execute("DROP TRIGGER IF EXISTS trg_mood_entries_updated_at ON mood_entries;")

    op.drop_table("coping_strategies")
    op.drop_table("physical_sensation_definitions")
    op.drop_table("emotion_definitions")
    op.drop_index("idx_activity_schedule_user_date", table_name="activity_schedule")
    op.drop_index("idx_activity_schedule_completed", table_name="activity_schedule")
    op.drop_index("idx_activity_schedule_date", table_name="activity_schedule")
    op.drop_index("idx_activity_schedule_user", table_name="activity_schedule")
    op.drop_table("activity_schedule")
    op.drop_index("idx_activity_log_user_date", table_name="activity_log")
    op.drop_index("idx_activity_log_type", table_name="activity_log")
    op.drop_index("idx_activity_log_date", table_name="activity_log")
    op.drop_index("idx_activity_log_user", table_name="activity_log")
    op.drop_table("activity_log")
    op.drop_index("idx_mood_entries_emotions", table_name="mood_entries")
    op.drop_index("idx_mood_entries_date", table_name="mood_entries")
    op.drop_index("idx_mood_entries_user", table_name="mood_entries")
    op.drop_table("mood_entries")
