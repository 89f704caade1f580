"""m3_cbt_thought_records

Revision ID: 7d4b1e6f2a35
Revises: 5c2e8d4a9b13
Create Date: 2026-09-01 09:20:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "7d4b1e6f2a35"
down_revision: str | None = "5c2e8d4a9b13"
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

COGNITIVE_DISTORTIONS = (
    (
        "All-or-Nothing Thinking",
        "all_or_nothing",
        "Seeing things in black-and-white categories without middle ground.",
        "If I'm not perfect, I'm a total failure.",
    ),
    (
        "Overgeneralization",
        "overgeneralization",
        "Seeing a single negative event as a never-ending pattern.",
        "I failed this test. I always fail everything.",
    ),
    (
        "Mental Filter",
        "mental_filter",
        "Focusing only on negatives and ignoring positives.",
        "Remembering only the one criticism in a positive review.",
    ),
    (
        "Disqualifying the Positive",
        "disqualify_positive",
        "Insisting positive experiences don't count.",
        "They're just being nice, they don't mean it.",
    ),
    (
        "Jumping to Conclusions",
        "jumping_conclusions",
        "Making negative interpretations without evidence.",
        "They didn't respond, so they must be mad at me.",
    ),
    (
        "Mind Reading",
        "mind_reading",
        "Assuming you know what others are thinking.",
        "They think I'm boring.",
    ),
    (
        "Fortune Telling",
        "fortune_telling",
        "Predicting negative outcomes with certainty.",
        "I know I'll fail the interview.",
    ),
    (
        "Magnification/Catastrophizing",
        "catastrophizing",
        "Exaggerating the importance of problems.",
        "One mistake will ruin my entire career.",
    ),
    (
        "Minimization",
        "minimization",
        "Shrinking the importance of positive events.",
        "Anyone could have done what I did.",
    ),
    (
        "Emotional Reasoning",
        "emotional_reasoning",
        "Believing that feelings reflect reality.",
        "I feel anxious, so there must be danger.",
    ),
    (
        "Should Statements",
        "should_statements",
        "Using rigid rules that cause guilt when broken.",
        "I should be able to handle this without help.",
    ),
    (
        "Labeling",
        "labeling",
        "Assigning global negative labels to yourself or others.",
        "I'm a loser / They're an idiot.",
    ),
    (
        "Personalization",
        "personalization",
        "Blaming yourself for events outside your control.",
        "It's my fault the team lost.",
    ),
)


def upgrade() -> None:
    op.create_table(
        "therapy_sessions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("therapist_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("session_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("session_type", sa.String(50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["therapist_id"], ["therapists.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_therapy_sessions_user", "therapy_sessions", ["user_id"])
    op.create_index("idx_therapy_sessions_date", "therapy_sessions", ["session_date"])

    op.create_table(
        "thought_records",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("situation", sa.Text(), nullable=False),
        sa.Column("situation_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("automatic_thoughts", sa.Text(), nullable=False),
        sa.Column("hot_thought", sa.Text(), nullable=True),
        sa.Column("emotions", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("physical_sensations", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("evidence_for", sa.Text(), nullable=True),
        sa.Column("evidence_against", sa.Text(), nullable=True),
        sa.Column("balanced_thought", sa.Text(), nullable=True),
        sa.Column(
            "emotions_after",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("distortions", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("behavior_taken", sa.Text(), nullable=True),
        sa.Column("alternative_behavior", sa.Text(), nullable=True),
        sa.Column("therapist_assigned", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("session_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("tags", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("is_archived", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("shared_with_therapist", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("therapist_notes", sa.Text(), nullable=True),
        sa.Column("therapist_reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("jsonb_typeof(emotions) = 'array'", name="ck_thought_records_emotions_array"),
        sa.CheckConstraint(
            "jsonb_typeof(emotions_after) = 'array'",
            name="ck_thought_records_emotions_after_array",
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["session_id"], ["therapy_sessions.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_thought_records_user", "thought_records", ["user_id"])
    op.create_index("idx_thought_records_date", "thought_records", ["created_at"])
    op.create_index("idx_thought_records_situation_date", "thought_records", ["situation_date"])
    op.create_index(
        "idx_thought_records_shared",
        "thought_records",
        ["shared_with_therapist"],
        postgresql_where=sa.text("shared_with_therapist = true"),
    )
    op.create_index(
        "idx_thought_records_archived",
        "thought_records",
        ["is_archived"],
        postgresql_where=sa.text("is_archived = false"),
    )
    op.create_index(
        "idx_thought_records_emotions",
        "thought_records",
        ["emotions"],
        postgresql_using="gin",
    )

    op.create_table(
        "emotion_ratings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("thought_record_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("emotion", sa.String(50), nullable=False),
        sa.Column("intensity", sa.Integer(), nullable=False),
        sa.Column("is_after_balancing", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("intensity >= 0 AND intensity <= 100", name="ck_emotion_ratings_intensity_range"),
        sa.ForeignKeyConstraint(["thought_record_id"], ["thought_records.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_emotion_ratings_record", "emotion_ratings", ["thought_record_id"])
    op.create_index("idx_emotion_ratings_emotion", "emotion_ratings", ["emotion"])
    op.create_index("idx_emotion_ratings_date", "emotion_ratings", ["created_at"])

    distortions = op.create_table(
        "cognitive_distortions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("example", sa.Text(), nullable=True),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("name", name="uq_cognitive_distortions_name"),
        sa.UniqueConstraint("slug", name="uq_cognitive_distortions_slug"),
    )
    op.bulk_insert(
        distortions,
        [
            {
                "name": name,
                "slug": slug,
                "description": description,
                "example": example,
                "display_order": position,
            }
            for position, (name, slug, description, example) in enumerate(COGNITIVE_DISTORTIONS, start=1)
        ],
    )

    op.create_table(
        "thought_record_distortions",
        sa.Column("thought_record_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("distortion_id", sa.Integer(), nullable=False),
        sa.Column("confidence", sa.Float(), nullable=True),
        sa.Column("identified_by", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "confidence IS NULL OR (confidence >= 0 AND confidence <= 1)",
            name="ck_thought_record_distortions_confidence_range",
        ),
        sa.CheckConstraint(
            "identified_by IN ('user','ai','therapist')",
            name="ck_thought_record_distortions_identified_by",
        ),
        sa.ForeignKeyConstraint(["thought_record_id"], ["thought_records.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["distortion_id"], ["cognitive_distortions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("thought_record_id", "distortion_id"),
    )
    op.create_index("idx_tr_distortions_record", "thought_record_distortions", ["thought_record_id"])
    op.create_index("idx_tr_distortions_distortion", "thought_record_distortions", ["distortion_id"])

    op.execute(
        """
        CREATE TRIGGER trg_thought_records_updated_at
        BEFORE UPDATE ON thought_records
        FOR EACH ROW
        EXECUTE FUNCTION set_updated_at();
        """
    )

    op.execute(
        """
        CREATE VIEW thought_records_summary AS
        SELECT
            tr.id,
            tr.user_id,
            tr.created_at,
            tr.situation_date,
            tr.situation,
            tr.automatic_thoughts,
            tr.balanced_thought,
            tr.emotions,
            tr.emotions_after,
            tr.distortions,
            tr.shared_with_therapist,
            (
                SELECT AVG((e->>'intensity')::int)
                FROM jsonb_array_elements(tr.emotions) AS e
            ) AS avg_intensity_before,
            (
                SELECT AVG((e->>'intensity')::int)
                FROM jsonb_array_elements(tr.emotions_after) AS e
            ) AS avg_intensity_after
        FROM thought_records tr
        WHERE tr.is_archived = false;
        """
    )

    # Records without a situation_date fall back to created_at.
    op.execute(
        """
        CREATE OR REPLACE FUNCTION get_mood_trends(
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
                COALESCE(tr.situation_date, tr.created_at)::date,
                AVG((e->>'intensity')::int)::numeric,
                COUNT(*)::integer
            FROM thought_records tr
            CROSS JOIN LATERAL jsonb_array_elements(tr.emotions) AS e
            WHERE tr.user_id = p_user_id
              AND tr.is_archived = false
              AND COALESCE(tr.situation_date, tr.created_at) >= now() - make_interval(days => p_days)
              AND lower(e->>'emotion') = lower(p_emotion)
            GROUP BY 1
            ORDER BY 1;
        END;
        $$;
        """
    )


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS get_mood_trends(uuid, varchar, integer);")
    op.execute("DROP VIEW IF EXISTS thought_records_summary;")
    op.execute("DROP TRIGGER IF EXISTS trg_thought_records_updated_at ON thought_records;")

    op.drop_index("idx_tr_distortions_distortion", table_name="thought_record_distortions")
    op.drop_index("idx_tr_distortions_record", table_name="thought_record_distortions")
    op.drop_table("thought_record_distortions")
    op.drop_table("cognitive_distortions")
    op.drop_index("idx_emotion_ratings_date", table_name="emotion_ratings")
    op.drop_index("idx_emotion_ratings_emotion", table_name="emotion_ratings")
    op.drop_index("idx_emotion_ratings_record", table_name="emotion_ratings")
    op.drop_table("emotion_ratings")
    op.drop_index("idx_thought_records_emotions", table_name="thought_records")
    op.drop_index("idx_thought_records_archived", table_name="thought_records")
    op.drop_index("idx_thought_records_shared", table_name="thought_records")
    op.drop_index("idx_thought_records_situation_date", table_name="thought_records")
    op.drop_index("idx_thought_records_date", table_name="thought_records")
    op.drop_index("idx_thought_records_user", table_name="thought_records")
    op.drop_table("thought_records")
    op.drop_index("idx_therapy_sessions_date", table_name="therapy_sessions")
    op.drop_index("idx_therapy_sessions_user", table_name="therapy_sessions")
    op.drop_table("therapy_sessions")
