"""m5_cbt_homework_exposure

Revision ID: b18f5c2e6d79
Revises: 9e6c3a8d4b57
Create Date: 2026-09-01 09:40:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "b18f5c2e6d79"
down_revision: str | None = "9e6c3a8d4b57"
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

UPDATED_AT_TABLES = ("homework_assignments", "values_assessment", "relapse_prevention_plan")


def _uuid_pk() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        primary_key=True,
        server_default=sa.text("gen_random_uuid()"),
    )


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()"))


def _updated_at() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()"))


def _owner(ondelete: str = "CASCADE") -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete=ondelete)


def _therapist() -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(["therapist_id"], ["therapists.id"], ondelete="SET NULL")


def upgrade() -> None:
    op.create_table(
        "homework_assignments",
        _uuid_pk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("therapist_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("session_id", postgresql.UUID(as_uuid=True), nullable=True),
        _created_at(),
        _updated_at(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("homework_type", sa.String(50), nullable=False),
        sa.Column("assigned_date", sa.Date(), nullable=False, server_default=sa.text("CURRENT_DATE")),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("frequency", sa.String(50), nullable=True),
        sa.Column("instructions", sa.Text(), nullable=True),
        sa.Column("resources", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default=sa.text("'assigned'")),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completion_notes", sa.Text(), nullable=True),
        sa.Column("therapist_reviewed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("therapist_feedback", sa.Text(), nullable=True),
        sa.Column("therapist_reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_archived", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("reminders_enabled", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.CheckConstraint(
            "status IN ('assigned','in_progress','completed','overdue','cancelled')",
            name="ck_homework_assignments_status",
        ),
        sa.CheckConstraint(
            "homework_type IN ('thought_record','mood_log','behavioral_activation','exposure','custom')",
            name="ck_homework_assignments_homework_type",
        ),
        _owner(),
        _therapist(),
        sa.ForeignKeyConstraint(["session_id"], ["therapy_sessions.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_homework_user", "homework_assignments", ["user_id"])
    op.create_index("idx_homework_therapist", "homework_assignments", ["therapist_id"])
    op.create_index("idx_homework_status", "homework_assignments", ["status"])
    op.create_index("idx_homework_due_date", "homework_assignments", ["due_date"])

    op.create_table(
        "exposure_hierarchies",
        _uuid_pk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("therapist_id", postgresql.UUID(as_uuid=True), nullable=True),
        _created_at(),
        sa.Column("fear_target", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        _owner(),
        _therapist(),
    )
    op.create_index("idx_exposure_hierarchies_user", "exposure_hierarchies", ["user_id"])
    op.create_index("idx_exposure_hierarchies_active", "exposure_hierarchies", ["is_active"])

    op.create_table(
        "exposure_steps",
        _uuid_pk(),
        sa.Column("hierarchy_id", postgresql.UUID(as_uuid=True), nullable=False),
        _created_at(),
        sa.Column("situation", sa.Text(), nullable=False),
        sa.Column("expected_anxiety", sa.Integer(), nullable=False),
        sa.Column("step_order", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(50), nullable=False, server_default=sa.text("'not_started'")),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.CheckConstraint(
            "expected_anxiety >= 0 AND expected_anxiety <= 100",
            name="ck_exposure_steps_expected_anxiety_range",
        ),
        sa.CheckConstraint(
            "status IN ('not_started','in_progress','completed')",
            name="ck_exposure_steps_status",
        ),
        sa.CheckConstraint("attempts >= 0", name="ck_exposure_steps_attempts_non_negative"),
        sa.ForeignKeyConstraint(["hierarchy_id"], ["exposure_hierarchies.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_exposure_steps_hierarchy", "exposure_steps", ["hierarchy_id"])
    op.create_index("idx_exposure_steps_order", "exposure_steps", ["step_order"])

    op.create_table(
        "exposure_attempts",
        _uuid_pk(),
        sa.Column("step_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("attempt_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("anxiety_before", sa.Integer(), nullable=True),
        sa.Column("anxiety_peak", sa.Integer(), nullable=True),
        sa.Column("anxiety_after", sa.Integer(), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("safety_behaviors_used", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("safety_behaviors_notes", sa.Text(), nullable=True),
        sa.Column("learning_notes", sa.Text(), nullable=True),
        sa.Column("success_rating", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.CheckConstraint(
            "anxiety_before IS NULL OR (anxiety_before >= 0 AND anxiety_before <= 100)",
            name="ck_exposure_attempts_anxiety_before_range",
        ),
        sa.CheckConstraint(
            "anxiety_peak IS NULL OR (anxiety_peak >= 0 AND anxiety_peak <= 100)",
            name="ck_exposure_attempts_anxiety_peak_range",
        ),
        sa.CheckConstraint(
            "anxiety_after IS NULL OR (anxiety_after >= 0 AND anxiety_after <= 100)",
            name="ck_exposure_attempts_anxiety_after_range",
        ),
        sa.CheckConstraint(
            "success_rating IS NULL OR (success_rating >= 1 AND success_rating <= 10)",
            name="ck_exposure_attempts_success_rating_range",
        ),
        sa.ForeignKeyConstraint(["step_id"], ["exposure_steps.id"], ondelete="CASCADE"),
        _owner(),
    )
    op.create_index("idx_exposure_attempts_step", "exposure_attempts", ["step_id"])
    op.create_index("idx_exposure_attempts_date", "exposure_attempts", ["attempt_date"])

    op.create_table(
        "safety_behaviors",
        _uuid_pk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        _created_at(),
        sa.Column("behavior", sa.String(200), nullable=False),
        sa.Column("situation", sa.Text(), nullable=False),
        sa.Column("fear_addressed", sa.String(200), nullable=True),
        sa.Column("short_term_effect", sa.Text(), nullable=True),
        sa.Column("long_term_effect", sa.Text(), nullable=True),
        sa.Column("times_identified", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_target_for_change", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        _owner(),
        sa.UniqueConstraint("user_id", "behavior", name="uq_safety_behaviors_user_behavior"),
    )

    op.create_table(
        "core_beliefs",
        _uuid_pk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("therapist_id", postgresql.UUID(as_uuid=True), nullable=True),
        _created_at(),
        sa.Column("belief_statement", sa.Text(), nullable=False),
        sa.Column("belief_type", sa.String(50), nullable=True),
        sa.Column("valence", sa.String(50), nullable=True),
        sa.Column("current_belief_strength", sa.Integer(), nullable=True),
        sa.Column("evidence_for", sa.Text(), nullable=True),
        sa.Column("evidence_against", sa.Text(), nullable=True),
        sa.Column("alternative_belief", sa.Text(), nullable=True),
        sa.Column("alternative_strength", sa.Integer(), nullable=True),
        sa.Column("is_active_target", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("last_reviewed", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "current_belief_strength IS NULL OR "
            "(current_belief_strength >= 0 AND current_belief_strength <= 100)",
            name="ck_core_beliefs_current_strength_range",
        ),
        sa.CheckConstraint(
            "alternative_strength IS NULL OR "
            "(alternative_strength >= 0 AND alternative_strength <= 100)",
            name="ck_core_beliefs_alternative_strength_range",
        ),
        _owner(),
        _therapist(),
    )
    op.create_index("idx_core_beliefs_user", "core_beliefs", ["user_id"])
    op.create_index("idx_core_beliefs_type", "core_beliefs", ["belief_type"])

    op.create_table(
        "values_assessment",
        _uuid_pk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        _created_at(),
        _updated_at(),
        sa.Column("domain", sa.String(50), nullable=False),
        sa.Column("importance", sa.Integer(), nullable=True),
        sa.Column("current_satisfaction", sa.Integer(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("goals", sa.Text(), nullable=True),
        sa.CheckConstraint(
            "importance IS NULL OR (importance >= 0 AND importance <= 10)",
            name="ck_values_assessment_importance_range",
        ),
        sa.CheckConstraint(
            "current_satisfaction IS NULL OR (current_satisfaction >= 0 AND current_satisfaction <= 10)",
            name="ck_values_assessment_satisfaction_range",
        ),
        _owner(),
        sa.UniqueConstraint("user_id", "domain", name="uq_values_assessment_user_domain"),
    )
    op.create_index("idx_values_user", "values_assessment", ["user_id"])

    op.create_table(
        "relapse_prevention_plan",
        _uuid_pk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("therapist_id", postgresql.UUID(as_uuid=True), nullable=True),
        _created_at(),
        _updated_at(),
        sa.Column("early_warning_signs", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("moderate_warning_signs", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("crisis_warning_signs", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("self_care_strategies", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("social_support", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("professional_support", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("emergency_contacts", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        _owner(),
        _therapist(),
    )
    op.create_index("idx_relapse_prevention_plan_user", "relapse_prevention_plan", ["user_id"])

    for table_name in UPDATED_AT_TABLES:
        op.execute(
            f"""
            CREATE TRIGGER trg_{table_name}_updated_at
            BEFORE UPDATE ON {table_name}
            FOR EACH ROW
            EXECUTE FUNCTION set_updated_at();
            """
        )

    op.execute(
        """
        CREATE OR REPLACE FUNCTION fn_homework_assignments_status()
        RETURNS trigger
        LANGUAGE plpgsql
        AS $$
        BEGIN
            IF NEW.completed_at IS NOT NULL AND OLD.completed_at IS NULL THEN
                NEW.status := 'completed';
            ELSIF NEW.due_date < CURRENT_DATE
                  AND NEW.status NOT IN ('completed', 'cancelled') THEN
                NEW.status := 'overdue';
            END IF;

            IF OLD.status IN ('completed', 'cancelled') AND NEW.status <> OLD.status THEN
                RAISE EXCEPTION 'homework % is % and cannot move to %', OLD.id, OLD.status, NEW.status
                    USING ERRCODE = 'check_violation';
            END IF;
            RETURN NEW;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE TRIGGER trg_homework_assignments_status
        BEFORE UPDATE ON homework_assignments
        FOR EACH ROW
        EXECUTE FUNCTION fn_homework_assignments_status();
        """
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION mark_overdue_homework()
        RETURNS integer
        LANGUAGE plpgsql
        AS $$
        DECLARE
            v_count integer;
        BEGIN
            UPDATE homework_assignments
            SET status = 'overdue'
            WHERE status IN ('assigned', 'in_progress')
              AND due_date < CURRENT_DATE
              AND is_archived = false;
            GET DIAGNOSTICS v_count = ROW_COUNT;
            RETURN v_count;
        END;
        $$;
        """
    )

    op.execute(
        """
        CREATE OR REPLACE FUNCTION fn_exposure_steps_status_guard()
        RETURNS trigger
        LANGUAGE plpgsql
        AS $$
        DECLARE
            v_old_rank integer;
            v_new_rank integer;
            v_earned_rank integer;
            v_successes integer;
        BEGIN
            v_old_rank := array_position(ARRAY['not_started', 'in_progress', 'completed'], OLD.status::text);
            v_new_rank := array_position(ARRAY['not_started', 'in_progress', 'completed'], NEW.status::text);
            IF v_new_rank < v_old_rank THEN
                RAISE EXCEPTION 'exposure step % cannot move from % back to %', OLD.id, OLD.status, NEW.status
                    USING ERRCODE = 'check_violation';
            END IF;
            IF v_new_rank > v_old_rank THEN
                SELECT COUNT(*) FILTER (
                    WHERE anxiety_before > 0
                      AND anxiety_after IS NOT NULL
                      AND anxiety_after * 2 <= anxiety_before
                )
                INTO v_successes
                FROM exposure_attempts
                WHERE step_id = OLD.id;

                v_earned_rank := CASE
                    WHEN v_successes >= 3 THEN 3
                    WHEN v_successes >= 1 THEN 2
                    ELSE 1
                END;
                IF v_new_rank > v_earned_rank THEN
                    RAISE EXCEPTION 'exposure step % has % successful attempts and cannot move to %',
                        OLD.id, v_successes, NEW.status
                        USING ERRCODE = 'check_violation';
                END IF;
            END IF;
            RETURN NEW;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE TRIGGER trg_exposure_steps_status_guard
        BEFORE UPDATE OF status ON exposure_steps
        FOR EACH ROW
        EXECUTE FUNCTION fn_exposure_steps_status_guard();
        """
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION fn_exposure_attempts_step_progress()
        RETURNS trigger
        LANGUAGE plpgsql
        AS $$
        DECLARE
            v_successes integer;
            v_attempts integer;
            v_step_id uuid;
            v_hierarchy_id uuid;
        BEGIN
            IF TG_OP = 'DELETE' THEN
                v_step_id := OLD.step_id;
            ELSE
                v_step_id := NEW.step_id;
            END IF;

            SELECT
                COUNT(*),
                COUNT(*) FILTER (
                    WHERE anxiety_before > 0
                      AND anxiety_after IS NOT NULL
                      AND anxiety_after * 2 <= anxiety_before
                )
            INTO v_attempts, v_successes
            FROM exposure_attempts
            WHERE step_id = v_step_id;

            UPDATE exposure_steps
            SET attempts = v_attempts,
                status = CASE
                    WHEN status = 'completed' THEN status
                    WHEN v_successes >= 3 THEN 'completed'
                    WHEN v_successes >= 1 THEN 'in_progress'
                    ELSE status
                END
            WHERE id = v_step_id
            RETURNING hierarchy_id INTO v_hierarchy_id;

            UPDATE exposure_hierarchies h
            SET completed_at = now()
            WHERE h.id = v_hierarchy_id
              AND h.completed_at IS NULL
              AND NOT EXISTS (
                  SELECT 1 FROM exposure_steps s
                  WHERE s.hierarchy_id = h.id AND s.status <> 'completed'
              );

            RETURN NULL;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE TRIGGER trg_exposure_attempts_step_progress
        AFTER INSERT OR DELETE ON exposure_attempts
        FOR EACH ROW
        EXECUTE FUNCTION fn_exposure_attempts_step_progress();
        """
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION fn_exposure_steps_reopen_hierarchy()
        RETURNS trigger
        LANGUAGE plpgsql
        AS $$
        BEGIN
            IF NEW.status <> 'completed' THEN
                UPDATE exposure_hierarchies
                SET completed_at = NULL
                WHERE id = NEW.hierarchy_id
                  AND completed_at IS NOT NULL;
            END IF;
            RETURN NULL;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE TRIGGER trg_exposure_steps_reopen_hierarchy
        AFTER INSERT ON exposure_steps
        FOR EACH ROW
        EXECUTE FUNCTION fn_exposure_steps_reopen_hierarchy();
        """
    )

    op.execute(
        """
        CREATE VIEW homework_completion_stats AS
        SELECT
            user_id,
            COUNT(*)::integer AS total_assigned,
            SUM(CASE WHEN status = 'completed' THEN 1 ELSE 0 END)::integer AS completed,
            SUM(CASE WHEN status = 'overdue' THEN 1 ELSE 0 END)::integer AS overdue,
            ROUND(
                SUM(CASE WHEN status = 'completed' THEN 1 ELSE 0 END)::numeric / COUNT(*) * 100,
                2
            ) AS completion_rate
        FROM homework_assignments
        WHERE is_archived = false
        GROUP BY user_id;
        """
    )
    op.execute(
        """
        CREATE VIEW values_gap_analysis AS
        SELECT
            user_id,
            domain,
            importance,
            current_satisfaction,
            (importance - current_satisfaction) AS gap,
            CASE
                WHEN (importance - current_satisfaction) >= 7 THEN 'critical'
                WHEN (importance - current_satisfaction) >= 4 THEN 'significant'
                WHEN (importance - current_satisfaction) >= 2 THEN 'moderate'
                ELSE 'minimal'
            END AS priority_level
        FROM values_assessment;
        """
    )


def downgrade() -> None:
    op.execute("DROP VIEW IF EXISTS values_gap_analysis;")
    op.execute("DROP VIEW IF EXISTS homework_completion_stats;")
    op.execute("DROP TRIGGER IF EXISTS trg_exposure_attempts_step_progress ON exposure_attempts;")
    op.execute("DROP FUNCTION IF EXISTS fn_exposure_attempts_step_progress();")
    op.execute("DROP TRIGGER IF EXISTS trg_exposure_steps_reopen_hierarchy ON exposure_steps;")
    op.execute("DROP FUNCTION IF EXISTS fn_exposure_steps_reopen_hierarchy();")
    op.execute("DROP TRIGGER IF EXISTS trg_exposure_steps_status_guard ON exposure_steps;")
    op.execute("DROP FUNCTION IF EXISTS fn_exposure_steps_status_guard();")
    op.execute("DROP FUNCTION IF EXISTS mark_overdue_homework();")
    op.execute("DROP TRIGGER IF EXISTS trg_homework_assignments_status ON homework_assignments;")
    op.execute("DROP FUNCTION IF EXISTS fn_homework_assignments_status();")
    for table_name in UPDATED_AT_TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS trg_{table_name}_updated_at ON {table_name};")

    op.drop_index("idx_relapse_prevention_plan_user", table_name="relapse_prevention_plan")
    op.drop_table("relapse_prevention_plan")
    op.drop_index("idx_values_user", table_name="values_assessment")
    op.drop_table("values_assessment")
    op.drop_index("idx_core_beliefs_type", table_name="core_beliefs")
    op.drop_index("idx_core_beliefs_user", table_name="core_beliefs")
    op.drop_table("core_beliefs")
    op.drop_table("safety_behaviors")
    op.drop_index("idx_exposure_attempts_date", table_name="exposure_attempts")
    op.drop_index("idx_exposure_attempts_step", table_name="exposure_attempts")
    op.drop_table("exposure_attempts")
    op.drop_index("idx_exposure_steps_order", table_name="exposure_steps")
    op.drop_index("idx_exposure_steps_hierarchy", table_name="exposure_steps")
    op.drop_table("exposure_steps")
    op.drop_index("idx_exposure_hierarchies_active", table_name="exposure_hierarchies")
    op.drop_index("idx_exposure_hierarchies_user", table_name="exposure_hierarchies")
    op.drop_table("exposure_hierarchies")
    op.drop_index("idx_homework_due_date", table_name="homework_assignments")
    op.drop_index("idx_homework_status", table_name="homework_assignments")
    op.drop_index("idx_homework_therapist", table_name="homework_assignments")
    op.drop_index("idx_homework_user", table_name="homework_assignments")
    op.drop_table("homework_assignments")
