"""m6_row_level_security

Revision ID: d2a7e4f81c9b
Revises: b18f5c2e6d79
Create Date: 2026-09-01 09:50:00.000000
"""
from collections.abc import Sequence

from alembic import op

revision: str = "d2a7e4f81c9b"
down_revision: str | None = "b18f5c2e6d79"
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

OWNED_TABLES = (
    "user_profiles",
    "user_auth_providers",
    "user_sessions",
    "therapy_sessions",
    "thought_records",
    "mood_entries",
    "activity_log",
    "activity_schedule",
    "coping_strategies",
    "homework_assignments",
    "exposure_hierarchies",
    "exposure_attempts",
    "safety_behaviors",
    "core_beliefs",
    "values_assessment",
    "relapse_prevention_plan",
)

ADMIN_READ_TABLES = ("analytics_events", "api_usage", "daily_metrics")
ADMIN_MANAGED_TABLES = ("promo_codes", "affiliates", "affiliate_referrals", "promo_code_redemptions")

RLS_TABLES = (
    "users",
    *OWNED_TABLES,
    "auth_audit_log",
    "emotion_ratings",
    "thought_record_distortions",
    "exposure_steps",
    *ADMIN_READ_TABLES,
    *ADMIN_MANAGED_TABLES,
    "admin_users",
)

# Cross-table writers must see rows the requesting user cannot.
DEFINER_FUNCTIONS = (
    "upsert_firebase_user(text, text, boolean, text, text, text, text)",
    "get_user_by_firebase_uid(text)",
    "cleanup_expired_sessions()",
    "fn_promo_code_usage_refresh(uuid)",
    "fn_affiliate_totals_refresh(uuid)",
    "fn_exposure_attempts_step_progress()",
    "fn_exposure_steps_status_guard()",
    "mark_overdue_homework()",
)

IS_ADMIN = "is_admin(app_current_user_id())"

POLICIES = (
    ("users_self_select", "users", "SELECT", "id = app_current_user_id()"),
    ("users_self_update", "users", "UPDATE", "id = app_current_user_id()"),
    *[
        (f"{table_name}_user_policy", table_name, "ALL", "user_id = app_current_user_id()")
        for table_name in OWNED_TABLES
    ],
    ("auth_audit_log_user_select", "auth_audit_log", "SELECT", "user_id = app_current_user_id()"),
    (
        "emotion_ratings_user_policy",
        "emotion_ratings",
        "ALL",
        "EXISTS (SELECT 1 FROM thought_records tr"
        " WHERE tr.id = emotion_ratings.thought_record_id"
        " AND tr.user_id = app_current_user_id())",
    ),
    (
        "thought_record_distortions_user_policy",
        "thought_record_distortions",
        "ALL",
        "EXISTS (SELECT 1 FROM thought_records tr"
        " WHERE tr.id = thought_record_distortions.thought_record_id"
        " AND tr.user_id = app_current_user_id())",
    ),
    (
        "exposure_steps_user_policy",
        "exposure_steps",
        "ALL",
        "EXISTS (SELECT 1 FROM exposure_hierarchies h"
        " WHERE h.id = exposure_steps.hierarchy_id"
        " AND h.user_id = app_current_user_id())",
    ),
    (
        "thought_records_therapist_policy",
        "thought_records",
        "SELECT",
        "shared_with_therapist = true AND EXISTS (SELECT 1 FROM therapist_patient_relationships r"
        " WHERE r.patient_id = thought_records.user_id"
        " AND r.therapist_id = app_current_user_id()"
        " AND r.is_active = true)",
    ),
    (
        "homework_assignments_therapist_policy",
        "homework_assignments",
        "ALL",
        "therapist_id = app_current_user_id()",
    ),
    *[(f"{table_name}_admin_select", table_name, "SELECT", IS_ADMIN) for table_name in ADMIN_READ_TABLES],
    *[(f"{table_name}_admin_policy", table_name, "ALL", IS_ADMIN) for table_name in ADMIN_MANAGED_TABLES],
    ("affiliates_owner_select", "affiliates", "SELECT", "user_id = app_current_user_id()"),
    (
        "affiliate_referrals_owner_select",
        "affiliate_referrals",
        "SELECT",
        "EXISTS (SELECT 1 FROM affiliates a"
        " WHERE a.id = affiliate_referrals.affiliate_id"
        " AND a.user_id = app_current_user_id())",
    ),
    (
        "promo_code_redemptions_owner_select",
        "promo_code_redemptions",
        "SELECT",
        "user_id = app_current_user_id()",
    ),
    ("admin_users_self_select", "admin_users", "SELECT", "user_id = app_current_user_id()"),
)


def upgrade() -> None:
    for signature in DEFINER_FUNCTIONS:
        op.execute(f"ALTER FUNCTION {signature} SECURITY DEFINER SET search_path = public;")

    for table_name in RLS_TABLES:
        op.execute(f"ALTER TABLE {table_name} ENABLE ROW LEVEL SECURITY;")

    for policy_name, table_name, command, predicate in POLICIES:
        op.execute(
            f"""
            CREATE POLICY {policy_name} ON {table_name}
            FOR {command}
            USING ({predicate});
            """
        )


def downgrade() -> None:
    for policy_name, table_name, _command, _predicate in reversed(POLICIES):
        op.execute(f"DROP POLICY IF EXISTS {policy_name} ON {table_name};")

    for table_name in reversed(RLS_TABLES):
        op.execute(f"ALTER TABLE {table_name} DISABLE ROW LEVEL SECURITY;")

    for signature in DEFINER_FUNCTIONS:
        op.execute(f"ALTER FUNCTION {signature} SECURITY INVOKER RESET search_path;")
