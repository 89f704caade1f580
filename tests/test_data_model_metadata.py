from __future__ import annotations

from sqlalchemy import CheckConstraint, UniqueConstraint

import saasdb.db.models  # noqa: F401
from saasdb.db.models.base import Base

IDENTITY_TABLES = {
    "users",
    "user_profiles",
    "user_auth_providers",
    "user_sessions",
    "auth_audit_log",
    "therapists",
    "therapist_patient_relationships",
}
ADMIN_TABLES = {
    "analytics_events",
    "api_usage",
    "daily_metrics",
    "promo_codes",
    "promo_code_redemptions",
    "affiliates",
    "affiliate_referrals",
    "admin_users",
}
JOURNAL_TABLES = {
    "therapy_sessions",
    "thought_records",
    "emotion_ratings",
    "cognitive_distortions",
    "thought_record_distortions",
    "mood_entries",
    "activity_log",
    "activity_schedule",
    "emotion_definitions",
    "physical_sensation_definitions",
    "coping_strategies",
    "homework_assignments",
    "exposure_hierarchies",
    "exposure_steps",
    "exposure_attempts",
    "safety_behaviors",
    "core_beliefs",
    "values_assessment",
    "relapse_prevention_plan",
}


def _check_names(table_name: str) -> set[str]:
    table = Base.metadata.tables[table_name]
    return {c.name for c in table.constraints if isinstance(c, CheckConstraint)}


def _unique_names(table_name: str) -> set[str]:
    table = Base.metadata.tables[table_name]
    return {c.name for c in table.constraints if isinstance(c, UniqueConstraint)}


def _index_names(table_name: str) -> set[str]:
    return {index.name for index in Base.metadata.tables[table_name].indexes}


def test_all_tables_registered() -> None:
    assert set(Base.metadata.tables) == IDENTITY_TABLES | ADMIN_TABLES | JOURNAL_TABLES


def test_every_user_reference_points_at_users() -> None:
    for table in Base.metadata.tables.values():
        if "user_id" not in table.c:
            continue
        targets = {fk.column.table.name for fk in table.c.user_id.foreign_keys}
        assert targets == {"users"}, table.name


def test_therapists_share_user_ids() -> None:
    therapists = Base.metadata.tables["therapists"]
    targets = {fk.target_fullname for fk in therapists.c.id.foreign_keys}
    assert targets == {"users.id"}


def test_promo_and_affiliate_constraints_present() -> None:
    assert {
        "ck_promo_codes_discount_type",
        "ck_promo_codes_percentage_range",
        "ck_promo_codes_max_uses_positive",
        "ck_promo_codes_current_uses_non_negative",
    } <= _check_names("promo_codes")
    assert "uq_promo_code_redemptions_code_user" in _unique_names("promo_code_redemptions")
    assert "uq_affiliate_referrals_affiliate_user" in _unique_names("affiliate_referrals")
    assert "ck_affiliate_referrals_paid_within_commission" in _check_names("affiliate_referrals")
    assert "idx_affiliate_referrals_unpaid" in _index_names("affiliate_referrals")
    assert "idx_promo_codes_code" in _index_names("promo_codes")


def test_journal_array_checks_present() -> None:
    assert {
        "ck_thought_records_emotions_array",
        "ck_thought_records_emotions_after_array",
    } <= _check_names("thought_records")
    assert "ck_mood_entries_emotions_array" in _check_names("mood_entries")


def test_mood_entry_unique_treats_missing_time_as_value() -> None:
    mood_entries = Base.metadata.tables["mood_entries"]
    (constraint,) = [
        c for c in mood_entries.constraints
        if isinstance(c, UniqueConstraint) and c.name == "uq_mood_entries_user_date_time"
    ]
    assert [col.name for col in constraint.columns] == ["user_id", "entry_date", "entry_time"]
    assert constraint.dialect_options["postgresql"]["nulls_not_distinct"] is True


def test_status_checks_present() -> None:
    assert "ck_homework_assignments_status" in _check_names("homework_assignments")
    assert "ck_exposure_steps_status" in _check_names("exposure_steps")
    assert "ck_admin_users_role" in _check_names("admin_users")


def test_gin_indexes_on_emotion_columns() -> None:
    for table_name, index_name in (
        ("thought_records", "idx_thought_records_emotions"),
        ("mood_entries", "idx_mood_entries_emotions"),
    ):
        (index,) = [i for i in Base.metadata.tables[table_name].indexes if i.name == index_name]
        assert index.dialect_options["postgresql"]["using"] == "gin"


def test_metadata_column_is_named_metadata() -> None:
    for table_name in ("auth_audit_log", "api_usage", "promo_codes", "affiliates"):
        assert "metadata" in Base.metadata.tables[table_name].c


def test_thought_record_distortions_use_composite_key() -> None:
    table = Base.metadata.tables["thought_record_distortions"]
    assert [col.name for col in table.primary_key.columns] == ["thought_record_id", "distortion_id"]
