"""m1_identity_sync

Revision ID: 3a1f0c5b7d21
Revises:
Create Date: 2026-09-01 09:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "3a1f0c5b7d21"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

UPDATED_AT_TABLES = ("users", "user_profiles")


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto;")

    op.execute(
        """
        CREATE OR REPLACE FUNCTION set_updated_at()
        RETURNS trigger
        LANGUAGE plpgsql
        AS $$
        BEGIN
            NEW.updated_at = now();
            RETURN NEW;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION app_current_user_id()
        RETURNS uuid
        LANGUAGE sql
        STABLE
        AS $$
            SELECT NULLIF(current_setting('app.user_id', true), '')::uuid;
        $$;
        """
    )

    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("firebase_uid", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("email_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("phone_number", sa.Text(), nullable=True),
        sa.Column("phone_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("photo_url", sa.Text(), nullable=True),
        sa.Column("provider_id", sa.Text(), nullable=True),
        sa.Column("last_sign_in_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("custom_claims", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("role", sa.Text(), nullable=False, server_default=sa.text("'user'")),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'active'")),
        sa.Column("subscription_tier", sa.Text(), nullable=False, server_default=sa.text("'free'")),
        sa.Column("subscription_status", sa.Text(), nullable=True),
        sa.Column("subscription_current_period_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("status IN ('active','suspended','deleted')", name="ck_users_status"),
        sa.UniqueConstraint("firebase_uid", name="uq_users_firebase_uid"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("idx_users_firebase_uid", "users", ["firebase_uid"])
    op.create_index("idx_users_email", "users", ["email"])
    op.create_index("idx_users_phone_number", "users", ["phone_number"])
    op.create_index("idx_users_role", "users", ["role"])
    op.create_index("idx_users_subscription_tier", "users", ["subscription_tier"])
    op.create_index("idx_users_created_at", "users", [sa.text("created_at DESC")])

    op.create_table(
        "user_profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("first_name", sa.Text(), nullable=True),
        sa.Column("last_name", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("cover_photo_url", sa.Text(), nullable=True),
        sa.Column("website", sa.Text(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("timezone", sa.Text(), nullable=True),
        sa.Column(
            "preferences",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text(
                "'{\"notifications\": {\"email\": true, \"push\": true, \"sms\": false}, "
                "\"theme\": \"light\", \"language\": \"en\"}'::jsonb"
            ),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", name="uq_user_profiles_user_id"),
    )
    op.create_index("idx_user_profiles_user_id", "user_profiles", ["user_id"])

    op.create_table(
        "user_auth_providers",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("provider_id", sa.Text(), nullable=False),
        sa.Column("provider_uid", sa.Text(), nullable=False),
        sa.Column("provider_data", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("linked_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "provider_id", name="uq_user_auth_providers_user_provider"),
        sa.UniqueConstraint("provider_id", "provider_uid", name="uq_user_auth_providers_provider_uid"),
    )
    op.create_index("idx_user_auth_providers_user_id", "user_auth_providers", ["user_id"])
    op.create_index("idx_user_auth_providers_provider", "user_auth_providers", ["provider_id"])

    op.create_table(
        "user_sessions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("firebase_session_id", sa.Text(), nullable=True),
        sa.Column("device_id", sa.Text(), nullable=True),
        sa.Column("device_name", sa.Text(), nullable=True),
        sa.Column("device_type", sa.Text(), nullable=True),
        sa.Column("browser", sa.Text(), nullable=True),
        sa.Column("os", sa.Text(), nullable=True),
        sa.Column("ip_address", postgresql.INET(), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("country", sa.Text(), nullable=True),
        sa.Column("city", sa.Text(), nullable=True),
        sa.Column("latitude", sa.Numeric(10, 8), nullable=True),
        sa.Column("longitude", sa.Numeric(11, 8), nullable=True),
        sa.Column("last_active_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_user_sessions_user_id", "user_sessions", ["user_id"])
    op.create_index("idx_user_sessions_last_active", "user_sessions", [sa.text("last_active_at DESC")])
    op.create_index("idx_user_sessions_expires_at", "user_sessions", ["expires_at"])

    op.create_table(
        "auth_audit_log",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("firebase_uid", sa.Text(), nullable=True),
        sa.Column("event_type", sa.Text(), nullable=False),
        sa.Column("event_status", sa.Text(), nullable=False),
        sa.Column("provider_id", sa.Text(), nullable=True),
        sa.Column("ip_address", postgresql.INET(), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("device_type", sa.Text(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("metadata", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("event_status IN ('success','failure','attempted')", name="ck_auth_audit_log_event_status"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_auth_audit_log_user_id", "auth_audit_log", ["user_id"])
    op.create_index("idx_auth_audit_log_firebase_uid", "auth_audit_log", ["firebase_uid"])
    op.create_index("idx_auth_audit_log_event_type", "auth_audit_log", ["event_type"])
    op.create_index("idx_auth_audit_log_created_at", "auth_audit_log", [sa.text("created_at DESC")])

    op.create_table(
        "therapists",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("display_name", sa.String(200), nullable=False),
        sa.Column("license_number", sa.String(100), nullable=True),
        sa.Column("specialties", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["id"], ["users.id"], ondelete="CASCADE"),
    )

    op.create_table(
        "therapist_patient_relationships",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("therapist_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("patient_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["therapist_id"], ["therapists.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["patient_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("therapist_id", "patient_id", name="uq_therapist_patient_relationships_pair"),
    )
    op.create_index(
        "idx_therapist_patient_relationships_patient",
        "therapist_patient_relationships",
        ["patient_id"],
    )

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
        CREATE OR REPLACE FUNCTION upsert_firebase_user(
            p_firebase_uid text,
            p_email text,
            p_email_verified boolean,
            p_phone_number text,
            p_display_name text,
            p_photo_url text,
            p_provider_id text
        )
        RETURNS uuid
        LANGUAGE plpgsql
        AS $$
        DECLARE
            v_user_id uuid;
        BEGIN
            INSERT INTO users (
                firebase_uid, email, email_verified, phone_number,
                display_name, photo_url, provider_id, last_sign_in_at
            )
            VALUES (
                p_firebase_uid, p_email, COALESCE(p_email_verified, false), p_phone_number,
                p_display_name, p_photo_url, p_provider_id, now()
            )
            ON CONFLICT (firebase_uid) DO UPDATE SET
                email = COALESCE(EXCLUDED.email, users.email),
                email_verified = EXCLUDED.email_verified,
                phone_number = COALESCE(EXCLUDED.phone_number, users.phone_number),
                display_name = COALESCE(EXCLUDED.display_name, users.display_name),
                photo_url = COALESCE(EXCLUDED.photo_url, users.photo_url),
                provider_id = EXCLUDED.provider_id,
                last_sign_in_at = now()
            RETURNING id INTO v_user_id;

            INSERT INTO user_profiles (user_id)
            VALUES (v_user_id)
            ON CONFLICT (user_id) DO NOTHING;

            RETURN v_user_id;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION get_user_by_firebase_uid(p_firebase_uid text)
        RETURNS TABLE (
            id uuid,
            firebase_uid text,
            email text,
            email_verified boolean,
            phone_number text,
            display_name text,
            photo_url text,
            role text,
            status text,
            subscription_tier text,
            custom_claims jsonb
        )
        LANGUAGE plpgsql
        STABLE
        AS $$
        BEGIN
            RETURN QUERY
            SELECT
                u.id, u.firebase_uid, u.email, u.email_verified, u.phone_number,
                u.display_name, u.photo_url, u.role, u.status, u.subscription_tier,
                u.custom_claims
            FROM users u
            WHERE u.firebase_uid = p_firebase_uid
              AND u.deleted_at IS NULL;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION update_user_custom_claims(p_user_id uuid, p_claims jsonb)
        RETURNS boolean
        LANGUAGE plpgsql
        AS $$
        BEGIN
            UPDATE users SET custom_claims = p_claims WHERE id = p_user_id;
            RETURN FOUND;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION revoke_user_sessions(p_user_id uuid)
        RETURNS integer
        LANGUAGE plpgsql
        AS $$
        DECLARE
            v_count integer;
        BEGIN
            UPDATE user_sessions
            SET revoked_at = now()
            WHERE user_id = p_user_id
              AND revoked_at IS NULL
              AND (expires_at IS NULL OR expires_at > now());
            GET DIAGNOSTICS v_count = ROW_COUNT;
            RETURN v_count;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION cleanup_expired_sessions()
        RETURNS integer
        LANGUAGE plpgsql
        AS $$
        DECLARE
            v_count integer;
        BEGIN
            DELETE FROM user_sessions
            WHERE expires_at < now() - INTERVAL '30 days';
            GET DIAGNOSTICS v_count = ROW_COUNT;
            RETURN v_count;
        END;
        $$;
        """
    )


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS cleanup_expired_sessions();")
    op.execute("DROP FUNCTION IF EXISTS revoke_user_sessions(uuid);")
    op.execute("DROP FUNCTION IF EXISTS update_user_custom_claims(uuid, jsonb);")
    op.execute("DROP FUNCTION IF EXISTS get_user_by_firebase_uid(text);")
    op.execute("DROP FUNCTION IF EXISTS upsert_firebase_user(text, text, boolean, text, text, text, text);")
    for table_name in UPDATED_AT_TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS trg_{table_name}_updated_at ON {table_name};")

    op.drop_index("idx_therapist_patient_relationships_patient", table_name="therapist_patient_relationships")
    op.drop_table("therapist_patient_relationships")
    op.drop_table("therapists")
    op.drop_index("idx_auth_audit_log_created_at", table_name="auth_audit_log")
    op.drop_index("idx_auth_audit_log_event_type", table_name="auth_audit_log")
    op.drop_index("idx_auth_audit_log_firebase_uid", table_name="auth_audit_log")
    op.drop_index("idx_auth_audit_log_user_id", table_name="auth_audit_log")
    op.drop_table("auth_audit_log")
    op.drop_index("idx_user_sessions_expires_at", table_name="user_sessions")
    op.drop_index("idx_user_sessions_last_active", table_name="user_sessions")
    op.drop_index("idx_user_sessions_user_id", table_name="user_sessions")
    op.drop_table("user_sessions")
    op.drop_index("idx_user_auth_providers_provider", table_name="user_auth_providers")
    op.drop_index("idx_user_auth_providers_user_id", table_name="user_auth_providers")
    op.drop_table("user_auth_providers")
    op.drop_index("idx_user_profiles_user_id", table_name="user_profiles")
    op.drop_table("user_profiles")
    op.drop_index("idx_users_created_at", table_name="users")
    op.drop_index("idx_users_subscription_tier", table_name="users")
    op.drop_index("idx_users_role", table_name="users")
    op.drop_index("idx_users_phone_number", table_name="users")
    op.drop_index("idx_users_email", table_name="users")
    op.drop_index("idx_users_firebase_uid", table_name="users")
    op.drop_table("users")

    op.execute("DROP FUNCTION IF EXISTS app_current_user_id();")
    op.execute("DROP FUNCTION IF EXISTS set_updated_at();")
