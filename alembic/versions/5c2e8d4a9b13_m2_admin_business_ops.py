"""m2_admin_business_ops

Revision ID: 5c2e8d4a9b13
Revises: 3a1f0c5b7d21
Create Date: 2026-09-01 09:10:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "5c2e8d4a9b13"
down_revision: str | None = "3a1f0c5b7d21"
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

UPDATED_AT_TABLES = ("daily_metrics", "promo_codes", "affiliates", "admin_users")
DAILY_COUNTERS = (
    "total_users",
    "new_users",
    "active_users",
    "free_users",
    "pro_users",
    "premium_users",
    "revenue_cents",
    "mrr_cents",
    "total_actions",
    "total_ai_calls",
    "ai_cost_cents",
    "infrastructure_cost_cents",
    "avg_session_duration_seconds",
)


def _jsonb_object(name: str) -> sa.Column:
    return sa.Column(
        name,
        postgresql.JSONB(astext_type=sa.Text()),
        nullable=False,
        server_default=sa.text("'{}'::jsonb"),
    )


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()"))


def _updated_at() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()"))


def _uuid_pk() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        primary_key=True,
        server_default=sa.text("gen_random_uuid()"),
    )


def upgrade() -> None:
    op.create_table(
        "analytics_events",
        _uuid_pk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("event_type", sa.Text(), nullable=False),
        _jsonb_object("event_data"),
        sa.Column("session_id", sa.Text(), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("ip_address", postgresql.INET(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_analytics_events_user", "analytics_events", ["user_id", sa.text("created_at DESC")])
    op.create_index("idx_analytics_events_type", "analytics_events", ["event_type", sa.text("created_at DESC")])
    op.create_index("idx_analytics_events_session", "analytics_events", ["session_id"])

    op.create_table(
        "api_usage",
        _uuid_pk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("endpoint", sa.Text(), nullable=False),
        sa.Column("method", sa.Text(), nullable=False),
        sa.Column("status_code", sa.Integer(), nullable=True),
        sa.Column("response_time_ms", sa.Integer(), nullable=True),
        sa.Column("tokens_used", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("cost_cents", sa.Integer(), nullable=False, server_default=sa.text("0")),
        _jsonb_object("metadata"),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_api_usage_user", "api_usage", ["user_id", sa.text("created_at DESC")])
    op.create_index("idx_api_usage_endpoint", "api_usage", ["endpoint", sa.text("created_at DESC")])
    op.create_index("idx_api_usage_date", "api_usage", [sa.text("created_at DESC")])

    op.create_table(
        "daily_metrics",
        _uuid_pk(),
        sa.Column("metric_date", sa.Date(), nullable=False),
        *[
            sa.Column(name, sa.Integer(), nullable=False, server_default=sa.text("0"))
            for name in DAILY_COUNTERS
        ],
        sa.Column("total_tokens_used", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        _created_at(),
        _updated_at(),
        sa.UniqueConstraint("metric_date", name="uq_daily_metrics_metric_date"),
    )
    op.create_index("idx_daily_metrics_date", "daily_metrics", [sa.text("metric_date DESC")])

    op.create_table(
        "promo_codes",
        _uuid_pk(),
        sa.Column("code", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("discount_type", sa.Text(), nullable=False),
        sa.Column("discount_value", sa.Integer(), nullable=False),
        sa.Column(
            "applies_to",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default=sa.text("ARRAY[]::text[]"),
        ),
        sa.Column("max_uses", sa.Integer(), nullable=True),
        sa.Column("current_uses", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("valid_from", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("stripe_coupon_id", sa.Text(), nullable=True),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=True),
        _jsonb_object("metadata"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint(
            "discount_type IN ('percentage','fixed_amount','trial_extension')",
            name="ck_promo_codes_discount_type",
        ),
        sa.CheckConstraint("discount_value >= 0", name="ck_promo_codes_discount_value_non_negative"),
        sa.CheckConstraint(
            "discount_type <> 'percentage' OR discount_value <= 100",
            name="ck_promo_codes_percentage_range",
        ),
        sa.CheckConstraint("max_uses IS NULL OR max_uses > 0", name="ck_promo_codes_max_uses_positive"),
        sa.CheckConstraint("current_uses >= 0", name="ck_promo_codes_current_uses_non_negative"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"]),
        sa.UniqueConstraint("code", name="uq_promo_codes_code"),
    )
    op.create_index(
        "idx_promo_codes_code",
        "promo_codes",
        ["code"],
        postgresql_where=sa.text("is_active = TRUE"),
    )
    op.create_index("idx_promo_codes_active", "promo_codes", ["is_active", "valid_until"])

    op.create_table(
        "promo_code_redemptions",
        _uuid_pk(),
        sa.Column("promo_code_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("subscription_id", sa.Text(), nullable=True),
        sa.Column("discount_amount_cents", sa.Integer(), nullable=True),
        sa.Column("redeemed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["promo_code_id"], ["promo_codes.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("promo_code_id", "user_id", name="uq_promo_code_redemptions_code_user"),
    )
    op.create_index("idx_promo_redemptions_code", "promo_code_redemptions", ["promo_code_id"])
    op.create_index("idx_promo_redemptions_user", "promo_code_redemptions", ["user_id"])

    op.create_table(
        "affiliates",
        _uuid_pk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("affiliate_code", sa.Text(), nullable=False),
        sa.Column("commission_tier", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("commission_rate", sa.Integer(), nullable=False, server_default=sa.text("30")),
        sa.Column("total_referrals", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_revenue_cents", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_commission_cents", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("payout_method", sa.Text(), nullable=True),
        _jsonb_object("payout_details"),
        _jsonb_object("metadata"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint("commission_tier IN (1, 2, 3)", name="ck_affiliates_commission_tier"),
        sa.CheckConstraint("commission_rate BETWEEN 0 AND 100", name="ck_affiliates_commission_rate_range"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("affiliate_code", name="uq_affiliates_affiliate_code"),
    )
    op.create_index(
        "idx_affiliates_code",
        "affiliates",
        ["affiliate_code"],
        postgresql_where=sa.text("is_active = TRUE"),
    )
    op.create_index("idx_affiliates_user", "affiliates", ["user_id"])
    op.create_index("idx_affiliates_revenue", "affiliates", [sa.text("total_revenue_cents DESC")])

    op.create_table(
        "affiliate_referrals",
        _uuid_pk(),
        sa.Column("affiliate_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("referred_user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("subscription_id", sa.Text(), nullable=True),
        sa.Column("revenue_cents", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("commission_cents", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("commission_paid", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("commission_paid_cents", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("referred_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("converted_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "revenue_cents >= 0 AND commission_cents >= 0",
            name="ck_affiliate_referrals_amounts_non_negative",
        ),
        sa.CheckConstraint(
            "commission_paid_cents >= 0 AND commission_paid_cents <= commission_cents",
            name="ck_affiliate_referrals_paid_within_commission",
        ),
        sa.ForeignKeyConstraint(["affiliate_id"], ["affiliates.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["referred_user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("affiliate_id", "referred_user_id", name="uq_affiliate_referrals_affiliate_user"),
    )
    op.create_index(
        "idx_affiliate_referrals_affiliate",
        "affiliate_referrals",
        ["affiliate_id", sa.text("referred_at DESC")],
    )
    op.create_index("idx_affiliate_referrals_user", "affiliate_referrals", ["referred_user_id"])
    op.create_index(
        "idx_affiliate_referrals_unpaid",
        "affiliate_referrals",
        ["commission_paid"],
        postgresql_where=sa.text("commission_paid = FALSE"),
    )

    op.create_table(
        "admin_users",
        _uuid_pk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("role", sa.Text(), nullable=False, server_default=sa.text("'analyst'")),
        _jsonb_object("permissions"),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint("role IN ('super_admin','admin','analyst')", name="ck_admin_users_role"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", name="uq_admin_users_user_id"),
    )
    op.create_index("idx_admin_users_user", "admin_users", ["user_id"])

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
        CREATE OR REPLACE FUNCTION is_admin(p_user_id uuid)
        RETURNS boolean
        LANGUAGE plpgsql
        STABLE
        SECURITY DEFINER
        SET search_path = public
        AS $$
        BEGIN
            RETURN EXISTS (SELECT 1 FROM admin_users WHERE user_id = p_user_id);
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION log_analytics_event(
            p_user_id uuid,
            p_event_type text,
            p_event_data jsonb DEFAULT '{}'::jsonb,
            p_session_id text DEFAULT NULL
        )
        RETURNS uuid
        LANGUAGE plpgsql
        SECURITY DEFINER
        SET search_path = public
        AS $$
        DECLARE
            v_event_id uuid;
        BEGIN
            INSERT INTO analytics_events (user_id, event_type, event_data, session_id)
            VALUES (p_user_id, p_event_type, COALESCE(p_event_data, '{}'::jsonb), p_session_id)
            RETURNING id INTO v_event_id;
            RETURN v_event_id;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION update_daily_metrics(p_metric_date date DEFAULT CURRENT_DATE)
        RETURNS void
        LANGUAGE plpgsql
        SECURITY DEFINER
        SET search_path = public
        AS $$
        BEGIN
            INSERT INTO daily_metrics (
                metric_date,
                total_users, new_users, active_users,
                free_users, pro_users, premium_users,
                total_actions, total_ai_calls, total_tokens_used, ai_cost_cents
            )
            SELECT
                p_metric_date,
                (SELECT COUNT(*) FROM users
                  WHERE deleted_at IS NULL AND created_at::date <= p_metric_date),
                (SELECT COUNT(*) FROM users WHERE created_at::date = p_metric_date),
                (SELECT COUNT(DISTINCT user_id) FROM analytics_events
                  WHERE created_at::date = p_metric_date),
                (SELECT COUNT(*) FROM users
                  WHERE deleted_at IS NULL AND created_at::date <= p_metric_date
                    AND subscription_tier = 'free'),
                (SELECT COUNT(*) FROM users
                  WHERE deleted_at IS NULL AND created_at::date <= p_metric_date
                    AND subscription_tier = 'pro'),
                (SELECT COUNT(*) FROM users
                  WHERE deleted_at IS NULL AND created_at::date <= p_metric_date
                    AND subscription_tier = 'premium'),
                (SELECT COUNT(*) FROM analytics_events WHERE created_at::date = p_metric_date),
                (SELECT COUNT(*) FROM api_usage WHERE created_at::date = p_metric_date),
                (SELECT COALESCE(SUM(tokens_used), 0) FROM api_usage
                  WHERE created_at::date = p_metric_date),
                (SELECT COALESCE(SUM(cost_cents), 0) FROM api_usage
                  WHERE created_at::date = p_metric_date)
            ON CONFLICT (metric_date) DO UPDATE SET
                total_users = EXCLUDED.total_users,
                new_users = EXCLUDED.new_users,
                active_users = EXCLUDED.active_users,
                free_users = EXCLUDED.free_users,
                pro_users = EXCLUDED.pro_users,
                premium_users = EXCLUDED.premium_users,
                total_actions = EXCLUDED.total_actions,
                total_ai_calls = EXCLUDED.total_ai_calls,
                total_tokens_used = EXCLUDED.total_tokens_used,
                ai_cost_cents = EXCLUDED.ai_cost_cents;
        END;
        $$;
        """
    )

    op.execute(
        """
        CREATE OR REPLACE FUNCTION fn_promo_code_usage_refresh(p_promo_code_id uuid)
        RETURNS void
        LANGUAGE plpgsql
        AS $$
        BEGIN
            UPDATE promo_codes
            SET current_uses = (
                SELECT COUNT(*) FROM promo_code_redemptions
                WHERE promo_code_id = p_promo_code_id
            )
            WHERE id = p_promo_code_id;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION fn_promo_code_redemptions_usage()
        RETURNS trigger
        LANGUAGE plpgsql
        AS $$
        BEGIN
            IF TG_OP IN ('INSERT', 'UPDATE') THEN
                PERFORM fn_promo_code_usage_refresh(NEW.promo_code_id);
            END IF;
            IF TG_OP = 'DELETE'
               OR (TG_OP = 'UPDATE' AND OLD.promo_code_id IS DISTINCT FROM NEW.promo_code_id) THEN
                PERFORM fn_promo_code_usage_refresh(OLD.promo_code_id);
            END IF;
            RETURN NULL;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE TRIGGER trg_promo_code_redemptions_usage
        AFTER INSERT OR UPDATE OF promo_code_id OR DELETE ON promo_code_redemptions
        FOR EACH ROW
        EXECUTE FUNCTION fn_promo_code_redemptions_usage();
        """
    )

    op.execute(
        """
        CREATE OR REPLACE FUNCTION fn_affiliate_totals_refresh(p_affiliate_id uuid)
        RETURNS void
        LANGUAGE plpgsql
        AS $$
        BEGIN
            UPDATE affiliates a
            SET total_referrals = agg.referrals,
                total_revenue_cents = agg.revenue,
                total_commission_cents = agg.commission
            FROM (
                SELECT
                    COUNT(*) AS referrals,
                    COALESCE(SUM(revenue_cents), 0) AS revenue,
                    COALESCE(SUM(commission_cents), 0) AS commission
                FROM affiliate_referrals
                WHERE affiliate_id = p_affiliate_id
            ) agg
            WHERE a.id = p_affiliate_id;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION fn_affiliate_referrals_totals()
        RETURNS trigger
        LANGUAGE plpgsql
        AS $$
        BEGIN
            IF TG_OP IN ('INSERT', 'UPDATE') THEN
                PERFORM fn_affiliate_totals_refresh(NEW.affiliate_id);
            END IF;
            IF TG_OP = 'DELETE'
               OR (TG_OP = 'UPDATE' AND OLD.affiliate_id IS DISTINCT FROM NEW.affiliate_id) THEN
                PERFORM fn_affiliate_totals_refresh(OLD.affiliate_id);
            END IF;
            RETURN NULL;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE TRIGGER trg_affiliate_referrals_totals
        AFTER INSERT OR UPDATE OR DELETE ON affiliate_referrals
        FOR EACH ROW
        EXECUTE FUNCTION fn_affiliate_referrals_totals();
        """
    )


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS trg_affiliate_referrals_totals ON affiliate_referrals;")
    op.execute("DROP FUNCTION IF EXISTS fn_affiliate_referrals_totals();")
    op.execute("DROP FUNCTION IF EXISTS fn_affiliate_totals_refresh(uuid);")
    op.execute("DROP TRIGGER IF EXISTS trg_promo_code_redemptions_usage ON promo_code_redemptions;")
    op.execute("DROP FUNCTION IF EXISTS fn_promo_code_redemptions_usage();")
    op.execute("DROP FUNCTION IF EXISTS fn_promo_code_usage_refresh(uuid);")
    op.execute("DROP FUNCTION IF EXISTS update_daily_metrics(date);")
    op.execute("DROP FUNCTION IF EXISTS log_analytics_event(uuid, text, jsonb, text);")
    op.execute("DROP FUNCTION IF EXISTS is_admin(uuid);")
    for table_name in UPDATED_AT_TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS trg_{table_name}_updated_at ON {table_name};")

    op.drop_index("idx_admin_users_user", table_name="admin_users")
    op.drop_table("admin_users")
    op.drop_index("idx_affiliate_referrals_unpaid", table_name="affiliate_referrals")
    op.drop_index("idx_affiliate_referrals_user", table_name="affiliate_referrals")
    op.drop_index("idx_affiliate_referrals_affiliate", table_name="affiliate_referrals")
    op.drop_table("affiliate_referrals")
    op.drop_index("idx_affiliates_revenue", table_name="affiliates")
    op.drop_index("idx_affiliates_user", table_name="affiliates")
    op.drop_index("idx_affiliates_code", table_name="affiliates")
    op.drop_table("affiliates")
    op.drop_index("idx_promo_redemptions_user", table_name="promo_code_redemptions")
    op.drop_index("idx_promo_redemptions_code", table_name="promo_code_redemptions")
    op.drop_table("promo_code_redemptions")
    op.drop_index("idx_promo_codes_active", table_name="promo_codes")
    op.drop_index("idx_promo_codes_code", table_name="promo_codes")
    op.drop_table("promo_codes")
    op.drop_index("idx_daily_metrics_date", table_name="daily_metrics")
    op.drop_table("daily_metrics")
    op.drop_index("idx_api_usage_date", table_name="api_usage")
    op.drop_index("idx_api_usage_endpoint", table_name="api_usage")
    op.drop_index("idx_api_usage_user", table_name="api_usage")
    op.drop_table("api_usage")
    op.drop_index("idx_analytics_events_session", table_name="analytics_events")
    op.drop_index("idx_analytics_events_type", table_name="analytics_events")
    op.drop_index("idx_analytics_events_user", table_name="analytics_events")
    op.drop_table("analytics_events")
