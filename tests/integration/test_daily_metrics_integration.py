from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import func, select

from saasdb.admin.analytics.service import AnalyticsService
from saasdb.db.models.api_usage import ApiUsage
from saasdb.db.models.daily_metrics import DailyMetrics
from saasdb.db.repo.admin_users_repo import AdminUsersRepo
from saasdb.db.repo.analytics_repo import AnalyticsRepo
from saasdb.db.session import SessionLocal
from tests.integration.identity_fixtures import _create_user


@pytest.mark.asyncio
async def test_daily_metrics_refresh_is_idempotent() -> None:
    user_1 = await _create_user("metrics-1")
    await _create_user("metrics-2")

    async with SessionLocal.begin() as session:
        # created_at::date is evaluated in the server time zone.
        today = await session.scalar(select(func.current_date()))
        await AnalyticsService.track(session, event_type="thought_record_created", user_id=user_1)
        await AnalyticsService.track(session, event_type="mood_logged", user_id=user_1)
        await AnalyticsRepo.record_api_usage(
            session,
            usage=ApiUsage(
                user_id=user_1,
                endpoint="/v1/reframe",
                method="POST",
                tokens_used=1200,
                cost_cents=3,
            ),
        )

    for _ in range(2):
        async with SessionLocal.begin() as session:
            refreshed = await AnalyticsService.refresh_daily_metrics(session, metric_date=today)
        assert refreshed == [today]

    async with SessionLocal() as session:
        rows = await session.scalar(select(func.count()).select_from(DailyMetrics))
        metrics = await AnalyticsRepo.get_daily_metrics(session, today)

    assert rows == 1
    assert metrics is not None
    assert metrics.total_users == 2
    assert metrics.new_users == 2
    assert metrics.free_users == 2
    assert metrics.total_actions == 2
    assert metrics.total_ai_calls == 1
    assert metrics.total_tokens_used == 1200


@pytest.mark.asyncio
async def test_metrics_for_admin_requires_admin_row() -> None:
    admin_id = await _create_user("metrics-admin")
    async with SessionLocal.begin() as session:
        await AdminUsersRepo.grant(session, user_id=admin_id, role="analyst")
        await AnalyticsService.refresh_daily_metrics(session, metric_date=date(2026, 1, 1))

    async with SessionLocal() as session:
        rows = await AnalyticsService.metrics_for_admin(
            session,
            admin_user_id=admin_id,
            from_date=date(2026, 1, 1),
            to_date=date(2026, 1, 1),
        )
    assert [row.metric_date for row in rows] == [date(2026, 1, 1)]
