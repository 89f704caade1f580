from __future__ import annotations

from datetime import date

import pytest

from saasdb.admin.analytics import service as analytics_service
from saasdb.admin.analytics.service import AnalyticsService


def _patch_refresh(monkeypatch: pytest.MonkeyPatch, calls: list[date]) -> None:
    async def _refresh(session: object, *, metric_date: date) -> None:  # noqa: ARG001
        calls.append(metric_date)

    monkeypatch.setattr(analytics_service.AnalyticsRepo, "refresh_daily_metrics", _refresh)


@pytest.mark.asyncio
async def test_refresh_daily_metrics_walks_oldest_day_first(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[date] = []
    _patch_refresh(monkeypatch, calls)

    refreshed = await AnalyticsService.refresh_daily_metrics(
        object(), metric_date=date(2026, 3, 2), days_back=2
    )

    assert refreshed == [date(2026, 2, 28), date(2026, 3, 1), date(2026, 3, 2)]
    assert calls == refreshed


@pytest.mark.asyncio
async def test_refresh_daily_metrics_single_day(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[date] = []
    _patch_refresh(monkeypatch, calls)

    refreshed = await AnalyticsService.refresh_daily_metrics(object(), metric_date=date(2026, 3, 2))

    assert refreshed == [date(2026, 3, 2)]


@pytest.mark.asyncio
async def test_refresh_daily_metrics_rejects_negative_window(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[date] = []
    _patch_refresh(monkeypatch, calls)

    with pytest.raises(ValueError, match="non-negative"):
        await AnalyticsService.refresh_daily_metrics(object(), metric_date=date(2026, 3, 2), days_back=-1)
    assert calls == []


@pytest.mark.asyncio
async def test_metrics_for_admin_rejects_non_admin(monkeypatch: pytest.MonkeyPatch) -> None:
    async def _is_admin(session: object, user_id: object) -> bool:  # noqa: ARG001
        return False

    monkeypatch.setattr(analytics_service.AdminUsersRepo, "is_admin", _is_admin)

    with pytest.raises(PermissionError):
        await AnalyticsService.metrics_for_admin(
            object(),
            admin_user_id=object(),  # type: ignore[arg-type]
            from_date=date(2026, 3, 1),
            to_date=date(2026, 3, 2),
        )
