from __future__ import annotations

from datetime import date, timedelta
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.daily_metrics import DailyMetrics
from saasdb.db.repo.admin_users_repo import AdminUsersRepo
from saasdb.db.repo.analytics_repo import AnalyticsRepo

logger = structlog.get_logger(__name__)


class AnalyticsService:
    @staticmethod
    async def track(
        session: AsyncSession,
        *,
        event_type: str,
        user_id: UUID | None = None,
        event_data: dict[str, object] | None = None,
        session_id: str | None = None,
    ) -> UUID:
        event_id = await AnalyticsRepo.log_event(
            session,
            user_id=user_id,
            event_type=event_type,
            event_data=event_data,
            session_id=session_id,
        )
        logger.debug("analytics_event_logged", event_type=event_type, event_id=str(event_id))
        return event_id

    @staticmethod
    async def refresh_daily_metrics(
        session: AsyncSession,
        *,
        metric_date: date,
        days_back: int = 0,
    ) -> list[date]:
        """Recompute metrics for ``metric_date`` and the ``days_back`` days before it."""
        if days_back < 0:
            raise ValueError("days_back must be non-negative")

        refreshed: list[date] = []
        for offset in range(days_back, -1, -1):
            day = metric_date - timedelta(days=offset)
            await AnalyticsRepo.refresh_daily_metrics(session, metric_date=day)
            refreshed.append(day)

        logger.info(
            "daily_metrics_refreshed",
            from_date=refreshed[0].isoformat(),
            to_date=refreshed[-1].isoformat(),
            days=len(refreshed),
        )
        return refreshed

    @staticmethod
    async def metrics_for_admin(
        session: AsyncSession,
        *,
        admin_user_id: UUID,
        from_date: date,
        to_date: date,
    ) -> list[DailyMetrics]:
        if not await AdminUsersRepo.is_admin(session, admin_user_id):
            raise PermissionError("daily metrics are restricted to admin users")
        return await AnalyticsRepo.list_daily_metrics(session, from_date=from_date, to_date=to_date)
