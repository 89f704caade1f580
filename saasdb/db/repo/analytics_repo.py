from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Date, Text, func, literal, select
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.analytics_events import AnalyticsEvent
from saasdb.db.models.api_usage import ApiUsage
from saasdb.db.models.daily_metrics import DailyMetrics


class AnalyticsRepo:
    @staticmethod
    async def log_event(
        session: AsyncSession,
        *,
        user_id: UUID | None,
        event_type: str,
        event_data: dict[str, object] | None = None,
        session_id: str | None = None,
    ) -> UUID:
        stmt = select(
            func.log_analytics_event(
                literal(user_id, PG_UUID(as_uuid=True)),
                literal(event_type, Text),
                literal(event_data or {}, JSONB),
                literal(session_id, Text),
                type_=PG_UUID(as_uuid=True),
            )
        )
        result = await session.execute(stmt)
        return result.scalar_one()

    @staticmethod
    async def refresh_daily_metrics(session: AsyncSession, *, metric_date: date) -> None:
        await session.execute(select(func.update_daily_metrics(literal(metric_date, Date))))

    @staticmethod
    async def record_api_usage(session: AsyncSession, *, usage: ApiUsage) -> ApiUsage:
        session.add(usage)
        await session.flush()
        return usage

    @staticmethod
    async def get_daily_metrics(session: AsyncSession, metric_date: date) -> DailyMetrics | None:
        stmt = select(DailyMetrics).where(DailyMetrics.metric_date == metric_date)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_daily_metrics(
        session: AsyncSession,
        *,
        from_date: date,
        to_date: date,
    ) -> list[DailyMetrics]:
        stmt = (
            select(DailyMetrics)
            .where(DailyMetrics.metric_date >= from_date, DailyMetrics.metric_date <= to_date)
            .order_by(DailyMetrics.metric_date.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def count_events_by_type(
        session: AsyncSession,
        *,
        from_utc: datetime,
        to_utc: datetime,
    ) -> dict[str, int]:
        stmt = (
            select(AnalyticsEvent.event_type, func.count(AnalyticsEvent.id))
            .where(AnalyticsEvent.created_at >= from_utc, AnalyticsEvent.created_at < to_utc)
            .group_by(AnalyticsEvent.event_type)
        )
        result = await session.execute(stmt)
        return {str(event_type): int(count) for event_type, count in result.all()}
