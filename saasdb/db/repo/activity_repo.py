from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Integer, func, literal, select, update
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.activity_log import ActivityLogEntry
from saasdb.db.models.activity_schedule import ScheduledActivity
from saasdb.db.repo.rows import AdherenceWeek
from saasdb.db.views import activity_effectiveness


class ActivityRepo:
    @staticmethod
    async def log_activity(session: AsyncSession, *, entry: ActivityLogEntry) -> ActivityLogEntry:
        session.add(entry)
        await session.flush()
        return entry

    @staticmethod
    async def schedule(
        session: AsyncSession,
        *,
        activity: ScheduledActivity,
    ) -> ScheduledActivity:
        session.add(activity)
        await session.flush()
        return activity

    @staticmethod
    async def list_scheduled(
        session: AsyncSession,
        *,
        user_id: UUID,
        from_date: date,
        to_date: date,
    ) -> list[ScheduledActivity]:
        stmt = (
            select(ScheduledActivity)
            .where(
                ScheduledActivity.user_id == user_id,
                ScheduledActivity.planned_date >= from_date,
                ScheduledActivity.planned_date <= to_date,
                ScheduledActivity.is_archived.is_(False),
            )
            .order_by(ScheduledActivity.planned_date.asc(), ScheduledActivity.planned_time.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def complete_scheduled(
        session: AsyncSession,
        *,
        scheduled_id: UUID,
        activity_log_id: UUID | None,
        actual_difficulty: int | None,
        completed_at: datetime,
    ) -> int:
        stmt = (
            update(ScheduledActivity)
            .where(ScheduledActivity.id == scheduled_id, ScheduledActivity.completed.is_(False))
            .values(
                completed=True,
                completed_at=completed_at,
                activity_log_id=activity_log_id,
                actual_difficulty=actual_difficulty,
            )
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    async def get_ba_adherence(
        session: AsyncSession,
        *,
        user_id: UUID,
        weeks: int = 4,
    ) -> list[AdherenceWeek]:
        fn = func.get_ba_adherence(
            literal(user_id, PG_UUID(as_uuid=True)),
            literal(weeks, Integer),
        ).table_valued(
            "week_start",
            "planned_activities",
            "completed_activities",
            "adherence_rate",
        )
        stmt = select(
            fn.c.week_start,
            fn.c.planned_activities,
            fn.c.completed_activities,
            fn.c.adherence_rate,
        ).order_by(fn.c.week_start)
        result = await session.execute(stmt)
        return [
            AdherenceWeek(
                week_start=week_start,
                planned_activities=int(planned),
                completed_activities=int(completed),
                adherence_rate=rate,
            )
            for week_start, planned, completed, rate in result.all()
        ]

    @staticmethod
    async def effectiveness(session: AsyncSession, *, user_id: UUID) -> list[dict[str, object]]:
        stmt = (
            select(activity_effectiveness)
            .where(activity_effectiveness.c.user_id == user_id)
            .order_by(activity_effectiveness.c.avg_mood_improvement.desc().nullslast())
        )
        result = await session.execute(stmt)
        return [dict(row) for row in result.mappings().all()]
