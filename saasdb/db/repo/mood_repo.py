from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, Integer, String, Text, Time, func, literal, select
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID, insert
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.coping_strategies import CopingStrategy
from saasdb.db.models.emotion_definitions import EmotionDefinition
from saasdb.db.models.mood_entries import MoodEntry
from saasdb.db.models.physical_sensation_definitions import PhysicalSensationDefinition
from saasdb.db.repo.rows import EmotionTrendPoint
from saasdb.db.views import weekly_mood_summary


class MoodRepo:
    @staticmethod
    async def record_daily_mood(
        session: AsyncSession,
        *,
        user_id: UUID,
        entry_date: date,
        overall_mood: int | None,
        emotions: list[dict[str, object]],
        energy_level: int | None = None,
        sleep_quality: int | None = None,
        notes: str | None = None,
        entry_time: time | None = None,
    ) -> UUID:
        stmt = select(
            func.record_daily_mood(
                literal(user_id, PG_UUID(as_uuid=True)),
                literal(entry_date, Date),
                literal(overall_mood, Integer),
                literal(emotions, JSONB),
                literal(energy_level, Integer),
                literal(sleep_quality, Integer),
                literal(notes, Text),
                literal(entry_time, Time),
                type_=PG_UUID(as_uuid=True),
            )
        )
        result = await session.execute(stmt)
        return result.scalar_one()

    @staticmethod
    async def get_entry(session: AsyncSession, entry_id: UUID) -> MoodEntry | None:
        return await session.get(MoodEntry, entry_id)

    @staticmethod
    async def list_entries(
        session: AsyncSession,
        *,
        user_id: UUID,
        from_date: date,
        to_date: date,
    ) -> list[MoodEntry]:
        stmt = (
            select(MoodEntry)
            .where(
                MoodEntry.user_id == user_id,
                MoodEntry.entry_date >= from_date,
                MoodEntry.entry_date <= to_date,
                MoodEntry.is_archived.is_(False),
            )
            .order_by(MoodEntry.entry_date.asc(), MoodEntry.entry_time.asc().nullsfirst())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_emotion_trend(
        session: AsyncSession,
        *,
        user_id: UUID,
        emotion: str,
        days: int = 30,
    ) -> list[EmotionTrendPoint]:
        fn = func.get_emotion_trend(
            literal(user_id, PG_UUID(as_uuid=True)),
            literal(emotion, String(50)),
            literal(days, Integer),
        ).table_valued("date", "avg_intensity", "count")
        stmt = select(fn.c.date, fn.c.avg_intensity, fn.c.count).order_by(fn.c.date)
        result = await session.execute(stmt)
        return [
            EmotionTrendPoint(day=day, avg_intensity=avg_intensity, count=int(count))
            for day, avg_intensity, count in result.all()
        ]

    @staticmethod
    async def weekly_summary(
        session: AsyncSession,
        *,
        user_id: UUID,
        weeks: int = 8,
    ) -> list[dict[str, object]]:
        stmt = (
            select(weekly_mood_summary)
            .where(weekly_mood_summary.c.user_id == user_id)
            .order_by(weekly_mood_summary.c.week_start.desc())
            .limit(weeks)
        )
        result = await session.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def list_emotion_definitions(session: AsyncSession) -> list[EmotionDefinition]:
        stmt = select(EmotionDefinition).order_by(EmotionDefinition.display_order.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_sensation_definitions(
        session: AsyncSession,
    ) -> list[PhysicalSensationDefinition]:
        stmt = select(PhysicalSensationDefinition).order_by(PhysicalSensationDefinition.id.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def record_coping_use(
        session: AsyncSession,
        *,
        user_id: UUID,
        strategy_name: str,
        effectiveness: int,
        category: str | None = None,
    ) -> CopingStrategy:
        """Count one use of a strategy and fold ``effectiveness`` into its running mean."""
        stmt = insert(CopingStrategy).values(
            user_id=user_id,
            strategy_name=strategy_name,
            category=category,
            times_used=1,
            avg_effectiveness=Decimal(effectiveness),
        )
        stmt = stmt.on_conflict_do_update(
            constraint="uq_coping_strategies_user_name",
            set_={
                "times_used": CopingStrategy.times_used + 1,
                "avg_effectiveness": (
                    func.coalesce(CopingStrategy.avg_effectiveness, 0) * CopingStrategy.times_used
                    + stmt.excluded.avg_effectiveness
                )
                / (CopingStrategy.times_used + 1),
            },
        ).returning(CopingStrategy)
        result = await session.execute(stmt.execution_options(populate_existing=True))
        return result.scalar_one()
