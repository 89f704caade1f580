from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.exposure_attempts import ExposureAttempt
from saasdb.db.models.exposure_hierarchies import ExposureHierarchy
from saasdb.db.models.exposure_steps import ExposureStep


class ExposureRepo:
    @staticmethod
    async def create_hierarchy(
        session: AsyncSession,
        *,
        hierarchy: ExposureHierarchy,
    ) -> ExposureHierarchy:
        session.add(hierarchy)
        await session.flush()
        return hierarchy

    @staticmethod
    async def get_hierarchy(session: AsyncSession, hierarchy_id: UUID) -> ExposureHierarchy | None:
        return await session.get(ExposureHierarchy, hierarchy_id)

    @staticmethod
    async def list_hierarchies(
        session: AsyncSession,
        *,
        user_id: UUID,
        active_only: bool = True,
    ) -> list[ExposureHierarchy]:
        stmt = (
            select(ExposureHierarchy)
            .where(ExposureHierarchy.user_id == user_id)
            .order_by(ExposureHierarchy.created_at.desc())
        )
        if active_only:
            stmt = stmt.where(ExposureHierarchy.is_active.is_(True))
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def add_step(session: AsyncSession, *, step: ExposureStep) -> ExposureStep:
        session.add(step)
        await session.flush()
        return step

    @staticmethod
    async def get_step(session: AsyncSession, step_id: UUID) -> ExposureStep | None:
        return await session.get(ExposureStep, step_id)

    @staticmethod
    async def list_steps(session: AsyncSession, *, hierarchy_id: UUID) -> list[ExposureStep]:
        stmt = (
            select(ExposureStep)
            .where(ExposureStep.hierarchy_id == hierarchy_id)
            .order_by(ExposureStep.step_order.asc(), ExposureStep.created_at.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def record_attempt(session: AsyncSession, *, attempt: ExposureAttempt) -> ExposureAttempt:
        session.add(attempt)
        await session.flush()
        return attempt

    @staticmethod
    async def list_attempts(session: AsyncSession, *, step_id: UUID) -> list[ExposureAttempt]:
        stmt = (
            select(ExposureAttempt)
            .where(ExposureAttempt.step_id == step_id)
            .order_by(ExposureAttempt.attempt_date.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
