from __future__ import annotations

from uuid import UUID

from sqlalchemy import Integer, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.homework_assignments import HomeworkAssignment
from saasdb.db.views import homework_completion_stats


class HomeworkRepo:
    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        assignment: HomeworkAssignment,
    ) -> HomeworkAssignment:
        session.add(assignment)
        await session.flush()
        return assignment

    @staticmethod
    async def get_by_id(session: AsyncSession, assignment_id: UUID) -> HomeworkAssignment | None:
        return await session.get(HomeworkAssignment, assignment_id)

    @staticmethod
    async def get_by_id_for_update(
        session: AsyncSession,
        assignment_id: UUID,
    ) -> HomeworkAssignment | None:
        stmt = (
            select(HomeworkAssignment)
            .where(HomeworkAssignment.id == assignment_id)
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_for_user(
        session: AsyncSession,
        *,
        user_id: UUID,
        statuses: tuple[str, ...] | None = None,
        limit: int = 50,
    ) -> list[HomeworkAssignment]:
        stmt = (
            select(HomeworkAssignment)
            .where(HomeworkAssignment.user_id == user_id, HomeworkAssignment.is_archived.is_(False))
            .order_by(HomeworkAssignment.due_date.asc().nullslast(), HomeworkAssignment.created_at.asc())
            .limit(limit)
        )
        if statuses:
            stmt = stmt.where(HomeworkAssignment.status.in_(statuses))
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_pending_review(
        session: AsyncSession,
        *,
        therapist_id: UUID,
        limit: int = 50,
    ) -> list[HomeworkAssignment]:
        stmt = (
            select(HomeworkAssignment)
            .where(
                HomeworkAssignment.therapist_id == therapist_id,
                HomeworkAssignment.status == "completed",
                HomeworkAssignment.therapist_reviewed.is_(False),
            )
            .order_by(HomeworkAssignment.completed_at.asc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def mark_overdue(session: AsyncSession) -> int:
        result = await session.execute(select(func.mark_overdue_homework(type_=Integer)))
        return int(result.scalar_one() or 0)

    @staticmethod
    async def completion_stats(session: AsyncSession, *, user_id: UUID) -> dict[str, object] | None:
        stmt = select(homework_completion_stats).where(
            homework_completion_stats.c.user_id == user_id
        )
        result = await session.execute(stmt)
        row = result.mappings().one_or_none()
        return dict(row) if row is not None else None
