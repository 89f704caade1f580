from __future__ import annotations

from datetime import date, datetime, timezone
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.homework_assignments import HomeworkAssignment
from saasdb.db.repo.homework_repo import HomeworkRepo
from saasdb.journal.homework.errors import HomeworkNotFoundError, HomeworkTransitionError
from saasdb.journal.homework.rules import HOMEWORK_TYPES, TERMINAL_STATUSES, can_transition

logger = structlog.get_logger(__name__)


class HomeworkService:
    @staticmethod
    async def assign(
        session: AsyncSession,
        *,
        user_id: UUID,
        title: str,
        description: str,
        homework_type: str,
        therapist_id: UUID | None = None,
        session_id: UUID | None = None,
        due_date: date | None = None,
        frequency: str | None = None,
        instructions: str | None = None,
        resources: list[dict[str, object]] | None = None,
    ) -> HomeworkAssignment:
        if homework_type not in HOMEWORK_TYPES:
            raise ValueError(f"unknown homework_type: {homework_type}")

        assignment = await HomeworkRepo.create(
            session,
            assignment=HomeworkAssignment(
                user_id=user_id,
                therapist_id=therapist_id,
                session_id=session_id,
                title=title,
                description=description,
                homework_type=homework_type,
                due_date=due_date,
                frequency=frequency,
                instructions=instructions,
                resources=resources,
            ),
        )
        logger.info(
            "homework_assigned",
            assignment_id=str(assignment.id),
            homework_type=homework_type,
            due_date=due_date.isoformat() if due_date else None,
        )
        return assignment

    @staticmethod
    async def _load_for_update(session: AsyncSession, assignment_id: UUID) -> HomeworkAssignment:
        assignment = await HomeworkRepo.get_by_id_for_update(session, assignment_id)
        if assignment is None:
            raise HomeworkNotFoundError
        return assignment

    @staticmethod
    async def _transition(
        session: AsyncSession,
        *,
        assignment: HomeworkAssignment,
        new_status: str,
    ) -> HomeworkAssignment:
        if not can_transition(assignment.status, new_status):
            raise HomeworkTransitionError(f"{assignment.status} -> {new_status}")
        previous = assignment.status
        assignment.status = new_status
        await session.flush()
        # The status trigger may override the requested status (e.g. overdue).
        await session.refresh(assignment, attribute_names=["status", "updated_at"])
        logger.info(
            "homework_status_changed",
            assignment_id=str(assignment.id),
            from_status=previous,
            to_status=assignment.status,
        )
        return assignment

    @staticmethod
    async def start(session: AsyncSession, *, assignment_id: UUID) -> HomeworkAssignment:
        assignment = await HomeworkService._load_for_update(session, assignment_id)
        return await HomeworkService._transition(
            session, assignment=assignment, new_status="in_progress"
        )

    @staticmethod
    async def cancel(session: AsyncSession, *, assignment_id: UUID) -> HomeworkAssignment:
        assignment = await HomeworkService._load_for_update(session, assignment_id)
        return await HomeworkService._transition(
            session, assignment=assignment, new_status="cancelled"
        )

    @staticmethod
    async def complete(
        session: AsyncSession,
        *,
        assignment_id: UUID,
        completion_notes: str | None = None,
        now_utc: datetime | None = None,
    ) -> HomeworkAssignment:
        now_utc = now_utc or datetime.now(timezone.utc)
        assignment = await HomeworkService._load_for_update(session, assignment_id)
        if assignment.status in TERMINAL_STATUSES:
            raise HomeworkTransitionError(f"{assignment.status} -> completed")

        # Stamping completed_at is what moves the row to completed.
        assignment.completed_at = now_utc
        assignment.completion_notes = completion_notes
        await session.flush()
        await session.refresh(assignment, attribute_names=["status", "updated_at"])
        logger.info("homework_completed", assignment_id=str(assignment.id))
        return assignment

    @staticmethod
    async def review(
        session: AsyncSession,
        *,
        assignment_id: UUID,
        therapist_id: UUID,
        feedback: str,
        now_utc: datetime | None = None,
    ) -> HomeworkAssignment:
        now_utc = now_utc or datetime.now(timezone.utc)
        assignment = await HomeworkService._load_for_update(session, assignment_id)
        if assignment.therapist_id != therapist_id:
            raise HomeworkTransitionError("assignment belongs to another therapist")
        if assignment.status != "completed":
            raise HomeworkTransitionError("only completed homework can be reviewed")

        assignment.therapist_reviewed = True
        assignment.therapist_feedback = feedback
        assignment.therapist_reviewed_at = now_utc
        await session.flush()
        logger.info("homework_reviewed", assignment_id=str(assignment.id))
        return assignment

    @staticmethod
    async def mark_overdue(session: AsyncSession) -> int:
        updated = await HomeworkRepo.mark_overdue(session)
        logger.info("homework_overdue_marked", updated=updated)
        return updated
