from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.exposure_attempts import ExposureAttempt
from saasdb.db.models.exposure_hierarchies import ExposureHierarchy
from saasdb.db.models.exposure_steps import ExposureStep
from saasdb.db.repo.exposure_repo import ExposureRepo
from saasdb.journal.exposure.errors import ExposureError, ExposureStepNotFoundError
from saasdb.journal.exposure.rules import SUCCESSES_TO_COMPLETE, count_successes

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class StepProgress:
    step_id: UUID
    status: str
    attempts: int
    successful_attempts: int
    successes_needed: int


class ExposureService:
    @staticmethod
    async def create_hierarchy(
        session: AsyncSession,
        *,
        user_id: UUID,
        fear_target: str,
        steps: Sequence[tuple[str, int]],
        description: str | None = None,
        therapist_id: UUID | None = None,
    ) -> ExposureHierarchy:
        """Create a hierarchy with ``steps`` given as ``(situation, expected_anxiety)``, easiest first."""
        hierarchy = await ExposureRepo.create_hierarchy(
            session,
            hierarchy=ExposureHierarchy(
                user_id=user_id,
                therapist_id=therapist_id,
                fear_target=fear_target,
                description=description,
            ),
        )
        for order, (situation, expected_anxiety) in enumerate(steps, start=1):
            await ExposureRepo.add_step(
                session,
                step=ExposureStep(
                    hierarchy_id=hierarchy.id,
                    situation=situation,
                    expected_anxiety=expected_anxiety,
                    step_order=order,
                ),
            )
        logger.info("exposure_hierarchy_created", hierarchy_id=str(hierarchy.id), steps=len(steps))
        return hierarchy

    @staticmethod
    async def add_step(
        session: AsyncSession,
        *,
        hierarchy_id: UUID,
        user_id: UUID,
        situation: str,
        expected_anxiety: int,
    ) -> ExposureStep:
        """Append a step after the hardest one; a completed hierarchy is reopened."""
        hierarchy = await ExposureRepo.get_hierarchy(session, hierarchy_id)
        if hierarchy is None or hierarchy.user_id != user_id:
            raise ExposureError("exposure hierarchy belongs to another user")

        steps = await ExposureRepo.list_steps(session, hierarchy_id=hierarchy_id)
        step = await ExposureRepo.add_step(
            session,
            step=ExposureStep(
                hierarchy_id=hierarchy_id,
                situation=situation,
                expected_anxiety=expected_anxiety,
                step_order=max((s.step_order for s in steps), default=0) + 1,
            ),
        )
        logger.info("exposure_step_added", hierarchy_id=str(hierarchy_id), step_id=str(step.id))
        return step

    @staticmethod
    async def record_attempt(
        session: AsyncSession,
        *,
        step_id: UUID,
        user_id: UUID,
        anxiety_before: int | None,
        anxiety_peak: int | None = None,
        anxiety_after: int | None = None,
        duration_minutes: int | None = None,
        safety_behaviors_used: Sequence[str] | None = None,
        success_rating: int | None = None,
        attempt_date: datetime | None = None,
    ) -> StepProgress:
        step = await ExposureRepo.get_step(session, step_id)
        if step is None:
            raise ExposureStepNotFoundError
        hierarchy = await ExposureRepo.get_hierarchy(session, step.hierarchy_id)
        if hierarchy is None or hierarchy.user_id != user_id:
            raise ExposureError("exposure step belongs to another user")

        attempt = ExposureAttempt(
            step_id=step_id,
            user_id=user_id,
            anxiety_before=anxiety_before,
            anxiety_peak=anxiety_peak,
            anxiety_after=anxiety_after,
            duration_minutes=duration_minutes,
            safety_behaviors_used=list(safety_behaviors_used) if safety_behaviors_used else None,
            success_rating=success_rating,
        )
        if attempt_date is not None:
            attempt.attempt_date = attempt_date
        await ExposureRepo.record_attempt(session, attempt=attempt)

        # Status and attempt count are maintained by the attempts trigger.
        await session.refresh(step, attribute_names=["status", "attempts"])
        progress = await ExposureService.step_progress(session, step=step)
        logger.info(
            "exposure_attempt_recorded",
            step_id=str(step_id),
            status=progress.status,
            successful_attempts=progress.successful_attempts,
        )
        return progress

    @staticmethod
    async def step_progress(session: AsyncSession, *, step: ExposureStep) -> StepProgress:
        attempts = await ExposureRepo.list_attempts(session, step_id=step.id)
        successes = count_successes(
            (attempt.anxiety_before, attempt.anxiety_after) for attempt in attempts
        )
        return StepProgress(
            step_id=step.id,
            status=step.status,
            attempts=step.attempts,
            successful_attempts=successes,
            successes_needed=max(0, SUCCESSES_TO_COMPLETE - successes),
        )
