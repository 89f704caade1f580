from __future__ import annotations

from uuid import UUID

import pytest
from sqlalchemy import delete, update
from sqlalchemy.exc import DBAPIError

from saasdb.db.models.exposure_attempts import ExposureAttempt
from saasdb.db.models.exposure_steps import ExposureStep
from saasdb.db.repo.exposure_repo import ExposureRepo
from saasdb.db.session import SessionLocal
from saasdb.journal.exposure.errors import ExposureError
from saasdb.journal.exposure.service import ExposureService
from tests.integration.identity_fixtures import _create_user


async def _hierarchy_with_one_step(user_id: UUID) -> tuple[UUID, UUID]:
    async with SessionLocal.begin() as session:
        hierarchy = await ExposureService.create_hierarchy(
            session,
            user_id=user_id,
            fear_target="Elevators",
            steps=[("Stand next to an elevator", 30)],
        )
        (step,) = await ExposureRepo.list_steps(session, hierarchy_id=hierarchy.id)
        return hierarchy.id, step.id


@pytest.mark.asyncio
async def test_three_successful_attempts_complete_step_and_hierarchy() -> None:
    user_id = await _create_user("exposure-complete")
    hierarchy_id, step_id = await _hierarchy_with_one_step(user_id)

    progress = []
    for before, after in ((70, 50), (70, 30), (60, 30), (50, 20)):
        async with SessionLocal.begin() as session:
            progress.append(
                await ExposureService.record_attempt(
                    session,
                    step_id=step_id,
                    user_id=user_id,
                    anxiety_before=before,
                    anxiety_after=after,
                )
            )

    assert [p.status for p in progress] == ["not_started", "in_progress", "in_progress", "completed"]
    assert progress[-1].attempts == 4
    assert progress[-1].successful_attempts == 3
    assert progress[-1].successes_needed == 0

    async with SessionLocal() as session:
        hierarchy = await ExposureRepo.get_hierarchy(session, hierarchy_id)
    assert hierarchy is not None
    assert hierarchy.completed_at is not None


@pytest.mark.asyncio
async def test_step_status_cannot_be_demoted() -> None:
    user_id = await _create_user("exposure-demote")
    _hierarchy_id, step_id = await _hierarchy_with_one_step(user_id)

    async with SessionLocal.begin() as session:
        await ExposureService.record_attempt(
            session, step_id=step_id, user_id=user_id, anxiety_before=80, anxiety_after=20
        )

    with pytest.raises(DBAPIError):
        async with SessionLocal.begin() as session:
            await session.execute(
                update(ExposureStep).where(ExposureStep.id == step_id).values(status="not_started")
            )


@pytest.mark.asyncio
async def test_attempt_on_another_users_step_is_rejected() -> None:
    owner_id = await _create_user("exposure-owner")
    other_id = await _create_user("exposure-other")
    _hierarchy_id, step_id = await _hierarchy_with_one_step(owner_id)

    async with SessionLocal.begin() as session:
        with pytest.raises(ExposureError):
            await ExposureService.record_attempt(
                session, step_id=step_id, user_id=other_id, anxiety_before=50
            )


@pytest.mark.asyncio
async def test_step_cannot_be_completed_without_successful_attempts() -> None:
    user_id = await _create_user("exposure-unearned")
    _hierarchy_id, step_id = await _hierarchy_with_one_step(user_id)

    with pytest.raises(DBAPIError):
        async with SessionLocal.begin() as session:
            await session.execute(
                update(ExposureStep).where(ExposureStep.id == step_id).values(status="completed")
            )

    async with SessionLocal.begin() as session:
        await ExposureService.record_attempt(
            session, step_id=step_id, user_id=user_id, anxiety_before=80, anxiety_after=20
        )

    with pytest.raises(DBAPIError):
        async with SessionLocal.begin() as session:
            await session.execute(
                update(ExposureStep).where(ExposureStep.id == step_id).values(status="completed")
            )


@pytest.mark.asyncio
async def test_incomplete_attempts_count_but_do_not_advance_step() -> None:
    user_id = await _create_user("exposure-incomplete")
    _hierarchy_id, step_id = await _hierarchy_with_one_step(user_id)

    progress = []
    for before, after in ((0, 0), (60, None)):
        async with SessionLocal.begin() as session:
            progress.append(
                await ExposureService.record_attempt(
                    session,
                    step_id=step_id,
                    user_id=user_id,
                    anxiety_before=before,
                    anxiety_after=after,
                )
            )

    assert [p.status for p in progress] == ["not_started", "not_started"]
    assert [p.attempts for p in progress] == [1, 2]
    assert progress[-1].successful_attempts == 0


@pytest.mark.asyncio
async def test_deleting_attempt_recounts_but_keeps_status() -> None:
    user_id = await _create_user("exposure-delete")
    _hierarchy_id, step_id = await _hierarchy_with_one_step(user_id)
    for before, after in ((80, 20), (70, 60)):
        async with SessionLocal.begin() as session:
            await ExposureService.record_attempt(
                session,
                step_id=step_id,
                user_id=user_id,
                anxiety_before=before,
                anxiety_after=after,
            )

    async with SessionLocal.begin() as session:
        await session.execute(
            delete(ExposureAttempt).where(
                ExposureAttempt.step_id == step_id, ExposureAttempt.anxiety_before == 80
            )
        )

    async with SessionLocal() as session:
        step = await ExposureRepo.get_step(session, step_id)

    assert step is not None
    assert step.attempts == 1
    assert step.status == "in_progress"


@pytest.mark.asyncio
async def test_new_step_reopens_completed_hierarchy() -> None:
    user_id = await _create_user("exposure-reopen")
    hierarchy_id, step_id = await _hierarchy_with_one_step(user_id)
    for _ in range(3):
        async with SessionLocal.begin() as session:
            await ExposureService.record_attempt(
                session, step_id=step_id, user_id=user_id, anxiety_before=80, anxiety_after=20
            )

    async with SessionLocal() as session:
        completed = await ExposureRepo.get_hierarchy(session, hierarchy_id)
        assert completed is not None
        assert completed.completed_at is not None

    async with SessionLocal.begin() as session:
        step = await ExposureService.add_step(
            session,
            hierarchy_id=hierarchy_id,
            user_id=user_id,
            situation="Ride one floor",
            expected_anxiety=60,
        )
        assert step.step_order == 2

    async with SessionLocal() as session:
        reopened = await ExposureRepo.get_hierarchy(session, hierarchy_id)

    assert reopened is not None
    assert reopened.completed_at is None
