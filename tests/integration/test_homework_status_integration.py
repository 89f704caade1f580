from __future__ import annotations

from datetime import date, timedelta
from uuid import UUID

import pytest
from sqlalchemy import update
from sqlalchemy.exc import DBAPIError

from saasdb.db.models.homework_assignments import HomeworkAssignment
from saasdb.db.repo.homework_repo import HomeworkRepo
from saasdb.db.session import SessionLocal
from saasdb.journal.homework.errors import HomeworkTransitionError
from saasdb.journal.homework.service import HomeworkService
from tests.integration.identity_fixtures import _create_user


async def _assign(user_id: UUID, *, due_date: date | None) -> UUID:
    async with SessionLocal.begin() as session:
        assignment = await HomeworkService.assign(
            session,
            user_id=user_id,
            title="Daily thought record",
            description="Fill in one thought record per day",
            homework_type="thought_record",
            due_date=due_date,
        )
        return assignment.id


@pytest.mark.asyncio
async def test_overdue_homework_can_still_be_completed() -> None:
    user_id = await _create_user("homework-overdue")
    assignment_id = await _assign(user_id, due_date=date.today() - timedelta(days=3))
    await _assign(user_id, due_date=date.today() + timedelta(days=3))

    async with SessionLocal.begin() as session:
        marked = await HomeworkService.mark_overdue(session)
    assert marked == 1

    async with SessionLocal.begin() as session:
        assignment = await HomeworkService.complete(
            session, assignment_id=assignment_id, completion_notes="did 5 of 7"
        )
        assert assignment.status == "completed"

    async with SessionLocal() as session:
        stats = await HomeworkRepo.completion_stats(session, user_id=user_id)
    assert stats is not None
    assert stats["completed"] == 1


@pytest.mark.asyncio
async def test_started_homework_past_due_turns_overdue() -> None:
    user_id = await _create_user("homework-start")
    assignment_id = await _assign(user_id, due_date=date.today() - timedelta(days=2))

    async with SessionLocal.begin() as session:
        assignment = await HomeworkService.start(session, assignment_id=assignment_id)
        assert assignment.status == "overdue"


@pytest.mark.asyncio
async def test_completed_homework_is_terminal() -> None:
    user_id = await _create_user("homework-terminal")
    assignment_id = await _assign(user_id, due_date=None)

    async with SessionLocal.begin() as session:
        await HomeworkService.complete(session, assignment_id=assignment_id)

    with pytest.raises(HomeworkTransitionError):
        async with SessionLocal.begin() as session:
            await HomeworkService.cancel(session, assignment_id=assignment_id)

    with pytest.raises(DBAPIError):
        async with SessionLocal.begin() as session:
            await session.execute(
                update(HomeworkAssignment)
                .where(HomeworkAssignment.id == assignment_id)
                .values(status="assigned")
            )
