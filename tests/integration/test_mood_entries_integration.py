from __future__ import annotations

from datetime import date, time

import pytest
from sqlalchemy import func, select

from saasdb.db.models.mood_entries import MoodEntry
from saasdb.db.repo.mood_repo import MoodRepo
from saasdb.db.session import SessionLocal
from saasdb.journal.mood.service import MoodService
from tests.integration.identity_fixtures import _create_user


@pytest.mark.asyncio
async def test_daily_mood_without_time_is_upserted() -> None:
    user_id = await _create_user("mood-upsert")
    day = date(2026, 3, 2)

    async with SessionLocal.begin() as session:
        first_id = await MoodService.record_daily_mood(
            session,
            user_id=user_id,
            entry_date=day,
            overall_mood=4,
            emotions=[{"emotion": "Sadness", "intensity": 60}],
        )
    async with SessionLocal.begin() as session:
        second_id = await MoodService.record_daily_mood(
            session,
            user_id=user_id,
            entry_date=day,
            overall_mood=7,
            emotions=[{"emotion": "calm", "intensity": 40}],
            notes="walked outside",
        )

    async with SessionLocal() as session:
        count = await session.scalar(
            select(func.count()).select_from(MoodEntry).where(MoodEntry.user_id == user_id)
        )
        entry = await MoodRepo.get_entry(session, first_id)

    assert second_id == first_id
    assert count == 1
    assert entry is not None
    assert entry.overall_mood == 7
    assert entry.emotions == [{"emotion": "calm", "intensity": 40}]
    assert entry.notes == "walked outside"


@pytest.mark.asyncio
async def test_timed_entries_are_kept_apart() -> None:
    user_id = await _create_user("mood-timed")
    day = date(2026, 3, 2)

    async with SessionLocal.begin() as session:
        morning = await MoodService.record_daily_mood(
            session, user_id=user_id, entry_date=day, overall_mood=3, entry_time=time(8, 0)
        )
        evening = await MoodService.record_daily_mood(
            session, user_id=user_id, entry_date=day, overall_mood=6, entry_time=time(20, 0)
        )

    assert morning != evening


@pytest.mark.asyncio
async def test_mood_scale_is_checked_before_write() -> None:
    user_id = await _create_user("mood-scale")
    async with SessionLocal.begin() as session:
        with pytest.raises(ValueError):
            await MoodService.record_daily_mood(
                session, user_id=user_id, entry_date=date(2026, 3, 2), overall_mood=11
            )
