from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from saasdb.db.models.thought_records import ThoughtRecord
from saasdb.db.repo.thought_records_repo import ThoughtRecordsRepo
from saasdb.db.session import SessionLocal
from saasdb.journal.thought_records.service import ThoughtRecordService
from tests.integration.identity_fixtures import _create_user

UTC = timezone.utc


@pytest.mark.asyncio
async def test_thought_record_summary_and_ratings() -> None:
    user_id = await _create_user("thought-summary")

    async with SessionLocal.begin() as session:
        record = await ThoughtRecordService.create_record(
            session,
            user_id=user_id,
            situation="Presentation at work",
            automatic_thoughts="Everyone will think I am incompetent",
            emotions=[{"emotion": "Anxiety", "intensity": 80}, {"emotion": "shame", "intensity": 40}],
            emotions_after=[{"emotion": "anxiety", "intensity": 30}],
            distortion_slugs=["mind_reading", "catastrophizing"],
            situation_date=datetime.now(UTC) - timedelta(hours=2),
        )
        record_id = record.id

    async with SessionLocal() as session:
        (summary,) = await ThoughtRecordsRepo.list_summary(session, user_id=user_id)
        ratings = await ThoughtRecordsRepo.list_emotion_ratings(session, record_id=record_id)
        trend = await ThoughtRecordsRepo.get_mood_trends(session, user_id=user_id, emotion="ANXIETY")

    assert summary["id"] == record_id
    assert float(summary["avg_intensity_before"]) == 60.0
    assert float(summary["avg_intensity_after"]) == 30.0
    assert len(ratings) == 3
    assert len(trend) == 1
    assert float(trend[0].avg_intensity) == 80.0
    assert trend[0].count == 1


@pytest.mark.asyncio
async def test_unknown_distortion_is_rejected() -> None:
    user_id = await _create_user("thought-unknown")
    async with SessionLocal.begin() as session:
        with pytest.raises(ValueError, match="unknown cognitive distortions"):
            await ThoughtRecordService.create_record(
                session,
                user_id=user_id,
                situation="s",
                automatic_thoughts="t",
                emotions=[{"emotion": "anger", "intensity": 50}],
                distortion_slugs=["not_a_distortion"],
            )


@pytest.mark.asyncio
async def test_non_array_emotions_are_rejected_by_database() -> None:
    user_id = await _create_user("thought-object")
    with pytest.raises(IntegrityError):
        async with SessionLocal.begin() as session:
            await ThoughtRecordsRepo.create(
                session,
                record=ThoughtRecord(
                    user_id=user_id,
                    situation="s",
                    automatic_thoughts="t",
                    emotions={"emotion": "anger", "intensity": 50},
                ),
            )
