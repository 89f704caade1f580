from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from saasdb.db.models.activity_schedule import ScheduledActivity
from saasdb.db.models.relapse_prevention_plan import RelapsePreventionPlan
from saasdb.db.models.therapists import Therapist
from saasdb.db.repo.activity_repo import ActivityRepo
from saasdb.db.repo.mood_repo import MoodRepo
from saasdb.db.repo.self_work_repo import SelfWorkRepo
from saasdb.db.repo.therapists_repo import TherapistsRepo
from saasdb.db.repo.thought_records_repo import ThoughtRecordsRepo
from saasdb.db.session import SessionLocal
from saasdb.journal.thought_records.service import ThoughtRecordService
from tests.integration.identity_fixtures import _create_user

UTC = timezone.utc


@pytest.mark.asyncio
async def test_repeated_safety_behavior_and_coping_use_accumulate() -> None:
    user_id = await _create_user("self-work-repeat")

    async with SessionLocal.begin() as session:
        await SelfWorkRepo.identify_safety_behavior(
            session, user_id=user_id, behavior="Avoid eye contact", situation="Meetings"
        )
        behavior = await SelfWorkRepo.identify_safety_behavior(
            session, user_id=user_id, behavior="Avoid eye contact", situation="Meetings"
        )
        await MoodRepo.record_coping_use(
            session, user_id=user_id, strategy_name="Box breathing", effectiveness=6
        )
        strategy = await MoodRepo.record_coping_use(
            session, user_id=user_id, strategy_name="Box breathing", effectiveness=8
        )

    assert behavior.times_identified == 2
    assert strategy.times_used == 2
    assert strategy.avg_effectiveness == Decimal("7.00")


@pytest.mark.asyncio
async def test_values_gap_priority() -> None:
    user_id = await _create_user("self-work-values")

    async with SessionLocal.begin() as session:
        await SelfWorkRepo.upsert_value(
            session, user_id=user_id, domain="relationships", importance=10, current_satisfaction=2
        )
        await SelfWorkRepo.upsert_value(
            session, user_id=user_id, domain="work", importance=6, current_satisfaction=5
        )
        await SelfWorkRepo.upsert_value(
            session, user_id=user_id, domain="work", importance=8, current_satisfaction=5
        )

    async with SessionLocal() as session:
        gaps = await SelfWorkRepo.values_gaps(session, user_id=user_id)

    assert [(row["domain"], row["gap"], row["priority_level"]) for row in gaps] == [
        ("relationships", 8, "critical"),
        ("work", 3, "moderate"),
    ]


@pytest.mark.asyncio
async def test_saving_relapse_plan_replaces_active_plan() -> None:
    user_id = await _create_user("self-work-plan")

    async with SessionLocal.begin() as session:
        await SelfWorkRepo.save_relapse_plan(
            session,
            plan=RelapsePreventionPlan(user_id=user_id, early_warning_signs=["poor sleep"]),
        )
    async with SessionLocal.begin() as session:
        await SelfWorkRepo.save_relapse_plan(
            session,
            plan=RelapsePreventionPlan(user_id=user_id, early_warning_signs=["skipping meals"]),
        )

    async with SessionLocal() as session:
        plan = await SelfWorkRepo.get_active_relapse_plan(session, user_id=user_id)

    assert plan is not None
    assert plan.early_warning_signs == ["skipping meals"]


@pytest.mark.asyncio
async def test_behavioral_activation_adherence() -> None:
    user_id = await _create_user("self-work-ba")
    planned_day = date.today() - timedelta(days=1)

    async with SessionLocal.begin() as session:
        scheduled = []
        for name in ("Walk", "Call a friend"):
            scheduled.append(
                await ActivityRepo.schedule(
                    session,
                    activity=ScheduledActivity(
                        user_id=user_id, planned_date=planned_day, activity_name=name
                    ),
                )
            )
        await ActivityRepo.complete_scheduled(
            session,
            scheduled_id=scheduled[0].id,
            activity_log_id=None,
            actual_difficulty=3,
            completed_at=datetime.now(UTC),
        )

    async with SessionLocal() as session:
        weeks = await ActivityRepo.get_ba_adherence(session, user_id=user_id)

    assert sum(week.planned_activities for week in weeks) == 2
    assert sum(week.completed_activities for week in weeks) == 1


@pytest.mark.asyncio
async def test_therapist_sees_shared_records_only_while_linked() -> None:
    therapist_id = await _create_user("therapist-1")
    patient_id = await _create_user("patient-1")

    async with SessionLocal.begin() as session:
        await TherapistsRepo.create(session, therapist=Therapist(id=therapist_id, display_name="Dr T"))
        await TherapistsRepo.link_patient(session, therapist_id=therapist_id, patient_id=patient_id)
        for shared in (True, False):
            await ThoughtRecordService.create_record(
                session,
                user_id=patient_id,
                situation="s",
                automatic_thoughts="t",
                emotions=[{"emotion": "guilt", "intensity": 35}],
                shared_with_therapist=shared,
            )

    async with SessionLocal() as session:
        shared_records = await ThoughtRecordsRepo.list_shared_with_therapist(
            session, therapist_id=therapist_id
        )
    assert len(shared_records) == 1

    async with SessionLocal.begin() as session:
        ended = await TherapistsRepo.end_relationship(
            session,
            therapist_id=therapist_id,
            patient_id=patient_id,
            ended_at=datetime.now(UTC),
        )
    assert ended == 1

    async with SessionLocal() as session:
        assert await ThoughtRecordsRepo.list_shared_with_therapist(session, therapist_id=therapist_id) == []
