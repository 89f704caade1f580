from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from sqlalchemy import Integer, String, and_, exists, func, literal, select, update
from sqlalchemy.dialects.postgresql import UUID as PG_UUID, insert
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.cognitive_distortions import CognitiveDistortion
from saasdb.db.models.emotion_ratings import EmotionRating
from saasdb.db.models.therapist_patient_relationships import TherapistPatientRelationship
from saasdb.db.models.thought_record_distortions import ThoughtRecordDistortion
from saasdb.db.models.thought_records import ThoughtRecord
from saasdb.db.repo.rows import EmotionTrendPoint
from saasdb.db.views import thought_records_summary


class ThoughtRecordsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, record: ThoughtRecord) -> ThoughtRecord:
        session.add(record)
        await session.flush()
        return record

    @staticmethod
    async def get_by_id(session: AsyncSession, record_id: UUID) -> ThoughtRecord | None:
        return await session.get(ThoughtRecord, record_id)

    @staticmethod
    async def list_for_user(
        session: AsyncSession,
        *,
        user_id: UUID,
        include_archived: bool = False,
        limit: int = 50,
    ) -> list[ThoughtRecord]:
        stmt = (
            select(ThoughtRecord)
            .where(ThoughtRecord.user_id == user_id)
            .order_by(ThoughtRecord.created_at.desc())
            .limit(limit)
        )
        if not include_archived:
            stmt = stmt.where(ThoughtRecord.is_archived.is_(False))
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_shared_with_therapist(
        session: AsyncSession,
        *,
        therapist_id: UUID,
        limit: int = 50,
    ) -> list[ThoughtRecord]:
        active_link = exists().where(
            and_(
                TherapistPatientRelationship.therapist_id == therapist_id,
                TherapistPatientRelationship.patient_id == ThoughtRecord.user_id,
                TherapistPatientRelationship.is_active.is_(True),
            )
        )
        stmt = (
            select(ThoughtRecord)
            .where(ThoughtRecord.shared_with_therapist.is_(True), active_link)
            .order_by(ThoughtRecord.created_at.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def archive(session: AsyncSession, *, record_id: UUID, user_id: UUID) -> int:
        stmt = (
            update(ThoughtRecord)
            .where(ThoughtRecord.id == record_id, ThoughtRecord.user_id == user_id)
            .values(is_archived=True)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    async def add_therapist_review(
        session: AsyncSession,
        *,
        record_id: UUID,
        therapist_notes: str,
        reviewed_at: datetime,
    ) -> int:
        stmt = (
            update(ThoughtRecord)
            .where(ThoughtRecord.id == record_id, ThoughtRecord.shared_with_therapist.is_(True))
            .values(therapist_notes=therapist_notes, therapist_reviewed_at=reviewed_at)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    async def add_emotion_ratings(
        session: AsyncSession,
        *,
        ratings: Sequence[EmotionRating],
    ) -> None:
        session.add_all(list(ratings))
        await session.flush()

    @staticmethod
    async def list_emotion_ratings(
        session: AsyncSession,
        *,
        record_id: UUID,
    ) -> list[EmotionRating]:
        stmt = (
            select(EmotionRating)
            .where(EmotionRating.thought_record_id == record_id)
            .order_by(EmotionRating.is_after_balancing.asc(), EmotionRating.emotion.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_distortions(session: AsyncSession) -> list[CognitiveDistortion]:
        stmt = select(CognitiveDistortion).order_by(CognitiveDistortion.display_order.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def tag_distortion(
        session: AsyncSession,
        *,
        record_id: UUID,
        distortion_id: int,
        identified_by: str,
        confidence: float | None = None,
    ) -> bool:
        stmt = (
            insert(ThoughtRecordDistortion)
            .values(
                thought_record_id=record_id,
                distortion_id=distortion_id,
                identified_by=identified_by,
                confidence=confidence,
            )
            .on_conflict_do_nothing(
                index_elements=[
                    ThoughtRecordDistortion.thought_record_id,
                    ThoughtRecordDistortion.distortion_id,
                ]
            )
        )
        result = await session.execute(stmt)
        return bool(result.rowcount)

    @staticmethod
    async def list_summary(
        session: AsyncSession,
        *,
        user_id: UUID,
        limit: int = 20,
    ) -> list[dict[str, object]]:
        stmt = (
            select(thought_records_summary)
            .where(thought_records_summary.c.user_id == user_id)
            .order_by(thought_records_summary.c.created_at.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def get_mood_trends(
        session: AsyncSession,
        *,
        user_id: UUID,
        emotion: str,
        days: int = 30,
    ) -> list[EmotionTrendPoint]:
        fn = func.get_mood_trends(
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
