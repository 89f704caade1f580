from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.models.emotion_ratings import EmotionRating
from saasdb.db.models.thought_records import ThoughtRecord
from saasdb.db.repo.thought_records_repo import ThoughtRecordsRepo
from saasdb.journal.schemas import EmotionIntensity, parse_emotions

logger = structlog.get_logger(__name__)

DISTORTION_SOURCES = ("user", "ai", "therapist")


class ThoughtRecordService:
    @staticmethod
    async def create_record(
        session: AsyncSession,
        *,
        user_id: UUID,
        situation: str,
        automatic_thoughts: str,
        emotions: Iterable[Mapping[str, object] | EmotionIntensity],
        situation_date: datetime | None = None,
        hot_thought: str | None = None,
        physical_sensations: Sequence[str] | None = None,
        evidence_for: str | None = None,
        evidence_against: str | None = None,
        balanced_thought: str | None = None,
        emotions_after: Iterable[Mapping[str, object] | EmotionIntensity] = (),
        distortion_slugs: Sequence[str] = (),
        shared_with_therapist: bool = False,
        session_id: UUID | None = None,
        tags: Sequence[str] | None = None,
    ) -> ThoughtRecord:
        """Store a thought record and mirror its emotions into ``emotion_ratings``."""
        before = parse_emotions(emotions)
        after = parse_emotions(emotions_after)

        record = await ThoughtRecordsRepo.create(
            session,
            record=ThoughtRecord(
                user_id=user_id,
                situation=situation,
                situation_date=situation_date,
                automatic_thoughts=automatic_thoughts,
                hot_thought=hot_thought,
                emotions=[item.model_dump() for item in before],
                physical_sensations=list(physical_sensations) if physical_sensations else None,
                evidence_for=evidence_for,
                evidence_against=evidence_against,
                balanced_thought=balanced_thought,
                emotions_after=[item.model_dump() for item in after],
                distortions=list(distortion_slugs) or None,
                shared_with_therapist=shared_with_therapist,
                session_id=session_id,
                tags=list(tags) if tags else None,
            ),
        )

        ratings = [
            EmotionRating(
                thought_record_id=record.id,
                emotion=item.emotion,
                intensity=item.intensity,
                is_after_balancing=is_after,
            )
            for is_after, items in ((False, before), (True, after))
            for item in items
        ]
        if ratings:
            await ThoughtRecordsRepo.add_emotion_ratings(session, ratings=ratings)

        if distortion_slugs:
            await ThoughtRecordService.tag_distortions(
                session,
                record_id=record.id,
                slugs=distortion_slugs,
                identified_by="user",
            )

        logger.info(
            "thought_record_created",
            record_id=str(record.id),
            emotions=len(before),
            emotions_after=len(after),
            distortions=len(distortion_slugs),
        )
        return record

    @staticmethod
    async def tag_distortions(
        session: AsyncSession,
        *,
        record_id: UUID,
        slugs: Sequence[str],
        identified_by: str,
        confidence: float | None = None,
    ) -> int:
        if identified_by not in DISTORTION_SOURCES:
            raise ValueError(f"identified_by must be one of {DISTORTION_SOURCES}")

        catalog = {
            distortion.slug: distortion.id
            for distortion in await ThoughtRecordsRepo.list_distortions(session)
        }
        unknown = sorted(set(slugs) - set(catalog))
        if unknown:
            raise ValueError(f"unknown cognitive distortions: {', '.join(unknown)}")

        tagged = 0
        for slug in dict.fromkeys(slugs):
            if await ThoughtRecordsRepo.tag_distortion(
                session,
                record_id=record_id,
                distortion_id=catalog[slug],
                identified_by=identified_by,
                confidence=confidence,
            ):
                tagged += 1
        return tagged
