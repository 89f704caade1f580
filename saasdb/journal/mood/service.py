from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, time
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from saasdb.db.repo.mood_repo import MoodRepo
from saasdb.journal.schemas import EmotionIntensity, emotions_to_json

logger = structlog.get_logger(__name__)


def _check_scale(name: str, value: int | None) -> None:
    if value is not None and not 1 <= value <= 10:
        raise ValueError(f"{name} must be between 1 and 10")


class MoodService:
    @staticmethod
    async def record_daily_mood(
        session: AsyncSession,
        *,
        user_id: UUID,
        entry_date: date,
        overall_mood: int | None,
        emotions: Iterable[Mapping[str, object] | EmotionIntensity] = (),
        energy_level: int | None = None,
        sleep_quality: int | None = None,
        notes: str | None = None,
        entry_time: time | None = None,
    ) -> UUID:
        """Create or replace the user's mood entry for ``entry_date`` and ``entry_time``."""
        _check_scale("overall_mood", overall_mood)
        _check_scale("energy_level", energy_level)
        _check_scale("sleep_quality", sleep_quality)

        entry_id = await MoodRepo.record_daily_mood(
            session,
            user_id=user_id,
            entry_date=entry_date,
            overall_mood=overall_mood,
            emotions=emotions_to_json(emotions),
            energy_level=energy_level,
            sleep_quality=sleep_quality,
            notes=notes,
            entry_time=entry_time,
        )
        logger.info("mood_entry_recorded", entry_id=str(entry_id), entry_date=entry_date.isoformat())
        return entry_id
