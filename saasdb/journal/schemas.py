"""Payload shapes for the JSONB emotion columns.

The database only checks that ``emotions`` columns hold JSON arrays; the item
shape is enforced here before anything is written.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

MAX_EMOTION_NAME_LENGTH = 50


class EmotionIntensity(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    emotion: str = Field(min_length=1, max_length=MAX_EMOTION_NAME_LENGTH)
    intensity: int = Field(ge=0, le=100)

    @field_validator("emotion")
    @classmethod
    def _normalize_emotion(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not normalized:
            raise ValueError("emotion must not be blank")
        return normalized


_EMOTION_LIST = TypeAdapter(list[EmotionIntensity])


def parse_emotions(raw: Iterable[Mapping[str, object] | EmotionIntensity]) -> list[EmotionIntensity]:
    return _EMOTION_LIST.validate_python(list(raw))


def emotions_to_json(raw: Iterable[Mapping[str, object] | EmotionIntensity]) -> list[dict[str, object]]:
    return [item.model_dump() for item in parse_emotions(raw)]


def average_intensity(emotions: Iterable[EmotionIntensity]) -> float | None:
    values = [item.intensity for item in emotions]
    if not values:
        return None
    return sum(values) / len(values)
