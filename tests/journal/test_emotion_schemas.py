from __future__ import annotations

import pytest
from pydantic import ValidationError

from saasdb.journal.schemas import (
    EmotionIntensity,
    average_intensity,
    emotions_to_json,
    parse_emotions,
)


def test_parse_emotions_normalizes_names() -> None:
    parsed = parse_emotions([{"emotion": "  Anxiety ", "intensity": 70}])
    assert parsed == [EmotionIntensity(emotion="anxiety", intensity=70)]


def test_emotions_to_json_returns_plain_dicts() -> None:
    payload = emotions_to_json(
        [{"emotion": "sadness", "intensity": 40}, EmotionIntensity(emotion="anger", intensity=0)]
    )
    assert payload == [
        {"emotion": "sadness", "intensity": 40},
        {"emotion": "anger", "intensity": 0},
    ]


@pytest.mark.parametrize(
    "item",
    [
        {"emotion": "anxiety", "intensity": 101},
        {"emotion": "anxiety", "intensity": -1},
        {"emotion": "   ", "intensity": 10},
        {"emotion": "x" * 51, "intensity": 10},
        {"emotion": "anxiety"},
        {"emotion": "anxiety", "intensity": 10, "color": "red"},
    ],
)
def test_parse_emotions_rejects_bad_items(item: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        parse_emotions([item])


def test_average_intensity() -> None:
    emotions = parse_emotions(
        [{"emotion": "anxiety", "intensity": 80}, {"emotion": "shame", "intensity": 40}]
    )
    assert average_intensity(emotions) == 60
    assert average_intensity([]) is None
