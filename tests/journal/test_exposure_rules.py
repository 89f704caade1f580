from __future__ import annotations

import pytest

from saasdb.journal.exposure.rules import (
    SUCCESSES_TO_COMPLETE,
    count_successes,
    is_demotion,
    is_successful_attempt,
    is_unearned_promotion,
    promote,
    status_for_successes,
)


@pytest.mark.parametrize(
    ("before", "after", "expected"),
    [
        (80, 40, True),
        (80, 41, False),
        (81, 40, True),
        (10, 0, True),
        (0, 0, False),
        (None, 10, False),
        (60, None, False),
    ],
)
def test_is_successful_attempt_needs_half_reduction(
    before: int | None, after: int | None, expected: bool
) -> None:
    assert is_successful_attempt(before, after) is expected


def test_count_successes_ignores_incomplete_attempts() -> None:
    attempts = [(80, 30), (70, 60), (None, 10), (50, 25)]
    assert count_successes(attempts) == 2


@pytest.mark.parametrize(
    ("successes", "expected"),
    [(0, None), (1, "in_progress"), (2, "in_progress"), (3, "completed"), (7, "completed")],
)
def test_status_for_successes(successes: int, expected: str | None) -> None:
    assert status_for_successes(successes) == expected


def test_promote_never_lowers_status() -> None:
    assert promote("completed", 1) == "completed"
    assert promote("in_progress", 0) == "in_progress"
    assert promote("not_started", 0) == "not_started"
    assert promote("not_started", SUCCESSES_TO_COMPLETE) == "completed"
    assert promote("in_progress", 2) == "in_progress"


def test_is_demotion() -> None:
    assert is_demotion("completed", "in_progress") is True
    assert is_demotion("in_progress", "not_started") is True
    assert is_demotion("not_started", "completed") is False
    assert is_demotion("in_progress", "in_progress") is False


def test_is_unearned_promotion() -> None:
    assert is_unearned_promotion("not_started", "completed", 0) is True
    assert is_unearned_promotion("not_started", "in_progress", 0) is True
    assert is_unearned_promotion("in_progress", "completed", 2) is True
    assert is_unearned_promotion("not_started", "in_progress", 1) is False
    assert is_unearned_promotion("in_progress", "completed", 3) is False
    assert is_unearned_promotion("completed", "completed", 0) is False
