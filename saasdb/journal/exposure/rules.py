from __future__ import annotations

from collections.abc import Iterable

STEP_STATUSES = ("not_started", "in_progress", "completed")
SUCCESSES_TO_COMPLETE = 3

_STATUS_RANK = {status: rank for rank, status in enumerate(STEP_STATUSES)}


def is_successful_attempt(anxiety_before: int | None, anxiety_after: int | None) -> bool:
    """True when anxiety fell by at least half during the attempt."""
    if anxiety_before is None or anxiety_after is None or anxiety_before <= 0:
        return False
    return anxiety_after * 2 <= anxiety_before


def count_successes(attempts: Iterable[tuple[int | None, int | None]]) -> int:
    return sum(1 for before, after in attempts if is_successful_attempt(before, after))


def status_for_successes(successes: int) -> str | None:
    """Status earned by ``successes``; ``None`` means no change is earned."""
    if successes >= SUCCESSES_TO_COMPLETE:
        return "completed"
    if successes > 0:
        return "in_progress"
    return None


def promote(current: str, successes: int) -> str:
    earned = status_for_successes(successes)
    if earned is None or _STATUS_RANK[earned] <= _STATUS_RANK[current]:
        return current
    return earned


def is_demotion(current: str, new: str) -> bool:
    return _STATUS_RANK[new] < _STATUS_RANK[current]


def is_unearned_promotion(current: str, new: str, successes: int) -> bool:
    """True when ``new`` is ahead of both ``current`` and what ``successes`` earned."""
    if _STATUS_RANK[new] <= _STATUS_RANK[current]:
        return False
    earned = status_for_successes(successes) or STEP_STATUSES[0]
    return _STATUS_RANK[new] > _STATUS_RANK[earned]
