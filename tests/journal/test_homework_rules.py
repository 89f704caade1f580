from __future__ import annotations

from datetime import date

import pytest

from saasdb.journal.homework.rules import can_transition, is_overdue, resolve_status

TODAY = date(2026, 3, 10)
YESTERDAY = date(2026, 3, 9)
TOMORROW = date(2026, 3, 11)


def test_stamping_completion_completes_even_when_overdue() -> None:
    status = resolve_status(
        old_status="overdue",
        requested_status="overdue",
        completion_stamped=True,
        due_date=YESTERDAY,
        today=TODAY,
    )
    assert status == "completed"


def test_past_due_open_assignment_becomes_overdue() -> None:
    status = resolve_status(
        old_status="assigned",
        requested_status="in_progress",
        completion_stamped=False,
        due_date=YESTERDAY,
        today=TODAY,
    )
    assert status == "overdue"


def test_future_due_keeps_requested_status() -> None:
    status = resolve_status(
        old_status="assigned",
        requested_status="in_progress",
        completion_stamped=False,
        due_date=TOMORROW,
        today=TODAY,
    )
    assert status == "in_progress"


def test_cancelling_past_due_assignment_is_allowed() -> None:
    status = resolve_status(
        old_status="overdue",
        requested_status="cancelled",
        completion_stamped=False,
        due_date=YESTERDAY,
        today=TODAY,
    )
    assert status == "cancelled"


@pytest.mark.parametrize("terminal", ["completed", "cancelled"])
def test_terminal_status_cannot_change(terminal: str) -> None:
    with pytest.raises(ValueError, match="terminal"):
        resolve_status(
            old_status=terminal,
            requested_status="in_progress",
            completion_stamped=False,
            due_date=None,
            today=TODAY,
        )


def test_terminal_status_may_be_rewritten_unchanged() -> None:
    status = resolve_status(
        old_status="completed",
        requested_status="completed",
        completion_stamped=False,
        due_date=YESTERDAY,
        today=TODAY,
    )
    assert status == "completed"


def test_can_transition() -> None:
    assert can_transition("assigned", "in_progress")
    assert can_transition("overdue", "completed")
    assert can_transition("completed", "completed")
    assert not can_transition("completed", "assigned")
    assert not can_transition("cancelled", "in_progress")


def test_is_overdue() -> None:
    assert is_overdue(status="assigned", due_date=YESTERDAY, today=TODAY)
    assert not is_overdue(status="completed", due_date=YESTERDAY, today=TODAY)
    assert not is_overdue(status="assigned", due_date=None, today=TODAY)
    assert not is_overdue(status="in_progress", due_date=TODAY, today=TODAY)
