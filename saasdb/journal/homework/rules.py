from __future__ import annotations

from datetime import date

HOMEWORK_STATUSES = ("assigned", "in_progress", "completed", "overdue", "cancelled")
HOMEWORK_TYPES = ("thought_record", "mood_log", "behavioral_activation", "exposure", "custom")
TERMINAL_STATUSES = frozenset({"completed", "cancelled"})
OPEN_STATUSES = frozenset({"assigned", "in_progress", "overdue"})

_ALLOWED: dict[str, frozenset[str]] = {
    "assigned": frozenset({"in_progress", "completed", "overdue", "cancelled"}),
    "in_progress": frozenset({"completed", "overdue", "cancelled"}),
    "overdue": frozenset({"in_progress", "completed", "cancelled"}),
    "completed": frozenset(),
    "cancelled": frozenset(),
}


def can_transition(current: str, new: str) -> bool:
    return current == new or new in _ALLOWED[current]


def resolve_status(
    *,
    old_status: str,
    requested_status: str,
    completion_stamped: bool,
    due_date: date | None,
    today: date,
) -> str:
    """Status a row ends up with after an update, as the homework trigger decides it.

    ``completion_stamped`` means ``completed_at`` went from empty to set in
    this update.
    """
    if completion_stamped:
        status = "completed"
    elif due_date is not None and due_date < today and requested_status not in TERMINAL_STATUSES:
        status = "overdue"
    else:
        status = requested_status
    if old_status in TERMINAL_STATUSES and status != old_status:
        raise ValueError(f"homework status {old_status!r} is terminal")
    return status


def is_overdue(*, status: str, due_date: date | None, today: date) -> bool:
    return status in OPEN_STATUSES and due_date is not None and due_date < today
