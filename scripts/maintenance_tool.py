from __future__ import annotations

import argparse
import asyncio
import json
from collections.abc import Awaitable, Callable, Sequence
from datetime import date

from saasdb.admin.analytics.service import AnalyticsService
from saasdb.core.config import get_settings
from saasdb.core.logging import configure_logging
from saasdb.db.repo.user_sessions_repo import UserSessionsRepo
from saasdb.db.session import SessionLocal, dispose_engine
from saasdb.journal.homework.service import HomeworkService


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from exc


def _non_negative_int(value: str) -> int:
    parsed = int(value)
    if parsed < 0:
        raise argparse.ArgumentTypeError("--days-back must be non-negative")
    return parsed


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run schema maintenance functions on demand")
    subparsers = parser.add_subparsers(dest="command", required=True)

    daily = subparsers.add_parser("daily-metrics", help="Recompute daily_metrics rows")
    daily.add_argument("--date", type=_parse_date, default=None, help="YYYY-MM-DD, defaults to today")
    daily.add_argument("--days-back", type=_non_negative_int, default=0)

    subparsers.add_parser("cleanup-sessions", help="Delete sessions expired more than 30 days ago")
    subparsers.add_parser("mark-overdue-homework", help="Flag open homework past its due date")
    return parser.parse_args(argv)


async def _daily_metrics(args: argparse.Namespace) -> dict[str, object]:
    metric_date = args.date or date.today()
    async with SessionLocal.begin() as session:
        refreshed = await AnalyticsService.refresh_daily_metrics(
            session,
            metric_date=metric_date,
            days_back=args.days_back,
        )
    return {"refreshed_dates": [day.isoformat() for day in refreshed]}


async def _cleanup_sessions(_args: argparse.Namespace) -> dict[str, object]:
    async with SessionLocal.begin() as session:
        deleted = await UserSessionsRepo.cleanup_expired(session)
    return {"deleted_sessions": deleted}


async def _mark_overdue_homework(_args: argparse.Namespace) -> dict[str, object]:
    async with SessionLocal.begin() as session:
        updated = await HomeworkService.mark_overdue(session)
    return {"marked_overdue": updated}


COMMANDS: dict[str, Callable[[argparse.Namespace], Awaitable[dict[str, object]]]] = {
    "daily-metrics": _daily_metrics,
    "cleanup-sessions": _cleanup_sessions,
    "mark-overdue-homework": _mark_overdue_homework,
}


async def _run(args: argparse.Namespace) -> int:
    try:
        summary = await COMMANDS[args.command](args)
    finally:
        await dispose_engine()

    print(json.dumps({"command": args.command, **summary}, sort_keys=True))  # noqa: T201
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(get_settings().log_level)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
