from __future__ import annotations

import argparse
import json
from datetime import date

import pytest

from scripts import maintenance_tool


def test_parse_args_daily_metrics() -> None:
    args = maintenance_tool._parse_args(["daily-metrics", "--date", "2026-03-02", "--days-back", "3"])
    assert args.command == "daily-metrics"
    assert args.date == date(2026, 3, 2)
    assert args.days_back == 3


def test_parse_args_rejects_bad_date() -> None:
    with pytest.raises(SystemExit):
        maintenance_tool._parse_args(["daily-metrics", "--date", "02.03.2026"])


def test_parse_args_rejects_negative_days_back() -> None:
    with pytest.raises(SystemExit):
        maintenance_tool._parse_args(["daily-metrics", "--days-back", "-1"])


def test_parse_args_requires_command() -> None:
    with pytest.raises(SystemExit):
        maintenance_tool._parse_args([])


@pytest.mark.asyncio
async def test_run_prints_json_summary_and_disposes_engine(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    disposed: list[bool] = []

    async def _cleanup(_args: argparse.Namespace) -> dict[str, object]:
        return {"deleted_sessions": 4}

    async def _dispose() -> None:
        disposed.append(True)

    monkeypatch.setitem(maintenance_tool.COMMANDS, "cleanup-sessions", _cleanup)
    monkeypatch.setattr(maintenance_tool, "dispose_engine", _dispose)

    exit_code = await maintenance_tool._run(argparse.Namespace(command="cleanup-sessions"))

    assert exit_code == 0
    assert disposed == [True]
    assert json.loads(capsys.readouterr().out) == {
        "command": "cleanup-sessions",
        "deleted_sessions": 4,
    }


@pytest.mark.asyncio
async def test_run_disposes_engine_when_command_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    disposed: list[bool] = []

    async def _broken(_args: argparse.Namespace) -> dict[str, object]:
        raise RuntimeError("boom")

    async def _dispose() -> None:
        disposed.append(True)

    monkeypatch.setitem(maintenance_tool.COMMANDS, "mark-overdue-homework", _broken)
    monkeypatch.setattr(maintenance_tool, "dispose_engine", _dispose)

    with pytest.raises(RuntimeError, match="boom"):
        await maintenance_tool._run(argparse.Namespace(command="mark-overdue-homework"))
    assert disposed == [True]
