from __future__ import annotations

from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory

ROOT = Path(__file__).resolve().parents[1]

EXPECTED_CHAIN = [
    "3a1f0c5b7d21",
    "5c2e8d4a9b13",
    "7d4b1e6f2a35",
    "9e6c3a8d4b57",
    "b18f5c2e6d79",
    "d2a7e4f81c9b",
]


def _script_directory() -> ScriptDirectory:
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "alembic"))
    return ScriptDirectory.from_config(config)


def test_migrations_have_single_head() -> None:
    assert _script_directory().get_heads() == [EXPECTED_CHAIN[-1]]


def test_migrations_form_linear_chain() -> None:
    revisions = list(_script_directory().walk_revisions())
    assert [rev.revision for rev in reversed(revisions)] == EXPECTED_CHAIN
    assert revisions[-1].down_revision is None
