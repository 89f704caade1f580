from __future__ import annotations

import pytest
from sqlalchemy import text

import saasdb.db.models  # noqa: F401
from saasdb.core.integration_db_safety import require_integration_target
from saasdb.db.models.base import Base
from saasdb.db.session import engine

# Catalogs filled by migrations; the suite only reads them.
SEEDED_TABLES = frozenset(
    {"cognitive_distortions", "emotion_definitions", "physical_sensation_definitions"}
)
TRUNCATE_TABLES = tuple(
    table.name for table in Base.metadata.sorted_tables if table.name not in SEEDED_TABLES
)
TRUNCATE_SQL = f"TRUNCATE TABLE {', '.join(TRUNCATE_TABLES)} RESTART IDENTITY CASCADE"


@pytest.fixture(scope="session", autouse=True)
def guard_integration_db_target() -> None:
    require_integration_target(engine.url)


@pytest.fixture(autouse=True)
async def cleanup_db() -> None:
    # asyncpg connections are bound to the loop that opened them.
    await engine.dispose()

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:  # pragma: no cover - environment-dependent
        pytest.skip(f"Postgres is required for integration tests: {exc}")

    async with engine.begin() as conn:
        await conn.execute(text(TRUNCATE_SQL))

    yield

    await engine.dispose()
