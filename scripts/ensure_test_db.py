from __future__ import annotations

import asyncio

import asyncpg
from sqlalchemy.engine import URL, make_url

from saasdb.core.config import get_settings
from saasdb.core.integration_db_safety import database_name_problems

# UNIQUE NULLS NOT DISTINCT on mood_entries needs PostgreSQL 15.
MIN_SERVER_VERSION_NUM = 150000


def _maintenance_connect_kwargs(url: URL) -> dict[str, object]:
    if url.get_backend_name() != "postgresql":
        raise RuntimeError("Only a PostgreSQL DATABASE_URL can host the test database.")
    if url.username is None:
        raise RuntimeError("DATABASE_URL has no username.")
    return {
        "host": url.host or "localhost",
        "port": int(url.port or 5432),
        "user": url.username,
        "password": url.password,
        "database": "postgres",
    }


async def _create_if_missing(conn: asyncpg.Connection, database_name: str) -> bool:
    version_num = int(await conn.fetchval("SHOW server_version_num"))
    if version_num < MIN_SERVER_VERSION_NUM:
        raise RuntimeError(f"PostgreSQL 15+ is required, server is version_num={version_num}.")
    if await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", database_name):
        return False
    await conn.execute(f'CREATE DATABASE "{database_name}"')
    return True


async def ensure_test_database(database_url: str) -> bool:
    """Create the test database named in ``database_url``; ``False`` if it already existed."""
    url = make_url(database_url)
    database_name = (url.database or "").strip()
    problems = database_name_problems(database_name)
    if problems:
        raise RuntimeError("Refusing to create database: " + "; ".join(problems))

    conn = await asyncpg.connect(**_maintenance_connect_kwargs(url))
    try:
        return await _create_if_missing(conn, database_name)
    finally:
        await conn.close()


def main() -> int:
    database_url = get_settings().database_url
    created = asyncio.run(ensure_test_database(database_url))
    state = "created" if created else "exists"
    print(f"ensure_test_db: {state} db={make_url(database_url).database}")  # noqa: T201
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
