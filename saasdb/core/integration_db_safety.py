from __future__ import annotations

import re
from dataclasses import dataclass

from sqlalchemy.engine import URL, make_url

# Hosts a developer machine or the compose service network resolves to.
LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1", "postgres"})
IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True, slots=True)
class IntegrationTarget:
    """Where the destructive integration suite would point, and what is wrong with it."""

    database_name: str
    host: str
    problems: tuple[str, ...]

    @property
    def is_safe(self) -> bool:
        return not self.problems


def database_name_problems(database_name: str) -> list[str]:
    if not database_name:
        return ["database name is empty"]
    problems = []
    if "test" not in database_name.lower():
        problems.append(f"database '{database_name}' is not named as a test database")
    if IDENTIFIER_RE.fullmatch(database_name) is None:
        problems.append(f"database '{database_name}' is not a plain [A-Za-z0-9_] identifier")
    return problems


def inspect_integration_target(database_url: str | URL) -> IntegrationTarget:
    url = make_url(database_url)
    database_name = (url.database or "").strip()
    host = (url.host or "").strip().lower()

    problems = []
    if url.get_backend_name() != "postgresql":
        problems.append("schema tests need PostgreSQL for triggers, plpgsql and row level security")
    problems.extend(database_name_problems(database_name))
    if host not in LOCAL_HOSTS:
        problems.append(f"host '{host}' is not a local database host")

    return IntegrationTarget(database_name=database_name, host=host, problems=tuple(problems))


def require_integration_target(database_url: str | URL) -> IntegrationTarget:
    target = inspect_integration_target(database_url)
    if not target.is_safe:
        raise RuntimeError(
            "Integration tests TRUNCATE every table; refusing "
            f"db='{target.database_name}' host='{target.host}': " + "; ".join(target.problems)
        )
    return target
