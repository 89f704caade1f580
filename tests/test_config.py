from __future__ import annotations

import pytest

from saasdb.core.config import Settings


def test_settings_read_uppercase_env_aliases(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://app:pw@db:5432/saasdb")
    monkeypatch.setenv("DB_POOL_SIZE", "12")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.database_url == "postgresql+asyncpg://app:pw@db:5432/saasdb"
    assert settings.db_pool_size == 12
    assert settings.log_level == "debug"


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("APP_ENV", "DB_ECHO", "AFFILIATE_CODE_LENGTH", "DEFAULT_COMMISSION_RATE"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.app_env == "dev"
    assert settings.db_echo is False
    assert settings.affiliate_code_length == 8
    assert settings.default_commission_rate == 30


def test_settings_require_database_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)

    with pytest.raises(ValueError):
        Settings(_env_file=None)
