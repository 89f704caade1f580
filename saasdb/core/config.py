from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: str = Field(default="dev", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    database_url: str = Field(alias="DATABASE_URL")
    db_pool_size: int = Field(default=5, alias="DB_POOL_SIZE")
    db_echo: bool = Field(default=False, alias="DB_ECHO")

    affiliate_code_length: int = Field(default=8, alias="AFFILIATE_CODE_LENGTH")
    default_commission_rate: int = Field(default=30, alias="DEFAULT_COMMISSION_RATE")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
