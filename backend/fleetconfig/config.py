"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Credentials (database password) come only from the environment / .env
    - get_settings() is cached (lru_cache): single instance per process
    - database_url is always an async driver URL after validation

Design Decisions:
    - Defaults for everything: a bare `uvicorn fleetconfig.main:app` starts against
      the docker-compose database
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from environment variables (DATABASE_URL, LOG_LEVEL, ...)."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    service_name: str = "fleetconfig-api"
    service_version: str = "1.0.0"

    # ─── Database ───
    database_url: str = (
        "postgresql+asyncpg://fleetconfig:fleetconfig@db:5432/fleetconfig"
    )
    database_pool_size: int = Field(20, ge=1)
    database_max_overflow: int = Field(10, ge=0)
    database_pool_recycle: int = Field(3600, ge=-1)
    database_echo: bool = False

    # ─── API ───
    cors_origins: list[str] = ["http://localhost:5173"]

    # ─── Observability ───
    log_level: str = "INFO"
    log_format: str = "json"
    log_sql: bool = False

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        """postgres:// and postgresql:// become postgresql+asyncpg://."""
        if isinstance(v, str):
            for prefix in ("postgresql://", "postgres://"):
                if v.startswith(prefix):
                    return "postgresql+asyncpg://" + v[len(prefix):]
        return v

    @field_validator("log_format")
    @classmethod
    def known_log_format(cls, v: str) -> str:
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
