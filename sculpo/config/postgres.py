"""
sculpo.config.postgres – booking store connection config (dataclass + validators).

Env vars: DATABASE_URL, DB_POOL_SIZE, DB_MAX_OVERFLOW, DB_POOL_TIMEOUT,
DB_POOL_RECYCLE, DB_ECHO, DB_APPLICATION_NAME.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

_DEFAULT_URL = "postgresql://localhost/sculpo"
_TRUTHY = ("1", "true", "yes")


def _check_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise ValueError("DATABASE_URL is required and must be non-empty")
    scheme = url.split("://", 1)[0]
    if scheme not in ("postgresql", "postgres", "postgresql+asyncpg"):
        raise ValueError(
            "DATABASE_URL must use postgresql://, postgres:// or postgresql+asyncpg://, "
            f"got scheme {scheme!r}"
        )
    return url


@dataclass(frozen=True)
class PostgresConfig:
    """
    Connection and pool settings for the scheduling database.

    Validated on construction; build from the environment with
    load_postgres_config().
    """

    url: str
    """DSN; rewritten to postgresql+asyncpg by the engine."""

    pool_size: int = 5
    max_overflow: int = 10

    pool_timeout: int = 30
    """Seconds to wait for a pooled connection."""

    pool_recycle: int = 1800
    echo: bool = False
    application_name: str = "sculpo-api"

    def __post_init__(self) -> None:
        _check_url(self.url)
        if not isinstance(self.pool_size, int) or self.pool_size < 1:
            raise ValueError(f"pool_size must be an integer >= 1, got {self.pool_size!r}")
        if not isinstance(self.max_overflow, int) or self.max_overflow < 0:
            raise ValueError(f"max_overflow must be a non-negative integer, got {self.max_overflow!r}")
        if not isinstance(self.pool_timeout, int) or self.pool_timeout < 1:
            raise ValueError(f"pool_timeout must be an integer >= 1, got {self.pool_timeout!r}")
        if not isinstance(self.pool_recycle, int) or self.pool_recycle < -1:
            raise ValueError(f"pool_recycle must be an integer >= -1, got {self.pool_recycle!r}")
        if not self.application_name or not self.application_name.strip():
            raise ValueError("application_name must be a non-empty string")

    @property
    def async_url(self) -> str:
        """DSN with the asyncpg driver selected."""
        for prefix in ("postgresql://", "postgres://"):
            if self.url.startswith(prefix):
                return "postgresql+asyncpg://" + self.url[len(prefix):]
        return self.url

    @classmethod
    def from_env(cls, **overrides: object) -> PostgresConfig:
        """Build config from environment variables; keyword overrides win."""

        def _pick(attr: str, env: str, default: str) -> str:
            value = overrides.get(attr)
            if value is not None:
                return str(value)
            return os.environ.get(env, default)

        echo = overrides.get("echo")
        if echo is None:
            echo = os.environ.get("DB_ECHO", "").strip().lower() in _TRUTHY
        return cls(
            url=_check_url(_pick("url", "DATABASE_URL", _DEFAULT_URL)),
            pool_size=int(_pick("pool_size", "DB_POOL_SIZE", "5")),
            max_overflow=int(_pick("max_overflow", "DB_MAX_OVERFLOW", "10")),
            pool_timeout=int(_pick("pool_timeout", "DB_POOL_TIMEOUT", "30")),
            pool_recycle=int(_pick("pool_recycle", "DB_POOL_RECYCLE", "1800")),
            echo=bool(echo),
            application_name=_pick("application_name", "DB_APPLICATION_NAME", "sculpo-api"),
        )


def load_postgres_config(**overrides: object) -> PostgresConfig:
    """Load and validate the database config. Raises ValueError on bad values."""
    return PostgresConfig.from_env(**overrides)
