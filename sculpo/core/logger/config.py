"""
Logger configuration, built in code or from env.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

_TRUTHY = ("1", "true", "yes")


@dataclass(frozen=True)
class LoggerConfig:
    # DEBUG, INFO, WARNING, ERROR, CRITICAL
    level: str = "INFO"
    # Rotating file handler is skipped when None
    log_dir: Optional[str] = None
    log_file_basename: str = "sculpo"
    max_bytes: int = 5 * 1024 * 1024
    backup_count: int = 5
    # Handlers attach here; child loggers inherit
    root_name: str = "sculpo"
    console: bool = True
    file_rotating: bool = True

    @classmethod
    def from_env(cls) -> "LoggerConfig":
        """LOG_LEVEL, LOG_DIR, LOG_FILE_BASENAME, LOG_MAX_BYTES, LOG_BACKUP_COUNT,
        LOG_ROOT_NAME, LOG_CONSOLE, LOG_FILE_ROTATING."""
        env = os.environ.get
        return cls(
            level=env("LOG_LEVEL", "INFO").upper(),
            log_dir=env("LOG_DIR") or None,
            log_file_basename=env("LOG_FILE_BASENAME", "sculpo"),
            max_bytes=int(env("LOG_MAX_BYTES", str(5 * 1024 * 1024))),
            backup_count=int(env("LOG_BACKUP_COUNT", "5")),
            root_name=env("LOG_ROOT_NAME", "sculpo"),
            console=env("LOG_CONSOLE", "true").lower() in _TRUTHY,
            file_rotating=env("LOG_FILE_ROTATING", "true").lower() in _TRUTHY,
        )

    def with_overrides(self, **changes: object) -> "LoggerConfig":
        """Return a copy with the given fields replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
