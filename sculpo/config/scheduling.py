"""
sculpo.config.scheduling – trainer availability and booking settings.

Env vars: SCHEDULING_TIMEZONE, NEXT_SLOTS_HORIZON_DAYS, NEXT_SLOTS_BOOKING_CAP,
AVAILABILITY_MAX_RANGE_DAYS, STORE_TIMEOUT_SECONDS, DEFAULT_BLOCK_REASON,
CONFIRMATION_SENDER.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


@dataclass(frozen=True)
class SchedulingConfig:
    timezone: str = "UTC"
    """IANA zone that wall-clock times ("09:00") are interpreted in."""

    search_horizon_days: int = 30
    booking_lookup_cap: int = 50
    max_range_days: int = 92
    store_timeout_seconds: float = 10.0
    default_block_reason: str = "Blocked by trainer"
    confirmation_sender: str = "no-reply@sculpo.app"

    def __post_init__(self) -> None:
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"timezone must be a valid IANA name, got {self.timezone!r}") from None
        for name in ("search_horizon_days", "booking_lookup_cap", "max_range_days"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be an integer >= 1, got {value!r}")
        if self.store_timeout_seconds <= 0:
            raise ValueError(
                f"store_timeout_seconds must be > 0, got {self.store_timeout_seconds!r}"
            )
        if not self.default_block_reason.strip():
            raise ValueError("default_block_reason must be a non-empty string")

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def from_env(cls, **overrides: object) -> SchedulingConfig:
        def _get(attr: str, env: str, default: str) -> str:
            value = overrides.get(attr)
            return str(value) if value is not None else os.environ.get(env, default)

        try:
            return cls(
                timezone=_get("timezone", "SCHEDULING_TIMEZONE", "UTC").strip(),
                search_horizon_days=int(_get("search_horizon_days", "NEXT_SLOTS_HORIZON_DAYS", "30")),
                booking_lookup_cap=int(_get("booking_lookup_cap", "NEXT_SLOTS_BOOKING_CAP", "50")),
                max_range_days=int(_get("max_range_days", "AVAILABILITY_MAX_RANGE_DAYS", "92")),
                store_timeout_seconds=float(_get("store_timeout_seconds", "STORE_TIMEOUT_SECONDS", "10")),
                default_block_reason=_get("default_block_reason", "DEFAULT_BLOCK_REASON", "Blocked by trainer"),
                confirmation_sender=_get("confirmation_sender", "CONFIRMATION_SENDER", "no-reply@sculpo.app"),
            )
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid scheduling configuration: {exc}") from None


def load_scheduling_config(**overrides: object) -> SchedulingConfig:
    return SchedulingConfig.from_env(**overrides)
