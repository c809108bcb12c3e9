"""Date/time normalization shared by the stores and the availability engine.

Stored timestamps arrive in several shapes depending on which writer produced
them: native ``datetime``/``date`` objects, SDK timestamp objects exposing
``to_datetime()`` / ``toDate()``, serialized ``{"_seconds": ..., "_nanoseconds": ...}``
payloads, or ISO-8601 strings. ``normalize_to_instant`` folds all of them into
a timezone-aware ``datetime``; naive values are read as trainer-local time.

Wall-clock values ("09:00", "09:00:00") are handled as minutes since midnight.
"""
from __future__ import annotations

import datetime as _dt
import logging
from collections.abc import Mapping
from typing import Any, Optional

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

_UTC = _dt.timezone.utc


def _as_aware(value: _dt.datetime, tz: _dt.tzinfo) -> _dt.datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=tz)


def _epoch_seconds(value: Any) -> Optional[float]:
    """Pull epoch seconds out of a serialized timestamp, if it is one."""
    if isinstance(value, Mapping):
        seconds = value.get("_seconds", value.get("seconds"))
        nanos = value.get("_nanoseconds", value.get("nanoseconds", 0)) or 0
    else:
        seconds = getattr(value, "_seconds", None)
        nanos = getattr(value, "_nanoseconds", 0) or 0
    if seconds is None or isinstance(seconds, bool):
        return None
    try:
        return float(seconds) + float(nanos) / 1e9
    except (TypeError, ValueError):
        return None


def normalize_to_instant(value: Any, tz: _dt.tzinfo = _UTC) -> Optional[_dt.datetime]:
    """Return *value* as an aware datetime, or None when it cannot be read.

    Never raises. ``date`` values map to local midnight in *tz*.
    """
    if value is None or value == "":
        return None
    try:
        if isinstance(value, _dt.datetime):
            return _as_aware(value, tz)
        if isinstance(value, _dt.date):
            return _dt.datetime.combine(value, _dt.time(0, 0), tzinfo=tz)
        for accessor in ("to_datetime", "toDate"):
            method = getattr(value, accessor, None)
            if callable(method):
                converted = method()
                if isinstance(converted, _dt.datetime):
                    return _as_aware(converted, tz)
        seconds = _epoch_seconds(value)
        if seconds is not None:
            return _dt.datetime.fromtimestamp(seconds, tz=_UTC)
        if isinstance(value, str):
            text = value.strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            return _as_aware(_dt.datetime.fromisoformat(text), tz)
    except (ValueError, TypeError, OverflowError, OSError) as exc:
        logger.debug("normalize_to_instant: unreadable value %r (%s)", value, exc)
    return None


def to_local_date(value: Any, tz: _dt.tzinfo = _UTC) -> Optional[_dt.date]:
    """Calendar day of *value* in *tz*. Bare dates and "YYYY-MM-DD" strings pass through."""
    if isinstance(value, _dt.date) and not isinstance(value, _dt.datetime):
        return value
    if isinstance(value, str) and len(value.strip()) == 10:
        try:
            return _dt.date.fromisoformat(value.strip())
        except ValueError:
            return None
    instant = normalize_to_instant(value, tz)
    return instant.astimezone(tz).date() if instant is not None else None


def parse_wall_clock(value: Any) -> Optional[int]:
    """"HH:MM" or "HH:MM:SS" -> minutes since midnight (seconds dropped).

    "24:00" is accepted as end of day. Returns None for anything else.
    """
    if isinstance(value, _dt.time):
        return value.hour * 60 + value.minute
    if not isinstance(value, str):
        return None
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        return None
    hours, minutes = int(parts[0]), int(parts[1])
    seconds = int(parts[2]) if len(parts) == 3 else 0
    if hours == 24 and minutes == 0 and seconds == 0:
        return MINUTES_PER_DAY
    if not (0 <= hours < 24 and 0 <= minutes < 60 and 0 <= seconds < 60):
        return None
    return hours * 60 + minutes


def format_wall_clock(minutes: int) -> str:
    """Minutes since midnight -> zero-padded "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def combine_date_and_time(value: Any, wall_clock: str, tz: _dt.tzinfo = _UTC) -> Optional[_dt.datetime]:
    """Place *wall_clock* on the calendar day of *value* in *tz*.

    An unreadable *wall_clock* leaves the original time component untouched;
    an unreadable *value* yields None.
    """
    base = normalize_to_instant(value, tz)
    if base is None:
        return None
    local = base.astimezone(tz)
    minutes = parse_wall_clock(wall_clock)
    if minutes is None or minutes >= MINUTES_PER_DAY:
        return local
    naive = _dt.datetime.combine(local.date(), _dt.time(minutes // 60, minutes % 60))
    return naive.replace(tzinfo=tz)


def minutes_on_day(instant: _dt.datetime, day: _dt.date, tz: _dt.tzinfo) -> int:
    """Offset of *instant* from local midnight of *day*, clamped to [0, 1440]."""
    local = instant.astimezone(tz)
    if local.date() < day:
        return 0
    if local.date() > day:
        return MINUTES_PER_DAY
    return local.hour * 60 + local.minute


def day_of_week(day: _dt.date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return (day.weekday() + 1) % 7


def iter_days(start: _dt.date, end: _dt.date):
    """Calendar days from *start* to *end*, inclusive."""
    current = start
    while current <= end:
        yield current
        current += _dt.timedelta(days=1)


def format_short_date(day: _dt.date) -> str:
    """en-GB short form used in slot listings, e.g. "7 Mar"."""
    return f"{day.day} {day.strftime('%b')}"
