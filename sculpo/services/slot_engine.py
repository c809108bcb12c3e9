"""Availability resolution: weekly template minus blocked times minus bookings.

Pure functions over already-loaded records (ORM rows or any object with the
same attributes). No I/O happens here; AvailabilityService does the loading.

All interval arithmetic is in minutes since local midnight of the day being
resolved, half-open [start, end). Output slots are ordered by their "HH:MM"
start string, which sorts correctly because every value is zero-padded.
"""
from __future__ import annotations

import datetime as _dt
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from sculpo.core.timeutils import (
    MINUTES_PER_DAY,
    combine_date_and_time,
    day_of_week,
    format_short_date,
    format_wall_clock,
    iter_days,
    minutes_on_day,
    normalize_to_instant,
    parse_wall_clock,
    to_local_date,
)
from sculpo.services.types import (
    OUTSIDE_HOURS,
    TRAINER_BUSY,
    DayAvailability,
    DaySlot,
    NextAvailableSlot,
    TimeSlot,
)

logger = logging.getLogger(__name__)

Window = Tuple[int, int]

KIND_BLOCKED = "blocked"
KIND_BOOKED = "booked"


@dataclass
class _Busy:
    start: int
    end: int
    kinds: set
    booking_ids: list


def normalize_reason(reason: Optional[str]) -> str:
    """Map internal busy kinds onto the user-facing reason vocabulary."""
    if reason == OUTSIDE_HOURS:
        return OUTSIDE_HOURS
    return TRAINER_BUSY


def template_window(template: Any) -> Optional[Window]:
    """Working window of a weekly template row, or None if the day is off."""
    if template is None or not getattr(template, "is_available", False):
        return None
    start = parse_wall_clock(template.start_time)
    end = parse_wall_clock(template.end_time)
    if start is None or end is None or start >= end:
        logger.warning(
            "Ignoring unusable weekly template %s for trainer %s: %r-%r",
            getattr(template, "day_of_week", "?"), getattr(template, "trainer_id", "?"),
            template.start_time, template.end_time,
        )
        return None
    return start, end


def templates_by_day(weekly: Iterable[Any]) -> Dict[int, Any]:
    return {row.day_of_week: row for row in weekly}


def block_window(block: Any) -> Optional[Window]:
    start = parse_wall_clock(block.start_time)
    end = parse_wall_clock(block.end_time)
    if start is None or end is None or start >= end:
        return None
    return start, end


def booking_instants(booking: Any, tz: _dt.tzinfo) -> Tuple[Optional[_dt.datetime], Optional[_dt.datetime]]:
    """Start/end instants of a booking.

    Older rows stored bare "HH:MM" strings; those are placed on booking_date.
    """
    def _read(value: Any) -> Optional[_dt.datetime]:
        instant = normalize_to_instant(value, tz)
        if instant is None and isinstance(value, str) and parse_wall_clock(value) is not None:
            return combine_date_and_time(booking.booking_date, value, tz)
        return instant

    return _read(booking.start_time), _read(booking.end_time)


def booking_window(booking: Any, day: _dt.date, tz: _dt.tzinfo) -> Optional[Window]:
    start, end = booking_instants(booking, tz)
    if start is None or end is None:
        logger.warning("Booking %s has unreadable start/end; ignored", getattr(booking, "id", "?"))
        return None
    window = minutes_on_day(start, day, tz), minutes_on_day(end, day, tz)
    return window if window[0] < window[1] else None


def group_by_day(records: Iterable[Any], attr: str, tz: _dt.tzinfo) -> Dict[_dt.date, List[Any]]:
    """Bucket records by the calendar day of *attr*, ignoring its time-of-day."""
    buckets: Dict[_dt.date, List[Any]] = defaultdict(list)
    for record in records:
        day = to_local_date(getattr(record, attr), tz)
        if day is not None:
            buckets[day].append(record)
    return buckets


def _merge(busy: List[_Busy]) -> List[_Busy]:
    merged: List[_Busy] = []
    for item in sorted(busy, key=lambda b: (b.start, b.end)):
        if merged and item.start < merged[-1].end:
            last = merged[-1]
            last.end = max(last.end, item.end)
            last.kinds |= item.kinds
            last.booking_ids.extend(i for i in item.booking_ids if i not in last.booking_ids)
        else:
            merged.append(_Busy(item.start, item.end, set(item.kinds), list(item.booking_ids)))
    return merged


def _busy_slot(item: _Busy) -> TimeSlot:
    kind = KIND_BOOKED if KIND_BOOKED in item.kinds else KIND_BLOCKED
    return TimeSlot(
        start_time=format_wall_clock(item.start),
        end_time=format_wall_clock(item.end),
        is_available=False,
        reason=normalize_reason(kind),
        kind=kind,
        booking_id=item.booking_ids[0] if len(item.booking_ids) == 1 else None,
    )


def resolve_day(
    day: _dt.date,
    template: Any,
    blocks: Sequence[Any],
    bookings: Sequence[Any],
    tz: _dt.tzinfo,
) -> DayAvailability:
    """Split the day's template window into available and busy slots.

    *blocks* and *bookings* must already be limited to *day*. Overlapping busy
    sources are merged so that available and busy slots together partition
    the template window exactly.
    """
    result = DayAvailability(date=day)
    window = template_window(template)
    if window is None:
        return result
    open_start, open_end = window

    busy: List[_Busy] = []
    for block in blocks:
        bw = block_window(block)
        if bw is None:
            continue
        start, end = max(bw[0], open_start), min(bw[1], open_end)
        if start < end:
            busy.append(_Busy(start, end, {KIND_BLOCKED}, []))
    for booking in bookings:
        bw = booking_window(booking, day, tz)
        if bw is None:
            continue
        start, end = max(bw[0], open_start), min(bw[1], open_end)
        if start < end:
            busy.append(_Busy(start, end, {KIND_BOOKED}, [str(booking.id)]))

    cursor = open_start
    for item in _merge(busy):
        if cursor < item.start:
            result.available_slots.append(
                TimeSlot(format_wall_clock(cursor), format_wall_clock(item.start), True)
            )
        result.busy_slots.append(_busy_slot(item))
        cursor = item.end
    if cursor < open_end:
        result.available_slots.append(
            TimeSlot(format_wall_clock(cursor), format_wall_clock(open_end), True)
        )

    result.available_slots.sort(key=lambda s: s.start_time)
    result.busy_slots.sort(key=lambda s: s.start_time)
    return result


def resolve_range(
    start_date: _dt.date,
    end_date: _dt.date,
    weekly: Iterable[Any],
    blocks: Iterable[Any],
    bookings: Iterable[Any],
    tz: _dt.tzinfo,
) -> List[DayAvailability]:
    """One DayAvailability per calendar day in [start_date, end_date]."""
    templates = templates_by_day(weekly)
    blocks_by_day = group_by_day(blocks, "date", tz)
    bookings_by_day = group_by_day(bookings, "booking_date", tz)
    return [
        resolve_day(
            day,
            templates.get(day_of_week(day)),
            blocks_by_day.get(day, []),
            bookings_by_day.get(day, []),
            tz,
        )
        for day in iter_days(start_date, end_date)
    ]


def next_open_days(
    today: _dt.date,
    count: int,
    weekly: Iterable[Any],
    blocks: Iterable[Any],
    bookings: Iterable[Any],
    tz: _dt.tzinfo,
    horizon_days: int,
) -> List[NextAvailableSlot]:
    """Greedy forward scan from tomorrow for whole days with nothing on them.

    A day qualifies only when its template is available and it has no blocked
    time and no booking at all; partially busy days are skipped. Returns fewer
    than *count* slots if the horizon runs out first.
    """
    templates = templates_by_day(weekly)
    blocked_days = set(group_by_day(blocks, "date", tz))
    booked_days = set(group_by_day(bookings, "booking_date", tz))

    slots: List[NextAvailableSlot] = []
    day = today + _dt.timedelta(days=1)
    for _ in range(horizon_days):
        if len(slots) >= count:
            break
        template = templates.get(day_of_week(day))
        if template_window(template) is not None and day not in blocked_days and day not in booked_days:
            slots.append(
                NextAvailableSlot(
                    date=day,
                    start_time=template.start_time,
                    end_time=template.end_time,
                    formatted_date=format_short_date(day),
                    formatted_time=template.start_time,
                )
            )
        day += _dt.timedelta(days=1)
    return slots


def flatten_day(day: DayAvailability) -> List[DaySlot]:
    """Available and busy slots of one day as a single time-ordered list."""
    slots = [DaySlot(time=s.start_time, available=True) for s in day.available_slots]
    slots.extend(
        DaySlot(time=s.start_time, available=False, reason=normalize_reason(s.kind or s.reason))
        for s in day.busy_slots
    )
    return sorted(slots, key=lambda s: s.time)


def interval_is_open(day: DayAvailability, start_minute: int, end_minute: int) -> bool:
    """True if [start_minute, end_minute) fits inside one available slot."""
    if start_minute >= end_minute or end_minute > MINUTES_PER_DAY:
        return False
    for slot in day.available_slots:
        if parse_wall_clock(slot.start_time) <= start_minute and end_minute <= parse_wall_clock(slot.end_time):
            return True
    return False
