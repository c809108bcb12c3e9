"""Tests for date/time normalization and wall-clock helpers."""
from __future__ import annotations

import datetime as _dt
import unittest
from types import SimpleNamespace
from zoneinfo import ZoneInfo

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

UTC = _dt.timezone.utc


class TestNormalizeToInstant(unittest.TestCase):
    def test_every_stored_representation_reads_back_to_the_same_instant(self):
        instant = _dt.datetime(2025, 3, 10, 10, 0, tzinfo=UTC)
        seconds = int(instant.timestamp())
        representations = [
            instant,
            instant.isoformat(),
            "2025-03-10T10:00:00Z",
            {"_seconds": seconds, "_nanoseconds": 0},
            {"seconds": seconds},
            SimpleNamespace(_seconds=seconds, _nanoseconds=0),
            SimpleNamespace(toDate=lambda: instant),
            SimpleNamespace(to_datetime=lambda: instant),
        ]
        for value in representations:
            with self.subTest(value=value):
                self.assertEqual(normalize_to_instant(value), instant)

    def test_nanoseconds_are_kept(self):
        result = normalize_to_instant({"_seconds": 0, "_nanoseconds": 500_000_000})
        self.assertEqual(result, _dt.datetime(1970, 1, 1, 0, 0, 0, 500_000, tzinfo=UTC))

    def test_naive_values_are_read_in_the_given_zone(self):
        berlin = ZoneInfo("Europe/Berlin")
        result = normalize_to_instant(_dt.datetime(2025, 3, 10, 9, 0), berlin)
        self.assertEqual(result.tzinfo, berlin)
        self.assertEqual(result.astimezone(UTC).hour, 8)

    def test_date_maps_to_local_midnight(self):
        result = normalize_to_instant(_dt.date(2025, 3, 10))
        self.assertEqual(result, _dt.datetime(2025, 3, 10, tzinfo=UTC))

    def test_unreadable_values_return_none(self):
        for value in (None, "", "not a date", {"_seconds": "abc"}, object(), 42.5):
            with self.subTest(value=value):
                self.assertIsNone(normalize_to_instant(value))


class TestWallClock(unittest.TestCase):
    def test_parse(self):
        self.assertEqual(parse_wall_clock("09:00"), 540)
        self.assertEqual(parse_wall_clock("09:00:30"), 540)
        self.assertEqual(parse_wall_clock(" 17:45 "), 17 * 60 + 45)
        self.assertEqual(parse_wall_clock("24:00"), MINUTES_PER_DAY)
        self.assertEqual(parse_wall_clock(_dt.time(13, 15)), 795)

    def test_parse_rejects_garbage(self):
        for value in ("9am", "25:00", "12:60", "24:30", "", None, 900, "12"):
            with self.subTest(value=value):
                self.assertIsNone(parse_wall_clock(value))

    def test_format_is_zero_padded(self):
        self.assertEqual(format_wall_clock(545), "09:05")
        self.assertEqual(format_wall_clock(0), "00:00")
        self.assertEqual(format_wall_clock(MINUTES_PER_DAY), "24:00")


class TestCombineDateAndTime(unittest.TestCase):
    def test_places_time_on_the_date(self):
        result = combine_date_and_time(_dt.date(2025, 3, 10), "14:30")
        self.assertEqual(result, _dt.datetime(2025, 3, 10, 14, 30, tzinfo=UTC))

    def test_uses_trainer_local_time(self):
        london = ZoneInfo("Europe/London")
        result = combine_date_and_time(_dt.date(2025, 7, 1), "09:00", london)
        self.assertEqual(result.astimezone(UTC), _dt.datetime(2025, 7, 1, 8, 0, tzinfo=UTC))

    def test_invalid_time_leaves_original_time_component(self):
        base = _dt.datetime(2025, 3, 10, 7, 15, tzinfo=UTC)
        self.assertEqual(combine_date_and_time(base, "99:99"), base)

    def test_unreadable_date_returns_none(self):
        self.assertIsNone(combine_date_and_time("garbage", "10:00"))


class TestCalendarHelpers(unittest.TestCase):
    def test_day_of_week_starts_on_sunday(self):
        self.assertEqual(day_of_week(_dt.date(2025, 3, 9)), 0)
        self.assertEqual(day_of_week(_dt.date(2025, 3, 10)), 1)
        self.assertEqual(day_of_week(_dt.date(2025, 3, 15)), 6)

    def test_to_local_date(self):
        self.assertEqual(to_local_date("2025-03-10"), _dt.date(2025, 3, 10))
        self.assertEqual(to_local_date(_dt.date(2025, 3, 10)), _dt.date(2025, 3, 10))
        late = _dt.datetime(2025, 3, 10, 23, 30, tzinfo=UTC)
        self.assertEqual(to_local_date(late, ZoneInfo("Europe/Berlin")), _dt.date(2025, 3, 11))
        self.assertIsNone(to_local_date("2025-13-40"))

    def test_minutes_on_day_clamps_to_the_day(self):
        day = _dt.date(2025, 3, 10)
        self.assertEqual(minutes_on_day(_dt.datetime(2025, 3, 10, 10, 30, tzinfo=UTC), day, UTC), 630)
        self.assertEqual(minutes_on_day(_dt.datetime(2025, 3, 9, 22, 0, tzinfo=UTC), day, UTC), 0)
        self.assertEqual(
            minutes_on_day(_dt.datetime(2025, 3, 11, 1, 0, tzinfo=UTC), day, UTC), MINUTES_PER_DAY
        )

    def test_iter_days_is_inclusive(self):
        days = list(iter_days(_dt.date(2025, 2, 27), _dt.date(2025, 3, 2)))
        self.assertEqual(len(days), 4)
        self.assertEqual(days[-1], _dt.date(2025, 3, 2))

    def test_short_date(self):
        self.assertEqual(format_short_date(_dt.date(2025, 3, 7)), "7 Mar")


if __name__ == "__main__":
    unittest.main()
