"""Tests for the pure availability resolution functions."""
from __future__ import annotations

import datetime as _dt
import unittest
from types import SimpleNamespace

from sculpo.core.timeutils import parse_wall_clock
from sculpo.services import slot_engine

UTC = _dt.timezone.utc
MONDAY = _dt.date(2025, 3, 10)
SUNDAY = _dt.date(2025, 3, 9)


# ─── helpers ─────────────────────────────────────────────────────────────────

def _template(dow, start="09:00", end="17:00", available=True, trainer_id="t1"):
    return SimpleNamespace(
        trainer_id=trainer_id, day_of_week=dow, start_time=start, end_time=end, is_available=available
    )


def _block(day, start, end):
    return SimpleNamespace(date=day, start_time=start, end_time=end, reason="Blocked by trainer", is_active=True)


def _booking(day, start, end, booking_id="b1"):
    return SimpleNamespace(id=booking_id, booking_date=day, start_time=start, end_time=end)


def _at(day, hh, mm=0):
    return _dt.datetime(day.year, day.month, day.day, hh, mm, tzinfo=UTC)


def _spans(slots):
    return [(s.start_time, s.end_time) for s in slots]


def _resolve(blocks=(), bookings=(), weekly=None, day=MONDAY):
    weekly = weekly if weekly is not None else [_template(1)]
    days = slot_engine.resolve_range(day, day, weekly, list(blocks), list(bookings), UTC)
    return days[0]


def _assert_partition(test, day, window):
    slots = sorted(day.available_slots + day.busy_slots, key=lambda s: s.start_time)
    test.assertEqual(slots[0].start_time, window[0])
    test.assertEqual(slots[-1].end_time, window[1])
    for prev, nxt in zip(slots, slots[1:]):
        test.assertEqual(prev.end_time, nxt.start_time)
    for slot in slots:
        test.assertLess(parse_wall_clock(slot.start_time), parse_wall_clock(slot.end_time))


# ─── resolve_range ───────────────────────────────────────────────────────────

class TestResolveRange(unittest.TestCase):
    def test_monday_with_block_and_booking(self):
        day = _resolve(
            blocks=[_block(MONDAY, "12:00", "13:00")],
            bookings=[_booking(MONDAY, _at(MONDAY, 10), _at(MONDAY, 10, 30))],
        )

        self.assertEqual(day.date, MONDAY)
        self.assertEqual(_spans(day.available_slots), [("09:00", "10:00"), ("10:30", "12:00"), ("13:00", "17:00")])
        self.assertEqual(_spans(day.busy_slots), [("10:00", "10:30"), ("12:00", "13:00")])
        self.assertEqual([s.reason for s in day.busy_slots], ["trainer-busy", "trainer-busy"])
        self.assertEqual([s.kind for s in day.busy_slots], ["booked", "blocked"])
        self.assertEqual(day.busy_slots[0].booking_id, "b1")
        self.assertIsNone(day.busy_slots[1].booking_id)
        self.assertTrue(all(s.is_available for s in day.available_slots))
        self.assertFalse(any(s.is_available for s in day.busy_slots))

    def test_free_day_is_one_available_slot(self):
        day = _resolve()
        self.assertEqual(_spans(day.available_slots), [("09:00", "17:00")])
        self.assertEqual(day.busy_slots, [])

    def test_day_without_template_has_no_slots(self):
        for weekly in ([], [_template(1, available=False)], [_template(2)]):
            with self.subTest(weekly=weekly):
                day = _resolve(weekly=weekly, blocks=[_block(MONDAY, "12:00", "13:00")])
                self.assertEqual(day.available_slots, [])
                self.assertEqual(day.busy_slots, [])

    def test_unusable_template_is_treated_as_day_off(self):
        day = _resolve(weekly=[_template(1, start="17:00", end="09:00")])
        self.assertEqual(day.available_slots, [])

    def test_overlapping_and_duplicate_blocks_are_merged(self):
        day = _resolve(blocks=[
            _block(MONDAY, "12:00", "13:00"),
            _block(MONDAY, "12:00", "13:00"),
            _block(MONDAY, "12:30", "14:00"),
        ])
        self.assertEqual(_spans(day.busy_slots), [("12:00", "14:00")])
        self.assertEqual(_spans(day.available_slots), [("09:00", "12:00"), ("14:00", "17:00")])

    def test_touching_intervals_stay_separate(self):
        day = _resolve(
            blocks=[_block(MONDAY, "10:00", "11:00")],
            bookings=[_booking(MONDAY, _at(MONDAY, 11), _at(MONDAY, 12))],
        )
        self.assertEqual(_spans(day.busy_slots), [("10:00", "11:00"), ("11:00", "12:00")])

    def test_block_and_booking_overlap_counts_as_booked(self):
        day = _resolve(
            blocks=[_block(MONDAY, "10:00", "11:00")],
            bookings=[_booking(MONDAY, _at(MONDAY, 10, 30), _at(MONDAY, 11, 30))],
        )
        self.assertEqual(len(day.busy_slots), 1)
        self.assertEqual(_spans(day.busy_slots), [("10:00", "11:30")])
        self.assertEqual(day.busy_slots[0].kind, "booked")
        self.assertEqual(day.busy_slots[0].booking_id, "b1")

    def test_merged_bookings_carry_no_single_booking_id(self):
        day = _resolve(bookings=[
            _booking(MONDAY, _at(MONDAY, 10), _at(MONDAY, 11), "b1"),
            _booking(MONDAY, _at(MONDAY, 10, 30), _at(MONDAY, 12), "b2"),
        ])
        self.assertEqual(_spans(day.busy_slots), [("10:00", "12:00")])
        self.assertIsNone(day.busy_slots[0].booking_id)

    def test_busy_time_is_clipped_to_working_hours(self):
        day = _resolve(
            blocks=[_block(MONDAY, "16:00", "20:00")],
            bookings=[_booking(MONDAY, _at(MONDAY, 8), _at(MONDAY, 9, 30))],
        )
        self.assertEqual(_spans(day.busy_slots), [("09:00", "09:30"), ("16:00", "17:00")])
        self.assertEqual(_spans(day.available_slots), [("09:30", "16:00")])

    def test_busy_time_outside_working_hours_is_ignored(self):
        day = _resolve(blocks=[_block(MONDAY, "06:00", "08:00"), _block(MONDAY, "18:00", "19:00")])
        self.assertEqual(day.busy_slots, [])

    def test_blocks_match_by_calendar_day_only(self):
        day = _resolve(blocks=[
            _block("2025-03-10", "12:00", "13:00"),
            _block(_dt.datetime(2025, 3, 10, 18, 45, tzinfo=UTC), "14:00", "15:00"),
            _block(_dt.date(2025, 3, 11), "10:00", "11:00"),
        ])
        self.assertEqual(_spans(day.busy_slots), [("12:00", "13:00"), ("14:00", "15:00")])

    def test_legacy_wall_clock_bookings_are_placed_on_booking_date(self):
        day = _resolve(bookings=[_booking(MONDAY, "14:00", "15:00")])
        self.assertEqual(_spans(day.busy_slots), [("14:00", "15:00")])

    def test_unreadable_booking_is_skipped(self):
        day = _resolve(bookings=[_booking(MONDAY, None, "nonsense")])
        self.assertEqual(day.busy_slots, [])

    def test_slots_partition_the_template_window(self):
        cases = [
            ([], []),
            ([_block(MONDAY, "09:00", "17:00")], []),
            ([_block(MONDAY, "09:00", "10:00"), _block(MONDAY, "16:30", "17:00")], []),
            ([_block(MONDAY, "11:00", "12:00")], [_booking(MONDAY, _at(MONDAY, 11, 30), _at(MONDAY, 13))]),
            ([_block(MONDAY, "08:00", "09:15")], [_booking(MONDAY, _at(MONDAY, 16), _at(MONDAY, 18))]),
        ]
        for blocks, bookings in cases:
            with self.subTest(blocks=blocks, bookings=bookings):
                day = _resolve(blocks=blocks, bookings=bookings)
                _assert_partition(self, day, ("09:00", "17:00"))

    def test_one_entry_per_day_in_range(self):
        weekly = [_template(1), _template(3)]
        days = slot_engine.resolve_range(SUNDAY, _dt.date(2025, 3, 15), weekly, [], [], UTC)
        self.assertEqual([d.date for d in days], [SUNDAY + _dt.timedelta(days=i) for i in range(7)])
        self.assertEqual([bool(d.available_slots) for d in days], [False, True, False, True, False, False, False])


# ─── next_open_days ──────────────────────────────────────────────────────────

class TestNextOpenDays(unittest.TestCase):
    weekly = [_template(1), _template(3), _template(5)]

    def test_next_three_mon_wed_fri(self):
        slots = slot_engine.next_open_days(SUNDAY, 3, self.weekly, [], [], UTC, 30)

        self.assertEqual([s.date for s in slots], [
            _dt.date(2025, 3, 10), _dt.date(2025, 3, 12), _dt.date(2025, 3, 14),
        ])
        self.assertEqual(slots[0].start_time, "09:00")
        self.assertEqual(slots[0].end_time, "17:00")
        self.assertEqual(slots[0].formatted_date, "10 Mar")
        self.assertEqual(slots[0].formatted_time, "09:00")

    def test_template_times_are_returned_as_stored(self):
        weekly = [_template(1, start="09:00:00", end="17:30:00")]
        slot = slot_engine.next_open_days(SUNDAY, 1, weekly, [], [], UTC, 30)[0]
        self.assertEqual((slot.start_time, slot.end_time), ("09:00:00", "17:30:00"))
        self.assertEqual(slot.formatted_time, "09:00:00")

    def test_today_is_excluded(self):
        slots = slot_engine.next_open_days(MONDAY, 1, self.weekly, [], [], UTC, 30)
        self.assertEqual(slots[0].date, _dt.date(2025, 3, 12))

    def test_partially_busy_days_are_skipped(self):
        blocks = [_block(_dt.date(2025, 3, 10), "12:00", "12:30")]
        bookings = [_booking(_dt.date(2025, 3, 12), _at(_dt.date(2025, 3, 12), 9), _at(_dt.date(2025, 3, 12), 10))]
        slots = slot_engine.next_open_days(SUNDAY, 3, self.weekly, blocks, bookings, UTC, 30)
        self.assertEqual([s.date for s in slots], [
            _dt.date(2025, 3, 14), _dt.date(2025, 3, 17), _dt.date(2025, 3, 19),
        ])

    def test_horizon_bounds_the_search(self):
        slots = slot_engine.next_open_days(SUNDAY, 5, self.weekly, [], [], UTC, 3)
        self.assertEqual([s.date for s in slots], [_dt.date(2025, 3, 10), _dt.date(2025, 3, 12)])

    def test_no_template_no_slots(self):
        self.assertEqual(slot_engine.next_open_days(SUNDAY, 3, [], [], [], UTC, 30), [])


# ─── projections ─────────────────────────────────────────────────────────────

class TestProjections(unittest.TestCase):
    def setUp(self):
        self.day = _resolve(
            blocks=[_block(MONDAY, "12:00", "13:00")],
            bookings=[_booking(MONDAY, _at(MONDAY, 10), _at(MONDAY, 10, 30))],
        )

    def test_flatten_day_orders_by_time(self):
        slots = slot_engine.flatten_day(self.day)
        self.assertEqual(
            [(s.time, s.available, s.reason) for s in slots],
            [
                ("09:00", True, None),
                ("10:00", False, "trainer-busy"),
                ("10:30", True, None),
                ("12:00", False, "trainer-busy"),
                ("13:00", True, None),
            ],
        )

    def test_normalize_reason(self):
        self.assertEqual(slot_engine.normalize_reason("blocked"), "trainer-busy")
        self.assertEqual(slot_engine.normalize_reason("booked"), "trainer-busy")
        self.assertEqual(slot_engine.normalize_reason("outside-hours"), "outside-hours")
        self.assertEqual(slot_engine.normalize_reason(None), "trainer-busy")

    def test_interval_is_open(self):
        self.assertTrue(slot_engine.interval_is_open(self.day, 9 * 60, 10 * 60))
        self.assertTrue(slot_engine.interval_is_open(self.day, 13 * 60, 17 * 60))
        self.assertFalse(slot_engine.interval_is_open(self.day, 9 * 60 + 30, 10 * 60 + 15))
        self.assertFalse(slot_engine.interval_is_open(self.day, 16 * 60, 18 * 60))
        self.assertFalse(slot_engine.interval_is_open(self.day, 10 * 60, 10 * 60))


if __name__ == "__main__":
    unittest.main()
