"""Core data structures for the scheduling service layer.

Slots are projections computed per request from the weekly template, blocked
times and bookings. They have no identity and are never persisted or cached.
"""
from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional

from sculpo.infra.database.models.booking import BookingStatus

TRAINER_BUSY = "trainer-busy"
OUTSIDE_HOURS = "outside-hours"


@dataclass(frozen=True)
class TimeSlot:
    """A contiguous wall-clock interval [start_time, end_time) on one day."""

    start_time: str
    end_time: str
    is_available: bool
    reason: Optional[str] = None
    """Normalized busy reason shown to users ("trainer-busy")."""

    kind: Optional[str] = None
    """Where the busy time came from: "blocked" or "booked"."""

    booking_id: Optional[str] = None


@dataclass
class DayAvailability:
    date: _dt.date
    available_slots: List[TimeSlot] = field(default_factory=list)
    busy_slots: List[TimeSlot] = field(default_factory=list)


@dataclass(frozen=True)
class NextAvailableSlot:
    date: _dt.date
    start_time: str
    end_time: str
    formatted_date: str
    formatted_time: str


@dataclass(frozen=True)
class DaySlot:
    """Flattened slot for a single-day picker: {time, available, reason?}."""

    time: str
    available: bool
    reason: Optional[str] = None


@dataclass
class TrainerAvailability:
    weekly_availability: List[Any] = field(default_factory=list)
    blocked_times: List[Any] = field(default_factory=list)


@dataclass
class ServiceAvailability:
    next_available_slots: List[NextAvailableSlot]
    time_slots: List[DaySlot]
    selected_date: _dt.date


@dataclass
class CreateBookingDto:
    service_id: str
    client_id: str
    trainer_id: str
    booking_date: Any
    start_time: Any
    """Full instant (date + time); any representation normalize_to_instant reads."""

    end_time: Any
    delivery_format_id: Optional[str] = None
    delivery_format_option_id: Optional[str] = None
    notes: Optional[str] = None
    price: Optional[Decimal] = None


@dataclass(frozen=True)
class CreateBookingResponse:
    booking_id: str
    message: str
    status: str


@dataclass
class BookingView:
    """Booking with display fields resolved at read time (never stored truth)."""

    id: str
    service_id: str
    service_title: str
    client_id: str
    client_name: str
    trainer_id: str
    trainer_name: str
    booking_date: Optional[_dt.date]
    start_time: Optional[_dt.datetime]
    end_time: Optional[_dt.datetime]
    status: BookingStatus
    price: Decimal
    notes: str = ""
    delivery_format_id: Optional[str] = None
    delivery_format_option_id: Optional[str] = None
    created_at: Optional[_dt.datetime] = None
    updated_at: Optional[_dt.datetime] = None
