"""Booking ORM and its status lifecycle."""
from __future__ import annotations

import datetime as _dt
import enum
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, DateTime, Index, Numeric, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sculpo.infra.database.models.base import Base, TimestampMixin, _uuid_pk


class BookingStatus(enum.IntEnum):
    PENDING = 0
    CONFIRMED = 1
    IN_PROGRESS = 2
    COMPLETED = 3
    CANCELLED_BY_CLIENT = 4
    CANCELLED_BY_TRAINER = 5
    NO_SHOW = 6
    REJECTED = 7

    @property
    def label(self) -> str:
        """Display name, e.g. "CancelledByClient"."""
        return "".join(part.capitalize() for part in self.name.split("_"))

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({
    BookingStatus.COMPLETED,
    BookingStatus.CANCELLED_BY_CLIENT,
    BookingStatus.CANCELLED_BY_TRAINER,
    BookingStatus.NO_SHOW,
    BookingStatus.REJECTED,
})

# Statuses whose time still counts as occupied on the trainer's calendar
BLOCKING_STATUSES = frozenset({
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.IN_PROGRESS,
    BookingStatus.COMPLETED,
})

_SIDE_EXITS = frozenset({
    BookingStatus.CANCELLED_BY_CLIENT,
    BookingStatus.CANCELLED_BY_TRAINER,
    BookingStatus.NO_SHOW,
    BookingStatus.REJECTED,
})

# Documented lifecycle. Not enforced on write; see BookingService.update_booking_status.
ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED}) | _SIDE_EXITS,
    BookingStatus.CONFIRMED: frozenset({BookingStatus.IN_PROGRESS}) | _SIDE_EXITS,
    BookingStatus.IN_PROGRESS: frozenset({BookingStatus.COMPLETED}),
    **{status: frozenset() for status in TERMINAL_STATUSES},
}


class Booking(Base, TimestampMixin):
    """A client's reservation of a trainer's service for [start_time, end_time)."""

    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_trainer_date", "trainer_id", "booking_date"),
        Index("ix_bookings_client", "client_id"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    service_id: Mapped[str] = mapped_column(String(128), nullable=False)
    client_id: Mapped[str] = mapped_column(String(128), nullable=False)
    trainer_id: Mapped[str] = mapped_column(String(128), nullable=False)

    booking_date: Mapped[_dt.date] = mapped_column(Date, nullable=False)
    start_time: Mapped[_dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[_dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    delivery_format_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    delivery_format_option_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    status: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=int(BookingStatus.PENDING))
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
