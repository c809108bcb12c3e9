"""Booking repository: trainer calendar lookups and per-user listings."""
from __future__ import annotations

import datetime as _dt
from typing import Iterable, List, Optional

from sqlalchemy import or_, select

from sculpo.infra.database.models.booking import Booking, BookingStatus
from sculpo.infra.database.repositories.base import BaseRepository


class BookingRepository(BaseRepository[Booking]):
    model = Booking

    async def list_for_trainer_range(
        self,
        trainer_id: str,
        start_date: _dt.date,
        end_date: _dt.date,
        *,
        statuses: Optional[Iterable[BookingStatus]] = None,
    ) -> List[Booking]:
        stmt = (
            select(Booking)
            .where(Booking.trainer_id == trainer_id)
            .where(Booking.booking_date >= start_date)
            .where(Booking.booking_date <= end_date)
            .order_by(Booking.booking_date, Booking.start_time)
        )
        if statuses is not None:
            stmt = stmt.where(Booking.status.in_([int(s) for s in statuses]))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_upcoming(
        self,
        trainer_id: str,
        from_date: _dt.date,
        *,
        limit: int,
        statuses: Optional[Iterable[BookingStatus]] = None,
    ) -> List[Booking]:
        """Earliest *limit* bookings on or after *from_date*."""
        stmt = (
            select(Booking)
            .where(Booking.trainer_id == trainer_id)
            .where(Booking.booking_date >= from_date)
            .order_by(Booking.booking_date.asc())
            .limit(limit)
        )
        if statuses is not None:
            stmt = stmt.where(Booking.status.in_([int(s) for s in statuses]))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_user(self, user_id: str) -> List[Booking]:
        """Bookings where the user is either the trainer or the client."""
        stmt = (
            select(Booking)
            .where(or_(Booking.trainer_id == user_id, Booking.client_id == user_id))
            .order_by(Booking.booking_date.desc(), Booking.start_time.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
