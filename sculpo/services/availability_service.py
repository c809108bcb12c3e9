"""AvailabilityService: weekly templates, blocked times and slot queries for trainers."""
from __future__ import annotations

import datetime as _dt
import logging
from typing import Any, Awaitable, Dict, Iterable, List, Optional, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from sculpo.config import SchedulingConfig, load_scheduling_config
from sculpo.core.exceptions import InvalidArgumentError, NotFoundError, StoreFailureError
from sculpo.core.timeutils import (
    MINUTES_PER_DAY,
    minutes_on_day,
    normalize_to_instant,
    parse_wall_clock,
    to_local_date,
)
from sculpo.infra.database.models.booking import BLOCKING_STATUSES
from sculpo.infra.database.models.weekly_availability import weekly_availability_key
from sculpo.infra.database.repositories import (
    BlockedTimeRepository,
    BookingRepository,
    ServiceRepository,
    WeeklyAvailabilityRepository,
)
from sculpo.services import slot_engine
from sculpo.services.store import guarded
from sculpo.services.types import (
    DayAvailability,
    DaySlot,
    NextAvailableSlot,
    ServiceAvailability,
    TrainerAvailability,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def require_text(value: Any, field: str) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidArgumentError(f"{field} is required", details={"field": field})
    return str(value).strip()


def require_date(value: Any, field: str, tz: _dt.tzinfo) -> _dt.date:
    if value is None or value == "":
        raise InvalidArgumentError(f"{field} is required", details={"field": field})
    day = to_local_date(value, tz)
    if day is None:
        raise InvalidArgumentError(f"{field} is not a valid date: {value!r}", details={"field": field})
    return day


def require_wall_clock(value: Any, field: str) -> int:
    if value is None or value == "":
        raise InvalidArgumentError(f"{field} is required", details={"field": field})
    minutes = parse_wall_clock(value)
    if minutes is None:
        raise InvalidArgumentError(
            f"{field} must be a HH:MM or HH:MM:SS time, got {value!r}", details={"field": field}
        )
    return minutes


def check_day_of_week(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 6:
        raise InvalidArgumentError(
            "dayOfWeek must be an integer between 0 (Sunday) and 6 (Saturday)",
            details={"field": "day_of_week", "value": value},
        )
    return value


class AvailabilityService:
    """Availability for one trainer at a time, computed per request from the stores.

    Reads degrade to an empty result when the store fails unless called with
    ``strict=True``. Writes always propagate StoreFailureError.
    """

    def __init__(self, session: AsyncSession, config: Optional[SchedulingConfig] = None) -> None:
        self._session = session
        self._config = config or load_scheduling_config()
        self._weekly_repo = WeeklyAvailabilityRepository(session)
        self._block_repo = BlockedTimeRepository(session)
        self._booking_repo = BookingRepository(session)
        self._service_repo = ServiceRepository(session)

    @property
    def tz(self) -> _dt.tzinfo:
        return self._config.tzinfo

    def today(self) -> _dt.date:
        return _dt.datetime.now(self.tz).date()

    async def _call(self, awaitable: Awaitable[T], operation: str) -> T:
        return await guarded(awaitable, timeout=self._config.store_timeout_seconds, operation=operation)

    # ── Weekly template ──────────────────────────────────────────────────

    def _weekly_record(
        self,
        trainer_id: str,
        day_of_week: Any,
        start_time: Any,
        end_time: Any,
        is_available: bool,
    ) -> Dict[str, Any]:
        dow = check_day_of_week(day_of_week)
        start = require_wall_clock(start_time, "start_time")
        end = require_wall_clock(end_time, "end_time")
        if is_available and start >= end:
            raise InvalidArgumentError(
                "start_time must be before end_time",
                details={"start_time": start_time, "end_time": end_time},
            )
        return {
            "trainer_id": trainer_id,
            "day_of_week": dow,
            "start_time": str(start_time).strip(),
            "end_time": str(end_time).strip(),
            "is_available": bool(is_available),
        }

    async def set_weekly_availability(
        self,
        trainer_id: str,
        day_of_week: int,
        start_time: str,
        end_time: str,
        is_available: bool = True,
    ) -> Dict[str, Any]:
        """Upsert the template for (trainer, day). Later calls overwrite earlier ones."""
        trainer_id = require_text(trainer_id, "trainer_id")
        record = self._weekly_record(trainer_id, day_of_week, start_time, end_time, is_available)
        key = weekly_availability_key(trainer_id, record["day_of_week"])
        _, created = await self._call(self._weekly_repo.merge(key, record), "set_weekly_availability")
        logger.info(
            "Weekly availability %s for %s: %s-%s available=%s",
            "created" if created else "updated", key,
            record["start_time"], record["end_time"], record["is_available"],
        )
        return {"success": True, "message": "Availability updated successfully"}

    async def set_weekly_schedule(
        self,
        trainer_id: str,
        entries: Iterable[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Bulk form of set_weekly_availability.

        Every entry is validated before anything is written; entries are then
        applied one day at a time in the given order.
        """
        trainer_id = require_text(trainer_id, "trainer_id")
        records = [
            self._weekly_record(
                trainer_id,
                entry.get("day_of_week"),
                entry.get("start_time"),
                entry.get("end_time"),
                entry.get("is_available", True),
            )
            for entry in entries
        ]
        if not records:
            raise InvalidArgumentError("entries must contain at least one day")
        for record in records:
            key = weekly_availability_key(trainer_id, record["day_of_week"])
            await self._call(self._weekly_repo.merge(key, record), "set_weekly_schedule")
        logger.info("Weekly schedule for %s updated: %d day(s)", trainer_id, len(records))
        return {"success": True, "message": "Availability updated successfully", "updated": len(records)}

    async def get_weekly_availability(self, trainer_id: str, *, strict: bool = False) -> List[Any]:
        trainer_id = require_text(trainer_id, "trainer_id")
        try:
            return await self._call(self._weekly_repo.list_for_trainer(trainer_id), "get_weekly_availability")
        except StoreFailureError:
            if strict:
                raise
            logger.warning("Weekly availability for %s unavailable; returning empty", trainer_id)
            return []

    # ── Blocked times ────────────────────────────────────────────────────

    async def block_time_slot(
        self,
        trainer_id: str,
        date: Any,
        start_time: str,
        end_time: str,
        reason: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a new block. Overlapping blocks are allowed and all count."""
        trainer_id = require_text(trainer_id, "trainer_id")
        day = require_date(date, "date", self.tz)
        start = require_wall_clock(start_time, "start_time")
        end = require_wall_clock(end_time, "end_time")
        if start >= end:
            raise InvalidArgumentError(
                "start_time must be before end_time",
                details={"start_time": start_time, "end_time": end_time},
            )
        block = await self._call(
            self._block_repo.create({
                "trainer_id": trainer_id,
                "date": day,
                "start_time": str(start_time).strip(),
                "end_time": str(end_time).strip(),
                "reason": (reason or "").strip() or self._config.default_block_reason,
                "is_active": True,
            }),
            "block_time_slot",
        )
        logger.info("Blocked %s %s-%s for %s (id=%s)", day, start_time, end_time, trainer_id, block.id)
        return {"success": True, "message": "Time slot blocked successfully", "id": str(block.id)}

    async def unblock_time_slot(self, block_id: Any) -> bool:
        """Deactivate a block. False if it was already inactive."""
        try:
            uid = block_id if isinstance(block_id, UUID) else UUID(str(block_id))
        except (TypeError, ValueError):
            raise InvalidArgumentError(f"Invalid block id: {block_id!r}", details={"field": "block_id"}) from None
        block = await self._call(self._block_repo.get_by_id(uid), "unblock_time_slot")
        if block is None:
            raise NotFoundError("Blocked time not found", details={"block_id": str(uid)})
        if not block.is_active:
            return False
        await self._call(self._block_repo.deactivate(uid), "unblock_time_slot")
        logger.info("Unblocked %s for %s", uid, block.trainer_id)
        return True

    async def get_blocked_times(self, trainer_id: str, *, strict: bool = False) -> List[Any]:
        """Active blocks only, oldest date first."""
        trainer_id = require_text(trainer_id, "trainer_id")
        try:
            return await self._call(self._block_repo.list_active(trainer_id), "get_blocked_times")
        except StoreFailureError:
            if strict:
                raise
            logger.warning("Blocked times for %s unavailable; returning empty", trainer_id)
            return []

    async def get_trainer_availability(self, trainer_id: str, *, strict: bool = False) -> TrainerAvailability:
        weekly = await self.get_weekly_availability(trainer_id, strict=strict)
        blocks = await self.get_blocked_times(trainer_id, strict=strict)
        return TrainerAvailability(
            weekly_availability=sorted(weekly, key=lambda w: w.day_of_week),
            blocked_times=blocks,
        )

    # ── Resolution ───────────────────────────────────────────────────────

    async def get_availability_for_range(
        self,
        trainer_id: str,
        start_date: Any,
        end_date: Any,
        service_id: Optional[str] = None,
        *,
        strict: bool = False,
    ) -> List[DayAvailability]:
        """Per-day available and busy slots for every date in [start_date, end_date]."""
        trainer_id = require_text(trainer_id, "trainer_id")
        start = require_date(start_date, "start_date", self.tz)
        end = require_date(end_date, "end_date", self.tz)
        if end < start:
            raise InvalidArgumentError(
                "end_date must not be before start_date",
                details={"start_date": str(start), "end_date": str(end)},
            )
        span = (end - start).days + 1
        if span > self._config.max_range_days:
            raise InvalidArgumentError(
                f"Date range too large: {span} days (max {self._config.max_range_days})",
                details={"days": span},
            )

        try:
            weekly = await self._call(self._weekly_repo.list_for_trainer(trainer_id), "availability.weekly")
            blocks = await self._call(
                self._block_repo.list_active_for_range(trainer_id, start, end), "availability.blocked"
            )
            bookings = await self._call(
                self._booking_repo.list_for_trainer_range(
                    trainer_id, start, end, statuses=BLOCKING_STATUSES
                ),
                "availability.bookings",
            )
        except StoreFailureError:
            if strict:
                raise
            logger.warning(
                "Availability for %s %s..%s unavailable; returning no slots", trainer_id, start, end
            )
            return []

        return slot_engine.resolve_range(start, end, weekly, blocks, bookings, self.tz)

    async def get_next_available_slots(
        self,
        trainer_id: str,
        count: int = 3,
        service_id: Optional[str] = None,
        *,
        today: Optional[_dt.date] = None,
        strict: bool = False,
    ) -> List[NextAvailableSlot]:
        """Up to *count* whole free days, searching forward from tomorrow.

        Looks at most ``search_horizon_days`` ahead and considers at most
        ``booking_lookup_cap`` upcoming bookings.
        """
        trainer_id = require_text(trainer_id, "trainer_id")
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise InvalidArgumentError("count must be a positive integer", details={"count": count})
        today = today or self.today()
        first = today + _dt.timedelta(days=1)
        last = today + _dt.timedelta(days=self._config.search_horizon_days)

        try:
            weekly = await self._call(self._weekly_repo.list_for_trainer(trainer_id), "next_slots.weekly")
            blocks = await self._call(
                self._block_repo.list_active_for_range(trainer_id, first, last), "next_slots.blocked"
            )
            bookings = await self._call(
                self._booking_repo.list_upcoming(
                    trainer_id,
                    first,
                    limit=self._config.booking_lookup_cap,
                    statuses=BLOCKING_STATUSES,
                ),
                "next_slots.bookings",
            )
        except StoreFailureError:
            if strict:
                raise
            logger.warning("Next slots for %s unavailable; returning empty", trainer_id)
            return []

        return slot_engine.next_open_days(
            today, count, weekly, blocks, bookings, self.tz, self._config.search_horizon_days
        )

    async def get_availability_for_date(
        self,
        trainer_id: str,
        date: Any,
        service_id: Optional[str] = None,
        *,
        strict: bool = False,
    ) -> List[DaySlot]:
        day = require_date(date, "date", self.tz)
        days = await self.get_availability_for_range(trainer_id, day, day, service_id, strict=strict)
        return slot_engine.flatten_day(days[0]) if days else []

    async def get_service_availability(
        self,
        service_id: str,
        *,
        today: Optional[_dt.date] = None,
    ) -> ServiceAvailability:
        """Next three free days and today's slots for the trainer offering *service_id*."""
        service_id = require_text(service_id, "service_id")
        today = today or self.today()
        empty = ServiceAvailability(next_available_slots=[], time_slots=[], selected_date=today)
        try:
            service = await self._call(self._service_repo.get_by_id(service_id), "service_availability.service")
            if service is None or not service.trainer_id:
                logger.info("Service %s not found or has no trainer; no availability", service_id)
                return empty
            next_slots = await self.get_next_available_slots(
                service.trainer_id, 3, service_id, today=today, strict=True
            )
            time_slots = await self.get_availability_for_date(
                service.trainer_id, today, service_id, strict=True
            )
        except StoreFailureError:
            logger.warning("Availability for service %s unavailable; returning empty", service_id)
            return empty
        return ServiceAvailability(
            next_available_slots=next_slots, time_slots=time_slots, selected_date=today
        )

    async def is_interval_available(
        self,
        trainer_id: str,
        start: Any,
        end: Any,
        *,
        strict: bool = False,
    ) -> bool:
        """Advisory pre-booking check: [start, end) lies inside one available slot.

        Nothing is reserved; a concurrent booking may still take the interval.
        """
        trainer_id = require_text(trainer_id, "trainer_id")
        start_at = normalize_to_instant(start, self.tz)
        end_at = normalize_to_instant(end, self.tz)
        if start_at is None or end_at is None:
            raise InvalidArgumentError("start and end must be valid date-times")
        if start_at >= end_at:
            raise InvalidArgumentError("start must be before end")

        day = start_at.astimezone(self.tz).date()
        start_minute = minutes_on_day(start_at, day, self.tz)
        end_minute = minutes_on_day(end_at, day, self.tz)
        if end_minute == MINUTES_PER_DAY and end_at.astimezone(self.tz) != _dt.datetime.combine(
            day + _dt.timedelta(days=1), _dt.time(0, 0), tzinfo=self.tz
        ):
            return False

        days = await self.get_availability_for_range(trainer_id, day, day, strict=strict)
        if not days:
            return False
        return slot_engine.interval_is_open(days[0], start_minute, end_minute)
