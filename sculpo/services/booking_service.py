"""BookingService: create bookings, move them through their lifecycle, queue confirmations."""
from __future__ import annotations

import html
import logging
from decimal import Decimal
from typing import Any, Awaitable, Dict, Iterable, List, Optional, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from sculpo.config import SchedulingConfig, load_scheduling_config
from sculpo.core.exceptions import InvalidArgumentError, ProjectError, StoreFailureError
from sculpo.core.timeutils import to_local_date
from sculpo.infra.database.models.booking import ALLOWED_TRANSITIONS, Booking, BookingStatus
from sculpo.infra.database.repositories import (
    BookingRepository,
    MailRepository,
    ProfileRepository,
    ServiceRepository,
)
from sculpo.services.slot_engine import booking_instants
from sculpo.services.store import guarded
from sculpo.services.types import BookingView, CreateBookingDto, CreateBookingResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNKNOWN_CLIENT = "Unknown Client"
UNKNOWN_TRAINER = "Unknown Trainer"
UNKNOWN_SERVICE = "Unknown Service"

CONFIRMATION_SUBJECT = "Booking Confirmation"
CONFIRMATION_TEXT = "Your booking has been confirmed"
CONFIRMATION_TRAINER_FALLBACK = "Trainer"


def coerce_status(value: Any) -> BookingStatus:
    """Accept a BookingStatus, its integer value, or its name/label ("CONFIRMED", "Confirmed")."""
    if isinstance(value, BookingStatus):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return BookingStatus(value)
        except ValueError:
            pass
    if isinstance(value, str):
        wanted = value.strip().replace("_", "").lower()
        for status in BookingStatus:
            if status.label.lower() == wanted:
                return status
    raise InvalidArgumentError(f"Unknown booking status: {value!r}", details={"field": "status"})


def _parse_id(value: Any) -> Optional[UUID]:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


class BookingService:
    def __init__(self, session: AsyncSession, config: Optional[SchedulingConfig] = None) -> None:
        self._session = session
        self._config = config or load_scheduling_config()
        self._booking_repo = BookingRepository(session)
        self._profile_repo = ProfileRepository(session)
        self._service_repo = ServiceRepository(session)
        self._mail_repo = MailRepository(session)

    async def _call(self, awaitable: Awaitable[T], operation: str) -> T:
        return await guarded(awaitable, timeout=self._config.store_timeout_seconds, operation=operation)

    # ── Create ───────────────────────────────────────────────────────────

    async def create_booking(self, dto: CreateBookingDto) -> CreateBookingResponse:
        """Store a new Pending booking.

        No availability check happens here. Callers are expected to consult
        AvailabilityService.is_interval_available first; two concurrent
        callers can still book the same interval.
        """
        missing = [
            name for name in ("service_id", "client_id", "trainer_id", "booking_date", "start_time", "end_time")
            if getattr(dto, name) in (None, "")
        ]
        if missing:
            raise InvalidArgumentError(
                f"Missing required booking fields: {', '.join(missing)}", details={"missing": missing}
            )

        tz = self._config.tzinfo
        day = to_local_date(dto.booking_date, tz)
        if day is None:
            raise InvalidArgumentError("booking_date is not a valid date", details={"field": "booking_date"})
        start, end = booking_instants(dto, tz)
        if start is None or end is None:
            raise InvalidArgumentError("start_time and end_time must be valid date-times")
        if start >= end:
            raise InvalidArgumentError("start_time must be before end_time")
        if start.astimezone(tz).date() != day or end.astimezone(tz).date() != day:
            raise InvalidArgumentError(
                "booking_date must be the same calendar day as start_time and end_time",
                details={"booking_date": str(day)},
            )

        price = dto.price
        if price is None:
            service = await self._call(self._service_repo.get_by_id(dto.service_id), "create_booking.service")
            price = service.price if service is not None and service.price is not None else Decimal("0")

        booking = await self._call(
            self._booking_repo.create({
                "service_id": dto.service_id,
                "client_id": dto.client_id,
                "trainer_id": dto.trainer_id,
                "booking_date": day,
                "start_time": start,
                "end_time": end,
                "delivery_format_id": dto.delivery_format_id,
                "delivery_format_option_id": dto.delivery_format_option_id,
                "notes": dto.notes or None,
                "status": int(BookingStatus.PENDING),
                "price": Decimal(str(price)),
            }),
            "create_booking",
        )
        logger.info(
            "Booking %s created: trainer=%s client=%s %s-%s",
            booking.id, dto.trainer_id, dto.client_id, start.isoformat(), end.isoformat(),
        )
        return CreateBookingResponse(
            booking_id=str(booking.id),
            message="Booking created successfully",
            status=BookingStatus.PENDING.label,
        )

    # ── Read ─────────────────────────────────────────────────────────────

    async def _enrich(self, bookings: Iterable[Booking]) -> List[BookingView]:
        """Resolve display names with one batched lookup per directory."""
        bookings = list(bookings)
        if not bookings:
            return []
        profiles: Dict[str, Any] = {}
        services: Dict[str, Any] = {}
        people = [b.client_id for b in bookings] + [b.trainer_id for b in bookings]
        try:
            profiles = {
                p.id: p for p in await self._call(self._profile_repo.get_many(people), "enrich.profiles")
            }
            services = {
                s.id: s
                for s in await self._call(
                    self._service_repo.get_many(b.service_id for b in bookings), "enrich.services"
                )
            }
        except StoreFailureError:
            logger.warning("Display-name lookup failed for %d booking(s); using fallbacks", len(bookings))

        views = []
        for b in bookings:
            client = profiles.get(b.client_id)
            trainer = profiles.get(b.trainer_id)
            service = services.get(b.service_id)
            views.append(
                BookingView(
                    id=str(b.id),
                    service_id=b.service_id,
                    service_title=service.title if service is not None and service.title else UNKNOWN_SERVICE,
                    client_id=b.client_id,
                    client_name=client.display_name(UNKNOWN_CLIENT) if client is not None else UNKNOWN_CLIENT,
                    trainer_id=b.trainer_id,
                    trainer_name=trainer.display_name(UNKNOWN_TRAINER) if trainer is not None else UNKNOWN_TRAINER,
                    booking_date=to_local_date(b.booking_date, self._config.tzinfo),
                    start_time=b.start_time,
                    end_time=b.end_time,
                    status=BookingStatus(b.status),
                    price=Decimal(str(b.price if b.price is not None else 0)),
                    notes=b.notes or "",
                    delivery_format_id=b.delivery_format_id,
                    delivery_format_option_id=b.delivery_format_option_id,
                    created_at=b.created_at,
                    updated_at=b.updated_at,
                )
            )
        return views

    async def get_booking_by_id(self, booking_id: Any, *, strict: bool = False) -> Optional[BookingView]:
        uid = _parse_id(booking_id)
        if uid is None:
            return None
        try:
            booking = await self._call(self._booking_repo.get_by_id(uid), "get_booking_by_id")
        except StoreFailureError:
            if strict:
                raise
            logger.warning("Booking %s lookup failed; returning None", uid)
            return None
        if booking is None:
            return None
        views = await self._enrich([booking])
        return views[0]

    async def get_bookings_by_user_id(self, user_id: Optional[str], *, strict: bool = False) -> List[BookingView]:
        """Bookings where *user_id* is the trainer or the client."""
        if not user_id:
            return []
        try:
            rows = await self._call(self._booking_repo.list_for_user(user_id), "get_bookings_by_user_id")
        except StoreFailureError:
            if strict:
                raise
            logger.warning("Bookings for user %s unavailable; returning empty", user_id)
            return []
        unique = list({str(b.id): b for b in rows}.values())
        return await self._enrich(unique)

    # ── Lifecycle ────────────────────────────────────────────────────────

    async def update_booking_status(
        self,
        booking_id: Any,
        status: Any,
        notes: Optional[str] = None,
        *,
        notify: bool = True,
    ) -> bool:
        """Overwrite status (and notes when given). False if the booking does not exist.

        Transitions are not enforced; any status may follow any other. Changes
        outside ALLOWED_TRANSITIONS are only logged.
        """
        new_status = coerce_status(status)
        uid = _parse_id(booking_id)
        if uid is None:
            logger.info("Status update for invalid booking id %r ignored", booking_id)
            return False
        booking = await self._call(self._booking_repo.get_by_id(uid), "update_booking_status.read")
        if booking is None:
            logger.info("Status update for missing booking %s ignored", uid)
            return False

        current = BookingStatus(booking.status)
        if new_status != current and new_status not in ALLOWED_TRANSITIONS[current]:
            logger.warning(
                "Booking %s moved %s -> %s outside the documented lifecycle",
                uid, current.label, new_status.label,
            )

        patch: Dict[str, Any] = {"status": int(new_status)}
        if notes:
            patch["notes"] = notes
        await self._call(self._booking_repo.update(uid, patch), "update_booking_status.write")
        logger.info("Booking %s status %s -> %s", uid, current.label, new_status.label)

        if notify and new_status == BookingStatus.CONFIRMED:
            try:
                await self.send_booking_confirmation(uid)
            except ProjectError as exc:
                logger.warning("Confirmation for booking %s not queued: %s", uid, exc)
        return True

    async def send_booking_confirmation(self, booking_id: Any) -> bool:
        """Queue a confirmation email to the client. True if a message was queued.

        The lookups and the mail row run inside a SAVEPOINT, so a failed
        enqueue rolls back on its own and leaves the caller's pending writes
        (a status change) committable. Missing booking, client, trainer or
        client email aborts with a log entry. Only the final enqueue
        propagates store failures.
        """
        if booking_id in (None, ""):
            raise InvalidArgumentError("booking_id is required", details={"field": "booking_id"})
        uid = _parse_id(booking_id)
        if uid is None:
            logger.info("Confirmation skipped: invalid booking id %r", booking_id)
            return False
        try:
            async with self._session.begin_nested():
                return await self._queue_confirmation(uid)
        except StoreFailureError as exc:
            if (exc.details or {}).get("operation") == "confirmation.enqueue":
                raise
            logger.warning("Confirmation for booking %s skipped: lookup failed", uid)
            return False

    async def _queue_confirmation(self, uid: UUID) -> bool:
        booking = await self._call(self._booking_repo.get_by_id(uid), "confirmation.booking")
        if booking is None:
            logger.info("Confirmation skipped: booking %s not found", uid)
            return False
        found = {
            p.id: p
            for p in await self._call(
                self._profile_repo.get_many([booking.client_id, booking.trainer_id]),
                "confirmation.profiles",
            )
        }

        client = found.get(booking.client_id)
        trainer = found.get(booking.trainer_id)
        if client is None or trainer is None:
            logger.info(
                "Confirmation skipped for booking %s: %s profile missing",
                uid, "client" if client is None else "trainer",
            )
            return False
        if not client.email:
            logger.info("Confirmation skipped for booking %s: client has no email", uid)
            return False

        trainer_name = html.escape(trainer.display_name(CONFIRMATION_TRAINER_FALLBACK))
        await self._call(
            self._mail_repo.enqueue(
                to=client.email,
                subject=CONFIRMATION_SUBJECT,
                text=CONFIRMATION_TEXT,
                html=f"<p>{CONFIRMATION_TEXT} by {trainer_name}</p>",
                sender=self._config.confirmation_sender,
            ),
            "confirmation.enqueue",
        )
        logger.info("Confirmation queued for booking %s to client %s", uid, booking.client_id)
        return True
