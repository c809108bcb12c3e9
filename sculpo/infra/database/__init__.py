"""
sculpo.infra.database – async engine, session factory, models and repositories.

Public API
──────────
  build_engine, build_session_factory, init_db, close_engine
  Base and the scheduling models
  repositories for weekly availability, blocked times, bookings, profiles,
  services and the mail queue
"""
from sculpo.infra.database.engine import (
    build_engine,
    build_session_factory,
    close_engine,
    init_db,
)
from sculpo.infra.database.models import (
    Base,
    BlockedTime,
    Booking,
    BookingStatus,
    MailMessage,
    Profile,
    Service,
    WeeklyAvailability,
)
from sculpo.infra.database.repositories import (
    BlockedTimeRepository,
    BookingRepository,
    MailRepository,
    ProfileRepository,
    ServiceRepository,
    WeeklyAvailabilityRepository,
)

__all__ = [
    "build_engine",
    "build_session_factory",
    "init_db",
    "close_engine",
    "Base",
    "WeeklyAvailability",
    "BlockedTime",
    "Booking",
    "BookingStatus",
    "Profile",
    "Service",
    "MailMessage",
    "WeeklyAvailabilityRepository",
    "BlockedTimeRepository",
    "BookingRepository",
    "ProfileRepository",
    "ServiceRepository",
    "MailRepository",
]
