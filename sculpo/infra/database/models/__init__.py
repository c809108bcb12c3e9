"""
sculpo.infra.database.models – SQLAlchemy 2.0 ORM models.

Exports Base, mixins, and all model classes.
"""
from sculpo.infra.database.models.base import Base, TimestampMixin, _uuid_pk
from sculpo.infra.database.models.blocked_time import BlockedTime
from sculpo.infra.database.models.booking import (
    ALLOWED_TRANSITIONS,
    BLOCKING_STATUSES,
    TERMINAL_STATUSES,
    Booking,
    BookingStatus,
)
from sculpo.infra.database.models.mail import MailMessage
from sculpo.infra.database.models.profile import Profile
from sculpo.infra.database.models.service import Service
from sculpo.infra.database.models.weekly_availability import (
    WeeklyAvailability,
    weekly_availability_key,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "_uuid_pk",
    "WeeklyAvailability",
    "weekly_availability_key",
    "BlockedTime",
    "Booking",
    "BookingStatus",
    "ALLOWED_TRANSITIONS",
    "BLOCKING_STATUSES",
    "TERMINAL_STATUSES",
    "Profile",
    "Service",
    "MailMessage",
]
