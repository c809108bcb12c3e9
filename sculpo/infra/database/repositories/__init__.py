"""Repositories for the scheduling database."""
from sculpo.infra.database.repositories.base import BaseRepository
from sculpo.infra.database.repositories.blocked_time import BlockedTimeRepository
from sculpo.infra.database.repositories.booking import BookingRepository
from sculpo.infra.database.repositories.directory import ProfileRepository, ServiceRepository
from sculpo.infra.database.repositories.mail import MailRepository
from sculpo.infra.database.repositories.weekly_availability import WeeklyAvailabilityRepository

__all__ = [
    "BaseRepository",
    "WeeklyAvailabilityRepository",
    "BlockedTimeRepository",
    "BookingRepository",
    "ProfileRepository",
    "ServiceRepository",
    "MailRepository",
]
