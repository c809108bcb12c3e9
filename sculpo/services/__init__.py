"""Scheduling services: availability resolution and booking lifecycle."""
from sculpo.services.availability_service import AvailabilityService
from sculpo.services.booking_service import BookingService

__all__ = ["AvailabilityService", "BookingService"]
