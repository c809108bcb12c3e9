"""
Project exception system.

Usage:
    from sculpo.core.exceptions import InvalidArgumentError, StoreFailureError

    raise InvalidArgumentError("dayOfWeek must be between 0 and 6", details={"day_of_week": 7})
    raise StoreFailureError("Booking lookup timed out", cause=original_error)
"""
from sculpo.core.exceptions.base import ProjectError
from sculpo.core.exceptions.errors import (
    ConfigurationError,
    InvalidArgumentError,
    NotFoundError,
    StoreFailureError,
)

__all__ = [
    "ProjectError",
    "ConfigurationError",
    "InvalidArgumentError",
    "NotFoundError",
    "StoreFailureError",
]
