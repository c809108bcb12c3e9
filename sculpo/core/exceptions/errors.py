"""
Scheduling error taxonomy: bad input, missing entity, failing store.
"""
from __future__ import annotations

from sculpo.core.exceptions.base import ProjectError


class ConfigurationError(ProjectError):
    """Invalid or missing configuration."""

    default_code = "CONFIGURATION_ERROR"
    default_http_status = 500


class InvalidArgumentError(ProjectError):
    """A required field is missing or out of range. Raised before any store access."""

    default_code = "INVALID_ARGUMENT"
    default_http_status = 400


class NotFoundError(ProjectError):
    """Referenced booking, profile, block or service does not exist."""

    default_code = "NOT_FOUND"
    default_http_status = 404


class StoreFailureError(ProjectError):
    """The persistence layer timed out, was unreachable or rejected the call."""

    default_code = "STORE_FAILURE"
    default_http_status = 503
