"""Store-call guard: timeout plus translation of driver errors to StoreFailureError."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from sculpo.core.exceptions import StoreFailureError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def guarded(awaitable: Awaitable[T], *, timeout: float, operation: str) -> T:
    """Await a repository call, bounded by *timeout* seconds.

    Raises StoreFailureError (with the original error as cause) when the store
    times out or rejects the call. Other exceptions propagate unchanged.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as exc:
        logger.error("Store call %s timed out after %.1fs", operation, timeout)
        raise StoreFailureError(
            f"{operation} timed out", details={"operation": operation}, cause=exc
        ) from exc
    except (SQLAlchemyError, OSError) as exc:
        logger.error("Store call %s failed: %s", operation, exc)
        raise StoreFailureError(
            f"{operation} failed", details={"operation": operation}, cause=exc
        ) from exc
