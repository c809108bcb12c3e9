"""FastAPI dependency providers."""
from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from sculpo.config import SchedulingConfig, load_scheduling_config
from sculpo.services import AvailabilityService, BookingService


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a transactional AsyncSession from the app-level session factory."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_scheduling_config(request: Request) -> SchedulingConfig:
    config = getattr(request.app.state, "scheduling_config", None)
    return config if config is not None else load_scheduling_config()


def get_availability_service(
    session: AsyncSession = Depends(get_session),
    config: SchedulingConfig = Depends(get_scheduling_config),
) -> AvailabilityService:
    return AvailabilityService(session, config)


def get_booking_service(
    session: AsyncSession = Depends(get_session),
    config: SchedulingConfig = Depends(get_scheduling_config),
) -> BookingService:
    return BookingService(session, config)
