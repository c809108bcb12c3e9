"""WeeklyAvailability ORM: one working-hours window per trainer and day of week."""
from __future__ import annotations

from sqlalchemy import Boolean, Index, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from sculpo.infra.database.models.base import Base, TimestampMixin


def weekly_availability_key(trainer_id: str, day_of_week: int) -> str:
    """Composite document key; one record per (trainer, day)."""
    return f"{trainer_id}_{day_of_week}"


class WeeklyAvailability(Base, TimestampMixin):
    """
    Recurring template. day_of_week: 0 = Sunday ... 6 = Saturday.
    start_time / end_time are wall-clock strings ("HH:MM" or "HH:MM:SS").
    Records are overwritten in place and never deleted; is_available toggles them.
    """

    __tablename__ = "trainer_availability"
    __table_args__ = (
        Index("ix_trainer_availability_trainer_day", "trainer_id", "day_of_week", unique=True),
    )

    id: Mapped[str] = mapped_column(String(160), primary_key=True)
    trainer_id: Mapped[str] = mapped_column(String(128), nullable=False)
    day_of_week: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    start_time: Mapped[str] = mapped_column(String(8), nullable=False)
    end_time: Mapped[str] = mapped_column(String(8), nullable=False)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
