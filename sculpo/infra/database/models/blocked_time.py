"""BlockedTime ORM: one-off unavailable windows on a specific date."""
from __future__ import annotations

import datetime as _dt
import uuid

from sqlalchemy import Boolean, Date, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sculpo.infra.database.models.base import Base, TimestampMixin, _uuid_pk


class BlockedTime(Base, TimestampMixin):
    """
    Blocks the wall-clock window [start_time, end_time) on ``date``.
    Matched by calendar day only. Deactivated instead of deleted.
    """

    __tablename__ = "blocked_times"
    __table_args__ = (
        Index("ix_blocked_times_trainer_active_date", "trainer_id", "is_active", "date"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    trainer_id: Mapped[str] = mapped_column(String(128), nullable=False)
    date: Mapped[_dt.date] = mapped_column(Date, nullable=False)
    start_time: Mapped[str] = mapped_column(String(8), nullable=False)
    end_time: Mapped[str] = mapped_column(String(8), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False, default="Blocked by trainer")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
