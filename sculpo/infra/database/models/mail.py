"""MailMessage ORM: outbound email queue drained by a separate sender."""
from __future__ import annotations

import datetime as _dt
import uuid
from typing import Optional

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sculpo.infra.database.models.base import Base, TimestampMixin, _uuid_pk


class MailMessage(Base, TimestampMixin):
    __tablename__ = "mail"

    id: Mapped[uuid.UUID] = _uuid_pk()
    to: Mapped[str] = mapped_column(String(320), nullable=False)
    sender: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    html: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sent_at: Mapped[Optional[_dt.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
