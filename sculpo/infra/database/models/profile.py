"""Profile ORM: trainers and clients, used for display names and email."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from sculpo.infra.database.models.base import Base, TimestampMixin


class Profile(Base, TimestampMixin):
    __tablename__ = "profiles"

    # Identity comes from the auth provider, so ids are opaque strings
    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    user_type: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    def display_name(self, fallback: str) -> str:
        full = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full or self.name or fallback
