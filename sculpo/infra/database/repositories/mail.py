"""Outbound mail queue repository."""
from __future__ import annotations

from typing import Optional

from sculpo.infra.database.models.mail import MailMessage
from sculpo.infra.database.repositories.base import BaseRepository


class MailRepository(BaseRepository[MailMessage]):
    model = MailMessage

    async def enqueue(
        self,
        *,
        to: str,
        subject: str,
        text: str,
        html: Optional[str] = None,
        sender: Optional[str] = None,
    ) -> MailMessage:
        return await self.create(
            {"to": to, "subject": subject, "text": text, "html": html, "sender": sender}
        )
