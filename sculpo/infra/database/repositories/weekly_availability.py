"""WeeklyAvailability repository: per-trainer weekly template rows."""
from __future__ import annotations

from typing import List

from sqlalchemy import select

from sculpo.infra.database.models.weekly_availability import WeeklyAvailability
from sculpo.infra.database.repositories.base import BaseRepository


class WeeklyAvailabilityRepository(BaseRepository[WeeklyAvailability]):
    model = WeeklyAvailability

    async def list_for_trainer(self, trainer_id: str) -> List[WeeklyAvailability]:
        stmt = select(WeeklyAvailability).where(WeeklyAvailability.trainer_id == trainer_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
