"""BlockedTime repository: active-only listings and logical delete."""
from __future__ import annotations

import datetime as _dt
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select

from sculpo.infra.database.models.blocked_time import BlockedTime
from sculpo.infra.database.repositories.base import BaseRepository


class BlockedTimeRepository(BaseRepository[BlockedTime]):
    model = BlockedTime

    def _active(self, trainer_id: str):
        return (
            select(BlockedTime)
            .where(BlockedTime.trainer_id == trainer_id)
            .where(BlockedTime.is_active.is_(True))
        )

    async def list_active(self, trainer_id: str) -> List[BlockedTime]:
        stmt = self._active(trainer_id).order_by(BlockedTime.date.asc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_active_for_range(
        self,
        trainer_id: str,
        start_date: _dt.date,
        end_date: _dt.date,
    ) -> List[BlockedTime]:
        stmt = (
            self._active(trainer_id)
            .where(BlockedTime.date >= start_date)
            .where(BlockedTime.date <= end_date)
            .order_by(BlockedTime.date, BlockedTime.start_time)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def deactivate(self, block_id: UUID) -> Optional[BlockedTime]:
        return await self.update(block_id, {"is_active": False})
