"""Generic async repository for SQLAlchemy 2.0."""
from __future__ import annotations

from typing import Any, ClassVar, Generic, Iterable, List, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    model: ClassVar[type]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, id: Any) -> Optional[ModelT]:
        return await self.session.get(self.model, id)  # type: ignore[return-value]

    async def get_many(self, ids: Iterable[Any]) -> List[ModelT]:
        """Batched multi-get: one query for the de-duplicated id set."""
        unique = list(dict.fromkeys(i for i in ids if i))
        if not unique:
            return []
        stmt = select(self.model).where(self.model.id.in_(unique))  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())  # type: ignore[return-value]

    async def create(self, data: dict[str, Any]) -> ModelT:
        instance = self.model(**data)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance  # type: ignore[return-value]

    async def update(self, id: Any, data: dict[str, Any]) -> Optional[ModelT]:
        instance = await self.get_by_id(id)
        if instance is None:
            return None
        for attr, value in data.items():
            setattr(instance, attr, value)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance  # type: ignore[return-value]

    async def merge(self, id: Any, data: dict[str, Any]) -> tuple[ModelT, bool]:
        """Read-then-merge-then-write upsert keyed by primary key.

        Returns (instance, created). Fields not in *data* keep their stored values.
        """
        instance = await self.update(id, data)
        if instance is not None:
            return instance, False
        return await self.create({"id": id, **data}), True
