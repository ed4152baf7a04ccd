from __future__ import annotations

from sqlalchemy import select

from registry_api.db.models.security import IdCounter
from registry_api.schemas.enums import ResourceKind
from .base import BaseRepository


class IdentifierRepository(BaseRepository):
    """Per-kind identifier counters. Counters start at 1; 0 is never issued."""

    async def seed_counters(self) -> None:
        await self.add_all(IdCounter(resource_kind=kind.value, next_id=1) for kind in ResourceKind)

    async def _counter(self, kind: ResourceKind, *, for_update: bool = False) -> IdCounter:
        stmt = select(IdCounter).where(IdCounter.resource_kind == kind.value)
        if for_update:
            stmt = stmt.with_for_update()
        return await self.scalar_one(stmt)

    async def next_id(self, kind: ResourceKind) -> int:
        """Return the current counter value for kind and advance it by one."""
        counter = await self._counter(kind, for_update=True)
        issued = counter.next_id
        counter.next_id = issued + 1
        await self.session.flush()
        return issued

    async def count(self, kind: ResourceKind) -> int:
        counter = await self._counter(kind)
        return counter.next_id - 1
