from __future__ import annotations

from typing import List, Optional, Sequence

from sqlalchemy import select

from registry_api.db.base import Base
from registry_api.db.models import MODELS, Item
from registry_api.schemas.enums import ResourceKind
from .base import BaseRepository


class EntityRepository(BaseRepository):
    """Keyed access to the six entity collections."""

    async def get(self, kind: ResourceKind, record_id: int) -> Optional[Base]:
        if record_id <= 0:
            return None
        return await self.session.get(MODELS[kind], record_id)

    async def exists(self, kind: ResourceKind, record_id: int) -> bool:
        return await self.get(kind, record_id) is not None

    async def list_items(self, item_ids: Sequence[int]) -> List[Item]:
        """Load items by id, returned in the order (and multiplicity) of item_ids."""
        if not item_ids:
            return []
        res = await self.scalars(select(Item).where(Item.id.in_(set(item_ids))))
        by_id = {row.id: row for row in res}
        return [by_id[i] for i in item_ids if i in by_id]
