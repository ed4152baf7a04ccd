from __future__ import annotations

from typing import List

from sqlalchemy import func, select

from registry_api.db.models.relations import (
    ItemComponent,
    ProcessItem,
    ProcessService,
    ResourceNote,
)
from registry_api.schemas.enums import ResourceKind
from .base import BaseRepository


class RelationRepository(BaseRepository):
    """
    Append-only ordered relationship lists.

    Duplicates are kept; ordering is by insertion sequence.
    """

    # Notes
    async def append_note(self, kind: ResourceKind, resource_id: int, note_id: int) -> None:
        await self.add(ResourceNote(resource_kind=kind.value, resource_id=resource_id, note_id=note_id))

    async def list_notes(self, kind: ResourceKind, resource_id: int) -> List[int]:
        stmt = (
            select(ResourceNote.note_id)
            .where(ResourceNote.resource_kind == kind.value, ResourceNote.resource_id == resource_id)
            .order_by(ResourceNote.seq)
        )
        return list(await self.scalars(stmt))

    # Item components
    async def append_component(self, item_id: int, component_id: int) -> None:
        await self.add(ItemComponent(item_id=item_id, component_id=component_id))

    async def list_components(self, item_id: int) -> List[int]:
        stmt = (
            select(ItemComponent.component_id)
            .where(ItemComponent.item_id == item_id)
            .order_by(ItemComponent.seq)
        )
        return list(await self.scalars(stmt))

    async def count_components(self, item_id: int) -> int:
        stmt = select(func.count(ItemComponent.seq)).where(ItemComponent.item_id == item_id)
        return int(await self.scalar_one(stmt))

    # Process services
    async def append_process_service(self, process_id: int, service_id: int) -> None:
        await self.add(ProcessService(process_id=process_id, service_id=service_id))

    async def list_process_services(self, process_id: int) -> List[int]:
        stmt = (
            select(ProcessService.service_id)
            .where(ProcessService.process_id == process_id)
            .order_by(ProcessService.seq)
        )
        return list(await self.scalars(stmt))

    # Process items
    async def append_process_item(self, process_id: int, item_id: int) -> None:
        await self.add(ProcessItem(process_id=process_id, item_id=item_id))

    async def list_process_items(self, process_id: int) -> List[int]:
        stmt = (
            select(ProcessItem.item_id)
            .where(ProcessItem.process_id == process_id)
            .order_by(ProcessItem.seq)
        )
        return list(await self.scalars(stmt))

    async def count_process_items(self, process_id: int) -> int:
        stmt = select(func.count(ProcessItem.seq)).where(ProcessItem.process_id == process_id)
        return int(await self.scalar_one(stmt))
