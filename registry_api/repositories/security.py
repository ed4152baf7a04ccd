from __future__ import annotations

from typing import Optional

from sqlalchemy import select

from registry_api.db.models.security import PermissionGrant, RegistryState
from registry_api.schemas.enums import ResourceKind
from .base import BaseRepository


class SecurityRepository(BaseRepository):
    """Repository for the registry owner and the (identity, kind) grant table."""

    # Owner
    async def get_state(self) -> Optional[RegistryState]:
        return await self.session.get(RegistryState, 1)

    async def create_state(self, owner: str, initialized_at: int) -> RegistryState:
        state = RegistryState(id=1, owner=owner, initialized_at=initialized_at)
        await self.add(state)
        return state

    # Grants
    async def get_grant(self, identity: str, kind: ResourceKind) -> Optional[PermissionGrant]:
        stmt = select(PermissionGrant).where(
            PermissionGrant.identity == identity,
            PermissionGrant.resource_kind == kind.value,
        )
        return await self.scalar_one_or_none(stmt)

    async def is_granted(self, identity: str, kind: ResourceKind) -> bool:
        grant = await self.get_grant(identity, kind)
        return bool(grant and grant.granted)

    async def set_grant(self, identity: str, kind: ResourceKind, granted: bool) -> None:
        grant = await self.get_grant(identity, kind)
        if grant is None:
            await self.add(PermissionGrant(identity=identity, resource_kind=kind.value, granted=granted))
            return
        grant.granted = granted
        await self.session.flush()
