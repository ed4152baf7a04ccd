"""
ORM models for registry entities, relationship lists and access-control state.

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage. It also exposes MODELS, the per-kind
table used wherever code dispatches on ResourceKind.
"""

from typing import Dict, Type

from registry_api.db.base import Base
from registry_api.schemas.enums import ResourceKind

from .entities import (  # noqa: F401
    Item,
    Location,
    Lot,
    Note,
    Process,
    Service,
)
from .relations import (  # noqa: F401
    ItemComponent,
    ProcessItem,
    ProcessService,
    ResourceNote,
)
from .security import (  # noqa: F401
    IdCounter,
    PermissionGrant,
    RegistryState,
)

MODELS: Dict[ResourceKind, Type[Base]] = {
    ResourceKind.ITEM: Item,
    ResourceKind.LOT: Lot,
    ResourceKind.SERVICE: Service,
    ResourceKind.NOTE: Note,
    ResourceKind.PROCESS: Process,
    ResourceKind.LOCATION: Location,
}

_missing = set(ResourceKind) - set(MODELS)
if _missing:
    raise RuntimeError(f"No ORM model registered for kinds: {sorted(k.value for k in _missing)}")
