"""
Closed enumerations shared by the ORM models, schemas and services.

The first member of each status/kind enum is its zero value, which is what the
zero-value (not found) records report.
"""
from __future__ import annotations

from enum import Enum


class ResourceKind(str, Enum):
    """The closed set of entity kinds the registry manages."""
    ITEM = "Item"
    LOT = "Lot"
    SERVICE = "Service"
    NOTE = "Note"
    PROCESS = "Process"
    LOCATION = "Location"


# Kinds that notes may be attached to.
NOTE_TARGET_KINDS = frozenset(k for k in ResourceKind if k is not ResourceKind.NOTE)


class ItemStatus(str, Enum):
    AVAILABLE = "Available"
    IN_USE = "InUse"


class ServiceStatus(str, Enum):
    REQUESTED = "Requested"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"


class ProcessStatus(str, Enum):
    CREATED = "Created"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"


class ProcessKind(str, Enum):
    MAINTENANCE = "Maintenance"
    PRODUCTION = "Production"
    INSPECTION = "Inspection"
    TRANSPORTATION = "Transportation"


class PermissionPolicy(str, Enum):
    """How the access gate combines explicit grants with owner identity."""
    STRICT = "strict"
    PERMISSIVE = "permissive"
