"""
Create payloads and read models for the six registry entities.

Read models default every field to its zero value, so ``Model()`` is the
zero-value record returned for identifiers that were never issued.
"""
from __future__ import annotations

from typing import Dict, Type

from pydantic import BaseModel, Field

from .enums import ItemStatus, ProcessKind, ProcessStatus, ResourceKind, ServiceStatus


class RecordRead(BaseModel):
    """Fields shared by every record."""
    id: int = Field(0, description="Record ID (0 = no such record)")
    created_at: int = Field(0, description="Creation time (epoch seconds)")
    created_by: str = Field("", description="Identity that created the record")

    class Config:
        from_attributes = True


class LotRead(RecordRead):
    """Read model for a material lot."""
    cost: int = Field(0, description="Cost in minor currency units")


class LotCreate(BaseModel):
    """Create lot payload."""
    cost: int = Field(..., ge=0, description="Cost in minor currency units")


class LocationRead(RecordRead):
    """Read model for a location."""
    name: str = Field("", description="Location name")
    location_type: str = Field("", description="Location kind label (warehouse, yard, ...)")


class LocationCreate(BaseModel):
    """Create location payload."""
    name: str = Field(..., description="Location name")
    location_type: str = Field("", description="Location kind label")


class ItemRead(RecordRead):
    """Read model for an inventory item."""
    name: str = Field("", description="Item name")
    lot_id: int = Field(0, description="Lot the item was drawn from")
    current_location_id: int = Field(0, description="Current location (0 = unset)")
    current_process_id: int = Field(0, description="Transportation process carrying the item (0 = none)")
    origin_process_id: int = Field(0, description="Process that produced the item (0 = unset)")
    status: ItemStatus = Field(ItemStatus.AVAILABLE)
    is_component: bool = Field(False, description="True once the item was added as a component")


class ItemCreate(BaseModel):
    """Create item payload."""
    name: str = Field(..., description="Item name")
    lot_id: int = Field(..., ge=0, description="Existing lot id")
    current_location_id: int = Field(0, ge=0, description="Existing location id or 0")
    origin_process_id: int = Field(0, ge=0, description="Existing process id or 0")


class ServiceRead(RecordRead):
    """Read model for a service engagement."""
    cost: int = Field(0, description="Cost in minor currency units")
    provider_name: str = Field("", description="Responsible party")
    status: ServiceStatus = Field(ServiceStatus.REQUESTED)
    expected_start: int = Field(0)
    expected_end: int = Field(0)
    actual_start: int = Field(0, description="Set by start_service")
    actual_end: int = Field(0, description="Set by complete_service")


class ServiceCreate(BaseModel):
    """Create service payload."""
    cost: int = Field(..., ge=0, description="Cost in minor currency units")
    provider_name: str = Field(..., description="Responsible party")
    expected_start: int = Field(0, ge=0, description="Epoch seconds")
    expected_end: int = Field(0, ge=0, description="Epoch seconds")


class NoteRead(RecordRead):
    """Read model for a note."""
    content: str = Field("", description="Note text")


class NoteCreate(BaseModel):
    """Create note payload."""
    content: str = Field(..., description="Note text")


class ProcessRead(RecordRead):
    """Read model for a workflow process."""
    kind: ProcessKind = Field(ProcessKind.MAINTENANCE)
    status: ProcessStatus = Field(ProcessStatus.CREATED)
    from_location_id: int = Field(0)
    to_location_id: int = Field(0)
    expected_start: int = Field(0)
    expected_end: int = Field(0)
    actual_start: int = Field(0, description="Set by start_process")
    actual_end: int = Field(0, description="Set by complete_process")


class ProcessCreate(BaseModel):
    """Create process payload. Locations are mandatory for Transportation."""
    kind: ProcessKind = Field(..., description="Process kind")
    from_location_id: int = Field(0, ge=0)
    to_location_id: int = Field(0, ge=0)
    expected_start: int = Field(0, ge=0, description="Epoch seconds")
    expected_end: int = Field(0, ge=0, description="Epoch seconds")


class NoteAttach(BaseModel):
    note_id: int = Field(..., ge=0)


class ComponentAdd(BaseModel):
    component_id: int = Field(..., ge=0)


class ProcessServiceAdd(BaseModel):
    service_id: int = Field(..., ge=0)


class ProcessItemAdd(BaseModel):
    item_id: int = Field(..., ge=0)


READ_SCHEMAS: Dict[ResourceKind, Type[RecordRead]] = {
    ResourceKind.ITEM: ItemRead,
    ResourceKind.LOT: LotRead,
    ResourceKind.SERVICE: ServiceRead,
    ResourceKind.NOTE: NoteRead,
    ResourceKind.PROCESS: ProcessRead,
    ResourceKind.LOCATION: LocationRead,
}

_missing = set(ResourceKind) - set(READ_SCHEMAS)
if _missing:
    raise RuntimeError(f"No read schema registered for kinds: {sorted(k.value for k in _missing)}")
