from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path

from registry_api.core.deps import get_current_identity, get_registry
from registry_api.schemas.common import CountResponse, IdListResponse, IdResponse, MessageResponse
from registry_api.schemas.enums import ResourceKind
from registry_api.schemas.resources import NoteAttach, NoteCreate
from registry_api.services.registry import Registry

router = APIRouter(tags=["Resources"])


# PUBLIC_INTERFACE
@router.post(
    "/notes",
    response_model=IdResponse,
    summary="Create note",
    description="Register a free-text note. Attach it to a resource separately.",
)
async def create_note(
    payload: NoteCreate,
    caller: str = Depends(get_current_identity),
    registry: Registry = Depends(get_registry),
) -> IdResponse:
    return IdResponse(id=await registry.create_note(caller, payload))


# Declared before /{record_id} so "count" is not parsed as an id.
# PUBLIC_INTERFACE
@router.get(
    "/resources/{kind}/count",
    response_model=CountResponse,
    summary="Count resources",
    description="Number of records of a kind created so far.",
)
async def get_resource_count(
    kind: ResourceKind = Path(..., description="Resource kind"),
    registry: Registry = Depends(get_registry),
) -> CountResponse:
    return CountResponse(count=await registry.get_resource_count(kind))


# PUBLIC_INTERFACE
@router.get(
    "/resources/{kind}/{record_id}",
    response_model=Dict[str, Any],
    summary="Get resource",
    description=(
        "Return the record. Identifiers that were never issued return the zero-value "
        "record (id = 0) rather than 404."
    ),
)
async def get_resource(
    kind: ResourceKind = Path(..., description="Resource kind"),
    record_id: int = Path(..., ge=0),
    registry: Registry = Depends(get_registry),
) -> Dict[str, Any]:
    record = await registry.get_resource(kind, record_id)
    return record.model_dump(mode="json")


# PUBLIC_INTERFACE
@router.post(
    "/resources/{kind}/{record_id}/notes",
    response_model=MessageResponse,
    summary="Attach note to resource",
    description="Append a note to a Lot, Location, Item, Service or Process.",
)
async def attach_note(
    payload: NoteAttach,
    kind: ResourceKind = Path(..., description="Resource kind"),
    record_id: int = Path(..., ge=0),
    caller: str = Depends(get_current_identity),
    registry: Registry = Depends(get_registry),
) -> MessageResponse:
    await registry.attach_note(caller, kind, record_id, payload.note_id)
    return MessageResponse(
        message="Note attached",
        details={"resource_kind": kind.value, "resource_id": record_id, "note_id": payload.note_id},
    )


# PUBLIC_INTERFACE
@router.get(
    "/resources/{kind}/{record_id}/notes",
    response_model=IdListResponse,
    summary="List resource notes",
    description="Note ids in attachment order (empty if none).",
)
async def get_resource_notes(
    kind: ResourceKind = Path(..., description="Resource kind"),
    record_id: int = Path(..., ge=0),
    registry: Registry = Depends(get_registry),
) -> IdListResponse:
    return IdListResponse(ids=await registry.get_resource_notes(kind, record_id))
