from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from registry_api.core.deps import get_current_identity, get_registry
from registry_api.schemas.common import IdListResponse, IdResponse, MessageResponse
from registry_api.schemas.resources import ComponentAdd, ItemCreate, LocationCreate, LotCreate
from registry_api.services.registry import Registry

router = APIRouter(tags=["Inventory"])


# PUBLIC_INTERFACE
@router.post(
    "/lots",
    response_model=IdResponse,
    summary="Create lot",
    description="Register a material lot. Requires permission for Lot resources.",
)
async def create_lot(
    payload: LotCreate,
    caller: str = Depends(get_current_identity),
    registry: Registry = Depends(get_registry),
) -> IdResponse:
    return IdResponse(id=await registry.create_lot(caller, payload))


# PUBLIC_INTERFACE
@router.post(
    "/locations",
    response_model=IdResponse,
    summary="Create location",
    description="Register a physical location. Requires permission for Location resources.",
)
async def create_location(
    payload: LocationCreate,
    caller: str = Depends(get_current_identity),
    registry: Registry = Depends(get_registry),
) -> IdResponse:
    return IdResponse(id=await registry.create_location(caller, payload))


# PUBLIC_INTERFACE
@router.post(
    "/items",
    response_model=IdResponse,
    summary="Create item",
    description=(
        "Register an item drawn from an existing lot. current_location_id and "
        "origin_process_id may be 0 (unset)."
    ),
)
async def create_item(
    payload: ItemCreate,
    caller: str = Depends(get_current_identity),
    registry: Registry = Depends(get_registry),
) -> IdResponse:
    """
    Create an item.

    Errors:
        404 not_found if the lot (or a non-zero location/origin process) does not exist.
        422 string_too_long if the name is too long.
    """
    return IdResponse(id=await registry.create_item(caller, payload))


# PUBLIC_INTERFACE
@router.post(
    "/items/{item_id}/components",
    response_model=MessageResponse,
    summary="Add component to item",
    description="Append a component item. Only the creator of the parent item may do this.",
)
async def add_component(
    payload: ComponentAdd,
    item_id: int = Path(..., ge=0),
    caller: str = Depends(get_current_identity),
    registry: Registry = Depends(get_registry),
) -> MessageResponse:
    await registry.add_component(caller, item_id, payload.component_id)
    return MessageResponse(message="Component added", details={"item_id": item_id, "component_id": payload.component_id})


# PUBLIC_INTERFACE
@router.get(
    "/items/{item_id}/components",
    response_model=IdListResponse,
    summary="List item components",
    description="Component item ids in the order they were added (empty if none).",
)
async def get_item_components(
    item_id: int = Path(..., ge=0),
    registry: Registry = Depends(get_registry),
) -> IdListResponse:
    return IdListResponse(ids=await registry.get_item_components(item_id))
