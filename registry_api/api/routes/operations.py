from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from registry_api.core.deps import get_current_identity, get_registry
from registry_api.schemas.common import IdListResponse, IdResponse, MessageResponse
from registry_api.schemas.resources import (
    ProcessCreate,
    ProcessItemAdd,
    ProcessServiceAdd,
    ServiceCreate,
)
from registry_api.services.registry import Registry

router = APIRouter(tags=["Operations"])


# Services

# PUBLIC_INTERFACE
@router.post(
    "/services",
    response_model=IdResponse,
    summary="Create service",
    description="Register a service engagement in the Requested state.",
)
async def create_service(
    payload: ServiceCreate,
    caller: str = Depends(get_current_identity),
    registry: Registry = Depends(get_registry),
) -> IdResponse:
    return IdResponse(id=await registry.create_service(caller, payload))


# PUBLIC_INTERFACE
@router.post(
    "/services/{service_id}/start",
    response_model=MessageResponse,
    summary="Start service",
    description="Requested -> InProgress; records the actual start time.",
)
async def start_service(
    service_id: int = Path(..., ge=0),
    caller: str = Depends(get_current_identity),
    registry: Registry = Depends(get_registry),
) -> MessageResponse:
    await registry.start_service(caller, service_id)
    return MessageResponse(message="Service started")


# PUBLIC_INTERFACE
@router.post(
    "/services/{service_id}/complete",
    response_model=MessageResponse,
    summary="Complete service",
    description="InProgress -> Completed; records the actual end time.",
)
async def complete_service(
    service_id: int = Path(..., ge=0),
    caller: str = Depends(get_current_identity),
    registry: Registry = Depends(get_registry),
) -> MessageResponse:
    await registry.complete_service(caller, service_id)
    return MessageResponse(message="Service completed")


# Processes

# PUBLIC_INTERFACE
@router.post(
    "/processes",
    response_model=IdResponse,
    summary="Create process",
    description="Register a process in the Created state. Transportation requires both locations.",
)
async def create_process(
    payload: ProcessCreate,
    caller: str = Depends(get_current_identity),
    registry: Registry = Depends(get_registry),
) -> IdResponse:
    return IdResponse(id=await registry.create_process(caller, payload))


# PUBLIC_INTERFACE
@router.post(
    "/processes/{process_id}/services",
    response_model=MessageResponse,
    summary="Add service to process",
    description="Only while the process is Created and the service is Requested.",
)
async def add_service_to_process(
    payload: ProcessServiceAdd,
    process_id: int = Path(..., ge=0),
    caller: str = Depends(get_current_identity),
    registry: Registry = Depends(get_registry),
) -> MessageResponse:
    await registry.add_service_to_process(caller, process_id, payload.service_id)
    return MessageResponse(message="Service added", details={"process_id": process_id, "service_id": payload.service_id})


# PUBLIC_INTERFACE
@router.get(
    "/processes/{process_id}/services",
    response_model=IdListResponse,
    summary="List process services",
)
async def get_process_services(
    process_id: int = Path(..., ge=0),
    registry: Registry = Depends(get_registry),
) -> IdListResponse:
    return IdListResponse(ids=await registry.get_process_services(process_id))


# PUBLIC_INTERFACE
@router.post(
    "/processes/{process_id}/items",
    response_model=MessageResponse,
    summary="Add item to process",
    description="Only while the process is Created and the item is Available; bounded list.",
)
async def add_item_to_process(
    payload: ProcessItemAdd,
    process_id: int = Path(..., ge=0),
    caller: str = Depends(get_current_identity),
    registry: Registry = Depends(get_registry),
) -> MessageResponse:
    await registry.add_item_to_process(caller, process_id, payload.item_id)
    return MessageResponse(message="Item added", details={"process_id": process_id, "item_id": payload.item_id})


# PUBLIC_INTERFACE
@router.get(
    "/processes/{process_id}/items",
    response_model=IdListResponse,
    summary="List process items",
)
async def get_process_items(
    process_id: int = Path(..., ge=0),
    registry: Registry = Depends(get_registry),
) -> IdListResponse:
    return IdListResponse(ids=await registry.get_process_items(process_id))


# PUBLIC_INTERFACE
@router.post(
    "/processes/{process_id}/start",
    response_model=MessageResponse,
    summary="Start process",
    description="Created -> InProgress. Transportation processes put their items InUse.",
)
async def start_process(
    process_id: int = Path(..., ge=0),
    caller: str = Depends(get_current_identity),
    registry: Registry = Depends(get_registry),
) -> MessageResponse:
    await registry.start_process(caller, process_id)
    return MessageResponse(message="Process started")


# PUBLIC_INTERFACE
@router.post(
    "/processes/{process_id}/complete",
    response_model=MessageResponse,
    summary="Complete process",
    description=(
        "InProgress -> Completed. Transportation processes move their items to the "
        "destination and release them (components stay InUse)."
    ),
)
async def complete_process(
    process_id: int = Path(..., ge=0),
    caller: str = Depends(get_current_identity),
    registry: Registry = Depends(get_registry),
) -> MessageResponse:
    await registry.complete_process(caller, process_id)
    return MessageResponse(message="Process completed")
