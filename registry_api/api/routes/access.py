from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from registry_api.core.deps import get_current_identity, get_registry
from registry_api.schemas.access import GrantRequest, OwnerRead, PermissionRead
from registry_api.schemas.common import MessageResponse
from registry_api.schemas.enums import ResourceKind
from registry_api.services.registry import Registry

router = APIRouter(prefix="/access", tags=["Access"])


# PUBLIC_INTERFACE
@router.post(
    "/grants",
    response_model=MessageResponse,
    summary="Grant permission",
    description="Set an identity's grant flag for a resource kind. Registry owner only.",
)
async def grant_permission(
    payload: GrantRequest,
    caller: str = Depends(get_current_identity),
    registry: Registry = Depends(get_registry),
) -> MessageResponse:
    await registry.grant_permission(caller, payload.identity, payload.resource_kind, payload.granted)
    return MessageResponse(
        message="Permission updated",
        details={
            "identity": payload.identity,
            "resource_kind": payload.resource_kind.value,
            "granted": payload.granted,
        },
    )


# PUBLIC_INTERFACE
@router.get(
    "/grants/{identity}/{kind}",
    response_model=PermissionRead,
    summary="Check permission",
    description="Evaluate the access gate for an identity and resource kind.",
)
async def check_permission(
    identity: str = Path(..., min_length=1),
    kind: ResourceKind = Path(...),
    registry: Registry = Depends(get_registry),
) -> PermissionRead:
    allowed = await registry.has_permission(identity, kind)
    return PermissionRead(identity=identity, resource_kind=kind, allowed=allowed)


# PUBLIC_INTERFACE
@router.get(
    "/owner",
    response_model=OwnerRead,
    summary="Registry owner",
)
async def get_owner(registry: Registry = Depends(get_registry)) -> OwnerRead:
    return OwnerRead(owner=await registry.get_owner())
