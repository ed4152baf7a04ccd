from __future__ import annotations

from pydantic import BaseModel, Field

from .enums import ResourceKind


class GrantRequest(BaseModel):
    """Owner-only request to set an identity's grant flag for a resource kind."""
    identity: str = Field(..., min_length=1, description="Identity receiving the grant")
    resource_kind: ResourceKind = Field(..., description="Resource kind the grant covers")
    granted: bool = Field(True, description="False withdraws an explicit grant")


class PermissionRead(BaseModel):
    """Effective permission of an identity for a resource kind."""
    identity: str
    resource_kind: ResourceKind
    allowed: bool = Field(..., description="Result of the access gate under the active policy")


class OwnerRead(BaseModel):
    owner: str = Field(..., description="Identity that initialized the registry")
