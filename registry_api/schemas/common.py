from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Standard message response."""
    message: str = Field(..., description="Human readable message")
    details: Optional[dict] = Field(default=None, description="Optional extra data")


class IdResponse(BaseModel):
    """Identifier of a newly created record."""
    id: int = Field(..., description="Identifier allocated for the record (>= 1)")


class IdListResponse(BaseModel):
    """Ordered list of identifiers (attachment order, duplicates kept)."""
    ids: List[int] = Field(default_factory=list, description="Identifiers in attachment order")


class CountResponse(BaseModel):
    """Number of records of a kind."""
    count: int = Field(..., description="Records created so far")


class ErrorInfo(BaseModel):
    """Structured error description."""
    type: str = Field(..., description="Machine-readable error type code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Any] = Field(default=None, description="Optional error details (e.g., validation issues)")


# PUBLIC_INTERFACE
class ErrorResponse(BaseModel):
    """Standardized API error envelope returned by exception handlers."""
    status: int = Field(..., description="HTTP status code")
    error: ErrorInfo = Field(..., description="Error details")
    correlation_id: Optional[str] = Field(default=None, description="Request correlation ID")
    caller: Optional[str] = Field(default=None, description="Caller identity (if authenticated)")
    path: Optional[str] = Field(default=None, description="Request path")
    method: Optional[str] = Field(default=None, description="HTTP method")
    timestamp: datetime = Field(..., description="Error timestamp (UTC)")
