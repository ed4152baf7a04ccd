"""
Domain errors raised by the registry.

Every error aborts the whole operation; the surrounding transaction is rolled
back so no partial writes are observable. ``code`` is the machine-readable type
rendered in API error envelopes.
"""
from __future__ import annotations

from typing import Any, Optional


class RegistryError(Exception):
    """Base class for registry rejections."""
    code = "registry_error"

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class NotOwner(RegistryError):
    """Caller is not the registry owner on an owner-only operation."""
    code = "not_owner"


class NoPermission(RegistryError):
    """Access gate or creator check rejected the caller."""
    code = "no_permission"


class StringTooLong(RegistryError):
    code = "string_too_long"


class NotFound(RegistryError):
    """A referenced identifier does not exist in its collection."""
    code = "not_found"


class ExceedsLimit(RegistryError):
    """A bounded list is already at capacity."""
    code = "exceeds_limit"


class InvalidStatus(RegistryError):
    """A lifecycle operation was attempted from the wrong state."""
    code = "invalid_status"


class InvalidLocation(RegistryError):
    """A process references a missing location (or omits one for Transportation)."""
    code = "invalid_location"


class InvalidResourceKind(RegistryError):
    code = "invalid_resource_kind"


class NotInitialized(RegistryError):
    code = "not_initialized"


class AlreadyInitialized(RegistryError):
    code = "already_initialized"
