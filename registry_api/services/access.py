from __future__ import annotations

from registry_api.schemas.enums import PermissionPolicy


# PUBLIC_INTERFACE
def is_allowed(policy: PermissionPolicy, *, granted: bool, is_owner: bool) -> bool:
    """
    Access gate predicate for mutating operations on a resource kind.

    strict:     explicit grant OR caller is the owner.
    permissive: explicit grant OR caller is NOT the owner. This is the legacy
                ledger's predicate; every non-owner passes, and the owner passes
                through the grants it receives at initialization.
    """
    if policy is PermissionPolicy.STRICT:
        return granted or is_owner
    if policy is PermissionPolicy.PERMISSIVE:
        return granted or not is_owner
    raise ValueError(f"Unknown permission policy: {policy!r}")
