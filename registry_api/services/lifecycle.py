"""
State machines for services and processes.

Both are strictly sequential: initial -> InProgress -> Completed, with no
skipping and no reversal. Each transition is keyed by operation name.
"""
from __future__ import annotations

from typing import Dict, Tuple

from registry_api.schemas.enums import ItemStatus, ProcessStatus, ServiceStatus

SERVICE_TRANSITIONS: Dict[str, Tuple[ServiceStatus, ServiceStatus]] = {
    "start": (ServiceStatus.REQUESTED, ServiceStatus.IN_PROGRESS),
    "complete": (ServiceStatus.IN_PROGRESS, ServiceStatus.COMPLETED),
}

PROCESS_TRANSITIONS: Dict[str, Tuple[ProcessStatus, ProcessStatus]] = {
    "start": (ProcessStatus.CREATED, ProcessStatus.IN_PROGRESS),
    "complete": (ProcessStatus.IN_PROGRESS, ProcessStatus.COMPLETED),
}


# PUBLIC_INTERFACE
def service_target(op: str, current: ServiceStatus) -> ServiceStatus | None:
    """Return the status a service moves to for op, or None if op is not allowed from current."""
    required, target = SERVICE_TRANSITIONS[op]
    return target if current is required else None


# PUBLIC_INTERFACE
def process_target(op: str, current: ProcessStatus) -> ProcessStatus | None:
    """Return the status a process moves to for op, or None if op is not allowed from current."""
    required, target = PROCESS_TRANSITIONS[op]
    return target if current is required else None


# PUBLIC_INTERFACE
def item_status_after_transport(is_component: bool) -> ItemStatus:
    """Status of an item when the Transportation process carrying it completes."""
    # Component items never become independently available.
    return ItemStatus.IN_USE if is_component else ItemStatus.AVAILABLE
