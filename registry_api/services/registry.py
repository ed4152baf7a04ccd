from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from registry_api.core.settings import AppSettings
from registry_api.db.base import Base
from registry_api.db.models import MODELS, RegistryState
from registry_api.repositories.entities import EntityRepository
from registry_api.repositories.identifiers import IdentifierRepository
from registry_api.repositories.relations import RelationRepository
from registry_api.repositories.security import SecurityRepository
from registry_api.schemas.enums import (
    NOTE_TARGET_KINDS,
    ItemStatus,
    PermissionPolicy,
    ProcessKind,
    ProcessStatus,
    ResourceKind,
    ServiceStatus,
)
from registry_api.schemas.resources import (
    READ_SCHEMAS,
    ItemCreate,
    LocationCreate,
    LotCreate,
    NoteCreate,
    ProcessCreate,
    RecordRead,
    ServiceCreate,
)
from registry_api.services.access import is_allowed
from registry_api.services.base import BaseService
from registry_api.services.errors import (
    AlreadyInitialized,
    ExceedsLimit,
    InvalidLocation,
    InvalidResourceKind,
    InvalidStatus,
    NoPermission,
    NotFound,
    NotInitialized,
    NotOwner,
    RegistryError,
    StringTooLong,
)
from registry_api.services.lifecycle import (
    item_status_after_transport,
    process_target,
    service_target,
)

logger = logging.getLogger(__name__)


def _epoch_seconds() -> int:
    return int(time.time())


class _UnitOfWork:
    """Repositories bound to the session of a single registry operation."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.entities = EntityRepository(session)
        self.relations = RelationRepository(session)
        self.ids = IdentifierRepository(session)
        self.security = SecurityRepository(session)


class Registry(BaseService):
    """
    The registry of lots, locations, items, services, notes and processes.

    Owns identifier allocation, the access gate, the entity store, the
    relationship lists and the service/process lifecycles. Every public
    operation runs under one registry-wide lock and inside one database
    transaction, so each call either applies all of its writes or none.

    Reads are not gated by permissions.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        *,
        policy: PermissionPolicy | str = PermissionPolicy.STRICT,
        max_string_length: int = 256,
        max_components_per_item: int = 50,
        max_items_per_process: int = 50,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        super().__init__(session_maker)
        self.policy = PermissionPolicy(policy)
        self.max_string_length = max_string_length
        self.max_components_per_item = max_components_per_item
        self.max_items_per_process = max_items_per_process
        self._clock = clock or _epoch_seconds
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(
        cls, session_maker: async_sessionmaker[AsyncSession], settings: AppSettings
    ) -> "Registry":
        return cls(
            session_maker,
            policy=settings.PERMISSION_POLICY,
            max_string_length=settings.MAX_STRING_LENGTH,
            max_components_per_item=settings.MAX_COMPONENTS_PER_ITEM,
            max_items_per_process=settings.MAX_ITEMS_PER_PROCESS,
        )

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[_UnitOfWork]:
        async with self._lock:
            async with self.session_maker() as session:
                try:
                    async with session.begin():
                        yield _UnitOfWork(session)
                except RegistryError as exc:
                    logger.debug("Registry call rejected: %s: %s", exc.code, exc.message)
                    raise

    # ------------------------------------------------------------------
    # Initialization and access control
    # ------------------------------------------------------------------

    # PUBLIC_INTERFACE
    async def initialize(self, owner: str) -> None:
        """
        Make `owner` the registry owner, grant it every resource kind and start
        every identifier counter at 1. Can only happen once.
        """
        async with self._transaction() as uow:
            if await uow.security.get_state() is not None:
                raise AlreadyInitialized("Registry is already initialized")
            await uow.security.create_state(owner, self._clock())
            await uow.ids.seed_counters()
            for kind in ResourceKind:
                await uow.security.set_grant(owner, kind, True)
        logger.info("Registry initialized; owner=%s policy=%s", owner, self.policy.value)

    # PUBLIC_INTERFACE
    async def is_initialized(self) -> bool:
        async with self._transaction() as uow:
            return await uow.security.get_state() is not None

    # PUBLIC_INTERFACE
    async def get_owner(self) -> str:
        async with self._transaction() as uow:
            return (await self._state(uow)).owner

    # PUBLIC_INTERFACE
    async def grant_permission(
        self, caller: str, identity: str, kind: ResourceKind, granted: bool = True
    ) -> None:
        """Set the grant flag for (identity, kind). Owner only."""
        async with self._transaction() as uow:
            state = await self._state(uow)
            if caller != state.owner:
                raise NotOwner("Only the registry owner may grant permissions")
            await uow.security.set_grant(identity, kind, granted)
        logger.info("Permission %s set to %s for identity=%s", kind.value, granted, identity)

    # PUBLIC_INTERFACE
    async def has_permission(self, identity: str, kind: ResourceKind) -> bool:
        """Evaluate the access gate for identity on kind under the active policy."""
        async with self._transaction() as uow:
            return await self._allowed(uow, identity, kind)

    async def _state(self, uow: _UnitOfWork) -> RegistryState:
        state = await uow.security.get_state()
        if state is None:
            raise NotInitialized("Registry has not been initialized")
        return state

    async def _allowed(self, uow: _UnitOfWork, identity: str, kind: ResourceKind) -> bool:
        state = await self._state(uow)
        granted = await uow.security.is_granted(identity, kind)
        return is_allowed(self.policy, granted=granted, is_owner=identity == state.owner)

    async def _authorize(self, uow: _UnitOfWork, caller: str, kind: ResourceKind) -> None:
        if not await self._allowed(uow, caller, kind):
            raise NoPermission(
                f"{caller!r} may not modify {kind.value} resources",
                details={"resource_kind": kind.value},
            )

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    def _check_length(self, field: str, value: str) -> None:
        if len(value.encode("utf-8")) > self.max_string_length:
            raise StringTooLong(
                f"{field} exceeds {self.max_string_length} bytes",
                details={"field": field, "max_length": self.max_string_length},
            )

    async def _require(self, uow: _UnitOfWork, kind: ResourceKind, record_id: int) -> Base:
        row = await uow.entities.get(kind, record_id)
        if row is None:
            raise NotFound(
                f"{kind.value} {record_id} not found",
                details={"resource_kind": kind.value, "id": record_id},
            )
        return row

    async def _insert(self, uow: _UnitOfWork, kind: ResourceKind, caller: str, /, **fields) -> int:
        new_id = await uow.ids.next_id(kind)
        row = MODELS[kind](id=new_id, created_at=self._clock(), created_by=caller, **fields)
        await uow.entities.add(row)
        return new_id

    # ------------------------------------------------------------------
    # Entity creation
    # ------------------------------------------------------------------

    # PUBLIC_INTERFACE
    async def create_lot(self, caller: str, payload: LotCreate) -> int:
        async with self._transaction() as uow:
            await self._authorize(uow, caller, ResourceKind.LOT)
            new_id = await self._insert(uow, ResourceKind.LOT, caller, cost=payload.cost)
        logger.info("Created lot id=%d", new_id)
        return new_id

    # PUBLIC_INTERFACE
    async def create_location(self, caller: str, payload: LocationCreate) -> int:
        async with self._transaction() as uow:
            await self._authorize(uow, caller, ResourceKind.LOCATION)
            self._check_length("name", payload.name)
            self._check_length("location_type", payload.location_type)
            new_id = await self._insert(
                uow,
                ResourceKind.LOCATION,
                caller,
                name=payload.name,
                location_type=payload.location_type,
            )
        logger.info("Created location id=%d", new_id)
        return new_id

    # PUBLIC_INTERFACE
    async def create_item(self, caller: str, payload: ItemCreate) -> int:
        """
        Create an item drawn from an existing lot.

        current_location_id and origin_process_id may be 0; when non-zero they
        must reference existing records. New items are Available and not carried
        by any process.
        """
        async with self._transaction() as uow:
            await self._authorize(uow, caller, ResourceKind.ITEM)
            self._check_length("name", payload.name)
            await self._require(uow, ResourceKind.LOT, payload.lot_id)
            if payload.current_location_id:
                await self._require(uow, ResourceKind.LOCATION, payload.current_location_id)
            if payload.origin_process_id:
                await self._require(uow, ResourceKind.PROCESS, payload.origin_process_id)
            new_id = await self._insert(
                uow,
                ResourceKind.ITEM,
                caller,
                name=payload.name,
                lot_id=payload.lot_id,
                current_location_id=payload.current_location_id,
                current_process_id=0,
                origin_process_id=payload.origin_process_id,
                status=ItemStatus.AVAILABLE.value,
                is_component=False,
            )
        logger.info("Created item id=%d lot=%d", new_id, payload.lot_id)
        return new_id

    # PUBLIC_INTERFACE
    async def create_service(self, caller: str, payload: ServiceCreate) -> int:
        async with self._transaction() as uow:
            await self._authorize(uow, caller, ResourceKind.SERVICE)
            self._check_length("provider_name", payload.provider_name)
            new_id = await self._insert(
                uow,
                ResourceKind.SERVICE,
                caller,
                cost=payload.cost,
                provider_name=payload.provider_name,
                status=ServiceStatus.REQUESTED.value,
                expected_start=payload.expected_start,
                expected_end=payload.expected_end,
                actual_start=0,
                actual_end=0,
            )
        logger.info("Created service id=%d", new_id)
        return new_id

    # PUBLIC_INTERFACE
    async def create_note(self, caller: str, payload: NoteCreate) -> int:
        async with self._transaction() as uow:
            await self._authorize(uow, caller, ResourceKind.NOTE)
            self._check_length("content", payload.content)
            new_id = await self._insert(uow, ResourceKind.NOTE, caller, content=payload.content)
        logger.info("Created note id=%d", new_id)
        return new_id

    # PUBLIC_INTERFACE
    async def create_process(self, caller: str, payload: ProcessCreate) -> int:
        """
        Create a process in the Created state.

        Transportation processes need existing from/to locations. Other kinds may
        leave locations at 0, but a non-zero location must exist.
        """
        async with self._transaction() as uow:
            await self._authorize(uow, caller, ResourceKind.PROCESS)
            locations = {"from_location_id": payload.from_location_id, "to_location_id": payload.to_location_id}
            if payload.kind is ProcessKind.TRANSPORTATION:
                unset = [name for name, value in locations.items() if not value]
                if unset:
                    raise InvalidLocation(
                        "Transportation processes require both locations",
                        details={"missing": unset},
                    )
            for name, location_id in locations.items():
                if location_id and not await uow.entities.exists(ResourceKind.LOCATION, location_id):
                    raise InvalidLocation(
                        f"Location {location_id} not found",
                        details={"field": name, "id": location_id},
                    )
            new_id = await self._insert(
                uow,
                ResourceKind.PROCESS,
                caller,
                kind=payload.kind.value,
                status=ProcessStatus.CREATED.value,
                from_location_id=payload.from_location_id,
                to_location_id=payload.to_location_id,
                expected_start=payload.expected_start,
                expected_end=payload.expected_end,
                actual_start=0,
                actual_end=0,
            )
        logger.info("Created %s process id=%d", payload.kind.value, new_id)
        return new_id

    # ------------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------------

    # PUBLIC_INTERFACE
    async def attach_note(self, caller: str, kind: ResourceKind, resource_id: int, note_id: int) -> None:
        """Append note_id to the note list of (kind, resource_id)."""
        if kind not in NOTE_TARGET_KINDS:
            raise InvalidResourceKind(
                f"Notes cannot be attached to {kind.value} resources",
                details={"resource_kind": kind.value},
            )
        async with self._transaction() as uow:
            await self._require(uow, ResourceKind.NOTE, note_id)
            await self._require(uow, kind, resource_id)
            await self._authorize(uow, caller, kind)
            await uow.relations.append_note(kind, resource_id, note_id)
        logger.info("Attached note id=%d to %s id=%d", note_id, kind.value, resource_id)

    # PUBLIC_INTERFACE
    async def add_component(self, caller: str, item_id: int, component_id: int) -> None:
        """
        Append component_id to item_id's component list and mark it as a component.

        Only the creator of the parent item may do this. Self-references and
        cycles are accepted.
        """
        async with self._transaction() as uow:
            parent = await self._require(uow, ResourceKind.ITEM, item_id)
            if parent.created_by != caller:
                raise NoPermission(
                    "Only the creator of an item may add components to it",
                    details={"item_id": item_id},
                )
            component = await self._require(uow, ResourceKind.ITEM, component_id)
            if await uow.relations.count_components(item_id) >= self.max_components_per_item:
                raise ExceedsLimit(
                    f"Item {item_id} already has {self.max_components_per_item} components",
                    details={"item_id": item_id, "limit": self.max_components_per_item},
                )
            await uow.relations.append_component(item_id, component_id)
            component.is_component = True
        logger.info("Added component id=%d to item id=%d", component_id, item_id)

    # PUBLIC_INTERFACE
    async def add_service_to_process(self, caller: str, process_id: int, service_id: int) -> None:
        async with self._transaction() as uow:
            await self._authorize(uow, caller, ResourceKind.PROCESS)
            process = await self._require(uow, ResourceKind.PROCESS, process_id)
            service = await self._require(uow, ResourceKind.SERVICE, service_id)
            self._expect_status(ResourceKind.PROCESS, process_id, process.status, ProcessStatus.CREATED)
            self._expect_status(ResourceKind.SERVICE, service_id, service.status, ServiceStatus.REQUESTED)
            await uow.relations.append_process_service(process_id, service_id)
        logger.info("Added service id=%d to process id=%d", service_id, process_id)

    # PUBLIC_INTERFACE
    async def add_item_to_process(self, caller: str, process_id: int, item_id: int) -> None:
        async with self._transaction() as uow:
            await self._authorize(uow, caller, ResourceKind.PROCESS)
            process = await self._require(uow, ResourceKind.PROCESS, process_id)
            item = await self._require(uow, ResourceKind.ITEM, item_id)
            self._expect_status(ResourceKind.PROCESS, process_id, process.status, ProcessStatus.CREATED)
            self._expect_status(ResourceKind.ITEM, item_id, item.status, ItemStatus.AVAILABLE)
            if await uow.relations.count_process_items(process_id) >= self.max_items_per_process:
                raise ExceedsLimit(
                    f"Process {process_id} already carries {self.max_items_per_process} items",
                    details={"process_id": process_id, "limit": self.max_items_per_process},
                )
            await uow.relations.append_process_item(process_id, item_id)
        logger.info("Added item id=%d to process id=%d", item_id, process_id)

    @staticmethod
    def _expect_status(kind: ResourceKind, record_id: int, current: str, required) -> None:
        if current != required.value:
            raise InvalidStatus(
                f"{kind.value} {record_id} is {current}, expected {required.value}",
                details={"resource_kind": kind.value, "id": record_id, "status": current},
            )

    # ------------------------------------------------------------------
    # Lifecycles
    # ------------------------------------------------------------------

    # PUBLIC_INTERFACE
    async def start_service(self, caller: str, service_id: int) -> None:
        await self._transition_service(caller, service_id, "start")

    # PUBLIC_INTERFACE
    async def complete_service(self, caller: str, service_id: int) -> None:
        await self._transition_service(caller, service_id, "complete")

    async def _transition_service(self, caller: str, service_id: int, op: str) -> None:
        async with self._transaction() as uow:
            await self._authorize(uow, caller, ResourceKind.SERVICE)
            service = await self._require(uow, ResourceKind.SERVICE, service_id)
            target = service_target(op, ServiceStatus(service.status))
            if target is None:
                raise InvalidStatus(
                    f"Cannot {op} service {service_id} while it is {service.status}",
                    details={"resource_kind": ResourceKind.SERVICE.value, "id": service_id, "status": service.status},
                )
            service.status = target.value
            if op == "start":
                service.actual_start = self._clock()
            else:
                service.actual_end = self._clock()
        logger.info("Service id=%d moved to %s", service_id, target.value)

    # PUBLIC_INTERFACE
    async def start_process(self, caller: str, process_id: int) -> None:
        """
        Move a process from Created to InProgress.

        For Transportation processes every carried item becomes InUse and points
        at this process.
        """
        async with self._transaction() as uow:
            process = await self._begin_process_transition(uow, caller, process_id, "start")
            process.actual_start = self._clock()
            if process.kind == ProcessKind.TRANSPORTATION.value:
                item_ids = await uow.relations.list_process_items(process_id)
                for item in await uow.entities.list_items(item_ids):
                    item.status = ItemStatus.IN_USE.value
                    item.current_process_id = process_id
        logger.info("Process id=%d moved to %s", process_id, process.status)

    # PUBLIC_INTERFACE
    async def complete_process(self, caller: str, process_id: int) -> None:
        """
        Move a process from InProgress to Completed.

        For Transportation processes every carried item arrives at the
        destination, is released from the process and becomes Available again,
        except component items which stay InUse.
        """
        async with self._transaction() as uow:
            process = await self._begin_process_transition(uow, caller, process_id, "complete")
            process.actual_end = self._clock()
            if process.kind == ProcessKind.TRANSPORTATION.value:
                item_ids = await uow.relations.list_process_items(process_id)
                for item in await uow.entities.list_items(item_ids):
                    item.current_location_id = process.to_location_id
                    item.current_process_id = 0
                    item.status = item_status_after_transport(item.is_component).value
        logger.info("Process id=%d moved to %s", process_id, process.status)

    async def _begin_process_transition(self, uow: _UnitOfWork, caller: str, process_id: int, op: str):
        await self._authorize(uow, caller, ResourceKind.PROCESS)
        process = await self._require(uow, ResourceKind.PROCESS, process_id)
        target = process_target(op, ProcessStatus(process.status))
        if target is None:
            raise InvalidStatus(
                f"Cannot {op} process {process_id} while it is {process.status}",
                details={"resource_kind": ResourceKind.PROCESS.value, "id": process_id, "status": process.status},
            )
        process.status = target.value
        return process

    # ------------------------------------------------------------------
    # Queries (ungated)
    # ------------------------------------------------------------------

    # PUBLIC_INTERFACE
    async def get_resource(self, kind: ResourceKind, record_id: int) -> RecordRead:
        """Return the record, or the zero-value record (id 0) when it does not exist."""
        schema = READ_SCHEMAS[kind]
        async with self._transaction() as uow:
            row = await uow.entities.get(kind, record_id)
            return schema.model_validate(row) if row is not None else schema()

    # PUBLIC_INTERFACE
    async def get_resource_count(self, kind: ResourceKind) -> int:
        async with self._transaction() as uow:
            await self._state(uow)
            return await uow.ids.count(kind)

    # PUBLIC_INTERFACE
    async def get_resource_notes(self, kind: ResourceKind, resource_id: int) -> List[int]:
        async with self._transaction() as uow:
            return await uow.relations.list_notes(kind, resource_id)

    # PUBLIC_INTERFACE
    async def get_item_components(self, item_id: int) -> List[int]:
        async with self._transaction() as uow:
            return await uow.relations.list_components(item_id)

    # PUBLIC_INTERFACE
    async def get_process_services(self, process_id: int) -> List[int]:
        async with self._transaction() as uow:
            return await uow.relations.list_process_services(process_id)

    # PUBLIC_INTERFACE
    async def get_process_items(self, process_id: int) -> List[int]:
        async with self._transaction() as uow:
            return await uow.relations.list_process_items(process_id)
