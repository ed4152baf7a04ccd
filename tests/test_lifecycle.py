from __future__ import annotations

import pytest

from registry_api.schemas.enums import ItemStatus, ProcessKind, ProcessStatus, ResourceKind, ServiceStatus
from registry_api.schemas.resources import ItemCreate, LocationCreate, LotCreate, ProcessCreate, ServiceCreate
from registry_api.services.errors import InvalidStatus, NoPermission, NotFound
from registry_api.services.lifecycle import (
    PROCESS_TRANSITIONS,
    SERVICE_TRANSITIONS,
    item_status_after_transport,
    process_target,
    service_target,
)
from tests.conftest import ALICE, OWNER

pytestmark = pytest.mark.anyio


class TestTransitionTables:
    def test_service_transitions(self):
        assert service_target("start", ServiceStatus.REQUESTED) is ServiceStatus.IN_PROGRESS
        assert service_target("complete", ServiceStatus.IN_PROGRESS) is ServiceStatus.COMPLETED
        assert service_target("complete", ServiceStatus.REQUESTED) is None
        assert service_target("start", ServiceStatus.COMPLETED) is None

    def test_process_transitions(self):
        assert process_target("start", ProcessStatus.CREATED) is ProcessStatus.IN_PROGRESS
        assert process_target("complete", ProcessStatus.IN_PROGRESS) is ProcessStatus.COMPLETED
        assert process_target("start", ProcessStatus.IN_PROGRESS) is None
        assert process_target("complete", ProcessStatus.COMPLETED) is None

    def test_tables_cover_both_operations(self):
        assert set(SERVICE_TRANSITIONS) == set(PROCESS_TRANSITIONS) == {"start", "complete"}

    def test_components_stay_in_use_after_transport(self):
        assert item_status_after_transport(True) is ItemStatus.IN_USE
        assert item_status_after_transport(False) is ItemStatus.AVAILABLE


class TestServiceLifecycle:
    async def test_start_then_complete(self, registry):
        service_id = await registry.create_service(OWNER, ServiceCreate(cost=10, provider_name="Acme"))
        await registry.start_service(OWNER, service_id)
        started = await registry.get_resource(ResourceKind.SERVICE, service_id)
        assert started.status is ServiceStatus.IN_PROGRESS
        assert started.actual_start > 0
        assert started.actual_end == 0

        await registry.complete_service(OWNER, service_id)
        done = await registry.get_resource(ResourceKind.SERVICE, service_id)
        assert done.status is ServiceStatus.COMPLETED
        assert done.actual_end > done.actual_start > 0

    async def test_cannot_skip_or_repeat(self, registry):
        service_id = await registry.create_service(OWNER, ServiceCreate(cost=10, provider_name="Acme"))
        with pytest.raises(InvalidStatus):
            await registry.complete_service(OWNER, service_id)
        await registry.start_service(OWNER, service_id)
        with pytest.raises(InvalidStatus):
            await registry.start_service(OWNER, service_id)
        await registry.complete_service(OWNER, service_id)
        with pytest.raises(InvalidStatus):
            await registry.complete_service(OWNER, service_id)

    async def test_missing_service_and_gate(self, registry):
        with pytest.raises(NotFound):
            await registry.start_service(OWNER, 1)
        service_id = await registry.create_service(OWNER, ServiceCreate(cost=10, provider_name="Acme"))
        with pytest.raises(NoPermission):
            await registry.start_service(ALICE, service_id)
        assert (await registry.get_resource(ResourceKind.SERVICE, service_id)).status is ServiceStatus.REQUESTED


class TestTransportation:
    async def _setup(self, registry, kind=ProcessKind.TRANSPORTATION):
        a = await registry.create_location(OWNER, LocationCreate(name="Origin"))
        b = await registry.create_location(OWNER, LocationCreate(name="Destination"))
        lot_id = await registry.create_lot(OWNER, LotCreate(cost=1))
        item = await registry.create_item(OWNER, ItemCreate(name="Crate", lot_id=lot_id, current_location_id=a))
        part = await registry.create_item(OWNER, ItemCreate(name="Panel", lot_id=lot_id, current_location_id=a))
        await registry.add_component(OWNER, item, part)
        process_id = await registry.create_process(
            OWNER, ProcessCreate(kind=kind, from_location_id=a, to_location_id=b)
        )
        await registry.add_item_to_process(OWNER, process_id, item)
        await registry.add_item_to_process(OWNER, process_id, part)
        return a, b, item, part, process_id

    async def test_start_marks_items_in_use(self, registry):
        a, _, item, part, process_id = await self._setup(registry)
        await registry.start_process(OWNER, process_id)

        process = await registry.get_resource(ResourceKind.PROCESS, process_id)
        assert process.status is ProcessStatus.IN_PROGRESS
        assert process.actual_start > 0
        for item_id in (item, part):
            record = await registry.get_resource(ResourceKind.ITEM, item_id)
            assert record.status is ItemStatus.IN_USE
            assert record.current_process_id == process_id
            assert record.current_location_id == a

    async def test_complete_moves_items_and_keeps_components_in_use(self, registry):
        _, b, item, part, process_id = await self._setup(registry)
        await registry.start_process(OWNER, process_id)
        await registry.complete_process(OWNER, process_id)

        process = await registry.get_resource(ResourceKind.PROCESS, process_id)
        assert process.status is ProcessStatus.COMPLETED
        assert process.actual_end > process.actual_start

        moved = await registry.get_resource(ResourceKind.ITEM, item)
        assert moved.status is ItemStatus.AVAILABLE
        assert moved.current_location_id == b
        assert moved.current_process_id == 0

        component = await registry.get_resource(ResourceKind.ITEM, part)
        assert component.status is ItemStatus.IN_USE
        assert component.current_location_id == b
        assert component.current_process_id == 0

    async def test_other_kinds_leave_items_untouched(self, registry):
        a, _, item, _, process_id = await self._setup(registry, kind=ProcessKind.MAINTENANCE)
        await registry.start_process(OWNER, process_id)
        await registry.complete_process(OWNER, process_id)
        record = await registry.get_resource(ResourceKind.ITEM, item)
        assert record.status is ItemStatus.AVAILABLE
        assert record.current_location_id == a
        assert record.current_process_id == 0

    async def test_process_order_is_enforced(self, registry):
        *_, process_id = await self._setup(registry)
        with pytest.raises(InvalidStatus):
            await registry.complete_process(OWNER, process_id)
        await registry.start_process(OWNER, process_id)
        with pytest.raises(InvalidStatus):
            await registry.start_process(OWNER, process_id)

    async def test_rejected_transition_changes_nothing(self, registry):
        *_, item, _, process_id = await self._setup(registry)
        with pytest.raises(NoPermission):
            await registry.start_process(ALICE, process_id)
        assert (await registry.get_resource(ResourceKind.PROCESS, process_id)).status is ProcessStatus.CREATED
        assert (await registry.get_resource(ResourceKind.ITEM, item)).status is ItemStatus.AVAILABLE
