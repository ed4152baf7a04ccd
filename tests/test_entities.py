from __future__ import annotations

import asyncio

import pytest

from registry_api.schemas.enums import ItemStatus, ProcessKind, ProcessStatus, ResourceKind, ServiceStatus
from registry_api.schemas.resources import (
    ItemCreate,
    ItemRead,
    LocationCreate,
    LotCreate,
    NoteCreate,
    ProcessCreate,
    ServiceCreate,
)
from registry_api.services.errors import InvalidLocation, NotFound, StringTooLong
from tests.conftest import EPOCH, OWNER

pytestmark = pytest.mark.anyio


class TestIdentifiers:
    async def test_ids_start_at_one_and_increase_per_kind(self, registry):
        assert await registry.create_lot(OWNER, LotCreate(cost=1)) == 1
        assert await registry.create_lot(OWNER, LotCreate(cost=2)) == 2
        assert await registry.create_note(OWNER, NoteCreate(content="a")) == 1
        assert await registry.create_lot(OWNER, LotCreate(cost=3)) == 3
        assert await registry.get_resource_count(ResourceKind.LOT) == 3
        assert await registry.get_resource_count(ResourceKind.NOTE) == 1
        assert await registry.get_resource_count(ResourceKind.ITEM) == 0

    async def test_rejected_call_consumes_no_id(self, registry):
        with pytest.raises(NotFound):
            await registry.create_item(OWNER, ItemCreate(name="orphan", lot_id=7))
        assert await registry.get_resource_count(ResourceKind.ITEM) == 0
        lot_id = await registry.create_lot(OWNER, LotCreate(cost=1))
        assert await registry.create_item(OWNER, ItemCreate(name="first", lot_id=lot_id)) == 1


class TestCreate:
    async def test_lot_record(self, registry):
        lot_id = await registry.create_lot(OWNER, LotCreate(cost=1500))
        lot = await registry.get_resource(ResourceKind.LOT, lot_id)
        assert lot.id == lot_id
        assert lot.cost == 1500
        assert lot.created_by == OWNER
        assert lot.created_at >= EPOCH

    async def test_item_defaults(self, registry):
        lot_id = await registry.create_lot(OWNER, LotCreate(cost=1))
        loc_id = await registry.create_location(OWNER, LocationCreate(name="Dock", location_type="yard"))
        item_id = await registry.create_item(
            OWNER, ItemCreate(name="Pallet", lot_id=lot_id, current_location_id=loc_id)
        )
        item = await registry.get_resource(ResourceKind.ITEM, item_id)
        assert item.status is ItemStatus.AVAILABLE
        assert item.current_location_id == loc_id
        assert item.current_process_id == 0
        assert item.origin_process_id == 0
        assert item.is_component is False

    async def test_item_requires_existing_references(self, registry):
        lot_id = await registry.create_lot(OWNER, LotCreate(cost=1))
        with pytest.raises(NotFound):
            await registry.create_item(OWNER, ItemCreate(name="x", lot_id=0))
        with pytest.raises(NotFound):
            await registry.create_item(OWNER, ItemCreate(name="x", lot_id=lot_id, current_location_id=9))
        with pytest.raises(NotFound):
            await registry.create_item(OWNER, ItemCreate(name="x", lot_id=lot_id, origin_process_id=9))

    async def test_service_starts_requested(self, registry):
        service_id = await registry.create_service(
            OWNER, ServiceCreate(cost=300, provider_name="Acme", expected_start=EPOCH, expected_end=EPOCH + 60)
        )
        service = await registry.get_resource(ResourceKind.SERVICE, service_id)
        assert service.status is ServiceStatus.REQUESTED
        assert (service.actual_start, service.actual_end) == (0, 0)
        assert service.expected_end == EPOCH + 60

    async def test_non_transport_process_without_locations(self, registry):
        process_id = await registry.create_process(OWNER, ProcessCreate(kind=ProcessKind.INSPECTION))
        process = await registry.get_resource(ResourceKind.PROCESS, process_id)
        assert process.status is ProcessStatus.CREATED
        assert process.kind is ProcessKind.INSPECTION


class TestProcessLocations:
    async def test_transportation_needs_both_locations(self, registry):
        loc_id = await registry.create_location(OWNER, LocationCreate(name="A"))
        with pytest.raises(InvalidLocation):
            await registry.create_process(
                OWNER, ProcessCreate(kind=ProcessKind.TRANSPORTATION, from_location_id=loc_id)
            )
        assert await registry.get_resource_count(ResourceKind.PROCESS) == 0

    async def test_transportation_locations_must_exist(self, registry):
        loc_id = await registry.create_location(OWNER, LocationCreate(name="A"))
        with pytest.raises(InvalidLocation):
            await registry.create_process(
                OWNER,
                ProcessCreate(kind=ProcessKind.TRANSPORTATION, from_location_id=loc_id, to_location_id=42),
            )

    async def test_other_kinds_reject_unknown_location(self, registry):
        with pytest.raises(InvalidLocation):
            await registry.create_process(
                OWNER, ProcessCreate(kind=ProcessKind.MAINTENANCE, from_location_id=3)
            )


class TestStringLimits:
    async def test_exactly_max_length_is_accepted(self, registry):
        note_id = await registry.create_note(OWNER, NoteCreate(content="x" * 256))
        assert (await registry.get_resource(ResourceKind.NOTE, note_id)).content == "x" * 256

    async def test_over_max_length_is_rejected(self, registry):
        with pytest.raises(StringTooLong):
            await registry.create_note(OWNER, NoteCreate(content="x" * 257))
        assert await registry.get_resource_count(ResourceKind.NOTE) == 0

    async def test_length_is_measured_in_utf8_bytes(self, registry):
        # 129 two-byte characters = 258 bytes
        with pytest.raises(StringTooLong):
            await registry.create_location(OWNER, LocationCreate(name="é" * 129))

    async def test_every_bounded_field_is_checked(self, registry):
        with pytest.raises(StringTooLong):
            await registry.create_location(OWNER, LocationCreate(name="ok", location_type="t" * 300))
        with pytest.raises(StringTooLong):
            await registry.create_service(OWNER, ServiceCreate(cost=1, provider_name="p" * 300))


class TestZeroRecord:
    async def test_unknown_id_returns_zero_record(self, registry):
        record = await registry.get_resource(ResourceKind.ITEM, 99)
        assert record == ItemRead()
        assert record.id == 0
        assert record.name == ""
        assert record.status is ItemStatus.AVAILABLE

    async def test_id_zero_is_never_a_record(self, registry):
        await registry.create_lot(OWNER, LotCreate(cost=1))
        assert (await registry.get_resource(ResourceKind.LOT, 0)).id == 0


class TestConcurrentCalls:
    async def test_concurrent_creations_get_distinct_ids(self, registry):
        ids = await asyncio.gather(*(registry.create_lot(OWNER, LotCreate(cost=i)) for i in range(40)))
        assert sorted(ids) == list(range(1, 41))
        assert await registry.get_resource_count(ResourceKind.LOT) == 40

    async def test_interleaved_rejections_leave_no_gaps(self, registry):
        lot_id = await registry.create_lot(OWNER, LotCreate(cost=1))
        calls = [
            registry.create_item(OWNER, ItemCreate(name=f"item-{i}", lot_id=lot_id if i % 2 == 0 else 999))
            for i in range(20)
        ]
        results = await asyncio.gather(*calls, return_exceptions=True)

        created = [r for r in results if isinstance(r, int)]
        rejected = [r for r in results if isinstance(r, Exception)]
        assert sorted(created) == list(range(1, 11))
        assert len(rejected) == 10
        assert all(isinstance(r, NotFound) for r in rejected)
        assert await registry.get_resource_count(ResourceKind.ITEM) == 10
