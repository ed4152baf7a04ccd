from __future__ import annotations

import pytest

from registry_api.schemas.enums import PermissionPolicy, ResourceKind
from registry_api.schemas.resources import LotCreate, NoteCreate
from registry_api.services.access import is_allowed
from registry_api.services.errors import AlreadyInitialized, NoPermission, NotInitialized, NotOwner
from tests.conftest import ALICE, BOB, OWNER

pytestmark = pytest.mark.anyio


class TestPolicyPredicate:
    @pytest.mark.parametrize(
        "granted,is_owner,expected",
        [(True, True, True), (True, False, True), (False, True, True), (False, False, False)],
    )
    def test_strict(self, granted, is_owner, expected):
        assert is_allowed(PermissionPolicy.STRICT, granted=granted, is_owner=is_owner) is expected

    @pytest.mark.parametrize(
        "granted,is_owner,expected",
        [(True, True, True), (True, False, True), (False, True, False), (False, False, True)],
    )
    def test_permissive(self, granted, is_owner, expected):
        assert is_allowed(PermissionPolicy.PERMISSIVE, granted=granted, is_owner=is_owner) is expected


class TestInitialization:
    async def test_uninitialized_registry_rejects_calls(self, blank_registry):
        assert await blank_registry.is_initialized() is False
        with pytest.raises(NotInitialized):
            await blank_registry.create_lot(OWNER, LotCreate(cost=1))
        with pytest.raises(NotInitialized):
            await blank_registry.get_owner()

    async def test_initialize_sets_owner_and_grants_every_kind(self, blank_registry):
        await blank_registry.initialize(OWNER)
        assert await blank_registry.get_owner() == OWNER
        for kind in ResourceKind:
            assert await blank_registry.has_permission(OWNER, kind) is True
            assert await blank_registry.get_resource_count(kind) == 0

    async def test_initialize_only_once(self, registry):
        with pytest.raises(AlreadyInitialized):
            await registry.initialize(ALICE)
        assert await registry.get_owner() == OWNER


class TestStrictPolicy:
    async def test_non_owner_without_grant_is_rejected(self, registry):
        assert await registry.has_permission(ALICE, ResourceKind.LOT) is False
        with pytest.raises(NoPermission):
            await registry.create_lot(ALICE, LotCreate(cost=10))

    async def test_grant_allows_only_that_kind(self, registry):
        await registry.grant_permission(OWNER, ALICE, ResourceKind.LOT)
        assert await registry.create_lot(ALICE, LotCreate(cost=10)) == 1
        with pytest.raises(NoPermission):
            await registry.create_note(ALICE, NoteCreate(content="nope"))

    async def test_grant_can_be_withdrawn(self, registry):
        await registry.grant_permission(OWNER, ALICE, ResourceKind.LOT)
        await registry.grant_permission(OWNER, ALICE, ResourceKind.LOT, granted=False)
        with pytest.raises(NoPermission):
            await registry.create_lot(ALICE, LotCreate(cost=10))

    async def test_owner_keeps_access_without_grant(self, registry):
        await registry.grant_permission(OWNER, OWNER, ResourceKind.LOT, granted=False)
        assert await registry.create_lot(OWNER, LotCreate(cost=10)) == 1


class TestPermissivePolicy:
    async def test_non_owner_passes_without_grant(self, permissive_registry):
        assert await permissive_registry.has_permission(ALICE, ResourceKind.LOT) is True
        assert await permissive_registry.create_lot(ALICE, LotCreate(cost=5)) == 1

    async def test_owner_passes_through_initial_grants(self, permissive_registry):
        assert await permissive_registry.create_lot(OWNER, LotCreate(cost=5)) == 1

    async def test_owner_without_grant_is_rejected(self, permissive_registry):
        await permissive_registry.grant_permission(OWNER, OWNER, ResourceKind.LOT, granted=False)
        with pytest.raises(NoPermission):
            await permissive_registry.create_lot(OWNER, LotCreate(cost=5))


class TestGrantPermission:
    async def test_only_owner_may_grant(self, registry):
        with pytest.raises(NotOwner):
            await registry.grant_permission(ALICE, BOB, ResourceKind.ITEM)
        assert await registry.has_permission(BOB, ResourceKind.ITEM) is False

    async def test_grantee_cannot_grant_further(self, registry):
        await registry.grant_permission(OWNER, ALICE, ResourceKind.ITEM)
        with pytest.raises(NotOwner):
            await registry.grant_permission(ALICE, BOB, ResourceKind.ITEM)
