from __future__ import annotations

import itertools
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from registry_api.api.main import create_app
from registry_api.core.security import create_access_token
from registry_api.core.settings import AppSettings
from registry_api.db.config import Settings as DbSettings
from registry_api.db.session import build_engine, build_session_maker, create_schema
from registry_api.schemas.enums import PermissionPolicy
from registry_api.services.registry import Registry

OWNER = "owner"
ALICE = "alice"
BOB = "bob"
EPOCH = 1_700_000_000
TEST_SECRET = "test-secret"


@pytest.fixture
def anyio_backend():
    return "asyncio"


def ticking_clock(start: int = EPOCH) -> Callable[[], int]:
    """A clock that advances one second per reading."""
    counter = itertools.count(start)
    return lambda: next(counter)


async def _make_registry(policy: PermissionPolicy, **limits) -> tuple:
    engine = build_engine("sqlite+aiosqlite://")
    await create_schema(engine)
    registry = Registry(
        build_session_maker(engine),
        policy=policy,
        clock=ticking_clock(),
        **limits,
    )
    return engine, registry


@pytest.fixture
async def blank_registry(anyio_backend):
    """Registry on a fresh in-memory database, not yet initialized."""
    engine, registry = await _make_registry(PermissionPolicy.STRICT)
    yield registry
    await engine.dispose()


@pytest.fixture
async def registry(anyio_backend):
    """Strict-policy registry initialized by OWNER."""
    engine, registry = await _make_registry(PermissionPolicy.STRICT)
    await registry.initialize(OWNER)
    yield registry
    await engine.dispose()


@pytest.fixture
async def permissive_registry(anyio_backend):
    """Permissive-policy registry initialized by OWNER."""
    engine, registry = await _make_registry(PermissionPolicy.PERMISSIVE)
    await registry.initialize(OWNER)
    yield registry
    await engine.dispose()


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(
        REGISTRY_OWNER=OWNER,
        JWT_SECRET_KEY=TEST_SECRET,
        PERMISSION_POLICY="strict",
        CORS_ORIGINS=["http://localhost:3000"],
    )


@pytest.fixture
def client(app_settings):
    app = create_app(app_settings, DbSettings(DATABASE_URL="sqlite+aiosqlite://"))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth(app_settings):
    """Build Authorization headers for an identity."""

    def _headers(identity: str) -> dict:
        token = create_access_token(identity, settings=app_settings)
        return {"Authorization": f"Bearer {token}"}

    return _headers
