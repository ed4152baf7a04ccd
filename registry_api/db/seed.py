"""
Registry bootstrap and demo data.

Seeds:
- Registry owner (initialization with every resource kind granted)
- Optional demo data: two locations, a lot, two items (one nested as a
  component of the other) and a transportation process carrying the parent

Usage:
  python -m registry_api.db.run_migrations upgrade head
  REGISTRY_OWNER=alice python -m registry_api.db.seed
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict

from registry_api.core.logging import bind_caller, configure_logging
from registry_api.core.settings import get_app_settings
from registry_api.db.config import get_settings
from registry_api.db.session import build_engine, build_session_maker
from registry_api.schemas.enums import ProcessKind, ResourceKind
from registry_api.schemas.resources import (
    ItemCreate,
    LocationCreate,
    LotCreate,
    NoteCreate,
    ProcessCreate,
)
from registry_api.services.registry import Registry

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
async def seed_all(registry: Registry, owner: str, demo: bool = False) -> Dict[str, int]:
    """
    Initialize the registry for `owner` unless already initialized, then
    optionally create the demo data set.

    The demo data set is only created when no location exists yet, so repeated
    startups do not duplicate it. Returns the ids created (empty when nothing
    was created).
    """
    if not await registry.is_initialized():
        await registry.initialize(owner)
    else:
        logger.info("Registry already initialized; owner=%s", await registry.get_owner())

    if not demo:
        return {}
    if await registry.get_resource_count(ResourceKind.LOCATION) > 0:
        logger.info("Demo data already present; skipping.")
        return {}
    return await _seed_demo(registry, owner)


async def _seed_demo(registry: Registry, owner: str) -> Dict[str, int]:
    ids: Dict[str, int] = {}
    ids["warehouse"] = await registry.create_location(
        owner, LocationCreate(name="Main Warehouse", location_type="warehouse")
    )
    ids["plant"] = await registry.create_location(
        owner, LocationCreate(name="Assembly Plant", location_type="plant")
    )
    ids["lot"] = await registry.create_lot(owner, LotCreate(cost=125_000))
    ids["frame"] = await registry.create_item(
        owner, ItemCreate(name="Frame", lot_id=ids["lot"], current_location_id=ids["warehouse"])
    )
    ids["bracket"] = await registry.create_item(
        owner, ItemCreate(name="Bracket", lot_id=ids["lot"], current_location_id=ids["warehouse"])
    )
    await registry.add_component(owner, ids["frame"], ids["bracket"])

    ids["transport"] = await registry.create_process(
        owner,
        ProcessCreate(
            kind=ProcessKind.TRANSPORTATION,
            from_location_id=ids["warehouse"],
            to_location_id=ids["plant"],
        ),
    )
    await registry.add_item_to_process(owner, ids["transport"], ids["frame"])

    ids["note"] = await registry.create_note(owner, NoteCreate(content="Demo data set"))
    await registry.attach_note(owner, ResourceKind.LOT, ids["lot"], ids["note"])

    logger.info("Seeded demo data: %s", ids)
    return ids


async def _main() -> None:
    app_settings = get_app_settings()
    if not app_settings.REGISTRY_OWNER:
        raise SystemExit("REGISTRY_OWNER must be set to seed the registry")

    db_settings = get_settings()
    engine = build_engine(db_settings.async_database_url, echo=db_settings.SQL_ECHO)
    try:
        registry = Registry.from_settings(build_session_maker(engine), app_settings)
        with bind_caller(app_settings.REGISTRY_OWNER):
            await seed_all(registry, app_settings.REGISTRY_OWNER, demo=True)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    configure_logging(get_app_settings().LOG_LEVEL)
    asyncio.run(_main())
