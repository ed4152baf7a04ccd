from __future__ import annotations

from typing import Any, Dict

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .base import Base


# PUBLIC_INTERFACE
def is_memory_sqlite(url: str) -> bool:
    """True when the URL names a process-local in-memory SQLite database."""
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


# PUBLIC_INTERFACE
def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an AsyncEngine for the given URL.

    In-memory SQLite databases live on a single shared connection (StaticPool) so
    every session sees the same data.
    """
    kwargs: Dict[str, Any] = {"echo": echo}
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if is_memory_sqlite(url):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_async_engine(url, **kwargs)


# PUBLIC_INTERFACE
def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Return the session factory used by the registry (one session per operation)."""
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


# PUBLIC_INTERFACE
async def create_schema(engine: AsyncEngine) -> None:
    """Create all registry tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
