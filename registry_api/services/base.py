from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


class BaseService:
    """
    Base class for services. Holds the session factory used to open one session
    (and one transaction) per operation.

    Services keep business logic and orchestration, delegating data access
    to repositories.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self.session_maker = session_maker
