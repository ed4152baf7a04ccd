from __future__ import annotations

from sqlalchemy import BigInteger, Boolean, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from registry_api.db.base import Base


class RegistryState(Base):
    """Single-row table holding the owner chosen at initialization."""
    __tablename__ = "registry_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False, default=1)
    owner: Mapped[str] = mapped_column(Text, nullable=False)
    initialized_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class IdCounter(Base):
    """Next identifier to hand out for a resource kind (starts at 1)."""
    __tablename__ = "id_counters"

    resource_kind: Mapped[str] = mapped_column(Text, primary_key=True)
    next_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=1)


class PermissionGrant(Base):
    """Explicit (identity, resource kind) grant flag."""
    __tablename__ = "permission_grants"

    identity: Mapped[str] = mapped_column(Text, primary_key=True)
    resource_kind: Mapped[str] = mapped_column(Text, primary_key=True)
    granted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
