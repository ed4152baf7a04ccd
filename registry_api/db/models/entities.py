from __future__ import annotations

from sqlalchemy import BigInteger, Boolean, Text
from sqlalchemy.orm import Mapped, mapped_column

from registry_api.db.base import Base, RecordMixin
from registry_api.schemas.enums import ItemStatus, ProcessKind, ProcessStatus, ServiceStatus


class Lot(RecordMixin, Base):
    """Material lot/batch with its acquisition cost (minor currency units)."""
    __tablename__ = "lots"

    cost: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class Location(RecordMixin, Base):
    """Physical location (warehouse, yard, line)."""
    __tablename__ = "locations"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    location_type: Mapped[str] = mapped_column(Text, nullable=False, default="")


class Item(RecordMixin, Base):
    """
    Inventory item drawn from a lot.

    Location/process references use 0 for "unset"; status, current_location_id
    and current_process_id only change through Transportation process transitions.
    """
    __tablename__ = "items"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    lot_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    current_location_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    current_process_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    origin_process_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    status: Mapped[str] = mapped_column(Text, nullable=False, default=ItemStatus.AVAILABLE.value)
    is_component: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class Service(RecordMixin, Base):
    """Service engagement performed by a named provider."""
    __tablename__ = "services"

    cost: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    provider_name: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False, default=ServiceStatus.REQUESTED.value)
    expected_start: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    expected_end: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    actual_start: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    actual_end: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class Note(RecordMixin, Base):
    """Free-text note; attached to other resources, never owns them."""
    __tablename__ = "notes"

    content: Mapped[str] = mapped_column(Text, nullable=False)


class Process(RecordMixin, Base):
    """Workflow process (maintenance, production, inspection, transportation)."""
    __tablename__ = "processes"

    kind: Mapped[str] = mapped_column(Text, nullable=False, default=ProcessKind.MAINTENANCE.value)
    status: Mapped[str] = mapped_column(Text, nullable=False, default=ProcessStatus.CREATED.value)
    from_location_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    to_location_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    expected_start: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    expected_end: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    actual_start: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    actual_end: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
