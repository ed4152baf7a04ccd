from __future__ import annotations

from sqlalchemy import BigInteger, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from registry_api.db.base import Base, SequenceMixin


class ResourceNote(SequenceMixin, Base):
    """Note attached to a Lot/Location/Item/Service/Process."""
    __tablename__ = "resource_notes"
    __table_args__ = (
        Index("ix_resource_notes_resource", "resource_kind", "resource_id"),
    )

    resource_kind: Mapped[str] = mapped_column(Text, nullable=False)
    resource_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    note_id: Mapped[int] = mapped_column(BigInteger, nullable=False)


class ItemComponent(SequenceMixin, Base):
    """Component item nested inside a parent item."""
    __tablename__ = "item_components"

    item_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    component_id: Mapped[int] = mapped_column(BigInteger, nullable=False)


class ProcessService(SequenceMixin, Base):
    """Service assigned to a process."""
    __tablename__ = "process_services"

    process_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    service_id: Mapped[int] = mapped_column(BigInteger, nullable=False)


class ProcessItem(SequenceMixin, Base):
    """Item carried by a process."""
    __tablename__ = "process_items"

    process_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    item_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
