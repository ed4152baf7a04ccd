"""Registry schema.

- registry_state, id_counters, permission_grants
- lots, locations, items, services, notes, processes
- resource_notes, item_components, process_services, process_items
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1d9e7a5b20"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _record_columns() -> list:
    return [
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.Column("created_by", sa.Text(), nullable=False),
    ]


def upgrade() -> None:
    # Access control and counters
    op.create_table(
        "registry_state",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("owner", sa.Text(), nullable=False),
        sa.Column("initialized_at", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_registry_state"),
    )
    op.create_table(
        "id_counters",
        sa.Column("resource_kind", sa.Text(), nullable=False),
        sa.Column("next_id", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("resource_kind", name="pk_id_counters"),
    )
    op.create_table(
        "permission_grants",
        sa.Column("identity", sa.Text(), nullable=False),
        sa.Column("resource_kind", sa.Text(), nullable=False),
        sa.Column("granted", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("identity", "resource_kind", name="pk_permission_grants"),
    )

    # Entities
    op.create_table(
        "lots",
        *_record_columns(),
        sa.Column("cost", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_lots"),
    )
    op.create_table(
        "locations",
        *_record_columns(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("location_type", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_locations"),
    )
    op.create_table(
        "items",
        *_record_columns(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("lot_id", sa.BigInteger(), nullable=False),
        sa.Column("current_location_id", sa.BigInteger(), nullable=False),
        sa.Column("current_process_id", sa.BigInteger(), nullable=False),
        sa.Column("origin_process_id", sa.BigInteger(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False),
        sa.Column("is_component", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_items"),
    )
    op.create_index("ix_items_lot_id", "items", ["lot_id"])
    op.create_table(
        "services",
        *_record_columns(),
        sa.Column("cost", sa.BigInteger(), nullable=False),
        sa.Column("provider_name", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False),
        sa.Column("expected_start", sa.BigInteger(), nullable=False),
        sa.Column("expected_end", sa.BigInteger(), nullable=False),
        sa.Column("actual_start", sa.BigInteger(), nullable=False),
        sa.Column("actual_end", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_services"),
    )
    op.create_table(
        "notes",
        *_record_columns(),
        sa.Column("content", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_notes"),
    )
    op.create_table(
        "processes",
        *_record_columns(),
        sa.Column("kind", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False),
        sa.Column("from_location_id", sa.BigInteger(), nullable=False),
        sa.Column("to_location_id", sa.BigInteger(), nullable=False),
        sa.Column("expected_start", sa.BigInteger(), nullable=False),
        sa.Column("expected_end", sa.BigInteger(), nullable=False),
        sa.Column("actual_start", sa.BigInteger(), nullable=False),
        sa.Column("actual_end", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_processes"),
    )

    # Relationship lists (append-only, ordered by seq)
    op.create_table(
        "resource_notes",
        sa.Column("seq", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("resource_kind", sa.Text(), nullable=False),
        sa.Column("resource_id", sa.BigInteger(), nullable=False),
        sa.Column("note_id", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("seq", name="pk_resource_notes"),
    )
    op.create_index("ix_resource_notes_resource", "resource_notes", ["resource_kind", "resource_id"])
    op.create_table(
        "item_components",
        sa.Column("seq", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("item_id", sa.BigInteger(), nullable=False),
        sa.Column("component_id", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("seq", name="pk_item_components"),
    )
    op.create_index("ix_item_components_item_id", "item_components", ["item_id"])
    op.create_table(
        "process_services",
        sa.Column("seq", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("process_id", sa.BigInteger(), nullable=False),
        sa.Column("service_id", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("seq", name="pk_process_services"),
    )
    op.create_index("ix_process_services_process_id", "process_services", ["process_id"])
    op.create_table(
        "process_items",
        sa.Column("seq", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("process_id", sa.BigInteger(), nullable=False),
        sa.Column("item_id", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("seq", name="pk_process_items"),
    )
    op.create_index("ix_process_items_process_id", "process_items", ["process_id"])


def downgrade() -> None:
    op.drop_index("ix_process_items_process_id", table_name="process_items")
    op.drop_table("process_items")
    op.drop_index("ix_process_services_process_id", table_name="process_services")
    op.drop_table("process_services")
    op.drop_index("ix_item_components_item_id", table_name="item_components")
    op.drop_table("item_components")
    op.drop_index("ix_resource_notes_resource", table_name="resource_notes")
    op.drop_table("resource_notes")
    for table in ("processes", "notes", "services"):
        op.drop_table(table)
    op.drop_index("ix_items_lot_id", table_name="items")
    for table in ("items", "locations", "lots", "permission_grants", "id_counters", "registry_state"):
        op.drop_table(table)
