"""004: create inventories and inventory_details tables

Revision ID: 004
Revises: 003
Create Date: 2026-10-16
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE inventories (
            id              BIGINT          PRIMARY KEY,
            seq             BIGSERIAL       NOT NULL UNIQUE,
            coffre_id       VARCHAR(64)     NOT NULL REFERENCES coffres (id) ON DELETE CASCADE,
            user_id         VARCHAR(64)     NOT NULL,
            total_amount    NUMERIC(12, 2)  NOT NULL,
            notes           VARCHAR(500),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_inventories_total_gte_0 CHECK (total_amount >= 0)
        );
    """)
    # Latest inventory lookup: ORDER BY created_at DESC, seq DESC LIMIT 1
    op.execute("""
        CREATE INDEX idx_inventories_coffre_latest
        ON inventories (coffre_id, created_at DESC, seq DESC);
    """)
    op.execute("""
        CREATE TABLE inventory_details (
            inventory_id        BIGINT      NOT NULL REFERENCES inventories (id) ON DELETE CASCADE,
            denomination_cents  INTEGER     NOT NULL,
            quantity            INTEGER     NOT NULL,
            PRIMARY KEY (inventory_id, denomination_cents),
            CONSTRAINT ck_inventory_details_quantity_gt_0 CHECK (quantity > 0)
        );
    """)
    op.execute("COMMENT ON TABLE inventories IS 'Physical cash counts — append-only, the latest one seeds the balance';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS inventory_details CASCADE;")
    op.execute("DROP TABLE IF EXISTS inventories CASCADE;")
