"""003: create movements and movement_details tables

Revision ID: 003
Revises: 002
Create Date: 2026-10-16
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE movements (
            id              BIGINT          PRIMARY KEY,
            coffre_id       VARCHAR(64)     NOT NULL REFERENCES coffres (id) ON DELETE CASCADE,
            user_id         VARCHAR(64)     NOT NULL,
            type            VARCHAR(8)      NOT NULL,
            amount          NUMERIC(12, 2)  NOT NULL,
            description     VARCHAR(500),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            deleted_at      TIMESTAMPTZ,
            CONSTRAINT ck_movements_type CHECK (type IN ('ENTRY', 'EXIT')),
            CONSTRAINT ck_movements_amount_gte_0 CHECK (amount >= 0)
        );
    """)
    # Balance replay: coffre + created_at range over live rows only
    op.execute("""
        CREATE INDEX idx_movements_coffre_time
        ON movements (coffre_id, created_at)
        WHERE deleted_at IS NULL;
    """)
    op.execute("CREATE INDEX idx_movements_coffre_id ON movements (coffre_id, id DESC);")
    op.execute("""
        CREATE TABLE movement_details (
            movement_id         BIGINT      NOT NULL REFERENCES movements (id) ON DELETE CASCADE,
            denomination_cents  INTEGER     NOT NULL,
            quantity            INTEGER     NOT NULL,
            PRIMARY KEY (movement_id, denomination_cents),
            CONSTRAINT ck_movement_details_quantity_gt_0 CHECK (quantity > 0)
        );
    """)
    op.execute("COMMENT ON COLUMN movements.deleted_at IS 'Soft delete — non-NULL rows never count in a balance';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS movement_details CASCADE;")
    op.execute("DROP TABLE IF EXISTS movements CASCADE;")
