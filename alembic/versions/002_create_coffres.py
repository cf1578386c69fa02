"""002: create coffres and coffre_members tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-16
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE coffres (
            id              VARCHAR(64)     PRIMARY KEY,
            name            VARCHAR(128)    NOT NULL,
            description     VARCHAR(500),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_coffres_updated_at
            BEFORE UPDATE ON coffres
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("""
        CREATE TABLE coffre_members (
            user_id         VARCHAR(64)     NOT NULL,
            coffre_id       VARCHAR(64)     NOT NULL REFERENCES coffres (id) ON DELETE CASCADE,
            role            VARCHAR(16)     NOT NULL DEFAULT 'MEMBER',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            PRIMARY KEY (user_id, coffre_id),
            CONSTRAINT ck_coffre_members_role CHECK (role IN ('MEMBER', 'MANAGER', 'OWNER'))
        );
    """)
    op.execute("CREATE INDEX idx_coffre_members_coffre ON coffre_members (coffre_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS coffre_members CASCADE;")
    op.execute("DROP TABLE IF EXISTS coffres CASCADE;")
