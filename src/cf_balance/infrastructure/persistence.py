"""LedgerStore — PostgreSQL implementation of LedgerStoreProtocol.

Read-only. "Latest inventory" is ordered by created_at then seq (BIGSERIAL),
so two inventories stamped at the same instant still resolve to the one
inserted last instead of whatever order the planner returns.
"""

from collections.abc import Collection
from datetime import datetime

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cf_balance.domain.models import InventorySnapshot, MovementAmount
from src.cf_common.enums import MovementType

_LATEST_INVENTORY_SQL = text("""
    SELECT total_amount, created_at
    FROM inventories
    WHERE coffre_id = :coffre_id
    ORDER BY created_at DESC, seq DESC
    LIMIT 1
""")

_MOVEMENTS_SINCE_SQL = text("""
    SELECT type, amount
    FROM movements
    WHERE coffre_id = :coffre_id
      AND deleted_at IS NULL
      AND type IN :types
      AND created_at >= :since
""").bindparams(bindparam("types", expanding=True))

_ALL_MOVEMENTS_SQL = text("""
    SELECT type, amount
    FROM movements
    WHERE coffre_id = :coffre_id
      AND deleted_at IS NULL
      AND type IN :types
    ORDER BY created_at ASC
""").bindparams(bindparam("types", expanding=True))


def _row_to_snapshot(row: object) -> InventorySnapshot:
    return InventorySnapshot(
        total_amount=row.total_amount,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


def _row_to_movement(row: object) -> MovementAmount:
    return MovementAmount(
        type=MovementType(row.type),  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
    )


class LedgerStore:
    async def find_latest_inventory(
        self, db: AsyncSession, coffre_id: str
    ) -> InventorySnapshot | None:
        result = await db.execute(_LATEST_INVENTORY_SQL, {"coffre_id": coffre_id})
        row = result.fetchone()
        return _row_to_snapshot(row) if row else None

    async def find_movements_since(
        self,
        db: AsyncSession,
        coffre_id: str,
        since: datetime | None,
        types: Collection[MovementType],
    ) -> list[MovementAmount]:
        params: dict[str, object] = {
            "coffre_id": coffre_id,
            "types": [t.value for t in types],
        }
        if since is None:
            result = await db.execute(_ALL_MOVEMENTS_SQL, params)
        else:
            result = await db.execute(_MOVEMENTS_SINCE_SQL, {**params, "since": since})
        return [_row_to_movement(row) for row in result.fetchall()]
