"""LedgerRepository — concrete implementation of LedgerRepositoryProtocol.

Writes use raw ``INSERT/UPDATE ... RETURNING`` so each statement is atomic and
returns the stored row; reads go through the ORM mappings in db_models.

Soft delete and update are conditional on ``deleted_at IS NULL``: 0 rows back
means the movement is missing or already deleted, and the service decides
which error applies.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from collections.abc import Iterable, Sequence

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cf_common.enums import MovementType
from src.cf_common.errors import InternalError
from src.cf_common.money import from_minor_units
from src.cf_ledger.domain.models import CashCount, CountLine, Inventory, Movement
from src.cf_ledger.infrastructure.db_models import (
    CoffreORM,
    CoffreMemberORM,
    InventoryDetailORM,
    InventoryORM,
    MovementDetailORM,
    MovementORM,
)

_MOVEMENT_COLUMNS = "id, coffre_id, user_id, type, amount, description, created_at, deleted_at"

_INSERT_MOVEMENT_SQL = text(f"""
    INSERT INTO movements (id, coffre_id, user_id, type, amount, description)
    VALUES (:id, :coffre_id, :user_id, :type, :amount, :description)
    RETURNING {_MOVEMENT_COLUMNS}
""")

_UPDATE_MOVEMENT_SQL = text(f"""
    UPDATE movements
    SET type = :type,
        amount = COALESCE(:amount, amount),
        description = :description,
        updated_at = NOW()
    WHERE id = :id AND deleted_at IS NULL
    RETURNING {_MOVEMENT_COLUMNS}
""")

_SOFT_DELETE_MOVEMENT_SQL = text(f"""
    UPDATE movements
    SET deleted_at = NOW(),
        updated_at = NOW()
    WHERE id = :id AND deleted_at IS NULL
    RETURNING {_MOVEMENT_COLUMNS}
""")

_DELETE_MOVEMENT_DETAILS_SQL = text("""
    DELETE FROM movement_details WHERE movement_id = :movement_id
""")

_INSERT_MOVEMENT_DETAIL_SQL = text("""
    INSERT INTO movement_details (movement_id, denomination_cents, quantity)
    VALUES (:movement_id, :denomination_cents, :quantity)
""")

_INSERT_INVENTORY_SQL = text("""
    INSERT INTO inventories (id, coffre_id, user_id, total_amount, notes)
    VALUES (:id, :coffre_id, :user_id, :total_amount, :notes)
    RETURNING id, coffre_id, user_id, total_amount, notes, created_at
""")

_INSERT_INVENTORY_DETAIL_SQL = text("""
    INSERT INTO inventory_details (inventory_id, denomination_cents, quantity)
    VALUES (:inventory_id, :denomination_cents, :quantity)
""")


def _row_to_movement(row: object, details: list[CountLine] | None = None) -> Movement:
    return Movement(
        id=row.id,  # type: ignore[attr-defined]
        coffre_id=row.coffre_id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        type=MovementType(row.type),  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        deleted_at=row.deleted_at,  # type: ignore[attr-defined]
        details=details or [],
    )


def _row_to_inventory(row: object, details: list[CountLine] | None = None) -> Inventory:
    return Inventory(
        id=row.id,  # type: ignore[attr-defined]
        coffre_id=row.coffre_id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        total_amount=row.total_amount,  # type: ignore[attr-defined]
        notes=row.notes,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        details=details or [],
    )


def _group_lines(
    rows: Iterable[MovementDetailORM | InventoryDetailORM], owner_attr: str
) -> dict[int, list[CountLine]]:
    grouped: dict[int, list[CountLine]] = {}
    for row in rows:
        grouped.setdefault(getattr(row, owner_attr), []).append(
            CountLine(denomination_cents=row.denomination_cents, quantity=row.quantity)
        )
    for lines in grouped.values():
        lines.sort(key=lambda line: line.denomination_cents, reverse=True)
    return grouped


class LedgerRepository:
    """Concrete repository — every write is a single atomic statement per table."""

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    async def is_member(self, db: AsyncSession, user_id: str, coffre_id: str) -> bool:
        result = await db.execute(
            select(CoffreMemberORM.user_id).where(
                CoffreMemberORM.user_id == user_id,
                CoffreMemberORM.coffre_id == coffre_id,
            )
        )
        return result.scalar_one_or_none() is not None

    async def coffre_exists(self, db: AsyncSession, coffre_id: str) -> bool:
        result = await db.execute(select(CoffreORM.id).where(CoffreORM.id == coffre_id))
        return result.scalar_one_or_none() is not None

    # ------------------------------------------------------------------
    # Movements
    # ------------------------------------------------------------------

    async def create_movement(
        self,
        db: AsyncSession,
        movement_id: int,
        coffre_id: str,
        user_id: str,
        movement_type: MovementType,
        count: CashCount,
        description: str | None,
    ) -> Movement:
        result = await db.execute(
            _INSERT_MOVEMENT_SQL,
            {
                "id": movement_id,
                "coffre_id": coffre_id,
                "user_id": user_id,
                "type": movement_type.value,
                "amount": from_minor_units(count.total_cents),
                "description": description,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Movement insert returned no rows")
        await self._insert_movement_details(db, movement_id, count)
        return _row_to_movement(row, list(count.lines))

    async def get_movement(self, db: AsyncSession, movement_id: int) -> Movement | None:
        result = await db.execute(select(MovementORM).where(MovementORM.id == movement_id))
        orm = result.scalar_one_or_none()
        if orm is None:
            return None
        details = await self._movement_details(db, [movement_id])
        return _row_to_movement(orm, details.get(movement_id))

    async def update_movement(
        self,
        db: AsyncSession,
        movement_id: int,
        movement_type: MovementType,
        count: CashCount | None,
        description: str | None,
    ) -> Movement | None:
        result = await db.execute(
            _UPDATE_MOVEMENT_SQL,
            {
                "id": movement_id,
                "type": movement_type.value,
                "amount": from_minor_units(count.total_cents) if count is not None else None,
                "description": description,
            },
        )
        row = result.fetchone()
        if row is None:
            return None
        if count is not None:
            await db.execute(_DELETE_MOVEMENT_DETAILS_SQL, {"movement_id": movement_id})
            await self._insert_movement_details(db, movement_id, count)
            return _row_to_movement(row, list(count.lines))
        details = await self._movement_details(db, [movement_id])
        return _row_to_movement(row, details.get(movement_id))

    async def soft_delete_movement(
        self, db: AsyncSession, movement_id: int
    ) -> Movement | None:
        result = await db.execute(_SOFT_DELETE_MOVEMENT_SQL, {"id": movement_id})
        row = result.fetchone()
        return _row_to_movement(row) if row else None

    async def list_movements(
        self, db: AsyncSession, coffre_id: str, cursor_id: int | None, limit: int
    ) -> list[Movement]:
        stmt = (
            select(MovementORM)
            .where(MovementORM.coffre_id == coffre_id, MovementORM.deleted_at.is_(None))
            .order_by(MovementORM.id.desc())
            .limit(limit)
        )
        if cursor_id is not None:
            stmt = stmt.where(MovementORM.id < cursor_id)
        result = await db.execute(stmt)
        rows = result.scalars().all()
        details = await self._movement_details(db, [r.id for r in rows])
        return [_row_to_movement(r, details.get(r.id)) for r in rows]

    async def _insert_movement_details(
        self, db: AsyncSession, movement_id: int, count: CashCount
    ) -> None:
        if not count.lines:
            return
        await db.execute(
            _INSERT_MOVEMENT_DETAIL_SQL,
            [
                {
                    "movement_id": movement_id,
                    "denomination_cents": line.denomination_cents,
                    "quantity": line.quantity,
                }
                for line in count.lines
            ],
        )

    async def _movement_details(
        self, db: AsyncSession, movement_ids: Sequence[int]
    ) -> dict[int, list[CountLine]]:
        if not movement_ids:
            return {}
        result = await db.execute(
            select(MovementDetailORM).where(MovementDetailORM.movement_id.in_(movement_ids))
        )
        return _group_lines(result.scalars().all(), "movement_id")

    # ------------------------------------------------------------------
    # Inventories
    # ------------------------------------------------------------------

    async def create_inventory(
        self,
        db: AsyncSession,
        inventory_id: int,
        coffre_id: str,
        user_id: str,
        count: CashCount,
        notes: str | None,
    ) -> Inventory:
        result = await db.execute(
            _INSERT_INVENTORY_SQL,
            {
                "id": inventory_id,
                "coffre_id": coffre_id,
                "user_id": user_id,
                "total_amount": from_minor_units(count.total_cents),
                "notes": notes,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Inventory insert returned no rows")
        if count.lines:
            await db.execute(
                _INSERT_INVENTORY_DETAIL_SQL,
                [
                    {
                        "inventory_id": inventory_id,
                        "denomination_cents": line.denomination_cents,
                        "quantity": line.quantity,
                    }
                    for line in count.lines
                ],
            )
        return _row_to_inventory(row, list(count.lines))

    async def list_inventories(
        self, db: AsyncSession, coffre_id: str, cursor_id: int | None, limit: int
    ) -> list[Inventory]:
        stmt = (
            select(InventoryORM)
            .where(InventoryORM.coffre_id == coffre_id)
            .order_by(InventoryORM.id.desc())
            .limit(limit)
        )
        if cursor_id is not None:
            stmt = stmt.where(InventoryORM.id < cursor_id)
        result = await db.execute(stmt)
        rows = result.scalars().all()
        if not rows:
            return []
        detail_result = await db.execute(
            select(InventoryDetailORM).where(
                InventoryDetailORM.inventory_id.in_([r.id for r in rows])
            )
        )
        details = _group_lines(detail_result.scalars().all(), "inventory_id")
        return [_row_to_inventory(r, details.get(r.id)) for r in rows]
