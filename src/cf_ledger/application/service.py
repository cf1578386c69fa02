"""LedgerApplicationService — movements and inventories of a coffre.

Every write commits on the caller's session, then drops the coffre's cached
balance so the next read recomputes. Each write also emits one ``cf.audit``
log line; durable audit storage lives outside this service.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.cf_balance.domain.cache import BalanceCacheProtocol
from src.cf_common.enums import AuditAction, MovementType
from src.cf_common.errors import (
    CoffreNotFoundError,
    EmptyCountError,
    MovementAlreadyDeletedError,
    MovementNotFoundError,
)
from src.cf_common.id_generator import SnowflakeIdGenerator
from src.cf_common.pagination import cursor_decode, cursor_encode
from src.cf_gateway.auth.dependencies import Caller
from src.cf_ledger.application.access import ensure_coffre_access
from src.cf_ledger.application.schemas import (
    CreateInventoryRequest,
    CreateMovementRequest,
    InventoryItem,
    InventoryListResponse,
    MovementItem,
    MovementListResponse,
    UpdateMovementRequest,
)
from src.cf_ledger.domain.billets import count_billets
from src.cf_ledger.domain.repository import LedgerRepositoryProtocol

audit_logger = logging.getLogger("cf.audit")


def _parse_id(raw: str) -> int:
    """Movement ids are positive BIGINTs; anything else cannot exist."""
    try:
        value = int(raw)
    except ValueError:
        raise MovementNotFoundError(raw) from None
    if not 0 < value < 2**63:
        raise MovementNotFoundError(raw)
    return value


class LedgerApplicationService:
    def __init__(
        self,
        repo: LedgerRepositoryProtocol,
        cache: BalanceCacheProtocol,
        id_generator: SnowflakeIdGenerator | None = None,
    ) -> None:
        self._repo = repo
        self._cache = cache
        self._ids = id_generator or SnowflakeIdGenerator()

    async def _ensure_writable(self, db: AsyncSession, caller: Caller, coffre_id: str) -> None:
        await ensure_coffre_access(self._repo, db, caller, coffre_id)
        # members imply an existing coffre; admins may name any id
        if caller.is_admin and not await self._repo.coffre_exists(db, coffre_id):
            raise CoffreNotFoundError(coffre_id)

    # ------------------------------------------------------------------
    # Movements
    # ------------------------------------------------------------------

    async def create_movement(
        self, db: AsyncSession, caller: Caller, coffre_id: str, body: CreateMovementRequest
    ) -> MovementItem:
        await self._ensure_writable(db, caller, coffre_id)
        count = count_billets(body.billets)
        if count.total_cents == 0:
            raise EmptyCountError()

        try:
            movement = await self._repo.create_movement(
                db,
                self._ids.next_id(),
                coffre_id,
                caller.user_id,
                body.type,
                count,
                body.description,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await self._cache.invalidate(coffre_id)

        audit_logger.info(
            "%s user=%s coffre=%s movement=%s type=%s amount=%s",
            AuditAction.MOVEMENT_CREATED.value,
            caller.user_id,
            coffre_id,
            movement.id,
            movement.type.value,
            movement.amount,
        )
        return MovementItem.from_domain(movement)

    async def update_movement(
        self, db: AsyncSession, caller: Caller, movement_id: str, body: UpdateMovementRequest
    ) -> MovementItem:
        """ADMIN only (enforced by the router). Omitted fields keep their value."""
        mid = _parse_id(movement_id)
        existing = await self._repo.get_movement(db, mid)
        if existing is None:
            raise MovementNotFoundError(movement_id)
        if existing.is_deleted:
            raise MovementAlreadyDeletedError(movement_id)

        count = count_billets(body.billets) if body.billets is not None else None
        if count is not None and count.total_cents == 0:
            raise EmptyCountError()
        movement_type: MovementType = body.type or existing.type
        description = (
            body.description if "description" in body.model_fields_set else existing.description
        )

        try:
            updated = await self._repo.update_movement(
                db, mid, movement_type, count, description
            )
            if updated is None:
                # deleted between the read and the conditional UPDATE
                raise MovementAlreadyDeletedError(movement_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await self._cache.invalidate(updated.coffre_id)

        audit_logger.info(
            "%s user=%s coffre=%s movement=%s old_amount=%s new_amount=%s type=%s",
            AuditAction.MOVEMENT_UPDATED.value,
            caller.user_id,
            updated.coffre_id,
            updated.id,
            existing.amount,
            updated.amount,
            updated.type.value,
        )
        return MovementItem.from_domain(updated)

    async def delete_movement(
        self, db: AsyncSession, caller: Caller, movement_id: str
    ) -> MovementItem:
        """ADMIN only (enforced by the router). Soft delete: sets deleted_at."""
        mid = _parse_id(movement_id)
        try:
            deleted = await self._repo.soft_delete_movement(db, mid)
            if deleted is None:
                existing = await self._repo.get_movement(db, mid)
                if existing is None:
                    raise MovementNotFoundError(movement_id)
                raise MovementAlreadyDeletedError(movement_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await self._cache.invalidate(deleted.coffre_id)

        audit_logger.info(
            "%s user=%s coffre=%s movement=%s type=%s amount=%s",
            AuditAction.MOVEMENT_DELETED.value,
            caller.user_id,
            deleted.coffre_id,
            deleted.id,
            deleted.type.value,
            deleted.amount,
        )
        return MovementItem.from_domain(deleted)

    async def list_movements(
        self,
        db: AsyncSession,
        caller: Caller,
        coffre_id: str,
        cursor: str | None,
        limit: int,
    ) -> MovementListResponse:
        await ensure_coffre_access(self._repo, db, caller, coffre_id)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        movements = await self._repo.list_movements(
            db, coffre_id, cursor_decode(cursor), limit + 1
        )
        has_more = len(movements) > limit
        page = movements[:limit]
        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return MovementListResponse(
            items=[MovementItem.from_domain(m) for m in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )

    # ------------------------------------------------------------------
    # Inventories
    # ------------------------------------------------------------------

    async def create_inventory(
        self, db: AsyncSession, caller: Caller, coffre_id: str, body: CreateInventoryRequest
    ) -> InventoryItem:
        """Record a physical count. An empty coffre (total 0) is a valid count."""
        await self._ensure_writable(db, caller, coffre_id)
        count = count_billets(body.billets)

        try:
            inventory = await self._repo.create_inventory(
                db,
                self._ids.next_id(),
                coffre_id,
                caller.user_id,
                count,
                body.notes,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await self._cache.invalidate(coffre_id)

        audit_logger.info(
            "%s user=%s coffre=%s inventory=%s total=%s",
            AuditAction.INVENTORY_CREATED.value,
            caller.user_id,
            coffre_id,
            inventory.id,
            inventory.total_amount,
        )
        return InventoryItem.from_domain(inventory)

    async def list_inventories(
        self,
        db: AsyncSession,
        caller: Caller,
        coffre_id: str,
        cursor: str | None,
        limit: int,
    ) -> InventoryListResponse:
        await ensure_coffre_access(self._repo, db, caller, coffre_id)
        inventories = await self._repo.list_inventories(
            db, coffre_id, cursor_decode(cursor), limit + 1
        )
        has_more = len(inventories) > limit
        page = inventories[:limit]
        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return InventoryListResponse(
            items=[InventoryItem.from_domain(inv) for inv in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )
