"""Repository Protocols for the ledger write side.

Unit tests inject a mock that conforms to these Protocols.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.cf_common.enums import MovementType
from src.cf_ledger.domain.models import CashCount, Inventory, Movement


class MembershipProtocol(Protocol):
    async def is_member(self, db: AsyncSession, user_id: str, coffre_id: str) -> bool: ...


class LedgerRepositoryProtocol(MembershipProtocol, Protocol):
    async def coffre_exists(self, db: AsyncSession, coffre_id: str) -> bool: ...

    async def create_movement(
        self,
        db: AsyncSession,
        movement_id: int,
        coffre_id: str,
        user_id: str,
        movement_type: MovementType,
        count: CashCount,
        description: str | None,
    ) -> Movement: ...

    async def get_movement(self, db: AsyncSession, movement_id: int) -> Movement | None: ...

    async def update_movement(
        self,
        db: AsyncSession,
        movement_id: int,
        movement_type: MovementType,
        count: CashCount | None,
        description: str | None,
    ) -> Movement | None:
        """count=None keeps the stored amount and details. None if gone/deleted."""
        ...

    async def soft_delete_movement(
        self, db: AsyncSession, movement_id: int
    ) -> Movement | None:
        """Set deleted_at; None when the movement is already deleted."""
        ...

    async def list_movements(
        self, db: AsyncSession, coffre_id: str, cursor_id: int | None, limit: int
    ) -> list[Movement]: ...

    async def create_inventory(
        self,
        db: AsyncSession,
        inventory_id: int,
        coffre_id: str,
        user_id: str,
        count: CashCount,
        notes: str | None,
    ) -> Inventory: ...

    async def list_inventories(
        self, db: AsyncSession, coffre_id: str, cursor_id: int | None, limit: int
    ) -> list[Inventory]: ...
