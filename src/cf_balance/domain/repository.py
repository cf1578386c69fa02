"""Ledger store Protocol — the only data access the balance engine needs.

Unit tests inject an in-memory fake that conforms to this Protocol.
Infrastructure layer provides the PostgreSQL implementation.
"""

from collections.abc import Collection
from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.cf_balance.domain.models import InventorySnapshot, MovementAmount
from src.cf_common.enums import MovementType


class LedgerStoreProtocol(Protocol):
    async def find_latest_inventory(
        self, db: AsyncSession, coffre_id: str
    ) -> InventorySnapshot | None: ...

    async def find_movements_since(
        self,
        db: AsyncSession,
        coffre_id: str,
        since: datetime | None,
        types: Collection[MovementType],
    ) -> list[MovementAmount]:
        """Non-deleted movements with created_at >= since (all history if since is None)."""
        ...
