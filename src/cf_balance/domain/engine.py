"""Balance engine — latest inventory snapshot + replay of later movements.

    balance = inventory.total_amount
              + Σ ENTRY  (created_at >= inventory.created_at, not deleted)
              - Σ EXIT   (created_at >= inventory.created_at, not deleted)

Without any inventory the seed is 0 and the whole non-deleted history is replayed.
A movement stamped exactly at the inventory time is replayed on top of it.

All arithmetic is integer cents; each amount is rounded to the cent before it is
summed, so the result does not depend on movement order or history length.

Read-only: the engine never writes, retries, or returns partial results. Store
errors propagate unchanged.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.cf_balance.domain.models import BalanceInfo, MovementAmount
from src.cf_balance.domain.repository import LedgerStoreProtocol
from src.cf_common.enums import MovementType
from src.cf_common.money import to_minor_units

logger = logging.getLogger("cf.balance")

_REPLAYED_TYPES = (MovementType.ENTRY, MovementType.EXIT)


def signed_cents(movement: MovementAmount) -> int:
    """ENTRY adds, EXIT subtracts."""
    cents = to_minor_units(movement.amount)
    if movement.type is MovementType.ENTRY:
        return cents
    if movement.type is MovementType.EXIT:
        return -cents
    return 0


class BalanceEngine:
    def __init__(self, store: LedgerStoreProtocol) -> None:
        self._store = store

    async def compute_balance(self, db: AsyncSession, coffre_id: str) -> BalanceInfo:
        inventory = await self._store.find_latest_inventory(db, coffre_id)

        seed_cents = to_minor_units(inventory.total_amount) if inventory else 0
        since = inventory.created_at if inventory else None

        movements = await self._store.find_movements_since(
            db, coffre_id, since, _REPLAYED_TYPES
        )
        # int cents have no -0; from_minor_units guards the Decimal side
        balance_cents = seed_cents + sum(signed_cents(m) for m in movements)

        logger.debug(
            "coffre %s: seed=%d movements=%d balance=%d",
            coffre_id,
            seed_cents,
            len(movements),
            balance_cents,
        )
        return BalanceInfo(
            balance_cents=balance_cents,
            last_inventory_date=inventory.created_at if inventory else None,
            last_inventory_amount_cents=seed_cents,
        )
