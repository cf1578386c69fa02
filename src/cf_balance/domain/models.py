"""Domain models for cf_balance — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.cf_common.enums import MovementType
from src.cf_common.money import from_minor_units


@dataclass(frozen=True)
class InventorySnapshot:
    total_amount: Decimal    # euros, NUMERIC(12,2) as stored
    created_at: datetime


@dataclass(frozen=True)
class MovementAmount:
    type: MovementType
    amount: Decimal          # euros, always >= 0; sign comes from type


@dataclass(frozen=True)
class BalanceInfo:
    """Derived balance of one coffre. Never persisted."""

    balance_cents: int
    last_inventory_date: datetime | None = None
    last_inventory_amount_cents: int = 0

    @property
    def balance(self) -> Decimal:
        return from_minor_units(self.balance_cents)

    @property
    def last_inventory_amount(self) -> Decimal:
        return from_minor_units(self.last_inventory_amount_cents)
