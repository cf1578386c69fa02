"""Domain models for cf_ledger — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from src.cf_common.enums import MovementType


@dataclass(frozen=True)
class CountLine:
    denomination_cents: int
    quantity: int

    @property
    def subtotal_cents(self) -> int:
        return self.denomination_cents * self.quantity


@dataclass(frozen=True)
class CashCount:
    """A banknote/coin count, lines sorted by denomination descending."""

    lines: tuple[CountLine, ...]

    @property
    def total_cents(self) -> int:
        return sum(line.subtotal_cents for line in self.lines)


@dataclass
class Movement:
    id: int
    coffre_id: str
    user_id: str
    type: MovementType
    amount: Decimal                  # euros, >= 0
    description: str | None = None
    created_at: datetime | None = None
    deleted_at: datetime | None = None
    details: list[CountLine] = field(default_factory=list)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass
class Inventory:
    id: int
    coffre_id: str
    user_id: str
    total_amount: Decimal            # euros, counted cash
    notes: str | None = None
    created_at: datetime | None = None
    details: list[CountLine] = field(default_factory=list)
