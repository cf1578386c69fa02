"""Pydantic schemas for the ledger write-side API."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field

from src.cf_common.enums import MovementType
from src.cf_common.money import cents_to_display, from_minor_units, to_minor_units
from src.cf_ledger.domain.billets import MAX_QUANTITY
from src.cf_ledger.domain.models import CountLine, Inventory, Movement

# Denomination in euros ("50", "0.5") → quantity; "10" strings are coerced to 10
Billets = dict[str, Annotated[int, Field(ge=0, le=MAX_QUANTITY)]]

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateMovementRequest(BaseModel):
    type: MovementType
    billets: Billets = Field(..., min_length=1)
    description: str | None = Field(None, max_length=500)


class UpdateMovementRequest(BaseModel):
    type: MovementType | None = None
    billets: Billets | None = Field(None, min_length=1)
    description: str | None = Field(None, max_length=500)


class CreateInventoryRequest(BaseModel):
    billets: Billets
    notes: str | None = Field(None, max_length=500)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class CountLineItem(BaseModel):
    denomination: Decimal
    denomination_cents: int
    quantity: int
    subtotal_cents: int

    @classmethod
    def from_line(cls, line: CountLine) -> "CountLineItem":
        return cls(
            denomination=from_minor_units(line.denomination_cents),
            denomination_cents=line.denomination_cents,
            quantity=line.quantity,
            subtotal_cents=line.subtotal_cents,
        )


class MovementItem(BaseModel):
    id: str                          # BIGINT as string, JS-safe
    coffre_id: str
    user_id: str
    type: MovementType
    amount: Decimal
    amount_cents: int
    amount_display: str
    description: str | None
    created_at: datetime | None
    deleted_at: datetime | None
    details: list[CountLineItem]

    @classmethod
    def from_domain(cls, m: Movement) -> "MovementItem":
        cents = to_minor_units(m.amount)
        return cls(
            id=str(m.id),
            coffre_id=m.coffre_id,
            user_id=m.user_id,
            type=m.type,
            amount=from_minor_units(cents),
            amount_cents=cents,
            amount_display=cents_to_display(cents),
            description=m.description,
            created_at=m.created_at,
            deleted_at=m.deleted_at,
            details=[CountLineItem.from_line(d) for d in m.details],
        )


class InventoryItem(BaseModel):
    id: str
    coffre_id: str
    user_id: str
    total_amount: Decimal
    total_amount_cents: int
    total_amount_display: str
    notes: str | None
    created_at: datetime | None
    details: list[CountLineItem]

    @classmethod
    def from_domain(cls, inv: Inventory) -> "InventoryItem":
        cents = to_minor_units(inv.total_amount)
        return cls(
            id=str(inv.id),
            coffre_id=inv.coffre_id,
            user_id=inv.user_id,
            total_amount=from_minor_units(cents),
            total_amount_cents=cents,
            total_amount_display=cents_to_display(cents),
            notes=inv.notes,
            created_at=inv.created_at,
            details=[CountLineItem.from_line(d) for d in inv.details],
        )


class MovementListResponse(BaseModel):
    items: list[MovementItem]
    next_cursor: str | None
    has_more: bool


class InventoryListResponse(BaseModel):
    items: list[InventoryItem]
    next_cursor: str | None
    has_more: bool
