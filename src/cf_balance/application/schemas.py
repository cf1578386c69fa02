"""Pydantic schemas for the balance API."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from src.cf_balance.domain.models import BalanceInfo
from src.cf_common.money import cents_to_display


class BalanceResponse(BaseModel):
    coffre_id: str
    balance: Decimal
    balance_cents: int
    balance_display: str
    last_inventory_date: datetime | None
    last_inventory_amount: Decimal
    last_inventory_amount_cents: int
    last_inventory_amount_display: str

    @classmethod
    def from_info(cls, coffre_id: str, info: BalanceInfo) -> "BalanceResponse":
        return cls(
            coffre_id=coffre_id,
            balance=info.balance,
            balance_cents=info.balance_cents,
            balance_display=cents_to_display(info.balance_cents),
            last_inventory_date=info.last_inventory_date,
            last_inventory_amount=info.last_inventory_amount,
            last_inventory_amount_cents=info.last_inventory_amount_cents,
            last_inventory_amount_display=cents_to_display(info.last_inventory_amount_cents),
        )
