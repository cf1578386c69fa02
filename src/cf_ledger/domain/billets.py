"""Euro banknote/coin counts ("billets") → CashCount.

Clients send ``{"50": 3, "0.5": 4}`` (denomination in euros → quantity).
Everything is converted to cents on the way in, so the total is exact.
"""

from collections.abc import Mapping
from decimal import Decimal, DecimalException

from src.cf_common.errors import CountTooLargeError, InvalidDenominationError
from src.cf_common.money import MAX_AMOUNT_CENTS
from src.cf_ledger.domain.models import CashCount, CountLine

DENOMINATIONS_CENTS: tuple[int, ...] = (
    50000, 20000, 10000, 5000, 2000, 1000, 500,   # banknotes
    200, 100, 50, 20, 10, 5, 2, 1,                # coins
)
_KNOWN = frozenset(DENOMINATIONS_CENTS)

# detail rows store quantity as INTEGER
MAX_QUANTITY = 2**31 - 1


def parse_denomination(key: str) -> int:
    """'50' -> 5000, '0.05' -> 5. Raises InvalidDenominationError otherwise."""
    try:
        cents = Decimal(key.strip()) * 100
    except DecimalException:
        # malformed text, or an exponent large enough to overflow the context
        raise InvalidDenominationError(key) from None
    if not cents.is_finite() or cents != cents.to_integral_value():
        raise InvalidDenominationError(key)
    if int(cents) not in _KNOWN:
        raise InvalidDenominationError(key)
    return int(cents)


def count_billets(billets: Mapping[str, int]) -> CashCount:
    """Build a CashCount. Zero quantities are dropped; the same denomination
    written twice ("5" and "5.00") is merged.

    Raises CountTooLargeError when a line quantity does not fit an INTEGER or
    the total does not fit a NUMERIC(12,2) amount.
    """
    quantities: dict[int, int] = {}
    for key, quantity in billets.items():
        denomination = parse_denomination(key)
        if quantity < 0:
            raise ValueError(f"Quantity must be >= 0 for {key}, got {quantity}")
        merged = quantities.get(denomination, 0) + quantity
        if merged > MAX_QUANTITY:
            raise CountTooLargeError(f"quantity {merged} for {key} exceeds {MAX_QUANTITY}")
        quantities[denomination] = merged

    lines = tuple(
        CountLine(denomination_cents=d, quantity=quantities[d])
        for d in DENOMINATIONS_CENTS
        if quantities.get(d, 0) > 0
    )
    count = CashCount(lines=lines)
    if count.total_cents > MAX_AMOUNT_CENTS:
        raise CountTooLargeError(
            f"total {count.total_cents} cents exceeds {MAX_AMOUNT_CENTS}"
        )
    return count
