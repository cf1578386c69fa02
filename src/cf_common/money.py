"""Integer minor-unit (cents) arithmetic for vault amounts.

Storage keeps NUMERIC(12,2) euros; every computation converts to int cents first
and only goes back to Decimal at the very end. Never float.
"""

from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")

# NUMERIC(12,2) columns hold at most 9 999 999 999.99
MAX_AMOUNT_CENTS = 999_999_999_999


def to_minor_units(amount: Decimal | int | float | str) -> int:
    """Convert a decimal amount to integer cents, rounding half-up.

    Floats go through ``str`` first so 50.005 becomes Decimal("50.005") and not
    its binary expansion: to_minor_units(50.005) -> 5001.
    """
    if isinstance(amount, float):
        amount = str(amount)
    quantized = Decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)
    return int(quantized * 100)


def from_minor_units(cents: int) -> Decimal:
    """Convert integer cents back to an exact 2-place Decimal: 117025 -> Decimal('1170.25')."""
    if cents == 0:
        # Decimal("-0.00") must never leak out
        return Decimal("0.00")
    return (Decimal(cents) / 100).quantize(_CENT)


def cents_to_display(cents: int) -> str:
    """Convert cents to a French-style display string: 117025 -> '1 170,25 €'."""
    sign = "-" if cents < 0 else ""
    abs_cents = -cents if cents < 0 else cents
    units = f"{abs_cents // 100:,}".replace(",", " ")
    return f"{sign}{units},{abs_cents % 100:02d} €"
