"""Money helpers

Domain amounts are integer cents (KES minor units). Conversion to and from
display amounts happens only at the edges: DTOs, adapters and API schemas.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CENTS_PER_UNIT = 100
TWO_PLACES = Decimal("0.01")

Amount = Union[Decimal, int, float, str]


def to_cents(amount: Amount) -> int:
    """
    Convert a display amount to integer cents

    Floats go through their shortest repr so 0.1 becomes 10 cents, not 9.
    Sub-cent precision is rounded half up.
    """
    if isinstance(amount, float):
        amount = repr(amount)
    value = Decimal(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return int(value * CENTS_PER_UNIT)


def from_cents(cents: int) -> Decimal:
    """Convert integer cents to a two-decimal Decimal amount"""
    return (Decimal(cents) / CENTS_PER_UNIT).quantize(TWO_PLACES)


def format_kes(cents: int, currency: str = "KES") -> str:
    """Format cents for display, e.g. ``KES 1,500.00`` or ``KES -20.00``"""
    return f"{currency} {from_cents(cents):,.2f}"
