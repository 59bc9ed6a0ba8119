"""Price utilities for order-book and display paths."""

from decimal import Decimal

from ..constants import STX_DECIMALS
from .scaling import from_micro_units


def unit_price(ustx: int, amount: int) -> Decimal:
    """Micro-STX per token micro-unit, the order-book sort key.

    A zero amount sorts as an infinitely expensive offer.
    """
    if not amount:
        return Decimal("Infinity")
    return Decimal(ustx) / Decimal(amount)


def display_price(ustx: int, amount: int, token_decimals: int) -> Decimal:
    """STX per whole token."""
    tokens = from_micro_units(amount, token_decimals)
    if not tokens:
        return Decimal(0)
    return from_micro_units(ustx, STX_DECIMALS) / tokens


def format_price(value: Decimal, precision: int = 6) -> str:
    """Format a price with fixed precision."""
    return f"{value:.{precision}f}"
