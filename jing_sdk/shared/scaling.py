"""Conversion between display amounts and micro-unit integers."""

from decimal import ROUND_FLOOR, Decimal, InvalidOperation
from typing import Union

from ..errors import ValidationError

Number = Union[int, float, str, Decimal]


class ScalingError(ValidationError):
    """Error during unit scaling."""

    pass


def _to_decimal(amount: Number) -> Decimal:
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError) as e:
        raise ScalingError(f"Invalid decimal input: {amount!r} ({e})")
    if not value.is_finite():
        raise ScalingError(f"Amount must be finite, got {amount!r}")
    return value


def _check_decimals(decimals: int) -> None:
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise ScalingError(f"Decimals must be a non-negative integer, got {decimals!r}")


def to_micro_units(amount: Number, decimals: int) -> int:
    """floor(amount * 10^decimals).

    Floats are read through their shortest repr, so ``0.29`` scales to
    ``29`` at two decimals rather than ``28``.

    Raises:
        ScalingError: If the amount is not a finite number or decimals is invalid
    """
    _check_decimals(decimals)
    value = _to_decimal(amount).scaleb(decimals)
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def from_micro_units(micro_amount: int, decimals: int) -> Decimal:
    """micro_amount / 10^decimals, exact."""
    _check_decimals(decimals)
    return Decimal(int(micro_amount)).scaleb(-decimals)


def format_decimal(value: Decimal) -> str:
    """Plain-notation string without trailing zeros (``1000``, ``0.00005``)."""
    if value == 0:
        return "0"
    return format(value.normalize(), "f")


def format_amount(amount: int, decimals: int, symbol: str) -> str:
    """Render a micro amount as ``"<display> SYM (<micro> μSYM)"``."""
    regular = format_decimal(from_micro_units(amount, decimals))
    return f"{regular} {symbol} ({amount} μ{symbol})"
