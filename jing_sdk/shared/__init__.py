"""Unit, fee and price utilities shared by the REST and chain paths."""

from .fees import calculate_ask_fees, calculate_bid_fees
from .price import display_price, format_price, unit_price
from .scaling import (
    ScalingError,
    format_amount,
    format_decimal,
    from_micro_units,
    to_micro_units,
)

__all__ = [
    "ScalingError",
    "to_micro_units",
    "from_micro_units",
    "format_amount",
    "format_decimal",
    "calculate_bid_fees",
    "calculate_ask_fees",
    "unit_price",
    "display_price",
    "format_price",
]
