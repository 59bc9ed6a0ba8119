"""Marketplace fee schedule.

Fees are charged in micro-units and always rounded up.
"""

from ..constants import ASK_FEE_DIVISOR, BID_FEE_BASE_DIVISOR, BID_FEE_TIERS


def _ceil_div(numerator: int, divisor: int) -> int:
    return -(-numerator // divisor)


def _check_micro_amount(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer micro amount, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


def calculate_bid_fees(ustx: int) -> int:
    """Fee on a bid, tiered on its micro-STX amount.

    - ustx > 10,000,000,000: ceil(ustx / 450)
    - ustx > 5,000,000,000: ceil(ustx / 200)
    - otherwise: ceil(ustx / 133)
    """
    ustx = _check_micro_amount(ustx, "ustx")
    for threshold, divisor in BID_FEE_TIERS:
        if ustx > threshold:
            return _ceil_div(ustx, divisor)
    return _ceil_div(ustx, BID_FEE_BASE_DIVISOR)


def calculate_ask_fees(amount: int) -> int:
    """Flat fee on an ask: ceil(amount / 400) token micro-units."""
    amount = _check_micro_amount(amount, "amount")
    return _ceil_div(amount, ASK_FEE_DIVISOR)
