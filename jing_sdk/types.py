"""Domain types for on-chain swap offers and lifecycle results."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from .registry import TokenInfo


class OfferSide(str, Enum):
    """Which contract family governs a swap id."""

    BID = "bid"  # STX offered for a fungible token
    ASK = "ask"  # fungible token offered for STX


@dataclass(frozen=True)
class SwapOffer:
    """On-chain state of a swap as returned by ``get-swap``."""

    side: OfferSide
    swap_id: int
    ustx: int
    amount: int
    stx_sender: Optional[str]
    ft_sender: Optional[str]
    ft_contract: str
    open: bool
    fees_contract: Optional[str] = None
    expired_height: Optional[int] = None

    @property
    def counterparty(self) -> Optional[str]:
        """Creator of the offer: stx-sender for a bid, ft-sender for an ask."""
        return self.stx_sender if self.side == OfferSide.BID else self.ft_sender


@dataclass(frozen=True)
class SwapDetails:
    """Formatted view of one swap with resolved token metadata."""

    swap: SwapOffer
    token: TokenInfo
    pair: str
    token_decimals: int
    stx_amount: Decimal
    token_amount: Decimal
    price: Decimal
    fees: int

    @property
    def swap_id(self) -> int:
        return self.swap.swap_id

    @property
    def side(self) -> OfferSide:
        return self.swap.side

    @property
    def symbol(self) -> str:
        return self.token.symbol

    def to_dict(self) -> Dict[str, Any]:
        return {
            "swap_id": self.swap.swap_id,
            "type": self.swap.side.value,
            "pair": self.pair,
            "symbol": self.token.symbol,
            "token_contract": self.token.contract_id,
            "token_decimals": self.token_decimals,
            "ustx": self.swap.ustx,
            "amount": self.swap.amount,
            "stx_amount": self.stx_amount,
            "token_amount": self.token_amount,
            "price": self.price,
            "fees": self.fees,
            "stx_sender": self.swap.stx_sender,
            "ft_sender": self.swap.ft_sender,
            "open": self.swap.open,
            "expired_height": self.swap.expired_height,
        }


@dataclass(frozen=True)
class OfferResult:
    """Result of a broadcast lifecycle operation."""

    txid: str
    details: Dict[str, Any] = field(default_factory=dict)
