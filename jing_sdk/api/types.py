"""Order-book listing types for the Jing REST API.

A listing is decoded once into either a ``StacksBid`` (STX offered for a
token) or an ``StxAsk`` (token offered for STX). The discriminant is the
listing's ``out_contract``: it is an ask exactly when that equals ``"STX"``.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Optional, TypeVar, Union

from ..constants import STX_SENTINEL
from ..shared.price import unit_price
from .error import DeserializeError

T = TypeVar("T")


def _first(data: dict, *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _optional_int(value: Any) -> Optional[int]:
    return int(value) if value is not None else None


@dataclass
class Listing:
    """Fields shared by bids and asks."""

    id: int
    in_contract: str
    out_contract: str
    ustx: int
    amount: int
    open: bool
    status: str
    in_decimals: int = 0
    out_decimals: int = 0
    stx_sender: Optional[str] = None
    stx_sender_bns: Optional[str] = None
    ft_sender: Optional[str] = None
    ft_sender_bns: Optional[str] = None
    fees: Optional[str] = None
    when: Optional[int] = None
    tx_id: Optional[str] = None
    processed_at: Optional[int] = None
    expired_height: Optional[int] = None
    raw: dict = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: dict):
        try:
            return cls(
                id=int(data["id"]),
                in_contract=data["in_contract"],
                out_contract=data["out_contract"],
                ustx=int(data["ustx"]),
                amount=int(data["amount"]),
                open=bool(data["open"]),
                status=data["status"],
                in_decimals=int(data.get("in_decimals") or 0),
                out_decimals=int(data.get("out_decimals") or 0),
                stx_sender=_first(data, "stxSender", "stx_sender"),
                stx_sender_bns=_first(data, "stxSenderBns", "stx_sender_bns"),
                ft_sender=_first(data, "ftSender", "ft_sender"),
                ft_sender_bns=_first(data, "ftSenderBns", "ft_sender_bns"),
                fees=data.get("fees"),
                when=_optional_int(data.get("when")),
                tx_id=_first(data, "txId", "tx_id"),
                processed_at=_optional_int(_first(data, "processedAt", "processed_at")),
                expired_height=_optional_int(_first(data, "expiredHeight", "expired_height")),
                raw=dict(data),
            )
        except KeyError as e:
            raise DeserializeError(f"Missing required field in {cls.__name__}: {e}")
        except (TypeError, ValueError) as e:
            raise DeserializeError(f"Invalid field in {cls.__name__}: {e}")

    @property
    def unit_price(self) -> Decimal:
        """Micro-STX per token micro-unit."""
        return unit_price(self.ustx, self.amount)

    @property
    def is_open(self) -> bool:
        return self.status == "open" and self.open

    def to_dict(self) -> dict:
        """The listing as the API returned it."""
        return dict(self.raw)


@dataclass
class StacksBid(Listing):
    """STX offered for a token. ``out_contract`` is the token."""

    @property
    def token_contract(self) -> str:
        return self.out_contract

    @property
    def token_decimals(self) -> int:
        return self.out_decimals

    @property
    def counterparty(self) -> Optional[str]:
        return self.stx_sender


@dataclass
class StxAsk(Listing):
    """Token offered for STX. ``out_contract`` is the STX sentinel."""

    @property
    def token_contract(self) -> str:
        return self.in_contract

    @property
    def token_decimals(self) -> int:
        return self.in_decimals

    @property
    def counterparty(self) -> Optional[str]:
        return self.ft_sender


AnyListing = Union[StacksBid, StxAsk]


def decode_listing(data: dict) -> AnyListing:
    """Decode a listing of unknown side."""
    if not isinstance(data, dict):
        raise DeserializeError(f"Listing must be an object, got {type(data).__name__}")
    if data.get("out_contract") == STX_SENTINEL:
        return StxAsk.from_dict(data)
    return StacksBid.from_dict(data)


def _decode_list(data: dict, key: str, decoder: Callable[[dict], T]) -> list[T]:
    items = data.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise DeserializeError(f"Expected a list for {key}, got {type(items).__name__}")
    return [decoder(item) for item in items]


@dataclass
class ListingsResponse:
    """``{"results": [...]}`` plus any pagination metadata."""

    results: list = field(default_factory=list)
    metadata: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict, decoder: Callable[[dict], Any] = decode_listing) -> "ListingsResponse":
        if not isinstance(data, dict):
            raise DeserializeError("Listings response must be an object")
        return cls(
            results=_decode_list(data, "results", decoder),
            metadata={k: v for k, v in data.items() if k != "results"},
        )


@dataclass
class OrderBook:
    """Open bids (best first) and asks (cheapest first) of one pair."""

    bids: list[StacksBid] = field(default_factory=list)
    asks: list[StxAsk] = field(default_factory=list)


@dataclass
class PrivateOffersResponse:
    private_bids: list[StacksBid] = field(default_factory=list)
    private_asks: list[StxAsk] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "PrivateOffersResponse":
        if not isinstance(data, dict):
            raise DeserializeError("Private offers response must be an object")
        return cls(
            private_bids=_decode_list(data, "privateBids", StacksBid.from_dict),
            private_asks=_decode_list(data, "privateAsks", StxAsk.from_dict),
        )

    def to_dict(self) -> dict:
        return {
            "privateBids": [bid.to_dict() for bid in self.private_bids],
            "privateAsks": [ask.to_dict() for ask in self.private_asks],
        }


@dataclass
class UserOffersResponse:
    user_bids: list[StacksBid] = field(default_factory=list)
    user_asks: list[StxAsk] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "UserOffersResponse":
        if not isinstance(data, dict):
            raise DeserializeError("User offers response must be an object")
        return cls(
            user_bids=_decode_list(data, "userBids", StacksBid.from_dict),
            user_asks=_decode_list(data, "userAsks", StxAsk.from_dict),
        )

    def to_dict(self) -> dict:
        return {
            "userBids": [bid.to_dict() for bid in self.user_bids],
            "userAsks": [ask.to_dict() for ask in self.user_asks],
        }


@dataclass
class DisplayOrder:
    """A listing with its human-readable market, amount and price."""

    order: AnyListing
    type: str
    market: str
    display_amount: str
    display_price: str

    @property
    def processed_at(self) -> int:
        return self.order.processed_at or 0

    def to_dict(self) -> dict:
        data = self.order.to_dict()
        data.update(
            {
                "type": self.type,
                "market": self.market,
                "displayAmount": self.display_amount,
                "displayPrice": self.display_price,
            }
        )
        return data
