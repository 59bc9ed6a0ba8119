"""Token registry: trading pairs and contract identifiers to token metadata."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from .constants import PAIR_SEPARATOR, QUOTE_SYMBOL, TOKEN_MAP
from .errors import UnknownTokenContractError

UNKNOWN_SYMBOL = "Unknown"
UNKNOWN_TOKEN = "Unknown Token"
UNKNOWN_PAIR = f"UNKNOWN{PAIR_SEPARATOR}{QUOTE_SYMBOL}"


@dataclass(frozen=True)
class ContractRef:
    """A deployed contract ``address.name``."""

    address: str
    name: str

    @classmethod
    def parse(cls, identifier: str) -> "ContractRef":
        address, name = identifier.split("::", 1)[0].split(".", 1)
        return cls(address, name)

    @property
    def identifier(self) -> str:
        return f"{self.address}.{self.name}"

    def __str__(self) -> str:
        return self.identifier


@dataclass(frozen=True)
class TokenInfo:
    """Fungible token metadata.

    ``full_identifier`` is always ``contract_address.contract_name::asset_name``.
    """

    full_identifier: str
    contract_address: str
    contract_name: str
    asset_name: str
    symbol: str

    @classmethod
    def from_identifier(cls, full_identifier: str, symbol: str) -> "TokenInfo":
        contract_part, asset_name = full_identifier.split("::", 1)
        contract_address, contract_name = contract_part.split(".", 1)
        return cls(
            full_identifier=full_identifier,
            contract_address=contract_address,
            contract_name=contract_name,
            asset_name=asset_name,
            symbol=symbol,
        )

    @property
    def contract_id(self) -> str:
        """``address.name`` without the asset suffix."""
        return f"{self.contract_address}.{self.contract_name}"

    @property
    def pair(self) -> str:
        return make_pair(self.symbol)


@dataclass(frozen=True)
class Market:
    """A tradable ``SYMBOL-STX`` market."""

    pair: str
    base_symbol: str
    quote_symbol: str
    token: TokenInfo


def make_pair(symbol: str) -> str:
    return f"{symbol}{PAIR_SEPARATOR}{QUOTE_SYMBOL}"


def _base_contract(contract: str) -> Optional[str]:
    """Reduce ``addr.name`` or ``addr.name::asset`` to ``addr.name``."""
    if not contract or "." not in contract:
        return None
    return contract.split("::", 1)[0]


class TokenRegistry:
    """Read-only symbol <-> contract registry.

    Built once from a ``symbol -> "addr.name::asset"`` mapping and passed to
    everything that resolves tokens. STX is a sentinel, never an entry.
    """

    def __init__(self, token_map: Mapping[str, str]):
        entries: Dict[str, str] = {}
        inverse: Dict[str, str] = {}
        by_contract: Dict[str, str] = {}
        for symbol, full_identifier in token_map.items():
            if "::" not in full_identifier or "." not in full_identifier.split("::", 1)[0]:
                raise ValueError(
                    f"Registry entry for {symbol} must be 'address.name::asset', "
                    f"got {full_identifier!r}"
                )
            if full_identifier in inverse:
                raise ValueError(f"Duplicate registry entry: {full_identifier}")
            entries[symbol] = full_identifier
            inverse[full_identifier] = symbol
            by_contract[full_identifier.split("::", 1)[0]] = symbol
        self._token_map = MappingProxyType(entries)
        self._inverse = MappingProxyType(inverse)
        self._by_contract = MappingProxyType(by_contract)

    @classmethod
    def default(cls) -> "TokenRegistry":
        return cls(TOKEN_MAP)

    @property
    def token_map(self) -> Mapping[str, str]:
        return self._token_map

    @property
    def inverse(self) -> Mapping[str, str]:
        """full identifier -> symbol."""
        return self._inverse

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._token_map

    def __len__(self) -> int:
        return len(self._token_map)

    def get_token_info(self, pair: str) -> Optional[TokenInfo]:
        """Resolve ``SYMBOL-STX`` to token metadata, or None if unknown."""
        if not pair:
            return None
        symbol = pair.split(PAIR_SEPARATOR)[0]
        full_identifier = self._token_map.get(symbol)
        if full_identifier is None:
            return None
        return TokenInfo.from_identifier(full_identifier, symbol)

    def get_token_info_from_contract(self, contract: str) -> TokenInfo:
        """Resolve a raw contract identifier to its canonical registry entry.

        The asset name always comes from the registry entry, never from the
        caller's identifier.

        Raises:
            UnknownTokenContractError: If the contract is not registered
        """
        base = _base_contract(contract)
        symbol = self._by_contract.get(base) if base else None
        if symbol is None:
            raise UnknownTokenContractError(contract)
        return TokenInfo.from_identifier(self._token_map[symbol], symbol)

    def get_supported_pairs(self) -> List[str]:
        return [make_pair(symbol) for symbol in self._token_map]

    def is_supported_pair(self, pair: str) -> bool:
        return pair in self.get_supported_pairs()

    def get_token_symbol(self, contract: Optional[str]) -> str:
        """Symbol for a contract identifier; a sentinel when unknown."""
        if not contract:
            return UNKNOWN_SYMBOL
        base = _base_contract(contract)
        symbol = self._by_contract.get(base) if base else None
        return symbol if symbol is not None else UNKNOWN_TOKEN

    def get_market_pair(self, contract: Optional[str]) -> str:
        """``SYMBOL-STX`` for a contract identifier; ``UNKNOWN-STX`` when unknown."""
        base = _base_contract(contract) if contract else None
        symbol = self._by_contract.get(base) if base else None
        if symbol is None:
            return UNKNOWN_PAIR
        return make_pair(symbol)

    def get_markets(self) -> List[Market]:
        """All markets sorted by pair label."""
        markets = [
            Market(
                pair=make_pair(symbol),
                base_symbol=symbol,
                quote_symbol=QUOTE_SYMBOL,
                token=TokenInfo.from_identifier(full_identifier, symbol),
            )
            for symbol, full_identifier in self._token_map.items()
        ]
        return sorted(markets, key=lambda m: m.pair)
