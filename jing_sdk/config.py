"""SDK configuration."""

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from .chain.network import NetworkType, get_network_by_principal, validate_network
from .constants import JING_CONTRACTS, TOKEN_MAP
from .registry import ContractRef

DEFAULT_TIMEOUT_SECS = 30


@dataclass(frozen=True)
class JingContracts:
    """The four marketplace contracts."""

    bid: ContractRef
    ask: ContractRef
    yin: ContractRef
    yang: ContractRef

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, str]]) -> "JingContracts":
        def ref(key: str) -> ContractRef:
            return ContractRef(data[key]["address"], data[key]["name"])

        return cls(bid=ref("BID"), ask=ref("ASK"), yin=ref("YIN"), yang=ref("YANG"))

    @classmethod
    def default(cls) -> "JingContracts":
        return cls.from_dict(JING_CONTRACTS)


@dataclass
class JingSDKConfig:
    """Configuration captured once at SDK construction.

    Attributes:
        api_host: Base URL of the order-book REST API
        api_key: Key sent as bearer token and ``X-API-Key``
        default_address: Sender used for read-only calls outside mutations
        network: Stacks network the SDK trades on
        contracts: BID/ASK/YIN/YANG contract references
        token_map: Registry data, symbol -> ``address.name::asset``
        timeout: HTTP timeout in seconds
    """

    api_host: str
    api_key: str
    default_address: Optional[str] = None
    network: NetworkType = NetworkType.MAINNET
    contracts: JingContracts = field(default_factory=JingContracts.default)
    token_map: Dict[str, str] = field(default_factory=lambda: dict(TOKEN_MAP))
    timeout: int = DEFAULT_TIMEOUT_SECS

    def __post_init__(self) -> None:
        self.api_host = self.api_host.rstrip("/")
        self.network = validate_network(self.network)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "JingSDKConfig":
        """Load configuration from ``JING_*`` environment variables.

        Raises:
            KeyError: If JING_API_HOST or JING_API_KEY is missing
        """
        env = os.environ if environ is None else environ
        default_address = env.get("JING_DEFAULT_ADDRESS") or None
        network_name = env.get("JING_NETWORK")
        if network_name:
            network = validate_network(network_name)
        elif default_address:
            network = get_network_by_principal(default_address)
        else:
            network = NetworkType.MAINNET
        return cls(
            api_host=env["JING_API_HOST"],
            api_key=env["JING_API_KEY"],
            default_address=default_address,
            network=network,
            timeout=int(env.get("JING_TIMEOUT", DEFAULT_TIMEOUT_SECS)),
        )
