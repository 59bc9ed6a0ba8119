"""Stacks network parameters."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .c32 import (
    ADDRESS_VERSION_MAINNET_SINGLE_SIG,
    ADDRESS_VERSION_TESTNET_SINGLE_SIG,
    is_valid_address,
)

logger = logging.getLogger(__name__)

MAINNET_API_URL = "https://api.hiro.so"
TESTNET_API_URL = "https://api.testnet.hiro.so"


class NetworkType(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"
    DEVNET = "devnet"
    MOCKNET = "mocknet"


class TransactionVersion:
    MAINNET = 0x00
    TESTNET = 0x80


class ChainID:
    MAINNET = 0x00000001
    TESTNET = 0x80000000


@dataclass(frozen=True)
class StacksNetwork:
    """Connection and encoding parameters of one Stacks network."""

    name: NetworkType
    api_url: str
    transaction_version: int
    chain_id: int
    address_version: int

    @property
    def is_mainnet(self) -> bool:
        return self.transaction_version == TransactionVersion.MAINNET


STACKS_MAINNET = StacksNetwork(
    name=NetworkType.MAINNET,
    api_url=MAINNET_API_URL,
    transaction_version=TransactionVersion.MAINNET,
    chain_id=ChainID.MAINNET,
    address_version=ADDRESS_VERSION_MAINNET_SINGLE_SIG,
)

STACKS_TESTNET = StacksNetwork(
    name=NetworkType.TESTNET,
    api_url=TESTNET_API_URL,
    transaction_version=TransactionVersion.TESTNET,
    chain_id=ChainID.TESTNET,
    address_version=ADDRESS_VERSION_TESTNET_SINGLE_SIG,
)


def validate_network(network: Optional[str] = None) -> NetworkType:
    """Parse a network name, falling back to testnet for unknown values."""
    if isinstance(network, NetworkType):
        return network
    if network:
        try:
            return NetworkType(network.lower())
        except ValueError:
            pass
    return NetworkType.TESTNET


def get_network(network: Union[NetworkType, StacksNetwork, str]) -> StacksNetwork:
    """Network parameters for a network type. Devnet and mocknet use testnet."""
    if isinstance(network, StacksNetwork):
        return network
    if validate_network(network) == NetworkType.MAINNET:
        return STACKS_MAINNET
    return STACKS_TESTNET


def get_api_url(network: Union[NetworkType, StacksNetwork, str]) -> str:
    return get_network(network).api_url


def get_network_by_principal(principal: str) -> NetworkType:
    """Infer the network from an address prefix (SP/SM mainnet, ST/SN testnet)."""
    address = principal.split(".", 1)[0] if principal else ""
    if is_valid_address(address):
        prefix = address[:2]
        if prefix in ("SP", "SM"):
            return NetworkType.MAINNET
        if prefix in ("ST", "SN"):
            return NetworkType.TESTNET
    logger.warning(f"Invalid principal {principal!r}, using testnet")
    return NetworkType.TESTNET
