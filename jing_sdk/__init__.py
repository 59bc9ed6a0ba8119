"""Jing SDK - Python SDK for the Jing peer-to-peer token/STX swap marketplace.

This SDK provides three main modules:
- `api`: REST order-book client
- `chain`: Stacks codecs, transaction building and the Hiro chain client
- `shared`: Unit scaling, fee and price utilities

Example:
    from jing_sdk import JingCashSDK, JingSDKConfig

    # Or import from specific modules
    from jing_sdk.chain import HiroChainClient
    from jing_sdk.shared import calculate_bid_fees
"""

__version__ = "0.1.0"

# ============================================================================
# MODULE IMPORTS
# ============================================================================

from . import api
from . import chain
from . import shared

# ============================================================================
# SDK AND CONFIGURATION
# ============================================================================

from .sdk import JingCashSDK
from .config import JingContracts, JingSDKConfig
from .registry import ContractRef, Market, TokenInfo, TokenRegistry
from .types import OfferResult, OfferSide, SwapDetails, SwapOffer
from .accounts import MnemonicAccountDeriver, derive_child_account

# ============================================================================
# CONVENIENCE RE-EXPORTS
# ============================================================================

from .chain import (
    Account,
    AccountDeriver,
    BroadcastResult,
    ChainReader,
    ChainWriter,
    HiroChainClient,
    NetworkType,
    get_network_by_principal,
    validate_network,
)

from .api import JingApiClient, OrderBook, StacksBid, StxAsk, DisplayOrder

from .shared import (
    calculate_ask_fees,
    calculate_bid_fees,
    format_amount,
    from_micro_units,
    to_micro_units,
)

from .errors import (
    ErrorKind,
    JingError,
    ValidationError,
    UnsupportedPairError,
    UnknownTokenContractError,
    InvalidAddressError,
    InvalidParameterError,
    TransportError,
    ReadOnlyCallError,
    DecodeError,
    ClarityDecodeError,
    SwapNotFoundError,
    TokenDecimalsError,
    AuthorizationError,
    NotOfferOwnerError,
    BroadcastError,
    OperationError,
)

__all__ = [
    # Version
    "__version__",
    # Modules
    "api",
    "chain",
    "shared",
    # SDK
    "JingCashSDK",
    "JingSDKConfig",
    "JingContracts",
    # Registry
    "ContractRef",
    "TokenInfo",
    "Market",
    "TokenRegistry",
    # Types
    "OfferSide",
    "SwapOffer",
    "SwapDetails",
    "OfferResult",
    # Accounts
    "MnemonicAccountDeriver",
    "derive_child_account",
    # Chain
    "Account",
    "AccountDeriver",
    "BroadcastResult",
    "ChainReader",
    "ChainWriter",
    "HiroChainClient",
    "NetworkType",
    "get_network_by_principal",
    "validate_network",
    # REST
    "JingApiClient",
    "OrderBook",
    "StacksBid",
    "StxAsk",
    "DisplayOrder",
    # Utilities
    "to_micro_units",
    "from_micro_units",
    "format_amount",
    "calculate_bid_fees",
    "calculate_ask_fees",
    # Errors
    "ErrorKind",
    "JingError",
    "ValidationError",
    "UnsupportedPairError",
    "UnknownTokenContractError",
    "InvalidAddressError",
    "InvalidParameterError",
    "TransportError",
    "ReadOnlyCallError",
    "DecodeError",
    "ClarityDecodeError",
    "SwapNotFoundError",
    "TokenDecimalsError",
    "AuthorizationError",
    "NotOfferOwnerError",
    "BroadcastError",
    "OperationError",
]
