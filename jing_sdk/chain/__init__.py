"""Stacks chain access: codecs, transaction building and the Hiro client.

Example:
    ```python
    from jing_sdk.chain import HiroChainClient, NetworkType, uint_cv, cv_to_json

    async with HiroChainClient() as chain:
        result = await chain.call_read_only(
            "SP2BE8TZATXEVPGZ8HAFZYE5GKZ02X0YDKAN7ZTGW",
            "stx-ft-swap-v1",
            "get-swap",
            [uint_cv(1)],
            NetworkType.MAINNET,
            sender_address,
        )
        print(cv_to_json(result))
    ```
"""

from .c32 import (
    ADDRESS_VERSION_MAINNET_MULTI_SIG,
    ADDRESS_VERSION_MAINNET_SINGLE_SIG,
    ADDRESS_VERSION_TESTNET_MULTI_SIG,
    ADDRESS_VERSION_TESTNET_SINGLE_SIG,
    c32_address,
    c32_address_decode,
    c32_decode,
    c32_encode,
    c32check_decode,
    c32check_encode,
    is_valid_address,
)

from .clarity import (
    ClarityType,
    ClarityValue,
    bool_cv,
    buffer_cv,
    contract_principal_cv,
    cv_to_json,
    deserialize_cv,
    err_cv,
    false_cv,
    get_cv_type_string,
    int_cv,
    list_cv,
    none_cv,
    ok_cv,
    optional_cv,
    principal_cv,
    serialize_cv,
    some_cv,
    standard_principal_cv,
    string_ascii_cv,
    string_utf8_cv,
    true_cv,
    tuple_cv,
    uint_cv,
)

from .postconditions import (
    AssetInfo,
    FungibleConditionCode,
    FungiblePostCondition,
    PostCondition,
    PostConditionMode,
    PostConditionPrincipal,
    STXPostCondition,
    make_contract_fungible_post_condition,
    make_contract_stx_post_condition,
    make_standard_fungible_post_condition,
    make_standard_stx_post_condition,
)

from .transactions import (
    AnchorMode,
    ContractCallOptions,
    StacksTransaction,
    make_contract_call,
    make_unsigned_contract_call,
    sign_transaction,
)

from .network import (
    STACKS_MAINNET,
    STACKS_TESTNET,
    NetworkType,
    StacksNetwork,
    get_api_url,
    get_network,
    get_network_by_principal,
    validate_network,
)

from .interfaces import Account, AccountDeriver, BroadcastResult, ChainReader, ChainWriter

from .client import HiroChainClient, log_broadcast_result

from .reads import decode_swap, get_swap, get_token_decimals

__all__ = [
    # c32
    "ADDRESS_VERSION_MAINNET_SINGLE_SIG",
    "ADDRESS_VERSION_MAINNET_MULTI_SIG",
    "ADDRESS_VERSION_TESTNET_SINGLE_SIG",
    "ADDRESS_VERSION_TESTNET_MULTI_SIG",
    "c32_encode",
    "c32_decode",
    "c32check_encode",
    "c32check_decode",
    "c32_address",
    "c32_address_decode",
    "is_valid_address",
    # Clarity
    "ClarityType",
    "ClarityValue",
    "int_cv",
    "uint_cv",
    "buffer_cv",
    "bool_cv",
    "true_cv",
    "false_cv",
    "standard_principal_cv",
    "contract_principal_cv",
    "principal_cv",
    "none_cv",
    "some_cv",
    "optional_cv",
    "ok_cv",
    "err_cv",
    "list_cv",
    "tuple_cv",
    "string_ascii_cv",
    "string_utf8_cv",
    "serialize_cv",
    "deserialize_cv",
    "get_cv_type_string",
    "cv_to_json",
    # Post-conditions
    "PostConditionMode",
    "FungibleConditionCode",
    "PostConditionPrincipal",
    "AssetInfo",
    "STXPostCondition",
    "FungiblePostCondition",
    "PostCondition",
    "make_standard_stx_post_condition",
    "make_contract_stx_post_condition",
    "make_standard_fungible_post_condition",
    "make_contract_fungible_post_condition",
    # Transactions
    "AnchorMode",
    "ContractCallOptions",
    "StacksTransaction",
    "make_unsigned_contract_call",
    "sign_transaction",
    "make_contract_call",
    # Network
    "NetworkType",
    "StacksNetwork",
    "STACKS_MAINNET",
    "STACKS_TESTNET",
    "validate_network",
    "get_network",
    "get_api_url",
    "get_network_by_principal",
    # Interfaces
    "Account",
    "BroadcastResult",
    "ChainReader",
    "ChainWriter",
    "AccountDeriver",
    # Hiro client
    "HiroChainClient",
    "log_broadcast_result",
    # Reads
    "get_token_decimals",
    "get_swap",
    "decode_swap",
]
