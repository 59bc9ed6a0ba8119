"""Contract calls for each offer lifecycle transition.

Every builder is pure: it turns resolved amounts, addresses and token
metadata into the function arguments and post-conditions of one contract
call. Nothing here touches the network.

Post-condition bounds per transition:

    create bid    sender STX <= ustx + fee
    create ask    sender FT  <= amount + fee
    cancel bid    BID STX == ustx, YIN STX <= fee
    cancel ask    ASK FT  == amount, YANG FT <= fee
    submit bid    filler FT == amount, BID STX == ustx, YIN STX <= fee
    submit ask    filler STX == ustx, ASK FT == amount, YANG FT <= fee
    re-price      none, ALLOW mode
"""

from dataclasses import dataclass, field
from typing import Optional

from .chain.clarity import (
    ClarityValue,
    contract_principal_cv,
    optional_cv,
    principal_cv,
    uint_cv,
)
from .chain.postconditions import (
    AssetInfo,
    FungibleConditionCode,
    PostCondition,
    PostConditionMode,
    make_contract_fungible_post_condition,
    make_contract_stx_post_condition,
    make_standard_fungible_post_condition,
    make_standard_stx_post_condition,
)
from .config import JingContracts
from .constants import FN_CANCEL, FN_OFFER, FN_RE_PRICE, FN_SUBMIT_SWAP
from .registry import ContractRef, TokenInfo
from .shared.fees import calculate_ask_fees, calculate_bid_fees
from .types import OfferSide, SwapOffer


@dataclass(frozen=True)
class ContractCall:
    """A contract call ready to be signed."""

    contract: ContractRef
    function_name: str
    function_args: list[ClarityValue]
    post_conditions: list[PostCondition] = field(default_factory=list)
    post_condition_mode: PostConditionMode = PostConditionMode.DENY
    fees: int = 0


def token_asset(token: TokenInfo) -> AssetInfo:
    """Asset identity of a registry token, bound to its ``asset_name``."""
    return AssetInfo(token.contract_address, token.contract_name, token.asset_name)


def _ft_cv(token: TokenInfo) -> ClarityValue:
    return contract_principal_cv(token.contract_address, token.contract_name)


def _fees_cv(contract: ContractRef) -> ClarityValue:
    return contract_principal_cv(contract.address, contract.name)


def _recipient_cv(recipient: Optional[str]) -> ClarityValue:
    return optional_cv(principal_cv(recipient) if recipient else None)


def _expiry_cv(expiry: Optional[int]) -> ClarityValue:
    return optional_cv(uint_cv(expiry) if expiry is not None else None)


def fees_for(swap: SwapOffer) -> int:
    """Fee of an existing swap: bid fees on ustx, ask fees on the token amount."""
    if swap.side == OfferSide.BID:
        return calculate_bid_fees(swap.ustx)
    return calculate_ask_fees(swap.amount)


# =============================================================================
# Create
# =============================================================================


def build_create_bid(
    contracts: JingContracts,
    token: TokenInfo,
    sender: str,
    ustx: int,
    amount: int,
    recipient: Optional[str] = None,
    expiry: Optional[int] = None,
) -> ContractCall:
    fees = calculate_bid_fees(ustx)
    return ContractCall(
        contract=contracts.bid,
        function_name=FN_OFFER,
        function_args=[
            uint_cv(ustx),
            uint_cv(amount),
            _recipient_cv(recipient),
            _expiry_cv(expiry),
            _ft_cv(token),
            _fees_cv(contracts.yin),
        ],
        post_conditions=[
            make_standard_stx_post_condition(sender, FungibleConditionCode.LESS_EQUAL, ustx + fees),
        ],
        fees=fees,
    )


def build_create_ask(
    contracts: JingContracts,
    token: TokenInfo,
    sender: str,
    amount: int,
    ustx: int,
    recipient: Optional[str] = None,
    expiry: Optional[int] = None,
) -> ContractCall:
    fees = calculate_ask_fees(amount)
    return ContractCall(
        contract=contracts.ask,
        function_name=FN_OFFER,
        function_args=[
            uint_cv(amount),
            uint_cv(ustx),
            _recipient_cv(recipient),
            _expiry_cv(expiry),
            _ft_cv(token),
            _fees_cv(contracts.yang),
        ],
        post_conditions=[
            make_standard_fungible_post_condition(
                sender, FungibleConditionCode.LESS_EQUAL, amount + fees, token_asset(token)
            ),
        ],
        fees=fees,
    )


# =============================================================================
# Cancel
# =============================================================================


def build_cancel_bid(contracts: JingContracts, token: TokenInfo, swap: SwapOffer) -> ContractCall:
    fees = calculate_bid_fees(swap.ustx)
    return ContractCall(
        contract=contracts.bid,
        function_name=FN_CANCEL,
        function_args=[uint_cv(swap.swap_id), _ft_cv(token), _fees_cv(contracts.yin)],
        post_conditions=[
            make_contract_stx_post_condition(
                contracts.bid.address, contracts.bid.name, FungibleConditionCode.EQUAL, swap.ustx
            ),
            make_contract_stx_post_condition(
                contracts.yin.address, contracts.yin.name, FungibleConditionCode.LESS_EQUAL, fees
            ),
        ],
        fees=fees,
    )


def build_cancel_ask(contracts: JingContracts, token: TokenInfo, swap: SwapOffer) -> ContractCall:
    fees = calculate_ask_fees(swap.amount)
    asset = token_asset(token)
    return ContractCall(
        contract=contracts.ask,
        function_name=FN_CANCEL,
        function_args=[uint_cv(swap.swap_id), _ft_cv(token), _fees_cv(contracts.yang)],
        post_conditions=[
            make_contract_fungible_post_condition(
                contracts.ask.address,
                contracts.ask.name,
                FungibleConditionCode.EQUAL,
                swap.amount,
                asset,
            ),
            # fee refund leaves YANG in the token's own asset, named by asset_name
            make_contract_fungible_post_condition(
                contracts.yang.address,
                contracts.yang.name,
                FungibleConditionCode.LESS_EQUAL,
                fees,
                asset,
            ),
        ],
        fees=fees,
    )


# =============================================================================
# Submit (fill)
# =============================================================================


def build_submit_bid(
    contracts: JingContracts, token: TokenInfo, swap: SwapOffer, filler: str
) -> ContractCall:
    fees = calculate_bid_fees(swap.ustx)
    return ContractCall(
        contract=contracts.bid,
        function_name=FN_SUBMIT_SWAP,
        function_args=[uint_cv(swap.swap_id), _ft_cv(token), _fees_cv(contracts.yin)],
        post_conditions=[
            make_standard_fungible_post_condition(
                filler, FungibleConditionCode.EQUAL, swap.amount, token_asset(token)
            ),
            make_contract_stx_post_condition(
                contracts.bid.address, contracts.bid.name, FungibleConditionCode.EQUAL, swap.ustx
            ),
            make_contract_stx_post_condition(
                contracts.yin.address, contracts.yin.name, FungibleConditionCode.LESS_EQUAL, fees
            ),
        ],
        fees=fees,
    )


def build_submit_ask(
    contracts: JingContracts, token: TokenInfo, swap: SwapOffer, filler: str
) -> ContractCall:
    fees = calculate_ask_fees(swap.amount)
    asset = token_asset(token)
    return ContractCall(
        contract=contracts.ask,
        function_name=FN_SUBMIT_SWAP,
        function_args=[uint_cv(swap.swap_id), _ft_cv(token), _fees_cv(contracts.yang)],
        post_conditions=[
            make_standard_stx_post_condition(filler, FungibleConditionCode.EQUAL, swap.ustx),
            make_contract_fungible_post_condition(
                contracts.ask.address,
                contracts.ask.name,
                FungibleConditionCode.EQUAL,
                swap.amount,
                asset,
            ),
            make_contract_fungible_post_condition(
                contracts.yang.address,
                contracts.yang.name,
                FungibleConditionCode.LESS_EQUAL,
                fees,
                asset,
            ),
        ],
        fees=fees,
    )


# =============================================================================
# Re-price
# =============================================================================


def build_reprice(
    contracts: JingContracts,
    token: TokenInfo,
    swap: SwapOffer,
    new_amount: int,
    recipient: Optional[str] = None,
) -> ContractCall:
    """Re-price a bid (new token amount) or an ask (new ustx).

    Carries no post-conditions and runs in ALLOW mode: the swap contract's
    own checks bound what moves on re-price.
    """
    if swap.side == OfferSide.BID:
        contract, fees_contract = contracts.bid, contracts.yin
    else:
        contract, fees_contract = contracts.ask, contracts.yang
    return ContractCall(
        contract=contract,
        function_name=FN_RE_PRICE,
        function_args=[
            uint_cv(swap.swap_id),
            _ft_cv(token),
            _fees_cv(fees_contract),
            uint_cv(new_amount),
            _recipient_cv(recipient),
        ],
        post_conditions=[],
        post_condition_mode=PostConditionMode.ALLOW,
        fees=fees_for(swap),
    )
