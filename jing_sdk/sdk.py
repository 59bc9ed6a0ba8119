"""JingCashSDK: order-book queries and the swap offer lifecycle."""

import asyncio
import logging
from typing import Any, Optional

from .accounts import MnemonicAccountDeriver
from .api.client import JingApiClient
from .api.types import (
    AnyListing,
    DisplayOrder,
    OrderBook,
    PrivateOffersResponse,
    StxAsk,
    UserOffersResponse,
)
from .chain.client import HiroChainClient, log_broadcast_result
from .chain.interfaces import Account, AccountDeriver, ChainReader, ChainWriter
from .chain.network import NetworkType, get_network
from .chain.reads import get_swap, get_token_decimals
from .chain.transactions import ContractCallOptions
from .config import JingSDKConfig
from .constants import (
    DEFAULT_PAGE_LIMIT,
    OFFER_STATUS_OPEN,
    OFFER_STATUS_PRIVATE,
    QUOTE_SYMBOL,
    STX_DECIMALS,
)
from .errors import (
    BroadcastError,
    NotOfferOwnerError,
    SwapNotFoundError,
    UnsupportedPairError,
    wrap_operation_error,
)
from .offers import (
    ContractCall,
    build_cancel_ask,
    build_cancel_bid,
    build_create_ask,
    build_create_bid,
    build_reprice,
    build_submit_ask,
    build_submit_bid,
    fees_for,
)
from .registry import Market, TokenInfo, TokenRegistry
from .shared.price import display_price
from .shared.scaling import Number, format_decimal, from_micro_units, to_micro_units
from .types import OfferResult, OfferSide, SwapDetails, SwapOffer

logger = logging.getLogger(__name__)


class JingCashSDK:
    """Client for the Jing swap marketplace.

    Reads go to the REST order book; offers are created, cancelled, filled
    and re-priced through contract calls signed with an account derived from
    the caller's mnemonic. Collaborators not passed in are created from the
    config and closed with the SDK.

    Example:
        ```python
        config = JingSDKConfig.from_env()
        async with JingCashSDK(config) as sdk:
            book = await sdk.get_order_book("PEPE-STX")
            result = await sdk.create_bid_offer(
                pair="PEPE-STX",
                stx_amount=10,
                token_amount=1000,
                gas_fee=1000,
                mnemonic=mnemonic,
            )
            print(result.txid)
        ```
    """

    def __init__(
        self,
        config: JingSDKConfig,
        api_client: Optional[JingApiClient] = None,
        chain_reader: Optional[ChainReader] = None,
        chain_writer: Optional[ChainWriter] = None,
        account_deriver: Optional[AccountDeriver] = None,
        registry: Optional[TokenRegistry] = None,
    ):
        self._config = config
        self._registry = registry if registry is not None else TokenRegistry(config.token_map)
        self._owned: list[Any] = []

        if api_client is None:
            api_client = JingApiClient(config.api_host, config.api_key, timeout=config.timeout)
            self._owned.append(api_client)
        self._api = api_client

        if chain_reader is None or chain_writer is None:
            hiro = HiroChainClient(timeout=config.timeout)
            self._owned.append(hiro)
            chain_reader = chain_reader or hiro
            chain_writer = chain_writer or hiro
        self._reader = chain_reader
        self._writer = chain_writer
        self._deriver = account_deriver or MnemonicAccountDeriver()

    @property
    def config(self) -> JingSDKConfig:
        return self._config

    @property
    def registry(self) -> TokenRegistry:
        return self._registry

    @property
    def network(self) -> NetworkType:
        return self._config.network

    async def __aenter__(self) -> "JingCashSDK":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP sessions of collaborators created by the SDK.

        Every owned client is closed even if another fails; the first
        failure is raised afterwards.
        """
        results = await asyncio.gather(
            *(client.close() for client in self._owned), return_exceptions=True
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

    # =========================================================================
    # Markets
    # =========================================================================

    def get_available_markets(self) -> list[Market]:
        """All supported markets, sorted by pair."""
        return self._registry.get_markets()

    def get_market(self, pair: str) -> Optional[Market]:
        for market in self._registry.get_markets():
            if market.pair == pair:
                return market
        return None

    def is_valid_pair(self, pair: str) -> bool:
        return self._registry.is_supported_pair(pair)

    def _require_token(self, pair: str) -> TokenInfo:
        token = self._registry.get_token_info(pair) if self._registry.is_supported_pair(pair) else None
        if token is None:
            raise UnsupportedPairError(pair)
        return token

    # =========================================================================
    # Order book
    # =========================================================================

    async def get_order_book(self, pair: str) -> OrderBook:
        """Open bids (best price first) and asks (cheapest first) of a pair.

        Raises:
            UnsupportedPairError: If the pair is not in the registry
        """
        token = self._require_token(pair)
        bids_response, asks_response = await asyncio.gather(
            self._api.get_stx_bids(pair, token.contract_id),
            self._api.get_stx_asks(pair, token.contract_id),
        )
        bids = [bid for bid in bids_response.results if bid.is_open]
        asks = [ask for ask in asks_response.results if ask.is_open]
        bids.sort(key=lambda bid: bid.unit_price, reverse=True)
        asks.sort(key=lambda ask: ask.unit_price)
        return OrderBook(bids=bids, asks=asks)

    def format_display_order(self, order: AnyListing) -> DisplayOrder:
        """Market label, display amount and display price of a listing."""
        symbol = self._registry.get_token_symbol(order.token_contract)
        token_amount = from_micro_units(order.amount, order.token_decimals)
        price = display_price(order.ustx, order.amount, order.token_decimals)
        return DisplayOrder(
            order=order,
            type="Ask" if isinstance(order, StxAsk) else "Bid",
            market=f"{symbol}/{QUOTE_SYMBOL}",
            display_amount=f"{format_decimal(token_amount)} {symbol}",
            display_price=f"{format_decimal(price)} {QUOTE_SYMBOL}/{symbol}",
        )

    async def get_pending_orders(
        self, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT
    ) -> list[DisplayOrder]:
        """Open and private swaps, newest first."""
        try:
            response = await self._api.get_pending_orders(page, limit)
            orders = [
                self.format_display_order(order)
                for order in response.results
                if order.status in (OFFER_STATUS_OPEN, OFFER_STATUS_PRIVATE)
            ]
            orders.sort(key=lambda order: order.processed_at, reverse=True)
            return orders
        except Exception as e:
            raise wrap_operation_error("fetch pending orders", e)

    async def get_private_offers(self, pair: str, user_address: str) -> PrivateOffersResponse:
        """Private offers addressed to ``user_address`` on a pair."""
        token = self._require_token(pair)
        return await self._api.get_private_offers(pair, user_address, token.contract_id)

    async def get_user_offers(self, pair: str, user_address: str) -> UserOffersResponse:
        """Offers created by ``user_address`` on a pair."""
        token = self._require_token(pair)
        return await self._api.get_user_offers(pair, user_address, token.contract_id)

    # =========================================================================
    # Chain helpers
    # =========================================================================

    def _derive(self, mnemonic: str, account_index: int) -> Account:
        return self._deriver.derive(self.network, mnemonic, account_index)

    async def _read_swap(self, side: OfferSide, swap_id: int, sender: str) -> SwapOffer:
        contract = self._config.contracts.bid if side == OfferSide.BID else self._config.contracts.ask
        return await get_swap(self._reader, contract, side, swap_id, self.network, sender)

    async def _broadcast(
        self, call: ContractCall, account: Account, nonce: int, gas_fee: int
    ) -> str:
        options = ContractCallOptions(
            contract_address=call.contract.address,
            contract_name=call.contract.name,
            function_name=call.function_name,
            function_args=call.function_args,
            sender_key=account.signing_key,
            network=get_network(self.network),
            nonce=nonce,
            fee=gas_fee,
            post_conditions=call.post_conditions,
            post_condition_mode=call.post_condition_mode,
        )
        transaction = await self._writer.make_contract_call(options)
        result = await self._writer.broadcast_transaction(transaction, self.network)
        log_broadcast_result(result, account.address)
        if not result.ok:
            raise BroadcastError(
                result.error or "no txid returned",
                reason=result.reason,
                reason_data=result.reason_data,
                txid=result.txid,
            )
        return result.txid

    @staticmethod
    def _check_owner(swap: SwapOffer, account: Account, action: str) -> None:
        if swap.counterparty != account.address:
            raise NotOfferOwnerError(action, swap.counterparty, account.address)

    # =========================================================================
    # Create
    # =========================================================================

    async def create_bid_offer(
        self,
        pair: str,
        stx_amount: Number,
        token_amount: Number,
        gas_fee: int,
        mnemonic: str,
        account_index: int = 0,
        recipient: Optional[str] = None,
        expiry: Optional[int] = None,
    ) -> OfferResult:
        """Offer ``stx_amount`` STX for ``token_amount`` tokens.

        Args:
            pair: Trading pair such as ``PEPE-STX``
            stx_amount: STX offered, in display units
            token_amount: Tokens wanted, in display units
            gas_fee: Transaction fee in micro-STX
            mnemonic: Mnemonic of the signing wallet
            account_index: Account of the wallet to sign with
            recipient: Only this principal may fill the offer
            expiry: Block height after which the offer expires

        Raises:
            OperationError: On any failure, wrapping the cause
        """
        try:
            token = self._require_token(pair)
            account = self._derive(mnemonic, account_index)
            nonce = await self._reader.get_next_nonce(account.address, self.network)
            decimals = await get_token_decimals(self._reader, token, self.network, account.address)

            ustx = to_micro_units(stx_amount, STX_DECIMALS)
            amount = to_micro_units(token_amount, decimals)
            call = build_create_bid(
                self._config.contracts, token, account.address, ustx, amount, recipient, expiry
            )
            txid = await self._broadcast(call, account, nonce, gas_fee)
            return OfferResult(
                txid=txid,
                details={
                    "pair": pair,
                    "stx_amount": stx_amount,
                    "token_amount": token_amount,
                    "ustx": ustx,
                    "amount": amount,
                    "token_decimals": decimals,
                    "fees": from_micro_units(call.fees, STX_DECIMALS),
                    "gas_fee": gas_fee,
                    "address": account.address,
                    "recipient": recipient,
                    "expiry": expiry,
                },
            )
        except Exception as e:
            raise wrap_operation_error("create bid offer", e)

    async def create_ask_offer(
        self,
        pair: str,
        token_amount: Number,
        stx_amount: Number,
        gas_fee: int,
        mnemonic: str,
        account_index: int = 0,
        recipient: Optional[str] = None,
        expiry: Optional[int] = None,
    ) -> OfferResult:
        """Offer ``token_amount`` tokens for ``stx_amount`` STX.

        Raises:
            OperationError: On any failure, wrapping the cause
        """
        try:
            token = self._require_token(pair)
            account = self._derive(mnemonic, account_index)
            nonce = await self._reader.get_next_nonce(account.address, self.network)
            decimals = await get_token_decimals(self._reader, token, self.network, account.address)

            amount = to_micro_units(token_amount, decimals)
            ustx = to_micro_units(stx_amount, STX_DECIMALS)
            call = build_create_ask(
                self._config.contracts, token, account.address, amount, ustx, recipient, expiry
            )
            txid = await self._broadcast(call, account, nonce, gas_fee)
            return OfferResult(
                txid=txid,
                details={
                    "pair": pair,
                    "token_amount": token_amount,
                    "stx_amount": stx_amount,
                    "amount": amount,
                    "ustx": ustx,
                    "token_decimals": decimals,
                    "fees": from_micro_units(call.fees, decimals),
                    "gas_fee": gas_fee,
                    "address": account.address,
                    "recipient": recipient,
                    "expiry": expiry,
                },
            )
        except Exception as e:
            raise wrap_operation_error("create ask offer", e)

    # =========================================================================
    # Cancel, submit, re-price
    # =========================================================================

    async def _existing_swap_call(
        self,
        side: OfferSide,
        swap_id: int,
        mnemonic: str,
        account_index: int,
        owner_action: Optional[str],
    ):
        """Derive, fetch nonce, read the swap, check ownership, resolve the token."""
        account = self._derive(mnemonic, account_index)
        nonce = await self._reader.get_next_nonce(account.address, self.network)
        swap = await self._read_swap(side, swap_id, account.address)
        if owner_action is not None:
            self._check_owner(swap, account, owner_action)
        token = self._registry.get_token_info_from_contract(swap.ft_contract)
        decimals = await get_token_decimals(self._reader, token, self.network, account.address)
        return account, nonce, swap, token, decimals

    def _swap_details(self, swap: SwapOffer, token: TokenInfo, decimals: int) -> dict:
        return {
            "swap_id": swap.swap_id,
            "pair": token.pair,
            "ustx": swap.ustx,
            "amount": swap.amount,
            "stx_amount": from_micro_units(swap.ustx, STX_DECIMALS),
            "token_amount": from_micro_units(swap.amount, decimals),
            "token_decimals": decimals,
            "fees": fees_for(swap),
        }

    async def cancel_bid(
        self, swap_id: int, gas_fee: int, mnemonic: str, account_index: int = 0
    ) -> OfferResult:
        """Cancel an open bid. Only its creator may cancel it.

        Raises:
            OperationError: On any failure, wrapping the cause
        """
        try:
            account, nonce, swap, token, decimals = await self._existing_swap_call(
                OfferSide.BID, swap_id, mnemonic, account_index, "cancel"
            )
            call = build_cancel_bid(self._config.contracts, token, swap)
            txid = await self._broadcast(call, account, nonce, gas_fee)
            details = self._swap_details(swap, token, decimals)
            details.update({"gas_fee": gas_fee, "address": account.address})
            return OfferResult(txid=txid, details=details)
        except Exception as e:
            raise wrap_operation_error("cancel bid", e)

    async def cancel_ask(
        self, swap_id: int, gas_fee: int, mnemonic: str, account_index: int = 0
    ) -> OfferResult:
        """Cancel an open ask. Only its creator may cancel it."""
        try:
            account, nonce, swap, token, decimals = await self._existing_swap_call(
                OfferSide.ASK, swap_id, mnemonic, account_index, "cancel"
            )
            call = build_cancel_ask(self._config.contracts, token, swap)
            txid = await self._broadcast(call, account, nonce, gas_fee)
            details = self._swap_details(swap, token, decimals)
            details.update({"gas_fee": gas_fee, "address": account.address})
            return OfferResult(txid=txid, details=details)
        except Exception as e:
            raise wrap_operation_error("cancel ask", e)

    async def submit_bid(
        self, swap_id: int, gas_fee: int, mnemonic: str, account_index: int = 0
    ) -> OfferResult:
        """Fill an open bid by selling it the requested tokens."""
        try:
            account, nonce, swap, token, decimals = await self._existing_swap_call(
                OfferSide.BID, swap_id, mnemonic, account_index, None
            )
            call = build_submit_bid(self._config.contracts, token, swap, account.address)
            txid = await self._broadcast(call, account, nonce, gas_fee)
            details = self._swap_details(swap, token, decimals)
            details.update({"gas_fee": gas_fee, "address": account.address})
            return OfferResult(txid=txid, details=details)
        except Exception as e:
            raise wrap_operation_error("submit bid", e)

    async def submit_ask(
        self, swap_id: int, gas_fee: int, mnemonic: str, account_index: int = 0
    ) -> OfferResult:
        """Fill an open ask by paying its STX price."""
        try:
            account, nonce, swap, token, decimals = await self._existing_swap_call(
                OfferSide.ASK, swap_id, mnemonic, account_index, None
            )
            call = build_submit_ask(self._config.contracts, token, swap, account.address)
            txid = await self._broadcast(call, account, nonce, gas_fee)
            details = self._swap_details(swap, token, decimals)
            details.update({"gas_fee": gas_fee, "address": account.address})
            return OfferResult(txid=txid, details=details)
        except Exception as e:
            raise wrap_operation_error("submit ask", e)

    async def reprice_bid(
        self,
        swap_id: int,
        new_token_amount: Number,
        gas_fee: int,
        mnemonic: str,
        account_index: int = 0,
        recipient: Optional[str] = None,
    ) -> OfferResult:
        """Change the token amount an open bid asks for. Creator only."""
        try:
            account, nonce, swap, token, decimals = await self._existing_swap_call(
                OfferSide.BID, swap_id, mnemonic, account_index, "reprice"
            )
            new_amount = to_micro_units(new_token_amount, decimals)
            call = build_reprice(self._config.contracts, token, swap, new_amount, recipient)
            txid = await self._broadcast(call, account, nonce, gas_fee)
            details = self._swap_details(swap, token, decimals)
            details.update(
                {
                    "new_token_amount": new_token_amount,
                    "new_amount": new_amount,
                    "recipient": recipient,
                    "gas_fee": gas_fee,
                    "address": account.address,
                }
            )
            return OfferResult(txid=txid, details=details)
        except Exception as e:
            raise wrap_operation_error("reprice bid", e)

    async def reprice_ask(
        self,
        swap_id: int,
        new_stx_amount: Number,
        gas_fee: int,
        mnemonic: str,
        account_index: int = 0,
        recipient: Optional[str] = None,
    ) -> OfferResult:
        """Change the STX price of an open ask. Creator only."""
        try:
            account, nonce, swap, token, decimals = await self._existing_swap_call(
                OfferSide.ASK, swap_id, mnemonic, account_index, "reprice"
            )
            new_ustx = to_micro_units(new_stx_amount, STX_DECIMALS)
            call = build_reprice(self._config.contracts, token, swap, new_ustx, recipient)
            txid = await self._broadcast(call, account, nonce, gas_fee)
            details = self._swap_details(swap, token, decimals)
            details.update(
                {
                    "new_stx_amount": new_stx_amount,
                    "new_ustx": new_ustx,
                    "recipient": recipient,
                    "gas_fee": gas_fee,
                    "address": account.address,
                }
            )
            return OfferResult(txid=txid, details=details)
        except Exception as e:
            raise wrap_operation_error("reprice ask", e)

    # =========================================================================
    # Swap details
    # =========================================================================

    async def _get_swap_details(
        self, side: OfferSide, swap_id: int, sender_address: Optional[str]
    ) -> Optional[SwapDetails]:
        contract = self._config.contracts.bid if side == OfferSide.BID else self._config.contracts.ask
        sender = sender_address or self._config.default_address or contract.address
        try:
            swap = await self._read_swap(side, swap_id, sender)
        except SwapNotFoundError:
            logger.info(f"No {side.value} found for swap {swap_id}")
            return None

        token = self._registry.get_token_info_from_contract(swap.ft_contract)
        decimals = await get_token_decimals(self._reader, token, self.network, sender)
        return SwapDetails(
            swap=swap,
            token=token,
            pair=token.pair,
            token_decimals=decimals,
            stx_amount=from_micro_units(swap.ustx, STX_DECIMALS),
            token_amount=from_micro_units(swap.amount, decimals),
            price=display_price(swap.ustx, swap.amount, decimals),
            fees=fees_for(swap),
        )

    async def get_bid(
        self, swap_id: int, sender_address: Optional[str] = None
    ) -> Optional[SwapDetails]:
        """Details of a bid, or None when the contract has no such swap.

        Raises:
            OperationError: On transport or decode failure
        """
        try:
            return await self._get_swap_details(OfferSide.BID, swap_id, sender_address)
        except Exception as e:
            raise wrap_operation_error("get bid details", e)

    async def get_ask(
        self, swap_id: int, sender_address: Optional[str] = None
    ) -> Optional[SwapDetails]:
        """Details of an ask, or None when the contract has no such swap."""
        try:
            return await self._get_swap_details(OfferSide.ASK, swap_id, sender_address)
        except Exception as e:
            raise wrap_operation_error("get ask details", e)
