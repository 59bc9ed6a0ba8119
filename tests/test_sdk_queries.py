"""Tests for the read side of JingCashSDK: markets, order book, pending swaps, details."""

from decimal import Decimal

import aiohttp
import pytest

from jing_sdk import JingCashSDK, OperationError, TokenRegistry
from jing_sdk.api.client import JingApiClient
from jing_sdk.api.types import StacksBid, StxAsk
from jing_sdk.chain.client import HiroChainClient
from jing_sdk.chain.network import NetworkType
from jing_sdk.constants import JING_DEPLOYER
from jing_sdk.errors import ErrorKind, UnsupportedPairError
from jing_sdk.types import OfferSide

from conftest import (
    CREATOR,
    PEPE_ADDRESS,
    PEPE_CONTRACT,
    FakeChain,
    make_sdk,
    listing,
    swap_cv,
)

PEPE_CONTRACT_ID = f"{PEPE_ADDRESS}.{PEPE_CONTRACT}"


class TestMarkets:
    def test_available_markets(self, sdk):
        markets = sdk.get_available_markets()
        assert [market.pair for market in markets] == ["PEPE-STX"]
        assert markets[0].quote_symbol == "STX"
        assert markets[0].token.contract_id == PEPE_CONTRACT_ID

    def test_get_market(self, sdk):
        assert sdk.get_market("PEPE-STX").base_symbol == "PEPE"
        assert sdk.get_market("WELSH-STX") is None

    def test_is_valid_pair(self, sdk):
        assert sdk.is_valid_pair("PEPE-STX")
        assert not sdk.is_valid_pair("STX-STX")
        assert not sdk.is_valid_pair("PEPE")

    @pytest.mark.asyncio
    async def test_owned_collaborators_close(self, config, registry):
        async with JingCashSDK(config, registry=registry) as sdk:
            assert sdk.network == NetworkType.MAINNET
            assert sdk.registry is registry

    def test_empty_registry_is_kept(self, config, chain, deriver):
        empty = TokenRegistry({})
        sdk = make_sdk(config, empty, chain, deriver)

        assert sdk.registry is empty
        assert len(sdk.registry) == 0
        assert sdk.get_available_markets() == []
        assert not sdk.is_valid_pair("PEPE-STX")

    @pytest.mark.asyncio
    async def test_close_reaches_every_owned_client(self, config, registry, monkeypatch):
        closed = []

        async def failing_close(self):
            closed.append("api")
            raise RuntimeError("api close failed")

        async def recording_close(self):
            closed.append("hiro")

        monkeypatch.setattr(JingApiClient, "close", failing_close)
        monkeypatch.setattr(HiroChainClient, "close", recording_close)

        sdk = JingCashSDK(config, registry=registry)
        with pytest.raises(RuntimeError, match="api close failed"):
            await sdk.close()
        assert sorted(closed) == ["api", "hiro"]


class TestOrderBook:
    @pytest.mark.asyncio
    async def test_sorted_and_filtered(self, sdk, api):
        api.bids = [
            listing(1, 10_000_000, 1_000),
            listing(2, 20_000_000, 1_000),
            listing(3, 30_000_000, 1_000, status="filled"),
            listing(4, 40_000_000, 1_000, open=False),
        ]
        api.asks = [
            listing(5, 3_000_000, 1_000, out_contract="STX"),
            listing(6, 1_000_000, 1_000, out_contract="STX"),
            listing(7, 2_000_000, 0, out_contract="STX"),
            listing(8, 1, 1_000, status="cancelled", out_contract="STX"),
        ]

        book = await sdk.get_order_book("PEPE-STX")

        assert [bid.id for bid in book.bids] == [2, 1]
        assert [ask.id for ask in book.asks] == [6, 5, 7]
        assert all(isinstance(bid, StacksBid) for bid in book.bids)
        assert all(isinstance(ask, StxAsk) for ask in book.asks)

    @pytest.mark.asyncio
    async def test_bids_by_price_per_token(self, sdk, api):
        api.bids = [
            listing(1, 50, 10),
            listing(2, 100, 10),
            listing(3, 1_000, 10, status="closed"),
        ]
        book = await sdk.get_order_book("PEPE-STX")
        assert [(bid.ustx, bid.amount) for bid in book.bids] == [(100, 10), (50, 10)]

    @pytest.mark.asyncio
    async def test_scoped_to_token_contract(self, sdk, api):
        await sdk.get_order_book("PEPE-STX")
        assert ("stx-bids", "PEPE-STX", PEPE_CONTRACT_ID) in api.calls
        assert ("stx-asks", "PEPE-STX", PEPE_CONTRACT_ID) in api.calls

    @pytest.mark.asyncio
    async def test_unsupported_pair(self, sdk, api):
        with pytest.raises(UnsupportedPairError) as exc:
            await sdk.get_order_book("FOO-STX")
        assert exc.value.kind == ErrorKind.VALIDATION
        assert api.calls == []


class TestDisplayOrder:
    def test_bid(self, sdk):
        order = sdk.format_display_order(StacksBid.from_dict(listing(1, 10_000_000, 1_000_000)))
        assert order.type == "Bid"
        assert order.market == "PEPE/STX"
        assert order.display_amount == "1000 PEPE"
        assert order.display_price == "0.01 STX/PEPE"

    def test_ask_uses_input_decimals(self, sdk):
        order = sdk.format_display_order(StxAsk.from_dict(listing(2, 5_000_000, 2_000, out_contract="STX")))
        assert order.type == "Ask"
        assert order.display_amount == "2 PEPE"
        assert order.display_price == "2.5 STX/PEPE"

    def test_to_dict_keeps_listing_fields(self, sdk):
        raw = listing(3, 1_000_000, 1_000, txId="0xfeed")
        data = sdk.format_display_order(StacksBid.from_dict(raw)).to_dict()
        assert data["txId"] == "0xfeed"
        assert data["displayAmount"] == "1 PEPE"
        assert data["market"] == "PEPE/STX"

    def test_unregistered_token(self, sdk):
        order = sdk.format_display_order(
            StacksBid.from_dict(listing(4, 1_000_000, 1_000, out_contract=f"{CREATOR}.other"))
        )
        assert order.market == "Unknown Token/STX"

    def test_zero_token_amount(self, sdk):
        order = sdk.format_display_order(StacksBid.from_dict(listing(5, 1_000_000, 0)))
        assert order.display_price == "0 STX/PEPE"


class TestPendingOrders:
    @pytest.mark.asyncio
    async def test_open_and_private_newest_first(self, sdk, api):
        api.pending = [
            listing(1, 1_000_000, 1_000, processedAt=10),
            listing(2, 1_000_000, 1_000, status="private", processedAt=30, out_contract="STX"),
            listing(3, 1_000_000, 1_000, status="filled", processedAt=50),
            listing(4, 1_000_000, 1_000),
        ]

        orders = await sdk.get_pending_orders(page=2, limit=20)

        assert [order.order.id for order in orders] == [2, 1, 4]
        assert [order.type for order in orders] == ["Ask", "Bid", "Bid"]
        assert api.calls == [("pending", 2, 20)]

    @pytest.mark.asyncio
    async def test_failure_is_wrapped(self, sdk, api):
        async def failing(page, limit):
            raise aiohttp.ClientConnectionError("unreachable")

        api.get_pending_orders = failing
        with pytest.raises(OperationError) as exc:
            await sdk.get_pending_orders()

        assert exc.value.kind == ErrorKind.TRANSPORT
        assert str(exc.value).startswith("Failed to fetch pending orders")
        assert isinstance(exc.value.__cause__, aiohttp.ClientConnectionError)


class TestUserScopedOffers:
    @pytest.mark.asyncio
    async def test_private_offers(self, sdk, api):
        api.private = {"privateBids": [listing(1, 1, 1)], "privateAsks": []}
        offers = await sdk.get_private_offers("PEPE-STX", CREATOR)

        assert offers.private_bids[0].id == 1
        assert api.calls == [("private-offers", "PEPE-STX", CREATOR, PEPE_CONTRACT_ID)]

    @pytest.mark.asyncio
    async def test_user_offers(self, sdk, api):
        api.user = {"userBids": [], "userAsks": [listing(2, 1, 1, out_contract="STX")]}
        offers = await sdk.get_user_offers("PEPE-STX", CREATOR)

        assert offers.user_asks[0].id == 2
        assert api.calls == [("user-offers", "PEPE-STX", CREATOR, PEPE_CONTRACT_ID)]

    @pytest.mark.asyncio
    async def test_unsupported_pair(self, sdk):
        with pytest.raises(UnsupportedPairError):
            await sdk.get_user_offers("FOO-STX", CREATOR)


class TestSwapDetails:
    @pytest.mark.asyncio
    async def test_get_bid(self, config, registry, deriver):
        chain = FakeChain(
            decimals=3,
            swaps={("stx-ft-swap-v1", 5): swap_cv(10_000_000, 1_000_000, stx_sender=CREATOR)},
        )
        details = await make_sdk(config, registry, chain, deriver).get_bid(5)

        assert details.side == OfferSide.BID
        assert details.pair == "PEPE-STX"
        assert details.stx_amount == Decimal(10)
        assert details.token_amount == Decimal(1000)
        assert details.price == Decimal("0.01")
        assert details.fees == 75188
        assert chain.read_calls[0]["sender"] == JING_DEPLOYER
        assert details.to_dict()["symbol"] == "PEPE"

    @pytest.mark.asyncio
    async def test_get_ask_with_sender(self, config, registry, deriver):
        chain = FakeChain(
            swaps={("ft-stx-swap-v1", 9): swap_cv(5_000_000, 4_000_000, ft_sender=CREATOR, fees_name="yang")}
        )
        details = await make_sdk(config, registry, chain, deriver).get_ask(9, sender_address=CREATOR)

        assert details.swap.counterparty == CREATOR
        assert details.fees == 10_000
        assert all(call["sender"] == CREATOR for call in chain.read_calls)

    @pytest.mark.asyncio
    async def test_missing_swap_is_none(self, config, registry, deriver):
        chain = FakeChain()
        assert await make_sdk(config, registry, chain, deriver).get_bid(404) is None
        assert chain.events == ["get-swap"]

    @pytest.mark.asyncio
    async def test_transport_failure_is_wrapped(self, config, registry, deriver):
        chain = FakeChain()
        chain.read_error = aiohttp.ClientConnectionError("down")

        with pytest.raises(OperationError) as exc:
            await make_sdk(config, registry, chain, deriver).get_ask(1)

        assert exc.value.kind == ErrorKind.TRANSPORT
        assert str(exc.value).startswith("Failed to get ask details")

    @pytest.mark.asyncio
    async def test_unregistered_token(self, config, deriver):
        chain = FakeChain(swaps={("stx-ft-swap-v1", 1): swap_cv(1, 1, stx_sender=CREATOR)})
        sdk = make_sdk(config, TokenRegistry({}), chain, deriver)

        with pytest.raises(OperationError) as exc:
            await sdk.get_bid(1)
        assert exc.value.kind == ErrorKind.VALIDATION
