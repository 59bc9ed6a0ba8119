"""
Live integration tests against the Hiro Stacks API and the Jing order book.

Nothing here signs or broadcasts: only read-only calls are made.

To run:
    JING_LIVE_TESTS=1 pytest tests/test_testnet.py -v -s

Environment variables:
    JING_API_HOST: Order-book API base URL (order-book tests are skipped without it)
    JING_API_KEY: Order-book API key
    HIRO_API_KEY: Optional Hiro API key
"""

import os

import pytest

from jing_sdk import JingCashSDK, JingSDKConfig, TokenRegistry
from jing_sdk.chain import HiroChainClient, get_token_decimals
from jing_sdk.chain.network import NetworkType
from jing_sdk.types import SwapDetails

from conftest import TESTNET_ZERO

LIVE_PAIR = "PEPE-STX"


@pytest.fixture
def hiro_api_key():
    return os.environ.get("HIRO_API_KEY")


class TestHiro:
    @pytest.mark.asyncio
    async def test_testnet_nonce(self, hiro_api_key):
        async with HiroChainClient(api_key=hiro_api_key) as chain:
            nonce = await chain.get_next_nonce(TESTNET_ZERO, NetworkType.TESTNET)
        assert nonce >= 0

    @pytest.mark.asyncio
    async def test_mainnet_token_decimals(self, hiro_api_key):
        token = TokenRegistry.default().get_token_info(LIVE_PAIR)
        async with HiroChainClient(api_key=hiro_api_key) as chain:
            decimals = await get_token_decimals(
                chain, token, NetworkType.MAINNET, token.contract_address
            )
        print(f"{token.symbol} decimals: {decimals}")
        assert 0 <= decimals <= 18

    @pytest.mark.asyncio
    async def test_swap_details(self, hiro_api_key):
        config = JingSDKConfig(api_host="https://backend.jing.cash/api/v1", api_key="unused")
        async with HiroChainClient(api_key=hiro_api_key) as chain:
            sdk = JingCashSDK(config, chain_reader=chain, chain_writer=chain)
            try:
                details = await sdk.get_bid(1)
            finally:
                await sdk.close()
        assert details is None or isinstance(details, SwapDetails)


@pytest.mark.skipif("JING_API_HOST" not in os.environ, reason="JING_API_HOST not set")
class TestOrderBook:
    @pytest.mark.asyncio
    async def test_order_book_is_sorted(self):
        async with JingCashSDK(JingSDKConfig.from_env()) as sdk:
            book = await sdk.get_order_book(LIVE_PAIR)

        bid_prices = [bid.unit_price for bid in book.bids]
        ask_prices = [ask.unit_price for ask in book.asks]
        assert bid_prices == sorted(bid_prices, reverse=True)
        assert ask_prices == sorted(ask_prices)

    @pytest.mark.asyncio
    async def test_pending_orders(self):
        async with JingCashSDK(JingSDKConfig.from_env()) as sdk:
            orders = await sdk.get_pending_orders(limit=10)

        for order in orders:
            assert order.type in ("Bid", "Ask")
            assert order.market.endswith("/STX")
