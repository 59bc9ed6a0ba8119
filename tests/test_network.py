"""Tests for network selection."""

import pytest

from jing_sdk.chain.network import (
    MAINNET_API_URL,
    STACKS_MAINNET,
    STACKS_TESTNET,
    NetworkType,
    get_api_url,
    get_network,
    get_network_by_principal,
    validate_network,
)
from jing_sdk.constants import JING_DEPLOYER

from conftest import CREATOR, TESTNET_ZERO


class TestValidateNetwork:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("mainnet", NetworkType.MAINNET),
            ("MAINNET", NetworkType.MAINNET),
            ("devnet", NetworkType.DEVNET),
            ("nonsense", NetworkType.TESTNET),
            (None, NetworkType.TESTNET),
            ("", NetworkType.TESTNET),
        ],
    )
    def test_names(self, name, expected):
        assert validate_network(name) == expected

    def test_enum_passes_through(self):
        assert validate_network(NetworkType.MOCKNET) == NetworkType.MOCKNET


class TestGetNetwork:
    def test_mainnet(self):
        network = get_network(NetworkType.MAINNET)
        assert network is STACKS_MAINNET
        assert network.is_mainnet
        assert get_api_url("mainnet") == MAINNET_API_URL

    def test_local_networks_use_testnet_parameters(self):
        assert get_network(NetworkType.DEVNET) is STACKS_TESTNET
        assert get_network(NetworkType.MOCKNET) is STACKS_TESTNET
        assert not STACKS_TESTNET.is_mainnet

    def test_network_object_passes_through(self):
        assert get_network(STACKS_TESTNET) is STACKS_TESTNET


class TestNetworkByPrincipal:
    def test_prefixes(self):
        assert get_network_by_principal(CREATOR) == NetworkType.MAINNET
        assert get_network_by_principal(f"{JING_DEPLOYER}.yin") == NetworkType.MAINNET
        assert get_network_by_principal(TESTNET_ZERO) == NetworkType.TESTNET

    def test_invalid_principal_falls_back(self, caplog):
        with caplog.at_level("WARNING", logger="jing_sdk.chain.network"):
            assert get_network_by_principal("not-an-address") == NetworkType.TESTNET
        assert "using testnet" in caplog.text
