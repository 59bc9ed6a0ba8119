"""Tests for post-conditions and contract-call transactions."""

import pytest
from eth_keys import keys

from jing_sdk.chain.clarity import contract_principal_cv, uint_cv
from jing_sdk.chain.network import STACKS_MAINNET, STACKS_TESTNET
from jing_sdk.chain.postconditions import (
    AssetInfo,
    FungibleConditionCode,
    PostConditionMode,
    PostConditionPrincipal,
    make_contract_fungible_post_condition,
    make_contract_stx_post_condition,
    make_standard_stx_post_condition,
    serialize_post_conditions,
)
from jing_sdk.chain.transactions import (
    AuthType,
    ContractCallOptions,
    make_contract_call,
    make_unsigned_contract_call,
    parse_private_key,
    presign_sighash,
    public_key_bytes,
)
from jing_sdk.chain.utils import hash160
from jing_sdk.constants import JING_DEPLOYER

from conftest import PEPE_ADDRESS, PEPE_ASSET, PEPE_CONTRACT, STRANGER

DEPLOYER_HASH = "96e46bead75dbb43e88a9fff38b09fc02e83cd9a"
PRIVATE_KEY = "11" * 32 + "01"


@pytest.fixture
def options():
    return ContractCallOptions(
        contract_address=JING_DEPLOYER,
        contract_name="stx-ft-swap-v1",
        function_name="cancel",
        function_args=[uint_cv(3), contract_principal_cv(PEPE_ADDRESS, PEPE_CONTRACT)],
        sender_key=PRIVATE_KEY,
        network=STACKS_MAINNET,
        nonce=7,
        fee=1000,
        post_conditions=[make_standard_stx_post_condition(STRANGER, FungibleConditionCode.EQUAL, 5)],
    )


class TestPostConditions:
    def test_standard_stx(self):
        pc = make_standard_stx_post_condition(STRANGER, FungibleConditionCode.LESS_EQUAL, 10_075_188)
        expected = "00" + "02" + "16" + "00" * 20 + "05" + (10_075_188).to_bytes(8, "big").hex()
        assert pc.serialize().hex() == expected

    def test_contract_stx(self):
        pc = make_contract_stx_post_condition(JING_DEPLOYER, "yin", FungibleConditionCode.EQUAL, 1)
        expected = "00" + "03" + "16" + DEPLOYER_HASH + "03" + b"yin".hex() + "01" + "00" * 7 + "01"
        assert pc.serialize().hex() == expected

    def test_contract_fungible(self):
        asset = AssetInfo(PEPE_ADDRESS, PEPE_CONTRACT, PEPE_ASSET)
        pc = make_contract_fungible_post_condition(
            JING_DEPLOYER, "yang", FungibleConditionCode.LESS_EQUAL, 250, asset
        )
        data = pc.serialize()
        assert data[0] == 0x01
        assert data[1] == 0x03
        assert data.endswith(bytes([0x05]) + (250).to_bytes(8, "big"))
        assert bytes([len(PEPE_ASSET)]) + PEPE_ASSET.encode() in data
        assert str(asset) == f"{PEPE_ADDRESS}.{PEPE_CONTRACT}::{PEPE_ASSET}"

    def test_list_prefix(self):
        assert serialize_post_conditions([]) == b"\x00\x00\x00\x00"

    def test_principal_parse(self):
        principal = PostConditionPrincipal.parse(f"{JING_DEPLOYER}.yin")
        assert principal.is_contract
        assert str(principal) == f"{JING_DEPLOYER}.yin"
        assert not PostConditionPrincipal.parse(STRANGER).is_contract


class TestKeys:
    def test_compressed_key(self):
        key, compressed = parse_private_key(PRIVATE_KEY)
        assert compressed
        assert len(public_key_bytes(PRIVATE_KEY)) == 33

    def test_uncompressed_key(self):
        _, compressed = parse_private_key("11" * 32)
        assert not compressed
        assert len(public_key_bytes("11" * 32)) == 65

    def test_bad_keys(self):
        with pytest.raises(ValueError):
            parse_private_key("11" * 32 + "02")
        with pytest.raises(ValueError):
            parse_private_key("1234")


class TestContractCall:
    def test_unsigned_layout(self, options):
        tx = make_unsigned_contract_call(options)
        data = tx.serialize()

        assert data[0] == STACKS_MAINNET.transaction_version
        assert data[1:5] == STACKS_MAINNET.chain_id.to_bytes(4, "big")
        assert data[5] == AuthType.STANDARD
        assert data[6] == 0x00  # P2PKH
        assert data[7:27] == hash160(public_key_bytes(PRIVATE_KEY))
        assert data[27:35] == (7).to_bytes(8, "big")
        assert data[35:43] == (1000).to_bytes(8, "big")
        assert data[43] == 0x00  # compressed key
        assert data[44:109] == bytes(65)
        assert data[109] == 0x03  # anchor mode any
        assert data[110] == PostConditionMode.DENY

    def test_testnet_version(self, options):
        options.network = STACKS_TESTNET
        tx = make_unsigned_contract_call(options)
        assert tx.serialize()[0] == 0x80

    def test_signature_recovers_signer(self, options):
        unsigned = make_unsigned_contract_call(options)
        signed = make_contract_call(options)

        signature = signed.spending_condition.signature
        assert len(signature) == 65
        message_hash = presign_sighash(unsigned.initial_sighash(), AuthType.STANDARD, 1000, 7)
        recovered = keys.Signature(
            vrs=(signature[0], int.from_bytes(signature[1:33], "big"), int.from_bytes(signature[33:], "big"))
        ).recover_public_key_from_msg_hash(message_hash)
        assert recovered.to_compressed_bytes() == public_key_bytes(PRIVATE_KEY)

    def test_signing_keeps_sighash(self, options):
        unsigned = make_unsigned_contract_call(options)
        signed = make_contract_call(options)
        assert signed.initial_sighash() == unsigned.initial_sighash()

    def test_txid_is_deterministic(self, options):
        first = make_contract_call(options)
        second = make_contract_call(options)
        assert first.txid() == second.txid()
        assert len(first.txid()) == 64

    def test_allow_mode(self, options):
        options.post_conditions = []
        options.post_condition_mode = PostConditionMode.ALLOW
        data = make_unsigned_contract_call(options).serialize()
        assert data[110] == PostConditionMode.ALLOW
        assert data[111:115] == b"\x00\x00\x00\x00"

    def test_payload_tail(self, options):
        data = make_contract_call(options).serialize()
        assert b"\x0estx-ft-swap-v1" in data
        assert b"\x06cancel" in data
        assert data.endswith(
            b"\x00\x00\x00\x02"
            + bytes.fromhex("01" + "00" * 15 + "03")
            + bytes.fromhex("0616")
            + bytes.fromhex("7e9152cdbbb9fef066df4e1b88b19bcb313acc90")
            + bytes([len(PEPE_CONTRACT)])
            + PEPE_CONTRACT.encode()
        )
