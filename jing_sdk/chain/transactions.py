"""Construction, serialization and signing of Stacks contract-call transactions.

Only single-signature (P2PKH) standard-authorization transactions with a
contract-call payload are supported, which is all the swap contracts need.

Wire layout:
    version (1) | chain_id (4) | auth_type (1) | spending condition |
    anchor_mode (1) | post_condition_mode (1) | post_conditions | payload

Spending condition (single-sig):
    hash_mode (1) | signer hash160 (20) | nonce (8) | fee (8) |
    key_encoding (1) | signature (65, recovery id || r || s)
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import List, Sequence

from eth_keys import keys

from .c32 import c32_address_decode
from .clarity import ClarityValue, serialize_cv
from .network import StacksNetwork
from .postconditions import PostCondition, PostConditionMode, serialize_post_conditions
from .utils import encode_lp_string, encode_u32, encode_u64, encode_u8, hash160, sha512_256

RECOVERABLE_SIGNATURE_SIZE = 65
COMPRESSED_KEY_SUFFIX = "01"


class AnchorMode(IntEnum):
    ON_CHAIN_ONLY = 0x01
    OFF_CHAIN_ONLY = 0x02
    ANY = 0x03


class AuthType(IntEnum):
    STANDARD = 0x04
    SPONSORED = 0x05


class AddressHashMode(IntEnum):
    SERIALIZE_P2PKH = 0x00


class PubKeyEncoding(IntEnum):
    COMPRESSED = 0x00
    UNCOMPRESSED = 0x01


class PayloadType(IntEnum):
    TOKEN_TRANSFER = 0x00
    SMART_CONTRACT = 0x01
    CONTRACT_CALL = 0x02


@dataclass(frozen=True)
class ContractCallPayload:
    contract_address: str
    contract_name: str
    function_name: str
    function_args: Sequence[ClarityValue] = ()

    def serialize(self) -> bytes:
        version, hash_bytes = c32_address_decode(self.contract_address)
        out = encode_u8(PayloadType.CONTRACT_CALL) + encode_u8(version) + hash_bytes
        out += encode_lp_string(self.contract_name) + encode_lp_string(self.function_name)
        out += encode_u32(len(self.function_args))
        out += b"".join(serialize_cv(arg) for arg in self.function_args)
        return out


@dataclass(frozen=True)
class SingleSigSpendingCondition:
    signer: bytes
    nonce: int
    fee: int
    key_encoding: PubKeyEncoding = PubKeyEncoding.COMPRESSED
    signature: bytes = bytes(RECOVERABLE_SIGNATURE_SIZE)
    hash_mode: AddressHashMode = AddressHashMode.SERIALIZE_P2PKH

    def cleared(self) -> "SingleSigSpendingCondition":
        """Copy with nonce, fee and signature zeroed, as hashed for the initial sighash."""
        return replace(self, nonce=0, fee=0, signature=bytes(RECOVERABLE_SIGNATURE_SIZE))

    def serialize(self) -> bytes:
        return (
            encode_u8(self.hash_mode)
            + self.signer
            + encode_u64(self.nonce)
            + encode_u64(self.fee)
            + encode_u8(self.key_encoding)
            + self.signature
        )


@dataclass(frozen=True)
class StacksTransaction:
    version: int
    chain_id: int
    spending_condition: SingleSigSpendingCondition
    payload: ContractCallPayload
    post_conditions: Sequence[PostCondition] = field(default_factory=list)
    post_condition_mode: PostConditionMode = PostConditionMode.DENY
    anchor_mode: AnchorMode = AnchorMode.ANY
    auth_type: AuthType = AuthType.STANDARD

    def serialize(self) -> bytes:
        return (
            encode_u8(self.version)
            + encode_u32(self.chain_id)
            + encode_u8(self.auth_type)
            + self.spending_condition.serialize()
            + encode_u8(self.anchor_mode)
            + encode_u8(self.post_condition_mode)
            + serialize_post_conditions(self.post_conditions)
            + self.payload.serialize()
        )

    def txid(self) -> str:
        """Transaction id: SHA-512/256 of the serialized transaction, hex."""
        return sha512_256(self.serialize()).hex()

    def initial_sighash(self) -> bytes:
        cleared = replace(self, spending_condition=self.spending_condition.cleared())
        return sha512_256(cleared.serialize())


@dataclass
class ContractCallOptions:
    """Everything needed to build and sign a contract call."""

    contract_address: str
    contract_name: str
    function_name: str
    function_args: List[ClarityValue]
    sender_key: str
    network: StacksNetwork
    nonce: int
    fee: int
    post_conditions: List[PostCondition] = field(default_factory=list)
    post_condition_mode: PostConditionMode = PostConditionMode.DENY
    anchor_mode: AnchorMode = AnchorMode.ANY


def parse_private_key(private_key: str):
    """Split a hex private key into (eth_keys PrivateKey, compressed flag)."""
    key_hex = private_key[2:] if private_key.startswith("0x") else private_key
    compressed = False
    if len(key_hex) == 66:
        if not key_hex.endswith(COMPRESSED_KEY_SUFFIX):
            raise ValueError("66-char private key must end with the 01 compression flag")
        key_hex = key_hex[:64]
        compressed = True
    if len(key_hex) != 64:
        raise ValueError(f"Private key must be 64 or 66 hex chars, got {len(key_hex)}")
    return keys.PrivateKey(bytes.fromhex(key_hex)), compressed


def public_key_bytes(private_key: str) -> bytes:
    """SEC1 public key for a private key, honouring its compression flag."""
    key, compressed = parse_private_key(private_key)
    if compressed:
        return key.public_key.to_compressed_bytes()
    return b"\x04" + key.public_key.to_bytes()


def presign_sighash(sighash: bytes, auth_type: AuthType, fee: int, nonce: int) -> bytes:
    return sha512_256(sighash + encode_u8(auth_type) + encode_u64(fee) + encode_u64(nonce))


def sign_message_hash(private_key: str, message_hash: bytes) -> bytes:
    """Recoverable secp256k1 signature in Stacks ``v || r || s`` layout."""
    key, _ = parse_private_key(private_key)
    signature = key.sign_msg_hash(message_hash)
    return (
        bytes([signature.v])
        + signature.r.to_bytes(32, "big")
        + signature.s.to_bytes(32, "big")
    )


def make_unsigned_contract_call(options: ContractCallOptions) -> StacksTransaction:
    _, compressed = parse_private_key(options.sender_key)
    condition = SingleSigSpendingCondition(
        signer=hash160(public_key_bytes(options.sender_key)),
        nonce=options.nonce,
        fee=options.fee,
        key_encoding=PubKeyEncoding.COMPRESSED if compressed else PubKeyEncoding.UNCOMPRESSED,
    )
    payload = ContractCallPayload(
        contract_address=options.contract_address,
        contract_name=options.contract_name,
        function_name=options.function_name,
        function_args=tuple(options.function_args),
    )
    return StacksTransaction(
        version=options.network.transaction_version,
        chain_id=options.network.chain_id,
        spending_condition=condition,
        payload=payload,
        post_conditions=tuple(options.post_conditions),
        post_condition_mode=options.post_condition_mode,
        anchor_mode=options.anchor_mode,
    )


def sign_transaction(transaction: StacksTransaction, private_key: str) -> StacksTransaction:
    """Sign the origin spending condition of a transaction."""
    condition = transaction.spending_condition
    message_hash = presign_sighash(
        transaction.initial_sighash(), transaction.auth_type, condition.fee, condition.nonce
    )
    signature = sign_message_hash(private_key, message_hash)
    return replace(transaction, spending_condition=replace(condition, signature=signature))


def make_contract_call(options: ContractCallOptions) -> StacksTransaction:
    """Build and sign a contract-call transaction."""
    return sign_transaction(make_unsigned_contract_call(options), options.sender_key)
