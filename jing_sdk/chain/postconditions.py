"""Post-conditions guarding asset transfers in a Stacks transaction."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Sequence, Union

from .c32 import c32_address_decode
from .utils import encode_lp_string, encode_u32, encode_u64, encode_u8


class PostConditionMode(IntEnum):
    """Whether transfers not covered by a post-condition are allowed."""

    ALLOW = 0x01
    DENY = 0x02


class PostConditionType(IntEnum):
    STX = 0x00
    FUNGIBLE = 0x01
    NON_FUNGIBLE = 0x02


class PostConditionPrincipalType(IntEnum):
    ORIGIN = 0x01
    STANDARD = 0x02
    CONTRACT = 0x03


class FungibleConditionCode(IntEnum):
    EQUAL = 0x01
    GREATER = 0x02
    GREATER_EQUAL = 0x03
    LESS = 0x04
    LESS_EQUAL = 0x05


@dataclass(frozen=True)
class PostConditionPrincipal:
    """Sender of the guarded transfer: a standard address or a contract."""

    address: str
    contract_name: Optional[str] = None

    @classmethod
    def parse(cls, principal: str) -> "PostConditionPrincipal":
        if "." in principal:
            address, contract_name = principal.split(".", 1)
            return cls(address, contract_name)
        return cls(principal)

    @property
    def is_contract(self) -> bool:
        return self.contract_name is not None

    def __str__(self) -> str:
        if self.contract_name:
            return f"{self.address}.{self.contract_name}"
        return self.address

    def serialize(self) -> bytes:
        version, hash_bytes = c32_address_decode(self.address)
        if self.contract_name is None:
            return encode_u8(PostConditionPrincipalType.STANDARD) + encode_u8(version) + hash_bytes
        return (
            encode_u8(PostConditionPrincipalType.CONTRACT)
            + encode_u8(version)
            + hash_bytes
            + encode_lp_string(self.contract_name)
        )


@dataclass(frozen=True)
class AssetInfo:
    """Fungible asset identity ``address.contract_name::asset_name``."""

    address: str
    contract_name: str
    asset_name: str

    def __str__(self) -> str:
        return f"{self.address}.{self.contract_name}::{self.asset_name}"

    def serialize(self) -> bytes:
        version, hash_bytes = c32_address_decode(self.address)
        return (
            encode_u8(version)
            + hash_bytes
            + encode_lp_string(self.contract_name)
            + encode_lp_string(self.asset_name)
        )


@dataclass(frozen=True)
class STXPostCondition:
    principal: PostConditionPrincipal
    condition_code: FungibleConditionCode
    amount: int

    def serialize(self) -> bytes:
        return (
            encode_u8(PostConditionType.STX)
            + self.principal.serialize()
            + encode_u8(self.condition_code)
            + encode_u64(self.amount)
        )


@dataclass(frozen=True)
class FungiblePostCondition:
    principal: PostConditionPrincipal
    condition_code: FungibleConditionCode
    amount: int
    asset: AssetInfo

    def serialize(self) -> bytes:
        return (
            encode_u8(PostConditionType.FUNGIBLE)
            + self.principal.serialize()
            + self.asset.serialize()
            + encode_u8(self.condition_code)
            + encode_u64(self.amount)
        )


PostCondition = Union[STXPostCondition, FungiblePostCondition]


def make_standard_stx_post_condition(
    address: str, code: FungibleConditionCode, amount: int
) -> STXPostCondition:
    return STXPostCondition(PostConditionPrincipal(address), code, amount)


def make_contract_stx_post_condition(
    address: str, contract_name: str, code: FungibleConditionCode, amount: int
) -> STXPostCondition:
    return STXPostCondition(PostConditionPrincipal(address, contract_name), code, amount)


def make_standard_fungible_post_condition(
    address: str, code: FungibleConditionCode, amount: int, asset: AssetInfo
) -> FungiblePostCondition:
    return FungiblePostCondition(PostConditionPrincipal(address), code, amount, asset)


def make_contract_fungible_post_condition(
    address: str,
    contract_name: str,
    code: FungibleConditionCode,
    amount: int,
    asset: AssetInfo,
) -> FungiblePostCondition:
    return FungiblePostCondition(
        PostConditionPrincipal(address, contract_name), code, amount, asset
    )


def serialize_post_conditions(post_conditions: Sequence[PostCondition]) -> bytes:
    """Serialize a length-prefixed post-condition list."""
    return encode_u32(len(post_conditions)) + b"".join(
        pc.serialize() for pc in post_conditions
    )
