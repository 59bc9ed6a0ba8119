"""Read-only contract calls: token decimals and swap state."""

import logging
from typing import Any

from ..constants import FN_GET_DECIMALS, FN_GET_SWAP
from ..errors import DecodeError, SwapNotFoundError, TokenDecimalsError
from ..registry import ContractRef, TokenInfo
from ..types import OfferSide, SwapOffer
from .clarity import cv_to_json, uint_cv
from .interfaces import ChainReader
from .network import NetworkType

logger = logging.getLogger(__name__)


async def get_token_decimals(
    reader: ChainReader,
    token: TokenInfo,
    network: NetworkType,
    sender_address: str,
) -> int:
    """Read a token's decimals from its contract.

    There is no default: any failure is raised.

    Raises:
        TokenDecimalsError: If the call fails or returns a non-numeric value
    """
    base_contract_name = token.contract_name.split("::")[0]
    contract = f"{token.contract_address}.{base_contract_name}"
    try:
        result = await reader.call_read_only(
            contract_address=token.contract_address,
            contract_name=base_contract_name,
            function_name=FN_GET_DECIMALS,
            function_args=[],
            network=network,
            sender_address=sender_address,
        )
        json_result = cv_to_json(result)
        inner = json_result.get("value")
        raw = inner.get("value") if isinstance(inner, dict) else None
        if not json_result.get("success") or raw is None:
            raise DecodeError(f"Unexpected response format from contract {token.full_identifier}")
        try:
            decimals = int(raw)
        except (TypeError, ValueError):
            raise DecodeError(f"Invalid decimal value returned from contract: {raw}")
        if decimals < 0:
            raise DecodeError(f"Invalid decimal value returned from contract: {raw}")
    except Exception as e:
        raise TokenDecimalsError(contract, e) from e

    logger.debug(f"{contract} has {decimals} decimals")
    return decimals


def _field(fields: dict, name: str) -> Any:
    """Primitive value of a tuple field, unwrapping (optional ...)."""
    entry = fields.get(name)
    if entry is None:
        return None
    value = entry.get("value")
    if isinstance(value, dict) and "value" in value:
        value = value["value"]
    return value


def _required(fields: dict, name: str, swap_id: int) -> Any:
    value = _field(fields, name)
    if value is None:
        raise DecodeError(f"Malformed swap record {swap_id}: missing {name}")
    return value


def _to_int(value: Any, name: str, swap_id: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise DecodeError(f"Malformed swap record {swap_id}: {name} is not numeric ({value!r})")


def decode_swap(json_result: dict, side: OfferSide, swap_id: int) -> SwapOffer:
    """Decode the JSON projection of a ``get-swap`` result.

    Raises:
        SwapNotFoundError: If the response reports failure
        DecodeError: If the record is malformed
    """
    if not json_result.get("success"):
        raise SwapNotFoundError(side.value, swap_id)

    record = json_result.get("value") or {}
    fields = record.get("value")
    if not isinstance(fields, dict):
        raise DecodeError(f"Malformed swap record {swap_id}: expected a tuple")

    expired_height = _field(fields, "expired-height")
    open_flag = _field(fields, "open")
    if not isinstance(open_flag, bool):
        raise DecodeError(f"Malformed swap record {swap_id}: open flag is {open_flag!r}")

    swap = SwapOffer(
        side=side,
        swap_id=swap_id,
        ustx=_to_int(_required(fields, "ustx", swap_id), "ustx", swap_id),
        amount=_to_int(_required(fields, "amount", swap_id), "amount", swap_id),
        stx_sender=_field(fields, "stx-sender"),
        ft_sender=_field(fields, "ft-sender"),
        ft_contract=_required(fields, "ft", swap_id),
        open=open_flag,
        fees_contract=_field(fields, "fees"),
        expired_height=(
            _to_int(expired_height, "expired-height", swap_id)
            if expired_height is not None
            else None
        ),
    )
    if swap.counterparty is None:
        sender_field = "stx-sender" if side == OfferSide.BID else "ft-sender"
        raise DecodeError(f"Malformed swap record {swap_id}: missing {sender_field}")
    return swap


async def get_swap(
    reader: ChainReader,
    contract: ContractRef,
    side: OfferSide,
    swap_id: int,
    network: NetworkType,
    sender_address: str,
) -> SwapOffer:
    """Read the state of one swap from the BID or ASK contract.

    Raises:
        SwapNotFoundError: If the contract reports failure for this id
        DecodeError: If the record is malformed
        TransportError: If the call itself fails
    """
    result = await reader.call_read_only(
        contract_address=contract.address,
        contract_name=contract.name,
        function_name=FN_GET_SWAP,
        function_args=[uint_cv(swap_id)],
        network=network,
        sender_address=sender_address,
    )
    return decode_swap(cv_to_json(result), side, swap_id)
