"""Hiro API implementation of the chain reader and writer interfaces."""

import json
import logging
from typing import Any, List, Optional
from urllib.parse import quote

import aiohttp

from ..api.error import DeserializeError, ErrorResponse, map_status_error
from ..errors import ReadOnlyCallError
from .clarity import ClarityValue, deserialize_cv, serialize_cv
from .interfaces import BroadcastResult, ChainReader, ChainWriter
from .network import NetworkType, get_network
from .transactions import ContractCallOptions, StacksTransaction, make_contract_call

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECS = 30


class HiroChainClient(ChainReader, ChainWriter):
    """Chain access through the Hiro Stacks API.

    Example:
        ```python
        async with HiroChainClient() as chain:
            nonce = await chain.get_next_nonce(address, NetworkType.MAINNET)
        ```
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        timeout: int = DEFAULT_TIMEOUT_SECS,
        api_key: Optional[str] = None,
    ):
        """Create a client.

        Args:
            api_url: Override for the node URL; by default the URL of the
                network passed to each call is used
            timeout: Request timeout in seconds
            api_key: Optional Hiro API key sent as ``x-api-key``
        """
        self._api_url = api_url.rstrip("/") if api_url else None
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._headers = {"Accept": "application/json"}
        if api_key:
            self._headers["x-api-key"] = api_key
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "HiroChainClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout, headers=self._headers)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    def _base_url(self, network: NetworkType) -> str:
        return self._api_url or get_network(network).api_url

    async def _handle_response(self, response: aiohttp.ClientResponse) -> Any:
        if 200 <= response.status < 300:
            try:
                return await response.json(content_type=None)
            except (ValueError, json.JSONDecodeError) as e:
                raise DeserializeError(f"Failed to deserialize response: {e}")
        error_text = await response.text()
        try:
            error_msg = ErrorResponse.from_dict(json.loads(error_text)).get_message()
        except (ValueError, AttributeError):
            error_msg = error_text or response.reason or "Unknown error"
        raise map_status_error(response.status, error_msg)

    # =========================================================================
    # ChainReader
    # =========================================================================

    async def call_read_only(
        self,
        contract_address: str,
        contract_name: str,
        function_name: str,
        function_args: List[ClarityValue],
        network: NetworkType,
        sender_address: str,
    ) -> ClarityValue:
        session = await self._ensure_session()
        url = (
            f"{self._base_url(network)}/v2/contracts/call-read/"
            f"{contract_address}/{contract_name}/{quote(function_name, safe='')}"
        )
        payload = {
            "sender": sender_address,
            "arguments": ["0x" + serialize_cv(arg).hex() for arg in function_args],
        }
        async with session.post(url, json=payload) as response:
            data = await self._handle_response(response)

        if not isinstance(data, dict):
            raise DeserializeError(f"Unexpected read-only response: {data!r}")
        if not data.get("okay"):
            raise ReadOnlyCallError(
                f"{contract_address}.{contract_name}",
                function_name,
                str(data.get("cause", "unknown cause")),
            )
        return deserialize_cv(data["result"])

    async def get_nonces(self, address: str, network: NetworkType) -> dict:
        """Nonce summary for an address (``possible_next_nonce``, gaps, ...)."""
        session = await self._ensure_session()
        url = f"{self._base_url(network)}/extended/v1/address/{quote(address, safe='')}/nonces"
        async with session.get(url) as response:
            return await self._handle_response(response)

    async def get_next_nonce(self, address: str, network: NetworkType) -> int:
        nonces = await self.get_nonces(address, network)
        try:
            return int(nonces["possible_next_nonce"])
        except (KeyError, TypeError, ValueError) as e:
            raise DeserializeError(f"Missing possible_next_nonce in nonce response: {e}")

    # =========================================================================
    # ChainWriter
    # =========================================================================

    async def make_contract_call(self, options: ContractCallOptions) -> StacksTransaction:
        return make_contract_call(options)

    async def broadcast_transaction(
        self, transaction: StacksTransaction, network: NetworkType
    ) -> BroadcastResult:
        session = await self._ensure_session()
        url = f"{self._base_url(network)}/v2/transactions"
        headers = {"Content-Type": "application/octet-stream"}
        async with session.post(url, data=transaction.serialize(), headers=headers) as response:
            text = await response.text()
            if response.ok:
                txid = text.strip().strip('"')
                if txid.startswith("0x"):
                    txid = txid[2:]
                return BroadcastResult(txid=txid)
            try:
                body = json.loads(text)
            except ValueError:
                raise map_status_error(response.status, text or "Unknown error")
            if not isinstance(body, dict) or "error" not in body:
                raise map_status_error(response.status, text)
            return BroadcastResult(
                txid=body.get("txid"),
                error=body["error"],
                reason=body.get("reason"),
                reason_data=body.get("reason_data"),
            )


def log_broadcast_result(result: BroadcastResult, sender: Optional[str] = None) -> None:
    """Log a broadcast outcome."""
    if not result.ok:
        logger.error("Transaction failed to broadcast")
        logger.error(f"Error: {result.error}")
        if result.reason:
            logger.error(f"Reason: {result.reason}")
        if result.reason_data:
            logger.error(f"Reason Data: {json.dumps(result.reason_data, indent=2)}")
    else:
        logger.info("Transaction broadcasted successfully!")
        if sender:
            logger.info(f"FROM: {sender}")
        logger.info(f"TXID: 0x{result.txid}")
