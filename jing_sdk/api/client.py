"""Jing REST order-book API client implementation."""

import json
import logging
from typing import Any, Optional
from urllib.parse import quote

import aiohttp

from ..constants import DEFAULT_PAGE_LIMIT
from .error import DeserializeError, ErrorResponse, map_status_error
from .types import (
    ListingsResponse,
    PrivateOffersResponse,
    StacksBid,
    StxAsk,
    UserOffersResponse,
)
from .validation import validate_limit, validate_page, validate_pair, validate_stacks_address

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECS = 30


class JingApiClient:
    """Jing REST API client.

    Every request carries the API key both as a bearer token and as
    ``X-API-Key``.

    Example:
        ```python
        async with JingApiClient("https://backend.jing.cash/api/v1", api_key) as client:
            bids = await client.get_stx_bids("PEPE-STX")
            print(f"Found {len(bids.results)} bids")
        ```
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: int = DEFAULT_TIMEOUT_SECS,
        headers: Optional[dict[str, str]] = None,
    ):
        """Create a new client with the given base URL.

        Args:
            base_url: The base URL of the Jing API
            api_key: API key for the order-book service
            timeout: Request timeout in seconds
            headers: Optional additional headers for all requests
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {api_key}",
            "X-API-Key": api_key,
        }
        if headers:
            self._headers.update(headers)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def base_url(self) -> str:
        """Get the base URL."""
        return self._base_url

    async def __aenter__(self) -> "JingApiClient":
        """Enter async context manager."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers=self._headers,
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def _handle_response(self, response: aiohttp.ClientResponse) -> Any:
        """Handle HTTP response and map errors."""
        if 200 <= response.status < 300:
            try:
                return await response.json(content_type=None)
            except (ValueError, json.JSONDecodeError) as e:
                raise DeserializeError(f"Failed to deserialize response: {e}")
        else:
            error_text = await response.text()
            try:
                error_data = json.loads(error_text)
                error_msg = ErrorResponse.from_dict(error_data).get_message()
            except (ValueError, AttributeError):
                error_msg = error_text or response.reason or "Unknown error"

            raise map_status_error(response.status, error_msg)

    async def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        session = await self._ensure_session()
        url = f"{self._base_url}{path}"
        logger.debug(f"GET {url} params={params}")
        async with session.get(url, params=params) as response:
            return await self._handle_response(response)

    # =========================================================================
    # Token-pair endpoints
    # =========================================================================

    async def get_stx_bids(self, pair: str, ft_contract: Optional[str] = None) -> ListingsResponse:
        """Get STX bids for a pair.

        Args:
            pair: Trading pair such as ``PEPE-STX``
            ft_contract: Optional token contract to scope the listing

        Returns:
            ListingsResponse of StacksBid entries
        """
        validate_pair(pair)
        params = {"ftContract": ft_contract} if ft_contract else None
        data = await self._get(f"/token-pairs/{quote(pair, safe='')}/stx-bids", params)
        return ListingsResponse.from_dict(data, StacksBid.from_dict)

    async def get_stx_asks(self, pair: str, ft_contract: Optional[str] = None) -> ListingsResponse:
        """Get STX asks for a pair.

        Returns:
            ListingsResponse of StxAsk entries
        """
        validate_pair(pair)
        params = {"ftContract": ft_contract} if ft_contract else None
        data = await self._get(f"/token-pairs/{quote(pair, safe='')}/stx-asks", params)
        return ListingsResponse.from_dict(data, StxAsk.from_dict)

    async def get_private_offers(
        self, pair: str, user_address: str, ft_contract: str
    ) -> PrivateOffersResponse:
        """Get private offers addressed to a user.

        Raises:
            InvalidParameterError: If user_address is not a Stacks address
        """
        validate_pair(pair)
        validate_stacks_address(user_address, "user_address")
        data = await self._get(
            f"/token-pairs/{quote(pair, safe='')}/private-offers",
            {"userAddress": user_address, "ftContract": ft_contract},
        )
        return PrivateOffersResponse.from_dict(data)

    async def get_user_offers(
        self, pair: str, user_address: str, ft_contract: str
    ) -> UserOffersResponse:
        """Get offers created by a user.

        Raises:
            InvalidParameterError: If user_address is not a Stacks address
        """
        validate_pair(pair)
        validate_stacks_address(user_address, "user_address")
        data = await self._get(
            f"/token-pairs/{quote(pair, safe='')}/user-offers",
            {"userAddress": user_address, "ftContract": ft_contract},
        )
        return UserOffersResponse.from_dict(data)

    # =========================================================================
    # Pending swaps
    # =========================================================================

    async def get_pending_orders(
        self, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT
    ) -> ListingsResponse:
        """Get one page of the mixed pending-swap feed.

        Raises:
            InvalidParameterError: If page or limit is out of bounds
        """
        validate_page(page)
        validate_limit(limit)
        data = await self._get("/all-pending-stx-swaps", {"page": page, "limit": limit})
        return ListingsResponse.from_dict(data)
