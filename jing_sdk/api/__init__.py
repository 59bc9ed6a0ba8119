"""REST API client module for the Jing order book.

Example:
    ```python
    from jing_sdk.api import JingApiClient

    async with JingApiClient(api_host, api_key) as client:
        pending = await client.get_pending_orders(page=1, limit=50)
        print(f"Fetched {len(pending.results)} pending swaps")
    ```
"""

from .client import JingApiClient

from .error import (
    HttpError,
    NotFoundError,
    BadRequestError,
    ForbiddenError,
    UnauthorizedError,
    RateLimitedError,
    ServerError,
    DeserializeError,
    UnexpectedStatusError,
    ErrorResponse,
    map_status_error,
)

from .validation import validate_stacks_address, validate_pair, validate_limit, validate_page

from .types import (
    Listing,
    StacksBid,
    StxAsk,
    AnyListing,
    decode_listing,
    ListingsResponse,
    OrderBook,
    PrivateOffersResponse,
    UserOffersResponse,
    DisplayOrder,
)

__all__ = [
    # Client
    "JingApiClient",
    # Errors
    "HttpError",
    "NotFoundError",
    "BadRequestError",
    "ForbiddenError",
    "UnauthorizedError",
    "RateLimitedError",
    "ServerError",
    "DeserializeError",
    "UnexpectedStatusError",
    "ErrorResponse",
    "map_status_error",
    # Validation
    "validate_stacks_address",
    "validate_pair",
    "validate_limit",
    "validate_page",
    # Types
    "Listing",
    "StacksBid",
    "StxAsk",
    "AnyListing",
    "decode_listing",
    "ListingsResponse",
    "OrderBook",
    "PrivateOffersResponse",
    "UserOffersResponse",
    "DisplayOrder",
]
