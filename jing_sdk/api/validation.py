"""Input validation utilities for the API client."""

from ..chain.c32 import is_valid_address
from ..constants import MAX_PAGINATION_LIMIT
from ..errors import InvalidParameterError


def validate_stacks_address(value: str, field_name: str) -> None:
    """Validate that a string is a c32check Stacks address.

    Raises:
        InvalidParameterError: If not a valid address
    """
    if not value or not value.strip():
        raise InvalidParameterError(f"{field_name} cannot be empty")

    if not is_valid_address(value):
        raise InvalidParameterError(f"{field_name} is not a valid Stacks address")


def validate_pair(pair: str) -> None:
    """Validate the ``SYMBOL-STX`` shape of a pair path segment.

    Raises:
        InvalidParameterError: If the pair is empty or contains a path separator
    """
    if not pair or not pair.strip():
        raise InvalidParameterError("pair cannot be empty")
    if "/" in pair:
        raise InvalidParameterError(f"pair must not contain '/': {pair}")


def validate_page(page: int) -> None:
    """Validate a 1-based page number.

    Raises:
        InvalidParameterError: If page is below 1
    """
    if page < 1:
        raise InvalidParameterError("Page must be >= 1")


def validate_limit(limit: int) -> None:
    """Validate pagination limit is within bounds.

    Raises:
        InvalidParameterError: If limit is out of bounds
    """
    if limit < 1 or limit > MAX_PAGINATION_LIMIT:
        raise InvalidParameterError(f"Limit must be 1-{MAX_PAGINATION_LIMIT}")
