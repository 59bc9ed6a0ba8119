"""Exception hierarchy for the Jing SDK.

Every error carries an `ErrorKind` so callers can branch on the kind of
failure (validation, transport, decode, authorization, broadcast) instead of
matching message text.
"""

import asyncio
from enum import Enum
from typing import Any, Optional

import aiohttp


class ErrorKind(str, Enum):
    """Category of a failure."""

    VALIDATION = "validation"
    TRANSPORT = "transport"
    DECODE = "decode"
    AUTHORIZATION = "authorization"
    BROADCAST = "broadcast"
    UNKNOWN = "unknown"


class JingError(Exception):
    """Base exception for all Jing SDK errors."""

    kind = ErrorKind.UNKNOWN


# =============================================================================
# Validation
# =============================================================================


class ValidationError(JingError):
    """Invalid input detected before any network call."""

    kind = ErrorKind.VALIDATION


class UnsupportedPairError(ValidationError):
    """Trading pair is not in the token registry."""

    def __init__(self, pair: str):
        self.pair = pair
        super().__init__(f"Unsupported trading pair: {pair}")


class UnknownTokenContractError(ValidationError):
    """Contract identifier has no registry entry."""

    def __init__(self, contract: str):
        self.contract = contract
        super().__init__(f"Unknown token contract: {contract}")


class InvalidAddressError(ValidationError):
    """Malformed Stacks address."""

    def __init__(self, address: str, reason: str = "not a valid c32check address"):
        self.address = address
        self.reason = reason
        super().__init__(f"Invalid address {address!r}: {reason}")


class InvalidParameterError(ValidationError):
    """Invalid parameter provided."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Invalid parameter: {message}")


# =============================================================================
# Transport
# =============================================================================


class TransportError(JingError):
    """Network or RPC failure."""

    kind = ErrorKind.TRANSPORT


class ReadOnlyCallError(TransportError):
    """Read-only contract call rejected by the node."""

    def __init__(self, contract: str, function_name: str, cause: str):
        self.contract = contract
        self.function_name = function_name
        self.cause = cause
        super().__init__(f"Read-only call {contract}::{function_name} failed: {cause}")


# =============================================================================
# Decode
# =============================================================================


class DecodeError(JingError):
    """Response could not be decoded into the expected shape."""

    kind = ErrorKind.DECODE


class ClarityDecodeError(DecodeError):
    """Malformed Clarity value bytes."""

    def __init__(self, message: str):
        super().__init__(f"Invalid Clarity value: {message}")


class SwapNotFoundError(DecodeError):
    """`get-swap` reported failure for a swap id."""

    def __init__(self, side: str, swap_id: int):
        self.side = side
        self.swap_id = swap_id
        super().__init__(f"Failed to get {side} details for swap {swap_id}")


# =============================================================================
# Authorization
# =============================================================================


class AuthorizationError(JingError):
    """Caller is not allowed to perform the operation."""

    kind = ErrorKind.AUTHORIZATION


class NotOfferOwnerError(AuthorizationError):
    """Derived address does not match the recorded offer creator."""

    def __init__(self, action: str, required: str, actual: str):
        self.action = action
        self.required = required
        self.actual = actual
        super().__init__(
            f"Only the creator can {action} this offer "
            f"(creator: {required}, caller: {actual})"
        )


# =============================================================================
# Broadcast
# =============================================================================


class BroadcastError(JingError):
    """Node rejected a transaction."""

    kind = ErrorKind.BROADCAST

    def __init__(
        self,
        error: str,
        reason: Optional[str] = None,
        reason_data: Optional[Any] = None,
        txid: Optional[str] = None,
    ):
        self.error = error
        self.reason = reason
        self.reason_data = reason_data
        self.txid = txid
        message = f"Broadcast failed: {error}"
        if reason:
            message += f" (reason: {reason})"
        super().__init__(message)


# =============================================================================
# Operation wrapper
# =============================================================================


class TokenDecimalsError(JingError):
    """Decimals could not be read from a token contract.

    Keeps the kind of the underlying failure.
    """

    def __init__(self, contract: str, cause: BaseException):
        self.contract = contract
        self.cause = cause
        self.kind = classify(cause)
        super().__init__(f"Failed to read decimals from token contract {contract}: {cause}")


class OperationError(JingError):
    """Failure of a public SDK operation, wrapping the root cause once."""

    def __init__(self, operation: str, cause: BaseException, kind: ErrorKind):
        self.operation = operation
        self.cause = cause
        self.kind = kind
        super().__init__(f"Failed to {operation}: {cause}")


def classify(error: BaseException) -> ErrorKind:
    """Map an exception to its `ErrorKind`."""
    if isinstance(error, JingError):
        return error.kind
    if isinstance(error, (aiohttp.ClientError, asyncio.TimeoutError, ConnectionError)):
        return ErrorKind.TRANSPORT
    return ErrorKind.UNKNOWN


def wrap_operation_error(operation: str, error: Exception) -> OperationError:
    """Wrap `error` for `operation` unless it is already wrapped."""
    if isinstance(error, OperationError):
        return error
    wrapped = OperationError(operation, error, classify(error))
    wrapped.__cause__ = error
    return wrapped
