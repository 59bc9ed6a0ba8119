"""HTTP error types shared by the REST order-book client and the Hiro chain client."""

from dataclasses import dataclass
from typing import Optional

from ..errors import DecodeError, TransportError


class HttpError(TransportError):
    """Non-2xx HTTP response."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"HTTP error! status: {status}: {message}")


class BadRequestError(HttpError):
    """Invalid request parameters (400)."""

    def __init__(self, message: str):
        super().__init__(400, message)


class UnauthorizedError(HttpError):
    """Missing or invalid API key (401)."""

    def __init__(self, message: str):
        super().__init__(401, message)


class ForbiddenError(HttpError):
    """Permission denied (403)."""

    def __init__(self, message: str):
        super().__init__(403, message)


class NotFoundError(HttpError):
    """Resource not found (404)."""

    def __init__(self, message: str):
        super().__init__(404, message)


class RateLimitedError(HttpError):
    """Too many requests (429)."""

    def __init__(self, message: str):
        super().__init__(429, message)


class ServerError(HttpError):
    """Server-side error (5xx)."""

    pass


class UnexpectedStatusError(HttpError):
    """Unexpected HTTP status code."""

    pass


class DeserializeError(DecodeError):
    """JSON deserialization error."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Deserialization error: {message}")


@dataclass
class ErrorResponse:
    """Error body returned by the API."""

    status: Optional[str] = None
    message: Optional[str] = None
    details: Optional[str] = None

    def get_message(self) -> str:
        """Get the error message, preferring message over details."""
        return self.message or self.details or "Unknown error"

    @classmethod
    def from_dict(cls, data: dict) -> "ErrorResponse":
        return cls(
            status=data.get("status"),
            message=data.get("message") or data.get("error"),
            details=data.get("details"),
        )


def map_status_error(status: int, message: str) -> HttpError:
    """Map an HTTP status code to an HttpError."""
    if status == 400:
        return BadRequestError(message)
    elif status == 401:
        return UnauthorizedError(message)
    elif status == 403:
        return ForbiddenError(message)
    elif status == 404:
        return NotFoundError(message)
    elif status == 429:
        return RateLimitedError(message)
    elif status >= 500:
        return ServerError(status, message)
    else:
        return UnexpectedStatusError(status, message)
