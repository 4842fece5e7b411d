"""Twitter API error types."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Self

if TYPE_CHECKING:
    from twitterx.types import ApiResponse


class ErrorCode(StrEnum):
    """Standardized Twitter API error codes."""

    API_KEY_MISSING = "API_KEY_MISSING"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    TIMEOUT = "TIMEOUT"
    NETWORK_ERROR = "NETWORK_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    HTTP_ERROR = "HTTP_ERROR"


class TwitterApiError(Exception):
    """Twitter API error with standardized error codes."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        http_status: int | None = None,
        response: ApiResponse | None = None,
    ) -> None:
        """Initialize Twitter API error.

        Args:
            code: Standardized error code.
            message: Human-readable error message.
            http_status: Optional HTTP status code.
            response: The remote response, for errors raised on a non-2xx status.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = http_status
        self.response = response

    def is_code(self, code: ErrorCode) -> bool:
        """Check if this error matches a specific code."""
        return self.code == code

    @classmethod
    def api_key_missing(cls) -> Self:
        """Create API key missing error."""
        return cls(
            ErrorCode.API_KEY_MISSING,
            "TWITTERX_APIKEY environment variable not set",
            http_status=401,
        )

    @classmethod
    def invalid_argument(cls, details: str) -> Self:
        """Create invalid argument error."""
        return cls(ErrorCode.INVALID_ARGUMENT, f"Invalid argument: {details}")

    @classmethod
    def timeout(cls, timeout_ms: int) -> Self:
        """Create request timeout error."""
        return cls(
            ErrorCode.TIMEOUT,
            f"Request timed out after {timeout_ms}ms",
            http_status=504,
        )

    @classmethod
    def network_error(cls, details: str) -> Self:
        """Create network error."""
        return cls(
            ErrorCode.NETWORK_ERROR,
            f"Network error: {details}",
            http_status=502,
        )

    @classmethod
    def rate_limited(cls, response: ApiResponse | None = None) -> Self:
        """Create rate limit error."""
        return cls(
            ErrorCode.RATE_LIMITED,
            "Twitter API rate limit exceeded",
            http_status=429,
            response=response,
        )

    @classmethod
    def http_error(cls, response: ApiResponse) -> Self:
        """Create error for any other non-2xx response."""
        return cls(
            ErrorCode.HTTP_ERROR,
            f"HTTP {response.status_code} from {response.url}",
            http_status=response.status_code,
            response=response,
        )
