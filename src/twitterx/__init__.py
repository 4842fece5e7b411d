"""Async client for the twitter-x API on RapidAPI."""

__version__ = "0.1.0"

from twitterx.client import AsyncTwitterClient  # noqa: E402
from twitterx.errors import ErrorCode, TwitterApiError  # noqa: E402
from twitterx.types import ApiResponse, CallOptions, ClientConfig, RateLimit  # noqa: E402

__all__ = [
    "ApiResponse",
    "AsyncTwitterClient",
    "CallOptions",
    "ClientConfig",
    "ErrorCode",
    "RateLimit",
    "TwitterApiError",
    "__version__",
]
