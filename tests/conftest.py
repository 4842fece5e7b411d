"""Pytest fixtures and configuration for client tests."""

from __future__ import annotations

import os

# Set environment variables BEFORE any imports that might load settings
# This is necessary because settings are cached at import time
os.environ.setdefault("APP_MODE", "development")
os.environ.setdefault("LOG_LEVEL", "silent")
os.environ.setdefault("TWITTERX_APIKEY", "test-api-key")
os.environ.setdefault("TWITTERX_TIMEOUT_MS", "20000")

from collections.abc import Awaitable, Callable, Iterator
from typing import Any

import httpx
import pytest

from twitterx import AsyncTwitterClient
from twitterx.settings import get_settings

from tests.helpers import rate_limit_headers

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]
ClientFactory = Callable[..., AsyncTwitterClient]


@pytest.fixture
def anyio_backend() -> str:
    """Run async tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def fresh_settings() -> Iterator[None]:
    """Drop cached settings around a test that changes the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def requests_log() -> list[httpx.Request]:
    """Requests seen by the mock transport, in order."""
    return []


@pytest.fixture
def make_client(requests_log: list[httpx.Request]) -> ClientFactory:
    """Build clients whose requests go to a mock transport.

    Without a handler every request gets an empty JSON 200 with rate-limit
    headers (limit=500, remaining=499, reset=1700000000).
    """

    def factory(handler: Handler | None = None, **kwargs: Any) -> AsyncTwitterClient:
        def record(request: httpx.Request) -> httpx.Response | Awaitable[httpx.Response]:
            requests_log.append(request)
            if handler is None:
                return httpx.Response(200, json={}, headers=rate_limit_headers(500, 499, 1_700_000_000))
            return handler(request)

        kwargs.setdefault("api_key", "test-api-key")
        return AsyncTwitterClient(transport=httpx.MockTransport(record), **kwargs)

    return factory
