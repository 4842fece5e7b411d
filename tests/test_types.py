"""Tests for client data types."""

from __future__ import annotations

from datetime import UTC, datetime

import httpx
import pytest
from pydantic import ValidationError

from twitterx import ApiResponse, CallOptions, ClientConfig, RateLimit

from tests.helpers import rate_limit_headers


class TestRateLimit:
    """Tests for the rate-limit snapshot."""

    def test_default_is_zero(self) -> None:
        """Test a fresh snapshot is all zero."""
        assert RateLimit() == RateLimit(limit=0, remaining=0, reset=0)

    def test_from_headers(self) -> None:
        """Test parsing valid integer headers."""
        rate_limit = RateLimit.from_headers(rate_limit_headers(500, 123, 1_700_000_000))

        assert rate_limit.limit == 500
        assert rate_limit.remaining == 123
        assert rate_limit.reset == 1_700_000_000

    def test_from_httpx_headers_is_case_insensitive(self) -> None:
        """Test parsing headers as sent by the gateway, in mixed case."""
        headers = httpx.Headers(
            {
                "X-RateLimit-Rapid-Free-Plans-Hard-Limit-Limit": "1000",
                "X-RateLimit-Rapid-Free-Plans-Hard-Limit-Remaining": "998",
                "X-RateLimit-Rapid-Free-Plans-Hard-Limit-Reset": "2592000",
            }
        )

        assert RateLimit.from_headers(headers) == RateLimit(limit=1000, remaining=998, reset=2_592_000)

    def test_missing_headers_yield_zero(self) -> None:
        """Test absent headers degrade to the zero snapshot."""
        assert RateLimit.from_headers({}) == RateLimit()

    @pytest.mark.parametrize(
        ("limit", "remaining", "reset"),
        [
            ("abc", "1", "2"),
            ("500", "", "2"),
            ("500", "1", "1.5"),
        ],
    )
    def test_malformed_headers_yield_zero(self, limit: str, remaining: str, reset: str) -> None:
        """Test non-integer headers degrade to the zero snapshot."""
        assert RateLimit.from_headers(rate_limit_headers(limit, remaining, reset)) == RateLimit()

    def test_is_frozen(self) -> None:
        """Test snapshots cannot be mutated in place."""
        rate_limit = RateLimit(limit=10, remaining=5, reset=0)

        with pytest.raises(ValidationError):
            rate_limit.remaining = 4  # type: ignore[misc]

    def test_reset_at(self) -> None:
        """Test reset epoch converts to an aware UTC datetime."""
        rate_limit = RateLimit(limit=10, remaining=5, reset=1_700_000_000)

        assert rate_limit.reset_at == datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)

    def test_is_exhausted(self) -> None:
        """Test exhaustion needs a known limit."""
        assert RateLimit(limit=10, remaining=0, reset=0).is_exhausted
        assert not RateLimit(limit=10, remaining=1, reset=0).is_exhausted
        assert not RateLimit().is_exhausted


class TestClientConfig:
    """Tests for instance configuration and per-call overrides."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = ClientConfig(api_key="key")

        assert config.api_key.get_secret_value() == "key"
        assert config.log_level == "INFO"
        assert config.timeout == 20_000
        assert config.timeout_seconds == 20.0

    def test_api_key_is_hidden_in_repr(self) -> None:
        """Test the key does not leak through repr."""
        assert "secret-key" not in repr(ClientConfig(api_key="secret-key"))

    @pytest.mark.parametrize("api_key", ["", "   "])
    def test_empty_api_key_rejected(self, api_key: str) -> None:
        """Test blank keys fail validation."""
        with pytest.raises(ValidationError):
            ClientConfig(api_key=api_key)

    @pytest.mark.parametrize(
        ("given", "expected"),
        [("debug", "DEBUG"), ("Info", "INFO"), ("WARN", "WARNING"), ("warning", "WARNING"), ("ERROR", "ERROR")],
    )
    def test_log_level_normalized(self, given: str, expected: str) -> None:
        """Test level names are case-insensitive and WARN is an alias."""
        assert ClientConfig(api_key="key", log_level=given).log_level == expected

    def test_unknown_log_level_rejected(self) -> None:
        """Test unknown level names fail validation."""
        with pytest.raises(ValidationError):
            ClientConfig(api_key="key", log_level="TRACE")

    @pytest.mark.parametrize("timeout", [0, -1, "1000"])
    def test_invalid_timeout_rejected(self, timeout: object) -> None:
        """Test non-positive and non-integer timeouts fail validation."""
        with pytest.raises(ValidationError):
            ClientConfig(api_key="key", timeout=timeout)

    def test_merge_none_returns_same_config(self) -> None:
        """Test no override leaves the config untouched."""
        config = ClientConfig(api_key="key")

        assert config.merge(None) is config

    def test_merge_override_wins(self) -> None:
        """Test set override fields take precedence over defaults."""
        config = ClientConfig(api_key="key", log_level="INFO", timeout=10_000)

        merged = config.merge(CallOptions(log_level="DEBUG", timeout=2_500))

        assert merged.log_level == "DEBUG"
        assert merged.timeout == 2_500
        assert merged.api_key.get_secret_value() == "key"
        assert config.timeout == 10_000

    def test_merge_partial_override(self) -> None:
        """Test unset override fields keep the instance default."""
        config = ClientConfig(api_key="key", log_level="ERROR", timeout=10_000)

        merged = config.merge(CallOptions(timeout=500))

        assert merged.log_level == "ERROR"
        assert merged.timeout == 500

    def test_call_options_cannot_override_api_key(self) -> None:
        """Test the API key is not part of the per-call override."""
        with pytest.raises(ValidationError):
            CallOptions(api_key="other")  # type: ignore[call-arg]


class TestApiResponse:
    """Tests for the transport-independent response type."""

    def test_from_httpx(self) -> None:
        """Test status, headers, body and URL are copied out."""
        response = httpx.Response(
            200,
            json={"data": [1, 2]},
            headers={"X-Request-Id": "abc"},
            request=httpx.Request("GET", "https://twitter-x.p.rapidapi.com/search/?query=x"),
        )

        result = ApiResponse.from_httpx(response, elapsed_ms=12.5)

        assert result.status_code == 200
        assert result.headers["x-request-id"] == "abc"
        assert result.json() == {"data": [1, 2]}
        assert result.url == "https://twitter-x.p.rapidapi.com/search/?query=x"
        assert result.elapsed_ms == 12.5
        assert result.is_success

    def test_text(self) -> None:
        """Test the body decodes as UTF-8."""
        result = ApiResponse(status_code=404, headers={}, content="no encontrado ñ".encode(), url="u")

        assert result.text == "no encontrado ñ"
        assert not result.is_success
