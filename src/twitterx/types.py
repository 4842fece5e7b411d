"""Client data types: rate-limit snapshot, configuration and responses."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Annotated, Any, Self

import httpx
from pydantic import BeforeValidator, Field, SecretStr, field_validator

from twitterx.base import StrictModel
from twitterx.logging import LogLevel, normalize_level
from twitterx.settings import DEFAULT_TIMEOUT_MS

RATE_LIMIT_HEADER = "x-ratelimit-rapid-free-plans-hard-limit-{}"


def _normalize_log_level(value: object) -> object:
    if isinstance(value, str):
        return normalize_level(value)
    return value


LogLevelName = Annotated[LogLevel, BeforeValidator(_normalize_log_level)]


class RateLimit(StrictModel):
    """Last-known RapidAPI quota, parsed from response headers."""

    limit: int = 0
    remaining: int = 0
    reset: int = 0  # Epoch seconds

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> Self:
        """Build a snapshot from the rate-limit headers of a response.

        Missing or non-integer values yield the all-zero snapshot instead of
        failing the call that produced them.
        """
        try:
            return cls(
                limit=int(headers[RATE_LIMIT_HEADER.format("limit")]),
                remaining=int(headers[RATE_LIMIT_HEADER.format("remaining")]),
                reset=int(headers[RATE_LIMIT_HEADER.format("reset")]),
            )
        except (KeyError, TypeError, ValueError):
            return cls()

    @property
    def reset_at(self) -> datetime:
        """Reset time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.reset, tz=UTC)

    @property
    def is_exhausted(self) -> bool:
        """Check if a known quota has been used up."""
        return self.limit > 0 and self.remaining <= 0


class ClientConfig(StrictModel):
    """Instance-wide client configuration."""

    api_key: SecretStr
    log_level: LogLevelName = "INFO"
    timeout: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)  # Milliseconds

    @field_validator("api_key")
    @classmethod
    def check_api_key(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            msg = "api_key must not be empty"
            raise ValueError(msg)
        return value

    @property
    def timeout_seconds(self) -> float:
        """Timeout in seconds, as httpx expects it."""
        return self.timeout / 1000

    def merge(self, options: CallOptions | None) -> ClientConfig:
        """Apply a per-call override on top of this config.

        Fields set on ``options`` win; unset ones keep the instance default.
        """
        if options is None:
            return self
        return self.model_copy(update=options.model_dump(exclude_none=True))


class CallOptions(StrictModel):
    """Per-call override of the client config. The API key is not overridable."""

    log_level: LogLevelName | None = None
    timeout: int | None = Field(default=None, gt=0)  # Milliseconds


@dataclass(frozen=True)
class ApiResponse:
    """Raw HTTP response, detached from the transport library."""

    status_code: int
    headers: dict[str, str]
    content: bytes
    url: str
    elapsed_ms: float = field(default=0.0, compare=False)

    @classmethod
    def from_httpx(cls, response: httpx.Response, *, elapsed_ms: float = 0.0) -> Self:
        """Copy status, lower-cased headers and body out of an httpx response."""
        return cls(
            status_code=response.status_code,
            headers=dict(response.headers.items()),
            content=response.content,
            url=str(response.url),
            elapsed_ms=elapsed_ms,
        )

    @property
    def is_success(self) -> bool:
        """Check for a 2xx status."""
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        """Body decoded as UTF-8."""
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON."""
        return json.loads(self.content)
