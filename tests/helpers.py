"""Shared helpers for client tests."""

from __future__ import annotations

RATE_LIMIT_PREFIX = "x-ratelimit-rapid-free-plans-hard-limit-"


def rate_limit_headers(limit: int | str, remaining: int | str, reset: int | str) -> dict[str, str]:
    """Build RapidAPI free-plan rate-limit headers."""
    return {
        f"{RATE_LIMIT_PREFIX}limit": str(limit),
        f"{RATE_LIMIT_PREFIX}remaining": str(remaining),
        f"{RATE_LIMIT_PREFIX}reset": str(reset),
    }
