"""Base Pydantic model for client data types."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Base model with strict validation for client values.

    Rate-limit snapshots, configs and responses are all built from this so that:
    - No type coercion (strict=True)
    - Immutable after creation (frozen=True), replaced wholesale instead
    - Fail on unknown fields (extra="forbid")
    """

    model_config = ConfigDict(
        strict=True,
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        use_enum_values=True,
    )
