"""Models for cache configuration, stored entries and sweep lifecycle."""

import math
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator

from mongocache.consts import DEFAULT_CHECK_PERIOD, DEFAULT_COLLECTION_NAME, DEFAULT_TTL, MAX_TTL


class SweepState(str, Enum):
    """Lifecycle of the background expiry sweep."""

    IDLE = "idle"
    SWEEPING = "sweeping"


class CacheConfig(BaseModel):
    """Options for a MongoCache instance.

    Fixed at construction. Numeric options accept numbers or numeric strings
    and must be finite; flags must be real booleans.
    """

    model_config = ConfigDict(frozen=True)

    ttl: float = Field(
        default=DEFAULT_TTL,
        ge=-MAX_TTL,
        le=MAX_TTL,
        allow_inf_nan=False,
        description="Entry lifetime in seconds",
    )
    check_period: float = Field(
        default=DEFAULT_CHECK_PERIOD,
        gt=0,
        allow_inf_nan=False,
        description="Seconds between expiry sweeps",
    )
    flush_on_create: StrictBool = Field(default=False, description="Clear the collection when the cache opens")
    collection_name: StrictStr = Field(default=DEFAULT_COLLECTION_NAME)
    ignore_store_error: StrictBool = Field(
        default=False, description="Log store failures instead of raising them"
    )
    return_store_results: StrictBool = Field(
        default=False, description="Return raw store results instead of True"
    )

    @field_validator("ttl", "check_period", mode="before")
    @classmethod
    def reject_non_numbers(cls, value: Any) -> Any:
        """Reject booleans and non-finite floats before pydantic coerces them."""
        if isinstance(value, bool):
            msg = "must be a number, not a boolean"
            raise ValueError(msg)
        if isinstance(value, float) and not math.isfinite(value):
            msg = "must be a finite number"
            raise ValueError(msg)
        return value


class CacheEntry(BaseModel):
    """A single cached value as persisted in the collection."""

    key: str
    expire: datetime
    data: Any = None

    @field_validator("expire")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """Drivers that are not timezone-aware hand back naive UTC datetimes."""
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    def is_expired(self, now: datetime) -> bool:
        """An entry is stale once its expiry instant has been reached."""
        return self.expire <= now

    def to_document(self) -> dict[str, Any]:
        """Plain dict form written to the store."""
        return self.model_dump()
