"""Base model and timestamp helpers for automind records.

Every record inherits from :class:`AutoMindModel` which provides:

* ``alias_generator=to_camel`` so the camelCase keys the model is asked
  to produce (``lifeRemaining``, ``nextServiceKm`` …) map automatically
  to snake_case fields.
* Frozen instances; updates go through ``model_copy(update=...)``.
* ``populate_by_name`` so code can construct records with field names.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def parse_timestamp(value: Any) -> datetime | None:
    """Convert an epoch timestamp (seconds **or** milliseconds) to a UTC datetime.

    ``datetime`` values pass through; naive ones are taken as UTC.
    """
    if value is None:
        return value
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    ts = float(value)
    if ts >= _MS_THRESHOLD:
        ts /= 1000.0
    return datetime.fromtimestamp(ts, tz=UTC)


EpochTimestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]
"""Annotated type that coerces epoch numbers (seconds or ms) to UTC datetimes."""


class AutoMindModel(BaseModel):
    """Base for all automind records."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_api_dict(self) -> dict[str, Any]:
        """Dump with camelCase keys, the shape used in prompts."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
