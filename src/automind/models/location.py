"""Approximate current location."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class GeoLocation(BaseModel):
    """Current coordinates.

    Accepts the common spellings geolocation services use for
    latitude and longitude.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    latitude: float = Field(validation_alias=AliasChoices("latitude", "lat"), ge=-90, le=90)
    longitude: float = Field(validation_alias=AliasChoices("longitude", "lng", "lon"), ge=-180, le=180)
    accuracy: float | None = Field(default=None, validation_alias=AliasChoices("accuracy", "accuracy_radius"))
    """Accuracy radius in meters when the provider reports one."""
