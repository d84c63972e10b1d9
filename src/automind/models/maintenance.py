"""Maintenance forecast model."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field, field_validator

from automind.models._base import AutoMindModel


class MaintenanceStatus(StrEnum):
    OK = "OK"
    SOON = "Soon"
    OVERDUE = "Overdue"


class MaintenanceItem(AutoMindModel):
    """A serviceable component and its predicted remaining life.

    ``life_remaining`` is a fraction between 0.0 and 1.0. Model output
    outside that range is clamped rather than rejected.
    """

    component: str
    life_remaining: float
    next_service_km: int
    status: MaintenanceStatus
    ai_insight: str | None = None
    preventative_tip: str | None = None

    @field_validator("life_remaining", mode="before")
    @classmethod
    def _clamp_life(cls, value: Any) -> float:
        return min(1.0, max(0.0, float(value)))

    @field_validator("next_service_km", mode="before")
    @classmethod
    def _round_km(cls, value: Any) -> int:
        return int(round(float(value)))

    @property
    def life_percent(self) -> int:
        return int(round(self.life_remaining * 100))
