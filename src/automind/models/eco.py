"""Eco-efficiency advice model."""

from __future__ import annotations

from enum import StrEnum

from automind.models._base import AutoMindModel


class Impact(StrEnum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class EcoSuggestion(AutoMindModel):
    title: str
    description: str
    impact: Impact
