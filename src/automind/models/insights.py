"""Consolidated start-up payload produced by the model."""

from __future__ import annotations

from pydantic import Field

from automind.models._base import AutoMindModel
from automind.models.diagnostics import FaultCodeExplanation
from automind.models.maintenance import MaintenanceItem


class InitialGreeting(AutoMindModel):
    text: str
    suggestions: list[str] = Field(default_factory=list)


class InitialAppData(AutoMindModel):
    """Everything the dashboard needs at start-up, fetched in one request.

    All four keys are required; a reply missing any of them fails
    validation and the caller falls back to static content.
    """

    maintenance_schedule: list[MaintenanceItem]
    dashboard_insight: str = Field(min_length=1)
    initial_greeting: InitialGreeting
    fault_code_explanations: list[FaultCodeExplanation]

    def explanations_by_code(self) -> dict[str, str]:
        return {item.code: item.explanation for item in self.fault_code_explanations}
