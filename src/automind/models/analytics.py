"""Driving analytics and route models."""

from __future__ import annotations

from pydantic import Field

from automind.models._base import AutoMindModel


class DrivingAnalyticsData(AutoMindModel):
    """Daily driving scores, each out of 100."""

    name: str
    acceleration: float = Field(ge=0, le=100)
    braking: float = Field(ge=0, le=100)
    efficiency: float = Field(ge=0, le=100)

    @property
    def score(self) -> float:
        return (self.acceleration + self.braking + self.efficiency) / 3


class RoutePoint(AutoMindModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class TripDetails(AutoMindModel):
    """A trip annotation pinned to ``point_index`` of the route history."""

    id: int
    point_index: int = Field(ge=0)
    title: str
    details: str


class OptimizedRouteResult(AutoMindModel):
    optimized_route: list[RoutePoint]
    time_saved_minutes: int
    energy_saved_percent: int
