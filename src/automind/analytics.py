"""Derived figures shown next to the raw telemetry."""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence

from automind.models.analytics import DrivingAnalyticsData
from automind.models.vehicle import CarData, SystemStatus

_DEGRADED_HEALTH = 50

EV_MAKES: frozenset[str] = frozenset({"Tesla"})


@dataclasses.dataclass(frozen=True)
class DrivingAverages:
    """Rounded weekly averages of the daily scores."""

    acceleration: int
    braking: int
    efficiency: int


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def weekly_averages(driving_data: Sequence[DrivingAnalyticsData]) -> DrivingAverages:
    """Average each score over *driving_data*; all zero when it is empty."""
    return DrivingAverages(
        acceleration=round(_mean([day.acceleration for day in driving_data])),
        braking=round(_mean([day.braking for day in driving_data])),
        efficiency=round(_mean([day.efficiency for day in driving_data])),
    )


def average_driving_score(driving_data: Sequence[DrivingAnalyticsData]) -> int:
    return round(_mean([day.score for day in driving_data]))


def average_tire_pressure(car: CarData) -> float:
    return car.tire_pressure.average


def overall_health(car: CarData) -> float:
    """Battery health capped at 50 whenever the engine or brakes are not OK."""
    engine = 100 if car.engine_status == SystemStatus.OK else _DEGRADED_HEALTH
    brakes = 100 if car.brakes_status == SystemStatus.OK else _DEGRADED_HEALTH
    return min(car.battery_health, engine, brakes)


def vehicle_type(car: CarData) -> str:
    """``"EV"`` or ``"ICE"``."""
    return "EV" if car.make in EV_MAKES else "ICE"


def sparkline_points(values: Sequence[float], *, width: float = 100, height: float = 24) -> list[tuple[float, float]]:
    """Polyline coordinates for a sparkline of *values*.

    x spreads evenly over ``width``; y is inverted so the maximum sits at
    0 and the minimum at ``height``. A flat series draws along the bottom.
    Fewer than two values produce no line.
    """
    if len(values) < 2:
        return []
    low = min(values)
    span = (max(values) - low) or 1
    last = len(values) - 1
    return [(i / last * width, height - (value - low) / span * height) for i, value in enumerate(values)]
