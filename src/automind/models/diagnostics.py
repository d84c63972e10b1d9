"""Sensor streams and diagnostic event history."""

from __future__ import annotations

from pydantic import Field

from automind.models._base import AutoMindModel, EpochTimestamp


class SensorReading(AutoMindModel):
    timestamp: float
    value: float


class SensorDataStream(AutoMindModel):
    name: str
    unit: str
    readings: list[SensorReading] = Field(default_factory=list)

    @property
    def values(self) -> list[float]:
        return [reading.value for reading in self.readings]

    @property
    def latest(self) -> SensorReading | None:
        return self.readings[-1] if self.readings else None


class EnvironmentalData(AutoMindModel):
    outside_temp: float
    """Outside temperature in °C."""
    altitude: float
    """Altitude in meters."""


class DiagnosticEvent(AutoMindModel):
    """A recorded fault occurrence with the conditions around it."""

    id: str
    timestamp: EpochTimestamp
    fault_codes: list[str] = Field(default_factory=list)
    environmental_data: EnvironmentalData
    sensor_snapshot: list[SensorDataStream] = Field(default_factory=list)


class FaultCodeExplanation(AutoMindModel):
    code: str
    explanation: str
    """HTML with "What it Means", "Common Causes" and "What to Do Next" sections."""
