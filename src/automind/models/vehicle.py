"""Vehicle status model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from automind.models._base import AutoMindModel


class SystemStatus(StrEnum):
    OK = "OK"
    WARNING = "Warning"
    CRITICAL = "Critical"


class TirePressure(AutoMindModel):
    """Per-wheel tire pressure in PSI."""

    front_left: float
    front_right: float
    rear_left: float
    rear_right: float

    @property
    def average(self) -> float:
        return (self.front_left + self.front_right + self.rear_left + self.rear_right) / 4


class CarData(AutoMindModel):
    """Snapshot of the vehicle's status.

    For EVs ``fuel_level`` is the battery charge level and
    ``engine_status`` stands for the powertrain.
    """

    make: str
    model: str
    year: int
    vin: str
    odometer: int = Field(ge=0)
    """Odometer reading in km."""
    fuel_level: float = Field(ge=0, le=100)
    """Fuel (or charge) level in percent."""
    battery_health: float = Field(ge=0, le=100)
    """12V/traction battery state of health in percent."""
    tire_pressure: TirePressure
    engine_status: SystemStatus = SystemStatus.OK
    transmission_status: SystemStatus = SystemStatus.OK
    brakes_status: SystemStatus = SystemStatus.OK
    fault_codes: list[str] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        return f"{self.year} {self.make} {self.model}"

    @property
    def has_faults(self) -> bool:
        return bool(self.fault_codes)
