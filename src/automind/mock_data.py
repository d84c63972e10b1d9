"""Demo telemetry used to populate the dashboard.

Each accessor returns fresh model instances. Diagnostic history
timestamps are relative to *now*.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from automind.models.analytics import DrivingAnalyticsData, RoutePoint, TripDetails
from automind.models.diagnostics import DiagnosticEvent, SensorDataStream
from automind.models.eco import EcoSuggestion
from automind.models.maintenance import MaintenanceItem
from automind.models.vehicle import CarData


def _stream(name: str, unit: str, values: list[float]) -> SensorDataStream:
    return SensorDataStream.model_validate(
        {
            "name": name,
            "unit": unit,
            "readings": [{"timestamp": i, "value": value} for i, value in enumerate(values, start=1)],
        }
    )


def car_data() -> CarData:
    return CarData.model_validate(
        {
            "make": "Tesla",
            "model": "Model Y",
            "year": 2023,
            "vin": "5YJYGDEE8PF0XXXXX",
            "odometer": 12543,
            "fuelLevel": 88,
            "batteryHealth": 98,
            "tirePressure": {"frontLeft": 42, "frontRight": 42, "rearLeft": 43, "rearRight": 43},
            "engineStatus": "Warning",
            "transmissionStatus": "OK",
            "brakesStatus": "OK",
            # Battery Charger Input Voltage Too Low
            "faultCodes": ["P0D27"],
        }
    )


def driving_data() -> list[DrivingAnalyticsData]:
    week = [
        ("Mon", 85, 92, 78),
        ("Tue", 88, 95, 82),
        ("Wed", 76, 88, 75),
        ("Thu", 91, 94, 85),
        ("Fri", 82, 90, 79),
        ("Sat", 95, 98, 91),
        ("Sun", 93, 96, 88),
    ]
    return [
        DrivingAnalyticsData(name=name, acceleration=acc, braking=brk, efficiency=eff) for name, acc, brk, eff in week
    ]


def standard_maintenance() -> list[MaintenanceItem]:
    """Manufacturer schedule used as the forecast baseline and fallback."""
    items = [
        ("Tire Rotation", 0.25, 2500, "Soon"),
        ("Cabin Air Filter", 0.65, 7500, "OK"),
        ("Brake Fluid", 0.80, 15000, "OK"),
        ("Battery Coolant", 0.90, 40000, "OK"),
    ]
    return [
        MaintenanceItem.model_validate(
            {"component": component, "lifeRemaining": life, "nextServiceKm": km, "status": status}
        )
        for component, life, km, status in items
    ]


def eco_suggestions() -> list[EcoSuggestion]:
    return [
        EcoSuggestion.model_validate(item)
        for item in (
            {
                "title": "Optimal Charging",
                "description": "Charge between 20-80% to maximize battery lifespan. Schedule charging during off-peak hours.",
                "impact": "High",
            },
            {
                "title": "Tire Pressure",
                "description": "Properly inflated tires can improve efficiency by up to 3%. Check monthly.",
                "impact": "Medium",
            },
            {
                "title": "Smooth Driving",
                "description": "Avoid rapid acceleration and hard braking to conserve energy.",
                "impact": "High",
            },
            {
                "title": "Reduce Idle Time",
                "description": "Minimize time spent idling with climate control on to save energy.",
                "impact": "Low",
            },
        )
    ]


def route_history() -> list[RoutePoint]:
    coords = [
        (37.7749, -122.4194),
        (37.7752, -122.4162),
        (37.7765, -122.4132),
        (37.7789, -122.4111),
        (37.7815, -122.4095),
        (37.7832, -122.4071),
        (37.7845, -122.4050),
    ]
    return [RoutePoint(lat=lat, lng=lng) for lat, lng in coords]


def trip_details() -> list[TripDetails]:
    return [
        TripDetails(id=1, point_index=1, title="Morning Commute", details="Duration: 25 mins, Efficiency: 92/100"),
        TripDetails(
            id=2,
            point_index=4,
            title="Quick Errand",
            details="Duration: 10 mins, Efficiency: 85/100. One harsh brake.",
        ),
    ]


def live_sensor_data() -> list[SensorDataStream]:
    return [
        _stream("Battery Cell Temp Avg", "°C", [32, 32.1, 32.2, 32.3, 32.2, 32.4, 32.5, 32.6]),
        _stream("Motor RPM", "rpm", [0, 1500, 3000, 2500, 4000, 4200, 3800, 1000]),
        _stream("Front-Right Wheel Vibration", "m/s²", [0.1, 0.12, 0.11, 0.13, 0.12, 0.14, 0.13, 0.15]),
    ]


def diagnostic_history(now: datetime | None = None) -> list[DiagnosticEvent]:
    now = now or datetime.now(UTC)
    return [
        DiagnosticEvent.model_validate(
            {
                "id": "evt_1",
                "timestamp": now - timedelta(days=3),
                "faultCodes": ["P0D27"],
                "environmentalData": {"outsideTemp": 5, "altitude": 1200},
                "sensorSnapshot": [
                    _stream("Charger Input Voltage", "V", [240, 238, 239, 105, 106, 241]),
                    _stream("Battery State of Charge", "%", [45, 46, 47, 47, 47, 48]),
                ],
            }
        ),
        DiagnosticEvent.model_validate(
            {
                "id": "evt_2",
                "timestamp": now - timedelta(days=10),
                "faultCodes": ["U0100"],
                "environmentalData": {"outsideTemp": 25, "altitude": 50},
                "sensorSnapshot": [
                    _stream("CAN Bus Voltage", "V", [2.5, 2.51, 0, 0, 2.49, 2.5]),
                ],
            }
        ),
    ]
