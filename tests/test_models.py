from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from automind.models import (
    CarData,
    ChatMessage,
    DiagnosticEvent,
    GeoLocation,
    InitialAppData,
    MaintenanceItem,
    MaintenanceStatus,
    OptimizedRouteResult,
    Sender,
    SystemStatus,
)
from automind.models._base import parse_timestamp


def _car_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "make": "Ford",
        "model": "F-150",
        "year": 2020,
        "vin": "1FTFW1E50LFA00000",
        "odometer": 54000,
        "fuelLevel": 40,
        "batteryHealth": 90,
        "tirePressure": {"frontLeft": 35, "frontRight": 35, "rearLeft": 36, "rearRight": 38},
    }
    payload.update(overrides)
    return payload


def test_parse_timestamp_accepts_seconds_and_milliseconds() -> None:
    expected = datetime(2024, 1, 1, tzinfo=UTC)
    assert parse_timestamp(1704067200) == expected
    assert parse_timestamp(1704067200000) == expected
    assert parse_timestamp(datetime(2024, 1, 1)) == expected
    assert parse_timestamp(None) is None


def test_car_data_parses_camel_case() -> None:
    car = CarData.model_validate(_car_payload(engineStatus="Warning", faultCodes=["P0300"]))

    assert car.fuel_level == 40
    assert car.engine_status is SystemStatus.WARNING
    assert car.brakes_status is SystemStatus.OK
    assert car.tire_pressure.average == 36
    assert car.display_name == "2020 Ford F-150"
    assert car.has_faults


def test_car_data_rejects_out_of_range_levels() -> None:
    with pytest.raises(ValidationError):
        CarData.model_validate(_car_payload(fuelLevel=120))


def test_maintenance_item_clamps_life_and_rounds_km() -> None:
    item = MaintenanceItem.model_validate(
        {"component": "Brake Pads", "lifeRemaining": 1.4, "nextServiceKm": 2500.6, "status": "Soon"}
    )

    assert item.life_remaining == 1.0
    assert item.next_service_km == 2501
    assert item.status is MaintenanceStatus.SOON
    assert item.life_percent == 100
    assert item.ai_insight is None


def test_maintenance_item_rejects_unknown_status() -> None:
    with pytest.raises(ValidationError):
        MaintenanceItem.model_validate(
            {"component": "Oil", "lifeRemaining": 0.5, "nextServiceKm": 100, "status": "Later"}
        )


def test_initial_app_data_requires_all_sections() -> None:
    with pytest.raises(ValidationError):
        InitialAppData.model_validate_json('{"dashboardInsight": "Drive safe."}')


def test_initial_app_data_explanations_by_code() -> None:
    data = InitialAppData.model_validate(
        {
            "maintenanceSchedule": [],
            "dashboardInsight": "All good.",
            "initialGreeting": {"text": "Hi!", "suggestions": ["a", "b", "c"]},
            "faultCodeExplanations": [{"code": "P0D27", "explanation": "<p>Low voltage</p>"}],
        }
    )

    assert data.explanations_by_code() == {"P0D27": "<p>Low voltage</p>"}
    assert data.initial_greeting.suggestions == ["a", "b", "c"]


def test_chat_message_api_role() -> None:
    assert ChatMessage(sender=Sender.AI, text="hi").api_role == "model"
    assert ChatMessage(sender=Sender.USER, text="hi").api_role == "user"


def test_diagnostic_event_timestamp_from_epoch_ms() -> None:
    event = DiagnosticEvent.model_validate(
        {
            "id": "evt_9",
            "timestamp": 1704067200000,
            "faultCodes": ["U0100"],
            "environmentalData": {"outsideTemp": -3, "altitude": 10},
        }
    )

    assert event.timestamp == datetime(2024, 1, 1, tzinfo=UTC)
    assert event.environmental_data.outside_temp == -3
    assert event.sensor_snapshot == []


def test_optimized_route_result_from_json() -> None:
    result = OptimizedRouteResult.model_validate_json(
        '{"optimizedRoute": [{"lat": 37.1, "lng": -122.2}], "timeSavedMinutes": 4, "energySavedPercent": 7}'
    )

    assert result.optimized_route[0].lng == -122.2
    assert result.time_saved_minutes == 4
    assert result.to_api_dict()["energySavedPercent"] == 7


def test_geolocation_accepts_provider_spellings() -> None:
    assert GeoLocation.model_validate({"latitude": 1.5, "longitude": 2.5}).longitude == 2.5
    located = GeoLocation.model_validate({"lat": 1.5, "lon": 2.5, "accuracy_radius": 20})
    assert (located.latitude, located.longitude, located.accuracy) == (1.5, 2.5, 20)

    with pytest.raises(ValidationError):
        GeoLocation.model_validate({"city": "Nowhere"})


def test_initial_app_data_rejects_blank_insight() -> None:
    with pytest.raises(ValidationError):
        InitialAppData.model_validate(
            {
                "maintenanceSchedule": [],
                "dashboardInsight": "",
                "initialGreeting": {"text": "Hi!", "suggestions": []},
                "faultCodeExplanations": [],
            }
        )
