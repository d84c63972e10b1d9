from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest
from google.genai import types

from automind import mock_data
from automind._api import copilot as copilot_api
from automind._api import initial as initial_api
from automind._api._common import QUOTA_UNAVAILABLE_HTML
from automind.client import AutoMindClient
from automind.config import AutoMindConfig
from automind.exceptions import AiServiceError, QuotaExhaustedError
from automind.models.chat import ChatMessage, Sender
from automind.quota import QuotaGuard


class _FakeTransport:
    def __init__(self, reply: str | BaseException) -> None:
        self._reply = reply
        self.calls: list[dict[str, Any]] = []

    async def generate(
        self,
        contents: Sequence[types.Content],
        *,
        system_instruction: str | None = None,
        response_schema: types.Schema | None = None,
        operation: str = "",
    ) -> str:
        self.calls.append(
            {
                "contents": list(contents),
                "system_instruction": system_instruction,
                "response_schema": response_schema,
                "operation": operation,
            }
        )
        if isinstance(self._reply, BaseException):
            raise self._reply
        return self._reply


def _client(tmp_path: Path, transport: _FakeTransport) -> AutoMindClient:
    config = AutoMindConfig(api_key="test-key", state_dir=tmp_path)
    return AutoMindClient(config, transport=transport, quota=QuotaGuard(config.quota_file, reset_hours=12))


_INITIAL_REPLY = {
    "maintenanceSchedule": [
        {
            "component": "Tire Rotation",
            "lifeRemaining": 0.2,
            "nextServiceKm": 2000,
            "aiInsight": "Hard cornering on weekends.",
            "preventativeTip": "Rotate at the next charge stop.",
            "status": "Soon",
        }
    ],
    "dashboardInsight": "Tire rotation is due soon.",
    "initialGreeting": {"text": "Hi! How can I help?", "suggestions": ["a", "b", "c"]},
    "faultCodeExplanations": [{"code": "P0D27", "explanation": "<h4>What it Means</h4>"}],
}


@pytest.mark.asyncio
async def test_initial_app_data_parses_reply(tmp_path: Path) -> None:
    transport = _FakeTransport(json.dumps(_INITIAL_REPLY))
    client = _client(tmp_path, transport)

    data = await client.get_initial_app_data(
        mock_data.car_data(), mock_data.driving_data(), mock_data.standard_maintenance()
    )

    assert data.dashboard_insight == "Tire rotation is due soon."
    assert data.maintenance_schedule[0].ai_insight == "Hard cornering on weekends."
    assert data.explanations_by_code() == {"P0D27": "<h4>What it Means</h4>"}

    call = transport.calls[0]
    assert call["operation"] == initial_api.OPERATION
    assert call["response_schema"] is initial_api.INITIAL_SCHEMA
    prompt = call["contents"][0].parts[0].text
    assert "Active Fault Codes: P0D27" in prompt
    assert "Tire Rotation: 25% life remaining" in prompt


@pytest.mark.asyncio
async def test_initial_app_data_falls_back_on_invalid_structure(tmp_path: Path) -> None:
    client = _client(tmp_path, _FakeTransport('{"dashboardInsight": "only this"}'))
    standard = mock_data.standard_maintenance()

    data = await client.get_initial_app_data(mock_data.car_data(), mock_data.driving_data(), standard)

    assert data.maintenance_schedule == standard
    assert data.dashboard_insight == initial_api.WELCOME_INSIGHT
    assert data.initial_greeting.text == initial_api.LIMITED_GREETING
    assert data.fault_code_explanations == []
    assert not client.quota.is_exhausted()


@pytest.mark.asyncio
async def test_quota_error_pauses_further_calls(tmp_path: Path) -> None:
    transport = _FakeTransport(AiServiceError("429 RESOURCE_EXHAUSTED", status_code=429))
    client = _client(tmp_path, transport)
    car = mock_data.car_data()

    reply = await client.get_copilot_response("hello", car, [])

    assert reply.text == copilot_api.QUOTA_TEXT
    assert reply.suggestions == []
    assert client.quota.is_exhausted()

    paused = await client.get_copilot_response("hello again", car, [])
    assert paused.text == copilot_api.QUOTA_TEXT
    assert paused.suggestions == list(copilot_api.QUOTA_SUGGESTIONS)
    assert await client.get_fault_code_explanation("P0D27", car) == QUOTA_UNAVAILABLE_HTML
    assert await client.get_advanced_diagnostic_analysis(mock_data.diagnostic_history()[0], car) == (
        QUOTA_UNAVAILABLE_HTML
    )
    with pytest.raises(QuotaExhaustedError):
        await client.get_optimized_route(mock_data.route_history(), car)

    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_copilot_sends_history_then_message(tmp_path: Path) -> None:
    transport = _FakeTransport('{"text": "<p>Sure.</p>", "suggestions": ["Why?", "How?"]}')
    client = _client(tmp_path, transport)
    history = [
        ChatMessage(sender=Sender.AI, text="Hi! How can I help?"),
        ChatMessage(sender=Sender.USER, text="Tell me about the 1998 Honda Civic."),
        ChatMessage(sender=Sender.AI, text="A classic."),
    ]

    reply = await client.get_copilot_response("What engine?", mock_data.car_data(), history)

    assert reply.text == "<p>Sure.</p>"
    assert reply.suggestions == ["Why?", "How?"]
    call = transport.calls[0]
    assert call["system_instruction"] == copilot_api.SYSTEM_INSTRUCTION
    assert [content.role for content in call["contents"]] == ["model", "user", "model", "user"]
    assert call["contents"][-1].parts[0].text == "What engine?"


@pytest.mark.asyncio
async def test_copilot_connection_error_reply(tmp_path: Path) -> None:
    client = _client(tmp_path, _FakeTransport(RuntimeError("network down")))

    reply = await client.get_copilot_response("hello", mock_data.car_data(), [])

    assert reply.text == copilot_api.CONNECTION_ERROR_TEXT
    assert reply.suggestions == []
    assert not client.quota.is_exhausted()


@pytest.mark.asyncio
async def test_fault_code_explanation_returns_html(tmp_path: Path) -> None:
    transport = _FakeTransport("<h4>What it Means</h4><p>Low charger voltage.</p>")
    client = _client(tmp_path, transport)

    html = await client.get_fault_code_explanation("P0D27", mock_data.car_data())

    assert html.startswith("<h4>What it Means</h4>")
    prompt = transport.calls[0]["contents"][0].parts[0].text
    assert '"P0D27" for a 2023 Tesla Model Y' in prompt
    assert transport.calls[0]["response_schema"] is None


@pytest.mark.asyncio
async def test_advanced_analysis_prompt_includes_event_data(tmp_path: Path) -> None:
    transport = _FakeTransport("<h4>AI Root Cause Analysis</h4>")
    client = _client(tmp_path, transport)
    event = mock_data.diagnostic_history()[0]

    html = await client.get_advanced_diagnostic_analysis(event, mock_data.car_data())

    assert html == "<h4>AI Root Cause Analysis</h4>"
    prompt = transport.calls[0]["contents"][0].parts[0].text
    assert "Outside Temp: 5°C, Altitude: 1200m" in prompt
    assert "Charger Input Voltage: Last reading 241.00 V" in prompt


@pytest.mark.asyncio
async def test_advanced_analysis_error_html(tmp_path: Path) -> None:
    client = _client(tmp_path, _FakeTransport(AiServiceError("server error", status_code=500)))

    html = await client.get_advanced_diagnostic_analysis(mock_data.diagnostic_history()[1], mock_data.car_data())

    assert "could not be completed" in html


@pytest.mark.asyncio
async def test_optimized_route_parses_reply(tmp_path: Path) -> None:
    reply = {
        "optimizedRoute": [{"lat": 37.775, "lng": -122.419}, {"lat": 37.784, "lng": -122.405}],
        "timeSavedMinutes": 3,
        "energySavedPercent": 6,
    }
    transport = _FakeTransport(json.dumps(reply))
    client = _client(tmp_path, transport)

    result = await client.get_optimized_route(mock_data.route_history(), mock_data.car_data())

    assert result.time_saved_minutes == 3
    assert len(result.optimized_route) == 2
    assert "Vehicle Type: EV" in transport.calls[0]["contents"][0].parts[0].text


@pytest.mark.asyncio
async def test_optimized_route_falls_back_to_reversed_route(tmp_path: Path) -> None:
    client = _client(tmp_path, _FakeTransport("not json"))
    route = mock_data.route_history()

    result = await client.get_optimized_route(route, mock_data.car_data())

    assert result.optimized_route == list(reversed(route))
    assert (result.time_saved_minutes, result.energy_saved_percent) == (5, 10)


@pytest.mark.asyncio
async def test_initial_app_data_falls_back_on_empty_insight(tmp_path: Path) -> None:
    client = _client(tmp_path, _FakeTransport(json.dumps({**_INITIAL_REPLY, "dashboardInsight": ""})))

    data = await client.get_initial_app_data(
        mock_data.car_data(), mock_data.driving_data(), mock_data.standard_maintenance()
    )

    assert data.dashboard_insight == initial_api.WELCOME_INSIGHT
    assert data.initial_greeting.text == initial_api.LIMITED_GREETING
