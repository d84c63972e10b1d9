from __future__ import annotations

from typing import Any

import aiohttp
import pytest

from automind.config import AutoMindConfig
from automind.exceptions import AutoMindError, LocationError
from automind.location import PERMISSION_DENIED_MESSAGE, TIMEOUT_MESSAGE, LocationProvider


class _FakeResponse:
    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self._body = body

    async def text(self) -> str:
        return self._body

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


class _FakeSession:
    def __init__(self, status: int = 200, body: str = "", error: BaseException | None = None) -> None:
        self._status = status
        self._body = body
        self._error = error
        self.urls: list[str] = []

    def get(self, url: str, **_kwargs: Any) -> _FakeResponse:
        self.urls.append(url)
        if self._error is not None:
            raise self._error
        return _FakeResponse(self._status, self._body)


def _config() -> AutoMindConfig:
    return AutoMindConfig(geolocation_url="https://geo.example/json")


@pytest.mark.asyncio
async def test_current_location_parses_coordinates() -> None:
    session = _FakeSession(body='{"ip": "203.0.113.7", "latitude": 37.77, "longitude": -122.42}')

    async with LocationProvider(_config(), session=session) as provider:  # type: ignore[arg-type]
        location = await provider.current_location()

    assert (location.latitude, location.longitude) == (37.77, -122.42)
    assert session.urls == ["https://geo.example/json"]


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [401, 403])
async def test_denied_status_maps_to_permission_denied(status: int) -> None:
    provider = LocationProvider(_config(), session=_FakeSession(status=status, body="denied"))  # type: ignore[arg-type]

    with pytest.raises(LocationError) as exc_info:
        await provider.current_location()

    assert exc_info.value.reason == "permission_denied"
    assert str(exc_info.value) == PERMISSION_DENIED_MESSAGE


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "session",
    [
        _FakeSession(status=500, body="oops"),
        _FakeSession(body='{"error": true, "reason": "RateLimited"}'),
        _FakeSession(body="<html>"),
        _FakeSession(error=aiohttp.ClientConnectionError("refused")),
    ],
)
async def test_failures_map_to_position_unavailable(session: _FakeSession) -> None:
    provider = LocationProvider(_config(), session=session)  # type: ignore[arg-type]

    with pytest.raises(LocationError) as exc_info:
        await provider.current_location()

    assert exc_info.value.reason == "position_unavailable"


@pytest.mark.asyncio
async def test_timeout_maps_to_timeout() -> None:
    provider = LocationProvider(_config(), session=_FakeSession(error=TimeoutError()))  # type: ignore[arg-type]

    with pytest.raises(LocationError) as exc_info:
        await provider.current_location()

    assert exc_info.value.reason == "timeout"
    assert str(exc_info.value) == TIMEOUT_MESSAGE


@pytest.mark.asyncio
async def test_provider_requires_context_manager() -> None:
    with pytest.raises(AutoMindError, match="not initialized"):
        await LocationProvider(_config()).current_location()
