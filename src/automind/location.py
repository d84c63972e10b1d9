"""Approximate current location over HTTP."""

from __future__ import annotations

import json
import logging
from typing import Any

import aiohttp
from pydantic import ValidationError

from automind.config import AutoMindConfig
from automind.exceptions import AutoMindError, LocationError
from automind.models.location import GeoLocation

_logger = logging.getLogger(__name__)

PERMISSION_DENIED_MESSAGE = (
    "Live map features are disabled because location access was denied. "
    "To enable them, please update your settings."
)
POSITION_UNAVAILABLE_MESSAGE = "Your location could not be determined at this time. Please try again later."
TIMEOUT_MESSAGE = "The request for your location timed out. Please check your connection and try again."

_DENIED_STATUSES = frozenset({401, 403})


class LocationProvider:
    """Look up the host's approximate location from an IP geolocation service.

    Usage::

        async with LocationProvider(config) as provider:
            here = await provider.current_location()
    """

    def __init__(self, config: AutoMindConfig, *, session: aiohttp.ClientSession | None = None) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session

    async def __aenter__(self) -> LocationProvider:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    def _require_session(self) -> aiohttp.ClientSession:
        if self._http_session is None:
            raise AutoMindError("Provider not initialized. Use 'async with LocationProvider(...) as provider:'")
        return self._http_session

    async def current_location(self) -> GeoLocation:
        """Return the current coordinates.

        Raises
        ------
        LocationError
            With ``reason`` ``"permission_denied"``, ``"timeout"`` or
            ``"position_unavailable"`` and a display message.
        """
        session = self._require_session()
        url = self._config.geolocation_url
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)

        _logger.debug("GET %s", url)
        try:
            async with session.get(url, timeout=timeout) as resp:
                text = await resp.text()
                if resp.status in _DENIED_STATUSES:
                    raise LocationError(PERMISSION_DENIED_MESSAGE, reason="permission_denied")
                if resp.status != 200:
                    _logger.warning("Location lookup returned HTTP %s: %s", resp.status, text[:200])
                    raise LocationError(POSITION_UNAVAILABLE_MESSAGE, reason="position_unavailable")
        except LocationError:
            raise
        except TimeoutError as exc:
            raise LocationError(TIMEOUT_MESSAGE, reason="timeout") from exc
        except aiohttp.ClientError as exc:
            _logger.warning("Location lookup failed: %s", exc)
            raise LocationError(POSITION_UNAVAILABLE_MESSAGE, reason="position_unavailable") from exc

        try:
            return GeoLocation.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValidationError) as exc:
            _logger.warning("Location lookup returned no usable coordinates: %s", text[:200])
            raise LocationError(POSITION_UNAVAILABLE_MESSAGE, reason="position_unavailable") from exc
