"""High-level async client for AutoMind's AI content."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from automind._api import copilot as _copilot_api
from automind._api import diagnostics as _diagnostics_api
from automind._api import initial as _initial_api
from automind._api import routes as _routes_api
from automind._api._common import QUOTA_UNAVAILABLE_HTML, user_contents
from automind._transport import GeminiTransport, Transport
from automind.config import AutoMindConfig
from automind.exceptions import QuotaExhaustedError
from automind.models.analytics import DrivingAnalyticsData, OptimizedRouteResult, RoutePoint
from automind.models.chat import ChatMessage, CopilotReply
from automind.models.diagnostics import DiagnosticEvent
from automind.models.insights import InitialAppData
from automind.models.maintenance import MaintenanceItem
from automind.models.vehicle import CarData
from automind.quota import QuotaGuard

_logger = logging.getLogger(__name__)


class AutoMindClient:
    """Async client for the dashboard's generated content.

    Every operation checks the quota guard first and, while the quota is
    exhausted, answers with static fallback content without calling the
    API. API failures are logged, fed to the quota guard and likewise
    turned into fallback content, so callers only need to handle
    :class:`QuotaExhaustedError` from :meth:`get_optimized_route`.

    Usage::

        client = AutoMindClient(AutoMindConfig.from_env())
        reply = await client.get_copilot_response("How do brakes work?", car, history)
    """

    def __init__(
        self,
        config: AutoMindConfig,
        *,
        transport: Transport | None = None,
        quota: QuotaGuard | None = None,
    ) -> None:
        self._config = config
        self._transport: Transport = transport if transport is not None else GeminiTransport(config)
        self._quota = quota if quota is not None else QuotaGuard(config.quota_file, reset_hours=config.quota_reset_hours)

    @property
    def config(self) -> AutoMindConfig:
        return self._config

    @property
    def quota(self) -> QuotaGuard:
        return self._quota

    # ------------------------------------------------------------------
    # Start-up
    # ------------------------------------------------------------------

    async def get_initial_app_data(
        self,
        car: CarData,
        driving_data: Sequence[DrivingAnalyticsData],
        standard_maintenance: Sequence[MaintenanceItem],
    ) -> InitialAppData:
        """Maintenance forecast, insight, greeting and fault explanations in one call."""
        if self._quota.is_exhausted():
            return _initial_api.fallback_initial_data(standard_maintenance)

        prompt = _initial_api.build_initial_prompt(car, driving_data, standard_maintenance)
        try:
            text = await self._transport.generate(
                user_contents(prompt),
                response_schema=_initial_api.INITIAL_SCHEMA,
                operation=_initial_api.OPERATION,
            )
            return _initial_api.parse_initial_response(text)
        except Exception as exc:
            _logger.error("Initial app data request failed: %s", exc, exc_info=True)
            self._quota.handle_api_error(exc)
            return _initial_api.fallback_initial_data(standard_maintenance)

    # ------------------------------------------------------------------
    # Copilot
    # ------------------------------------------------------------------

    async def get_copilot_response(
        self,
        message: str,
        car: CarData,
        history: Sequence[ChatMessage],
    ) -> CopilotReply:
        """Answer *message* in the context of the whole *history*.

        *car* is accepted for parity with the other operations; the
        copilot deliberately answers about any vehicle unless the user
        refers to their own.
        """
        if self._quota.is_exhausted():
            return _copilot_api.quota_reply()

        try:
            text = await self._transport.generate(
                _copilot_api.build_copilot_contents(message, history),
                system_instruction=_copilot_api.SYSTEM_INSTRUCTION,
                response_schema=_copilot_api.COPILOT_SCHEMA,
                operation=_copilot_api.OPERATION,
            )
            return _copilot_api.parse_copilot_response(text)
        except Exception as exc:
            _logger.error("Copilot request failed for %s: %s", car.vin, exc, exc_info=True)
            is_quota = self._quota.handle_api_error(exc)
            return _copilot_api.error_reply(quota=is_quota)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    async def get_fault_code_explanation(self, code: str, car: CarData) -> str:
        """HTML explanation of a single fault *code*."""
        if self._quota.is_exhausted():
            return QUOTA_UNAVAILABLE_HTML

        try:
            return await self._transport.generate(
                user_contents(_diagnostics_api.build_fault_code_prompt(code, car)),
                operation=_diagnostics_api.FAULT_CODE_OPERATION,
            )
        except Exception as exc:
            _logger.error("Fault code explanation failed for %s: %s", code, exc, exc_info=True)
            self._quota.handle_api_error(exc)
            return _diagnostics_api.FAULT_CODE_ERROR_HTML

    async def get_advanced_diagnostic_analysis(self, event: DiagnosticEvent, car: CarData) -> str:
        """HTML root-cause report correlating an event's codes, environment and sensors."""
        if self._quota.is_exhausted():
            return QUOTA_UNAVAILABLE_HTML

        try:
            return await self._transport.generate(
                user_contents(_diagnostics_api.build_event_analysis_prompt(event, car)),
                operation=_diagnostics_api.EVENT_ANALYSIS_OPERATION,
            )
        except Exception as exc:
            _logger.error("Advanced analysis failed for %s: %s", event.id, exc, exc_info=True)
            self._quota.handle_api_error(exc)
            return _diagnostics_api.EVENT_ANALYSIS_ERROR_HTML

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    async def get_optimized_route(self, route: Sequence[RoutePoint], car: CarData) -> OptimizedRouteResult:
        """Suggest a more efficient variant of *route*.

        Raises
        ------
        QuotaExhaustedError
            While AI features are paused.
        """
        if self._quota.is_exhausted():
            raise QuotaExhaustedError(
                "AI features are temporarily unavailable due to exceeded API quota.",
                operation=_routes_api.OPERATION,
            )

        try:
            text = await self._transport.generate(
                user_contents(_routes_api.build_route_prompt(route, car)),
                response_schema=_routes_api.ROUTE_SCHEMA,
                operation=_routes_api.OPERATION,
            )
            return _routes_api.parse_route_response(text)
        except Exception as exc:
            _logger.error("Route optimization failed: %s", exc, exc_info=True)
            self._quota.handle_api_error(exc)
            return _routes_api.fallback_route(route)
