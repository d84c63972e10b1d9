"""Dashboard state controller.

Holds what every view renders and runs the view actions (sending chat
messages, analysing diagnostic events, optimizing the route, locating
the vehicle). Rendering is left to the front end.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence

from automind import analytics, mock_data
from automind.client import AutoMindClient
from automind.exceptions import AutoMindError, LocationError
from automind.location import LocationProvider
from automind.models.analytics import DrivingAnalyticsData, OptimizedRouteResult, RoutePoint, TripDetails
from automind.models.chat import ChatMessage, CopilotReply, Sender
from automind.models.diagnostics import DiagnosticEvent, SensorDataStream
from automind.models.eco import EcoSuggestion
from automind.models.location import GeoLocation
from automind.models.maintenance import MaintenanceItem
from automind.models.tabs import Tab
from automind.models.vehicle import CarData

_logger = logging.getLogger(__name__)

CHAT_ERROR_TEXT = "Sorry, I'm having trouble connecting right now. Please try again later."
ANALYSIS_ERROR_HTML = "<p>Could not perform AI analysis for this event. Please try again later.</p>"
ROUTE_ERROR_TEXT = "Sorry, we couldn't optimize the route at this time."
LOCATION_UNSUPPORTED_TEXT = (
    "Geolocation is not supported on this system. Live location features will be disabled."
)


@dataclasses.dataclass(frozen=True)
class OverviewStats:
    """Headline figures for the dashboard cards."""

    fuel_level: float
    battery_health: float
    average_tire_pressure: float
    odometer: int
    overall_health: float


class DashboardApp:
    """State and actions behind the seven dashboard views.

    All telemetry defaults to :mod:`automind.mock_data`.
    """

    def __init__(
        self,
        client: AutoMindClient,
        *,
        car: CarData | None = None,
        driving_data: Sequence[DrivingAnalyticsData] | None = None,
        standard_maintenance: Sequence[MaintenanceItem] | None = None,
        eco_suggestions: Sequence[EcoSuggestion] | None = None,
        route_history: Sequence[RoutePoint] | None = None,
        trip_details: Sequence[TripDetails] | None = None,
        live_sensor_data: Sequence[SensorDataStream] | None = None,
        diagnostic_history: Sequence[DiagnosticEvent] | None = None,
        location_provider: LocationProvider | None = None,
    ) -> None:
        self._client = client
        self._location_provider = location_provider

        self.car = car or mock_data.car_data()
        self.driving_data = list(driving_data or mock_data.driving_data())
        self.standard_maintenance = list(standard_maintenance or mock_data.standard_maintenance())
        self.eco_suggestions = list(eco_suggestions or mock_data.eco_suggestions())
        self.route_history = list(route_history or mock_data.route_history())
        self.trip_details = list(trip_details or mock_data.trip_details())
        self.live_sensor_data = list(live_sensor_data or mock_data.live_sensor_data())
        self.diagnostic_history = list(diagnostic_history or mock_data.diagnostic_history())

        self.active_tab = Tab.DASHBOARD
        self.maintenance_data: list[MaintenanceItem] = []
        self.dashboard_insight = ""
        self.chat_history: list[ChatMessage] = []
        self.fault_code_explanations: dict[str, str] = {}
        self.is_loading = True
        self.is_copilot_loading = False

        self.analysis_results: dict[str, str] = {}
        self.expanded_event_id: str | None = None
        self.loading_analysis_id: str | None = None

        self.optimized_route: OptimizedRouteResult | None = None
        self.route_error: str | None = None
        self.is_optimizing = False

        self.location: GeoLocation | None = None
        self.location_error: str | None = None

    @property
    def client(self) -> AutoMindClient:
        return self._client

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def select_tab(self, tab: Tab | str) -> Tab:
        self.active_tab = Tab(tab)
        return self.active_tab

    # ------------------------------------------------------------------
    # Start-up
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Fetch the consolidated start-up content.

        The client already falls back to static content on failure, so
        this only logs unexpected errors.
        """
        self.is_loading = True
        try:
            data = await self._client.get_initial_app_data(self.car, self.driving_data, self.standard_maintenance)
            self.maintenance_data = list(data.maintenance_schedule)
            self.dashboard_insight = data.dashboard_insight
            self.chat_history = [
                ChatMessage(
                    sender=Sender.AI,
                    text=data.initial_greeting.text,
                    suggestions=list(data.initial_greeting.suggestions),
                )
            ]
            self.fault_code_explanations = data.explanations_by_code()
        except Exception:
            _logger.error("Failed to fetch initial app data", exc_info=True)
        finally:
            self.is_loading = False

    @property
    def is_loading_explanations(self) -> bool:
        return self.is_loading and self.car.has_faults

    # ------------------------------------------------------------------
    # Copilot
    # ------------------------------------------------------------------

    async def send_message(self, message: str) -> CopilotReply:
        """Send *message* to the copilot and append both turns to the history.

        Suggestions on the previous AI message are dropped once the user
        replies. The copilot sees the history as it was before *message*.
        """
        current_history = list(self.chat_history)

        history = list(self.chat_history)
        if history and history[-1].sender == Sender.AI and history[-1].suggestions:
            history[-1] = history[-1].model_copy(update={"suggestions": None})
        history.append(ChatMessage(sender=Sender.USER, text=message))
        self.chat_history = history

        self.is_copilot_loading = True
        try:
            reply = await self._client.get_copilot_response(message, self.car, current_history)
        except Exception:
            _logger.error("Copilot request raised", exc_info=True)
            reply = CopilotReply(text=CHAT_ERROR_TEXT, suggestions=[])
        finally:
            self.is_copilot_loading = False

        self.chat_history.append(ChatMessage(sender=Sender.AI, text=reply.text, suggestions=list(reply.suggestions)))
        return reply

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def find_event(self, event_id: str) -> DiagnosticEvent:
        for event in self.diagnostic_history:
            if event.id == event_id:
                return event
        raise KeyError(event_id)

    async def toggle_event_analysis(self, event_id: str) -> str | None:
        """Expand or collapse an event's AI analysis.

        Expanding fetches the analysis once and caches it. Returns the
        analysis HTML when expanded, ``None`` when collapsed.
        """
        if self.expanded_event_id == event_id:
            self.expanded_event_id = None
            return None

        event = self.find_event(event_id)
        self.expanded_event_id = event_id
        if event_id not in self.analysis_results:
            self.loading_analysis_id = event_id
            try:
                self.analysis_results[event_id] = await self._client.get_advanced_diagnostic_analysis(event, self.car)
            except Exception:
                _logger.error("Failed to fetch advanced analysis for %s", event_id, exc_info=True)
                self.analysis_results[event_id] = ANALYSIS_ERROR_HTML
            finally:
                self.loading_analysis_id = None
        return self.analysis_results[event_id]

    @property
    def diagnostics_summary(self) -> str:
        if self.car.has_faults:
            return "Attention needed for active fault codes."
        return "All systems are operating normally."

    def sensor_sparklines(self, *, width: float = 100, height: float = 24) -> dict[str, list[tuple[float, float]]]:
        return {
            stream.name: analytics.sparkline_points(stream.values, width=width, height=height)
            for stream in self.live_sensor_data
        }

    # ------------------------------------------------------------------
    # Analytics and routes
    # ------------------------------------------------------------------

    @property
    def average_driving_score(self) -> int:
        return analytics.average_driving_score(self.driving_data)

    def trip_markers(self) -> list[tuple[TripDetails, RoutePoint]]:
        """Trips paired with the route point they are pinned to; out-of-range indexes are skipped."""
        return [
            (trip, self.route_history[trip.point_index])
            for trip in self.trip_details
            if trip.point_index < len(self.route_history)
        ]

    async def optimize_route(self) -> OptimizedRouteResult | None:
        """Ask for a more efficient route; needs at least two route points."""
        if len(self.route_history) < 2:
            return None
        self.is_optimizing = True
        self.optimized_route = None
        self.route_error = None
        try:
            self.optimized_route = await self._client.get_optimized_route(self.route_history, self.car)
        except AutoMindError as exc:
            _logger.warning("Failed to optimize route: %s", exc)
            self.route_error = ROUTE_ERROR_TEXT
        finally:
            self.is_optimizing = False
        return self.optimized_route

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------

    async def locate(self) -> GeoLocation | None:
        if self._location_provider is None:
            self.location_error = LOCATION_UNSUPPORTED_TEXT
            return None
        try:
            self.location = await self._location_provider.current_location()
            self.location_error = None
        except LocationError as exc:
            _logger.warning("User location request failed: %s", exc.reason)
            self.location = None
            self.location_error = str(exc)
        return self.location

    def dismiss_location_error(self) -> None:
        self.location_error = None

    # ------------------------------------------------------------------
    # Overview
    # ------------------------------------------------------------------

    def overview(self) -> OverviewStats:
        return OverviewStats(
            fuel_level=self.car.fuel_level,
            battery_health=self.car.battery_health,
            average_tire_pressure=analytics.average_tire_pressure(self.car),
            odometer=self.car.odometer,
            overall_health=analytics.overall_health(self.car),
        )

    @property
    def welcome_line(self) -> str:
        return f"Welcome back! Here's the latest on your {self.car.make} {self.car.model}."
