"""automind - AI-assisted vehicle dashboard backed by Gemini."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("automind")
except PackageNotFoundError:
    __version__ = "0+local"
from automind.app import DashboardApp, OverviewStats
from automind.client import AutoMindClient
from automind.config import AutoMindConfig
from automind.exceptions import (
    AiResponseError,
    AiServiceError,
    AudioFormatError,
    AutoMindConfigError,
    AutoMindError,
    LiveSessionError,
    LocationError,
    MicrophoneUnavailableError,
    QuotaExhaustedError,
)
from automind.location import LocationProvider
from automind.models import (
    CarData,
    ChatMessage,
    CopilotReply,
    DiagnosticEvent,
    DrivingAnalyticsData,
    EcoSuggestion,
    GeoLocation,
    InitialAppData,
    MaintenanceItem,
    MaintenanceStatus,
    OptimizedRouteResult,
    RoutePoint,
    Sender,
    SensorDataStream,
    SystemStatus,
    Tab,
    TranscriptEntry,
    TripDetails,
)
from automind.quota import QuotaGuard

__all__ = [
    "__version__",
    "AiResponseError",
    "AiServiceError",
    "AudioFormatError",
    "AutoMindClient",
    "AutoMindConfig",
    "AutoMindConfigError",
    "AutoMindError",
    "CarData",
    "ChatMessage",
    "CopilotReply",
    "DashboardApp",
    "DiagnosticEvent",
    "DrivingAnalyticsData",
    "EcoSuggestion",
    "GeoLocation",
    "InitialAppData",
    "LiveSessionError",
    "LocationError",
    "LocationProvider",
    "MaintenanceItem",
    "MaintenanceStatus",
    "MicrophoneUnavailableError",
    "OptimizedRouteResult",
    "OverviewStats",
    "QuotaExhaustedError",
    "QuotaGuard",
    "RoutePoint",
    "Sender",
    "SensorDataStream",
    "SystemStatus",
    "Tab",
    "TranscriptEntry",
    "TripDetails",
]
