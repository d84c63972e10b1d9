"""Data models for vehicle telemetry and AI content."""

from automind.models._base import AutoMindModel, EpochTimestamp, parse_timestamp
from automind.models.analytics import DrivingAnalyticsData, OptimizedRouteResult, RoutePoint, TripDetails
from automind.models.chat import ChatMessage, CopilotReply, Sender, TranscriptEntry
from automind.models.diagnostics import (
    DiagnosticEvent,
    EnvironmentalData,
    FaultCodeExplanation,
    SensorDataStream,
    SensorReading,
)
from automind.models.eco import EcoSuggestion, Impact
from automind.models.insights import InitialAppData, InitialGreeting
from automind.models.location import GeoLocation
from automind.models.maintenance import MaintenanceItem, MaintenanceStatus
from automind.models.tabs import Tab
from automind.models.vehicle import CarData, SystemStatus, TirePressure

__all__ = [
    "AutoMindModel",
    "CarData",
    "ChatMessage",
    "CopilotReply",
    "DiagnosticEvent",
    "DrivingAnalyticsData",
    "EcoSuggestion",
    "EnvironmentalData",
    "EpochTimestamp",
    "FaultCodeExplanation",
    "GeoLocation",
    "Impact",
    "InitialAppData",
    "InitialGreeting",
    "MaintenanceItem",
    "MaintenanceStatus",
    "OptimizedRouteResult",
    "RoutePoint",
    "Sender",
    "SensorDataStream",
    "SensorReading",
    "SystemStatus",
    "Tab",
    "TirePressure",
    "TranscriptEntry",
    "TripDetails",
    "parse_timestamp",
]
