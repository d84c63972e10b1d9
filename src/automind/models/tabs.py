"""Dashboard views."""

from __future__ import annotations

from enum import StrEnum


class Tab(StrEnum):
    DASHBOARD = "Dashboard"
    DIAGNOSTICS = "Diagnostics"
    ANALYTICS = "Analytics"
    MAINTENANCE = "Maintenance"
    ECO = "Eco-Optimizer"
    COPILOT = "AI Copilot"
    LIVE = "Live"
