"""Consolidated start-up request.

Maintenance forecast, dashboard insight, copilot greeting and fault-code
explanations come back in one JSON reply so the dashboard makes a single
call at start-up instead of four.
"""

from __future__ import annotations

from collections.abc import Sequence

from google.genai import types

from automind._api._common import parse_reply, string_schema
from automind.analytics import weekly_averages
from automind.models.analytics import DrivingAnalyticsData
from automind.models.insights import InitialAppData, InitialGreeting
from automind.models.maintenance import MaintenanceItem, MaintenanceStatus
from automind.models.vehicle import CarData

OPERATION = "initial_app_data"

WELCOME_INSIGHT = "Welcome! Drive safely and efficiently to get the most out of your vehicle."
LIMITED_GREETING = (
    "Hello! I'm AutoMind AI. AI features are currently limited due to high demand. You can still ask me anything!"
)
GENERAL_SUGGESTIONS: tuple[str, ...] = (
    "How do I change a flat tire?",
    "What's the difference between synthetic and conventional oil?",
    "Explain how a hybrid engine works.",
)


def _format_percent(fraction: float) -> str:
    return f"{fraction * 100:g}"


def build_initial_prompt(
    car: CarData,
    driving_data: Sequence[DrivingAnalyticsData],
    standard_maintenance: Sequence[MaintenanceItem],
) -> str:
    averages = weekly_averages(driving_data)
    maintenance_status = ", ".join(
        f"{item.component}: {_format_percent(item.life_remaining)}% life remaining" for item in standard_maintenance
    )
    fault_codes = ", ".join(car.fault_codes) if car.fault_codes else "None"

    return f"""
Analyze the following vehicle and driving data to generate a personalized maintenance schedule, a brief dashboard insight, a generic initial greeting for the AI Copilot, and explanations for active fault codes.

Vehicle Data:
- Make: {car.make} {car.model} ({car.year})
- Odometer: {car.odometer} km
- Vehicle Status: Engine: {car.engine_status}, Brakes: {car.brakes_status}
- Active Fault Codes: {fault_codes}

Recent Driving Analytics (weekly averages):
- Acceleration Score: {averages.acceleration}/100
- Braking Score: {averages.braking}/100
- Efficiency Score: {averages.efficiency}/100

Standard Maintenance Schedule (for reference):
{maintenance_status}

Based on this data, provide the following in a single JSON object:
1. "maintenanceSchedule": An array of maintenance items. For each item, predict its 'lifeRemaining' (0.0 to 1.0), 'nextServiceKm', a short 'aiInsight' explaining your prediction based on the driving data, a 'preventativeTip', and its 'status' ('OK', 'Soon', or 'Overdue'). The driving style (e.g., aggressive braking) should directly influence the wear on relevant components (e.g., brakes).
2. "dashboardInsight": A single, concise sentence (under 25 words) for the dashboard, summarizing the most important piece of information for the driver right now (e.g., an upcoming service, a driving habit to watch, or a positive reinforcement).
3. "initialGreeting": An object with a 'text' field containing a friendly, generic welcome message for the AI copilot (e.g., "Hi! I'm AutoMind, your expert assistant for any car. How can I help?"), and a 'suggestions' array with three diverse, interesting starter questions a user might ask about any car in the world.
4. "faultCodeExplanations": If there are active fault codes, provide an array of objects. Each object should have a "code" (the fault code string) and an "explanation" (a user-friendly HTML string). The explanation should include <h4> headings for "What it Means", "Common Causes", and "What to Do Next". If there are no fault codes, provide an empty array.
"""


_MAINTENANCE_ITEM_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "component": string_schema(),
        "lifeRemaining": types.Schema(
            type=types.Type.NUMBER,
            description="A float between 0.0 and 1.0 representing percentage life left.",
        ),
        "nextServiceKm": types.Schema(
            type=types.Type.INTEGER,
            description="Estimated kilometers until the next service is due.",
        ),
        "aiInsight": string_schema("A brief explanation for the prediction based on driving data."),
        "preventativeTip": string_schema("An actionable tip for the user."),
        "status": string_schema(enum=[status.value for status in MaintenanceStatus]),
    },
    required=["component", "lifeRemaining", "nextServiceKm", "aiInsight", "preventativeTip", "status"],
)

INITIAL_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "maintenanceSchedule": types.Schema(type=types.Type.ARRAY, items=_MAINTENANCE_ITEM_SCHEMA),
        "dashboardInsight": string_schema("A single, concise sentence (under 25 words) for the dashboard."),
        "initialGreeting": types.Schema(
            type=types.Type.OBJECT,
            properties={
                "text": string_schema(),
                "suggestions": types.Schema(type=types.Type.ARRAY, items=string_schema()),
            },
            required=["text", "suggestions"],
        ),
        "faultCodeExplanations": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "code": string_schema(),
                    "explanation": string_schema("HTML explanation for the code."),
                },
                required=["code", "explanation"],
            ),
        ),
    },
    required=["maintenanceSchedule", "dashboardInsight", "initialGreeting", "faultCodeExplanations"],
)


def parse_initial_response(text: str) -> InitialAppData:
    return parse_reply(text, InitialAppData, operation=OPERATION)


def fallback_initial_data(standard_maintenance: Sequence[MaintenanceItem]) -> InitialAppData:
    return InitialAppData(
        maintenance_schedule=list(standard_maintenance),
        dashboard_insight=WELCOME_INSIGHT,
        initial_greeting=InitialGreeting(text=LIMITED_GREETING, suggestions=list(GENERAL_SUGGESTIONS)),
        fault_code_explanations=[],
    )
