"""Route optimization."""

from __future__ import annotations

import json
from collections.abc import Sequence

from google.genai import types

from automind._api._common import parse_reply
from automind.analytics import vehicle_type
from automind.models.analytics import OptimizedRouteResult, RoutePoint
from automind.models.vehicle import CarData

OPERATION = "route_optimization"

FALLBACK_TIME_SAVED_MINUTES = 5
FALLBACK_ENERGY_SAVED_PERCENT = 10


def build_route_prompt(route: Sequence[RoutePoint], car: CarData) -> str:
    kind = vehicle_type(car)
    saved = "energy (kWh)" if kind == "EV" else "fuel"
    points = json.dumps([point.to_api_dict() for point in route], separators=(",", ":"))
    return f"""
Act as a route optimization expert. Given the following route (a sequence of lat/lng points) and vehicle type, suggest a more efficient route.
Consider factors like real-time traffic (assume current conditions), elevation changes to minimize energy use, and avoiding unnecessary stops.

Vehicle Type: {kind}
Original Route Points: {points}

Your task is to return a JSON object with the following structure:
{{
  "optimizedRoute": [{{ "lat": number, "lng": number }}, ...],
  "timeSavedMinutes": number,
  "energySavedPercent": number
}}

- "optimizedRoute": A new array of lat/lng points for the more efficient path. It should start and end near the original points.
- "timeSavedMinutes": An integer representing the estimated minutes saved compared to the original route.
- "energySavedPercent": An integer representing the estimated percentage of {saved} saved.

Generate a plausible, slightly different route and provide realistic savings. The optimized route should have a similar number of points as the original.
"""


ROUTE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "optimizedRoute": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "lat": types.Schema(type=types.Type.NUMBER),
                    "lng": types.Schema(type=types.Type.NUMBER),
                },
                required=["lat", "lng"],
            ),
        ),
        "timeSavedMinutes": types.Schema(type=types.Type.INTEGER),
        "energySavedPercent": types.Schema(type=types.Type.INTEGER),
    },
    required=["optimizedRoute", "timeSavedMinutes", "energySavedPercent"],
)


def parse_route_response(text: str) -> OptimizedRouteResult:
    return parse_reply(text, OptimizedRouteResult, operation=OPERATION)


def fallback_route(route: Sequence[RoutePoint]) -> OptimizedRouteResult:
    """The original route reversed, with fixed nominal savings."""
    return OptimizedRouteResult(
        optimized_route=list(reversed(route)),
        time_saved_minutes=FALLBACK_TIME_SAVED_MINUTES,
        energy_saved_percent=FALLBACK_ENERGY_SAVED_PERCENT,
    )
