"""Fault-code explanations and diagnostic event analysis.

Both endpoints return simple HTML, not JSON.
"""

from __future__ import annotations

from automind.models.diagnostics import DiagnosticEvent, SensorDataStream
from automind.models.vehicle import CarData

FAULT_CODE_OPERATION = "fault_code_explanation"
EVENT_ANALYSIS_OPERATION = "diagnostic_analysis"

FAULT_CODE_ERROR_HTML = (
    "<p><b>Error:</b> Could not retrieve details for this code. Please check your connection or try again later.</p>"
)
EVENT_ANALYSIS_ERROR_HTML = (
    "<p><b>Error:</b> The AI analysis could not be completed at this time. Please try again later.</p>"
)

_TIMESTAMP_FORMAT = "%m/%d/%Y, %I:%M:%S %p"


def build_fault_code_prompt(code: str, car: CarData) -> str:
    return f"""
Explain the automotive fault code "{code}" for a {car.year} {car.make} {car.model}.
Provide a user-friendly explanation in simple HTML format. Include:
1. A <h4> heading with "What it Means".
2. A short paragraph explaining the issue in simple terms.
3. A <h4> heading with "Common Causes".
4. A <ul> list of 3-5 potential causes.
5. A <h4> heading with "What to Do Next".
6. A short paragraph with a clear, actionable recommendation (e.g., "It's safe to drive to a mechanic," or "Avoid driving and seek immediate service.").
"""


def _sensor_line(stream: SensorDataStream) -> str:
    latest = stream.latest
    if latest is None:
        return f"  - {stream.name}: no readings"
    return f"  - {stream.name}: Last reading {latest.value:.2f} {stream.unit}"


def build_event_analysis_prompt(event: DiagnosticEvent, car: CarData) -> str:
    local_time = event.timestamp.astimezone().strftime(_TIMESTAMP_FORMAT)
    sensors = "\n".join(_sensor_line(stream) for stream in event.sensor_snapshot) or "  - None recorded"
    env = event.environmental_data
    return f"""
Act as a master automotive diagnostic technician. You are analyzing a specific diagnostic event for a {car.year} {car.make} {car.model}.

**Event Data:**
- **Timestamp:** {local_time}
- **Fault Codes:** {", ".join(event.fault_codes)}
- **Environmental Conditions:** Outside Temp: {env.outside_temp:g}°C, Altitude: {env.altitude:g}m
- **Key Sensor Snapshots:**
{sensors}

Based on a deep correlation of all this data, provide a diagnostic report in simple HTML format. The report must contain three distinct sections:
1. A <h4> heading with "AI Root Cause Analysis", followed by a paragraph identifying the most likely single root cause of the fault codes.
2. A <h4> heading with "Contributing Factors", followed by a <ul> list explaining how the environmental and sensor data may have contributed to the issue.
3. A <h4> heading with "Recommended Action Plan", followed by a paragraph outlining clear, step-by-step instructions for the vehicle owner.
"""
