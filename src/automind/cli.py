"""Terminal front end for the AutoMind dashboard.

Usage
-----
Set ``GEMINI_API_KEY`` and run one of the views::

    automind overview
    automind diagnostics --analyze evt_1
    automind route --optimize
    automind chat
    automind live

Options::

    --verbose, -v        Enable debug logs (add AUTOMIND_API_TRACE_ENABLED=1
                         to trace prompts and replies)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from collections.abc import Awaitable, Callable
from typing import Any

from automind._constants import BILLING_DOC_URL
from automind._text import html_to_text
from automind.app import DashboardApp
from automind.client import AutoMindClient
from automind.config import AutoMindConfig
from automind.exceptions import AutoMindError
from automind.live.session import QUOTA_ERROR_MESSAGE, LiveConversation
from automind.location import LocationProvider
from automind.models.chat import Sender
from automind.models.tabs import Tab

_logger = logging.getLogger(__name__)

_EXIT_WORDS = frozenset({"quit", "exit", "q"})
_TRANSCRIPT_POLL_SECONDS = 0.25


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _field(label: str, value: Any, width: int = 22) -> str:
    return f"  {label:<{width}}: {value}"


def _indent(text: str, prefix: str = "    ") -> str:
    return "\n".join(f"{prefix}{line}" if line else line for line in text.splitlines())


# ── views ────────────────────────────────────────────────────


async def _cmd_overview(app: DashboardApp, args: argparse.Namespace) -> int:
    app.select_tab(Tab.DASHBOARD)
    await app.load()
    await app.locate()
    stats = app.overview()
    car = app.car

    print(_section(car.display_name))
    print(f"  {app.welcome_line}")
    print(_field("VIN", car.vin))
    print(_field("Fuel / charge", f"{stats.fuel_level:g}%"))
    print(_field("Battery health", f"{stats.battery_health:g}%"))
    print(_field("Avg tire pressure", f"{stats.average_tire_pressure:g} PSI"))
    print(_field("Odometer", f"{stats.odometer:,} km"))
    print(_field("Overall health", f"{stats.overall_health:g}%"))
    print(_field("Engine", car.engine_status))
    print(_field("Transmission", car.transmission_status))
    print(_field("Brakes", car.brakes_status))

    print(_section("AI Insight"))
    print(f"  {app.dashboard_insight}")

    print(_section("Location"))
    if app.location is not None:
        print(_field("Latitude", f"{app.location.latitude:.4f}"))
        print(_field("Longitude", f"{app.location.longitude:.4f}"))
    else:
        print(f"  {app.location_error}")
    return 0


async def _cmd_diagnostics(app: DashboardApp, args: argparse.Namespace) -> int:
    app.select_tab(Tab.DIAGNOSTICS)
    await app.load()

    print(_section("Diagnostics"))
    print(f"  {app.diagnostics_summary}")

    for code in app.car.fault_codes:
        explanation = app.fault_code_explanations.get(code)
        if explanation is None:
            explanation = await app.client.get_fault_code_explanation(code, app.car)
        print(_section(f"Fault code {code}"))
        print(_indent(html_to_text(explanation)))

    print(_section("Live sensors"))
    for stream in app.live_sensor_data:
        latest = stream.latest
        reading = f"{latest.value:g} {stream.unit}" if latest is not None else "no readings"
        print(_field(stream.name, reading, width=30))

    print(_section("Event history"))
    for event in app.diagnostic_history:
        when = event.timestamp.astimezone().strftime("%Y-%m-%d %H:%M")
        print(f"  [{event.id}] {when}  {', '.join(event.fault_codes)}")
        env = event.environmental_data
        print(f"      {env.outside_temp:g}°C, {env.altitude:g} m")

    if args.analyze:
        try:
            analysis = await app.toggle_event_analysis(args.analyze)
        except KeyError:
            print(f"Unknown event id: {args.analyze}", file=sys.stderr)
            return 2
        print(_section(f"AI analysis for {args.analyze}"))
        print(_indent(html_to_text(analysis or "")))
    return 0


async def _cmd_analytics(app: DashboardApp, args: argparse.Namespace) -> int:
    app.select_tab(Tab.ANALYTICS)
    print(_section("Driving analytics"))
    print(_field("Average driving score", f"{app.average_driving_score}/100"))
    print(f"  {'Day':<6}{'Accel':>8}{'Brake':>8}{'Eff':>8}")
    for day in app.driving_data:
        print(f"  {day.name:<6}{day.acceleration:>8g}{day.braking:>8g}{day.efficiency:>8g}")

    print(_section("Trips"))
    for trip, point in app.trip_markers():
        print(f"  {trip.title} @ ({point.lat:.4f}, {point.lng:.4f})")
        print(f"      {trip.details}")
    return 0


async def _cmd_maintenance(app: DashboardApp, args: argparse.Namespace) -> int:
    app.select_tab(Tab.MAINTENANCE)
    await app.load()
    print(_section("Predictive maintenance"))
    for item in app.maintenance_data:
        print(f"  {item.component} [{item.status}]")
        print(f"      life remaining {item.life_percent}%, next service in {item.next_service_km:,} km")
        if item.ai_insight:
            print(f"      insight: {item.ai_insight}")
        if item.preventative_tip:
            print(f"      tip: {item.preventative_tip}")
    return 0


async def _cmd_eco(app: DashboardApp, args: argparse.Namespace) -> int:
    app.select_tab(Tab.ECO)
    print(_section("Eco-Optimizer"))
    for suggestion in app.eco_suggestions:
        print(f"  {suggestion.title} ({suggestion.impact} impact)")
        print(f"      {suggestion.description}")
    return 0


async def _cmd_route(app: DashboardApp, args: argparse.Namespace) -> int:
    app.select_tab(Tab.ANALYTICS)
    print(_section("Route history"))
    for index, point in enumerate(app.route_history):
        print(f"  {index:>2}: {point.lat:.4f}, {point.lng:.4f}")

    if not args.optimize:
        return 0

    result = await app.optimize_route()
    print(_section("Optimized route"))
    if result is None:
        print(f"  {app.route_error or 'Not enough route points to optimize.'}")
        return 1
    print(_field("Time saved", f"{result.time_saved_minutes} min"))
    print(_field("Energy saved", f"{result.energy_saved_percent}%"))
    for index, point in enumerate(result.optimized_route):
        print(f"  {index:>2}: {point.lat:.4f}, {point.lng:.4f}")
    return 0


def _print_ai_message(text: str, suggestions: list[str] | None) -> None:
    print()
    print(_indent(html_to_text(text), prefix="AI> "))
    for number, suggestion in enumerate(suggestions or [], start=1):
        print(f"  [{number}] {suggestion}")


async def _cmd_chat(app: DashboardApp, args: argparse.Namespace) -> int:
    app.select_tab(Tab.COPILOT)
    await app.load()
    if app.chat_history:
        greeting = app.chat_history[-1]
        _print_ai_message(greeting.text, greeting.suggestions)

    while True:
        try:
            line = (await asyncio.to_thread(input, "\nyou> ")).strip()
        except EOFError:
            print()
            return 0
        if not line:
            continue
        if line.lower() in _EXIT_WORDS:
            return 0

        last = app.chat_history[-1] if app.chat_history else None
        if line.isdigit() and last is not None and last.sender == Sender.AI and last.suggestions:
            index = int(line) - 1
            if 0 <= index < len(last.suggestions):
                line = last.suggestions[index]
                print(f"you> {line}")

        reply = await app.send_message(line)
        _print_ai_message(reply.text, reply.suggestions)


async def _watch_transcript(conversation: LiveConversation) -> None:
    printed = 0
    while True:
        entries = conversation.transcript
        if len(entries) < printed:
            printed = 0
        for entry in entries[printed:]:
            speaker = "you" if entry.speaker == Sender.USER else "AI"
            print(f"{speaker}> {entry.text}")
        printed = len(entries)
        await asyncio.sleep(_TRANSCRIPT_POLL_SECONDS)


async def _cmd_live(app: DashboardApp, args: argparse.Namespace) -> int:
    # Needs the PortAudio shared library, so only loaded for this command.
    from automind.live import devices

    app.select_tab(Tab.LIVE)
    loop = asyncio.get_running_loop()
    conversation = LiveConversation(app.client.config)

    stop_tasks: list[asyncio.Task[None]] = []

    def request_stop() -> None:
        stop_tasks.append(loop.create_task(conversation.stop()))

    def stop_handler(_signum: int, _frame: Any) -> None:
        loop.call_soon_threadsafe(request_stop)

    previous = signal.signal(signal.SIGINT, stop_handler)
    watcher = asyncio.create_task(_watch_transcript(conversation))
    print("[live] Listening. Press Ctrl+C to end the conversation.")
    try:
        await conversation.run(lambda: devices.MicrophoneStream(loop), devices.SpeakerStream)
    finally:
        signal.signal(signal.SIGINT, previous)
        watcher.cancel()
        try:
            await watcher
        except asyncio.CancelledError:
            pass
        if stop_tasks:
            await asyncio.gather(*stop_tasks)

    if conversation.is_api_key_missing:
        print("[live] No usable API key. Set GEMINI_API_KEY and try again.", file=sys.stderr)
        return 2
    error = conversation.microphone_error or conversation.api_error
    if error:
        print(f"[live] {error}", file=sys.stderr)
        if error == QUOTA_ERROR_MESSAGE:
            print(f"[live] Billing details: {BILLING_DOC_URL}", file=sys.stderr)
        return 1
    print("[live] Conversation ended.")
    return 0


_COMMANDS: dict[str, Callable[[DashboardApp, argparse.Namespace], Awaitable[int]]] = {
    "overview": _cmd_overview,
    "diagnostics": _cmd_diagnostics,
    "analytics": _cmd_analytics,
    "maintenance": _cmd_maintenance,
    "eco": _cmd_eco,
    "route": _cmd_route,
    "chat": _cmd_chat,
    "live": _cmd_live,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="automind",
        description="AI-assisted vehicle dashboard in the terminal.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("overview", help="Vehicle status, AI insight and location.")
    diagnostics = sub.add_parser("diagnostics", help="Fault codes, live sensors and event history.")
    diagnostics.add_argument(
        "--analyze",
        metavar="EVENT_ID",
        default=None,
        help="Run the AI root-cause analysis for this event.",
    )
    sub.add_parser("analytics", help="Weekly driving scores and trips.")
    sub.add_parser("maintenance", help="Predictive maintenance forecast.")
    sub.add_parser("eco", help="Eco-efficiency suggestions.")
    route = sub.add_parser("route", help="Route history.")
    route.add_argument(
        "--optimize",
        action="store_true",
        help="Ask the AI for a more efficient route.",
    )
    sub.add_parser("chat", help="Interactive AI copilot (type a number to pick a suggestion).")
    sub.add_parser("live", help="Live voice conversation until Ctrl+C.")
    return parser


async def _run(config: AutoMindConfig, args: argparse.Namespace) -> int:
    command = _COMMANDS[args.command]
    _logger.debug("Running %s with model %s", args.command, config.model)
    async with LocationProvider(config) as provider:
        app = DashboardApp(AutoMindClient(config), location_provider=provider)
        return await command(app, args)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = AutoMindConfig.from_env()
        return asyncio.run(_run(config, args))
    except AutoMindError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
