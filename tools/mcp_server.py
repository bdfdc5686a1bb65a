# =============================================================================
# tools/mcp_server.py  -  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Defines the MCP tools the planner agent can call.  Each tool is a thin
#   wrapper around core/: it looks up inputs, calls the pipeline, converts
#   dataclasses to dicts and logs the exchange.
#
# HOW IT WORKS (the flow):
#   1. The ADK agent decides it needs something (e.g. an itinerary)
#   2. It calls a tool by name via MCP (e.g. "generate_itinerary")
#   3. FastMCP routes the call to the decorated function below
#   4. The function calls core/ logic and returns a JSON-friendly dict
#
# TOOL NAMING CONVENTIONS:
#   - get_*        read-only retrieval, safe to retry
#   - generate_*   builds and stores a new itinerary (new id every call)
#   - reserve_*    books activities; only "pending" ones are attempted, so
#                  a repeat or overlapping call never double-books
#
# ERRORS:
#   core/ raises PlannerError subclasses for bad input.  Tools never let
#   them escape; they come back as {"error": ...} so the agent can explain
#   the problem or ask the traveler again.
#
# RUNNING THIS SERVER:
#   a) Standalone:  python -m tools.mcp_server
#   b) Spawned by the ADK agent over stdio (agent/planner_agent.py)
# =============================================================================

from dataclasses import asdict
import json
import logging
import sys

from fastmcp import FastMCP

from core.booking import SimulatedFallbackBooker, SimulatedPrimaryBooker
from core.errors import PlannerError
from core.events import get_events
from core.itinerary import generate
from core.reservations import ReservationCoordinator, reservation_summary
from core.store import InMemoryItineraryStore
from core.user_profile import get_profile, get_recent_feedback, list_available_users
from core.weather import get_forecast

# =============================================================================
# Logging Setup
# =============================================================================
# STDOUT carries the MCP protocol, so every log line goes to STDERR.
#   CYAN    incoming tool calls
#   YELLOW  intermediate status
#   GREEN   responses
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


def _log_request(tool_name: str, **params) -> None:
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: dict) -> dict:
    logging.info(f"{_GREEN}  ← {tool_name} response: {json.dumps(result, separators=(',', ':'), default=str)}{_RESET}")
    return result


def _unknown_user(tool_name: str, user_id: str) -> dict:
    available = list_available_users()
    _log_status(f"User not found. Available: {available}")
    return _log_response(tool_name, {
        "error": f"User '{user_id}' not found.",
        "available_users": available,
    })


# =============================================================================
# Server state
# =============================================================================
mcp = FastMCP("adventure-itinerary-planner")

_store = InMemoryItineraryStore()

# One coordinator for every call, so overlapping reserve calls on the same
# itinerary see each other's in-flight bookings.
_coordinator = ReservationCoordinator(SimulatedPrimaryBooker(), SimulatedFallbackBooker())


# =============================================================================
# TOOL 1: get_user_profile
# =============================================================================
@mcp.tool()
def get_user_profile(user_id: str) -> dict:
    """Retrieve a traveler's stored preferences and recent feedback answers.

    WHEN TO CALL THIS: First, to learn who you are planning for.

    Args:
        user_id: The user's identifier (e.g., "alex", "jordan", "sam").

    Returns:
        A dict with "profile" (activity types, budget range, travel pace,
        accessibility, dietary restrictions) and "feedback" (the answers the
        traveler gave to feedback questions, keyed by question id).
    """
    _log_request("get_user_profile", user_id=user_id)

    profile = get_profile(user_id)
    if profile is None:
        return _unknown_user("get_user_profile", user_id)

    feedback = get_recent_feedback(user_id)
    _log_status(f"Found profile for {profile.name} with {len(feedback)} feedback answer(s)")
    return _log_response("get_user_profile", {
        "profile": asdict(profile),
        "feedback": {qid: {**asdict(r), "timestamp": r.timestamp.isoformat()} for qid, r in feedback.items()},
    })


# =============================================================================
# TOOL 2: get_weather_forecast
# =============================================================================
@mcp.tool()
def get_weather_forecast(location: str, start_date: str, end_date: str) -> dict:
    """Get the daily forecast for a destination.

    Args:
        location: Destination, e.g. "Lisbon".
        start_date / end_date: Inclusive ISO dates, e.g. "2024-07-15".

    Returns:
        A dict with "days": one entry per date with condition,
        temperature_f, precipitation_pct and wind_mph.
    """
    _log_request("get_weather_forecast", location=location, start_date=start_date, end_date=end_date)
    try:
        forecast = get_forecast(location, start_date, end_date)
    except PlannerError as e:
        return _log_response("get_weather_forecast", {"error": str(e)})
    return _log_response("get_weather_forecast", {"location": location, "days": [asdict(d) for d in forecast]})


# =============================================================================
# TOOL 3: get_local_events
# =============================================================================
@mcp.tool()
def get_local_events(location: str, start_date: str, end_date: str) -> dict:
    """List local events during a trip, earliest first.

    Args:
        location: Destination.
        start_date / end_date: Inclusive ISO dates.

    Returns:
        A dict with "events": name, category, date, time, venue name and cost.
    """
    _log_request("get_local_events", location=location, start_date=start_date, end_date=end_date)
    try:
        events = get_events(location, start_date, end_date)
    except PlannerError as e:
        return _log_response("get_local_events", {"error": str(e)})
    return _log_response("get_local_events", {
        "location": location,
        "events": [
            {"name": e.name, "category": e.category, "date": e.date, "time": e.time,
             "venue": e.venue.name, "cost": e.cost}
            for e in events
        ],
    })


# =============================================================================
# TOOL 4: generate_itinerary
# =============================================================================
# Runs the whole pipeline: profile + feedback, forecast, events, then the
# day-by-day assembly.  The result is stored so reserve_itinerary_activities
# can pick it up by id.
# =============================================================================
@mcp.tool()
def generate_itinerary(user_id: str, location: str, start_date: str, end_date: str, title: str = "") -> dict:
    """Generate a day-by-day itinerary for a traveler.

    WHEN TO CALL THIS: Once you know who is traveling, where and when.

    Args:
        user_id: The traveler.
        location: Destination.
        start_date / end_date: Inclusive ISO dates.
        title: Optional title; one is generated otherwise.

    Returns:
        The full itinerary: id, title, days (each with weather and ordered
        activities with times, venue, cost and reservation status) and
        total_cost.  Pass the id to reserve_itinerary_activities to book.
    """
    _log_request("generate_itinerary", user_id=user_id, location=location,
                 start_date=start_date, end_date=end_date, title=title)

    profile = get_profile(user_id)
    if profile is None:
        return _unknown_user("generate_itinerary", user_id)

    try:
        forecast = get_forecast(location, start_date, end_date)
        events = get_events(location, start_date, end_date)
        _log_status(f"Got {len(forecast)} forecast day(s) and {len(events)} event(s)")
        itinerary = generate(
            location, start_date, end_date, profile, get_recent_feedback(user_id),
            forecast, events, owner_id=user_id, title=title or None,
        )
    except PlannerError as e:
        _log_status(f"Generation failed: {e}")
        return _log_response("generate_itinerary", {"error": str(e)})

    _store.save(itinerary)
    _log_status(f"Stored itinerary {itinerary.id}: {itinerary.title}, total ${itinerary.total_cost:.2f}")
    return _log_response("generate_itinerary", itinerary.to_dict())


# =============================================================================
# TOOL 5: reserve_itinerary_activities
# =============================================================================
@mcp.tool()
async def reserve_itinerary_activities(itinerary_id: str) -> dict:
    """Book every activity of a stored itinerary that needs a reservation.

    Meals and paid events are tried with the venue first and then with the
    fallback booking network.  Activities that could not be booked come
    back with status "failed"; the rest of the itinerary is unaffected.

    Args:
        itinerary_id: The id returned by generate_itinerary.

    Returns:
        A dict with "outcomes" (one per attempted activity: status,
        provider, confirmation_id or failure_reason) and "summary"
        (confirmed / failed / pending counts).
    """
    _log_request("reserve_itinerary_activities", itinerary_id=itinerary_id)

    itinerary = _store.get(itinerary_id)
    if itinerary is None:
        return _log_response("reserve_itinerary_activities", {
            "error": f"Itinerary '{itinerary_id}' not found. Generate one first.",
        })

    try:
        outcomes = await _coordinator.reserve_itinerary(itinerary)
    except PlannerError as e:
        return _log_response("reserve_itinerary_activities", {"error": str(e)})

    summary = reservation_summary(itinerary)
    _log_status(f"Reservations: {summary}")
    return _log_response("reserve_itinerary_activities", {
        "itinerary_id": itinerary_id,
        "outcomes": [o.to_dict() for o in outcomes],
        "summary": summary,
    })


# =============================================================================
# Server entry point
# =============================================================================
if __name__ == "__main__":
    mcp.run()
