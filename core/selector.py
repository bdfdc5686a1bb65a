# =============================================================================
# core/selector.py  -  Per-Day Activity Selection
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Fills one day with activities using a fixed slot template:
#
#     08:00  breakfast          food, fixed cost
#     10:00  late morning       outdoor exploration  (suitability >= 0.5)
#                               museum visit         (otherwise)
#     12:30  lunch              food, fixed cost
#     14:30  afternoon          market / shopping attraction
#     17:00  event (optional)   first event candidate of the day
#     19:00  dinner             food, fixed cost
#
#   The template order IS the chronological order; DayPlan rejects anything
#   else.  An event keeps its own advertised time in the description but is
#   always scheduled in the 17:00 slot.
#
# RESERVATIONS:
#   An activity needs a reservation iff it costs something and is food or an
#   event.  Free slots and plain sightseeing never go to the booker.
# =============================================================================

from dataclasses import replace
from typing import Sequence

from core.context import WeatherFeatures
from core.models import Activity, EventCandidate, Venue
from core.preferences import PreferenceFeatures


RESERVABLE_CATEGORIES = ("food", "event")

# slot -> (start, end, name, description, venue, category, cost, weather_dependent)
_SLOTS = {
    "breakfast": (
        "08:00", "09:00", "Breakfast at a Local Café",
        "Start the day with breakfast at a neighborhood café.",
        "Local Café", "food", 15, False,
    ),
    "outdoor": (
        "10:00", "12:00", "Outdoor Exploration",
        "Explore parks, viewpoints and walking trails around the city.",
        "City Park", "attraction", 0, True,
    ),
    "museum": (
        "10:00", "12:00", "Museum Visit",
        "Explore the local museum and learn about the area's history and culture.",
        "City Museum", "attraction", 15, False,
    ),
    "lunch": (
        "12:30", "13:30", "Lunch at Local Restaurant",
        "Enjoy lunch at a popular local restaurant.",
        "Local Restaurant", "food", 25, False,
    ),
    "afternoon": (
        "14:30", "16:30", "Local Market Shopping",
        "Browse the local market and shops for crafts and souvenirs.",
        "Main Street Shopping Area", "attraction", 20, False,
    ),
    "dinner": (
        "19:00", "21:00", "Dinner Experience",
        "Enjoy dinner at a highly-rated local restaurant.",
        "Downtown Restaurant", "food", 40, False,
    ),
}

EVENT_SLOT = ("17:00", "18:30")


def requires_reservation(category: str, cost: float) -> bool:
    return cost > 0 and category in RESERVABLE_CATEGORIES


def select_day(
    date: str,
    weather: WeatherFeatures,
    events: Sequence[EventCandidate],
    preferences: PreferenceFeatures,
    location: str = "",
) -> list[Activity]:
    """Choose the activities for one day, in chronological order.

    Args:
        date: ISO date of the day.
        weather: Encoded weather for that day; drives the late-morning branch.
        events: That day's event candidates.  The first one is used, so sort
            them beforehand if a particular priority matters.
        preferences: Encoded traveler preferences.  They do not change the
            slot choice yet.
        location: Destination name, used for venue addresses.

    Returns:
        The day's activities, breakfast first and dinner last.
    """
    late_morning = "outdoor" if weather.is_outdoor_friendly else "museum"

    activities = [
        _slot_activity(date, "breakfast", location),
        _slot_activity(date, late_morning, location),
        _slot_activity(date, "lunch", location),
        _slot_activity(date, "afternoon", location),
    ]
    if events:
        activities.append(_event_activity(date, events[0]))
    activities.append(_slot_activity(date, "dinner", location))
    return activities


def _slot_activity(date: str, slot: str, location: str) -> Activity:
    start, end, name, description, venue, category, cost, weather_dependent = _SLOTS[slot]
    return Activity(
        id=f"{date}:{slot}",
        name=name,
        description=description,
        start_time=start,
        end_time=end,
        venue=Venue(name=venue, address=location),
        category=category,
        cost=cost,
        weather_dependent=weather_dependent,
        reservation_required=requires_reservation(category, cost),
    )


def _event_activity(date: str, event: EventCandidate) -> Activity:
    start, end = EVENT_SLOT
    description = event.description or f"Special local event: {event.name}"
    if event.time:
        description = f"{description} (advertised start {event.time})"
    return Activity(
        id=f"{date}:event:{event.id}",
        name=event.name,
        description=description,
        start_time=start,
        end_time=end,
        venue=replace(event.venue),
        category="event",
        cost=event.cost,
        weather_dependent=False,
        reservation_required=requires_reservation("event", event.cost),
    )
