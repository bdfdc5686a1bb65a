# =============================================================================
# core/itinerary.py  -  Itinerary Assembly
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Drives the pipeline for one generation request:
#
#     1. validate the date range
#     2. encode preferences + feedback ONCE (they don't change per day)
#     3. for every date in the inclusive range:
#          - find that date's WeatherDay (missing -> MissingWeatherData)
#          - keep only that date's events, in the order given
#          - encode weather and events, select the day's activities
#     4. sum costs and build the Itinerary
#
#   Nothing here talks to a data source or a database.  The caller fetches
#   the forecast and events first and persists the result afterwards.
#
# SNAPSHOT RULE:
#   Itinerary.preferences is a deep copy of the profile passed in.  Editing
#   the caller's profile object later must not change a past itinerary.
# =============================================================================

import copy
from datetime import date, datetime, timedelta, timezone
import logging
from typing import Mapping, Optional, Sequence
import uuid

from core.context import condition_suitability, encode_events, encode_weather
from core.errors import InvalidDateRange, MissingWeatherData
from core.models import (
    DayPlan,
    EventCandidate,
    FeedbackResponse,
    Itinerary,
    PreferenceProfile,
    WeatherDay,
)
from core.preferences import encode, normalize_pace
from core.selector import select_day


logger = logging.getLogger(__name__)

_STYLE_BY_PACE = {"active": "Adventurous", "relaxed": "Relaxing"}


def generate(
    location: str,
    start_date: str | date,
    end_date: str | date,
    preference_profile: PreferenceProfile,
    feedback: Optional[Mapping[str, FeedbackResponse]],
    weather_forecast: Sequence[WeatherDay],
    event_candidates: Sequence[EventCandidate],
    owner_id: str = "",
    title: Optional[str] = None,
) -> Itinerary:
    """Generate a day-by-day itinerary.

    Args:
        location: Destination name.
        start_date / end_date: Inclusive range, ISO strings or dates.
        preference_profile: The traveler's profile.  Deep-copied onto the result.
        feedback: question_id -> FeedbackResponse, possibly empty.
        weather_forecast: Must contain a WeatherDay for every date in range.
        event_candidates: Events for any dates; filtered per day.  Entries
            with unreadable dates are skipped.
        owner_id: The user the itinerary belongs to.
        title: Optional explicit title; generated from pace/weather otherwise.

    Raises:
        InvalidDateRange: start after end, or an unparseable start or end date.
        MissingWeatherData: a date in range has no readable forecast entry.
        InvalidProfile: budget_min > budget_max.
    """
    start = parse_date(start_date)
    end = parse_date(end_date)
    if start > end:
        raise InvalidDateRange(f"start_date {start} is after end_date {end}")

    preferences = encode(preference_profile, feedback)
    weather_by_date: dict[str, WeatherDay] = {}
    for w in weather_forecast:
        key = _day_key(w.date)
        if key is None:
            logger.warning("Ignoring forecast entry with unreadable date %r", w.date)
            continue
        weather_by_date[key] = w

    events_by_date: dict[str, list[EventCandidate]] = {}
    for e in event_candidates:
        key = _day_key(e.date)
        if key is None:
            logger.warning("Ignoring event %r with unreadable date %r", e.name, e.date)
            continue
        events_by_date.setdefault(key, []).append(e)

    days: list[DayPlan] = []
    total_cost = 0.0
    for day in date_range(start, end):
        day_iso = day.isoformat()
        weather = weather_by_date.get(day_iso)
        if weather is None:
            raise MissingWeatherData(day_iso)

        day_events = events_by_date.get(day_iso, [])
        weather_features = encode_weather(weather)
        event_features = encode_events(day_events)
        logger.debug(
            "%s context: weather=%s events=%s",
            day_iso, weather_features.as_vector(), event_features.as_vector(),
        )

        activities = select_day(day_iso, weather_features, day_events, preferences, location)
        plan = DayPlan(date=day_iso, weather=weather, activities=activities)
        total_cost += plan.cost
        days.append(plan)

    itinerary = Itinerary(
        title=title or itinerary_title(preference_profile.travel_pace, [d.weather for d in days]),
        location=location,
        start_date=start.isoformat(),
        end_date=end.isoformat(),
        owner_id=owner_id,
        preferences=copy.deepcopy(preference_profile),
        days=days,
        total_cost=total_cost,
        id=uuid.uuid4().hex,
        generated_at=datetime.now(timezone.utc).isoformat(),
        adjustments={
            "weather_based": True,
            "feedback_based": bool(feedback),
            "events_based": any(a.category == "event" for d in days for a in d.activities),
        },
    )
    logger.info(
        "Generated itinerary %s for %s: %d day(s), %d activities, total $%.2f",
        itinerary.id, location, len(days), len(itinerary.activities()), total_cost,
    )
    return itinerary


def itinerary_title(travel_pace: str, weather: Sequence[WeatherDay]) -> str:
    """E.g. "Sunny Balanced Weekend Getaway"."""
    n = len(weather)
    if n <= 2:
        duration = "Weekend Getaway"
    elif n <= 5:
        duration = "Short Vacation"
    else:
        duration = "Extended Journey"

    title = f"{_STYLE_BY_PACE.get(normalize_pace(travel_pace), 'Balanced')} {duration}"

    sunny_days = sum(1 for w in weather if condition_suitability(w.condition) == 1.0)
    if sunny_days > n / 2:
        title = f"Sunny {title}"
    return title


def parse_date(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value[:10], "%Y-%m-%d").date()
    except (TypeError, ValueError) as e:
        raise InvalidDateRange(f"Not an ISO date: {value!r}") from e


def date_range(start: date, end: date) -> list[date]:
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def _day_key(value: str | date) -> Optional[str]:
    """ISO date of a forecast or event entry, or None when it can't be read."""
    try:
        return parse_date(value).isoformat()
    except InvalidDateRange:
        return None
