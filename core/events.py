# =============================================================================
# core/events.py  -  Local Events Source
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Lists events happening at a destination during a trip.  The data is
#   mocked (seeded by location, so it is stable between calls); a ticketing
#   API would plug in behind the same get_events() signature.
#
# An empty list is a valid answer: the itinerary simply has no event slot
# on those days.
#
# Events come back sorted by (date, time) so "first candidate of the day"
# means "earliest event of the day".
# =============================================================================

from datetime import date, timedelta
import random

from core.errors import InvalidDateRange
from core.models import EventCandidate, Venue


_EVENT_CATEGORIES = ["Music", "Festival", "Cultural", "Sports", "Theater", "Food & Drink", "Workshop"]


def get_events(location: str, start_date: str, end_date: str) -> list[EventCandidate]:
    """Generate 5-15 events spread over the inclusive date range."""
    try:
        start = date.fromisoformat(start_date[:10])
        end = date.fromisoformat(end_date[:10])
    except (TypeError, ValueError) as e:
        raise InvalidDateRange(f"Dates must be ISO formatted: {start_date!r}, {end_date!r}") from e
    if start > end:
        raise InvalidDateRange(f"start_date {start} is after end_date {end}")

    rng = random.Random(f"events|{location.lower()}|{start.isoformat()}|{end.isoformat()}")
    span = (end - start).days + 1

    events = []
    for i in range(rng.randint(5, 15)):
        category = rng.choice(_EVENT_CATEGORIES)
        day = start + timedelta(days=rng.randrange(span))
        time = f"{rng.randint(9, 20):02d}:{rng.choice([0, 30]):02d}"
        events.append(EventCandidate(
            id=f"event-{i + 1}",
            name=f"{location} {category} Event",
            category=category,
            date=day.isoformat(),
            time=time,
            venue=Venue(
                name=f"{location} Venue {i + 1}",
                address=f"{rng.randint(1, 1000)} Main St, {location}",
                coordinates=(round(rng.uniform(-90, 90), 6), round(rng.uniform(-180, 180), 6)),
            ),
            cost=rng.randint(10, 110),
            description=f"A {category.lower()} event in {location}.",
        ))

    events.sort(key=lambda e: (e.date, e.time))
    return events
