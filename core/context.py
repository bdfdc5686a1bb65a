# =============================================================================
# core/context.py  -  Weather & Events Encoding
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Normalizes one day's weather and one day's events into small numeric
#   feature sets for the activity selector.  Pure functions, no I/O.
#
# THE SUITABILITY SCORE:
#   suitability is the single number the selector branches on:
#     "sun" / "clear"        -> 1.0   favorable
#     "cloud" / "overcast"   -> 0.5   marginal
#     "rain" / "storm"       -> 0.0   adverse
#     anything else          -> 0.5
#   Checks run in that order against the lower-cased condition tag.
#   Outdoor plans need suitability >= OUTDOOR_THRESHOLD.
# =============================================================================

from dataclasses import dataclass, field
from typing import Sequence

from core.models import EventCandidate, WeatherDay


OUTDOOR_THRESHOLD = 0.5

TEMPERATURE_RANGE_F = (0.0, 100.0)
EVENT_COUNT_CAP = 10
EVENT_COST_CAP = 200.0
TRACKED_EVENT_CATEGORIES = ("cultural", "sports", "music")

_CONDITION_SCORES = (
    (("sun", "clear"), 1.0),
    (("cloud", "overcast"), 0.5),
    (("rain", "storm"), 0.0),
)


@dataclass
class WeatherFeatures:
    temperature: float
    precipitation: float
    suitability: float

    @property
    def is_outdoor_friendly(self) -> bool:
        return self.suitability >= OUTDOOR_THRESHOLD

    def as_vector(self) -> list[float]:
        return [self.temperature, self.precipitation, self.suitability]


@dataclass
class EventFeatures:
    count: float
    mean_cost: float
    categories: dict[str, float] = field(default_factory=dict)

    def as_vector(self) -> list[float]:
        return [self.count, self.mean_cost, *(self.categories[c] for c in TRACKED_EVENT_CATEGORIES)]


def condition_suitability(condition: str) -> float:
    """Map a free-form condition tag to 1.0 / 0.5 / 0.0."""
    condition = (condition or "").lower()
    for keywords, score in _CONDITION_SCORES:
        if any(k in condition for k in keywords):
            return score
    return 0.5


def encode_weather(day: WeatherDay) -> WeatherFeatures:
    low, high = TEMPERATURE_RANGE_F
    return WeatherFeatures(
        temperature=_clamp((day.temperature_f - low) / (high - low)),
        precipitation=_clamp(day.precipitation_pct / 100),
        suitability=condition_suitability(day.condition),
    )


def encode_events(events: Sequence[EventCandidate]) -> EventFeatures:
    """Encode the events of one day.

    With zero events mean_cost is the neutral 0.5 rather than a division by
    zero.
    """
    n = len(events)
    mean_cost = sum(e.cost for e in events) / n / EVENT_COST_CAP if n else 0.5
    categories = {
        c: 1.0 if any(c in e.category.lower() for e in events) else 0.0
        for c in TRACKED_EVENT_CATEGORIES
    }
    return EventFeatures(
        count=min(n / EVENT_COUNT_CAP, 1.0),
        mean_cost=_clamp(mean_cost),
        categories=categories,
    )


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))
