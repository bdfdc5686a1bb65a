# =============================================================================
# core/models.py  -  Data Models (the "nouns" of the planner)
# =============================================================================
#
# Every record that flows through the itinerary pipeline is one of these
# dataclasses.  Inputs (profile, feedback, weather, events) are read-only to
# the pipeline; outputs (activities, day plans, itineraries, reservation
# outcomes) are built once and then only touched by the reservation
# coordinator, which is the sole writer of Activity.reservation_status.
#
# Checks live in __post_init__ so a malformed record fails where it is built
# instead of three stages later.
#
# Dates are ISO strings ("2024-07-15") and times are zero-padded "HH:MM"
# strings, so both compare correctly as plain strings.
# =============================================================================

from dataclasses import asdict, dataclass, field
from datetime import datetime
import math
from typing import Optional

from core.errors import ItineraryInvariantError


ACTIVITY_CATEGORIES = ("food", "attraction", "event", "transportation", "accommodation", "other")
RESERVATION_STATUSES = ("not_required", "pending", "confirmed", "failed")
TRAVEL_PACES = ("relaxed", "balanced", "active")


# -----------------------------------------------------------------------------
# PreferenceProfile: what the traveler told us about themselves
# -----------------------------------------------------------------------------
@dataclass
class PreferenceProfile:
    """A traveler's stored preferences.

    Owned by the user and edited only through explicit preference updates.
    The pipeline reads it and stores a deep copy on every itinerary it
    generates.
    """

    name: str = ""
    activity_types: list[str] = field(default_factory=list)   # e.g. ["hiking", "food"]
    budget_min: float = 0                                      # USD per day
    budget_max: float = 500
    travel_pace: str = "balanced"                              # relaxed | balanced | active
    accessibility: bool = False
    dietary_restrictions: list[str] = field(default_factory=list)


# -----------------------------------------------------------------------------
# FeedbackResponse: one answer to an in-app feedback question
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class FeedbackResponse:
    """A free-text answer tagged with the travel aspect it talks about."""

    question_id: str
    context: str                       # mood | budget | environment | social | food
    response: str
    timestamp: datetime


# -----------------------------------------------------------------------------
# WeatherDay / EventCandidate: per-date context from the data sources
# -----------------------------------------------------------------------------
@dataclass
class WeatherDay:
    """One day of forecast."""

    date: str
    condition: str                     # "sunny", "Partly Cloudy", "Heavy Rain", ...
    temperature_f: float
    precipitation_pct: float           # 0-100
    wind_mph: float = 0


@dataclass
class Venue:
    name: str
    address: str = ""
    coordinates: Optional[tuple[float, float]] = None     # (lat, lng)


@dataclass
class EventCandidate:
    """A local event that could fill the optional event slot of a day."""

    id: str
    name: str
    category: str
    date: str
    time: str
    venue: Venue
    cost: float = 0
    description: str = ""


# -----------------------------------------------------------------------------
# Activity: one scheduled slot of a day
# -----------------------------------------------------------------------------
@dataclass
class Activity:
    """A concrete, timed thing to do.

    reservation_status starts as "pending" for reservable activities and
    "not_required" for everything else unless given explicitly.
    """

    id: str
    name: str
    description: str
    start_time: str
    end_time: str
    venue: Venue
    category: str
    cost: float = 0
    weather_dependent: bool = False
    reservation_required: bool = False
    reservation_status: str = ""

    def __post_init__(self):
        if self.category not in ACTIVITY_CATEGORIES:
            raise ValueError(f"Unknown activity category: {self.category!r}")
        if self.cost < 0:
            raise ValueError(f"Activity cost cannot be negative: {self.cost}")
        if not self.reservation_status:
            self.reservation_status = "pending" if self.reservation_required else "not_required"
        if self.reservation_status not in RESERVATION_STATUSES:
            raise ValueError(f"Unknown reservation status: {self.reservation_status!r}")


# -----------------------------------------------------------------------------
# DayPlan / Itinerary: the pipeline's deliverable
# -----------------------------------------------------------------------------
@dataclass
class DayPlan:
    """One calendar day.  Activities are kept in ascending start_time order."""

    date: str
    weather: WeatherDay
    activities: list[Activity] = field(default_factory=list)

    def __post_init__(self):
        for earlier, later in zip(self.activities, self.activities[1:]):
            if later.start_time < earlier.start_time:
                raise ItineraryInvariantError(
                    f"{self.date}: {later.name!r} at {later.start_time} is scheduled "
                    f"before {earlier.name!r} at {earlier.start_time}"
                )

    @property
    def cost(self) -> float:
        return sum(a.cost for a in self.activities)


@dataclass
class Itinerary:
    """A generated multi-day plan.

    `preferences` is the profile as it was at generation time; later edits
    to the user's live profile never reach it.
    """

    title: str
    location: str
    start_date: str
    end_date: str
    owner_id: str
    preferences: PreferenceProfile
    days: list[DayPlan]
    total_cost: float
    id: str = ""
    generated_at: str = ""
    adjustments: dict[str, bool] = field(default_factory=dict)

    def __post_init__(self):
        expected = sum(day.cost for day in self.days)
        if not math.isclose(self.total_cost, expected, abs_tol=1e-6):
            raise ItineraryInvariantError(
                f"total_cost {self.total_cost} does not match activity sum {expected}"
            )

    def activities(self) -> list[Activity]:
        return [a for day in self.days for a in day.activities]

    def reservable_activities(self) -> list[Activity]:
        return [a for a in self.activities() if a.reservation_required]

    def to_dict(self) -> dict:
        return asdict(self)


# -----------------------------------------------------------------------------
# Booking collaborator responses and the coordinator's outcome
# -----------------------------------------------------------------------------
@dataclass
class PrimaryBookingResponse:
    success: bool
    confirmation_id: Optional[str] = None


@dataclass
class FallbackBookingResponse:
    success: bool
    reservation_id: Optional[str] = None
    reason: Optional[str] = None


@dataclass
class ReservationOutcome:
    """What happened when we tried to book one activity.

    For attempted bookings (status confirmed or failed) provider is set,
    confirmation_id is set iff success and failure_reason iff not success.
    "not_required" is the exception: nothing was booked, so success is True
    with no provider, confirmation_id or failure_reason.  Check `status`, not
    `success`, to tell a real booking apart.
    """

    activity_id: str
    activity_name: str
    success: bool
    status: str                         # not_required | confirmed | failed
    provider: Optional[str] = None      # primary | fallback
    confirmation_id: Optional[str] = None
    failure_reason: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)
