# =============================================================================
# core/errors.py  -  Error taxonomy for the itinerary pipeline
# =============================================================================
#
# Validation failures (bad profile, bad date range, missing weather, bad
# reservation request) are raised straight to the immediate caller and are
# never retried.  Booking failures are NOT exceptions: the reservation
# coordinator turns them into a ReservationOutcome instead.
# =============================================================================


class PlannerError(Exception):
    """Base class for every error raised by core/."""


class InvalidProfile(PlannerError):
    """The preference profile cannot be encoded (budget min > max)."""


class InvalidDateRange(PlannerError):
    """start_date is after end_date, or a date is not ISO formatted."""


class MissingWeatherData(PlannerError):
    """The forecast has no WeatherDay for a date inside the requested range."""

    def __init__(self, date: str):
        super().__init__(f"No weather data for {date}")
        self.date = date


class InvalidReservationRequest(PlannerError):
    """An activity handed to the reservation coordinator lacks required fields."""

    def __init__(self, missing: list[str]):
        super().__init__(f"Reservation request missing: {', '.join(missing)}")
        self.missing = missing


class WeatherSourceError(PlannerError):
    """The weather provider could not be reached.  Generation cannot proceed."""


class ItineraryInvariantError(PlannerError):
    """An assembled day or itinerary broke the ordering or cost invariant."""
