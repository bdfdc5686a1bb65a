import pytest

from core.models import EventCandidate, PreferenceProfile, Venue, WeatherDay


@pytest.fixture
def profile():
    return PreferenceProfile(
        name="Test Traveler",
        activity_types=["hiking", "food"],
        budget_min=100,
        budget_max=400,
        travel_pace="balanced",
        accessibility=False,
        dietary_restrictions=["vegan"],
    )


@pytest.fixture
def weather_day():
    def _make(date, condition="sunny", temperature_f=75, precipitation_pct=10, wind_mph=5):
        return WeatherDay(
            date=date,
            condition=condition,
            temperature_f=temperature_f,
            precipitation_pct=precipitation_pct,
            wind_mph=wind_mph,
        )
    return _make


@pytest.fixture
def event():
    def _make(event_id, date, cost=30, category="Music", time="19:30"):
        return EventCandidate(
            id=event_id,
            name=f"Event {event_id}",
            category=category,
            date=date,
            time=time,
            venue=Venue(name=f"Venue {event_id}", address="1 Main St"),
            cost=cost,
            description=f"Description of {event_id}",
        )
    return _make
