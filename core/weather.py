# =============================================================================
# core/weather.py  -  Weather Source
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Provides a WeatherDay for every date of a trip, either from MOCK data or
#   from the LIVE Open-Meteo API.
#
# DATA SOURCE TOGGLE:
#   USE_LIVE_WEATHER=true   -> Open-Meteo (free, no API key, needs internet)
#   unset / false           -> deterministic mock data (offline)
#
#   Both providers return the same list[WeatherDay], one entry per date of
#   the inclusive range, so the itinerary pipeline never knows which one
#   ran (Strategy Pattern).
#
# FAILURE POLICY:
#   If the live API cannot be reached we raise WeatherSourceError and
#   itinerary generation stops.  There is no fallback to the mock.
# =============================================================================

from datetime import date, timedelta
import json
import logging
import random
import urllib.parse
import urllib.request

from core import config
from core.errors import InvalidDateRange, WeatherSourceError
from core.models import WeatherDay


logger = logging.getLogger(__name__)


# =============================================================================
# WMO Weather Code Mapping
# =============================================================================
# Open-Meteo reports WMO codes; the condition strings below are written so
# that the suitability keywords (sun/clear, cloud/overcast, rain/storm) pick
# them up.
# =============================================================================
_WMO_CODE_TO_CONDITION: dict[int, str] = {
    0: "Clear",
    1: "Mainly Clear",
    2: "Partly Cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing Rime Fog",
    51: "Light Drizzle",
    53: "Moderate Drizzle",
    55: "Dense Drizzle",
    61: "Slight Rain",
    63: "Moderate Rain",
    65: "Heavy Rain",
    66: "Freezing Rain",
    67: "Heavy Freezing Rain",
    71: "Slight Snow",
    73: "Moderate Snow",
    75: "Heavy Snow",
    80: "Slight Rain Showers",
    81: "Moderate Rain Showers",
    82: "Violent Rain Showers",
    95: "Thunderstorms",
    96: "Thunderstorms with Hail",
    99: "Heavy Thunderstorms with Hail",
}

_MOCK_CONDITIONS = ["sunny", "partly cloudy", "cloudy", "rainy", "stormy"]

# Open-Meteo forecasts at most 16 days ahead.
_LIVE_MAX_DAYS = 16


# =============================================================================
# PUBLIC API: get_forecast (dispatcher)
# =============================================================================
def get_forecast(location: str, start_date: str, end_date: str) -> list[WeatherDay]:
    """Get the forecast for every date from start_date to end_date inclusive.

    Raises:
        InvalidDateRange: if the dates are malformed or reversed.
        WeatherSourceError: live mode only, when Open-Meteo is unreachable.
    """
    start, end = _parse_range(start_date, end_date)
    if config.USE_LIVE_WEATHER:
        return get_forecast_live(location, start, end)
    return get_forecast_mock(location, start, end)


# =============================================================================
# LIVE PROVIDER: Open-Meteo API
# =============================================================================
def get_forecast_live(location: str, start: date, end: date) -> list[WeatherDay]:
    """Fetch a real forecast from Open-Meteo.

    HOW IT WORKS:
      1. Resolve the location name to coordinates with Open-Meteo geocoding
      2. Request daily max temperature, precipitation probability, wind and
         weather code in Fahrenheit / mph
      3. Parse the response into WeatherDay objects
    """
    if (end - start).days + 1 > _LIVE_MAX_DAYS:
        logger.warning("Open-Meteo covers at most %d days; later dates will be missing", _LIVE_MAX_DAYS)

    lat, lon = _geocode(location)
    query = urllib.parse.urlencode({
        "latitude": lat,
        "longitude": lon,
        "daily": "temperature_2m_max,precipitation_probability_max,wind_speed_10m_max,weather_code",
        "temperature_unit": "fahrenheit",
        "wind_speed_unit": "mph",
        "timezone": "auto",
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
    })
    data = _get_json(f"https://api.open-meteo.com/v1/forecast?{query}")

    daily = data.get("daily", {})
    dates = daily.get("time", [])
    temps = daily.get("temperature_2m_max", [])
    precips = daily.get("precipitation_probability_max", [])
    winds = daily.get("wind_speed_10m_max", [])
    codes = daily.get("weather_code", [])

    forecast = []
    for i, day in enumerate(dates):
        code = codes[i] if i < len(codes) and codes[i] is not None else 0
        forecast.append(WeatherDay(
            date=day,
            condition=_WMO_CODE_TO_CONDITION.get(code, "Unknown"),
            temperature_f=_value(temps, i, 70),
            precipitation_pct=_value(precips, i, 0),
            wind_mph=_value(winds, i, 0),
        ))
    logger.info("Open-Meteo returned %d day(s) for %s", len(forecast), location)
    return forecast


def _geocode(location: str) -> tuple[float, float]:
    query = urllib.parse.urlencode({"name": location.split(",")[0].strip(), "count": 1})
    data = _get_json(f"https://geocoding-api.open-meteo.com/v1/search?{query}")
    results = data.get("results") or []
    if not results:
        raise WeatherSourceError(f"Open-Meteo could not locate {location!r}")
    return results[0]["latitude"], results[0]["longitude"]


def _get_json(url: str) -> dict:
    try:
        req = urllib.request.Request(url)
        with urllib.request.urlopen(req, timeout=config.OPEN_METEO_TIMEOUT_SECONDS) as response:
            return json.loads(response.read().decode())
    except (OSError, ValueError) as e:
        raise WeatherSourceError(f"Open-Meteo request failed: {e}") from e


def _value(values: list, i: int, default: float) -> float:
    if i < len(values) and values[i] is not None:
        return values[i]
    return default


# =============================================================================
# MOCK PROVIDER: Deterministic fake data
# =============================================================================
def get_forecast_mock(location: str, start: date, end: date) -> list[WeatherDay]:
    """Generate a repeatable forecast.

    Every (location, date) pair seeds its own generator, so the same day
    always has the same weather no matter which range it was requested in.
    """
    forecast = []
    for i in range((end - start).days + 1):
        day = start + timedelta(days=i)
        rng = random.Random(f"{location.lower()}|{day.isoformat()}")

        condition = rng.choice(_MOCK_CONDITIONS)
        if condition in ("rainy", "stormy"):
            precip = rng.randint(60, 95)
            wind = rng.randint(15, 30)
        else:
            precip = rng.randint(0, 30)
            wind = rng.randint(0, 15)

        forecast.append(WeatherDay(
            date=day.isoformat(),
            condition=condition,
            temperature_f=rng.randint(59, 95),
            precipitation_pct=precip,
            wind_mph=wind,
        ))
    return forecast


def _parse_range(start_date: str, end_date: str) -> tuple[date, date]:
    try:
        start = date.fromisoformat(start_date[:10])
        end = date.fromisoformat(end_date[:10])
    except (TypeError, ValueError) as e:
        raise InvalidDateRange(f"Dates must be ISO formatted: {start_date!r}, {end_date!r}") from e
    if start > end:
        raise InvalidDateRange(f"start_date {start} is after end_date {end}")
    return start, end
