# =============================================================================
# core/config.py  -  Runtime settings read from the environment
# =============================================================================
#
# main.py calls load_dotenv() before anything imports this module, so values
# from a local .env file are visible here.  Every setting has a default that
# keeps the planner fully offline.
# =============================================================================

import os


def _flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


# --- Data sources ---
USE_LIVE_WEATHER: bool = _flag("USE_LIVE_WEATHER")
OPEN_METEO_TIMEOUT_SECONDS: float = float(os.environ.get("OPEN_METEO_TIMEOUT_SECONDS", "10"))

# --- Reservations ---
# Upper bound for a single booker call; a call that runs longer is treated
# as "no availability" on that channel.
RESERVATION_TIMEOUT_SECONDS: float = float(os.environ.get("RESERVATION_TIMEOUT_SECONDS", "5"))
RESERVATION_CONCURRENCY: int = int(os.environ.get("RESERVATION_CONCURRENCY", "4"))
FALLBACK_SUCCESS_RATE: float = float(os.environ.get("FALLBACK_SUCCESS_RATE", "0.85"))
FALLBACK_DELAY_SECONDS: float = float(os.environ.get("FALLBACK_DELAY_SECONDS", "1.5"))
PRIMARY_AVAILABILITY: float = float(os.environ.get("PRIMARY_AVAILABILITY", "0.5"))

# --- Agent ---
PLANNER_MODEL: str = os.environ.get("PLANNER_MODEL", "openrouter/openai/gpt-4o")
