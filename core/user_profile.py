# =============================================================================
# core/user_profile.py  -  Preference Store (profiles + feedback answers)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Looks up a traveler's stored preferences and the answers they gave to
#   the in-app feedback questions.
#
# MOCK DATA:
#   Profiles live in a dictionary here.  The interface
#   (get_profile / get_recent_feedback) is what a database-backed store would
#   expose too, so nothing downstream changes when it is swapped.
#
# Both lookups are pure reads and return copies, so callers may edit what
# they get back without touching the store.
# =============================================================================

import copy
from datetime import datetime

from core.models import FeedbackResponse, PreferenceProfile


# -----------------------------------------------------------------------------
# Mock user database
# -----------------------------------------------------------------------------
#   - "alex" likes hiking and tours, keeps an eye on money
#   - "jordan" prefers museums and food, travels slowly
#   - "sam" is an energetic shopper with a big budget and no feedback yet
# -----------------------------------------------------------------------------
_MOCK_PROFILES: dict[str, PreferenceProfile] = {
    "alex": PreferenceProfile(
        name="Alex Chen",
        activity_types=["hiking", "tours", "food"],
        budget_min=50,
        budget_max=200,
        travel_pace="active",
        accessibility=False,
        dietary_restrictions=["vegetarian"],
    ),
    "jordan": PreferenceProfile(
        name="Jordan Rivera",
        activity_types=["museums", "food"],
        budget_min=100,
        budget_max=400,
        travel_pace="relaxed",
        accessibility=True,
        dietary_restrictions=["gluten-free"],
    ),
    "sam": PreferenceProfile(
        name="Sam Patel",
        activity_types=["shopping", "food", "tours"],
        budget_min=300,
        budget_max=1200,
        travel_pace="balanced",
    ),
}

_MOCK_FEEDBACK: dict[str, dict[str, FeedbackResponse]] = {
    "alex": {
        "q1": FeedbackResponse("q1", "mood", "Feeling excited and energetic!", datetime(2024, 7, 10, 9, 0)),
        "q2": FeedbackResponse("q2", "budget", "Budget is important to me", datetime(2024, 7, 10, 9, 5)),
        "q3": FeedbackResponse("q3", "environment", "Outdoor all the way", datetime(2024, 7, 11, 18, 30)),
    },
    "jordan": {
        "q1": FeedbackResponse("q1", "mood", "A bit tired after the flight", datetime(2024, 7, 12, 8, 0)),
        "q4": FeedbackResponse("q4", "social", "I prefer exploring solo", datetime(2024, 7, 12, 8, 2)),
        "q5": FeedbackResponse("q5", "food", "Happy to try new dishes", datetime(2024, 7, 12, 8, 4)),
        "q6": FeedbackResponse("q6", "environment", "Indoor please, it's humid", datetime(2024, 7, 12, 20, 15)),
    },
}


def get_profile(user_id: str) -> PreferenceProfile | None:
    """Retrieve a traveler's preference profile, or None if unknown."""
    profile = _MOCK_PROFILES.get(user_id.lower())
    return copy.deepcopy(profile) if profile else None


def get_recent_feedback(user_id: str) -> dict[str, FeedbackResponse]:
    """Retrieve question_id -> FeedbackResponse for a traveler.

    Unknown users and users who never answered get an empty mapping.
    """
    return dict(_MOCK_FEEDBACK.get(user_id.lower(), {}))


def list_available_users() -> list[str]:
    return list(_MOCK_PROFILES.keys())
