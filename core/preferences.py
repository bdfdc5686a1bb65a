# =============================================================================
# core/preferences.py  -  Preference & Feedback Encoding
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns a PreferenceProfile plus the traveler's feedback answers into a
#   fixed-length numeric feature set (PreferenceFeatures).
#
# VECTOR LAYOUT (as_vector order, 19 floats):
#    0-4   activity interest indicators  (TRACKED_ACTIVITY_TYPES order)
#    5-6   budget_min / 1000, budget_max / 1000, clamped to [0, 1]
#    7-9   travel pace indicators         (relaxed, balanced, active)
#   10     accessibility indicator
#   11-13  dietary indicators             (TRACKED_DIETARY_RESTRICTIONS order)
#   14-18  feedback scores                (FEEDBACK_RULES order)
#
# FEEDBACK RULE:
#   For each tracked context only the newest response counts.  "Newest" is
#   the greatest timestamp; on equal timestamps the later one in iteration
#   order wins.  Its text is lower-cased and checked against the context's
#   keyword groups IN ORDER; the first group with a keyword contained in the
#   text decides the score.  No match, or no response at all, gives 0.5.
# =============================================================================

from dataclasses import dataclass, field
from typing import Mapping

from core.errors import InvalidProfile
from core.models import FeedbackResponse, PreferenceProfile, TRAVEL_PACES


TRACKED_ACTIVITY_TYPES = ("hiking", "museums", "food", "shopping", "tours")
TRACKED_DIETARY_RESTRICTIONS = ("vegetarian", "vegan", "gluten-free")

# Legacy travel-style names still found in stored profiles.
_PACE_ALIASES = {"adventurous": "active", "moderate": "balanced"}

NEUTRAL_SCORE = 0.5

# context -> ordered (keywords, score) groups.  Budget lists the negative
# pole first because "not important" contains "important".
FEEDBACK_RULES: dict[str, list[tuple[tuple[str, ...], float]]] = {
    "mood": [
        (("happy", "excited", "energetic"), 1.0),
        (("tired", "sad", "bored"), 0.0),
    ],
    "budget": [
        (("not important", "flexible"), 0.0),
        (("important", "concerned"), 1.0),
    ],
    "environment": [
        (("indoor",), 1.0),
        (("outdoor",), 0.0),
    ],
    "social": [
        (("group", "social"), 1.0),
        (("solo", "alone"), 0.0),
    ],
    "food": [
        (("adventurous", "try new"), 1.0),
        (("familiar", "comfort"), 0.0),
    ],
}


@dataclass
class PreferenceFeatures:
    """Normalized view of a traveler's preferences and latest feedback."""

    activity_interests: dict[str, float]
    budget_min: float
    budget_max: float
    pace: dict[str, float]
    accessibility: float
    dietary: dict[str, float]
    feedback: dict[str, float] = field(default_factory=dict)

    def as_vector(self) -> list[float]:
        return [
            *(self.activity_interests[t] for t in TRACKED_ACTIVITY_TYPES),
            self.budget_min,
            self.budget_max,
            *(self.pace[p] for p in TRAVEL_PACES),
            self.accessibility,
            *(self.dietary[d] for d in TRACKED_DIETARY_RESTRICTIONS),
            *(self.feedback[c] for c in FEEDBACK_RULES),
        ]


def normalize_pace(pace: str) -> str:
    pace = (pace or "").strip().lower()
    return _PACE_ALIASES.get(pace, pace)


def encode(
    profile: PreferenceProfile,
    feedback: Mapping[str, FeedbackResponse] | None = None,
) -> PreferenceFeatures:
    """Encode a profile and its feedback answers.

    Args:
        profile: The traveler's stored preferences.
        feedback: question_id -> FeedbackResponse.  May be empty or None.

    Returns:
        A PreferenceFeatures whose as_vector() has a fixed length.

    Raises:
        InvalidProfile: if budget_min is greater than budget_max.
    """
    if profile.budget_min > profile.budget_max:
        raise InvalidProfile(
            f"budget_min ({profile.budget_min}) is greater than budget_max ({profile.budget_max})"
        )

    interests = {t.lower() for t in profile.activity_types}
    restrictions = {d.lower() for d in profile.dietary_restrictions}
    pace = normalize_pace(profile.travel_pace)

    return PreferenceFeatures(
        activity_interests={t: 1.0 if t in interests else 0.0 for t in TRACKED_ACTIVITY_TYPES},
        budget_min=_clamp(profile.budget_min / 1000),
        budget_max=_clamp(profile.budget_max / 1000),
        pace={p: 1.0 if p == pace else 0.0 for p in TRAVEL_PACES},
        accessibility=1.0 if profile.accessibility else 0.0,
        dietary={d: 1.0 if d in restrictions else 0.0 for d in TRACKED_DIETARY_RESTRICTIONS},
        feedback=encode_feedback(feedback or {}),
    )


def encode_feedback(feedback: Mapping[str, FeedbackResponse]) -> dict[str, float]:
    """Score every tracked context from its newest response."""
    latest = latest_by_context(feedback)
    scores = {}
    for context, rules in FEEDBACK_RULES.items():
        response = latest.get(context)
        scores[context] = _classify(response.response, rules) if response else NEUTRAL_SCORE
    return scores


def latest_by_context(feedback: Mapping[str, FeedbackResponse]) -> dict[str, FeedbackResponse]:
    latest: dict[str, FeedbackResponse] = {}
    for response in feedback.values():
        current = latest.get(response.context)
        if current is None or response.timestamp >= current.timestamp:
            latest[response.context] = response
    return latest


def _classify(text: str, rules: list[tuple[tuple[str, ...], float]]) -> float:
    text = (text or "").lower()
    for keywords, score in rules:
        if any(keyword in text for keyword in keywords):
            return score
    return NEUTRAL_SCORE


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))
