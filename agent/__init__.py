# =============================================================================
# agent/__init__.py
# =============================================================================
# The Google ADK agent: the conversational layer that decides WHEN to call
# the planner tools and presents their results.  It holds no planning logic;
# schedules, costs and bookings all come from core/ through tools/.
# =============================================================================
