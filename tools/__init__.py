# =============================================================================
# tools/__init__.py
# =============================================================================
# FastMCP tool wrappers around core/.
#
# Each tool:
#   1. Looks up its inputs (profile, forecast, events, stored itinerary)
#   2. Calls one core/ operation
#   3. Converts dataclasses to dicts for JSON
#   4. Turns PlannerError into an {"error": ...} payload
#
# Tools hold no planning logic and know nothing about Google ADK.
# =============================================================================
