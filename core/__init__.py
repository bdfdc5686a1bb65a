# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL planning logic: preference and context encoding,
# activity selection, itinerary assembly and reservations, plus the mock
# data sources they read from.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP, Google ADK or any orchestration
#   framework.  Every module here runs in a bare Python REPL with no
#   internet access (live weather aside).
# =============================================================================
