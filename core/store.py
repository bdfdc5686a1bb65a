# =============================================================================
# core/store.py  -  Itinerary Store
# =============================================================================
#
# In-memory persistence for generated itineraries, keyed by Itinerary.id.
# The pipeline never calls this itself; the MCP tools save after generating
# and load again before reserving.
# =============================================================================

from core.models import Itinerary


class InMemoryItineraryStore:
    def __init__(self):
        self._items: dict[str, Itinerary] = {}

    def save(self, itinerary: Itinerary) -> str:
        """Store (or overwrite) an itinerary and return its id."""
        self._items[itinerary.id] = itinerary
        return itinerary.id

    def get(self, itinerary_id: str) -> Itinerary | None:
        return self._items.get(itinerary_id)

    def list_ids(self) -> list[str]:
        return list(self._items.keys())
