import logging
from typing import List, Optional

from indiamap.fallback import fallback_collection
from indiamap.geodata import resolve_india_geo_data
from indiamap.models import FeatureCollection, StatusSink, notify

from backend import config

logger = logging.getLogger(__name__)


class GeoDataStore:
    """Resolves the India geo data once per process and keeps it.

    Concurrent first requests may each fetch; the last one to finish
    sets both the collection and its messages.
    """

    def __init__(self) -> None:
        self.collection: Optional[FeatureCollection] = None
        self.messages: List[str] = []

    async def get(self, status: Optional[StatusSink] = None) -> FeatureCollection:
        if self.collection is not None:
            notify(status, f"Using {self.collection.source} map data")
            return self.collection

        messages: List[str] = []

        def _record(message: str) -> None:
            messages.append(message)
            notify(status, message)

        if config.OFFLINE:
            logger.info("Offline mode, using embedded geo data")
            _record("Offline mode: using embedded map data")
            collection = fallback_collection()
        else:
            collection = await resolve_india_geo_data(
                _record, url=config.WORLD_GEOJSON_URL,
                timeout=config.REQUEST_TIMEOUT)
        self.collection = collection
        self.messages = messages
        return collection

    def reset(self) -> None:
        self.collection = None
        self.messages = []


# Singleton instance used across the application
geodata_store = GeoDataStore()
