import logging

from fastapi import APIRouter

from backend.geodata_store import geodata_store
from backend.models import GeoDataSummary, StateInfo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/geodata", tags=["geodata"])


@router.get("")
async def get_geodata():
    """Return the resolved India FeatureCollection as GeoJSON.

    ``source`` is a foreign member telling the viewer whether it got the
    remote dataset or the embedded fallback.
    """
    collection = await geodata_store.get()
    doc = collection.to_geojson()
    doc["source"] = collection.source
    return doc


@router.get("/summary", response_model=GeoDataSummary)
async def get_geodata_summary():
    """Per-state attributes plus the status messages of the resolution."""
    collection = await geodata_store.get()
    return GeoDataSummary(
        source=collection.source,
        count=len(collection),
        total_population=collection.total_population,
        states=[
            StateInfo(name=f.name, population=f.population, capital=f.capital)
            for f in collection
        ],
        messages=list(geodata_store.messages),
    )
