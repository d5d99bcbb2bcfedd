"""India population map: 3D state extrusions from GeoJSON with an embedded fallback."""

from indiamap.builder import MapBuilder
from indiamap.fallback import fallback_collection
from indiamap.geodata import resolve_india_geo_data
from indiamap.models import Feature, FeatureCollection, SceneContext
