"""MapBuilder: thin orchestrator that delegates to focused modules."""

import logging
from typing import Optional

from .constants import MAX_HEIGHT_M, NAME_KEYS, REQUEST_TIMEOUT, WORLD_GEOJSON_URL
from .geodata import resolve_india_geo_data
from .models import FeatureCollection, SceneContext, StatusSink
from . import scene as scene_mod

logger = logging.getLogger(__name__)


class MapBuilder:
    def __init__(self, max_height_m: float = MAX_HEIGHT_M,
                 url: str = WORLD_GEOJSON_URL,
                 timeout: float = REQUEST_TIMEOUT,
                 name_keys=NAME_KEYS,
                 status: Optional[StatusSink] = None):
        """
        max_height_m: extrusion height of the most populous state.
        url, timeout, name_keys: remote world-boundaries source settings.
        status: optional sink for human-readable progress messages.
        """
        self.max_height_m = max_height_m
        self.url = url
        self.timeout = timeout
        self.name_keys = tuple(name_keys)
        self.status = status
        self.collection: Optional[FeatureCollection] = None
        self.context: Optional[SceneContext] = None

    async def resolve(self, session=None) -> FeatureCollection:
        """Resolve the geo data once per builder; later calls reuse it."""
        if self.collection is None:
            self.collection = await resolve_india_geo_data(
                self.status, session=session, url=self.url,
                timeout=self.timeout, name_keys=self.name_keys)
            logger.info(f"Resolved {len(self.collection)} features "
                        f"from {self.collection.source} data")
        return self.collection

    def build(self, collection: Optional[FeatureCollection] = None) -> SceneContext:
        collection = collection or self.collection
        if collection is None:
            raise RuntimeError("No geo data resolved; call resolve() first")
        self.collection = collection
        self.context = scene_mod.build_scene(
            collection, max_height_m=self.max_height_m, status=self.status)
        return self.context

    async def process(self, session=None) -> SceneContext:
        """Resolve the data and build the scene."""
        collection = await self.resolve(session=session)
        return self.build(collection)

    def _require_context(self) -> SceneContext:
        if self.context is None:
            raise RuntimeError("No scene built; call build() or process() first")
        return self.context

    def generate_glb(self, output_path: str) -> str:
        """Generate GLB file. Returns the absolute path to the generated file."""
        return scene_mod.export_glb(self._require_context(), output_path)

    def generate_stl(self, output_path: str) -> str:
        """Generate STL file. Returns the absolute path to the generated file."""
        return scene_mod.export_stl(self._require_context(), output_path)

    def describe(self, name: str) -> dict:
        return scene_mod.describe_state(self._require_context(), name)
