"""Data classes and path management."""

import logging
import pathlib
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

import trimesh
from shapely.errors import ShapelyError
from shapely.geometry import MultiPolygon, Polygon, mapping, shape

from .constants import CAPITAL_KEYS, NAME_KEYS, OUTPUT_DIR, POPULATION_KEYS

logger = logging.getLogger(__name__)

# One-way notification channel, e.g. an on-screen panel or ``click.echo``.
StatusSink = Callable[[str], None]


def notify(status: Optional[StatusSink], message: str) -> None:
    """Fire-and-forget; a broken sink must not break the caller."""
    if status is None:
        return
    try:
        status(message)
    except Exception:
        logger.exception(f"Status sink failed on {message!r}")


class PathManager:
    """Manage paths relative to the output directory."""

    @staticmethod
    def get_output_path(filename: Union[str, pathlib.Path]) -> pathlib.Path:
        """Get the output file path; absolute paths are kept as given."""
        path = pathlib.Path(filename)
        if path.is_absolute():
            return path
        return OUTPUT_DIR / path


def _first_present(properties: dict, keys) -> Any:
    for key in keys:
        value = properties.get(key)
        if value is not None and value != "":
            return value
    return None


def _ring_is_valid(coords) -> bool:
    """A ring needs at least 3 distinct points."""
    return len({tuple(c[:2]) for c in coords}) >= 3


def _parse_population(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"population must be a number, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"population must be a whole number, got {value!r}")
    population = int(value)
    if population < 0:
        raise ValueError(f"population must be non-negative, got {population}")
    return population


@dataclass(frozen=True)
class Feature:
    """One administrative region with a polygon boundary."""
    name: str
    population: int
    capital: str
    geometry: Union[Polygon, MultiPolygon]
    properties: dict = field(default_factory=dict)

    @property
    def polygons(self) -> list:
        if isinstance(self.geometry, MultiPolygon):
            return list(self.geometry.geoms)
        return [self.geometry]

    @property
    def boundary(self) -> list:
        """Closed (lon, lat) ring of the largest polygon."""
        largest = max(self.polygons, key=lambda p: p.area)
        return [(x, y) for x, y in largest.exterior.coords]

    @classmethod
    def from_geojson(cls, feature: dict, name_keys=NAME_KEYS) -> "Feature":
        """Validate a GeoJSON Feature dict.

        Raises ``ValueError`` when the name or population is missing or
        the geometry is not a non-degenerate (multi)polygon.
        """
        if not isinstance(feature, dict):
            raise ValueError(f"feature must be an object, got {type(feature).__name__}")
        properties = feature.get("properties")
        if not isinstance(properties, dict):
            raise ValueError("feature has no properties object")

        name = _first_present(properties, tuple(name_keys) + ("name",))
        if not isinstance(name, str) or not name.strip():
            raise ValueError("feature has no name")

        population = _first_present(properties, POPULATION_KEYS)
        if population is None:
            raise ValueError(f"feature {name!r} has no population")
        population = _parse_population(population)

        capital = _first_present(properties, CAPITAL_KEYS)
        capital = str(capital) if capital is not None else ""

        raw_geometry = feature.get("geometry")
        if not isinstance(raw_geometry, dict):
            raise ValueError(f"feature {name!r} has no geometry")
        try:
            geometry = shape(raw_geometry)
        except (AttributeError, IndexError, KeyError, TypeError, ValueError,
                ShapelyError) as e:
            raise ValueError(f"feature {name!r} has unreadable geometry: {e}") from e
        if not isinstance(geometry, (Polygon, MultiPolygon)) or geometry.is_empty:
            raise ValueError(f"feature {name!r} is not a polygon "
                             f"({geometry.geom_type})")

        parts = geometry.geoms if isinstance(geometry, MultiPolygon) else [geometry]
        for part in parts:
            if not _ring_is_valid(part.exterior.coords):
                raise ValueError(f"feature {name!r} has a degenerate boundary")

        return cls(name=name, population=population, capital=capital,
                   geometry=geometry, properties=dict(properties))

    def to_geojson(self) -> dict:
        return {
            "type": "Feature",
            "properties": dict(self.properties),
            "geometry": mapping(self.geometry),
        }


@dataclass(frozen=True)
class FeatureCollection:
    """Ordered, read-only group of Features.

    ``source`` records where the data came from ("remote", "fallback")
    and is ignored when comparing collections.
    """
    features: tuple
    source: str = field(default="unknown", compare=False)

    def __post_init__(self):
        object.__setattr__(self, "features", tuple(self.features))

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self):
        return iter(self.features)

    @property
    def names(self) -> list:
        return [f.name for f in self.features]

    @property
    def total_population(self) -> int:
        return sum(f.population for f in self.features)

    def get(self, name: str) -> Optional[Feature]:
        for feature in self.features:
            if feature.name == name:
                return feature
        return None

    @classmethod
    def from_features(cls, features, source: str = "unknown",
                      name_keys=NAME_KEYS) -> "FeatureCollection":
        """Validate a list of GeoJSON Feature dicts into a collection."""
        parsed = [Feature.from_geojson(f, name_keys=name_keys) for f in features]
        if not parsed:
            raise ValueError("feature collection is empty")
        seen = set()
        for feature in parsed:
            if feature.name in seen:
                raise ValueError(f"duplicate feature name {feature.name!r}")
            seen.add(feature.name)
        return cls(features=tuple(parsed), source=source)

    @classmethod
    def from_geojson(cls, doc: dict, source: str = "unknown",
                     name_keys=NAME_KEYS) -> "FeatureCollection":
        if not isinstance(doc, dict) or doc.get("type") != "FeatureCollection":
            raise ValueError("document is not a GeoJSON FeatureCollection")
        features = doc.get("features")
        if not isinstance(features, list):
            raise ValueError("FeatureCollection has no features list")
        return cls.from_features(features, source=source, name_keys=name_keys)

    def to_geojson(self) -> dict:
        return {
            "type": "FeatureCollection",
            "features": [f.to_geojson() for f in self.features],
        }


@dataclass(frozen=True)
class CameraPose:
    position: tuple
    target: tuple = (0.0, 0.0, 0.0)
    fov_deg: float = 60.0


@dataclass
class SceneContext:
    """Everything the scene setup phases share, owned by the caller."""
    scene: trimesh.Scene
    collection: FeatureCollection
    origin: tuple                      # (lon, lat) of the projection centre
    extent_m: float                    # longest horizontal side of the map
    meshes: dict = field(default_factory=dict)    # state name -> Trimesh
    heights: dict = field(default_factory=dict)   # state name -> metres
    colors: dict = field(default_factory=dict)    # state name -> RGBA
    camera: Optional[CameraPose] = None
