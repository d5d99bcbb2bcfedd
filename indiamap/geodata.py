"""India-states GeoJSON acquisition: remote world dataset with local fallback.

The remote step never raises for the failures it expects; it returns a
``FetchResult`` and ``resolve_india_geo_data`` makes the single
remote-or-fallback decision.
"""

import asyncio
import dataclasses
import logging
from dataclasses import dataclass
from typing import Optional

import requests
from shapely.errors import ShapelyError
from shapely.geometry import MultiPolygon, Polygon
from shapely.ops import unary_union

from .constants import (
    NAME_KEYS, REQUEST_TIMEOUT, STATUS_FALLBACK, STATUS_LOADING,
    STATUS_REMOTE_OK, TARGET_COUNTRY, USER_AGENT, WORLD_GEOJSON_URL,
)
from .fallback import fallback_collection
from .models import Feature, FeatureCollection, StatusSink, notify

logger = logging.getLogger(__name__)


class AcquisitionError(Exception):
    """Remote geo data could not be used."""


class NetworkFailure(AcquisitionError):
    """Transport error, timeout, or non-2xx response."""


class PayloadInvalid(AcquisitionError):
    """Response body is not a usable FeatureCollection."""


class NoMatchFound(AcquisitionError):
    """No feature carries the target name under any recognised key."""


@dataclass(frozen=True)
class FetchResult:
    collection: Optional[FeatureCollection] = None
    error: Optional[AcquisitionError] = None

    @classmethod
    def ok(cls, collection: FeatureCollection) -> "FetchResult":
        return cls(collection=collection)

    @classmethod
    def failed(cls, error: AcquisitionError) -> "FetchResult":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.collection is not None


def _feature_matches(feature, target: str, name_keys) -> bool:
    if not isinstance(feature, dict):
        return False
    properties = feature.get("properties")
    if not isinstance(properties, dict):
        return False
    return any(properties.get(key) == target for key in name_keys)


def filter_by_name(doc: dict, target: str = TARGET_COUNTRY,
                   name_keys=NAME_KEYS) -> list:
    """Features of *doc* whose name property equals *target* exactly.

    Every key in *name_keys* is checked; matching is case-sensitive.
    """
    return [f for f in doc.get("features", [])
            if _feature_matches(f, target, name_keys)]


def _download(session: Optional[requests.Session], url: str, timeout: float) -> dict:
    """Blocking GET of the world dataset, parsed to a dict.

    Without a *session* a private one is opened and closed here, in the
    worker thread, so it outlives an abandoned ``wait_for``.
    """
    if session is None:
        with requests.Session() as owned:
            return _download(owned, url, timeout)
    try:
        response = session.get(url, timeout=timeout,
                               headers={"User-Agent": USER_AGENT})
        response.raise_for_status()
    except requests.RequestException as e:
        raise NetworkFailure(f"GET {url} failed: {e}") from e

    try:
        doc = response.json()
    except ValueError as e:
        raise PayloadInvalid(f"response from {url} is not JSON: {e}") from e

    if not isinstance(doc, dict) or not isinstance(doc.get("features"), list):
        raise PayloadInvalid(f"response from {url} is not a FeatureCollection")
    return doc


def _merge_matches(features: list) -> Feature:
    """Fold several features for the same country into one.

    Geometries are unioned; name, population and properties come from
    the first match.
    """
    first = features[0]
    if len(features) == 1:
        return first
    geometry = unary_union([f.geometry for f in features])
    if not isinstance(geometry, (Polygon, MultiPolygon)):
        raise ValueError(f"merged {first.name!r} outline is a {geometry.geom_type}")
    logger.info(f"  merged {len(features)} {first.name!r} features")
    return dataclasses.replace(first, geometry=geometry)


async def fetch_remote(session: Optional[requests.Session] = None,
                       url: str = WORLD_GEOJSON_URL,
                       timeout: float = REQUEST_TIMEOUT,
                       name_keys=NAME_KEYS,
                       target: str = TARGET_COUNTRY) -> FetchResult:
    """Single attempt at the remote dataset, filtered to *target*."""
    try:
        logger.info(f"Fetching world boundaries from {url} (timeout {timeout}s)")
        try:
            doc = await asyncio.wait_for(
                asyncio.to_thread(_download, session, url, timeout),
                timeout=timeout)
        except asyncio.TimeoutError as e:
            raise NetworkFailure(f"GET {url} timed out after {timeout}s") from e

        matched = filter_by_name(doc, target=target, name_keys=name_keys)
        logger.info(f"  {len(doc['features'])} features, {len(matched)} named {target!r}")
        if not matched:
            raise NoMatchFound(f"{target} not found in world data "
                               f"(keys checked: {', '.join(name_keys)})")

        try:
            parsed = [Feature.from_geojson(f, name_keys=name_keys) for f in matched]
            collection = FeatureCollection(
                features=(_merge_matches(parsed),), source="remote")
        except (ValueError, ShapelyError) as e:
            raise PayloadInvalid(f"{target} feature failed validation: {e}") from e
    except AcquisitionError as e:
        return FetchResult.failed(e)

    return FetchResult.ok(collection)


async def resolve_india_geo_data(status: Optional[StatusSink] = None, *,
                                 session: Optional[requests.Session] = None,
                                 url: str = WORLD_GEOJSON_URL,
                                 timeout: float = REQUEST_TIMEOUT,
                                 name_keys=NAME_KEYS) -> FeatureCollection:
    """Return a non-empty India FeatureCollection; never raises for data errors.

    Tries the remote world dataset once. Any ``AcquisitionError`` swaps in
    the embedded ten-state dataset and reports it through *status*.
    """
    notify(status, STATUS_LOADING)

    result = await fetch_remote(session=session, url=url, timeout=timeout,
                                name_keys=name_keys)
    if result.is_ok:
        count = len(result.collection)
        logger.info(f"Using remote geo data: {count} features")
        notify(status, STATUS_REMOTE_OK.format(count=count))
        return result.collection

    logger.warning(f"External data not available "
                   f"({type(result.error).__name__}: {result.error}), "
                   f"using embedded fallback")
    notify(status, STATUS_FALLBACK)
    return fallback_collection()
