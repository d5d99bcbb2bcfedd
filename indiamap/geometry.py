"""Coordinate transforms, population ramps, and watertight extrusion."""

import logging

import numpy as np
import trimesh
from pyproj import Transformer
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.polygon import orient

from .constants import HIGH_POP_COLOR, LOW_POP_COLOR, MIN_HEIGHT_M

logger = logging.getLogger(__name__)


# ── Coordinate transforms ───────────────────────────────────────────────

def make_transformer(origin_lon: float, origin_lat: float) -> Transformer:
    """WGS84 → azimuthal equidistant metres centred on the map.

    A single UTM zone would badly distort a country spanning ~30° of
    longitude; AEQD keeps distances from the centre true.
    """
    return Transformer.from_crs(
        "EPSG:4326",
        f"+proj=aeqd +lat_0={origin_lat} +lon_0={origin_lon} "
        f"+datum=WGS84 +units=m +no_defs",
        always_xy=True,
    )


def transform_geometry(geom, transformer):
    """Transform a (multi)polygon from WGS84 to the local projection."""
    if geom is None or geom.is_empty:
        return None

    if isinstance(geom, MultiPolygon):
        parts = [transform_polygon(p, transformer) for p in geom.geoms]
        parts = [p for p in parts if p is not None]
        if not parts:
            return None
        return MultiPolygon(parts)
    if isinstance(geom, Polygon):
        return transform_polygon(geom, transformer)
    return None


def _transform_ring(coords, transformer):
    xs, ys = zip(*[(c[0], c[1]) for c in coords])
    tx, ty = transformer.transform(np.array(xs), np.array(ys))
    keep = ~(np.isnan(tx) | np.isnan(ty) | np.isinf(tx) | np.isinf(ty))
    return list(zip(tx[keep].tolist(), ty[keep].tolist()))


def transform_polygon(polygon, transformer):
    """Transform polygon coordinates; ``None`` if the result is degenerate."""
    exterior = _transform_ring(polygon.exterior.coords, transformer)
    if len(exterior) < 4:
        return None

    interiors = []
    for interior in polygon.interiors:
        ring = _transform_ring(interior.coords, transformer)
        if len(ring) >= 4:  # 3 distinct points + closing point
            interiors.append(ring)

    transformed = Polygon(exterior, interiors)
    if not transformed.is_valid:
        # Hand-drawn outlines occasionally self-touch; buffer(0) repairs them.
        transformed = transformed.buffer(0)
    if transformed.is_empty or transformed.area <= 0:
        return None
    if isinstance(transformed, MultiPolygon):
        transformed = max(transformed.geoms, key=lambda p: p.area)
    return orient(transformed)


# ── Population ramps ────────────────────────────────────────────────────

def population_height(population: int, max_population: int,
                      max_height: float, min_height: float = MIN_HEIGHT_M) -> float:
    """Extrusion height, linear in population, never below *min_height*
    (itself capped at *max_height*)."""
    min_height = min(min_height, max_height)
    if max_population <= 0:
        return min_height
    height = max_height * (population / max_population)
    return float(max(min_height, min(height, max_height)))


def population_color(population: int, min_population: int,
                     max_population: int) -> list:
    """RGBA colour between the low and high population endpoints."""
    span = max_population - min_population
    t = 0.0 if span <= 0 else (population - min_population) / span
    t = min(max(t, 0.0), 1.0)
    return [lo + (hi - lo) * t for lo, hi in zip(LOW_POP_COLOR, HIGH_POP_COLOR)]


# ── Watertight extrusion ─────────────────────────────────────────────────

def extrude_watertight(geometry, height: float, base_y: float = 0.0):
    """Extrude a 2D geometry into a watertight 3D mesh for GLB export.

    Uses ``trimesh.creation.extrude_polygon`` for constrained
    triangulation, then swaps Y↔Z for the glTF Y-up convention and
    reverses face winding to compensate for the handedness flip.

    Returns (vertices, faces) as plain Python lists.
    """
    if geometry.geom_type == 'MultiPolygon':
        polygons = list(geometry.geoms)
    elif geometry.geom_type == 'Polygon':
        polygons = [geometry]
    else:
        return [], []

    all_verts: list[list[float]] = []
    all_faces: list[list[int]] = []

    for poly in polygons:
        if poly.is_empty or poly.area < 0.01:
            continue
        try:
            mesh = trimesh.creation.extrude_polygon(poly, height=height)
        except Exception as e:
            logger.warning(f"extrude_polygon failed: {e}")
            continue

        v = mesh.vertices.copy()
        # Z-up → Y-up: swap Y↔Z, then shift Y by base_y
        new_verts = np.column_stack([v[:, 0], v[:, 2] + base_y, v[:, 1]])
        # Reverse face winding to fix normals after axis swap
        new_faces = [[f[0], f[2], f[1]] for f in mesh.faces.tolist()]

        off = len(all_verts)
        all_verts.extend(new_verts.tolist())
        for f in new_faces:
            all_faces.append([f[0] + off, f[1] + off, f[2] + off])

    return all_verts, all_faces
