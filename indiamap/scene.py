"""Scene assembly and GLB/STL export for the population map."""

import logging
import time
from typing import Optional

import numpy as np
import trimesh

from .constants import (
    BASE_COLOR, BASE_MARGIN_M, BASE_THICKNESS_M, CAMERA_FOV_DEG,
    CAMERA_POSITION, CAMERA_REFERENCE_EXTENT, MAX_HEIGHT_M,
)
from .geometry import (
    extrude_watertight, make_transformer, population_color,
    population_height, transform_geometry,
)
from .models import (
    CameraPose, FeatureCollection, PathManager, SceneContext, StatusSink,
    notify,
)

logger = logging.getLogger(__name__)

BASE_NODE = "base"


def _solid_material(color, **kwargs):
    return trimesh.visual.material.PBRMaterial(
        baseColorFactor=color,
        doubleSided=True,
        **kwargs,
    )


def _to_viewer_axes(verts, faces):
    """Negate Z so +Z points south; east stays on the right for a
    camera at +Z looking down -Z. Flipping one axis flips handedness,
    so the face winding is reversed too."""
    verts_arr = np.array(verts, dtype=np.float64)
    faces_arr = np.array(faces, dtype=np.int64)
    verts_arr[:, 2] *= -1
    return verts_arr, faces_arr[:, ::-1]


def _camera_for_extent(extent_m: float) -> CameraPose:
    factor = extent_m / CAMERA_REFERENCE_EXTENT
    position = tuple(c * factor for c in CAMERA_POSITION)
    return CameraPose(position=position, fov_deg=CAMERA_FOV_DEG)


def build_scene(collection: FeatureCollection,
                max_height_m: float = MAX_HEIGHT_M,
                status: Optional[StatusSink] = None) -> SceneContext:
    """Extrude every state by population into one ``trimesh.Scene``.

    Each state becomes its own mesh (named after the state) with a solid
    PBR colour from the population ramp. A dark base plate sits under
    the map at Y <= 0. Heights and X/Z are in projected metres with the
    map centred on the origin.

    Raises ``ValueError`` when no state yields any geometry.
    """
    _t0 = time.perf_counter()
    minx, miny, maxx, maxy = np.array(
        [f.geometry.bounds for f in collection]).T
    origin = ((minx.min() + maxx.max()) / 2, (miny.min() + maxy.max()) / 2)
    transformer = make_transformer(*origin)
    logger.info(f"Projecting {len(collection)} features around "
                f"lon={origin[0]:.2f}, lat={origin[1]:.2f}")

    populations = [f.population for f in collection]
    max_pop, min_pop = max(populations), min(populations)

    ctx = SceneContext(scene=trimesh.Scene(), collection=collection,
                       origin=origin, extent_m=0.0)

    notify(status, f"Extruding {len(collection)} states...")
    for feature in collection:
        projected = transform_geometry(feature.geometry, transformer)
        if projected is None:
            logger.warning(f"Skipping {feature.name}: geometry did not project")
            continue

        height = population_height(feature.population, max_pop, max_height_m)
        verts, faces = extrude_watertight(projected, height)
        if not verts or not faces:
            logger.warning(f"Skipping {feature.name}: extrusion produced no faces")
            continue

        verts_arr, faces_arr = _to_viewer_axes(verts, faces)
        mesh = trimesh.Trimesh(vertices=verts_arr, faces=faces_arr)
        color = population_color(feature.population, min_pop, max_pop)
        mesh.visual = trimesh.visual.TextureVisuals(material=_solid_material(color))

        ctx.scene.add_geometry(mesh, geom_name=feature.name,
                               node_name=feature.name)
        ctx.meshes[feature.name] = mesh
        ctx.heights[feature.name] = height
        ctx.colors[feature.name] = color
        logger.debug(f"  {feature.name}: {len(mesh.faces)} faces, "
                     f"height {height:.0f} m")

    if not ctx.meshes:
        raise ValueError("No valid geometry to build the map scene")

    notify(status, "Assembling 3D model...")
    bounds = np.vstack([m.bounds for m in ctx.meshes.values()])
    lo, hi = bounds.min(axis=0), bounds.max(axis=0)
    width = hi[0] - lo[0] + 2 * BASE_MARGIN_M
    depth = hi[2] - lo[2] + 2 * BASE_MARGIN_M
    base = trimesh.creation.box(extents=[width, BASE_THICKNESS_M, depth])
    base.apply_translation([(lo[0] + hi[0]) / 2, -BASE_THICKNESS_M / 2,
                            (lo[2] + hi[2]) / 2])
    base.visual = trimesh.visual.TextureVisuals(
        material=_solid_material(BASE_COLOR, roughnessFactor=0.9,
                                 metallicFactor=0.0))
    ctx.scene.add_geometry(base, geom_name=BASE_NODE, node_name=BASE_NODE)

    ctx.extent_m = float(max(width, depth))
    ctx.camera = _camera_for_extent(ctx.extent_m)

    logger.info(f"Built scene with {len(ctx.meshes)} state meshes "
                f"in {time.perf_counter() - _t0:.2f}s")
    return ctx


def export_glb(ctx: SceneContext, output_path: str) -> str:
    """Write the scene as binary glTF. Returns the absolute path."""
    path = PathManager.get_output_path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    ctx.scene.export(str(path), file_type='glb')
    size_kb = path.stat().st_size / 1024
    logger.info(f"GLB file generated successfully: {path} ({size_kb:.0f} KB)")
    return str(path.resolve())


def export_stl(ctx: SceneContext, output_path: str) -> str:
    """Write every mesh, base included, merged into one STL."""
    path = PathManager.get_output_path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    # STL carries no materials; merge bare geometry only.
    merged = trimesh.util.concatenate([
        trimesh.Trimesh(vertices=g.vertices, faces=g.faces, process=False)
        for g in ctx.scene.geometry.values()
    ])
    merged.export(str(path), file_type='stl')
    logger.info(f"STL file generated successfully: {path}")
    return str(path.resolve())


def describe_state(ctx: SceneContext, name: str) -> dict:
    """Inspection data for one state in the scene.

    Raises ``KeyError`` for names that are not part of the scene.
    """
    feature = ctx.collection.get(name)
    if feature is None or name not in ctx.meshes:
        raise KeyError(name)
    total = ctx.collection.total_population
    return {
        "name": feature.name,
        "capital": feature.capital,
        "population": feature.population,
        "population_share": feature.population / total if total else 0.0,
        "height_m": ctx.heights[name],
        "color": ctx.colors[name],
    }
