import pytest
import trimesh

from conftest import feature, polygon, world
from indiamap.constants import HIGH_POP_COLOR, LOW_POP_COLOR
from indiamap.fallback import fallback_collection
from indiamap.models import FeatureCollection
from indiamap.scene import (
    BASE_NODE, build_scene, describe_state, export_glb, export_stl,
)

MAX_HEIGHT = 150_000.0


@pytest.fixture(scope="module")
def ctx():
    return build_scene(fallback_collection(), max_height_m=MAX_HEIGHT)


def _centre(mesh):
    return mesh.bounds.mean(axis=0)


def test_one_mesh_per_state_plus_base(ctx):
    assert set(ctx.meshes) == set(fallback_collection().names)
    assert set(ctx.scene.geometry) == set(ctx.meshes) | {BASE_NODE}


def test_heights_and_colours_follow_population(ctx):
    assert ctx.heights["Uttar Pradesh"] == pytest.approx(MAX_HEIGHT)
    assert ctx.heights["Kerala"] < ctx.heights["Maharashtra"] < MAX_HEIGHT
    assert ctx.colors["Uttar Pradesh"] == pytest.approx(HIGH_POP_COLOR)
    assert ctx.colors["Kerala"] == pytest.approx(LOW_POP_COLOR)

    top = ctx.meshes["Uttar Pradesh"].bounds[1][1]
    assert top == pytest.approx(MAX_HEIGHT, rel=1e-6)


def test_state_meshes_are_watertight(ctx):
    for name, mesh in ctx.meshes.items():
        assert mesh.is_watertight, name


def test_map_orientation(ctx):
    # +Z points south, +X points east
    assert _centre(ctx.meshes["Kerala"])[2] > _centre(ctx.meshes["Uttar Pradesh"])[2]
    assert _centre(ctx.meshes["Gujarat"])[0] < _centre(ctx.meshes["West Bengal"])[0]


def test_base_plate_sits_under_the_map(ctx):
    base = ctx.scene.geometry[BASE_NODE]
    assert base.bounds[1][1] == pytest.approx(0.0, abs=1e-6)
    for mesh in ctx.meshes.values():
        assert mesh.bounds[0][0] >= base.bounds[0][0]
        assert mesh.bounds[1][2] <= base.bounds[1][2]


def test_camera_scales_with_extent(ctx):
    assert ctx.extent_m > 1_000_000
    x, y, z = ctx.camera.position
    assert x == 0.0
    assert z / y == pytest.approx(40.0 / 25.0)
    assert ctx.camera.fov_deg == 60.0


def test_describe_state(ctx):
    info = describe_state(ctx, "Tamil Nadu")

    assert info["capital"] == "Chennai"
    assert info["population"] == 72147030
    total = fallback_collection().total_population
    assert info["population_share"] == pytest.approx(72147030 / total)
    assert info["height_m"] == ctx.heights["Tamil Nadu"]

    with pytest.raises(KeyError):
        describe_state(ctx, "Atlantis")


def test_glb_export_round_trips(ctx, tmp_path):
    path = export_glb(ctx, str(tmp_path / "india.glb"))

    loaded = trimesh.load(path, force="scene")
    assert len(loaded.geometry) == len(ctx.scene.geometry)


def test_stl_export_merges_everything(ctx, tmp_path):
    path = export_stl(ctx, str(tmp_path / "india.stl"))

    loaded = trimesh.load(path)
    expected = sum(len(g.faces) for g in ctx.scene.geometry.values())
    assert len(loaded.faces) == expected


def test_single_feature_map():
    collection = FeatureCollection.from_geojson(
        world(feature({"name": "India", "population": 1380004385})))

    single = build_scene(collection, max_height_m=1000.0)

    assert list(single.meshes) == ["India"]
    assert single.heights["India"] == pytest.approx(1000.0)


def test_scene_without_usable_geometry_fails():
    sliver = {"type": "Feature",
              "properties": {"name": "Dot", "population": 1},
              "geometry": polygon(78.0, 20.0, size=1e-9)}
    collection = FeatureCollection.from_geojson(world(sliver))

    with pytest.raises(ValueError):
        build_scene(collection)
