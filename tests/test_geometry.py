import pytest
import trimesh
from shapely.geometry import Point, Polygon, box

from indiamap.constants import HIGH_POP_COLOR, LOW_POP_COLOR, MIN_HEIGHT_M
from indiamap.geometry import (
    extrude_watertight, make_transformer, population_color,
    population_height, transform_geometry,
)


def test_population_height_is_linear_with_a_floor():
    assert population_height(200, 200, 1000.0) == 1000.0
    assert population_height(100, 200, 1000.0, min_height=10.0) == 500.0
    assert population_height(0, 200, 100_000.0) == MIN_HEIGHT_M
    # the floor never exceeds the ceiling
    assert population_height(0, 200, 1000.0) == 1000.0
    assert population_height(5, 0, 1000.0, min_height=10.0) == 10.0


def test_population_color_ramps_between_endpoints():
    assert population_color(10, 10, 20) == pytest.approx(LOW_POP_COLOR)
    assert population_color(20, 10, 20) == pytest.approx(HIGH_POP_COLOR)
    mid = population_color(15, 10, 20)
    for lo, m, hi in zip(LOW_POP_COLOR, mid, HIGH_POP_COLOR):
        assert m == pytest.approx((lo + hi) / 2)
    # a single-state map gets the low colour rather than dividing by zero
    assert population_color(7, 7, 7) == pytest.approx(LOW_POP_COLOR)


def test_transformer_is_centred_in_metres():
    transformer = make_transformer(78.0, 20.0)

    x0, y0 = transformer.transform(78.0, 20.0)
    x1, y1 = transformer.transform(79.0, 20.0)

    assert x0 == pytest.approx(0.0, abs=1e-6)
    assert y0 == pytest.approx(0.0, abs=1e-6)
    assert 100_000 < x1 < 110_000


def test_transform_geometry_projects_polygons_only():
    transformer = make_transformer(78.0, 20.0)

    projected = transform_geometry(box(77.5, 19.5, 78.5, 20.5), transformer)

    assert isinstance(projected, Polygon)
    assert projected.area > 1e10  # roughly 104 km x 111 km
    assert projected.exterior.is_ccw
    assert transform_geometry(Point(78.0, 20.0), transformer) is None
    assert transform_geometry(None, transformer) is None


def test_extrusion_is_watertight_and_y_up():
    verts, faces = extrude_watertight(box(0, 0, 1000, 2000), 500.0)

    mesh = trimesh.Trimesh(vertices=verts, faces=faces)

    assert mesh.is_watertight
    assert mesh.bounds[0][1] == pytest.approx(0.0)
    assert mesh.bounds[1][1] == pytest.approx(500.0)
    # the footprint lies in X/Z
    assert mesh.bounds[1][2] == pytest.approx(2000.0)


def test_extrusion_honours_base_and_skips_slivers():
    verts, _ = extrude_watertight(box(0, 0, 10, 10), 5.0, base_y=100.0)
    assert min(v[1] for v in verts) == pytest.approx(100.0)

    assert extrude_watertight(box(0, 0, 0.01, 0.01), 5.0) == ([], [])
    assert extrude_watertight(Point(0, 0).buffer(1).exterior, 5.0) == ([], [])
