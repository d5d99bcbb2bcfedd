import json

import pytest
from click.testing import CliRunner

from indiamap import builder as builder_mod
from indiamap.cli import cli
from indiamap.fallback import fallback_collection


@pytest.fixture(autouse=True)
def offline(monkeypatch):
    async def fake_resolve(status=None, **kwargs):
        if status:
            status("Using fallback map data")
        return fallback_collection()

    monkeypatch.setattr(builder_mod, "resolve_india_geo_data", fake_resolve)


def test_build_writes_glb_and_stl(tmp_path):
    output = tmp_path / "map.glb"

    result = CliRunner().invoke(cli, ["build", "-o", str(output), "--stl"])

    assert result.exit_code == 0, result.output
    assert output.exists()
    assert output.with_suffix(".stl").exists()
    assert "Using fallback map data" in result.output
    assert "10 states, fallback data" in result.output


def test_fetch_saves_geojson(tmp_path):
    output = tmp_path / "india.geojson"

    result = CliRunner().invoke(cli, ["fetch", "-o", str(output)])

    assert result.exit_code == 0, result.output
    doc = json.loads(output.read_text(encoding="utf-8"))
    assert doc["type"] == "FeatureCollection"
    assert len(doc["features"]) == 10


def test_states_lists_by_population():
    result = CliRunner().invoke(cli, ["states"])

    assert result.exit_code == 0, result.output
    out = result.output
    assert out.index("Uttar Pradesh") < out.index("Maharashtra") < out.index("Kerala")
    assert "10 states, total" in out


def test_inspect_known_and_unknown_state():
    runner = CliRunner()

    known = runner.invoke(cli, ["inspect", "Kerala"])
    assert known.exit_code == 0, known.output
    assert "Thiruvananthapuram" in known.output
    assert "33,406,061" in known.output

    unknown = runner.invoke(cli, ["inspect", "Atlantis"])
    assert unknown.exit_code != 0
    assert "Unknown state" in unknown.output


@pytest.mark.parametrize("height", ["0", "-5000"])
def test_build_rejects_non_positive_height(tmp_path, height):
    output = tmp_path / "map.glb"

    result = CliRunner().invoke(cli, ["build", "-o", str(output), "--height", height])

    assert result.exit_code == 2
    assert "--height" in result.output
    assert not output.exists()
