"""Click CLI commands for the India population map."""

import asyncio
import json
import logging

import click

from .builder import MapBuilder
from .constants import MAX_HEIGHT_M, REQUEST_TIMEOUT, WORLD_GEOJSON_URL
from .models import PathManager

logger = logging.getLogger(__name__)


def _status(message: str) -> None:
    click.echo(f"... {message}")


def _make_builder(url: str, timeout: float,
                  height: float = MAX_HEIGHT_M) -> MapBuilder:
    return MapBuilder(max_height_m=height, url=url, timeout=timeout,
                      status=_status)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose: bool):
    """Build a 3D population map of India's states."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s')


def _source_options(f):
    f = click.option('--url', default=WORLD_GEOJSON_URL, show_default=True,
                     help='World boundaries GeoJSON URL')(f)
    f = click.option('--timeout', default=REQUEST_TIMEOUT, type=float,
                     show_default=True, help='Seconds to wait for the remote source')(f)
    return f


@cli.command()
@click.option('--output', '-o', default='india-map.glb', help='Output GLB file path')
@click.option('--stl', is_flag=True, help='Also write an STL next to the GLB')
@click.option('--height', default=MAX_HEIGHT_M,
              type=click.FloatRange(min=0, min_open=True),
              help='Extrusion height of the most populous state, metres')
@_source_options
def build(output: str, stl: bool, height: float, url: str, timeout: float):
    """Resolve the geo data and write the 3D map."""
    builder = _make_builder(url, timeout, height)
    try:
        asyncio.run(builder.process())
        path = builder.generate_glb(output)
        click.echo(f"Wrote {path} ({len(builder.context.meshes)} states, "
                   f"{builder.collection.source} data)")
        if stl:
            stl_path = builder.generate_stl(
                str(PathManager.get_output_path(output).with_suffix('.stl')))
            click.echo(f"Wrote {stl_path}")
    except Exception as e:
        logger.error(f"Error building map: {e}")
        raise click.ClickException(str(e))


@cli.command()
@click.option('--output', '-o', default='india.geojson', help='Output GeoJSON path')
@_source_options
def fetch(output: str, url: str, timeout: float):
    """Resolve the geo data and save it as GeoJSON."""
    builder = _make_builder(url, timeout)
    collection = asyncio.run(builder.resolve())
    path = PathManager.get_output_path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(collection.to_geojson()), encoding='utf-8')
    click.echo(f"Saved {len(collection)} features ({collection.source}) -> {path}")


@cli.command()
@_source_options
def states(url: str, timeout: float):
    """List the resolved states by population."""
    builder = _make_builder(url, timeout)
    collection = asyncio.run(builder.resolve())
    for feature in sorted(collection, key=lambda f: f.population, reverse=True):
        click.echo(f"{feature.name:<20} {feature.population:>13,}  {feature.capital}")
    click.echo(f"{len(collection)} states, total {collection.total_population:,}")


@cli.command()
@click.argument('name')
@_source_options
def inspect(name: str, url: str, timeout: float):
    """Show what the map renders for one state."""
    builder = _make_builder(url, timeout)
    asyncio.run(builder.process())
    try:
        info = builder.describe(name)
    except KeyError:
        raise click.ClickException(
            f"Unknown state {name!r}; known: {', '.join(builder.collection.names)}")
    click.echo(f"{info['name']} (capital {info['capital'] or 'n/a'})")
    click.echo(f"  population: {info['population']:,} "
               f"({info['population_share']:.1%} of mapped total)")
    click.echo(f"  extruded height: {info['height_m']:,.0f} m")
    r, g, b, _ = (round(c * 255) for c in info['color'])
    click.echo(f"  colour: #{r:02x}{g:02x}{b:02x}")


def main():
    cli()
