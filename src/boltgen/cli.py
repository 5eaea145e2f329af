"""
Command-line interface for boltgen.

Usage:
    boltgen threads
    boltgen generate M8 --length 30 --head socket_cap --nut -f step -f stl -o out
    boltgen batch fasteners.yaml -o out
"""

import logging
from pathlib import Path

import click
import yaml

from . import __version__
from .batch import build_fasteners, run_batch
from .config import BatchConfig
from .errors import BoltgenError
from .export import EXPORT_FORMATS, STL_QUALITY, UNIT_TO_MM, export_fastener
from .fasteners.dimensions import THREAD_TABLE
from .fasteners.parameters import BoltParameters, HeadType


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", count=True, help="Increase log output (-v info, -vv debug).")
def cli(verbose: int):
    """boltgen - parametric bolt and nut solid generator."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
def threads():
    """List the standard sizes in the dimension table (mm)."""
    click.echo(f"{'Designation':<16}{'d':>8}{'P':>8}{'head s':>9}{'head k':>9}{'nut s':>8}{'nut m':>8}")
    click.echo("-" * 66)
    for name, dims in THREAD_TABLE.items():
        click.echo(
            f"{name:<16}{dims.major_diameter:>8.3f}{dims.pitch:>8.3f}"
            f"{dims.head_width_across_flats:>9.3f}{dims.head_height:>9.3f}"
            f"{dims.nut_width_across_flats:>8.3f}{dims.nut_height:>8.3f}"
        )


@cli.command()
@click.argument("designation")
@click.option("--length", "-l", type=float, required=True, help="Length under the head.")
@click.option("--grip", type=float, default=0.0, show_default=True, help="Unthreaded length next to the head.")
@click.option(
    "--head",
    type=click.Choice([t.name.lower() for t in HeadType]),
    default="hex",
    show_default=True,
    help="Head style.",
)
@click.option("--nut/--no-nut", default=False, show_default=True, help="Also generate the mating nut.")
@click.option("--tolerance", type=float, default=0.0, show_default=True, help="Radial clearance of the nut thread.")
@click.option("--body-tolerance", type=float, default=0.0, show_default=True, help="Diametral under-cut of the shank.")
@click.option("--edge-fillet", type=float, default=0.0, show_default=True, help="Global edge fillet radius.")
@click.option("--underhead-fillet", type=float, default=0.0, show_default=True, help="Head/shank fillet radius.")
@click.option(
    "--format", "-f", "formats",
    type=click.Choice(list(EXPORT_FORMATS)),
    multiple=True,
    default=("step",),
    show_default=True,
    help="Export format (repeatable).",
)
@click.option("--quality", type=click.Choice(list(STL_QUALITY)), default="normal", show_default=True)
@click.option("--unit", type=click.Choice(list(UNIT_TO_MM)), default="mm", show_default=True, help="Working unit.")
@click.option("--output", "-o", type=click.Path(file_okay=False, path_type=Path), default=Path("."))
@click.option("--name", default=None, help="Output file stem (default: derived from the designation).")
def generate(
    designation: str,
    length: float,
    grip: float,
    head: str,
    nut: bool,
    tolerance: float,
    body_tolerance: float,
    edge_fillet: float,
    underhead_fillet: float,
    formats: tuple[str, ...],
    quality: str,
    unit: str,
    output: Path,
    name: str | None,
):
    """
    Generate a bolt (and optionally its nut) from a standard size.

    Example:
        boltgen generate M6 --length 20 --grip 5 --nut -f step -f stl
    """
    try:
        params = BoltParameters.from_designation(
            designation,
            length,
            head_type=head,
            grip_length=grip,
            body_tolerance=body_tolerance,
            generate_nut=nut,
            nut_tolerance=tolerance,
            edge_fillet_radius=edge_fillet,
            underhead_fillet_radius=underhead_fillet,
            name=name,
        )
        fasteners = build_fasteners(params)
        for fastener in fasteners:
            for path in export_fastener(fastener, output, formats, unit, quality):
                click.echo(f"Wrote {path}")
            for note in fastener.diagnostics:
                click.echo(f"  {fastener.name}: {note}")
    except (BoltgenError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None


@cli.command()
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output", "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory. Overrides settings.output_dir of the config.",
)
def batch(config_file: Path, output: Path | None):
    """
    Generate every fastener listed in a YAML batch file.

    Example:
        boltgen batch fasteners.yaml -o out
    """
    try:
        config = BatchConfig.from_yaml(config_file)
    except (BoltgenError, TypeError, ValueError, yaml.YAMLError) as e:
        click.echo(f"Error loading config: {e}", err=True)
        raise SystemExit(1) from None

    outcomes = run_batch(config, output)

    for outcome in outcomes:
        if outcome.ok:
            click.echo(f"[ok]     {outcome.label}: {len(outcome.files)} files")
            for note in outcome.diagnostics:
                click.echo(f"         {note}")
        else:
            click.echo(f"[failed] {outcome.label}: {outcome.error}", err=True)

    if any(not o.ok for o in outcomes):
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
