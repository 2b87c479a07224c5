"""
slabsite/cli.py

Command-line interface for slabsite.

Commands
--------
  slabsite build     Build a slab from a query and print a summary.
                     Optionally write it to disk in any ASE format.
  slabsite analyze   Build a slab, rank adsorption sites, print the table.
  slabsite report    Build + analyse and write an interactive HTML report.
  slabsite init      Validate slabsite.yaml.  Prints a template config if
                     none exists.

Usage
-----
    slabsite build "Au(111)" [--output slab.vasp] [--format vasp]
    slabsite analyze "Au(111)" CO [--seed 42] [--output sites.csv]
    slabsite report "Cu(100)" OH [--seed 42] [--output report.html]
    slabsite init [--config slabsite.yaml]

build, analyze and report accept --config to override the stock geometry
and search parameters; without it the defaults are used.
"""

from __future__ import annotations

import sys
import logging
import shutil
from pathlib import Path

import click

# ---------------------------------------------------------------------------
# Logging setup, configured once at CLI entry, not at import time
# ---------------------------------------------------------------------------

def _setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        format="%(asctime)s  %(levelname)-8s  %(message)s",
        datefmt="%H:%M:%S",
        level=level,
        stream=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Shared options
# ---------------------------------------------------------------------------

_config_option = click.option(
    "--config", "-c",
    default=None,
    type=click.Path(exists=False, dir_okay=False),
    help="Optional slabsite.yaml with slab / sites / model settings.",
)

_seed_option = click.option(
    "--seed", type=int, default=None,
    help="Random seed for reproducible site sampling and energies.",
)

_verbose_option = click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)


def _load(config: str | None):
    """Return the validated config, or the defaults when none is given."""
    from slabsite.config import SlabsiteConfig, load_config

    if config is None:
        return SlabsiteConfig()
    try:
        return load_config(config)
    except Exception as exc:
        click.echo(f"Error: config validation failed:\n  {exc}", err=True)
        raise SystemExit(1)


def _analyze(query: str, adsorbate: str, cfg, seed: int | None):
    """Build the slab and run the site analysis, exiting 1 on failure."""
    import numpy as np

    from slabsite.sites.engine import analyze
    from slabsite.sites.models import EmptyStructureError
    from slabsite.structure.slab import build

    structure = build(query, cfg.slab)
    try:
        result = analyze(
            structure, adsorbate,
            config=cfg.sites,
            rng=np.random.default_rng(seed),
            model=cfg.model,
        )
    except EmptyStructureError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)
    return structure, result


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(package_name="slabsite")
def cli() -> None:
    """
    slabsite: FCC slab builder and adsorption site finder.

    Start with `slabsite build "Au(111)"` to inspect a slab, then
    `slabsite analyze "Au(111)" CO` to rank adsorption sites.
    """


# ---------------------------------------------------------------------------
# slabsite build
# ---------------------------------------------------------------------------

@cli.command("build")
@click.argument("query")
@_config_option
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None,
              help="Write the slab to this file via ase.io.write.")
@click.option("--format", "fmt", type=str, default=None,
              help="ASE format name (default: inferred from the extension).")
@_verbose_option
def cmd_build(
    query: str,
    config: str | None,
    output: str | None,
    fmt: str | None,
    verbose: bool,
) -> None:
    """
    Build a slab from QUERY, e.g. "Au(111)" or "Cu(100)".

    \b
        slabsite build "Pt(111)"
        slabsite build "Cu(100)" --output POSCAR --format vasp
    """
    _setup_logging(verbose)
    cfg = _load(config)

    from slabsite.structure.slab import build
    structure = build(query, cfg.slab)

    click.echo(f"  Structure  : {structure.description}")
    click.echo(f"  Reference  : {structure.reference_id}")
    click.echo(f"  Symmetry   : {structure.symmetry_group}")
    click.echo(f"  Atoms      : {structure.n_atoms}")
    for label, vec in zip("abc", structure.lattice_vectors):
        click.echo(f"  Cell {label}     : ({vec[0]:8.3f}, {vec[1]:8.3f}, {vec[2]:8.3f})")

    if output:
        try:
            path = structure.write(output, format=fmt)
        except Exception as exc:
            click.echo(f"Error: could not write {output}: {exc}", err=True)
            raise SystemExit(1)
        click.echo(f"✓ Written: {path}")


# ---------------------------------------------------------------------------
# slabsite analyze
# ---------------------------------------------------------------------------

@cli.command("analyze")
@click.argument("query")
@click.argument("adsorbate")
@_config_option
@_seed_option
@click.option("--output", type=click.Path(dir_okay=False), default=None,
              help="Export the ranked sites to a CSV file.")
@_verbose_option
def cmd_analyze(
    query: str,
    adsorbate: str,
    config: str | None,
    seed: int | None,
    output: str | None,
    verbose: bool,
) -> None:
    """
    Rank adsorption sites for ADSORBATE on the slab described by QUERY.

    \b
        slabsite analyze "Au(111)" CO --seed 42
        slabsite analyze "Ni(100)" NH3 --output sites.csv
    """
    _setup_logging(verbose)
    cfg = _load(config)

    import pandas as pd

    _, result = _analyze(query, adsorbate, cfg, seed)
    df = result.to_dataframe()

    if output:
        df.to_csv(output, index=False)
        click.echo(f"Saved {len(df)} rows to {output}")
    else:
        term_width = shutil.get_terminal_size((160, 40)).columns
        with pd.option_context(
            "display.max_rows", 200,
            "display.max_columns", 30,
            "display.width", term_width,
            "display.max_colwidth", 40,
            "display.float_format", "{:.3f}".format,
        ):
            click.echo(df.to_string(index=False))

    click.echo("")
    click.echo(result.summary)
    click.echo(f"  model: {result.potential_label}  ·  "
               f"system: {result.system_id}  ·  time: {result.calculation_time}")


# ---------------------------------------------------------------------------
# slabsite report
# ---------------------------------------------------------------------------

@cli.command("report")
@click.argument("query")
@click.argument("adsorbate")
@_config_option
@_seed_option
@click.option("--output", "-o", type=click.Path(dir_okay=False),
              default="slabsite_report.html", show_default=True,
              help="Output HTML file.")
@_verbose_option
def cmd_report(
    query: str,
    adsorbate: str,
    config: str | None,
    seed: int | None,
    output: str,
    verbose: bool,
) -> None:
    """
    Write an interactive HTML report (3-D slab + site energies).

    \b
        slabsite report "Au(111)" CO
        slabsite report "Pd(111)" O --output pd_o.html --seed 3
    """
    _setup_logging(verbose)
    cfg = _load(config)

    structure, result = _analyze(query, adsorbate, cfg, seed)

    from slabsite.analysis.plot import build_report
    path = build_report(structure, result, output, adsorbate=adsorbate)
    click.echo(f"✓ Report written: {path}")


# ---------------------------------------------------------------------------
# slabsite init
# ---------------------------------------------------------------------------

@cli.command("init")
@click.option(
    "--config", "-c",
    default="slabsite.yaml",
    show_default=True,
    type=click.Path(exists=False, dir_okay=False),
    help="Path to the slabsite.yaml configuration file.",
)
@_verbose_option
def cmd_init(config: str, verbose: bool) -> None:
    """
    Validate slabsite.yaml, or print a template if it does not exist.

    If no config file is found, prints a fully commented template to stdout
    and exits with code 1.  Capture it to create your config:

        slabsite init > slabsite.yaml
        # then edit slabsite.yaml and run:
        slabsite init
    """
    _setup_logging(verbose)
    config_path = Path(config)

    # `slabsite init > slabsite.yaml` creates an empty file before this
    # process runs, so a zero-byte file counts as missing.
    if not config_path.exists() or config_path.stat().st_size == 0:
        from slabsite.config import CONFIG_TEMPLATE
        click.echo(CONFIG_TEMPLATE, nl=False)
        raise SystemExit(1)

    cfg = _load(str(config_path))
    click.echo(f"✓ Config valid: {config_path}")
    click.echo(f"  slab   : {cfg.slab.layers} layers, {cfg.slab.vacuum:.1f} Å vacuum")
    click.echo(f"  sites  : at most {cfg.sites.max_sites}, jitter ±{cfg.sites.jitter} eV")
    click.echo(f"  model  : {cfg.model}")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main() -> None:
    cli()


if __name__ == "__main__":
    main()
