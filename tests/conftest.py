"""
tests/conftest.py

Shared pytest fixtures for the slabsite test suite.

All fixtures here are pure geometry; nothing touches the network or writes
outside tmp_path.

Fixture overview
----------------
Slabs
    au111               Au(111) 3x3x4 slab (72 atoms), default config
    cu100               Cu(100) 4x4x4 slab (64 atoms), default config
    empty_structure     MaterialStructure with no atoms
    single_atom         MaterialStructure holding one Au atom

Sampling
    rng                 Seeded numpy Generator, fresh per test
    exhaustive_sites    SiteSearchConfig keeping every candidate, no noise

Config
    config_path         tmp_path slabsite.yaml with a few overrides
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

try:
    import numpy as np
    from ase import Atoms  # noqa: F401
    from scipy.spatial import Delaunay  # noqa: F401
except ImportError as exc:
    pytest.exit(f"numpy, scipy and ASE are required to run the test suite: {exc}", returncode=1)


# ---------------------------------------------------------------------------
# Slab fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def au111():
    """Au(111) slab with the stock 3x3 footprint and 4 layers."""
    from slabsite.structure.slab import build
    return build("Au(111)")


@pytest.fixture(scope="session")
def cu100():
    """Cu(100) slab with the stock 4x4 footprint and 4 layers."""
    from slabsite.structure.slab import build
    return build("Cu(100)")


@pytest.fixture
def empty_structure():
    from slabsite.structure.models import MaterialStructure
    return MaterialStructure(
        formula="Au",
        reference_id="mp-81",
        miller_index="(111)",
        description="empty",
        formation_energy=0.0,
        band_gap=0.0,
        symmetry_group="Fm-3m",
    )


@pytest.fixture
def single_atom():
    """One Au atom in a 10 Å box: no bridges, no triangles."""
    from slabsite.structure.models import Atom, MaterialStructure
    atom = Atom(id=0, element="Au", x=1.0, y=1.0, z=5.0,
                display_color="#FFD123", display_radius=1.44)
    return MaterialStructure(
        formula="Au",
        reference_id="mp-81",
        miller_index="(111)",
        description="single atom",
        formation_energy=0.0,
        band_gap=0.0,
        symmetry_group="Fm-3m",
        atoms=(atom,),
        lattice_vectors=((10.0, 0.0, 0.0), (0.0, 10.0, 0.0), (0.0, 0.0, 10.0)),
    )


# ---------------------------------------------------------------------------
# Sampling fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def exhaustive_sites():
    """
    Keep every top and bridge candidate, always add hollows, return all of
    them, and disable the energy noise.
    """
    from slabsite.config import SiteSearchConfig
    return SiteSearchConfig(
        top_keep_probability=1.0,
        bridge_keep_probability=1.0,
        min_candidates=1000,
        max_sites=5000,
        jitter=0.0,
    )


# ---------------------------------------------------------------------------
# Filesystem fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def config_path(tmp_path) -> Path:
    """A slabsite.yaml overriding the slab size and site count."""
    path = tmp_path / "slabsite.yaml"
    path.write_text(textwrap.dedent("""\
        slab:
          fcc111_repeats: [2, 2]
          layers: 3
          vacuum: 12
        sites:
          max_sites: 4
          jitter: 0.0
        model: heuristic
    """))
    return path
