"""
slabsite/structure/slab.py

Procedural FCC slab construction.

The builder turns a query such as "Au(111)" into a finite slab with vacuum
padding.  Two terminations are supported:

  (111)   Orthogonal cell with a two-atom rectangular basis per in-plane
          cell.  Layers are shifted in-plane according to k mod 3 to give
          ABC close-packed stacking.  Spacings:
              dx = a/√2,  dy = a·√6/2,  dz = a/√3
  (100)   One atom per cell on a square grid, odd layers shifted by half a
          spacing in x and y (AB stacking).  Spacings:
              d = a/√2,   dz = a/2
          Every Miller index other than 111 is built this way.

The grid functions are pure: they take explicit dimensions and spacings and
return fresh tuples.  Nothing is cached between calls, so build() can run
concurrently for independent queries.

Usage
-----
    from slabsite.structure.slab import build

    structure = build("Cu(100)")
    print(structure.n_atoms)             # 64
    print(structure.lattice_vectors[2])  # (0.0, 0.0, 17.23)
"""

from __future__ import annotations

import logging
import math

from slabsite.config import SlabConfig
from slabsite.elements import is_tabulated, lookup_display, lookup_physical
from slabsite.structure.models import Atom, MaterialStructure, Vector3
from slabsite.structure.query import parse_query

logger = logging.getLogger(__name__)

# (x, y, z) without display data; ids and colours are attached in build()
_Position = tuple[float, float, float]
_Cell = tuple[Vector3, Vector3, Vector3]


# ---------------------------------------------------------------------------
# Spacings
# ---------------------------------------------------------------------------

def fcc111_spacings(a: float) -> tuple[float, float, float]:
    """(dx, dy, dz) of the orthogonal (111) cell for lattice constant a."""
    return a / math.sqrt(2), a * math.sqrt(6) / 2, a / math.sqrt(3)


def fcc100_spacings(a: float) -> tuple[float, float]:
    """(d, dz) of the (100) cell for lattice constant a."""
    return a / math.sqrt(2), a / 2


# ---------------------------------------------------------------------------
# Grid generators
# ---------------------------------------------------------------------------

def build_fcc111(
    a: float,
    nx: int = 3,
    ny: int = 3,
    nlayers: int = 4,
    vacuum: float = 10.0,
) -> tuple[list[_Position], _Cell]:
    """
    Positions and supercell of an FCC(111) slab.

    Every grid cell (i, j, k) emits two atoms: one at the stacking-shifted
    grid point and one offset by (dx/2, dy/2).  In-plane coordinates are
    wrapped into the [0, nx·dx) × [0, ny·dy) footprint.

    Parameters
    ----------
    a:
        Cubic lattice constant (Å).
    nx, ny:
        In-plane repeats of the rectangular cell.
    nlayers:
        Number of close-packed layers.
    vacuum:
        Added to the z lattice vector on top of nlayers·dz (Å).

    Returns
    -------
    (positions, lattice_vectors)
        2·nx·ny·nlayers positions, ordered k → j → i → basis.
    """
    dx, dy, dz = fcc111_spacings(a)
    lx, ly = dx * nx, dy * ny

    # ABC stacking: layer k mod 3 → in-plane shift
    shifts = {
        0: (0.0, 0.0),
        1: (0.5 * dx, dy / 6),
        2: (0.0, dy / 3),
    }

    positions: list[_Position] = []
    for k in range(nlayers):
        sx, sy = shifts[k % 3]
        z = k * dz
        for j in range(ny):
            for i in range(nx):
                x = i * dx + sx
                y = j * dy + sy
                positions.append((x % lx, y % ly, z))
                positions.append(((x + dx / 2) % lx, (y + dy / 2) % ly, z))

    cell: _Cell = (
        (lx, 0.0, 0.0),
        (0.0, ly, 0.0),
        (0.0, 0.0, nlayers * dz + vacuum),
    )
    return positions, cell


def build_fcc100(
    a: float,
    nx: int = 4,
    ny: int = 4,
    nlayers: int = 4,
    vacuum: float = 10.0,
) -> tuple[list[_Position], _Cell]:
    """
    Positions and supercell of an FCC(100) slab.

    One atom per cell; odd layers are shifted by (d/2, d/2).

    Returns
    -------
    (positions, lattice_vectors)
        nx·ny·nlayers positions, ordered k → j → i.
    """
    d, dz = fcc100_spacings(a)

    positions: list[_Position] = []
    for k in range(nlayers):
        shift = d / 2 if k % 2 == 1 else 0.0
        z = k * dz
        for j in range(ny):
            for i in range(nx):
                positions.append((i * d + shift, j * d + shift, z))

    cell: _Cell = (
        (d * nx, 0.0, 0.0),
        (0.0, d * ny, 0.0),
        (0.0, 0.0, nlayers * dz + vacuum),
    )
    return positions, cell


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def build(query: str, config: SlabConfig | None = None) -> MaterialStructure:
    """
    Build a slab from a free-text query.

    Deterministic: the same query and config always give the same structure.
    Unparseable input never raises; it degrades to Cu and/or (111), and an
    untabulated element uses the fallback lattice constant.

    Parameters
    ----------
    query:
        Text such as "Au(111)", "Cu (100)" or "Pt(1 1 1)".
    config:
        Supercell dimensions.  Defaults to SlabConfig().

    Returns
    -------
    MaterialStructure
    """
    if config is None:
        config = SlabConfig()

    parsed = parse_query(query)
    element, miller = parsed.element, parsed.miller

    props = lookup_physical(element)
    a = props.lattice_constant

    if not parsed.element_matched:
        logger.info(f"No element symbol in query {query!r}; using {element}")
    if not is_tabulated(element):
        logger.warning(
            f"{element} is not tabulated; building with the fallback "
            f"lattice constant a = {a:.3f} Å"
        )

    if miller == "111":
        nx, ny = config.fcc111_repeats
        positions, cell = build_fcc111(a, nx, ny, config.layers, config.vacuum)
    else:
        nx, ny = config.fcc100_repeats
        positions, cell = build_fcc100(a, nx, ny, config.layers, config.vacuum)

    display = lookup_display(element)
    atoms = tuple(
        Atom(
            id=idx,
            element=element,
            x=float(x),
            y=float(y),
            z=float(z),
            display_color=display.color,
            display_radius=display.radius,
        )
        for idx, (x, y, z) in enumerate(positions)
    )

    description = (
        f"{element}({miller}) surface slab: {nx}x{ny} supercell, "
        f"{config.layers} layers, {config.vacuum:.1f} Å vacuum"
    )

    logger.info(f"Built {element}({miller}) slab with {len(atoms)} atoms")

    return MaterialStructure(
        formula=element,
        reference_id=props.reference_id,
        miller_index=parsed.miller_index,
        description=description,
        formation_energy=props.formation_energy,
        band_gap=props.band_gap,
        symmetry_group=props.symmetry_group,
        atoms=atoms,
        lattice_vectors=cell,
    )
