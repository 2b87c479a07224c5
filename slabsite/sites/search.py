"""
slabsite/sites/search.py

Geometric discovery of candidate adsorption sites on a slab.

Workflow
--------
1. Surface atoms: every atom within surface_tolerance of the highest z.
2. On-top: one candidate above each surface atom, kept with
   top_keep_probability.
3. Bridge: the midpoint of every surface pair whose separation lies strictly
   inside the nearest-neighbour window, kept with bridge_keep_probability.
4. Hollow: only when fewer than min_candidates survived steps 2-3.  A
   Delaunay triangulation of the surface layer gives three-fold (fcc/hcp)
   and four-fold hollows at triangle circumcenters.  If none are found, a
   single estimated hollow next to the first surface atom guarantees a
   non-empty result.

All randomness is drawn from the rng argument so a seeded generator
reproduces the same candidate set.  Energies are assigned later by
slabsite.sites.energy; every site returned here has energy 0.0.
"""

from __future__ import annotations

import logging
from itertools import combinations

import numpy as np
from scipy.spatial import Delaunay, QhullError

from slabsite.config import SiteSearchConfig
from slabsite.sites.models import SITE_TYPE, AdsorptionSite, EmptyStructureError
from slabsite.structure.models import Atom, MaterialStructure

logger = logging.getLogger(__name__)

# Two hollow points closer than this (Å, in-plane) are the same site;
# the two right triangles of a (100) square share one circumcenter.
_HOLLOW_MERGE_DISTANCE = 0.1

# A subsurface atom within this in-plane distance (Å) of a three-fold
# hollow makes it an hcp site.
_HCP_DISTANCE = 0.5

# Longest² ≤ this · (sum of the two shorter edges squared).  Right triangles
# pass; the obtuse slivers Delaunay produces along the patch border do not.
_RIGHT_ANGLE_SLACK = 1.05

# Offset (Å) of the estimated hollow from the first surface atom
_FALLBACK_HOLLOW_OFFSET = (1.2, 0.8)


# ---------------------------------------------------------------------------
# Surface detection
# ---------------------------------------------------------------------------

def find_surface_atoms(
    structure: MaterialStructure,
    tolerance: float = 1.5,
) -> list[Atom]:
    """
    Return the atoms within tolerance of the topmost atom, in structure order.

    Raises
    ------
    EmptyStructureError
        If the structure has no atoms, or none pass the filter.
    """
    if not structure.atoms:
        raise EmptyStructureError(
            f"Structure {structure.formula!r} contains no atoms; "
            "no adsorption sites can be derived."
        )

    top_z = max(a.z for a in structure.atoms)
    surface = [a for a in structure.atoms if a.z >= top_z - tolerance]

    if not surface:
        raise EmptyStructureError(
            f"No surface atoms found in {structure.formula!r} "
            f"(tolerance {tolerance} Å below z = {top_z:.3f} Å)."
        )
    return surface


# ---------------------------------------------------------------------------
# Candidate generators
# ---------------------------------------------------------------------------

def top_sites(
    surface: list[Atom],
    rng: np.random.Generator,
    height: float = 2.0,
    keep_probability: float = 0.7,
) -> list[AdsorptionSite]:
    """On-top candidates, one per kept surface atom."""
    sites = []
    for atom in surface:
        if rng.random() >= keep_probability:
            continue
        sites.append(AdsorptionSite(
            id=f"top-{atom.id}",
            site_type=SITE_TYPE.TOP,
            coordinates=(atom.x, atom.y, atom.z + height),
            description=f"On-top of atom #{atom.id}",
        ))
    return sites


def bridge_sites(
    surface: list[Atom],
    rng: np.random.Generator,
    height: float = 1.8,
    min_distance: float = 2.0,
    max_distance: float = 3.0,
    keep_probability: float = 0.2,
) -> list[AdsorptionSite]:
    """
    Bridge candidates at the midpoint of nearest-neighbour surface pairs.

    Pairs are visited as (i, j) with i < j in surface order.  A random draw
    is made only for pairs inside the distance window.
    """
    sites = []
    for a1, a2 in combinations(surface, 2):
        dist = float(np.linalg.norm(a1.position - a2.position))
        if not (min_distance < dist < max_distance):
            continue
        if rng.random() >= keep_probability:
            continue
        mid = (a1.position + a2.position) / 2
        sites.append(AdsorptionSite(
            id=f"brg-{a1.id}-{a2.id}",
            site_type=SITE_TYPE.BRIDGE,
            coordinates=(float(mid[0]), float(mid[1]), float(mid[2]) + height),
            description=f"Bridge between atoms #{a1.id} and #{a2.id}",
        ))
    return sites


def hollow_sites(
    structure: MaterialStructure,
    surface: list[Atom],
    height: float = 1.5,
    min_distance: float = 2.0,
    max_distance: float = 3.0,
    tolerance: float = 1.5,
) -> list[AdsorptionSite]:
    """
    Hollow sites from a Delaunay triangulation of the surface layer.

    A triangle qualifies when its two shortest edges are nearest-neighbour
    bonds and it is not obtuse.  Its in-plane circumcenter is the hollow:
    the three-atom centroid for a close-packed layer, the four-fold centre
    for a square layer.

    Parameters
    ----------
    structure:
        The full slab; the layer under the surface decides fcc vs hcp.
    surface:
        Output of find_surface_atoms().
    height:
        Height of the site above the topmost atom (Å).
    min_distance, max_distance:
        Nearest-neighbour window (Å, exclusive).
    tolerance:
        Layer thickness used to pick out the subsurface layer (Å).

    Returns
    -------
    list[AdsorptionSite]
        Sorted by (y, x) of the hollow.  Empty when the surface has fewer
        than three atoms or is collinear.
    """
    if len(surface) < 3:
        return []

    xy = np.array([[a.x, a.y] for a in surface])
    try:
        tri = Delaunay(xy)
    except QhullError:
        logger.debug("Surface layer is degenerate; no hollow sites")
        return []

    top_z = max(a.z for a in surface)
    subsurface_xy = _subsurface_xy(structure, top_z, tolerance)

    found: list[tuple[np.ndarray, AdsorptionSite]] = []
    for simplex in tri.simplices:
        corners = [surface[int(i)] for i in simplex]
        pts = xy[simplex]
        edges = sorted(
            float(np.linalg.norm(pts[p] - pts[q])) for p, q in ((0, 1), (1, 2), (0, 2))
        )
        short, mid, longest = edges
        if not (min_distance < short and mid < max_distance):
            continue
        if longest ** 2 > _RIGHT_ANGLE_SLACK * (short ** 2 + mid ** 2):
            continue

        center = _circumcenter(pts)
        if center is None:
            continue
        if any(np.linalg.norm(center - c) < _HOLLOW_MERGE_DISTANCE for c, _ in found):
            continue

        if longest < max_distance:
            under = (
                len(subsurface_xy) > 0
                and np.min(np.linalg.norm(subsurface_xy - center, axis=1)) < _HCP_DISTANCE
            )
            label = "hcp hollow" if under else "fcc hollow"
        else:
            label = "four-fold hollow"

        ids = sorted(a.id for a in corners)
        found.append((center, AdsorptionSite(
            id="hollow-" + "-".join(str(i) for i in ids),
            site_type=SITE_TYPE.HOLLOW,
            coordinates=(float(center[0]), float(center[1]), top_z + height),
            description=label,
        )))

    found.sort(key=lambda item: (round(item[0][1], 6), round(item[0][0], 6)))
    return [site for _, site in found]


def estimated_hollow(surface: list[Atom], height: float = 1.5) -> AdsorptionSite:
    """Single hollow placed at a fixed offset from the first surface atom."""
    first = surface[0]
    top_z = max(a.z for a in surface)
    dx, dy = _FALLBACK_HOLLOW_OFFSET
    return AdsorptionSite(
        id="hollow-est",
        site_type=SITE_TYPE.HOLLOW,
        coordinates=(first.x + dx, first.y + dy, top_z + height),
        description="fcc hollow (estimated)",
    )


# ---------------------------------------------------------------------------
# Combined search
# ---------------------------------------------------------------------------

def find_candidate_sites(
    structure: MaterialStructure,
    rng: np.random.Generator,
    config: SiteSearchConfig | None = None,
) -> list[AdsorptionSite]:
    """
    Run the full candidate search on a slab.

    Hollow sites are appended only while the top + bridge count is below
    config.min_candidates (or is zero), and at least one is appended in
    that case, so the result is never empty.

    Raises
    ------
    EmptyStructureError
        If the structure has no (surface) atoms.
    """
    if config is None:
        config = SiteSearchConfig()

    surface = find_surface_atoms(structure, config.surface_tolerance)

    candidates = top_sites(
        surface, rng,
        height=config.top_height,
        keep_probability=config.top_keep_probability,
    )
    candidates += bridge_sites(
        surface, rng,
        height=config.bridge_height,
        min_distance=config.bridge_min_distance,
        max_distance=config.bridge_max_distance,
        keep_probability=config.bridge_keep_probability,
    )
    n_top_bridge = len(candidates)

    if n_top_bridge < config.min_candidates or not candidates:
        hollows = hollow_sites(
            structure, surface,
            height=config.hollow_height,
            min_distance=config.bridge_min_distance,
            max_distance=config.bridge_max_distance,
            tolerance=config.surface_tolerance,
        )
        n_needed = max(1, config.min_candidates - n_top_bridge)
        if hollows:
            candidates += hollows[:n_needed]
        else:
            candidates.append(estimated_hollow(surface, config.hollow_height))

    logger.debug(
        f"{len(surface)} surface atoms → {n_top_bridge} top/bridge and "
        f"{len(candidates) - n_top_bridge} hollow candidates"
    )
    return candidates


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _subsurface_xy(
    structure: MaterialStructure,
    top_z: float,
    tolerance: float,
) -> np.ndarray:
    """(x, y) of the layer directly below the surface band, or an empty array."""
    below = [a for a in structure.atoms if a.z < top_z - tolerance]
    if not below:
        return np.zeros((0, 2))
    z2 = max(a.z for a in below)
    return np.array([[a.x, a.y] for a in below if a.z >= z2 - tolerance])


def _circumcenter(pts: np.ndarray) -> np.ndarray | None:
    """In-plane circumcenter of a triangle given as a (3, 2) array."""
    (ax, ay), (bx, by), (cx, cy) = pts
    d = 2 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
    if abs(d) < 1e-12:
        return None
    a2, b2, c2 = ax * ax + ay * ay, bx * bx + by * by, cx * cx + cy * cy
    ux = (a2 * (by - cy) + b2 * (cy - ay) + c2 * (ay - by)) / d
    uy = (a2 * (cx - bx) + b2 * (ax - cx) + c2 * (bx - ax)) / d
    return np.array([ux, uy])
