"""
slabsite/structure/models.py

Immutable containers for a generated slab.

An Atom is created once by the slab builder and never changes afterwards;
its display colour and radius are copied from the element table at
construction.  A MaterialStructure owns its atoms as a tuple, in generation
order, together with the three supercell vectors (vacuum included on the
z-axis).

MaterialStructure.to_atoms() bridges to ASE so a slab can be written to any
format ASE supports (POSCAR, XYZ, CIF, ...).

Usage
-----
    from slabsite import build

    structure = build("Au(111)")
    print(structure.n_atoms)          # 72
    structure.write("slab.vasp")      # via ase.io.write
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
from ase import Atoms
from ase.io import write


Vector3 = tuple[float, float, float]


@dataclass(frozen=True)
class Atom:
    id: int
    element: str
    x: float
    y: float
    z: float
    display_color: str
    display_radius: float

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])


@dataclass(frozen=True)
class MaterialStructure:
    """
    One generated slab.

    Attributes
    ----------
    formula:
        Element symbol of the slab (single-element FCC metals only).
    reference_id:
        Simulated database identifier copied from the element table.
    miller_index:
        Surface orientation in display form, e.g. "(111)".
    description:
        Human-readable one-line description.
    formation_energy, band_gap, symmetry_group:
        Bulk properties copied from the element table.
    atoms:
        Atoms in generation order.  Ids run 0..n_atoms-1.
    lattice_vectors:
        Exactly three supercell vectors (Å).  The third one spans the slab
        thickness plus the vacuum gap.
    """

    formula: str
    reference_id: str
    miller_index: str
    description: str
    formation_energy: float
    band_gap: float
    symmetry_group: str
    atoms: tuple[Atom, ...] = field(default_factory=tuple)
    lattice_vectors: tuple[Vector3, Vector3, Vector3] = (
        (0.0, 0.0, 0.0),
        (0.0, 0.0, 0.0),
        (0.0, 0.0, 0.0),
    )

    @property
    def n_atoms(self) -> int:
        return len(self.atoms)

    @property
    def positions(self) -> np.ndarray:
        """(n_atoms, 3) array of Cartesian positions (Å)."""
        if not self.atoms:
            return np.zeros((0, 3))
        return np.array([[a.x, a.y, a.z] for a in self.atoms])

    @property
    def cell(self) -> np.ndarray:
        """3×3 supercell matrix (Å)."""
        return np.array(self.lattice_vectors, dtype=float)

    @property
    def top_z(self) -> float | None:
        """z of the topmost atom, or None for an empty structure."""
        if not self.atoms:
            return None
        return max(a.z for a in self.atoms)

    def to_atoms(self) -> Atoms:
        """
        Convert to an ASE Atoms object.

        The cell is the supercell including vacuum; periodicity is in-plane
        only, as for a slab.
        """
        return Atoms(
            symbols=[a.element for a in self.atoms],
            positions=self.positions,
            cell=self.cell,
            pbc=(True, True, False),
        )

    def write(self, path: str | Path, format: str | None = None) -> Path:
        """
        Write the slab to disk through ase.io.write.

        Parameters
        ----------
        path:
            Output file.  The format is inferred from the extension unless
            format is given.
        format:
            Any ASE format name, e.g. "vasp", "xyz", "cif".

        Returns
        -------
        Path
            The path written.

        Raises
        ------
        KeyError
            If the slab contains a symbol ASE does not know (e.g. an
            unrecognised element carried through from the query).
        """
        path = Path(path)
        write(str(path), self.to_atoms(), format=format)
        return path

    def __repr__(self) -> str:
        return (
            f"MaterialStructure(formula={self.formula}, "
            f"miller={self.miller_index}, n_atoms={self.n_atoms})"
        )
