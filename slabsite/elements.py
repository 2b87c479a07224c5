"""
slabsite/elements.py

Static per-element property tables.

Two independent tables are kept:

  - PHYSICAL_PROPERTIES: lattice constant, reference database id, formation
    energy, band gap, symmetry group and electronegativity.  Used by the slab
    builder and the binding-energy model.
  - DISPLAY_PROPERTIES: CPK colour and covalent radius.  Copied onto every
    Atom at construction so renderers never have to look them up again.

Both tables define the fallback key "X".  Every accessor in this module is
total: an untabulated symbol resolves to the "X" entry instead of raising.

The physical "X" record reuses the copper constants, so an unknown metal is
still built as a plausible FCC slab.

Usage
-----
    from slabsite.elements import lookup

    rec = lookup("Au")
    print(rec.lattice_constant)   # 4.078
    print(rec.display_color)      # "#FFD123"

    lookup("Zz").display_color    # "#FF00FF"
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


#: Key of the fallback entry in both tables.
FALLBACK_SYMBOL: str = "X"

#: Element used when a query carries no recognisable element symbol.
DEFAULT_ELEMENT: str = "Cu"


# ---------------------------------------------------------------------------
# Record types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PhysicalProperties:
    lattice_constant: float     # Å, conventional FCC cell
    reference_id: str           # simulated Materials Project id
    formation_energy: float     # eV/atom
    band_gap: float             # eV
    symmetry_group: str         # space group symbol
    electronegativity: float    # Pauling scale


@dataclass(frozen=True)
class DisplayProperties:
    color: str                  # hex CPK colour
    radius: float               # covalent radius (Å)


@dataclass(frozen=True)
class ElementRecord:
    """
    Merged view of the physical and display entries for one symbol.

    Attributes
    ----------
    symbol:
        The symbol that was looked up (not the fallback key), so callers can
        still report what the user asked for.
    tabulated:
        False when the physical entry came from the fallback record.
    """

    symbol: str
    lattice_constant: float
    reference_id: str
    formation_energy: float
    band_gap: float
    symmetry_group: str
    electronegativity: float
    display_color: str
    covalent_radius: float
    tabulated: bool = True


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

_PHYSICAL: dict[str, PhysicalProperties] = {
    "Au": PhysicalProperties(4.078, "mp-81",  0.0, 0.0, "Fm-3m", 2.54),
    "Ag": PhysicalProperties(4.085, "mp-124", 0.0, 0.0, "Fm-3m", 1.93),
    "Cu": PhysicalProperties(3.615, "mp-30",  0.0, 0.0, "Fm-3m", 1.90),
    "Pt": PhysicalProperties(3.924, "mp-126", 0.0, 0.0, "Fm-3m", 2.28),
    "Pd": PhysicalProperties(3.890, "mp-2",   0.0, 0.0, "Fm-3m", 2.20),
    "Ni": PhysicalProperties(3.524, "mp-23",  0.0, 0.0, "Fm-3m", 1.91),
    "Al": PhysicalProperties(4.049, "mp-134", 0.0, 0.0, "Fm-3m", 1.61),
    # Fallback: copper constants under a placeholder id
    FALLBACK_SYMBOL: PhysicalProperties(3.615, "mp-unknown", 0.0, 0.0, "Fm-3m", 1.90),
}

_DISPLAY: dict[str, DisplayProperties] = {
    "H":  DisplayProperties("#FFFFFF", 0.37),
    "C":  DisplayProperties("#909090", 0.77),
    "N":  DisplayProperties("#3050F8", 0.75),
    "O":  DisplayProperties("#FF0D0D", 0.73),
    "F":  DisplayProperties("#90E050", 0.71),
    "Na": DisplayProperties("#AB5CF2", 1.54),
    "Mg": DisplayProperties("#8AFF00", 1.30),
    "Al": DisplayProperties("#BFA6A6", 1.18),
    "Si": DisplayProperties("#F0C8A0", 1.11),
    "P":  DisplayProperties("#FF8000", 1.06),
    "S":  DisplayProperties("#FFFF30", 1.02),
    "Cl": DisplayProperties("#1FF01F", 0.99),
    "K":  DisplayProperties("#8F40D4", 1.96),
    "Ca": DisplayProperties("#3DFF00", 1.74),
    "Ti": DisplayProperties("#BFC2C7", 1.36),
    "Fe": DisplayProperties("#E06633", 1.25),
    "Ni": DisplayProperties("#50D050", 1.21),
    "Cu": DisplayProperties("#C88033", 1.28),
    "Zn": DisplayProperties("#7D80B0", 1.31),
    "Au": DisplayProperties("#FFD123", 1.44),
    "Ag": DisplayProperties("#C0C0C0", 1.44),
    "Pt": DisplayProperties("#D0D0E0", 1.38),
    "Pd": DisplayProperties("#006985", 1.37),
    FALLBACK_SYMBOL: DisplayProperties("#FF00FF", 1.0),
}

PHYSICAL_PROPERTIES: Mapping[str, PhysicalProperties] = MappingProxyType(_PHYSICAL)
DISPLAY_PROPERTIES: Mapping[str, DisplayProperties] = MappingProxyType(_DISPLAY)


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------

def is_tabulated(symbol: str | None) -> bool:
    """True if symbol has its own physical record (the fallback key excluded)."""
    return bool(symbol) and symbol != FALLBACK_SYMBOL and symbol in PHYSICAL_PROPERTIES


def lookup_physical(symbol: str | None) -> PhysicalProperties:
    """Physical constants for symbol, or the fallback record."""
    return PHYSICAL_PROPERTIES.get(symbol or FALLBACK_SYMBOL, PHYSICAL_PROPERTIES[FALLBACK_SYMBOL])


def lookup_display(symbol: str | None) -> DisplayProperties:
    """Colour and radius for symbol, or the magenta 1.0 Å fallback."""
    return DISPLAY_PROPERTIES.get(symbol or FALLBACK_SYMBOL, DISPLAY_PROPERTIES[FALLBACK_SYMBOL])


def lookup(symbol: str | None) -> ElementRecord:
    """
    Resolve symbol against both tables.

    Never raises.  The two tables fall back independently: an element such as
    "O" has display data but no physical record, so it gets its own colour
    together with the fallback lattice constant.

    Parameters
    ----------
    symbol:
        Element symbol, e.g. "Au".  None and "" resolve to the fallback.

    Returns
    -------
    ElementRecord
    """
    phys = lookup_physical(symbol)
    disp = lookup_display(symbol)
    return ElementRecord(
        symbol=symbol or FALLBACK_SYMBOL,
        lattice_constant=phys.lattice_constant,
        reference_id=phys.reference_id,
        formation_energy=phys.formation_energy,
        band_gap=phys.band_gap,
        symmetry_group=phys.symmetry_group,
        electronegativity=phys.electronegativity,
        display_color=disp.color,
        covalent_radius=disp.radius,
        tabulated=is_tabulated(symbol),
    )
