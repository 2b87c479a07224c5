"""
slabsite/config.py

Load and validate a slabsite.yaml file into typed configuration models.

Usage
-----
    from slabsite.config import load_config

    cfg = load_config("slabsite.yaml")
    print(cfg.slab.vacuum)
    print(cfg.sites.max_sites)

Every field has a default, so an absent file section (or no file at all)
reproduces the stock geometry: 3x3x4 (111) and 4x4x4 (100) slabs with
10 Å vacuum, at most 8 ranked sites.

All models use pydantic v2.  Integer inputs for float fields (e.g.
vacuum: 10) are coerced automatically.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, field_validator, model_validator


# ---------------------------------------------------------------------------
# Sub-models
# ---------------------------------------------------------------------------


class SlabConfig(BaseModel):
    """
    Supercell dimensions used by the slab builder.

    (111) slabs use a two-atom rectangular basis per in-plane cell, so a
    3x3 footprint with 4 layers holds 72 atoms.  (100) and any other index
    use one atom per cell: 4x4x4 gives 64 atoms.
    """

    fcc111_repeats: tuple[int, int] = (3, 3)   # in-plane cells (x, y)
    fcc100_repeats: tuple[int, int] = (4, 4)
    layers: int = 4                            # atomic layers along z
    vacuum: float = 10.0                       # Å added to the z lattice vector

    @field_validator("fcc111_repeats", "fcc100_repeats")
    @classmethod
    def _positive_repeats(cls, v: tuple[int, int]) -> tuple[int, int]:
        if min(v) < 1:
            raise ValueError(f"in-plane repeats must be >= 1, got {v}.")
        return v

    @field_validator("layers")
    @classmethod
    def _positive_layers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"layers must be >= 1, got {v}.")
        return v

    @field_validator("vacuum")
    @classmethod
    def _non_negative_vacuum(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"vacuum must be >= 0 Å, got {v}.")
        return v


class SiteSearchConfig(BaseModel):
    """
    Geometric and sampling parameters of the adsorption site search.

    Top and bridge candidates are randomly thinned to keep the result
    readable: each on-top candidate survives with top_keep_probability,
    each bridge candidate with bridge_keep_probability.  When fewer than
    min_candidates survive, hollow sites are added.
    """

    surface_tolerance: float = 1.5        # Å below the top atom
    top_height: float = 2.0               # Å above the atom
    bridge_height: float = 1.8            # Å above the pair midpoint
    hollow_height: float = 1.5            # Å above the top layer
    bridge_min_distance: float = 2.0      # Å, exclusive
    bridge_max_distance: float = 3.0      # Å, exclusive
    top_keep_probability: float = 0.7
    bridge_keep_probability: float = 0.2
    min_candidates: int = 5
    max_sites: int = 8
    jitter: float = 0.1                   # eV half-width of relaxation noise

    @field_validator(
        "surface_tolerance", "top_height", "bridge_height", "hollow_height",
        "bridge_min_distance", "jitter",
    )
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"distances and jitter must be >= 0, got {v}.")
        return v

    @field_validator("top_keep_probability", "bridge_keep_probability")
    @classmethod
    def _probability(cls, v: float) -> float:
        if not (0.0 <= v <= 1.0):
            raise ValueError(f"keep probabilities must be in [0, 1], got {v}.")
        return v

    @field_validator("max_sites")
    @classmethod
    def _positive_max_sites(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_sites must be >= 1, got {v}.")
        return v

    @field_validator("min_candidates")
    @classmethod
    def _non_negative_min(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"min_candidates must be >= 0, got {v}.")
        return v

    @model_validator(mode="after")
    def _bridge_window(self) -> "SiteSearchConfig":
        if self.bridge_min_distance >= self.bridge_max_distance:
            raise ValueError(
                f"bridge_min_distance ({self.bridge_min_distance}) must be less "
                f"than bridge_max_distance ({self.bridge_max_distance})."
            )
        return self


# ---------------------------------------------------------------------------
# Root config model
# ---------------------------------------------------------------------------


class SlabsiteConfig(BaseModel):
    """
    Root configuration object loaded from slabsite.yaml.

    Example
    -------
    .. code-block:: yaml

        slab:
          layers: 4
          vacuum: 10.0

        sites:
          max_sites: 8
          jitter: 0.1

        model: heuristic
    """

    slab: SlabConfig = SlabConfig()
    sites: SiteSearchConfig = SiteSearchConfig()
    model: str = "heuristic"

    @field_validator("model")
    @classmethod
    def _known_model(cls, v: str) -> str:
        from slabsite.sites.energy import MODEL_REGISTRY
        if v not in MODEL_REGISTRY:
            raise ValueError(
                f"model must be one of {sorted(MODEL_REGISTRY)}, got '{v}'."
            )
        return v


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def load_config(path: str | Path) -> SlabsiteConfig:
    """
    Load and validate a slabsite.yaml file.

    Parameters
    ----------
    path:
        Path to the YAML configuration file.

    Returns
    -------
    SlabsiteConfig

    Raises
    ------
    FileNotFoundError
        If the YAML file does not exist.
    ValueError
        If the file is empty or its top level is not a mapping.
    pydantic.ValidationError
        If a value fails validation.
    yaml.YAMLError
        If the file is not valid YAML.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    if raw is None:
        raise ValueError(
            f"{path} is empty or contains only comments.\n"
            "Generate a template with: slabsite init > slabsite.yaml"
        )
    if not isinstance(raw, dict):
        raise ValueError(
            f"Expected a YAML mapping at the top level, got {type(raw).__name__}.  "
            "Make sure slabsite.yaml starts with a key like 'slab:' at column 0."
        )

    return SlabsiteConfig.model_validate(raw)


CONFIG_TEMPLATE = """\
# slabsite.yaml: slabsite configuration file
# Generated by `slabsite init`.  Every field is optional; the values below
# are the defaults.

# ---------------------------------------------------------------------------
# Slab builder
# ---------------------------------------------------------------------------
slab:
  fcc111_repeats: [3, 3]        # in-plane cells for (111); 2 atoms per cell
  fcc100_repeats: [4, 4]        # in-plane cells for (100) and other indices
  layers: 4                     # atomic layers
  vacuum: 10.0                  # vacuum gap on the z lattice vector (Å)

# ---------------------------------------------------------------------------
# Adsorption site search
# ---------------------------------------------------------------------------
sites:
  surface_tolerance: 1.5        # atoms within this of max z are surface (Å)
  top_height: 2.0               # on-top height above the atom (Å)
  bridge_height: 1.8            # bridge height above the pair midpoint (Å)
  hollow_height: 1.5            # hollow height above the top layer (Å)
  bridge_min_distance: 2.0      # nearest-neighbour window, exclusive (Å)
  bridge_max_distance: 3.0
  top_keep_probability: 0.7     # fraction of on-top candidates kept
  bridge_keep_probability: 0.2  # fraction of bridge candidates kept
  min_candidates: 5             # add hollow sites below this many candidates
  max_sites: 8                  # ranked sites returned
  jitter: 0.1                   # ± relaxation noise on energies (eV)

# ---------------------------------------------------------------------------
# Binding-energy model
# ---------------------------------------------------------------------------
model: heuristic
"""
