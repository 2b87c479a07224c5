"""
slabsite/sites/energy.py

Binding-energy models.

A BindingModel scores one site from the metal and adsorbate
electronegativities.  The shipped model is a closed-form heuristic:

    E = -0.5 · |χ_metal - χ_adsorbate| + offset(site_type) + noise

with offsets Top +0.5, Bridge -0.2, Hollow -0.8 (higher coordination binds
more strongly) and noise drawn uniformly from [-jitter, +jitter] to mimic
relaxation scatter.  The result is illustrative only and carries no
physical accuracy.

Adding a new model
------------------
1. Subclass BindingModel and implement site_energy()
2. Set name and label
3. Register the class in MODEL_REGISTRY

Usage
-----
    from slabsite.sites.energy import get_model
    model = get_model("heuristic", jitter=0.1)
    e = model.site_energy("Top", metal_en=2.54, adsorbate_en=2.55, rng=rng)
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

import numpy as np

from slabsite.sites.models import SITE_TYPE


# ---------------------------------------------------------------------------
# Adsorbate electronegativity
# ---------------------------------------------------------------------------

#: Electronegativity buckets tested in order; the first substring hit wins.
ADSORBATE_EN_RULES: tuple[tuple[str, float], ...] = (
    ("O", 3.44),
    ("N", 3.04),
)

#: Used when no rule matches (carbon-like).
DEFAULT_ADSORBATE_EN: float = 2.55


def adsorbate_electronegativity(adsorbate: str | None) -> float:
    """
    Effective electronegativity of an adsorbate label.

    Digits are stripped first ("H2O" → "HO"), then the label is matched by
    substring against ADSORBATE_EN_RULES.  Never raises.

    >>> adsorbate_electronegativity("CO")
    3.44
    >>> adsorbate_electronegativity("NH3")
    3.04
    >>> adsorbate_electronegativity("H")
    2.55
    """
    label = re.sub(r"\d", "", adsorbate or "")
    for fragment, en in ADSORBATE_EN_RULES:
        if fragment in label:
            return en
    return DEFAULT_ADSORBATE_EN


# ---------------------------------------------------------------------------
# Model interface
# ---------------------------------------------------------------------------

class BindingModel(ABC):
    """
    Abstract base class for site energy models.

    Parameters
    ----------
    jitter:
        Half-width (eV) of any stochastic relaxation term.  0 disables it.
    """

    #: Short name used in MODEL_REGISTRY and slabsite.yaml.
    name: str = ""

    #: Human-readable label reported as AnalysisResult.potential_label.
    label: str = ""

    def __init__(self, jitter: float = 0.1):
        self.jitter = jitter

    @abstractmethod
    def site_energy(
        self,
        site_type: str,
        metal_en: float,
        adsorbate_en: float,
        rng: np.random.Generator,
    ) -> float:
        """
        Binding energy (eV) of one site.

        Parameters
        ----------
        site_type:
            One of SITE_TYPE.
        metal_en:
            Pauling electronegativity of the slab element.
        adsorbate_en:
            Effective electronegativity of the adsorbate.
        rng:
            Source of any stochastic term.  Implementations must draw from
            it, never from a global generator, so seeded runs reproduce.
        """
        ...

    def __call__(self, site_type, metal_en, adsorbate_en, rng) -> float:
        return self.site_energy(site_type, metal_en, adsorbate_en, rng)


# ---------------------------------------------------------------------------
# Heuristic model
# ---------------------------------------------------------------------------

#: Additive offset per site type (eV).
SITE_OFFSETS: dict[str, float] = {
    SITE_TYPE.TOP:    0.5,
    SITE_TYPE.BRIDGE: -0.2,
    SITE_TYPE.HOLLOW: -0.8,
    SITE_TYPE.FCC:    -0.8,
    SITE_TYPE.HCP:    -0.8,
}


class HeuristicBindingModel(BindingModel):
    """
    Electronegativity-difference heuristic with coordination offsets.

    Parameters
    ----------
    scale:
        Prefactor on |Δχ|; the base binding is -scale·|Δχ|.
    jitter:
        Half-width (eV) of the uniform relaxation noise.
    """

    name = "heuristic"
    label = "Electronegativity heuristic (coordination-corrected)"

    def __init__(self, scale: float = 0.5, jitter: float = 0.1):
        super().__init__(jitter=jitter)
        self.scale = scale

    def base_binding(self, metal_en: float, adsorbate_en: float) -> float:
        return -self.scale * abs(metal_en - adsorbate_en)

    def site_energy(self, site_type, metal_en, adsorbate_en, rng) -> float:
        energy = self.base_binding(metal_en, adsorbate_en) + SITE_OFFSETS[site_type]
        if self.jitter > 0:
            energy += float(rng.uniform(-self.jitter, self.jitter))
        return energy


# ---------------------------------------------------------------------------
# Model registry
# ---------------------------------------------------------------------------

MODEL_REGISTRY: dict[str, type[BindingModel]] = {
    HeuristicBindingModel.name: HeuristicBindingModel,
}


def get_model(model: str | BindingModel, jitter: float = 0.1) -> BindingModel:
    """
    Resolve a registry key to a new model instance, or pass a BindingModel
    instance through unchanged (its own jitter is kept).

    Raises
    ------
    KeyError
        If model is a string that is not registered.
    """
    if isinstance(model, BindingModel):
        return model
    try:
        cls = MODEL_REGISTRY[model]
    except KeyError:
        raise KeyError(
            f"Unknown binding model '{model}'.  Available: {sorted(MODEL_REGISTRY)}"
        ) from None
    return cls(jitter=jitter)
