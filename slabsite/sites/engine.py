"""
slabsite/sites/engine.py

analyze(): score and rank adsorption sites on a slab.

    from slabsite import build, analyze
    import numpy as np

    slab = build("Au(111)")
    result = analyze(slab, "CO", rng=np.random.default_rng(42))
    print(result.summary)
    print(result.to_dataframe())

The same structure, adsorbate, config and seed always give the same sites
and energies.  Without an rng a fresh unseeded generator is used.
"""

from __future__ import annotations

import logging
import time

import numpy as np

from slabsite.config import SiteSearchConfig
from slabsite.elements import lookup_physical
from slabsite.sites.energy import BindingModel, adsorbate_electronegativity, get_model
from slabsite.sites.models import AnalysisResult, EmptyStructureError
from slabsite.sites.search import find_candidate_sites
from slabsite.structure.models import MaterialStructure

logger = logging.getLogger(__name__)


def analyze(
    structure: MaterialStructure,
    adsorbate: str,
    config: SiteSearchConfig | None = None,
    rng: np.random.Generator | None = None,
    model: str | BindingModel = "heuristic",
) -> AnalysisResult:
    """
    Find, score and rank adsorption sites for an adsorbate on a slab.

    Parameters
    ----------
    structure:
        Slab from slabsite.structure.slab.build().  Not modified.
    adsorbate:
        Adsorbate label, e.g. "CO", "OH", "NH3".  Labels matching no
        electronegativity rule use the default bucket.
    config:
        Site search parameters.  Defaults to SiteSearchConfig().
    rng:
        NumPy random generator used for site sampling, energy noise and the
        system id.  A new unseeded one is created if None.
    model:
        MODEL_REGISTRY key or a BindingModel instance.

    Returns
    -------
    AnalysisResult
        At most config.max_sites sites, ascending by energy.

    Raises
    ------
    EmptyStructureError
        If the structure has no atoms or no surface atoms.
    KeyError
        If model names an unregistered binding model.
    """
    start = time.perf_counter()

    if config is None:
        config = SiteSearchConfig()
    if rng is None:
        rng = np.random.default_rng()
    if not structure.atoms:
        raise EmptyStructureError(
            f"Cannot analyse {adsorbate!r} adsorption: structure "
            f"{structure.formula!r} contains no atoms."
        )

    binding = get_model(model, jitter=config.jitter)

    candidates = find_candidate_sites(structure, rng, config)

    metal_en = lookup_physical(structure.formula).electronegativity
    ads_en = adsorbate_electronegativity(adsorbate)

    scored = [
        site.with_energy(binding(site.site_type, metal_en, ads_en, rng))
        for site in candidates
    ]
    ranked = sorted(scored, key=lambda s: s.energy)[: config.max_sites]
    best = ranked[0]

    summary = (
        f"Adsorption analysis of {adsorbate} on {structure.formula}"
        f"{structure.miller_index} using the {binding.name} model. "
        f"Found {len(candidates)} candidate sites. "
        f"Most stable site: {best.site_type} ({best.energy:.2f} eV)."
    )
    system_id = f"sys_{int(rng.integers(10000))}"
    elapsed = time.perf_counter() - start

    logger.info(
        f"{adsorbate} on {structure.formula}{structure.miller_index}: "
        f"{len(candidates)} candidates, best {best.site_type} "
        f"at {best.energy:.3f} eV"
    )

    return AnalysisResult(
        sites=tuple(ranked),
        summary=summary,
        potential_label=binding.label,
        calculation_time=f"{elapsed:.3f}s",
        system_id=system_id,
        model_name=binding.name,
    )
