"""
slabsite

Procedural FCC slab builder and heuristic adsorption site finder.

    from slabsite import build, analyze

    slab = build("Au(111)")
    result = analyze(slab, "CO")
"""

from slabsite.elements import lookup
from slabsite.sites.engine import analyze
from slabsite.sites.models import AdsorptionSite, AnalysisResult, EmptyStructureError
from slabsite.structure.models import Atom, MaterialStructure
from slabsite.structure.slab import build

__all__ = [
    "AdsorptionSite",
    "AnalysisResult",
    "Atom",
    "EmptyStructureError",
    "MaterialStructure",
    "analyze",
    "build",
    "lookup",
]
