"""
slabsite.sites

Adsorption site search and scoring.

Submodules
----------
models  AdsorptionSite, AnalysisResult, SITE_TYPE, EmptyStructureError
search  Surface detection; top, bridge and hollow candidate generation
energy  BindingModel interface, electronegativity heuristic, registry
engine  analyze(): search → score → rank → truncate
"""
