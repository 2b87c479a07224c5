"""
slabsite.structure

Query parsing and procedural slab construction.

Submodules
----------
query   Parse "Au(111)"-style queries into element + Miller index
slab    Build FCC(111) and FCC(100) slabs with vacuum padding
models  Atom and MaterialStructure containers; ASE conversion
"""
