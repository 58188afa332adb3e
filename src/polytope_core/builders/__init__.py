"""
Vertex generators - pure geometry, one module per symmetry family.

EXPORTS:
- A_n: generate_simplex_vertices, generate_simplex_data
- B_n: generate_hypercube_vertices, generate_hypercube_data,
  generate_cross_polytope_vertices, generate_{rectified,truncated,
  cantellated,runcinated,omnitruncated}_hypercube_vertices,
  permutation_generator
- D_n: generate_demihypercube_vertices

`*_data` functions return (V, E, F) with analytical connectivity;
`*_vertices` functions return only the (N, d) vertex array.
"""

# === A_n ===
from .simplex import generate_simplex_vertices, generate_simplex_data

# === B_n ===
from .hypercube import (
    generate_hypercube_vertices,
    generate_hypercube_data,
    generate_cross_polytope_vertices,
    generate_rectified_hypercube_vertices,
    generate_truncated_hypercube_vertices,
    generate_cantellated_hypercube_vertices,
    generate_runcinated_hypercube_vertices,
    generate_omnitruncated_hypercube_vertices,
    permutation_generator,
)

# === D_n ===
from .demihypercube import generate_demihypercube_vertices
