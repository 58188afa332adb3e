"""
Operators - vector arithmetic, vertex hashing, spatial hashing, edge inference.

EXPORTS:
- Vectors: create_vector, add_vectors, subtract_vectors, scale_vector,
  dot_product, magnitude, normalize, cross_product_3d, euclidean_distance
- Deduplication: VertexHashSet, hash_vertex, vertices_equal, deduplicate_vertices
- Neighbour queries: SpatialHashGrid, estimate_min_distance
- Edges: generate_edges_by_min_distance, generate_edges_brute_force
"""

# === Vectors ===
from .vectors import (
    create_vector,
    add_vectors,
    subtract_vectors,
    scale_vector,
    dot_product,
    magnitude,
    normalize,
    cross_product_3d,
    euclidean_distance,
)

# === Vertex deduplication ===
from .vertex_hash import (
    VertexHashSet,
    quantize_coord,
    hash_vertex,
    vertices_equal,
    vertex_to_key,
    deduplicate_vertices,
)

# === Spatial hashing / edges ===
from .spatial_hash import SpatialHashGrid, estimate_min_distance
from .edges import generate_edges_by_min_distance, generate_edges_brute_force
