"""
Analysis - face detection on a vertex/edge skeleton.

EXPORTS:
- detect_faces (strategy dispatcher)
- Graph strategies: build_adjacency, find_triangles, find_quads,
  is_coplanar_quad, orient_triangles_outward, build_grid_faces
- Convex hull: project_to_affine_hull, compute_convex_hull_faces,
  has_valid_convex_hull, convex_hull_stats
"""

from .faces import (
    detect_faces,
    build_adjacency,
    find_triangles,
    find_quads,
    is_coplanar_quad,
    orient_triangles_outward,
    build_grid_faces,
)
from .convex_hull import (
    project_to_affine_hull,
    compute_convex_hull_faces,
    has_valid_convex_hull,
    convex_hull_stats,
)
