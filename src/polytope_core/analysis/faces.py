"""
Face Detection Strategies
=========================

2-faces of a vertex/edge skeleton, selected by a strategy tag.

    Tag              Source of faces
    ---------------  -------------------------------------------------------
    analytical-quad  generator quads (v00, v10, v11, v01) of the hypercube
    analytical       generator triangles of the simplex (all triples)
    triangles        3-cycles of the edge graph
    quads            4-cycles without diagonals that are planar in n-D
    convex-hull      qhull in the affine span (see convex_hull.py)
    grid             parametric (res_u, res_v) grid with wrap-around
    none             point clouds; no faces

WINDING:
    Faces keep the order in which the cycle was walked. Only the triangle
    strategy corrects orientation, and only for 3-D input (normal pointing
    away from the vertex centroid); above 3-D "outward" is undefined for a
    2-face.

COST:
    find_triangles is O(Σ deg²) and find_quads O(Σ deg³). Both are lazy:
    nothing in construction calls them until faces are requested.
"""

import logging
from itertools import combinations
from typing import Dict, List, Optional, Sequence, Set, Tuple

import numpy as np

from ..spec.constants import (
    FACES_ANALYTICAL_QUAD, FACES_ANALYTICAL, FACES_QUADS,
    FACES_CONVEX_HULL, FACES_GRID, FACES_NONE, FACE_METHODS, EPS_COPLANAR,
)
from ..builders.hypercube import generate_hypercube_data
from ..operators.vectors import (
    add_vectors, subtract_vectors, scale_vector, dot_product, cross_product_3d,
)
from .convex_hull import compute_convex_hull_faces

logger = logging.getLogger(__name__)


# =============================================================================
# Graph helpers
# =============================================================================

def build_adjacency(edges) -> Dict[int, Set[int]]:
    """Undirected adjacency sets from an edge list."""
    adjacency: Dict[int, Set[int]] = {}
    for i, j in edges:
        i, j = int(i), int(j)
        adjacency.setdefault(i, set()).add(j)
        adjacency.setdefault(j, set()).add(i)
    return adjacency


def find_triangles(adjacency: Dict[int, Set[int]], vertex_count: int) -> List[Tuple[int, int, int]]:
    """
    All 3-cycles as (v1, v2, v3) with v1 < v2 < v3.

    Each triangle is found exactly once, from its smallest vertex.
    """
    faces = []
    for v1 in range(vertex_count):
        higher = sorted(v for v in adjacency.get(v1, ()) if v > v1)
        for v2, v3 in combinations(higher, 2):
            if v3 in adjacency[v2]:
                faces.append((v1, v2, v3))
    return faces


def is_coplanar_quad(quad: Sequence[int], vertices) -> bool:
    """
    True if the four vertices lie in one 2-plane.

    e1, e2, e3 = v1-v0, v2-v0, v3-v0. Gram-Schmidt on e1, e2 and test that
    the residual of e3 is below EPS_COPLANAR relative to the longest edge.
    Collinear e1, e2 degrade to a line test; coincident v0, v1 are
    trivially coplanar.
    """
    if len(quad) != 4:
        return False
    vertices = np.asarray(vertices, dtype=np.float64)
    v0, v1, v2, v3 = (vertices[int(i)] for i in quad)
    e1, e2, e3 = v1 - v0, v2 - v0, v3 - v0
    eps_sq = EPS_COPLANAR * EPS_COPLANAR

    n1 = float(np.dot(e1, e1))
    if n1 < eps_sq:
        return True
    u1 = e1 / np.sqrt(n1)

    e2_perp = e2 - np.dot(e2, u1) * u1
    n2 = float(np.dot(e2_perp, e2_perp))
    if n2 < eps_sq:
        e3_perp = e3 - np.dot(e3, u1) * u1
        return float(np.dot(e3_perp, e3_perp)) < eps_sq * n1
    u2 = e2_perp / np.sqrt(n2)

    n3 = float(np.dot(e3, e3))
    residual = n3 - np.dot(e3, u1) ** 2 - np.dot(e3, u2) ** 2
    return residual < eps_sq * max(n1, float(np.dot(e2, e2)), n3)


def find_quads(adjacency: Dict[int, Set[int]], vertices, vertex_count: int) -> List[Tuple[int, int, int, int]]:
    """
    4-cycles v1-v2-v3-v4 with no diagonal edge that are planar.

    v1 is the smallest index on the cycle; winding follows the walk.
    """
    faces = []
    seen = set()
    for v1 in range(vertex_count):
        n1 = adjacency.get(v1)
        if not n1 or len(n1) < 2:
            continue
        for v2 in sorted(n1):
            if v2 <= v1:
                continue
            for v3 in sorted(adjacency.get(v2, ())):
                if v3 <= v1 or v3 == v2:
                    continue
                for v4 in sorted(adjacency.get(v3, ())):
                    if v4 <= v1 or v4 == v2 or v4 == v3:
                        continue
                    if v1 not in adjacency.get(v4, ()):
                        continue
                    # Diagonals mean the 4-cycle is two triangles, not a face
                    if v3 in n1 or v4 in adjacency[v2]:
                        continue
                    key = tuple(sorted((v1, v2, v3, v4)))
                    if key in seen:
                        continue
                    quad = (v1, v2, v3, v4)
                    if is_coplanar_quad(quad, vertices):
                        seen.add(key)
                        faces.append(quad)
    return faces


def orient_triangles_outward(triangles, vertices) -> List[Tuple[int, int, int]]:
    """
    Flip 3-D triangles whose normal points toward the vertex centroid.

    Input above 3-D is returned unchanged.
    """
    vertices = np.asarray(vertices, dtype=np.float64)
    if vertices.ndim != 2 or vertices.shape[1] != 3:
        return [tuple(int(v) for v in tri) for tri in triangles]

    center = vertices.mean(axis=0)
    oriented = []
    for a, b, c in triangles:
        pa, pb, pc = vertices[a], vertices[b], vertices[c]
        normal = cross_product_3d(subtract_vectors(pb, pa), subtract_vectors(pc, pa))
        face_center = scale_vector(add_vectors(add_vectors(pa, pb), pc), 1.0 / 3.0)
        if dot_product(normal, subtract_vectors(face_center, center)) < 0:
            b, c = c, b
        oriented.append((int(a), int(b), int(c)))
    return oriented


def build_grid_faces(res_u: int, res_v: int, offset: int = 0) -> List[Tuple[int, int, int, int]]:
    """
    Quads of a (res_u × res_v) parametric grid wrapping in both directions.

    Vertex (i, j) has index offset + i·res_v + j.

    Returns:
        res_u · res_v quads
    """
    res_u, res_v = int(res_u), int(res_v)
    if res_u < 2 or res_v < 2:
        raise ValueError(f"Grid resolution must be >= 2 in both directions, got ({res_u}, {res_v})")

    faces = []
    for i in range(res_u):
        i_next = (i + 1) % res_u
        for j in range(res_v):
            j_next = (j + 1) % res_v
            faces.append((
                offset + i * res_v + j,
                offset + i_next * res_v + j,
                offset + i_next * res_v + j_next,
                offset + i * res_v + j_next,
            ))
    return faces


def _analytical_quads(vertex_count: int) -> list:
    dimension = vertex_count.bit_length() - 1
    if dimension < 2 or (1 << dimension) != vertex_count:
        return []
    return generate_hypercube_data(dimension)[2]


# =============================================================================
# Dispatcher
# =============================================================================

def detect_faces(vertices, edges, method: str,
                 faces: Optional[list] = None,
                 grid: Optional[Tuple[int, int]] = None) -> list:
    """
    Run one face strategy.

    Args:
        vertices: (N, d) array
        edges: list of (i, j)
        method: strategy tag (see FACE_METHODS)
        faces: generator faces for the analytical strategies; when None the
            analytical faces are rebuilt from the vertex count
        grid: (res_u, res_v) for the grid strategy

    Raises:
        ValueError: empty vertices, edge index out of range, unknown method,
            grid strategy without a resolution
    """
    vertices = np.asarray(vertices, dtype=np.float64)
    n = len(vertices)
    if n == 0:
        raise ValueError("Vertices array cannot be empty")
    if method not in FACE_METHODS:
        raise ValueError(f"Unknown face detection method: {method!r}")

    for i, j in edges:
        if i < 0 or i >= n or j < 0 or j >= n:
            raise ValueError(f"Edge ({i}, {j}) references non-existent vertex")

    if method == FACES_NONE:
        return []

    if method == FACES_ANALYTICAL_QUAD:
        return list(faces) if faces is not None else _analytical_quads(n)

    if method == FACES_ANALYTICAL:
        triangles = faces if faces is not None else combinations(range(n), 3)
        return orient_triangles_outward(triangles, vertices)

    if method == FACES_GRID:
        if grid is None:
            raise ValueError("Grid face detection needs a (res_u, res_v) resolution")
        return build_grid_faces(*grid)

    if method == FACES_CONVEX_HULL:
        return compute_convex_hull_faces(vertices)

    adjacency = build_adjacency(edges)
    if method == FACES_QUADS:
        return find_quads(adjacency, vertices, n)

    triangles = find_triangles(adjacency, n)
    logger.debug("Triangle detection: V=%d E=%d F=%d", n, len(edges), len(triangles))
    return orient_triangles_outward(triangles, vertices)
