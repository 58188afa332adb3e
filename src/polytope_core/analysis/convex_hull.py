"""
Convex Hull Face Extraction
===========================

Triangular 2-faces of an n-dimensional convex point set via qhull
(scipy.spatial.ConvexHull).

AFFINE HULL FIRST:
    Some vertex sets lie in a proper affine subspace (e.g. a simplex embedded
    in one dimension too many). qhull rejects flat input, so points are first
    expressed in an orthonormal basis of their affine span (Gram-Schmidt over
    v_i - v_0, residual threshold EPS_BASIS).

OUTPUT:
    span == 3 : hull triangles, wound so the normal points away from the
                centroid
    span  > 3 : facets are (span-1)-simplices; every 3-subset of every facet
                is emitted once (sorted-key dedup, first-seen winding)

    This over-reports for non-simplicial facets (qhull triangulates them,
    "Qt"), which is the accepted behaviour for the convex-hull strategy.

DEGENERATE INPUT (all return []):
    fewer than 4 points, span < 3, qhull failure (logged)
"""

import logging
from itertools import combinations
from typing import List, Optional, Tuple

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from ..spec.constants import EPS_BASIS

logger = logging.getLogger(__name__)


def project_to_affine_hull(vertices) -> Tuple[np.ndarray, int]:
    """
    Coordinates of the points in an orthonormal basis of their affine span.

    Returns:
        projected: (N, k) array (the input itself when the span is full)
        actual_dimension: k
    """
    vertices = np.asarray(vertices, dtype=np.float64)
    if len(vertices) < 2:
        return vertices, (vertices.shape[1] if vertices.ndim == 2 else 0)

    d = vertices.shape[1]
    origin = vertices[0]
    diffs = vertices[1:] - origin

    basis = []
    for diff in diffs:
        residual = diff.copy()
        for b in basis:
            residual -= np.dot(residual, b) * b
        norm = np.linalg.norm(residual)
        if norm > EPS_BASIS:
            basis.append(residual / norm)
            if len(basis) >= d:
                break

    if len(basis) >= d:
        return vertices, d

    B = np.array(basis).reshape(len(basis), d)
    return (vertices - origin) @ B.T, len(basis)


def _hull(projected: np.ndarray) -> Optional[ConvexHull]:
    try:
        return ConvexHull(projected)
    except (QhullError, ValueError) as exc:
        logger.warning("Convex hull failed on %d points: %s", len(projected), exc)
        return None


def _orient_outward(triangles, points: np.ndarray) -> List[Tuple[int, int, int]]:
    center = points.mean(axis=0)
    oriented = []
    for a, b, c in triangles:
        normal = np.cross(points[b] - points[a], points[c] - points[a])
        if np.dot(normal, points[a] - center) < 0:
            b, c = c, b
        oriented.append((int(a), int(b), int(c)))
    return oriented


def compute_convex_hull_faces(vertices) -> List[Tuple[int, int, int]]:
    """
    Triangular faces of the convex hull, as indices into `vertices`.

    Returns:
        list of (i, j, k); [] for degenerate input
    """
    vertices = np.asarray(vertices, dtype=np.float64)
    if len(vertices) < 4 or vertices.ndim != 2 or vertices.shape[1] < 3:
        return []

    projected, actual_dim = project_to_affine_hull(vertices)
    if actual_dim < 3:
        return []

    hull = _hull(projected)
    if hull is None or len(hull.simplices) == 0:
        return []

    if actual_dim == 3:
        return _orient_outward(hull.simplices, projected)

    seen = set()
    triangles = []
    for simplex in hull.simplices:
        for tri in combinations(simplex.tolist(), 3):
            key = tuple(sorted(tri))
            if key not in seen:
                seen.add(key)
                triangles.append(tri)

    logger.debug("Convex hull: span=%d facets=%d triangles=%d",
                 actual_dim, len(hull.simplices), len(triangles))
    return triangles


def has_valid_convex_hull(vertices) -> bool:
    """True if the points span at least 3 dimensions and qhull succeeds."""
    vertices = np.asarray(vertices, dtype=np.float64)
    if len(vertices) < 4 or vertices.ndim != 2 or vertices.shape[1] < 3:
        return False

    projected, actual_dim = project_to_affine_hull(vertices)
    if actual_dim < 3:
        return False

    hull = _hull(projected)
    return hull is not None and len(hull.simplices) > 0


def convex_hull_stats(vertices) -> Optional[dict]:
    """
    Hull statistics for debugging.

    Returns:
        dict with facet_count, triangle_count, dimension, actual_dimension,
        vertex_count; None if the hull cannot be computed
    """
    vertices = np.asarray(vertices, dtype=np.float64)
    if len(vertices) < 4 or vertices.ndim != 2:
        return None

    projected, actual_dim = project_to_affine_hull(vertices)
    if actual_dim < 3:
        return None

    hull = _hull(projected)
    if hull is None:
        return None

    return {
        'facet_count': len(hull.simplices),
        'triangle_count': len(compute_convex_hull_faces(vertices)),
        'dimension': vertices.shape[1],
        'actual_dimension': actual_dim,
        'vertex_count': len(vertices),
    }
