"""
Regular Simplex {3,3,...,3}
===========================

n+1 vertices in n dimensions, all pairwise equidistant.

CONSTRUCTION (closed form, no Gram-Schmidt):
    c_i = 1 / sqrt(2 (i+1) (i+2))

    v_0[i] = -c_i                    for all i
    v_k[i] = 0           if i < k-1     (k = 1..n)
             k · c_{k-1} if i == k-1
             -c_i        if i > k-1

    Every edge has length 1 and the centroid is the origin.

TOPOLOGY:
    V = n+1
    E = C(n+1, 2)   (complete graph)
    F = C(n+1, 3)   (every triple is a triangular 2-face)

In 3-D the four triangles are wound counter-clockwise seen from outside.
"""

from itertools import combinations
from typing import List, Tuple

import numpy as np

from ..operators.vectors import subtract_vectors, cross_product_3d, dot_product


def generate_simplex_vertices(dimension: int) -> np.ndarray:
    """
    Vertices of the regular n-simplex.

    Returns:
        (dimension+1, dimension) array
    """
    n = int(dimension)
    i = np.arange(n, dtype=np.float64)
    c = 1.0 / np.sqrt(2.0 * (i + 1) * (i + 2))

    vertices = np.tile(-c, (n + 1, 1))
    for k in range(1, n + 1):
        vertices[k, :k - 1] = 0.0
        vertices[k, k - 1] = k * c[k - 1]
    return vertices


def generate_simplex_data(dimension: int) -> Tuple[np.ndarray, List[Tuple[int, int]], List[Tuple[int, int, int]]]:
    """
    Simplex with analytical connectivity.

    Returns:
        vertices: (n+1, n) array
        edges: all pairs (i < j)
        faces: all triples (i < j < k); in 3-D the last two indices are
            swapped where needed so the normal points away from the origin
    """
    vertices = generate_simplex_vertices(dimension)
    n_v = len(vertices)
    edges = list(combinations(range(n_v), 2))
    faces = list(combinations(range(n_v), 3))
    if vertices.shape[1] == 3:
        faces = [_outward_winding(face, vertices) for face in faces]
    return vertices, edges, faces


def _outward_winding(face, vertices):
    # centroid is the origin, so any face vertex gives the outward direction
    a, b, c = face
    normal = cross_product_3d(subtract_vectors(vertices[b], vertices[a]),
                              subtract_vectors(vertices[c], vertices[a]))
    if dot_product(normal, vertices[a]) < 0:
        return (a, c, b)
    return (a, b, c)
