"""
Hypercube Family (B_n) Vertex Generators
========================================

Every B_n preset is an orbit of sign changes and coordinate permutations.

    Preset         Vertex orbit                                  |V|
    -------------  --------------------------------------------  ----------
    regular        (±1, ±1, ..., ±1)                             2^n
    cross          (±1, 0, ..., 0)  permuted                     2n
    rectified      (±1, ..., ±1, 0) permuted                     n · 2^(n-1)
    truncated      (±1, ..., ±1, ±(√2-1)) permuted               n · 2^n
    cantellated    (±1, ..., ±1, ±(1+√2)) permuted               n · 2^n
    runcinated     hypercube ∪ (1+√2) · cross-polytope           2^n + 2n
    omnitruncated  (±1, ±2, ..., ±n) permuted                    n! · 2^n

INDEXING (regular):
    Vertex index bit j <-> sign of coordinate j (bit set = +1).
    Edges are single-bit flips, 2-faces are single axis-pair squares,
    so the regular hypercube carries analytical connectivity.

ALL OTHER PRESETS:
    Superset enumerated in a fixed order, deduplicated with VertexHashSet;
    connectivity is inferred later by edge inference.

OMNITRUNCATED:
    n! · 2^n is 81749606400 at n=11. Permutations are streamed one at a
    time (Heap's algorithm) and generation stops one vertex past the cap.
"""

from itertools import combinations
from typing import Iterator, List, Tuple

import numpy as np

from ..spec.constants import TRUNCATION_PARAM, CANTELLATION_PARAM, DEFAULT_MAX_VERTICES
from ..operators.vectors import create_vector, scale_vector
from ..operators.vertex_hash import VertexHashSet


def _sign_patterns(n_bits: int) -> np.ndarray:
    """(2^n_bits, n_bits) array of ±1; row i has +1 where bit j of i is set."""
    idx = np.arange(2 ** n_bits)[:, None]
    bits = (idx >> np.arange(n_bits)[None, :]) & 1
    return np.where(bits == 1, 1.0, -1.0)


def _dedup(candidates: np.ndarray) -> np.ndarray:
    seen = VertexHashSet()
    keep = [i for i, v in enumerate(candidates) if seen.add(v)]
    return candidates[keep]


# =============================================================================
# Regular hypercube {4,3,...,3}
# =============================================================================

def generate_hypercube_vertices(dimension: int) -> np.ndarray:
    """
    All 2^n sign vectors.

    Returns:
        (2^n, n) array, row i has +1 at coordinate j iff bit j of i is set
    """
    return _sign_patterns(int(dimension))


def generate_hypercube_data(dimension: int) -> Tuple[np.ndarray, List[Tuple[int, int]], List[Tuple[int, int, int, int]]]:
    """
    Hypercube with analytical connectivity.

    EDGES:
        (i, i | 1<<j) for every i with bit j clear -> n · 2^(n-1) edges.

    FACES:
        For each axis pair (a, b) and each assignment of the other n-2 bits,
        one quad (v00, v10, v11, v01) -> C(n, 2) · 2^(n-2) faces.

    Returns:
        vertices, edges (sorted, i < j), faces (quads in winding order)
    """
    n = int(dimension)
    vertices = generate_hypercube_vertices(n)
    n_v = 1 << n

    edges = sorted(
        (i, i | (1 << j))
        for i in range(n_v)
        for j in range(n)
        if not i & (1 << j)
    )

    faces = []
    for a, b in combinations(range(n), 2):
        bit_a, bit_b = 1 << a, 1 << b
        for base in range(n_v):
            if base & (bit_a | bit_b):
                continue
            faces.append((base, base | bit_a, base | bit_a | bit_b, base | bit_b))

    return vertices, edges, faces


# =============================================================================
# Cross-polytope {3,...,3,4}
# =============================================================================

def generate_cross_polytope_vertices(dimension: int) -> np.ndarray:
    """
    ±e_i, ordered (+e_0, -e_0, +e_1, -e_1, ...).

    Returns:
        (2n, n) array
    """
    n = int(dimension)
    rows = []
    for i in range(n):
        for sign in (1.0, -1.0):
            v = create_vector(n)
            v[i] = sign
            rows.append(v)
    return np.array(rows)


# =============================================================================
# Single-node-ringed variants
# =============================================================================

def generate_rectified_hypercube_vertices(dimension: int) -> np.ndarray:
    """Edge midpoints of the hypercube: one zero coordinate, the rest ±1."""
    n = int(dimension)
    signs = _sign_patterns(n - 1)
    blocks = []
    for zero_idx in range(n):
        block = np.insert(signs, zero_idx, 0.0, axis=1)
        blocks.append(block)
    return _dedup(np.vstack(blocks))


def _one_special_coordinate(dimension: int, magnitude: float) -> np.ndarray:
    """One coordinate ±magnitude, the rest ±1, sign of coordinate j from bit j."""
    n = int(dimension)
    signs = _sign_patterns(n)
    blocks = []
    for idx in range(n):
        block = signs.copy()
        block[:, idx] *= magnitude
        blocks.append(block)
    return _dedup(np.vstack(blocks))


def generate_truncated_hypercube_vertices(dimension: int) -> np.ndarray:
    """Permutations of (±1, ..., ±1, ±(√2-1))."""
    return _one_special_coordinate(dimension, TRUNCATION_PARAM)


def generate_cantellated_hypercube_vertices(dimension: int) -> np.ndarray:
    """Permutations of (±1, ..., ±1, ±(1+√2))."""
    return _one_special_coordinate(dimension, CANTELLATION_PARAM)


def generate_runcinated_hypercube_vertices(dimension: int) -> np.ndarray:
    """Hypercube vertices followed by the cross-polytope scaled by 1+√2."""
    candidates = np.vstack([
        generate_hypercube_vertices(dimension),
        scale_vector(generate_cross_polytope_vertices(dimension), CANTELLATION_PARAM),
    ])
    return _dedup(candidates)


# =============================================================================
# Omnitruncated (all nodes ringed)
# =============================================================================

def permutation_generator(items) -> Iterator[tuple]:
    """
    Stream every permutation of `items` (iterative Heap's algorithm).

    Only O(n) state is kept: the working array and the per-level counters.
    Each yielded tuple is a fresh copy.

    Example:
        >>> sorted(permutation_generator([1, 2, 3]))[:2]
        [(1, 2, 3), (1, 3, 2)]
    """
    a = list(items)
    n = len(a)
    c = [0] * n

    yield tuple(a)

    i = 0
    while i < n:
        if c[i] < i:
            if i % 2 == 0:
                a[0], a[i] = a[i], a[0]
            else:
                a[c[i]], a[i] = a[i], a[c[i]]
            yield tuple(a)
            c[i] += 1
            i = 0
        else:
            c[i] = 0
            i += 1


def generate_omnitruncated_hypercube_vertices(dimension: int,
                                              max_vertices: int = DEFAULT_MAX_VERTICES) -> np.ndarray:
    """
    Signed permutations of (1, 2, ..., n), streamed with early termination.

    Generation stops as soon as max_vertices + 1 unique vertices exist, so
    a result longer than max_vertices means the full orbit was larger.

    Returns:
        (min(n! · 2^n, max_vertices + 1), n) array
    """
    n = int(dimension)
    signs = _sign_patterns(n)
    seen = VertexHashSet()
    vertices = []
    limit = int(max_vertices) + 1

    for perm in permutation_generator(range(1, n + 1)):
        block = signs * np.asarray(perm, dtype=np.float64)
        for vertex in block:
            if seen.add(vertex):
                vertices.append(vertex)
                if len(vertices) >= limit:
                    return np.array(vertices)

    return np.array(vertices).reshape(len(vertices), n)
