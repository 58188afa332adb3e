"""
Vertex Hashing for N-dimensional Deduplication
==============================================

FNV-1a over quantized coordinates gives O(1) average insertion instead of
building a string key per comparison.

QUANTIZATION:
    q = round(x * 1e6)  (same precision as VERTEX_TOLERANCE)
    The 4 low bytes of q (two's complement) are folded into the hash.

COLLISIONS:
    Vertices with the same hash are chained in a bucket and compared
    coordinate-wise within VERTEX_TOLERANCE by a linear scan.

LIMITATION:
    Two vertices closer than the tolerance that straddle a rounding
    boundary hash differently and are NOT merged. The tolerance sits below
    the generators' numerical noise floor, so this never happens for the
    constructions in builders/.

REFERENCE: Fowler-Noll-Vo hash, FNV-1a variant.
"""

import numpy as np
from typing import Dict, List, Tuple

from ..spec.constants import (
    VERTEX_TOLERANCE, VERTEX_QUANTIZATION,
    FNV_OFFSET_BASIS, FNV_PRIME, UINT32_MASK,
)


def quantize_coord(value: float) -> int:
    """Round to 6 decimal places, as an integer."""
    return int(round(float(value) * VERTEX_QUANTIZATION))


def hash_vertex(vertex) -> int:
    """
    32-bit FNV-1a hash of a vertex.

    Vertices that are equal after quantization hash identically.
    """
    h = FNV_OFFSET_BASIS
    for x in vertex:
        q = quantize_coord(x)
        for shift in (0, 8, 16, 24):
            h ^= (q >> shift) & 0xFF
            h = (h * FNV_PRIME) & UINT32_MASK
    return h


def vertices_equal(a, b, tol: float = VERTEX_TOLERANCE) -> bool:
    """True if every coordinate differs by at most tol."""
    if len(a) != len(b):
        return False
    for x, y in zip(a, b):
        if abs(float(x) - float(y)) > tol:
            return False
    return True


def vertex_to_key(vertex) -> str:
    """String key (6 decimals). Debugging and logging only."""
    return ",".join(f"{float(x):.6f}" for x in vertex)


class VertexHashSet:
    """
    Hash-based vertex set for fast deduplication.

    Created fresh for each generation call and discarded afterwards.

    Example:
        >>> s = VertexHashSet()
        >>> s.add([1.0, 0.0, 0.0])
        True
        >>> s.add([1.0 + 1e-7, 0.0, 0.0])
        False
    """

    def __init__(self, tol: float = VERTEX_TOLERANCE):
        self.tol = tol
        self._buckets: Dict[int, List[Tuple[float, ...]]] = {}
        self._count = 0

    def has(self, vertex) -> bool:
        bucket = self._buckets.get(hash_vertex(vertex))
        if bucket is None:
            return False
        return any(vertices_equal(vertex, existing, self.tol) for existing in bucket)

    def add(self, vertex) -> bool:
        """
        Add a vertex if not already present.

        Returns:
            True if the vertex was inserted, False if it was a duplicate
        """
        h = hash_vertex(vertex)
        bucket = self._buckets.get(h)
        if bucket is None:
            bucket = []
            self._buckets[h] = bucket
        else:
            for existing in bucket:
                if vertices_equal(vertex, existing, self.tol):
                    return False

        bucket.append(tuple(float(x) for x in vertex))
        self._count += 1
        return True

    def __contains__(self, vertex) -> bool:
        return self.has(vertex)

    def __len__(self) -> int:
        return self._count

    @property
    def bucket_count(self) -> int:
        return len(self._buckets)

    def clear(self) -> None:
        self._buckets.clear()
        self._count = 0


def deduplicate_vertices(vertices) -> Tuple[np.ndarray, List[int]]:
    """
    Deduplicate vertices, keeping first occurrences in order.

    Returns:
        unique: (M, d) array of distinct vertices
        index_map: index_map[i] is the row of `unique` that vertex i maps to
    """
    vertices = np.asarray(vertices, dtype=np.float64)
    unique = []
    index_map = []
    buckets: Dict[int, List[int]] = {}

    for vertex in vertices:
        h = hash_vertex(vertex)
        bucket = buckets.setdefault(h, [])

        found = -1
        for idx in bucket:
            if vertices_equal(vertex, unique[idx]):
                found = idx
                break

        if found == -1:
            found = len(unique)
            unique.append(vertex)
            bucket.append(found)
        index_map.append(found)

    dimension = vertices.shape[1] if vertices.ndim == 2 else 0
    unique_arr = np.array(unique, dtype=np.float64).reshape(len(unique), dimension)
    return unique_arr, index_map
