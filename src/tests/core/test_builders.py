"""
Vertex Generator Tests
======================

Counts and geometric invariants of every symmetry-family generator.

Run: python -m pytest tests/core/test_builders.py -v
"""

import math
from itertools import permutations

import numpy as np
import pytest
from scipy.spatial.distance import pdist

from polytope_core.builders import (
    generate_simplex_vertices,
    generate_simplex_data,
    generate_hypercube_vertices,
    generate_hypercube_data,
    generate_cross_polytope_vertices,
    generate_rectified_hypercube_vertices,
    generate_truncated_hypercube_vertices,
    generate_cantellated_hypercube_vertices,
    generate_runcinated_hypercube_vertices,
    generate_omnitruncated_hypercube_vertices,
    generate_demihypercube_vertices,
    permutation_generator,
)
from polytope_core.spec import ConfigurationError
from polytope_core.spec.constants import TRUNCATION_PARAM, CANTELLATION_PARAM


# =============================================================================
# TEST A: Simplex (A_n)
# =============================================================================

@pytest.mark.parametrize("dimension", [3, 4, 7, 11])
def test_simplex_is_regular(dimension):
    """All C(n+1, 2) pairwise distances are 1 and the centroid is the origin."""
    V = generate_simplex_vertices(dimension)
    assert V.shape == (dimension + 1, dimension)

    d = pdist(V)
    np.testing.assert_allclose(d, 1.0, atol=1e-12)
    np.testing.assert_allclose(V.mean(axis=0), 0.0, atol=1e-12)


def test_simplex_topology():
    V, E, F = generate_simplex_data(5)
    assert len(V) == 6
    assert len(E) == math.comb(6, 2)
    assert len(F) == math.comb(6, 3)
    assert all(i < j for i, j in E)
    assert all(a < b < c for a, b, c in F)


# =============================================================================
# TEST B: Hypercube and cross-polytope (B_n)
# =============================================================================

def test_hypercube_bit_indexing():
    """Bit j of the row index is the sign of coordinate j."""
    V = generate_hypercube_vertices(4)
    assert V.shape == (16, 4)
    for i, v in enumerate(V):
        for j in range(4):
            assert v[j] == (1.0 if i & (1 << j) else -1.0)


@pytest.mark.parametrize("dimension", [3, 4, 6])
def test_hypercube_data_counts(dimension):
    V, E, F = generate_hypercube_data(dimension)
    n = dimension
    assert len(V) == 2 ** n
    assert len(E) == n * 2 ** (n - 1)
    assert len(F) == math.comb(n, 2) * 2 ** (n - 2)
    assert E == sorted(E)

    for i, j in E:
        assert np.linalg.norm(V[i] - V[j]) == pytest.approx(2.0)


def test_hypercube_quads_are_squares():
    V, _, F = generate_hypercube_data(4)
    for a, b, c, d in F:
        for p, q in ((a, b), (b, c), (c, d), (d, a)):
            assert np.linalg.norm(V[p] - V[q]) == pytest.approx(2.0)
        assert np.linalg.norm(V[a] - V[c]) == pytest.approx(2.0 * math.sqrt(2.0))


def test_cross_polytope_order():
    V = generate_cross_polytope_vertices(3)
    np.testing.assert_array_equal(V[0], [1, 0, 0])
    np.testing.assert_array_equal(V[1], [-1, 0, 0])
    np.testing.assert_array_equal(V[5], [0, 0, -1])


# =============================================================================
# TEST C: Orbit presets
# =============================================================================

@pytest.mark.parametrize("dimension", [3, 4, 5])
def test_orbit_counts(dimension):
    n = dimension
    assert len(generate_rectified_hypercube_vertices(n)) == n * 2 ** (n - 1)
    assert len(generate_truncated_hypercube_vertices(n)) == n * 2 ** n
    assert len(generate_cantellated_hypercube_vertices(n)) == n * 2 ** n
    assert len(generate_runcinated_hypercube_vertices(n)) == 2 ** n + 2 * n


def test_orbit_vertices_unique():
    for V in (generate_truncated_hypercube_vertices(4), generate_runcinated_hypercube_vertices(4)):
        assert pdist(V).min() > 1e-6


def test_truncated_coordinates():
    """Exactly one coordinate has magnitude √2-1, the rest magnitude 1."""
    V = generate_truncated_hypercube_vertices(4)
    small = np.isclose(np.abs(V), TRUNCATION_PARAM)
    assert (small.sum(axis=1) == 1).all()
    assert np.isclose(np.abs(V[~small]), 1.0).all()


def test_runcinated_layout():
    V = generate_runcinated_hypercube_vertices(3)
    np.testing.assert_array_equal(V[:8], generate_hypercube_vertices(3))
    np.testing.assert_allclose(V[8], [CANTELLATION_PARAM, 0, 0])


# =============================================================================
# TEST D: Omnitruncated streaming
# =============================================================================

def test_permutation_generator_complete():
    perms = list(permutation_generator([1, 2, 3, 4]))
    assert len(perms) == 24
    assert set(perms) == set(permutations([1, 2, 3, 4]))


def test_permutation_generator_is_lazy():
    gen = permutation_generator(range(1, 12))
    first = [next(gen) for _ in range(5)]
    assert len(set(first)) == 5


def test_omnitruncated_full_orbit_3d():
    V = generate_omnitruncated_hypercube_vertices(3)
    assert V.shape == (48, 3)
    assert set(tuple(sorted(np.abs(v))) for v in V) == {(1.0, 2.0, 3.0)}


def test_omnitruncated_stops_one_past_cap():
    V = generate_omnitruncated_hypercube_vertices(5, max_vertices=100)
    assert V.shape == (101, 5)


def test_omnitruncated_11d_streams_without_full_orbit():
    """11! · 2^11 vertices never materialise; generation stops at the cap."""
    V = generate_omnitruncated_hypercube_vertices(11, max_vertices=50)
    assert V.shape == (51, 11)


# =============================================================================
# TEST E: Demihypercube (D_n)
# =============================================================================

@pytest.mark.parametrize("dimension", [4, 5, 8])
def test_demihypercube_even_positives(dimension):
    V = generate_demihypercube_vertices(dimension)
    assert len(V) == 2 ** (dimension - 1)
    assert ((V > 0).sum(axis=1) % 2 == 0).all()


def test_demihypercube_rejects_3d():
    with pytest.raises(ConfigurationError, match="D_n"):
        generate_demihypercube_vertices(3)
