"""
Demihypercube (D_n)
===================

Alternated hypercube: the 2^(n-1) sign vectors with an even number of
positive coordinates. Defined for n >= 4 (the 3-demicube is the
tetrahedron, which belongs to A_3).
"""

import numpy as np

from ..spec.constants import MIN_D_FAMILY_DIMENSION
from ..spec.errors import ConfigurationError
from .hypercube import generate_hypercube_vertices


def generate_demihypercube_vertices(dimension: int) -> np.ndarray:
    """
    Hypercube vertices whose index has even popcount, in index order.

    Raises:
        ConfigurationError: dimension < 4
    """
    n = int(dimension)
    if n < MIN_D_FAMILY_DIMENSION:
        raise ConfigurationError(f"D_n symmetry requires dimension >= {MIN_D_FAMILY_DIMENSION}")

    cube = generate_hypercube_vertices(n)
    positives = (cube > 0).sum(axis=1)
    return cube[positives % 2 == 0]
