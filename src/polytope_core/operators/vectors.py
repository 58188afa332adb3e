"""
N-dimensional vector arithmetic.

Thin numpy wrappers shared by the generators and face detection. Every
function returns a new array; inputs are never modified.
"""

import numpy as np


def create_vector(dimension: int, fill: float = 0.0) -> np.ndarray:
    return np.full(dimension, fill, dtype=np.float64)


def add_vectors(a, b) -> np.ndarray:
    return np.add(a, b, dtype=np.float64)


def subtract_vectors(a, b) -> np.ndarray:
    return np.subtract(a, b, dtype=np.float64)


def scale_vector(v, s: float) -> np.ndarray:
    return np.multiply(v, s, dtype=np.float64)


def dot_product(a, b) -> float:
    return float(np.dot(a, b))


def magnitude(v) -> float:
    return float(np.sqrt(np.dot(v, v)))


def normalize(v) -> np.ndarray:
    """Unit vector along v (zero vector stays zero)."""
    norm = magnitude(v)
    if norm == 0.0:
        return np.zeros_like(v, dtype=np.float64)
    return scale_vector(v, 1.0 / norm)


def cross_product_3d(a, b) -> np.ndarray:
    return np.cross(np.asarray(a, dtype=np.float64)[:3], np.asarray(b, dtype=np.float64)[:3])


def euclidean_distance(a, b) -> float:
    """Distance between two vertices of the same dimension."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"Dimension mismatch: {a.shape[0]}D vs {b.shape[0]}D")
    diff = a - b
    return float(np.sqrt(np.dot(diff, diff)))
