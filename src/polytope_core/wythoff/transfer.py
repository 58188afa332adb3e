"""
Flat Transfer Format
====================

Geometry as flat numeric buffers for handing across a process or thread
boundary (shared memory, pipes, executor results) without pickling nested
Python lists.

    vertices  float64, length n_V · dimension
    edges     uint32,  length n_E · 2
    faces     uint32,  length n_F · face_size (optional, uniform faces only)

inflate_* validates everything it reads and raises DataCorruptionError:
    "Invalid dimension"            dimension <= 0
    "not divisible by dimension"   vertex buffer length
    "not divisible by 2"           edge buffer length
    "not divisible by 3"           triangle buffer length
    "references vertex"            edge/face index >= n_V
    "Invalid transferable geometry" contract violations (self-loop edges, ...)
"""

from typing import List, Tuple

import numpy as np

from ..spec.errors import DataCorruptionError
from ..spec.structures import create_polytope
from ..spec.constants import FACES_NONE


def _check_dimension(dimension) -> int:
    if dimension is None or int(dimension) <= 0:
        raise DataCorruptionError(f"Invalid dimension: {dimension}")
    return int(dimension)


def _check_indices(flat: np.ndarray, n_vertices: int, what: str) -> None:
    if flat.size and int(flat.max()) >= n_vertices:
        raise DataCorruptionError(
            f"{what} references vertex {int(flat.max())} but only {n_vertices} vertices exist"
        )


def flatten_geometry(polytope: dict) -> Tuple[dict, list]:
    """
    Polytope dict -> (transferable dict, list of buffers).

    Faces are included only when every face has the same length.

    Returns:
        transferable: flat arrays plus descriptive fields
        buffers: memoryviews of the flat arrays (zero-copy handles)
    """
    vertices = np.ascontiguousarray(polytope['V'], dtype=np.float64).reshape(-1)
    edges = np.asarray(polytope['E'], dtype=np.uint32).reshape(-1)

    transferable = {
        'vertices': vertices,
        'edges': edges,
        'dimension': int(polytope['dimension']),
        'symmetry_group': polytope.get('symmetry_group'),
        'preset': polytope.get('preset'),
        'face_method': polytope.get('face_method', FACES_NONE),
        'name': polytope.get('name', 'unnamed'),
        'metadata': dict(polytope.get('metadata', {})),
        'warnings': list(polytope.get('warnings', [])),
    }
    buffers = [vertices.data, edges.data]

    faces = polytope.get('F', [])
    sizes = {len(f) for f in faces}
    if len(sizes) == 1:
        face_size = sizes.pop()
        flat_faces = np.asarray(faces, dtype=np.uint32).reshape(-1)
        transferable['faces'] = flat_faces
        transferable['face_size'] = face_size
        buffers.append(flat_faces.data)

    return transferable, buffers


def inflate_geometry(transferable: dict) -> dict:
    """
    Transferable dict -> contract polytope dict.

    Raises:
        DataCorruptionError: see module docstring
    """
    dimension = _check_dimension(transferable.get('dimension'))

    vertices = np.asarray(transferable['vertices'], dtype=np.float64)
    if vertices.size % dimension != 0:
        raise DataCorruptionError(
            f"Vertex buffer length {vertices.size} not divisible by dimension {dimension}"
        )
    n_vertices = vertices.size // dimension

    edges = np.asarray(transferable['edges'], dtype=np.uint32)
    if edges.size % 2 != 0:
        raise DataCorruptionError(f"Edge buffer length {edges.size} not divisible by 2")
    _check_indices(edges, n_vertices, "Edge")

    faces = []
    if transferable.get('faces') is not None:
        face_size = int(transferable.get('face_size', 3))
        flat_faces = np.asarray(transferable['faces'], dtype=np.uint32)
        if flat_faces.size % face_size != 0:
            raise DataCorruptionError(
                f"Face buffer length {flat_faces.size} not divisible by {face_size}"
            )
        _check_indices(flat_faces, n_vertices, "Face")
        faces = [tuple(f) for f in flat_faces.reshape(-1, face_size).tolist()]

    try:
        return create_polytope(
            vertices.reshape(n_vertices, dimension),
            [tuple(e) for e in edges.reshape(-1, 2).tolist()],
            faces,
            dimension=dimension,
            symmetry_group=transferable.get('symmetry_group'),
            preset=transferable.get('preset'),
            face_method=transferable.get('face_method', FACES_NONE),
            name=transferable.get('name', 'unnamed'),
            metadata=transferable.get('metadata'),
            warnings=transferable.get('warnings'),
        )
    except (ValueError, TypeError) as exc:
        raise DataCorruptionError(f"Invalid transferable geometry: {exc}") from exc


def flatten_faces(faces) -> Tuple[np.ndarray, memoryview]:
    """Triangles -> flat uint32 array and its buffer."""
    flat = np.asarray(list(faces), dtype=np.uint32).reshape(-1)
    return flat, flat.data


def inflate_faces(flat) -> List[Tuple[int, int, int]]:
    """Flat uint32 array -> list of triangles."""
    flat = np.asarray(flat, dtype=np.uint32)
    if flat.size % 3 != 0:
        raise DataCorruptionError(f"Face buffer length {flat.size} not divisible by 3")
    return [tuple(f) for f in flat.reshape(-1, 3).tolist()]


def flatten_vertices_only(vertices, dimension: int) -> Tuple[np.ndarray, memoryview]:
    """(N, d) vertices -> flat float64 array and its buffer."""
    dimension = _check_dimension(dimension)
    flat = np.ascontiguousarray(vertices, dtype=np.float64).reshape(-1)
    if flat.size % dimension != 0:
        raise DataCorruptionError(
            f"Vertex buffer length {flat.size} not divisible by dimension {dimension}"
        )
    return flat, flat.data


def inflate_vertices_only(flat, dimension: int) -> np.ndarray:
    """Flat float64 array -> (N, d) vertices (a copy)."""
    dimension = _check_dimension(dimension)
    flat = np.asarray(flat, dtype=np.float64)
    if flat.size % dimension != 0:
        raise DataCorruptionError(
            f"Vertex buffer length {flat.size} not divisible by dimension {dimension}"
        )
    return flat.reshape(-1, dimension).copy()
