"""
Binary Polytope Records
=======================

Durable-cache format for constructed geometry. Vertices and edges are
stored as raw little-endian buffers instead of JSON numbers, which is
both smaller and exact for float64.

RECORD LAYOUT (little-endian):
    header   <7I   version, dimension, vertex_count, edge_count,
                   vertex_bytes, edge_bytes, metadata_bytes
    vertices <f8   vertex_count · dimension
    edges    <u4   edge_count · 2
    metadata UTF-8 JSON: name, symmetry_group, preset, face_method,
                   faces, warnings, metadata

VALIDATION (reader side):
    version == BINARY_FORMAT_VERSION
    MIN_DIMENSION <= dimension <= MAX_DIMENSION
    vertex_bytes == vertex_count · dimension · 8
    edge_bytes   == edge_count · 2 · 4
    every edge index < vertex_count

    Any failure raises DataCorruptionError; the cache layer treats that as
    a miss and regenerates.
"""

import json
import logging
import struct
from dataclasses import dataclass

import numpy as np

from ..spec.constants import BINARY_FORMAT_VERSION, MIN_DIMENSION, MAX_DIMENSION
from ..spec.errors import DataCorruptionError
from ..spec.structures import create_polytope

logger = logging.getLogger(__name__)

HEADER = struct.Struct("<7I")
VERTEX_DTYPE = np.dtype("<f8")
EDGE_DTYPE = np.dtype("<u4")


@dataclass(frozen=True)
class BinaryPolytopeRecord:
    """Packed geometry: raw vertex/edge buffers plus a JSON metadata string."""
    version: int
    dimension: int
    vertex_count: int
    edge_count: int
    vertices: bytes
    edges: bytes
    metadata: str


def serialize_to_binary(polytope: dict) -> BinaryPolytopeRecord:
    """Pack a polytope dict into a record."""
    V = np.ascontiguousarray(polytope['V'], dtype=VERTEX_DTYPE)
    E = np.asarray(polytope['E'], dtype=EDGE_DTYPE).reshape(-1, 2)

    meta = {
        'name': polytope.get('name', 'unnamed'),
        'symmetry_group': polytope['symmetry_group'],
        'preset': polytope['preset'],
        'face_method': polytope['face_method'],
        'faces': [list(face) for face in polytope.get('F', [])],
        'warnings': list(polytope.get('warnings', [])),
        'metadata': polytope.get('metadata', {}),
    }

    return BinaryPolytopeRecord(
        version=BINARY_FORMAT_VERSION,
        dimension=int(polytope['dimension']),
        vertex_count=len(V),
        edge_count=len(E),
        vertices=V.tobytes(),
        edges=E.tobytes(),
        metadata=json.dumps(meta),
    )


def validate_record(record: BinaryPolytopeRecord) -> None:
    """
    Raise DataCorruptionError unless the record's sizes are consistent.
    """
    if record.version != BINARY_FORMAT_VERSION:
        raise DataCorruptionError(
            f"Unknown binary format version {record.version}, expected {BINARY_FORMAT_VERSION}"
        )
    if not MIN_DIMENSION <= record.dimension <= MAX_DIMENSION:
        raise DataCorruptionError(f"Invalid dimension in record: {record.dimension}")
    if record.vertex_count < 0 or record.edge_count < 0:
        raise DataCorruptionError("Negative element count in record")

    expected_vertex_bytes = record.vertex_count * record.dimension * VERTEX_DTYPE.itemsize
    expected_edge_bytes = record.edge_count * 2 * EDGE_DTYPE.itemsize
    if len(record.vertices) != expected_vertex_bytes:
        raise DataCorruptionError(
            f"Vertex buffer size mismatch: {len(record.vertices)} vs expected {expected_vertex_bytes}"
        )
    if len(record.edges) != expected_edge_bytes:
        raise DataCorruptionError(
            f"Edge buffer size mismatch: {len(record.edges)} vs expected {expected_edge_bytes}"
        )


def is_binary_format(record) -> bool:
    """True if `record` is a BinaryPolytopeRecord that passes validation."""
    if not isinstance(record, BinaryPolytopeRecord):
        return False
    try:
        validate_record(record)
    except DataCorruptionError as exc:
        logger.warning("Rejected binary record: %s", exc)
        return False
    return True


def deserialize_from_binary(record: BinaryPolytopeRecord) -> dict:
    """
    Unpack a record into a polytope dict.

    Raises:
        DataCorruptionError: inconsistent sizes, bad metadata, or indices
            out of range
    """
    validate_record(record)

    V = np.frombuffer(record.vertices, dtype=VERTEX_DTYPE).reshape(record.vertex_count, record.dimension)
    E = np.frombuffer(record.edges, dtype=EDGE_DTYPE).reshape(record.edge_count, 2)

    if E.size and int(E.max()) >= record.vertex_count:
        raise DataCorruptionError(f"Edge references vertex {int(E.max())} >= {record.vertex_count}")

    try:
        meta = json.loads(record.metadata)
        return create_polytope(
            V.astype(np.float64),
            [tuple(e) for e in E.tolist()],
            [tuple(f) for f in meta.get('faces', [])],
            dimension=record.dimension,
            symmetry_group=meta['symmetry_group'],
            preset=meta['preset'],
            face_method=meta['face_method'],
            name=meta.get('name', 'unnamed'),
            metadata=meta.get('metadata', {}),
            warnings=meta.get('warnings', []),
        )
    except (ValueError, KeyError, TypeError) as exc:
        raise DataCorruptionError(f"Invalid record metadata: {exc}") from exc


def encode_record(record: BinaryPolytopeRecord) -> bytes:
    """Record -> header + body bytes."""
    meta = record.metadata.encode("utf-8")
    header = HEADER.pack(
        record.version, record.dimension, record.vertex_count, record.edge_count,
        len(record.vertices), len(record.edges), len(meta),
    )
    return b"".join((header, record.vertices, record.edges, meta))


def decode_record(data: bytes) -> BinaryPolytopeRecord:
    """
    Bytes -> validated record.

    Raises:
        DataCorruptionError: truncated data, trailing bytes, or any
            validate_record failure
    """
    data = bytes(data)
    if len(data) < HEADER.size:
        raise DataCorruptionError(f"Record too short for header: {len(data)} bytes")

    (version, dimension, vertex_count, edge_count,
     vertex_bytes, edge_bytes, meta_bytes) = HEADER.unpack_from(data, 0)

    expected = HEADER.size + vertex_bytes + edge_bytes + meta_bytes
    if len(data) != expected:
        raise DataCorruptionError(f"Record length {len(data)} does not match header ({expected})")

    offset = HEADER.size
    vertices = data[offset:offset + vertex_bytes]
    offset += vertex_bytes
    edges = data[offset:offset + edge_bytes]
    offset += edge_bytes
    try:
        metadata = data[offset:offset + meta_bytes].decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DataCorruptionError(f"Metadata is not UTF-8: {exc}") from exc

    record = BinaryPolytopeRecord(
        version=version,
        dimension=dimension,
        vertex_count=vertex_count,
        edge_count=edge_count,
        vertices=vertices,
        edges=edges,
        metadata=metadata,
    )
    validate_record(record)
    return record


def estimate_storage_sizes(polytope: dict) -> dict:
    """
    Rough JSON vs binary size for a polytope (diagnostics only).

    JSON assumes ~20 bytes per coordinate and ~8 per edge index; binary is
    exact buffer size plus a nominal metadata overhead.
    """
    n_v = len(polytope['V'])
    d = int(polytope['dimension'])
    n_e = len(polytope['E'])

    json_bytes = n_v * d * 20 + n_e * 2 * 8 + 500
    binary_bytes = HEADER.size + n_v * d * VERTEX_DTYPE.itemsize + n_e * 2 * EDGE_DTYPE.itemsize + 200
    return {
        'json_bytes': json_bytes,
        'binary_bytes': binary_bytes,
        'ratio': json_bytes / binary_bytes,
    }
