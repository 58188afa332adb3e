"""
Wythoff construction - orchestration, cache tiers and wire formats.

EXPORTS:
- Orchestration: PolytopeConstructor, max_vertices_for, center_and_scale,
  module-level generate_wythoff_polytope[_async|_with_warnings],
  get_wythoff_polytope_info, clear_memory_cache, memory_cache_size
- Cache: ConstructionCache, apply_scale, DurablePolytopeStore
- Binary records: BinaryPolytopeRecord, serialize_to_binary,
  deserialize_from_binary, is_binary_format, encode_record, decode_record,
  estimate_storage_sizes
- Transfer: flatten_geometry, inflate_geometry, flatten_faces,
  inflate_faces, flatten_vertices_only, inflate_vertices_only
"""

# === Orchestration ===
from .construction import (
    PolytopeConstructor,
    max_vertices_for,
    center_and_scale,
    get_default_constructor,
    generate_wythoff_polytope,
    generate_wythoff_polytope_async,
    generate_wythoff_polytope_with_warnings,
    get_wythoff_polytope_info,
    clear_memory_cache,
    memory_cache_size,
)

# === Cache tiers ===
from .cache import ConstructionCache, apply_scale
from .store import DurablePolytopeStore

# === Wire formats ===
from .serialization import (
    BinaryPolytopeRecord,
    serialize_to_binary,
    deserialize_from_binary,
    is_binary_format,
    validate_record,
    encode_record,
    decode_record,
    estimate_storage_sizes,
)
from .transfer import (
    flatten_geometry,
    inflate_geometry,
    flatten_faces,
    inflate_faces,
    flatten_vertices_only,
    inflate_vertices_only,
)
