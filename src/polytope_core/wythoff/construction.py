"""
Wythoff Polytope Construction
=============================

Orchestrates one construction request:

    1. resolve + validate config              (ConfigurationError, synchronous)
    2. memory cache lookup                    (hit -> rescale, done)
    3. generate raw geometry for (group, preset)
    4. vertex cap: truncate, re-infer edges, warn
    5. snub: keep even-indexed vertices, re-infer edges
    6. center, normalise to scale 1.0
    7. store (memory now, durable in background)
    8. return a copy at the requested scale

DISPATCH:
    Group  Preset                        Geometry               Faces
    -----  ----------------------------  ---------------------  ---------------
    A      any                           simplex (analytical)   analytical
    B      regular, unmatched custom     hypercube (analytical) analytical-quad
    B      rectified .. omnitruncated    orbit + edge inference convex-hull
    D      any                           demihypercube + edges  convex-hull

    Any result whose edges were re-inferred after truncation or snub
    alternation uses the triangles strategy with no stored faces.

LAZY FACES:
    construct() never runs the triangle or hull strategies; call
    detect_faces(result) when faces are needed.

ASYNC:
    construct_async() runs on its own executor, distinct from the cache's
    I/O thread, so it can wait on the durable tier without deadlock.
"""

import logging
import os
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Tuple

import numpy as np

from ..spec.constants import (
    GROUP_A, GROUP_D,
    PRESET_RECTIFIED, PRESET_TRUNCATED, PRESET_CANTELLATED,
    PRESET_RUNCINATED, PRESET_OMNITRUNCATED,
    FACES_ANALYTICAL, FACES_ANALYTICAL_QUAD, FACES_CONVEX_HULL, FACES_TRIANGLES,
    MAX_VERTICES, MAX_VERTICES_OMNITRUNCATED, DEFAULT_MAX_VERTICES,
    SNUB_MIN_VERTICES, EPS_SCALE, DEFAULT_CACHE_DIR, CACHE_DIR_ENV_VAR,
)
from ..spec.config import (
    WythoffConfig, resolve_config, validate_dimension, validate_config,
    effective_preset, get_wythoff_preset_name,
)
from ..spec.errors import WarningCollector
from ..spec.structures import create_polytope
from ..builders.simplex import generate_simplex_data
from ..builders.hypercube import (
    generate_hypercube_data,
    generate_rectified_hypercube_vertices,
    generate_truncated_hypercube_vertices,
    generate_cantellated_hypercube_vertices,
    generate_runcinated_hypercube_vertices,
    generate_omnitruncated_hypercube_vertices,
)
from ..builders.demihypercube import generate_demihypercube_vertices
from ..operators.edges import generate_edges_by_min_distance
from ..analysis.faces import detect_faces as run_face_strategy
from .cache import ConstructionCache, apply_scale
from .store import DurablePolytopeStore

logger = logging.getLogger(__name__)

_ORBIT_GENERATORS = {
    PRESET_RECTIFIED: generate_rectified_hypercube_vertices,
    PRESET_TRUNCATED: generate_truncated_hypercube_vertices,
    PRESET_CANTELLATED: generate_cantellated_hypercube_vertices,
    PRESET_RUNCINATED: generate_runcinated_hypercube_vertices,
}


def max_vertices_for(dimension: int, preset: Optional[str] = None) -> int:
    """Vertex cap for a dimension (omnitruncated has a tighter table)."""
    table = MAX_VERTICES_OMNITRUNCATED if preset == PRESET_OMNITRUNCATED else MAX_VERTICES
    return table.get(int(dimension), DEFAULT_MAX_VERTICES)


def center_and_scale(vertices, scale: float) -> np.ndarray:
    """
    Centroid to the origin, then scale so max |coordinate| == scale.

    Returns a new array. A set with zero extent is only centred.
    """
    V = np.array(vertices, dtype=np.float64, copy=True)
    if len(V) == 0:
        return V

    V -= V.mean(axis=0)
    extent = float(np.abs(V).max())
    if extent > 0 and abs(extent - scale) > EPS_SCALE:
        V *= scale / extent
    return V


def _raw_geometry(dimension: int, group: str, preset: str, cap: int) -> Tuple[np.ndarray, Optional[list], list, str]:
    """
    (vertices, edges or None, faces, face_method) before capping.

    edges is None when connectivity must be inferred.
    """
    if group == GROUP_A:
        V, E, F = generate_simplex_data(dimension)
        return V, E, F, FACES_ANALYTICAL

    if group == GROUP_D:
        return generate_demihypercube_vertices(dimension), None, [], FACES_CONVEX_HULL

    if preset == PRESET_OMNITRUNCATED:
        V = generate_omnitruncated_hypercube_vertices(dimension, max_vertices=cap)
        return V, None, [], FACES_CONVEX_HULL

    if preset in _ORBIT_GENERATORS:
        return _ORBIT_GENERATORS[preset](dimension), None, [], FACES_CONVEX_HULL

    V, E, F = generate_hypercube_data(dimension)
    return V, E, F, FACES_ANALYTICAL_QUAD


def _default_cache() -> ConstructionCache:
    path = os.environ.get(CACHE_DIR_ENV_VAR)
    if path == "":
        return ConstructionCache()
    return ConstructionCache(store=DurablePolytopeStore(path or DEFAULT_CACHE_DIR))


class PolytopeConstructor:
    """
    Builds Wythoff polytopes through an injected ConstructionCache.

    Example:
        >>> with PolytopeConstructor(ConstructionCache()) as pc:
        ...     cube = pc.construct(3)
        >>> cube['n_V'], cube['n_E']
        (8, 12)
    """

    def __init__(self, cache: Optional[ConstructionCache] = None, max_workers: int = 2):
        self.cache = cache if cache is not None else ConstructionCache()
        self.max_workers = int(max_workers)
        self._executor = None
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def _generate(self, dimension: int, config: WythoffConfig, warnings: Optional[WarningCollector]) -> dict:
        start = time.perf_counter()
        preset = effective_preset(config)
        cap = max_vertices_for(dimension, preset)

        V, E, F, face_method = _raw_geometry(dimension, config.symmetry_group, preset, cap)
        messages = []

        if len(V) > cap:
            original = len(V)
            V = V[:cap]
            E, F, face_method = None, [], FACES_TRIANGLES
            message = (
                f"Vertex count limited from {original:,} to {cap:,} for performance. "
                f"Some geometry detail may be missing."
            )
            messages.append(message)
            logger.warning("%dD %s/%s: %s", dimension, config.symmetry_group, preset, message)

        if config.snub and len(V) > SNUB_MIN_VERTICES:
            V = V[::2]
            E, F, face_method = None, [], FACES_TRIANGLES

        if E is None:
            E = generate_edges_by_min_distance(V)

        V = center_and_scale(V, 1.0)

        if warnings is not None:
            for message in messages:
                warnings.add(message)

        metadata = {
            'config': {**config.to_dict(), 'scale': 1.0},
            'effective_preset': preset,
            'max_vertices': cap,
            'snub': bool(config.snub),
        }
        polytope = create_polytope(
            V, E, F,
            dimension=dimension,
            symmetry_group=config.symmetry_group,
            preset=config.preset,
            face_method=face_method,
            name=get_wythoff_preset_name(config.preset, config.symmetry_group, dimension),
            metadata=metadata,
            warnings=messages,
        )

        logger.debug(
            "Generated %s: V=%d E=%d F=%d (%s) in %.1f ms",
            polytope['name'], polytope['n_V'], polytope['n_E'], polytope['n_F'],
            face_method, (time.perf_counter() - start) * 1000,
        )
        return polytope

    def _prepare(self, dimension, config, overrides) -> Tuple[int, WythoffConfig]:
        config = resolve_config(config, **overrides)
        dimension = validate_dimension(dimension)
        validate_config(dimension, config)
        return dimension, config

    def construct(self, dimension: int, config=None, warnings: Optional[WarningCollector] = None,
                  **overrides) -> dict:
        """
        Build (or fetch from memory) a polytope at the configured scale.

        Args:
            dimension: 3..11
            config: WythoffConfig, dict of fields, or None for defaults
            warnings: optional collector for resource-limit messages
            **overrides: individual config fields

        Raises:
            ConfigurationError: before any generation work
        """
        dimension, config = self._prepare(dimension, config, overrides)
        key = config.cache_key(dimension)

        polytope = self.cache.get_memory(key)
        if polytope is None:
            polytope = self._generate(dimension, config, warnings)
            self.cache.put(key, polytope)
        elif warnings is not None:
            for message in polytope['warnings']:
                warnings.add(message)

        return apply_scale(polytope, config.scale)

    def construct_with_warnings(self, dimension: int, config=None, **overrides) -> Tuple[dict, list]:
        """construct() plus the list of warning messages it produced."""
        collector = WarningCollector()
        polytope = self.construct(dimension, config, warnings=collector, **overrides)
        return polytope, collector.get()

    def _construct_cached(self, dimension: int, config: WythoffConfig) -> dict:
        # get_cached already counted the miss; generate without a second lookup
        key = config.cache_key(dimension)
        polytope = self.cache.get_cached(key)
        if polytope is None:
            polytope = self._generate(dimension, config, None)
            self.cache.put(key, polytope)
        return apply_scale(polytope, config.scale)

    def construct_async(self, dimension: int, config=None, **overrides) -> Future:
        """
        Future of construct(), consulting the durable tier first.

        Config errors raise here, not through the Future.
        """
        dimension, config = self._prepare(dimension, config, overrides)
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers, thread_name_prefix="polytope-async"
                )
            executor = self._executor
        return executor.submit(self._construct_cached, dimension, config)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def describe(self, dimension: int, config=None, **overrides) -> dict:
        """Vertex count, edge count and name of a configuration."""
        polytope = self.construct(dimension, config, **overrides)
        return {
            'vertex_count': polytope['n_V'],
            'edge_count': polytope['n_E'],
            'name': polytope['name'],
        }

    def detect_faces(self, polytope: dict) -> dict:
        """
        Copy of `polytope` with faces from its face_method strategy.

        Analytical faces already present are kept as-is.
        """
        faces = run_face_strategy(
            polytope['V'], polytope['E'], polytope['face_method'],
            faces=polytope['F'] or None,
        )
        result = dict(polytope)
        result['F'] = [tuple(int(v) for v in face) for face in faces]
        result['n_F'] = len(result['F'])
        return result

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Stop the async executor and flush the cache's durable writes."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
        self.cache.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


# =============================================================================
# Module-level convenience API (shared default constructor)
# =============================================================================

_default_constructor = None
_default_lock = threading.Lock()


def get_default_constructor() -> PolytopeConstructor:
    """
    Process-wide constructor used by the module-level functions.

    Its durable store lives in $POLYTOPE_CORE_CACHE_DIR (empty string
    disables it) or DEFAULT_CACHE_DIR.
    """
    global _default_constructor
    with _default_lock:
        if _default_constructor is None:
            _default_constructor = PolytopeConstructor(_default_cache())
        return _default_constructor


def generate_wythoff_polytope(dimension: int, config=None, warnings: Optional[WarningCollector] = None,
                              **overrides) -> dict:
    return get_default_constructor().construct(dimension, config, warnings=warnings, **overrides)


def generate_wythoff_polytope_async(dimension: int, config=None, **overrides) -> Future:
    return get_default_constructor().construct_async(dimension, config, **overrides)


def generate_wythoff_polytope_with_warnings(dimension: int, config=None, **overrides) -> Tuple[dict, list]:
    return get_default_constructor().construct_with_warnings(dimension, config, **overrides)


def get_wythoff_polytope_info(dimension: int, config=None, **overrides) -> dict:
    return get_default_constructor().describe(dimension, config, **overrides)


def clear_memory_cache() -> None:
    get_default_constructor().cache.clear_memory()


def memory_cache_size() -> int:
    return len(get_default_constructor().cache)
