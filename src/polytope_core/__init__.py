"""
POLYTOPE_CORE - n-dimensional Wythoff polytope construction
===========================================================

Vertices, edges and (lazily) 2-faces of uniform polytopes in 3..11
dimensions, behind a scale-independent two-tier cache.

Structure:
    spec/       - Constants, configuration, polytope contract, errors
    operators/  - Vector ops, vertex hashing, spatial hash, edge inference
    builders/   - Symmetry-family vertex generators (A_n, B_n, D_n)
    analysis/   - Face detection strategies, convex hull faces
    wythoff/    - Orchestrator, cache, durable store, binary/transfer codecs

Every construction returns a POLYTOPE DICT with:
    - V, E, F (geometry; F may be empty until detect_faces)
    - dimension, symmetry_group, preset, face_method
    - name, metadata, warnings

Requirements:
    Python >= 3.9
    numpy >= 1.20
    scipy >= 1.11
"""

import logging
import sys

if sys.version_info < (3, 9):
    raise ImportError(f"polytope_core requires Python >= 3.9, got {sys.version}")

# scipy version check (QhullError is public from 1.11)
import scipy
_scipy_version = tuple(int(p) for p in scipy.__version__.split('.')[:2] if p.isdigit())
if _scipy_version < (1, 11):
    raise ImportError(f"polytope_core requires scipy >= 1.11, got {scipy.__version__}")

import numpy as np
_numpy_version = tuple(int(p) for p in np.__version__.split('.')[:2] if p.isdigit())
if _numpy_version < (1, 20):
    raise ImportError(f"polytope_core requires numpy >= 1.20, got {np.__version__}")

logging.getLogger(__name__).addHandler(logging.NullHandler())

from . import spec
from . import operators
from . import builders
from . import analysis
from . import wythoff

from .spec import (
    WythoffConfig,
    WarningCollector,
    PolytopeError,
    ConfigurationError,
    CacheIOFailure,
    DataCorruptionError,
    ResourceLimitWarning,
    get_wythoff_preset_name,
)
from .wythoff import (
    PolytopeConstructor,
    ConstructionCache,
    DurablePolytopeStore,
    generate_wythoff_polytope,
    generate_wythoff_polytope_async,
    generate_wythoff_polytope_with_warnings,
    get_wythoff_polytope_info,
    clear_memory_cache,
    memory_cache_size,
)
from .analysis import detect_faces

__version__ = "0.1.0"
