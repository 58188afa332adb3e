"""
Constants, configuration, polytope contract and error taxonomy.
"""

from .constants import *
from .errors import (
    PolytopeError,
    ConfigurationError,
    CacheIOFailure,
    DataCorruptionError,
    ResourceLimitWarning,
    WarningCollector,
)
from .config import (
    WythoffConfig,
    DEFAULT_WYTHOFF_CONFIG,
    resolve_config,
    validate_dimension,
    validate_config,
    effective_preset,
    preset_for_symbol,
    get_wythoff_preset_name,
)
from .structures import (
    canonical_edge,
    copy_polytope,
    create_polytope,
    validate_polytope,
    with_vertices,
    PolytopeContract,
)
