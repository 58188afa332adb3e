"""
Wythoff Configuration
=====================

User-facing configuration for a construction request.

    symmetry_group : "A" (simplex), "B" (hypercube), "D" (demihypercube)
    preset         : which nodes of the Coxeter-Dynkin diagram are ringed
    custom_symbol  : explicit ringing (one bool per node), preset="custom" only
    scale          : output size; NOT part of the cache key
    snub           : alternated variant (keep every other vertex)

CUSTOM SYMBOLS:
    A custom symbol that matches a named ringing is dispatched as that preset:

        [1,0,0,...,0] -> regular        [1,1,0,...,0] -> truncated
        [0,1,0,...,0] -> rectified      [1,0,1,...,0] -> cantellated
        [1,0,...,0,1] -> runcinated     [1,1,1,...,1] -> omnitruncated

    Any other well-formed symbol falls back to the regular form.
"""

import json
import math
import numbers
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from .constants import (
    MIN_DIMENSION, MAX_DIMENSION, MIN_D_FAMILY_DIMENSION,
    GROUP_A, GROUP_B, GROUP_D, SYMMETRY_GROUPS,
    PRESET_REGULAR, PRESET_RECTIFIED, PRESET_TRUNCATED, PRESET_CANTELLATED,
    PRESET_RUNCINATED, PRESET_OMNITRUNCATED, PRESET_CUSTOM, PRESETS,
)
from .errors import ConfigurationError


@dataclass(frozen=True)
class WythoffConfig:
    """Immutable construction request (value-compared)."""
    symmetry_group: str = GROUP_B
    preset: str = PRESET_REGULAR
    custom_symbol: Tuple[bool, ...] = field(default_factory=tuple)
    scale: float = 2.0
    snub: bool = False

    def __post_init__(self):
        # Lists are accepted for convenience; stored as a hashable tuple
        if not isinstance(self.custom_symbol, tuple):
            try:
                symbol = tuple(self.custom_symbol)
            except TypeError:
                raise ConfigurationError(
                    f"Custom Wythoff symbol must be a sequence of booleans, got {self.custom_symbol!r}"
                ) from None
            object.__setattr__(self, "custom_symbol", symbol)

    def cache_key(self, dimension: int) -> str:
        """
        Scale-independent cache key.

        Scale is intentionally omitted: geometry is cached at scale 1.0 and
        rescaled on retrieval.
        """
        return json.dumps({
            "d": int(dimension),
            "s": self.symmetry_group,
            "p": self.preset,
            "c": [bool(b) for b in self.custom_symbol],
            "sn": bool(self.snub),
        }, sort_keys=True)

    def to_dict(self) -> dict:
        return {
            "symmetry_group": self.symmetry_group,
            "preset": self.preset,
            "custom_symbol": [bool(b) for b in self.custom_symbol],
            "scale": float(self.scale),
            "snub": bool(self.snub),
        }


DEFAULT_WYTHOFF_CONFIG = WythoffConfig()


def resolve_config(config: Optional[WythoffConfig] = None, **overrides) -> WythoffConfig:
    """
    Merge partial overrides onto a config (defaults if None).

    Accepts either a WythoffConfig, a plain dict of fields, or nothing.

    Example:
        >>> resolve_config(preset="truncated").preset
        'truncated'
    """
    if config is None:
        base = DEFAULT_WYTHOFF_CONFIG
    elif isinstance(config, WythoffConfig):
        base = config
    elif isinstance(config, dict):
        overrides = {**config, **overrides}
        base = DEFAULT_WYTHOFF_CONFIG
    else:
        raise ConfigurationError(f"Unsupported config type: {type(config).__name__}")

    unknown = set(overrides) - set(WythoffConfig.__dataclass_fields__)
    if unknown:
        raise ConfigurationError(f"Unknown config fields: {sorted(unknown)}")

    return replace(base, **overrides) if overrides else base


def validate_dimension(dimension) -> int:
    """Dimension must be an integer in [3, 11]."""
    if isinstance(dimension, bool) or not isinstance(dimension, numbers.Integral):
        raise ConfigurationError(f"Dimension must be an integer, got {dimension!r}")
    dimension = int(dimension)
    if dimension < MIN_DIMENSION or dimension > MAX_DIMENSION:
        raise ConfigurationError(
            f"Wythoff polytope dimension must be between {MIN_DIMENSION} and "
            f"{MAX_DIMENSION} (got {dimension})"
        )
    return dimension


def validate_config(dimension: int, config: WythoffConfig) -> None:
    """
    Check a (dimension, config) pair before any generation work.

    Raises:
        ConfigurationError on unknown group/preset, D_n below 4,
        non-finite or non-positive scale, malformed custom symbol.
    """
    if config.symmetry_group not in SYMMETRY_GROUPS:
        raise ConfigurationError(f"Unknown symmetry group: {config.symmetry_group!r}")
    if config.preset not in PRESETS:
        raise ConfigurationError(f"Unknown preset: {config.preset!r}")
    if config.symmetry_group == GROUP_D and dimension < MIN_D_FAMILY_DIMENSION:
        raise ConfigurationError(f"D_n symmetry requires dimension >= {MIN_D_FAMILY_DIMENSION}")

    try:
        scale = float(config.scale)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Scale must be a number, got {config.scale!r}") from None
    if not math.isfinite(scale) or scale <= 0:
        raise ConfigurationError(f"Scale must be finite and > 0, got {config.scale!r}")

    if config.preset == PRESET_CUSTOM:
        validate_custom_symbol(dimension, config.custom_symbol)


def validate_custom_symbol(dimension: int, symbol) -> None:
    """A custom symbol has one boolean per node and at least one ringed node."""
    if len(symbol) != dimension:
        raise ConfigurationError(
            f"Custom Wythoff symbol must have {dimension} entries, got {len(symbol)}"
        )
    for i, ringed in enumerate(symbol):
        if not isinstance(ringed, bool) and ringed not in (0, 1):
            raise ConfigurationError(f"Custom Wythoff symbol entry {i} is not boolean: {ringed!r}")
    if not any(symbol):
        raise ConfigurationError("Custom Wythoff symbol must ring at least one node")


def preset_for_symbol(symbol) -> Optional[str]:
    """
    Named preset matching a ringing pattern, or None.

    Patterns are checked most-specific first so that, e.g., [1, 1, 1]
    resolves to omnitruncated rather than truncated.
    """
    ringed = [bool(b) for b in symbol]
    n = len(ringed)
    on = {i for i, b in enumerate(ringed) if b}

    if on == set(range(n)):
        return PRESET_OMNITRUNCATED
    if on == {0}:
        return PRESET_REGULAR
    if on == {1}:
        return PRESET_RECTIFIED
    if on == {0, 1}:
        return PRESET_TRUNCATED
    if on == {0, 2}:
        return PRESET_CANTELLATED
    if on == {0, n - 1}:
        return PRESET_RUNCINATED
    return None


def effective_preset(config: WythoffConfig) -> str:
    """Preset actually used for generation (custom symbols resolved)."""
    if config.preset != PRESET_CUSTOM:
        return config.preset
    return preset_for_symbol(config.custom_symbol) or PRESET_REGULAR


PRESET_NAMES = {
    PRESET_REGULAR: "Regular",
    PRESET_RECTIFIED: "Rectified",
    PRESET_TRUNCATED: "Truncated",
    PRESET_CANTELLATED: "Cantellated",
    PRESET_RUNCINATED: "Runcinated",
    PRESET_OMNITRUNCATED: "Omnitruncated",
    PRESET_CUSTOM: "Custom",
}

GROUP_NAMES = {
    GROUP_A: "Simplex",
    GROUP_B: "Hypercube",
    GROUP_D: "Demihypercube",
}


def get_wythoff_preset_name(preset: str, symmetry_group: str, dimension: int) -> str:
    """
    Human-readable name.

    Example:
        >>> get_wythoff_preset_name("regular", "B", 4)
        'Regular 4D Hypercube'
    """
    return f"{PRESET_NAMES[preset]} {dimension}D {GROUP_NAMES[symmetry_group]}"
