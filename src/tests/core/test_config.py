"""
Configuration Tests
===================

WythoffConfig resolution, validation and custom-symbol dispatch.

Run: python -m pytest tests/core/test_config.py -v
"""

import math

import pytest

from polytope_core.spec import ConfigurationError, WythoffConfig, get_wythoff_preset_name
from polytope_core.spec.config import (
    resolve_config,
    validate_dimension,
    validate_config,
    validate_custom_symbol,
    preset_for_symbol,
    effective_preset,
)


# =============================================================================
# TEST A: Resolution
# =============================================================================

def test_defaults():
    config = resolve_config()
    assert config.symmetry_group == "B"
    assert config.preset == "regular"
    assert config.scale == 2.0
    assert config.snub is False
    assert config.custom_symbol == ()


def test_overrides_and_dict_input():
    assert resolve_config(preset="truncated").preset == "truncated"

    config = resolve_config({"symmetry_group": "A", "scale": 3.0}, snub=True)
    assert (config.symmetry_group, config.scale, config.snub) == ("A", 3.0, True)


def test_custom_symbol_list_becomes_tuple():
    config = WythoffConfig(preset="custom", custom_symbol=[1, 0, 1])
    assert config.custom_symbol == (1, 0, 1)
    assert hash(config) == hash(WythoffConfig(preset="custom", custom_symbol=(1, 0, 1)))


def test_unknown_fields_rejected():
    with pytest.raises(ConfigurationError, match="Unknown config fields"):
        resolve_config(colour="red")
    with pytest.raises(ConfigurationError, match="Unsupported config type"):
        resolve_config("regular")


def test_cache_key_ignores_scale():
    small = WythoffConfig(scale=0.5)
    large = WythoffConfig(scale=40.0)
    assert small.cache_key(4) == large.cache_key(4)
    assert small.cache_key(4) != small.cache_key(5)
    assert WythoffConfig(snub=True).cache_key(4) != small.cache_key(4)


# =============================================================================
# TEST B: Validation
# =============================================================================

@pytest.mark.parametrize("dimension", [2, 12, 0, -3])
def test_dimension_out_of_range(dimension):
    with pytest.raises(ConfigurationError, match="between 3 and 11"):
        validate_dimension(dimension)


@pytest.mark.parametrize("dimension", [3.5, "4", True, None])
def test_dimension_not_integer(dimension):
    with pytest.raises(ConfigurationError, match="integer"):
        validate_dimension(dimension)


def test_dimension_bounds_accepted():
    assert validate_dimension(3) == 3
    assert validate_dimension(11) == 11


@pytest.mark.parametrize("fields,message", [
    ({"symmetry_group": "E"}, "Unknown symmetry group"),
    ({"preset": "bitruncated"}, "Unknown preset"),
    ({"scale": 0.0}, "Scale"),
    ({"scale": -1.0}, "Scale"),
    ({"scale": math.nan}, "Scale"),
    ({"scale": math.inf}, "Scale"),
    ({"scale": "big"}, "Scale"),
])
def test_invalid_config(fields, message):
    with pytest.raises(ConfigurationError, match=message):
        validate_config(4, WythoffConfig(**fields))


def test_d_family_needs_4d():
    with pytest.raises(ConfigurationError, match="D_n"):
        validate_config(3, WythoffConfig(symmetry_group="D"))
    validate_config(4, WythoffConfig(symmetry_group="D"))


def test_custom_symbol_validation():
    with pytest.raises(ConfigurationError, match="must have 4 entries"):
        validate_custom_symbol(4, (1, 0, 0))
    with pytest.raises(ConfigurationError, match="at least one"):
        validate_custom_symbol(3, (0, 0, 0))
    with pytest.raises(ConfigurationError, match="not boolean"):
        validate_custom_symbol(3, (1, 2, 0))
    validate_custom_symbol(3, (True, False, True))

    for symbol in (None, 5):
        with pytest.raises(ConfigurationError, match="sequence of booleans"):
            WythoffConfig(preset="custom", custom_symbol=symbol)
        with pytest.raises(ConfigurationError, match="sequence of booleans"):
            resolve_config(preset="custom", custom_symbol=symbol)


def test_configuration_error_is_value_error():
    """Callers that only know about ValueError still catch bad input."""
    with pytest.raises(ValueError):
        validate_dimension(20)


# =============================================================================
# TEST C: Custom symbol dispatch
# =============================================================================

@pytest.mark.parametrize("symbol,preset", [
    ((1, 0, 0, 0), "regular"),
    ((0, 1, 0, 0), "rectified"),
    ((1, 1, 0, 0), "truncated"),
    ((1, 0, 1, 0), "cantellated"),
    ((1, 0, 0, 1), "runcinated"),
    ((1, 1, 1, 1), "omnitruncated"),
    ((0, 0, 1, 1), None),
])
def test_preset_for_symbol(symbol, preset):
    assert preset_for_symbol(symbol) == preset


def test_effective_preset():
    assert effective_preset(WythoffConfig(preset="truncated")) == "truncated"
    assert effective_preset(WythoffConfig(preset="custom", custom_symbol=(0, 1, 0))) == "rectified"
    assert effective_preset(WythoffConfig(preset="custom", custom_symbol=(0, 0, 1))) == "regular"


def test_preset_names():
    assert get_wythoff_preset_name("regular", "B", 4) == "Regular 4D Hypercube"
    assert get_wythoff_preset_name("omnitruncated", "A", 7) == "Omnitruncated 7D Simplex"
    assert get_wythoff_preset_name("custom", "D", 5) == "Custom 5D Demihypercube"
