"""
Tests for unit conversion, clamping and parameter normalization.
"""

import logging
import math

import pytest

from homegoods.params import (
    BraceletParams,
    CoasterParams,
    PatternDescriptor,
    RadialProfileParams,
    RingParams,
    normalize,
    params_from_dict,
)
from homegoods.units import INCH, choice, clamp, clamp_int, ring_size_to_diameter_cm, to_cm


class TestUnits:
    def test_inch_conversion(self):
        assert to_cm(1.0) == INCH == 2.54
        assert to_cm(3.5) / INCH == pytest.approx(3.5)

    def test_clamp_in_range_unchanged(self):
        assert clamp(2.0, 0.0, 5.0) == 2.0

    def test_clamp_out_of_range(self):
        assert clamp(-1.0, 0.0, 5.0) == 0.0
        assert clamp(9.0, 0.0, 5.0) == 5.0
        assert clamp(math.inf, 0.0, 5.0) == 5.0

    def test_clamp_nan_goes_to_lower_bound(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert clamp(float("nan"), 1.0, 5.0, "height") == 1.0
        assert any("height" in r.message for r in caplog.records)

    def test_clamp_int_rounds(self):
        assert clamp_int(7.6, 1, 10) == 8
        assert clamp_int(1000, 1, 10) == 10

    def test_choice_fallback_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert choice("gold", ("shiny", "matte"), "matte", "material") == "matte"
        assert any("gold" in r.message for r in caplog.records)

    def test_ring_size(self):
        # US size 7 is about 17.3 mm
        assert ring_size_to_diameter_cm(7) == pytest.approx(1.73196)
        assert ring_size_to_diameter_cm(0) == pytest.approx(1.163)


class TestNormalize:
    def test_linear_fields_converted(self):
        p = normalize(RadialProfileParams(height=4.0, top_radius=2.0))
        assert p.unit == "cm"
        assert p.height == pytest.approx(4.0 * INCH)
        assert p.top_radius == pytest.approx(2.0 * INCH)
        # unitless fields stay as they are
        assert p.wave_frequency == 4.0

    def test_out_of_range_clamped_before_conversion(self):
        p = normalize(RadialProfileParams(height=100.0, top_radius=-3.0))
        assert p.height == pytest.approx(30.0 * INCH)
        assert p.top_radius == pytest.approx(0.4 * INCH)

    def test_idempotent(self):
        once = normalize(CoasterParams(diameter=5.0))
        assert normalize(once) is once

    def test_integer_fields_clamped(self):
        p = normalize(RadialProfileParams(segments=3, height_segments=10_000))
        assert p.segments == 8
        assert p.height_segments == 512

    def test_unknown_material_falls_back_to_matte(self):
        assert normalize(RadialProfileParams(material="chrome")).material == "matte"
        assert normalize(RadialProfileParams(material="wireframe")).material == "wireframe"

    def test_unknown_choice_falls_back(self):
        assert normalize(BraceletParams(profile="hexagonal")).profile == "flat"

    def test_pattern_depth_converted_and_kind_checked(self):
        p = normalize(RadialProfileParams(pattern=PatternDescriptor("stars", 2.0, 0.1)))
        assert p.pattern.kind == "stars"
        assert p.pattern.depth == pytest.approx(0.254)

        p = normalize(RadialProfileParams(pattern=PatternDescriptor("hexagonal", 2.0, 0.1)))
        assert p.pattern.kind == "none"

    def test_scale_factors_clamped(self):
        p = normalize(RadialProfileParams(scale=(-1.0, 2.0, 50.0)))
        assert p.scale == (0.1, 2.0, 10.0)

    def test_optional_field_left_unset(self):
        p = normalize(RingParams())
        assert p.inner_diameter is None
        p = normalize(RingParams(inner_diameter=0.7))
        assert p.inner_diameter == pytest.approx(0.7 * INCH)


class TestParamsFromDict:
    def test_bowl_from_catalog_style_dict(self):
        p = params_from_dict(
            {
                "type": "bowl",
                "height": 2.0,
                "diameter": 5.0,
                "patternType": "geometric",
                "patternScale": 2,
                "patternDepth": 0.05,
            }
        )
        assert isinstance(p, RadialProfileParams)
        assert p.profile == "bowl"
        assert p.bottom_radius == 2.5
        assert p.top_radius == pytest.approx(3.0)
        assert p.pattern == PatternDescriptor("geometric", 2, 0.05)

    def test_cup_diameter_sets_both_radii(self):
        p = params_from_dict({"type": "candleHolder", "diameter": 2.0})
        assert p.top_radius == p.bottom_radius == 1.0

    def test_camel_case_keys(self):
        p = params_from_dict({"type": "bracelet", "gapSize": 60, "innerDiameter": 3.0})
        assert isinstance(p, BraceletParams)
        assert p.gap_size == 60
        assert p.inner_diameter == 3.0

    def test_nested_pattern_dict(self):
        p = params_from_dict({"type": "coaster", "pattern": {"kind": "spiral", "scale": 1.0, "depth": 0.01}})
        assert p.pattern.kind == "spiral"

    def test_unknown_keys_ignored(self):
        p = params_from_dict({"type": "ring", "sparkle": True})
        assert isinstance(p, RingParams)

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError, match="teapot"):
            params_from_dict({"type": "teapot"})
