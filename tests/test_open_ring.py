"""
Tests for bracelets and rings.
"""

import math
from dataclasses import replace

import numpy as np
import pytest

from homegoods.generators.open_ring import bracelet, cross_section, ring, sweep_angles
from homegoods.params import BAND_PATTERNS, PatternDescriptor, RingParams
from homegoods.units import INCH, ring_size_to_diameter_cm


class TestSweepAngles:
    @pytest.mark.parametrize("segments", [12, 64, 128, 721])
    @pytest.mark.parametrize("gap", [1.0, 40.0, 90.0, 300.0])
    def test_gap_is_centred_on_zero(self, segments, gap):
        angles, closed = sweep_angles(segments, gap)
        assert not closed
        assert angles[0] == pytest.approx(math.radians(gap) / 2)
        assert angles[-1] == pytest.approx(2 * math.pi - math.radians(gap) / 2)

    def test_segment_count_tie_break(self):
        angles, _ = sweep_angles(128, 40.0)
        # floor(128 * 320 / 360) = 113 segments
        assert len(angles) == 114

    def test_no_gap_closes(self):
        angles, closed = sweep_angles(96, 0.0)
        assert closed
        assert len(angles) == 96
        assert angles[-1] < 2 * math.pi


def test_cross_sections_start_at_inner_bottom():
    flat = cross_section(0.3, 1.0, "flat", 8)
    rounded = cross_section(0.3, 1.0, "rounded", 8)
    assert flat.tolist() == [[0.0, 0.0], [0.3, 0.0], [0.3, 1.0], [0.0, 1.0]]
    assert len(rounded) == 8 + 3
    assert rounded[:, 0].max() == pytest.approx(0.3)
    assert rounded[:, 1].max() == pytest.approx(1.0)


class TestBracelet:
    def test_scenario(self, watertight, bracelet_params):
        """40° gap leaves a 320° band with both ends capped."""
        mesh = bracelet(bracelet_params)
        watertight(mesh)

        start = mesh.group_faces("start_cap")
        end = mesh.group_faces("end_cap")
        assert len(start) >= 2 and len(end) >= 2
        assert len(start) + len(end) >= 4

        angles = np.degrees(np.mod(np.arctan2(mesh.positions[:, 1], mesh.positions[:, 0]), 2 * np.pi))
        assert angles.min() == pytest.approx(20.0)
        assert angles.max() == pytest.approx(340.0)
        assert angles.max() - angles.min() == pytest.approx(320.0)

    def test_inner_face_radius(self, bracelet_params):
        mesh = bracelet(bracelet_params)
        r = np.hypot(mesh.positions[:, 0], mesh.positions[:, 1])
        assert r.min() == pytest.approx(bracelet_params.inner_diameter * INCH / 2)

    @pytest.mark.parametrize("kind", BAND_PATTERNS)
    @pytest.mark.parametrize("profile", ["flat", "rounded"])
    def test_closed_for_every_pattern(self, watertight, bracelet_params, kind, profile):
        p = replace(bracelet_params, profile=profile, pattern=PatternDescriptor(kind, 2.0, 0.03))
        watertight(bracelet(p))

    def test_zero_gap_has_no_caps(self, watertight, bracelet_params):
        mesh = bracelet(replace(bracelet_params, gap_size=0.0))
        watertight(mesh)
        assert "start_cap" not in mesh.groups


class TestRing:
    def test_closed_band_from_ring_size(self, watertight):
        mesh = ring(RingParams(ring_size=7, segments=48))
        watertight(mesh)
        r = np.hypot(mesh.positions[:, 0], mesh.positions[:, 1])
        assert r.min() == pytest.approx(ring_size_to_diameter_cm(7) / 2)

    def test_inner_diameter_overrides_size(self):
        mesh = ring(RingParams(ring_size=7, inner_diameter=1.0, segments=48))
        r = np.hypot(mesh.positions[:, 0], mesh.positions[:, 1])
        assert r.min() == pytest.approx(INCH / 2)

    def test_open_ring(self, watertight):
        mesh = ring(RingParams(gap_size=30.0, profile="flat", segments=48))
        watertight(mesh)
        assert "end_cap" in mesh.groups
