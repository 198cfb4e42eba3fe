"""
Tests for coasters and wall panels.
"""

from dataclasses import replace

import numpy as np
import pytest

from homegoods.generators.planar import coaster, wall_art
from homegoods.params import COASTER_PATTERNS, WALL_ART_PATTERNS, PatternDescriptor, WallArtParams
from homegoods.units import INCH


class TestCoaster:
    def test_scenario(self, watertight, coaster_params):
        """10 in hexagonal coaster with a bottom: closed, and as tall as its thickness."""
        mesh = coaster(coaster_params)
        assert mesh.triangle_count > 0
        watertight(mesh)

        thickness = coaster_params.thickness * INCH
        depth = coaster_params.pattern.depth * INCH
        lo, hi = mesh.bounds
        assert lo[2] == 0.0
        assert thickness <= hi[2] - lo[2] <= thickness + 1.2 * depth + 1e-9

    def test_rim_left_flat(self, coaster_params):
        mesh = coaster(coaster_params)
        radius = coaster_params.diameter * INCH / 2
        r = np.hypot(mesh.positions[:, 0], mesh.positions[:, 1])
        rim = mesh.positions[(r > radius - 1e-6) & (mesh.positions[:, 2] > 0)]
        assert len(rim) == coaster_params.segments
        np.testing.assert_allclose(rim[:, 2], coaster_params.thickness * INCH)

    def test_side_wall_reuses_rim_vertices(self, coaster_params):
        mesh = coaster(coaster_params)
        side = np.unique(mesh.group_faces("side"))
        top = np.unique(mesh.group_faces("top"))
        # the wall's upper edge is made of top-surface vertices
        assert np.isin(side, top).sum() == coaster_params.segments

    @pytest.mark.parametrize("kind", COASTER_PATTERNS)
    def test_closed_for_every_pattern(self, watertight, coaster_params, kind):
        watertight(coaster(replace(coaster_params, pattern=PatternDescriptor(kind, 1.5, 0.05))))

    def test_without_bottom_has_recess(self, watertight, coaster_params):
        mesh = coaster(replace(coaster_params, has_bottom=False))
        watertight(mesh)
        assert "recess" in mesh.groups
        # the underside is raised inside the foot ring
        recess = mesh.positions[np.unique(mesh.group_faces("recess"))]
        assert recess[:, 2].max() > 0


class TestWallArt:
    @pytest.mark.parametrize("kind", WALL_ART_PATTERNS)
    def test_closed_for_every_pattern(self, watertight, kind):
        p = WallArtParams(width=8, height=6, depth=0.5, pattern=PatternDescriptor(kind, 2.0, 0.1), segments=24)
        watertight(wall_art(p))

    def test_lies_on_its_back(self):
        p = WallArtParams(width=8, height=6, depth=0.5, segments=16)
        lo, hi = wall_art(p).bounds
        assert lo[2] == pytest.approx(0.0)
        np.testing.assert_allclose(hi[:2] - lo[:2], [8 * INCH, 6 * INCH])

    def test_deep_pattern_keeps_a_back_skin(self):
        p = WallArtParams(depth=0.2, pattern=PatternDescriptor("wave", 2.0, 0.5), segments=16)
        mesh = wall_art(p)
        front = mesh.positions[np.unique(mesh.group_faces("front"))]
        assert front[:, 2].min() > 0
