"""
Pytest configuration and shared fixtures for homegoods tests.
"""

import numpy as np
import pytest

from homegoods.mesh import RawMesh
from homegoods.params import (
    BraceletParams,
    CoasterParams,
    PatternDescriptor,
    RadialProfileParams,
)


def check_watertight(mesh: RawMesh):
    """Every undirected edge used by exactly two triangles, winding outward."""
    assert mesh.triangle_count > 0
    edges, counts = mesh.edge_counts()
    bad = edges[counts != 2]
    assert len(bad) == 0, f"{len(bad)} edges not shared by exactly two triangles, e.g. {bad[:3].tolist()}"
    assert mesh.signed_volume() > 0
    assert np.isfinite(mesh.positions).all()
    assert np.allclose(np.linalg.norm(mesh.normals, axis=1), 1.0)


@pytest.fixture
def watertight():
    """Assertion helper: ``watertight(mesh)``."""
    return check_watertight


# ─── Parameter fixtures ──────────────────────────────────────────────────


@pytest.fixture
def vase_params():
    return RadialProfileParams(
        height=4.0,
        top_radius=1.5,
        bottom_radius=1.0,
        wave_amplitude=0.1,
        wave_frequency=3,
        has_bottom=True,
        segments=32,
        height_segments=12,
    )


@pytest.fixture
def coaster_params():
    """10 in coaster, 0.5 in thick, hexagonal pattern and a 0.3 in rim."""
    return CoasterParams(
        diameter=10.0,
        thickness=0.5,
        rim_height=0.3,
        has_bottom=True,
        pattern=PatternDescriptor("hexagonal", 2.0, 0.02),
        segments=64,
        rings=24,
    )


@pytest.fixture
def bracelet_params():
    return BraceletParams(
        inner_diameter=2.5,
        width=0.6,
        thickness=0.15,
        gap_size=40.0,
        segments=72,
    )


@pytest.fixture
def unit_cube():
    """A 1 cm cube as a RawMesh, wound outward."""
    positions = np.array(
        [[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0], [0, 0, 1], [1, 0, 1], [1, 1, 1], [0, 1, 1]],
        dtype=float,
    )
    indices = np.array(
        [
            [0, 2, 1], [0, 3, 2],  # bottom
            [4, 5, 6], [4, 6, 7],  # top
            [0, 1, 5], [0, 5, 4],  # front
            [1, 2, 6], [1, 6, 5],  # right
            [2, 3, 7], [2, 7, 6],  # back
            [3, 0, 4], [3, 4, 7],  # left
        ]
    )
    return RawMesh.from_arrays(positions, indices)
