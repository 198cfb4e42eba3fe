"""
Bands swept around the Z axis: bracelets and rings.

A closed cross-section (counter-clockwise in the radial/height plane) is
swept over the angular range left after removing a symmetric gap around
angle 0. Both exposed ends are capped; a zero gap closes the band instead.
"""

import logging
import math

import numpy as np

from .. import patterns
from ..mesh import RawMesh
from ..params import BraceletParams, RingParams, normalize
from ..topology import MeshBuilder, polygon_fan, sweep
from ..units import ring_size_to_diameter_cm

logger = logging.getLogger(__name__)


def sweep_angles(segments: int, gap_degrees: float) -> tuple[np.ndarray, bool]:
    """
    Angular samples of the sweep and whether the path closes on itself.

    With a gap, ``floor(segments * (1 - gap/360))`` segments span
    [gap/2, 2π - gap/2] so the opening is centred on angle 0.
    """
    if gap_degrees <= 0:
        return np.arange(segments) / segments * 2 * np.pi, True
    gap = math.radians(gap_degrees)
    actual = max(1, int(math.floor(segments * (1 - gap_degrees / 360.0))))
    return np.linspace(gap / 2, 2 * np.pi - gap / 2, actual + 1), False


def cross_section(thickness: float, width: float, profile: str, profile_segments: int) -> np.ndarray:
    """(r, z) offsets from the inner radius, counter-clockwise starting at the inner bottom corner."""
    if profile == "rounded":
        phi = np.linspace(-np.pi / 2, np.pi / 2, profile_segments + 1)
        arc = np.column_stack([0.5 * thickness * (1 + np.cos(phi)), 0.5 * width * (1 + np.sin(phi))])
        return np.vstack([[0.0, 0.0], arc, [0.0, width]])
    return np.array([[0.0, 0.0], [thickness, 0.0], [thickness, width], [0.0, width]])


def band(
    inner_radius: float,
    thickness: float,
    width: float,
    gap_degrees: float,
    segments: int,
    profile: str = "flat",
    profile_segments: int = 8,
    pattern=None,
) -> RawMesh:
    angles, closed = sweep_angles(segments, gap_degrees)
    section = cross_section(thickness, width, profile, profile_segments)

    # the pattern pushes the section outward in proportion to its radial
    # offset, so the inner face stays true and the section stays convex
    dr = section[:, 0][None, :]
    z = np.broadcast_to(section[:, 1][None, :], (len(angles), len(section)))
    if pattern is not None:
        t = section[:, 1] / width
        offset = patterns.band_offset(pattern.kind, angles[:, None], t[None, :], pattern.scale, pattern.depth)
        dr = dr * (1 + offset / thickness)
    r = inner_radius + dr

    points = np.stack([np.cos(angles)[:, None] * r, np.sin(angles)[:, None] * r, z], axis=-1)

    b = MeshBuilder()
    idx = b.add_vertices(points)
    b.add_faces(sweep(idx, closed=closed), "band")
    if not closed:
        b.add_faces(polygon_fan(idx[0]), "start_cap")
        b.add_faces(polygon_fan(idx[-1], reverse=True), "end_cap")
    return b.build()


def bracelet(params: BraceletParams) -> RawMesh:
    p = normalize(params)
    mesh = band(
        p.inner_diameter / 2,
        p.thickness,
        p.width,
        p.gap_size,
        p.segments,
        p.profile,
        p.profile_segments,
        p.pattern,
    )
    logger.debug("Bracelet gap=%.1f deg: %d triangles", p.gap_size, mesh.triangle_count)
    return mesh


def ring(params: RingParams) -> RawMesh:
    p = normalize(params)
    diameter = p.inner_diameter if p.inner_diameter is not None else ring_size_to_diameter_cm(p.ring_size)
    mesh = band(
        diameter / 2,
        p.thickness,
        p.width,
        p.gap_size,
        p.segments,
        p.profile,
        p.profile_segments,
        p.pattern,
    )
    logger.debug("Ring d=%.2f cm: %d triangles", diameter, mesh.triangle_count)
    return mesh
