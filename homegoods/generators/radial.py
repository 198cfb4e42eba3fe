"""
Bodies of revolution: lampshades, vases, cups and bowls.

The body is a printable shell. An outer surface carries the wave, twist and
pattern; a smooth inner surface sits ``wall_thickness`` inside it. Open ends
are closed by rim annuli between the two surfaces, closed ends by fan caps
that reuse the boundary rings' vertex indices.
"""

import logging

import numpy as np

from .. import patterns
from ..mesh import RawMesh
from ..params import RadialProfileParams, normalize
from ..topology import MeshBuilder, fan, grid, stitch
from ..units import MIN_RADIUS

logger = logging.getLogger(__name__)

# Pattern displacement is suppressed this close to the top rim (cm).
RIM_MARGIN = 0.5
BOWL_EXPONENT = 0.7
# Floor/ceiling may use at most this fraction of the height each.
MAX_FLOOR_FRACTION = 0.45
# Largest rotation between neighbouring rings (radians).
MAX_ROW_TWIST = np.pi / 4


class ProfileSampler:
    """
    Radius and height of a body of revolution as functions of the height
    parameter ``v`` in [0, 1] and the angle ``theta``.

    Rings are always evaluated one at a time through :meth:`outer_ring` and
    :meth:`inner_rings`, so re-deriving a boundary ring reproduces the body's
    coordinates exactly.
    """

    def __init__(self, params: RadialProfileParams):
        self.p = normalize(params)
        self.angles = np.arange(self.p.segments) / self.p.segments * 2 * np.pi

    def height(self, v):
        if self.p.profile == "bowl":
            return self.p.height * np.power(v, BOWL_EXPONENT)
        return self.p.height * v

    def twist(self, v):
        return v * self.p.twist * 2 * np.pi

    def smooth_radius(self, v):
        p = self.p
        base = p.bottom_radius + (p.top_radius - p.bottom_radius) * v
        wave = np.sin(v * np.pi * p.wave_frequency) * p.wave_amplitude
        return np.maximum(base + wave, MIN_RADIUS + p.wall_thickness)

    def inner_radius(self, v):
        return np.maximum(self.smooth_radius(v) - self.p.wall_thickness, MIN_RADIUS)

    def outer_radius(self, v, theta):
        p = self.p
        radius = self.smooth_radius(v) + np.zeros_like(theta)
        if p.pattern is not None and self.height(v) < p.height - RIM_MARGIN:
            radius = radius + patterns.radial_offset(
                p.pattern.kind, theta, v, p.pattern.scale, p.pattern.depth, p.segments
            )
        return np.maximum(radius, self.inner_radius(v) + 0.5 * p.wall_thickness)

    def _ring(self, radius, v, z) -> np.ndarray:
        theta = self.angles + self.twist(v)
        return np.column_stack([np.cos(theta) * radius, np.sin(theta) * radius, np.full(len(theta), z)])

    def outer_ring(self, v: float) -> np.ndarray:
        return self._ring(self.outer_radius(v, self.angles), v, self.height(v))

    def inner_rings(self, vs: np.ndarray, z_lo: float, z_hi: float) -> np.ndarray:
        """
        Inner surface rings, one per outer ring parameter in ``vs``.

        Ring ``i`` shares the twist of outer ring ``i``, so both walls are
        faceted the same way between rows. Its height is squeezed into
        ``[z_lo, z_hi]`` and its radius is the piecewise-linear outer profile
        at that height, less the wall thickness.
        """
        p = self.p
        outer_z = self.height(vs)
        inner_z = z_lo + (z_hi - z_lo) * outer_z / p.height
        chord = np.interp(inner_z, outer_z, self.smooth_radius(vs))
        radii = np.maximum(chord - p.wall_thickness, MIN_RADIUS)
        return np.stack([self._ring(np.full(len(self.angles), r), v, z) for v, z, r in zip(vs, inner_z, radii)])


def generate(params: RadialProfileParams) -> RawMesh:
    p = normalize(params)
    sampler = ProfileSampler(p)
    rows = max(p.height_segments, int(np.ceil(p.twist * 2 * np.pi / MAX_ROW_TWIST)))
    vs = np.linspace(0.0, 1.0, rows + 1)

    floor = min(p.floor_thickness, MAX_FLOOR_FRACTION * p.height)
    z_lo = floor if p.has_bottom else 0.0
    z_hi = p.height - floor if p.has_top else p.height

    b = MeshBuilder()
    outer = b.add_vertices(np.stack([sampler.outer_ring(v) for v in vs]))
    inner = b.add_vertices(sampler.inner_rings(vs, z_lo, z_hi))
    b.add_faces(grid(outer), "outer")
    b.add_faces(grid(inner, reverse=True), "inner")

    if p.has_bottom:
        center = b.add_vertex((0.0, 0.0, 0.0))
        b.add_faces(fan(center, outer[0], reverse=True), "bottom_cap")
        floor_center = b.add_vertex((0.0, 0.0, z_lo))
        b.add_faces(fan(floor_center, inner[0]), "floor")
    else:
        b.add_faces(stitch(inner[0], outer[0]), "bottom_rim")

    if p.has_top:
        center = b.add_vertex((0.0, 0.0, p.height))
        b.add_faces(fan(center, outer[-1]), "top_cap")
        ceiling_center = b.add_vertex((0.0, 0.0, z_hi))
        b.add_faces(fan(ceiling_center, inner[-1], reverse=True), "ceiling")
    else:
        b.add_faces(stitch(outer[-1], inner[-1]), "top_rim")

    mesh = b.build()
    logger.debug(
        "Radial %s profile: %d rings x %d segments -> %d triangles",
        p.profile,
        len(vs),
        p.segments,
        mesh.triangle_count,
    )
    return mesh
