"""
Planar-displacement solids: coasters (polar grid) and wall panels
(Cartesian grid).

The patterned face is a height field; the solid is closed by a back face
and side walls stitched to the face's own boundary vertices.
"""

import logging

import numpy as np

from .. import patterns
from ..mesh import RawMesh
from ..params import CoasterParams, WallArtParams, normalize
from ..topology import MeshBuilder, fan, grid, grid_loop, stitch

logger = logging.getLogger(__name__)

# Lowest the patterned top may dip, as a fraction of the nominal thickness.
MIN_SKIN = 0.25
# Width of the foot ring left under a coaster without a solid bottom.
MIN_FOOT_FRACTION = 0.1


def coaster(params: CoasterParams) -> RawMesh:
    p = normalize(params)
    radius = p.diameter / 2
    pattern_limit = radius - p.rim_height
    angles = np.arange(p.segments) / p.segments * 2 * np.pi
    radii = radius * np.arange(1, p.rings + 1) / p.rings

    x = np.cos(angles)[None, :] * radii[:, None]
    y = np.sin(angles)[None, :] * radii[:, None]
    r = np.broadcast_to(radii[:, None], x.shape)

    def top_height(px, py, pr):
        z = np.full(np.shape(px), p.thickness)
        if p.pattern is not None:
            offset = patterns.coaster_height(p.pattern.kind, px, py, p.pattern.scale, p.pattern.depth)
            z = np.where(pr < pattern_limit, z + offset, z)
        return np.maximum(z, MIN_SKIN * p.thickness)

    z = top_height(x, y, r)
    z_center = float(top_height(np.zeros(1), np.zeros(1), np.zeros(1))[0])

    b = MeshBuilder()
    top = b.add_vertices(np.stack([x, y, z], axis=-1))
    center = b.add_vertex((0.0, 0.0, z_center))
    b.add_faces(fan(center, top[0]), "top")
    b.add_faces(grid(top, reverse=True), "top")

    # the wall's upper edge is the top boundary itself; its lower edge
    # copies those x, y coordinates onto the bed
    rim_xy = np.column_stack([x[-1], y[-1]])
    bottom = b.add_vertices(np.column_stack([rim_xy, np.zeros(len(rim_xy))]))
    b.add_faces(stitch(bottom, top[-1]), "side")

    if p.has_bottom:
        bottom_center = b.add_vertex((0.0, 0.0, 0.0))
        b.add_faces(fan(bottom_center, bottom, reverse=True), "bottom")
    else:
        foot = min(max(p.rim_height, MIN_FOOT_FRACTION * radius), 0.5 * radius)
        inner_radius = radius - foot
        recess = 0.5 * float(min(z.min(), z_center))
        ring = np.column_stack([np.cos(angles) * inner_radius, np.sin(angles) * inner_radius])
        foot_inner = b.add_vertices(np.column_stack([ring, np.zeros(len(ring))]))
        recess_edge = b.add_vertices(np.column_stack([ring, np.full(len(ring), recess)]))
        b.add_faces(stitch(foot_inner, bottom), "bottom")
        b.add_faces(stitch(recess_edge, foot_inner), "recess")
        recess_center = b.add_vertex((0.0, 0.0, recess))
        b.add_faces(fan(recess_center, recess_edge, reverse=True), "recess")

    mesh = b.build()
    logger.debug("Coaster %s: %d triangles", p.pattern.kind if p.pattern else "plain", mesh.triangle_count)
    return mesh


def wall_art(params: WallArtParams) -> RawMesh:
    p = normalize(params)
    n = p.segments
    xs = (np.arange(n + 1) / n - 0.5) * p.width
    ys = (np.arange(n + 1) / n - 0.5) * p.height
    x, y = np.meshgrid(xs, ys)

    z = np.zeros_like(x)
    if p.pattern is not None:
        z = patterns.wall_art_height(p.pattern.kind, x, y, p.width, p.height, p.pattern.scale, p.pattern.depth)
    z = np.maximum(z, -(1 - MIN_SKIN) * p.depth)

    b = MeshBuilder()
    front = b.add_vertices(np.stack([x, y, z], axis=-1))
    back = b.add_vertices(np.stack([x, y, np.full_like(x, -p.depth)], axis=-1))
    b.add_faces(grid(front, closed=False), "front")
    b.add_faces(grid(back, closed=False, reverse=True), "back")
    b.add_faces(stitch(grid_loop(back), grid_loop(front)), "side")

    # lay the panel on its back
    mesh = b.build().translated((0.0, 0.0, p.depth))
    logger.debug("Wall art %s: %d triangles", p.pattern.kind if p.pattern else "plain", mesh.triangle_count)
    return mesh
