"""
Closed sub-solids that composite products are assembled from.

Every function returns an independently watertight, outward-wound
:class:`RawMesh`; composites concatenate them without welding.
"""

import numpy as np
import trimesh
from shapely.geometry import Polygon
from shapely.geometry.polygon import orient

from ..mesh import RawMesh
from ..topology import MeshBuilder, grid, polygon_fan, stitch, sweep

# local (x, y, z) -> world (z, x, y): builds a profile drawn in the XY plane
# into the world YZ plane, extruded along world X
YZ_PLANE = np.array(
    [
        [0.0, 0.0, 1.0, 0.0],
        [1.0, 0.0, 0.0, 0.0],
        [0.0, 1.0, 0.0, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ]
)

# local (x, y, z) -> world (x, -z, y): profile in the world XZ plane,
# extruded towards -Y
XZ_PLANE = trimesh.transformations.rotation_matrix(np.pi / 2, [1, 0, 0])


def prism(loop_xy: np.ndarray, z0: float, z1: float) -> RawMesh:
    """Extrude a convex CCW polygon between two heights."""
    loop_xy = np.asarray(loop_xy, dtype=float)
    n = len(loop_xy)
    b = MeshBuilder()
    bottom = b.add_vertices(np.column_stack([loop_xy, np.full(n, z0)]))
    top = b.add_vertices(np.column_stack([loop_xy, np.full(n, z1)]))
    b.add_faces(stitch(bottom, top), "side")
    b.add_faces(polygon_fan(bottom, reverse=True), "bottom")
    b.add_faces(polygon_fan(top), "top")
    return b.build()


def box(lo, hi) -> RawMesh:
    (x0, y0, z0), (x1, y1, z1) = lo, hi
    return prism([(x0, y0), (x1, y0), (x1, y1), (x0, y1)], z0, z1)


def convex_prism(polygon: Polygon, z0: float, z1: float) -> RawMesh:
    """Extrude the convex hull of a shapely polygon."""
    hull = orient(polygon.convex_hull, sign=1.0)
    return prism(np.asarray(hull.exterior.coords)[:-1, :2], z0, z1)


def frustum(
    r0: float,
    r1: float,
    z0: float,
    z1: float,
    segments: int,
    center: tuple[float, float] = (0.0, 0.0),
) -> RawMesh:
    """Cylinder or truncated cone around a vertical axis."""
    angles = np.arange(segments) / segments * 2 * np.pi
    unit = np.column_stack([np.cos(angles), np.sin(angles)])
    b = MeshBuilder()
    bottom = b.add_vertices(np.column_stack([unit * r0 + center, np.full(segments, z0)]))
    top = b.add_vertices(np.column_stack([unit * r1 + center, np.full(segments, z1)]))
    b.add_faces(stitch(bottom, top), "side")
    b.add_faces(polygon_fan(bottom, reverse=True), "bottom")
    b.add_faces(polygon_fan(top), "top")
    return b.build()


def cylinder_between(p0, p1, radius: float, segments: int) -> RawMesh:
    """Cylinder whose axis runs from ``p0`` to ``p1``."""
    p0 = np.asarray(p0, dtype=float)
    axis = np.asarray(p1, dtype=float) - p0
    length = float(np.linalg.norm(axis))
    matrix = trimesh.geometry.align_vectors([0.0, 0.0, 1.0], axis / length)
    matrix[:3, 3] = p0
    return frustum(radius, radius, 0.0, length, segments).transformed(matrix)


def column_prism(xs: np.ndarray, lower: np.ndarray, upper: np.ndarray, thickness: float) -> RawMesh:
    """
    Extrude an x-monotone profile bounded below by ``lower(x)`` and above by
    ``upper(x)`` through ``thickness`` along Z.

    The face is triangulated column by column, so the profile may be
    concave (wavy or arched tops).
    """
    xs = np.asarray(xs, dtype=float)
    lower = np.broadcast_to(np.asarray(lower, dtype=float), xs.shape)
    upper = np.maximum(np.broadcast_to(np.asarray(upper, dtype=float), xs.shape), lower + 1e-3)
    b = MeshBuilder()
    layers = []
    for z in (0.0, thickness):
        rows = np.stack([np.column_stack([xs, lower, np.full(len(xs), z)]), np.column_stack([xs, upper, np.full(len(xs), z)])])
        layers.append(b.add_vertices(rows))
    back, front = layers
    b.add_faces(grid(front, closed=False), "front")
    b.add_faces(grid(back, closed=False, reverse=True), "back")
    # boundary: along the lower edge, then back along the upper edge
    back_loop = np.concatenate([back[0], back[1][::-1]])
    front_loop = np.concatenate([front[0], front[1][::-1]])
    b.add_faces(stitch(back_loop, front_loop), "side")
    return b.build()


def torus(major: float, minor: float, segments: int, tube_segments: int) -> RawMesh:
    """Torus around the Z axis, centred on the origin."""
    theta = np.arange(segments) / segments * 2 * np.pi
    phi = np.arange(tube_segments) / tube_segments * 2 * np.pi
    r = major + minor * np.cos(phi)
    z = minor * np.sin(phi)
    points = np.stack(
        [
            np.cos(theta)[:, None] * r[None, :],
            np.sin(theta)[:, None] * r[None, :],
            np.broadcast_to(z[None, :], (segments, tube_segments)),
        ],
        axis=-1,
    )
    b = MeshBuilder()
    b.add_faces(sweep(b.add_vertices(points), closed=True), "surface")
    return b.build()
