"""
Shells extruded from a closed 2D outline: pencil holders.

The outline is resampled by arc length, offset inward with shapely for the
inner wall, stacked into (optionally twisted) rings and closed with a floor
and a top rim.
"""

import logging

import numpy as np
import trimesh
from shapely.geometry import MultiPolygon, Point, Polygon
from shapely.geometry.polygon import orient

from ..mesh import RawMesh
from ..params import PencilHolderParams, normalize
from ..topology import MeshBuilder, fan, grid, stitch
from . import primitives
from .radial import MAX_ROW_TWIST

logger = logging.getLogger(__name__)

STAR_POINTS = 5
STAR_INNER_RATIO = 0.6
MITRE = 2  # shapely join_style


def polygon_area_centroid(pts: np.ndarray) -> tuple[float, np.ndarray]:
    x = pts[:, 0]
    y = pts[:, 1]
    x1 = np.roll(x, -1)
    y1 = np.roll(y, -1)
    a = 0.5 * np.sum(x * y1 - x1 * y)
    cx = (1.0 / (6.0 * a)) * np.sum((x + x1) * (x * y1 - x1 * y))
    cy = (1.0 / (6.0 * a)) * np.sum((y + y1) * (x * y1 - x1 * y))
    return a, np.array([cx, cy], dtype=float)


def resample_closed_polyline(pts: np.ndarray, n: int) -> np.ndarray:
    """
    Uniform arclength resampling of a closed polyline.
    pts: (N,2) without duplicated end point.
    Returns (n,2).
    """
    closed = np.vstack([pts, pts[0]])
    seg = np.linalg.norm(np.diff(closed, axis=0), axis=1)
    s = np.hstack([[0.0], np.cumsum(seg)])
    target = np.linspace(0.0, s[-1], n + 1)[:-1]

    j = np.clip(np.searchsorted(s, target, side="right") - 1, 0, len(seg) - 1)
    u = (target - s[j]) / (seg[j] + 1e-15)
    return (1 - u)[:, None] * closed[j] + u[:, None] * closed[j + 1]


def rotate_xy(xy: np.ndarray, theta: float) -> np.ndarray:
    c, s = np.cos(theta), np.sin(theta)
    R = np.array([[c, -s], [s, c]], dtype=float)
    return xy @ R.T


def outline(shape: str, diameter: float) -> np.ndarray:
    """
    Corner points of the holder's footprint, CCW and centred.

    ``diameter`` is the width across flats for polygons and the tip-to-tip
    width for the star.
    """
    r = diameter / 2
    if shape == "hexagon":
        angles = np.arange(6) / 6 * 2 * np.pi
        pts = np.column_stack([np.cos(angles), np.sin(angles)]) * r / np.cos(np.pi / 6)
    elif shape == "square":
        pts = np.array([[-r, -r], [r, -r], [r, r], [-r, r]])
    elif shape == "star":
        angles = np.arange(2 * STAR_POINTS) / (2 * STAR_POINTS) * 2 * np.pi + np.pi / 2
        radii = np.where(np.arange(2 * STAR_POINTS) % 2 == 0, r, r * STAR_INNER_RATIO)
        pts = np.column_stack([np.cos(angles) * radii, np.sin(angles) * radii])
    else:
        angles = np.arange(256) / 256 * 2 * np.pi
        pts = np.column_stack([np.cos(angles), np.sin(angles)]) * r

    area, centroid = polygon_area_centroid(pts)
    pts = pts - centroid
    # Ensure CCW for consistent normals
    if area < 0:
        pts = pts[::-1].copy()
    return pts


def inset(outer: Polygon, distance: float) -> Polygon:
    """
    Inward offset of ``outer``; if it collapses the offset is halved until
    a polygon survives.
    """
    while distance > 1e-4:
        inner = outer.buffer(-distance, join_style=MITRE)
        if isinstance(inner, MultiPolygon):
            inner = max(inner.geoms, key=lambda g: g.area)
        if not inner.is_empty:
            return orient(inner, sign=1.0)
        logger.warning("Inward offset of %.3f cm collapsed the outline; halving it", distance)
        distance /= 2
    return orient(outer.buffer(-1e-4, join_style=MITRE), sign=1.0)


def align_start(ring: np.ndarray, reference: np.ndarray) -> np.ndarray:
    """Roll ``ring`` so its first point is the one angularly closest to ``reference``."""
    target = np.arctan2(reference[1], reference[0])
    angles = np.arctan2(ring[:, 1], ring[:, 0])
    k = int(np.argmin(np.abs(np.angle(np.exp(1j * (angles - target))))))
    return np.roll(ring, -k, axis=0)


def divider_solids(p: PencilHolderParams, reach: float) -> list[RawMesh]:
    if p.divider == "none":
        return []
    half = p.wall_thickness / 2
    length = reach + half
    z0 = 0.5 * p.floor_thickness
    z1 = p.floor_thickness + p.divider_height * (p.height - p.floor_thickness)
    if p.divider == "radial":
        solids = []
        for k in range(3):
            matrix = trimesh.transformations.rotation_matrix(k * 2 * np.pi / 3, [0, 0, 1])
            solids.append(primitives.box((-half, -half, z0), (length, half, z1)).transformed(matrix))
        return solids
    solids = [primitives.box((-length, -half, z0), (length, half, z1))]
    if p.divider == "cross":
        solids.append(primitives.box((-half, -length, z0), (half, length, z1)))
    return solids


def pencil_holder(params: PencilHolderParams) -> RawMesh:
    p = normalize(params)
    n = p.segments
    m = max(p.height_segments, int(np.ceil(p.twist * 2 * np.pi / MAX_ROW_TWIST))) + 1

    outer_xy = resample_closed_polyline(outline(p.shape, p.diameter), n)
    inner_poly = inset(Polygon(outer_xy), p.wall_thickness)
    inner_xy = resample_closed_polyline(np.asarray(inner_poly.exterior.coords)[:-1, :2], n)
    inner_xy = align_start(inner_xy, outer_xy[0])

    total_twist = 2.0 * np.pi * p.twist

    def ring_vertices(profile_xy: np.ndarray, z0: float) -> np.ndarray:
        zs = np.linspace(z0, p.height, m)
        verts = np.empty((m, n, 3), dtype=float)
        for i, z in enumerate(zs):
            verts[i, :, 0:2] = rotate_xy(profile_xy, total_twist * z / p.height)
            verts[i, :, 2] = z
        return verts

    floor = min(p.floor_thickness, 0.45 * p.height)
    b = MeshBuilder()
    outer = b.add_vertices(ring_vertices(outer_xy, 0.0))
    inner = b.add_vertices(ring_vertices(inner_xy, floor))
    b.add_faces(grid(outer), "outer")
    b.add_faces(grid(inner, reverse=True), "inner")
    b.add_faces(fan(b.add_vertex((0.0, 0.0, 0.0)), outer[0], reverse=True), "bottom_cap")
    b.add_faces(fan(b.add_vertex((0.0, 0.0, floor)), inner[0]), "floor")
    b.add_faces(stitch(outer[-1], inner[-1]), "top_rim")

    reach = float(inner_poly.exterior.distance(Point(0.0, 0.0)))
    for solid in divider_solids(p, reach):
        b.add_mesh(solid, "divider")

    mesh = b.build()
    logger.debug("Pencil holder %s/%s: %d triangles", p.shape, p.divider, mesh.triangle_count)
    return mesh
