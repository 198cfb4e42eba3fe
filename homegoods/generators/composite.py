"""
Products assembled from several closed sub-solids.

Each builder lays out boxes, prisms, cylinders and tori and concatenates
them; the sub-solids may overlap or touch (a slicer unions them), but every
one of them is watertight on its own.
"""

import logging

import numpy as np
from shapely import affinity
from shapely.geometry import Point, Polygon
from shapely.geometry import box as rectangle

from ..mesh import RawMesh
from ..params import (
    CharmAttachmentParams,
    CylinderBaseParams,
    JewelryHolderParams,
    MonitorStandParams,
    NapkinHolderParams,
    PhoneHolderParams,
    normalize,
)
from . import primitives

logger = logging.getLogger(__name__)

# Gap between the phone holder's lip and its back support (cm).
PHONE_CHANNEL = 1.2


def assemble(parts: list[tuple[str, RawMesh]]) -> RawMesh:
    names = [name for name, _ in parts]
    return RawMesh.merge(*(part for _, part in parts), names=names)


def phone_holder(params: PhoneHolderParams) -> RawMesh:
    p = normalize(params)
    w, d, t = p.width, p.depth, p.thickness
    half = w / 2
    parts = []

    if p.base_style == "curved":
        # rounded front: half ellipse merged with the rear rectangle
        front = affinity.scale(Point(0.0, 0.3 * d).buffer(1.0, 32), half, 0.3 * d)
        outline = front.union(rectangle(-half, 0.3 * d, half, d))
        parts.append(("base", primitives.convex_prism(outline, 0.0, t)))
    else:
        parts.append(("base", primitives.box((-half, 0.0, 0.0), (half, d, t))))

    # side profile (y, z) of the leaning support, extruded across the width
    alpha = np.radians(p.angle)
    lip_y = 0.05 * d
    support_y = lip_y + t + PHONE_CHANNEL
    run = t / np.sin(alpha)
    rise = p.height - t
    lean = rise / np.tan(alpha)
    support = Polygon(
        [
            (support_y, t),
            (support_y + run, t),
            (support_y + run + lean, p.height),
            (support_y + lean, p.height),
        ]
    )
    parts.append(("support", primitives.convex_prism(support, -half, half).transformed(primitives.YZ_PLANE)))

    # triangular brace behind the support, under its back face
    brace_start = support_y + run
    brace_end = min(brace_start + lean, d)
    if brace_end - brace_start > t:
        brace_top = t + (brace_end - brace_start) * np.tan(alpha)
        brace = Polygon([(brace_start, t), (brace_end, t), (brace_end, brace_top)])
        parts.append(("brace", primitives.convex_prism(brace, -t, t).transformed(primitives.YZ_PLANE)))

    lip_top = t + p.lip_height
    slot = p.slot_width / 2
    if p.cable_slot and slot < half - t:
        parts.append(("lip", primitives.box((-half, lip_y, t), (-slot, lip_y + t, lip_top))))
        parts.append(("lip", primitives.box((slot, lip_y, t), (half, lip_y + t, lip_top))))
    else:
        parts.append(("lip", primitives.box((-half, lip_y, t), (half, lip_y + t, lip_top))))

    mesh = assemble(parts)
    logger.debug("Phone holder (%s base): %d parts", p.base_style, len(parts))
    return mesh


def napkin_wall_top(p: NapkinHolderParams, xs: np.ndarray) -> np.ndarray:
    u = (xs + p.length / 2) / p.length
    if p.wall_style == "wave":
        amplitude = 0.2 * p.height
        return p.height - amplitude * 0.5 * (1 - np.cos(2 * np.pi * p.wave_count * u))
    if p.wall_style == "arch":
        bulge = np.sqrt(np.clip(1 - (2 * u - 1) ** 2, 0.0, 1.0))
        return p.thickness + (p.height - p.thickness) * (0.55 + 0.45 * bulge)
    return np.full_like(xs, p.height)


def napkin_holder(params: NapkinHolderParams) -> RawMesh:
    p = normalize(params)
    half_len = p.length / 2
    half_gap = p.width / 2
    t = p.thickness
    parts = [("base", primitives.box((-half_len, -half_gap - t, 0.0), (half_len, half_gap + t, t)))]

    xs = np.linspace(-half_len, half_len, p.segments + 1)
    wall = primitives.column_prism(xs, t, napkin_wall_top(p, xs), t).transformed(primitives.XZ_PLANE)
    # the rotated wall spans y in [-t, 0]
    parts.append(("wall", wall.translated((0.0, half_gap + t, 0.0))))
    parts.append(("wall", wall.translated((0.0, -half_gap, 0.0))))

    mesh = assemble(parts)
    logger.debug("Napkin holder (%s walls): %d triangles", p.wall_style, mesh.triangle_count)
    return mesh


def monitor_stand(params: MonitorStandParams) -> RawMesh:
    p = normalize(params)
    hw, hd = p.width / 2, p.depth / 2
    leg_top = p.height - p.thickness
    lw = min(p.leg_width, 0.25 * p.width)
    parts = [("top", primitives.box((-hw, -hd, leg_top), (hw, hd, p.height)))]

    if p.leg_style == "cylinder":
        r = lw / 2
        for sx in (-1, 1):
            for sy in (-1, 1):
                center = (sx * (hw - lw), sy * (hd - lw))
                parts.append(("leg", primitives.frustum(r, r, 0.0, leg_top, p.segments, center)))
    elif p.leg_style == "tapered":
        trapezoid = Polygon([(-hd, 0.0), (hd, 0.0), (0.7 * hd, leg_top), (-0.7 * hd, leg_top)])
        for x0 in (-hw, hw - lw):
            leg = primitives.convex_prism(trapezoid, x0, x0 + lw).transformed(primitives.YZ_PLANE)
            parts.append(("leg", leg))
    else:
        for x0 in (-hw, hw - lw):
            parts.append(("leg", primitives.box((x0, -hd, 0.0), (x0 + lw, hd, leg_top))))

    mesh = assemble(parts)
    logger.debug("Monitor stand (%s legs): %d parts", p.leg_style, len(parts))
    return mesh


def arrangement_points(
    arrangement: str, count: int, rng: np.random.Generator
) -> tuple[np.ndarray, np.ndarray]:
    """
    Azimuths and normalised positions in [0, 1] for ``count`` repeated parts.

    ``circular`` spreads them evenly around, ``linear`` alternates two
    opposite sides along a line, ``scattered`` draws them from ``rng``.
    """
    k = np.arange(count)
    if arrangement == "linear":
        return np.where(k % 2 == 0, 0.0, np.pi), (k + 0.5) / max(count, 1)
    if arrangement == "scattered":
        return rng.uniform(0.0, 2 * np.pi, count), rng.uniform(0.0, 1.0, count)
    return k * 2 * np.pi / max(count, 1), np.where(k % 2 == 0, 0.35, 0.75)


def jewelry_holder(params: JewelryHolderParams) -> RawMesh:
    p = normalize(params)
    rng = np.random.default_rng(p.seed)
    radius = p.base_diameter / 2
    top = p.base_height
    parts = []

    if p.base_style == "square":
        s = 0.9 * radius
        parts.append(("base", primitives.box((-s, -s, 0.0), (s, s, top))))
    elif p.base_style == "tiered":
        parts.append(("base", primitives.frustum(radius, radius, 0.0, top / 2, p.segments)))
        parts.append(("base", primitives.frustum(0.7 * radius, 0.7 * radius, top / 2, top, p.segments)))
    else:
        parts.append(("base", primitives.frustum(radius, radius, 0.0, top, p.segments)))

    post_r = p.post_diameter / 2
    post_top = top + p.post_height
    parts.append(("post", primitives.frustum(post_r, post_r, 0.5 * top, post_top, p.segments)))

    # branches leave the post axis and climb at branch_angle
    azimuth, along = arrangement_points(p.arrangement, p.branch_count, rng)
    elevation = np.radians(p.branch_angle)
    branch_r = max(0.35 * post_r, 0.05)
    for phi, u in zip(azimuth, along):
        z = top + p.post_height * (0.3 + 0.65 * u)
        start = np.array([0.0, 0.0, min(z, post_top - branch_r)])
        direction = np.array([np.cos(elevation) * np.cos(phi), np.cos(elevation) * np.sin(phi), np.sin(elevation)])
        parts.append(("branch", primitives.cylinder_between(start, start + p.branch_length * direction, branch_r, max(8, p.segments // 2))))

    # ring pegs on the base, kept clear of the post and inside the base
    peg_r = p.peg_diameter / 2
    inner = post_r + 2 * peg_r
    outer = max(0.75 * radius, inner + peg_r)
    if p.arrangement == "linear":
        xs = np.linspace(-0.6 * radius, 0.6 * radius, p.peg_count)
        centers = np.column_stack([xs, np.full(p.peg_count, -0.5 * radius)])
    elif p.arrangement == "scattered":
        r = inner + (outer - inner) * np.sqrt(rng.uniform(0.0, 1.0, p.peg_count))
        a = rng.uniform(0.0, 2 * np.pi, p.peg_count)
        centers = np.column_stack([np.cos(a) * r, np.sin(a) * r])
    else:
        a = (np.arange(p.peg_count) + 0.5) * 2 * np.pi / max(p.peg_count, 1)
        centers = np.column_stack([np.cos(a), np.sin(a)]) * 0.7 * radius
    for center in centers:
        parts.append(("peg", primitives.frustum(peg_r, peg_r, 0.25 * top, top + p.peg_height, max(8, p.segments // 2), tuple(center))))

    mesh = assemble(parts)
    logger.debug(
        "Jewelry holder (%s, %s): %d branches, %d pegs", p.base_style, p.arrangement, p.branch_count, p.peg_count
    )
    return mesh


def cylinder_base(params: CylinderBaseParams) -> RawMesh:
    p = normalize(params)
    radius = p.diameter / 2
    tier_height = p.height / p.tiers
    parts = []
    for i in range(p.tiers):
        r = radius * max(1.0 - p.taper * i, 0.2)
        r_top = r
        if p.chamfer and i == p.tiers - 1:
            r_top = r - min(0.3 * tier_height, 0.1 * r)
        z0 = i * tier_height
        parts.append(("tier", primitives.frustum(r, r_top, z0, z0 + tier_height, p.segments)))
    return assemble(parts)


def charm_attachment(params: CharmAttachmentParams) -> RawMesh:
    p = normalize(params)
    minor = p.wire_thickness / 2
    major = p.loop_diameter / 2 + minor
    tube = max(8, p.segments // 4)
    parts = []

    if p.pendant:
        pr = p.pendant_diameter / 2
        ht = p.pendant_thickness / 2
        disc = primitives.cylinder_between((0.0, -ht, pr), (0.0, ht, pr), pr, p.segments)
        parts.append(("pendant", disc))
        # the loop dips one wire thickness into the pendant
        loop_z = 2 * pr + major - minor
    else:
        loop_z = major + minor

    loop = primitives.torus(major, minor, p.segments, tube).transformed(primitives.XZ_PLANE)
    parts.append(("loop", loop.translated((0.0, 0.0, loop_z))))
    return assemble(parts)
