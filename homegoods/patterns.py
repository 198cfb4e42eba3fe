"""
Scalar displacement patterns.

Every function is vectorised over numpy arrays and returns an offset in the
same linear unit as ``depth``. Angular patterns use whole lobe counts so
they wrap seamlessly at 2π.
"""

import numpy as np


def lobes(scale: float, per_unit: float) -> int:
    """Whole number of repeats around a closed loop for a given pattern scale."""
    return max(1, int(round(scale * per_unit)))


# --- surfaces of revolution: f(theta, v) ---------------------------------


def _geometric(theta, v, n, scale, depth):
    return np.abs(np.sin(n * theta + v * scale * 8)) * depth


def _stars(theta, v, n, scale, depth):
    return (np.sin(2 * n * theta) * np.cos(v * scale * 8)) ** 2 * depth


def _leaves(theta, v, n, scale, depth):
    return np.sin(n * theta + v * scale * 6) * depth


def _abstract(theta, v, n, scale, depth):
    return np.sin(3 * n * theta) * np.sin(v * scale * 4) * depth


# pattern -> (function, highest angular harmonic as a multiple of the lobe count)
RADIAL = {
    "geometric": (_geometric, 1),
    "stars": (_stars, 2),
    "leaves": (_leaves, 1),
    "abstract": (_abstract, 3),
}


def radial_lobes(kind: str, scale: float, segments: int | None = None) -> int:
    """
    Lobe count of a radial pattern.

    With ``segments`` given, the count is capped so the pattern's highest
    harmonic stays at or below a quarter of the ring's sample count; above
    that the samples alias and the pattern can flatten to a constant.
    """
    n = lobes(scale, 8)
    if segments is None or kind not in RADIAL:
        return n
    harmonic = RADIAL[kind][1]
    return max(1, min(n, segments // (4 * harmonic)))


def radial_offset(
    kind: str, theta: np.ndarray, v: np.ndarray, scale: float, depth: float, segments: int | None = None
) -> np.ndarray:
    """
    Radial offset for a body of revolution at angle ``theta`` and height
    fraction ``v``. Pass ``segments`` when ``theta`` is a ring of that many
    evenly spaced samples.
    """
    theta, v = np.broadcast_arrays(np.asarray(theta, dtype=float), np.asarray(v, dtype=float))
    entry = RADIAL.get(kind)
    if entry is None or depth == 0:
        return np.zeros(theta.shape)
    fn, _ = entry
    return fn(theta, v, radial_lobes(kind, scale, segments), scale, depth)


# --- coaster tops: f(x, y) on a disc ---------------------------------------


def _hexagonal(x, y, r, a, s, d):
    return np.sin(x * s + np.sin(y * s)) * np.sin(y * s + np.sin(x * s)) * d


def _spiral(x, y, r, a, s, d):
    freq = 5 + np.sin(r * 0.5) * 2
    return (np.sin(a * freq + r * s * 2) * 0.5 + np.sin(a * -freq * 1.5 + r * s * 1.5) * 0.5) * d


def _concentric(x, y, r, a, s, d):
    ring = s * 4
    return (np.sin(r * ring) * 0.7 + np.sin(r * ring * 0.5 + a * 3) * 0.3) * d


def _floral(x, y, r, a, s, d):
    return np.sin(a * 8 + r * s) * np.cos(r * s * 2) * d


def _ripple(x, y, r, a, s, d):
    return (np.sin(r * s) + np.sin(a * 6)) * d * 0.5


def _maze(x, y, r, a, s, d):
    grid = s * 2
    gx = np.floor(x * grid)
    gy = np.floor(y * grid)
    return (np.sin(gx) * np.cos(gy) + np.cos(gx * 0.5) * np.sin(gy * 0.5)) * d


COASTER = {
    "hexagonal": _hexagonal,
    "spiral": _spiral,
    "concentric": _concentric,
    "floral": _floral,
    "ripple": _ripple,
    "maze": _maze,
}


def coaster_height(kind: str, x: np.ndarray, y: np.ndarray, scale: float, depth: float) -> np.ndarray:
    """
    Height offset of a coaster top at planar coordinates (x, y).

    Includes a low-amplitude surface noise shared by every pattern.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    fn = COASTER.get(kind)
    if fn is None or depth == 0:
        return np.zeros(np.broadcast(x, y).shape)
    r = np.hypot(x, y)
    a = np.arctan2(y, x)
    noise = (np.sin(x * 20 + y * 20) * 0.1 + np.sin(x * 15 - y * 15) * 0.1) * depth
    return fn(x, y, r, a, scale, depth) + noise


# --- wall panels: f(x, y) on a rectangle -------------------------------------


def wall_art_height(
    kind: str, x: np.ndarray, y: np.ndarray, width: float, height: float, scale: float, depth: float
) -> np.ndarray:
    """Out-of-plane offset of a wall panel centred on the origin."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if kind == "mandala":
        r = np.hypot(x, y) / (max(width, height) / 2)
        theta = np.arctan2(y, x)
        return np.sin(r * scale * 10 + theta * 8) * depth * (1 - r)
    if kind == "wave":
        return np.sin((x + y) * scale) * depth
    if kind == "honeycomb":
        hex_ = np.sin(x * scale) * np.sin(y * scale)
        return np.where(np.abs(hex_) > 0.5, hex_, 0.0) * depth
    if kind == "circuit":
        return np.round(np.sin(x * scale) + np.cos(y * scale)) * depth
    if kind == "organic":
        return (np.sin(x * scale) * np.sin(y * scale) + np.sin((x + y) * scale * 0.5)) * depth
    if kind == "waves":
        return surface_pattern("waves", x, y, scale) * depth
    return np.zeros(np.broadcast(x, y).shape)


def surface_pattern(kind: str, x: np.ndarray, y: np.ndarray, scale: float) -> np.ndarray:
    """Unit-amplitude general purpose 2D patterns ("waves", "geometric", "organic")."""
    if kind == "waves":
        return np.sin(x * scale + y * scale) * 0.5
    if kind == "geometric":
        return (np.abs(np.sin(x * scale)) + np.abs(np.cos(y * scale))) * 0.5
    if kind == "organic":
        return np.sin(x * scale + np.cos(y * scale)) * 0.5
    return np.zeros(np.broadcast(x, y).shape)


# --- bands (bracelets, rings): f(theta, t) with t across the band -------------


def band_offset(kind: str, theta: np.ndarray, t: np.ndarray, scale: float, depth: float) -> np.ndarray:
    """
    Non-negative outward offset of a band's outer surface.

    ``theta`` is the sweep angle, ``t`` in [0, 1] the position across the
    band width.
    """
    theta, t = np.broadcast_arrays(np.asarray(theta, dtype=float), np.asarray(t, dtype=float))
    n = lobes(scale, 6)
    if depth == 0:
        return np.zeros(theta.shape)
    if kind == "wave":
        return depth * (0.5 + 0.5 * np.sin(n * theta))
    if kind == "knurl":
        return depth * 0.5 * (1 + np.sin(n * theta) * np.cos(2 * np.pi * t * scale))
    if kind == "braid":
        return depth * 0.5 * (1 + np.sin(n * theta + 2 * np.pi * t))
    if kind == "scallop":
        return depth * np.abs(np.sin(n * theta / 2))
    return np.zeros(theta.shape)
