"""Unit conversion and the clamping helpers used to normalize parameters."""

import logging
import math

logger = logging.getLogger(__name__)

# Designer-facing dimensions are inches; geometry is built in centimetres.
INCH = 2.54

# Smallest radius any generator will emit, in centimetres.
MIN_RADIUS = 0.05


def to_cm(inches: float) -> float:
    return inches * INCH


def clamp(value: float, lo: float, hi: float, name: str = "value") -> float:
    """
    Clamp a numeric parameter into [lo, hi].

    Non-finite input (NaN, inf) is treated as out of range and pinned to the
    nearest bound, with NaN going to ``lo``.
    """
    value = float(value)
    if math.isnan(value):
        logger.warning("%s is NaN; using %s", name, lo)
        return float(lo)
    if value < lo or value > hi:
        clamped = min(max(value, lo), hi)
        logger.debug("%s=%s outside [%s, %s]; clamped to %s", name, value, lo, hi, clamped)
        return float(clamped)
    return value


def clamp_int(value: float, lo: int, hi: int, name: str = "value") -> int:
    value = clamp(value, lo, hi, name)
    return int(round(value))


def choice(value: str, allowed: tuple[str, ...], default: str, name: str = "value") -> str:
    """Return ``value`` if it is one of ``allowed``, otherwise ``default``."""
    if value in allowed:
        return value
    logger.warning("Unknown %s '%s'; falling back to '%s'", name, value, default)
    return default


def ring_size_to_diameter_cm(size: float) -> float:
    """US ring size to inner diameter (11.63 mm at size 0, 0.8128 mm per size)."""
    return (11.63 + 0.8128 * size) / 10.0
