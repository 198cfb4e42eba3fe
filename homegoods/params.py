"""
Shape parameters: one frozen dataclass per product family.

Values are constructed in designer units (inches) and converted once by
:func:`normalize` into centimetres, with every numeric field clamped to the
range the designer controls expose and every enumerated field checked
against its closed set. Generators only ever see normalized values.
"""

import dataclasses
import logging
import re
from dataclasses import dataclass, field
from typing import Any, ClassVar

from .units import choice, clamp, clamp_int, to_cm

logger = logging.getLogger(__name__)

MATERIALS = ("shiny", "matte", "wireframe")
DEFAULT_MATERIAL = "matte"

# Pattern families, grouped by the surface they decorate. "none" disables.
RADIAL_PATTERNS = ("none", "geometric", "stars", "leaves", "abstract")
COASTER_PATTERNS = ("hexagonal", "spiral", "concentric", "floral", "ripple", "maze", "none")
WALL_ART_PATTERNS = ("mandala", "wave", "honeycomb", "circuit", "organic", "waves", "none")
BAND_PATTERNS = ("none", "wave", "knurl", "braid", "scallop")

PATTERN_SCALE_LIMITS = (0.1, 10.0)
PATTERN_DEPTH_LIMITS = (0.0, 0.5)
SCALE_FACTOR_LIMITS = (0.1, 10.0)


@dataclass(frozen=True)
class PatternDescriptor:
    kind: str = "none"
    scale: float = 2.0
    depth: float = 0.04


@dataclass(frozen=True)
class ShapeParams:
    """
    Fields shared by every variant.

    Subclasses describe themselves with class-level tables:
    ``LINEAR`` names fields converted from inches, ``LIMITS`` and ``INTS``
    give clamping ranges (in designer units), ``CHOICES`` maps enumerated
    fields to ``(allowed, default)`` and ``PATTERNS`` lists the pattern kinds
    accepted by ``pattern`` (first entry is the fallback).
    """

    kind: ClassVar[str] = ""
    LINEAR: ClassVar[tuple[str, ...]] = ()
    LIMITS: ClassVar[dict[str, tuple[float, float]]] = {}
    INTS: ClassVar[dict[str, tuple[int, int]]] = {}
    CHOICES: ClassVar[dict[str, tuple[tuple[str, ...], str]]] = {}
    PATTERNS: ClassVar[tuple[str, ...]] = ()

    scale: tuple[float, float, float] = (1.0, 1.0, 1.0)
    material: str = "shiny"
    unit: str = "in"


@dataclass(frozen=True)
class RadialProfileParams(ShapeParams):
    """Lampshade, vase, cup and bowl bodies."""

    kind: ClassVar[str] = "radialProfile"
    LINEAR = ("height", "top_radius", "bottom_radius", "wave_amplitude", "wall_thickness", "floor_thickness")
    LIMITS = {
        "height": (0.5, 30.0),
        "top_radius": (0.4, 8.0),
        "bottom_radius": (0.4, 8.0),
        "wave_amplitude": (0.0, 2.0),
        "wave_frequency": (0.0, 16.0),
        "twist": (0.0, 3.0),
        "wall_thickness": (0.04, 0.5),
        "floor_thickness": (0.04, 1.0),
    }
    INTS = {"segments": (8, 512), "height_segments": (1, 512)}
    CHOICES = {"profile": (("straight", "bowl"), "straight")}
    PATTERNS = RADIAL_PATTERNS

    profile: str = "straight"
    height: float = 10.0
    top_radius: float = 4.0
    bottom_radius: float = 3.0
    wave_amplitude: float = 0.4
    wave_frequency: float = 4.0
    twist: float = 0.0
    has_bottom: bool = True
    has_top: bool = False
    wall_thickness: float = 0.08
    floor_thickness: float = 0.12
    pattern: PatternDescriptor | None = None
    segments: int = 64
    height_segments: int = 32


@dataclass(frozen=True)
class CoasterParams(ShapeParams):
    kind: ClassVar[str] = "coaster"
    LINEAR = ("diameter", "thickness", "rim_height")
    LIMITS = {"diameter": (2.0, 12.0), "thickness": (0.1, 1.0), "rim_height": (0.0, 2.0)}
    INTS = {"segments": (16, 512), "rings": (4, 256)}
    PATTERNS = COASTER_PATTERNS

    diameter: float = 4.0
    thickness: float = 0.25
    rim_height: float = 0.15
    has_bottom: bool = True
    pattern: PatternDescriptor = PatternDescriptor("hexagonal", 2.0, 0.02)
    segments: int = 128
    rings: int = 64


@dataclass(frozen=True)
class WallArtParams(ShapeParams):
    kind: ClassVar[str] = "wallArt"
    LINEAR = ("width", "height", "depth")
    LIMITS = {"width": (6.0, 20.0), "height": (6.0, 20.0), "depth": (0.2, 2.0)}
    INTS = {"segments": (8, 256)}
    PATTERNS = WALL_ART_PATTERNS

    width: float = 12.0
    height: float = 12.0
    depth: float = 0.5
    pattern: PatternDescriptor = PatternDescriptor("mandala", 2.0, 0.1)
    segments: int = 64


@dataclass(frozen=True)
class BraceletParams(ShapeParams):
    kind: ClassVar[str] = "bracelet"
    LINEAR = ("inner_diameter", "width", "thickness")
    LIMITS = {
        "inner_diameter": (1.5, 4.0),
        "width": (0.2, 2.0),
        "thickness": (0.06, 0.5),
        "gap_size": (0.0, 300.0),
    }
    INTS = {"segments": (12, 720), "profile_segments": (2, 32)}
    CHOICES = {"profile": (("flat", "rounded"), "flat")}
    PATTERNS = BAND_PATTERNS

    inner_diameter: float = 2.5
    width: float = 0.6
    thickness: float = 0.15
    gap_size: float = 40.0
    profile: str = "flat"
    pattern: PatternDescriptor | None = None
    segments: int = 128
    profile_segments: int = 8


@dataclass(frozen=True)
class RingParams(ShapeParams):
    """Finger ring; ``inner_diameter`` overrides ``ring_size`` when given."""

    kind: ClassVar[str] = "ring"
    LINEAR = ("inner_diameter", "width", "thickness")
    LIMITS = {
        "ring_size": (0.0, 16.0),
        "inner_diameter": (0.4, 1.3),
        "width": (0.06, 0.6),
        "thickness": (0.04, 0.2),
        "gap_size": (0.0, 120.0),
    }
    INTS = {"segments": (12, 720), "profile_segments": (2, 32)}
    CHOICES = {"profile": (("flat", "rounded"), "rounded")}
    PATTERNS = BAND_PATTERNS

    ring_size: float = 7.0
    inner_diameter: float | None = None
    width: float = 0.25
    thickness: float = 0.08
    gap_size: float = 0.0
    profile: str = "rounded"
    pattern: PatternDescriptor | None = None
    segments: int = 96
    profile_segments: int = 8


@dataclass(frozen=True)
class PencilHolderParams(ShapeParams):
    kind: ClassVar[str] = "pencilHolder"
    LINEAR = ("diameter", "height", "wall_thickness", "floor_thickness")
    LIMITS = {
        "diameter": (2.0, 6.0),
        "height": (2.0, 8.0),
        "wall_thickness": (0.06, 0.4),
        "floor_thickness": (0.06, 0.5),
        "twist": (0.0, 1.0),
        "divider_height": (0.1, 1.0),
    }
    INTS = {"segments": (16, 512), "height_segments": (1, 256)}
    CHOICES = {
        "shape": (("round", "hexagon", "square", "star"), "round"),
        "divider": (("none", "single", "cross", "radial"), "none"),
    }

    shape: str = "round"
    diameter: float = 3.0
    height: float = 4.0
    wall_thickness: float = 0.12
    floor_thickness: float = 0.15
    twist: float = 0.0
    divider: str = "none"
    divider_height: float = 0.6
    segments: int = 96
    height_segments: int = 24


@dataclass(frozen=True)
class PhoneHolderParams(ShapeParams):
    kind: ClassVar[str] = "phoneHolder"
    LINEAR = ("width", "depth", "height", "thickness", "lip_height", "slot_width")
    LIMITS = {
        "width": (2.0, 6.0),
        "depth": (2.0, 6.0),
        "height": (2.0, 8.0),
        "angle": (45.0, 85.0),
        "thickness": (0.1, 0.5),
        "lip_height": (0.1, 1.0),
        "slot_width": (0.2, 1.5),
    }
    CHOICES = {"base_style": (("flat", "curved"), "flat")}

    width: float = 3.0
    depth: float = 3.0
    height: float = 4.0
    angle: float = 65.0
    thickness: float = 0.2
    lip_height: float = 0.4
    base_style: str = "flat"
    cable_slot: bool = True
    slot_width: float = 0.6


@dataclass(frozen=True)
class CylinderBaseParams(ShapeParams):
    kind: ClassVar[str] = "cylinderBase"
    LINEAR = ("diameter", "height")
    LIMITS = {"diameter": (1.0, 12.0), "height": (0.2, 6.0), "taper": (0.0, 0.5)}
    INTS = {"tiers": (1, 5), "segments": (8, 512)}

    diameter: float = 4.0
    height: float = 1.0
    tiers: int = 1
    taper: float = 0.15
    chamfer: bool = False
    segments: int = 96


@dataclass(frozen=True)
class MonitorStandParams(ShapeParams):
    kind: ClassVar[str] = "monitorStand"
    LINEAR = ("width", "depth", "height", "thickness", "leg_width")
    LIMITS = {
        "width": (10.0, 24.0),
        "depth": (6.0, 12.0),
        "height": (2.0, 6.0),
        "thickness": (0.3, 1.2),
        "leg_width": (0.5, 4.0),
    }
    INTS = {"segments": (8, 128)}
    CHOICES = {"leg_style": (("block", "tapered", "cylinder"), "block")}

    width: float = 16.0
    depth: float = 8.0
    height: float = 4.0
    thickness: float = 0.6
    leg_style: str = "block"
    leg_width: float = 1.5
    segments: int = 32


@dataclass(frozen=True)
class JewelryHolderParams(ShapeParams):
    kind: ClassVar[str] = "jewelryHolder"
    LINEAR = (
        "base_diameter",
        "base_height",
        "post_height",
        "post_diameter",
        "branch_length",
        "peg_height",
        "peg_diameter",
    )
    LIMITS = {
        "base_diameter": (3.0, 10.0),
        "base_height": (0.2, 1.0),
        "post_height": (2.0, 12.0),
        "post_diameter": (0.2, 1.5),
        "branch_length": (0.5, 4.0),
        "branch_angle": (0.0, 60.0),
        "peg_height": (0.2, 2.0),
        "peg_diameter": (0.1, 0.5),
    }
    INTS = {"branch_count": (0, 12), "peg_count": (0, 24), "seed": (0, 2**31 - 1), "segments": (8, 128)}
    CHOICES = {
        "base_style": (("round", "square", "tiered"), "round"),
        "arrangement": (("circular", "linear", "scattered"), "circular"),
    }

    base_diameter: float = 5.0
    base_height: float = 0.4
    base_style: str = "round"
    post_height: float = 6.0
    post_diameter: float = 0.5
    branch_count: int = 4
    branch_length: float = 1.5
    branch_angle: float = 20.0
    arrangement: str = "circular"
    peg_count: int = 6
    peg_height: float = 0.8
    peg_diameter: float = 0.2
    seed: int = 0
    segments: int = 32


@dataclass(frozen=True)
class NapkinHolderParams(ShapeParams):
    kind: ClassVar[str] = "napkinHolder"
    LINEAR = ("length", "width", "height", "thickness")
    LIMITS = {"length": (3.0, 10.0), "width": (1.0, 5.0), "height": (2.0, 8.0), "thickness": (0.1, 0.5)}
    INTS = {"wave_count": (1, 10), "segments": (4, 256)}
    CHOICES = {"wall_style": (("solid", "wave", "arch"), "solid")}

    length: float = 6.0
    width: float = 2.5
    height: float = 4.0
    thickness: float = 0.2
    wall_style: str = "solid"
    wave_count: int = 3
    segments: int = 48


@dataclass(frozen=True)
class CharmAttachmentParams(ShapeParams):
    kind: ClassVar[str] = "charmAttachment"
    LINEAR = ("loop_diameter", "wire_thickness", "pendant_diameter", "pendant_thickness")
    LIMITS = {
        "loop_diameter": (0.15, 1.0),
        "wire_thickness": (0.03, 0.2),
        "pendant_diameter": (0.2, 2.0),
        "pendant_thickness": (0.04, 0.3),
    }
    INTS = {"segments": (8, 256)}

    loop_diameter: float = 0.3
    wire_thickness: float = 0.06
    pendant: bool = True
    pendant_diameter: float = 0.6
    pendant_thickness: float = 0.08
    segments: int = 48


@dataclass(frozen=True)
class UploadedMeshParams(ShapeParams):
    """An externally supplied STL, rescaled so its largest extent is ``target_size``."""

    kind: ClassVar[str] = "uploadedMesh"
    LINEAR = ("target_size",)
    LIMITS = {"target_size": (0.5, 12.0)}
    CHOICES = {"file_type": (("stl",), "stl")}

    data: bytes = field(default=b"", repr=False)
    target_size: float = 4.0
    file_type: str = "stl"


VARIANTS: dict[str, type[ShapeParams]] = {
    cls.kind: cls
    for cls in (
        RadialProfileParams,
        CoasterParams,
        WallArtParams,
        BraceletParams,
        RingParams,
        PencilHolderParams,
        PhoneHolderParams,
        CylinderBaseParams,
        MonitorStandParams,
        JewelryHolderParams,
        NapkinHolderParams,
        CharmAttachmentParams,
        UploadedMeshParams,
    )
}

# Product-facing type names that map onto a shared variant.
TYPE_ALIASES = {
    "standard": "radialProfile",
    "lampshade": "radialProfile",
    "vase": "radialProfile",
    "candleHolder": "radialProfile",
    "cup": "radialProfile",
    "bowl": "radialProfile",
}


def _normalize_pattern(pattern: PatternDescriptor | None, allowed: tuple[str, ...]) -> PatternDescriptor | None:
    if pattern is None:
        return None
    kind = choice(pattern.kind, allowed, allowed[0], "pattern")
    return PatternDescriptor(
        kind=kind,
        scale=clamp(pattern.scale, *PATTERN_SCALE_LIMITS, "pattern.scale"),
        depth=to_cm(clamp(pattern.depth, *PATTERN_DEPTH_LIMITS, "pattern.depth")),
    )


def normalize(params: ShapeParams) -> ShapeParams:
    """
    Return a copy of ``params`` in centimetres with every field in range.

    Total for any numeric input; unknown enumerated values fall back to the
    variant's default. Already-normalized values are returned unchanged.
    """
    if params.unit == "cm":
        return params

    changes: dict[str, Any] = {}
    for name, (lo, hi) in params.LIMITS.items():
        value = getattr(params, name)
        if value is not None:
            changes[name] = clamp(value, lo, hi, name)
    for name, (lo, hi) in params.INTS.items():
        changes[name] = clamp_int(getattr(params, name), lo, hi, name)
    for name, (allowed, default) in params.CHOICES.items():
        changes[name] = choice(getattr(params, name), allowed, default, name)
    for name in params.LINEAR:
        value = changes.get(name, getattr(params, name))
        if value is not None:
            changes[name] = to_cm(value)

    if params.PATTERNS:
        changes["pattern"] = _normalize_pattern(getattr(params, "pattern"), params.PATTERNS)

    factors = tuple(params.scale)[:3]
    factors = factors + (1.0,) * (3 - len(factors))
    changes["scale"] = tuple(clamp(f, *SCALE_FACTOR_LIMITS, "scale") for f in factors)
    changes["material"] = choice(params.material, MATERIALS, DEFAULT_MATERIAL, "material")
    changes["unit"] = "cm"
    return dataclasses.replace(params, **changes)


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def params_from_dict(data: dict[str, Any]) -> ShapeParams:
    """
    Build a variant from a ``{"type": ..., ...}`` mapping.

    Keys may be camelCase (as the catalog and the configurator use) or
    snake_case. Flat ``patternType``/``patternScale``/``patternDepth`` keys
    are folded into a :class:`PatternDescriptor`; ``diameter`` on a radial
    profile sets both radii. Unknown keys are ignored.
    """
    data = dict(data)
    type_name = data.pop("type", None)
    kind = TYPE_ALIASES.get(type_name, type_name)
    if kind not in VARIANTS:
        raise ValueError(f"Unknown shape type '{type_name}'")
    cls = VARIANTS[kind]
    names = {f.name for f in dataclasses.fields(cls)}

    values = {_snake(k): v for k, v in data.items()}
    pattern_keys = {k: values.pop(k) for k in ("pattern_type", "pattern_scale", "pattern_depth") if k in values}
    if isinstance(values.get("pattern"), dict):
        values["pattern"] = PatternDescriptor(**values["pattern"])
    elif pattern_keys and "pattern" in names:
        base = getattr(cls, "pattern", None) or PatternDescriptor()
        values["pattern"] = PatternDescriptor(
            kind=pattern_keys.get("pattern_type", base.kind),
            scale=pattern_keys.get("pattern_scale", base.scale),
            depth=pattern_keys.get("pattern_depth", base.depth),
        )

    if cls is RadialProfileParams:
        if type_name == "bowl":
            values.setdefault("profile", "bowl")
        diameter = values.pop("diameter", None)
        if diameter is not None:
            values.setdefault("bottom_radius", diameter / 2.0)
            flare = 1.2 if values.get("profile") == "bowl" else 1.0
            values.setdefault("top_radius", diameter / 2.0 * flare)

    if "scale" in values:
        values["scale"] = tuple(values["scale"])
    ignored = sorted(set(values) - names)
    if ignored:
        logger.debug("Ignoring unknown %s fields: %s", kind, ", ".join(ignored))
    return cls(**{k: v for k, v in values.items() if k in names})
