"""
Parameters in, validated solid out.

``build_model`` normalizes the parameters, runs the variant's generator,
applies the designer's per-axis scale and passes the result through repair.
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any

from .catalog import Catalog, load_catalog
from .generators import generate
from .mesh import RawMesh
from .params import ShapeParams, normalize
from .repair import RepairReport, repair_mesh

logger = logging.getLogger(__name__)

RESOLUTION_FIELDS = ("segments", "height_segments", "rings", "profile_segments")


@dataclass(frozen=True)
class ModelResult:
    mesh: RawMesh
    report: RepairReport
    params: ShapeParams

    @property
    def is_manifold(self) -> bool:
        return self.report.is_manifold


def preview_params(params: ShapeParams) -> ShapeParams:
    """Halve every resolution field, staying inside the variant's integer limits."""
    p = normalize(params)
    changes = {}
    for name in RESOLUTION_FIELDS:
        if hasattr(p, name):
            lo = p.INTS.get(name, (1, None))[0]
            changes[name] = max(getattr(p, name) // 2, lo)
    return dataclasses.replace(p, **changes)


def build_model(params: ShapeParams, preview: bool = False) -> ModelResult:
    p = preview_params(params) if preview else normalize(params)
    mesh = generate(p).scaled(p.scale)
    mesh, report = repair_mesh(mesh)
    logger.info("%s%s: %s", p.kind, " (preview)" if preview else "", report.summary())
    return ModelResult(mesh, report, p)


def build_product(
    product_id: str,
    overrides: dict[str, Any] | None = None,
    catalog: Catalog | None = None,
    preview: bool = False,
) -> ModelResult:
    catalog = catalog or load_catalog()
    return build_model(catalog.default_params(product_id, overrides), preview=preview)
