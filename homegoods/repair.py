"""
Mesh repair and validation.

Repair only removes triangles; it never moves vertices or re-triangulates.
Triangles are dropped in this order: indices outside the vertex array,
repeated indices, then near-zero area. Normals are recomputed afterwards and
the remaining edge incidence is reported.
"""

import logging
from dataclasses import dataclass, field

import numpy as np
import trimesh

from .mesh import RawMesh, edge_counts, face_cross

logger = logging.getLogger(__name__)

# Triangles with less area than this (cm^2) are considered degenerate.
AREA_EPSILON = 1e-10


@dataclass(frozen=True, eq=False)
class RepairReport:
    """
    Outcome of :func:`repair_mesh`.

    ``non_manifold_edges`` holds every undirected edge, as a sorted vertex
    pair, not shared by exactly two triangles. ``boundary_edges`` counts the
    subset used by a single triangle.
    """

    removed_invalid: int = 0
    removed_degenerate: int = 0
    removed_zero_area: int = 0
    non_manifold_edges: np.ndarray = field(default_factory=lambda: np.empty((0, 2), dtype=np.int64))
    boundary_edges: int = 0
    triangle_count: int = 0

    @property
    def removed(self) -> int:
        return self.removed_invalid + self.removed_degenerate + self.removed_zero_area

    @property
    def is_manifold(self) -> bool:
        """Every edge is shared by exactly two triangles."""
        return len(self.non_manifold_edges) == 0 and self.triangle_count > 0

    def summary(self) -> str:
        return (
            f"{self.triangle_count} triangles, removed {self.removed} "
            f"(invalid {self.removed_invalid}, degenerate {self.removed_degenerate}, "
            f"zero-area {self.removed_zero_area}), "
            f"{len(self.non_manifold_edges)} non-manifold edges ({self.boundary_edges} boundary)"
        )


def _remap_groups(groups: dict[str, tuple[int, int]], keep: np.ndarray) -> dict[str, tuple[int, int]]:
    # position of each original face in the filtered array
    kept_before = np.concatenate([[0], np.cumsum(keep)])
    remapped = {}
    for name, (start, stop) in groups.items():
        a, b = int(kept_before[start]), int(kept_before[stop])
        if b > a:
            remapped[name] = (a, b)
    return remapped


def repair_mesh(mesh: RawMesh | trimesh.Trimesh) -> tuple[RawMesh, RepairReport]:
    """Drop degenerate triangles and report the manifold status of the rest."""
    if isinstance(mesh, trimesh.Trimesh):
        mesh = RawMesh.from_trimesh(mesh)

    indices = mesh.indices
    n = len(mesh.positions)

    valid = ((indices >= 0) & (indices < n)).all(axis=1)
    repeated = valid & (
        (indices[:, 0] == indices[:, 1]) | (indices[:, 1] == indices[:, 2]) | (indices[:, 0] == indices[:, 2])
    )
    candidates = valid & ~repeated
    area = np.zeros(len(indices))
    if candidates.any():
        area[candidates] = 0.5 * np.linalg.norm(face_cross(mesh.positions, indices[candidates]), axis=1)
    zero_area = candidates & (area < AREA_EPSILON)
    keep = candidates & ~zero_area

    # normals are recomputed from the surviving triangles on every pass
    repaired = RawMesh.from_arrays(mesh.positions, indices[keep], _remap_groups(mesh.groups, keep))

    edges, counts = edge_counts(repaired.indices)
    report = RepairReport(
        removed_invalid=int((~valid).sum()),
        removed_degenerate=int(repeated.sum()),
        removed_zero_area=int(zero_area.sum()),
        non_manifold_edges=edges[counts != 2],
        boundary_edges=int((counts == 1).sum()),
        triangle_count=repaired.triangle_count,
    )
    if report.removed:
        logger.debug("Removed %d degenerate triangles", report.removed)
    if len(report.non_manifold_edges):
        logger.warning(
            "Mesh is not watertight: %d non-manifold edges (%d boundary)",
            len(report.non_manifold_edges),
            report.boundary_edges,
        )
    return repaired, report
