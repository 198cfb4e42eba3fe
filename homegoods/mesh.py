"""
The engine's mesh value and its conversion to a renderable/exportable
``trimesh.Trimesh``.
"""

from dataclasses import dataclass, field

import numpy as np
import trimesh


def face_cross(positions: np.ndarray, indices: np.ndarray) -> np.ndarray:
    """Unnormalised face normals (b - a) x (c - a); their length is twice the area."""
    tri = positions[indices]
    return np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])


def compute_normals(positions: np.ndarray, indices: np.ndarray) -> np.ndarray:
    """
    Area-weighted vertex normals from topology.

    Vertices not referenced by any face get +Z so every normal stays unit
    length.
    """
    normals = np.zeros((len(positions), 3))
    if len(indices):
        cross = face_cross(positions, indices)
        for k in range(3):
            np.add.at(normals, indices[:, k], cross)
    length = np.linalg.norm(normals, axis=1)
    unset = length <= 1e-300
    normals[unset] = (0.0, 0.0, 1.0)
    length[unset] = 1.0
    return normals / length[:, None]


def edge_counts(indices: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Undirected edges keyed by sorted endpoint pair and the number of
    triangles using each.
    """
    indices = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
    if len(indices) == 0:
        return np.empty((0, 2), dtype=np.int64), np.empty(0, dtype=np.int64)
    edges = np.vstack([indices[:, [0, 1]], indices[:, [1, 2]], indices[:, [2, 0]]])
    edges.sort(axis=1)
    unique, counts = np.unique(edges, axis=0, return_counts=True)
    return unique, counts


@dataclass(frozen=True, eq=False)
class RawMesh:
    """
    Positions, unit normals and triangle indices produced by a generator.

    ``groups`` names contiguous triangle ranges (``[start, stop)``) such as
    ``"outer"`` or ``"bottom_cap"``.
    """

    positions: np.ndarray
    normals: np.ndarray
    indices: np.ndarray
    groups: dict[str, tuple[int, int]] = field(default_factory=dict)

    @classmethod
    def from_arrays(cls, positions, indices, groups: dict[str, tuple[int, int]] | None = None) -> "RawMesh":
        positions = np.ascontiguousarray(positions, dtype=float).reshape(-1, 3)
        indices = np.ascontiguousarray(indices, dtype=np.int64).reshape(-1, 3)
        valid = indices[((indices >= 0) & (indices < len(positions))).all(axis=1)]
        return cls(positions, compute_normals(positions, valid), indices, dict(groups or {}))

    @classmethod
    def from_trimesh(cls, mesh: trimesh.Trimesh) -> "RawMesh":
        return cls.from_arrays(np.asarray(mesh.vertices), np.asarray(mesh.faces))

    @classmethod
    def merge(cls, *meshes: "RawMesh", names: list[str] | None = None) -> "RawMesh":
        """
        Concatenate meshes, offsetting indices.

        Without ``names`` each input's groups are kept, prefixed by its
        position (``"0:outer"``). With ``names`` every input becomes a single
        group of that name; neighbouring inputs sharing a name share a group.
        """
        if names is not None and len(names) != len(meshes):
            raise ValueError(f"{len(names)} names for {len(meshes)} meshes")
        positions, indices, groups = [], [], {}
        vertex_offset = face_offset = 0
        previous = None
        for i, m in enumerate(meshes):
            positions.append(m.positions)
            indices.append(m.indices + vertex_offset)
            stop = face_offset + len(m.indices)
            if names is None:
                for name, (a, b) in m.groups.items():
                    groups[f"{i}:{name}"] = (a + face_offset, b + face_offset)
            elif names[i] == previous:
                groups[names[i]] = (groups[names[i]][0], stop)
            else:
                if names[i] in groups:
                    raise ValueError(f"group '{names[i]}' is not contiguous")
                groups[names[i]] = (face_offset, stop)
            previous = None if names is None else names[i]
            vertex_offset += len(m.positions)
            face_offset = stop
        if not meshes:
            return cls.from_arrays(np.empty((0, 3)), np.empty((0, 3), dtype=np.int64))
        return cls.from_arrays(np.vstack(positions), np.vstack(indices), groups)

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.indices)

    @property
    def bounds(self) -> np.ndarray:
        if not len(self.positions):
            return np.zeros((2, 3))
        return np.array([self.positions.min(axis=0), self.positions.max(axis=0)])

    @property
    def extents(self) -> np.ndarray:
        lo, hi = self.bounds
        return hi - lo

    def group_faces(self, name: str) -> np.ndarray:
        start, stop = self.groups[name]
        return self.indices[start:stop]

    def signed_volume(self) -> float:
        """Sum of signed tetrahedra (origin, a, b, c); positive for outward winding."""
        if not len(self.indices):
            return 0.0
        tri = self.positions[self.indices]
        return float(np.einsum("ij,ij->i", tri[:, 0], np.cross(tri[:, 1], tri[:, 2])).sum() / 6.0)

    def edge_counts(self) -> tuple[np.ndarray, np.ndarray]:
        return edge_counts(self.indices)

    def scaled(self, factors) -> "RawMesh":
        """
        Non-uniform scale about the origin. A negative determinant would
        mirror the solid, so windings are reversed to keep it outward.
        """
        factors = np.asarray(factors, dtype=float).reshape(3)
        if np.allclose(factors, 1.0):
            return self
        indices = self.indices if np.prod(factors) > 0 else self.indices[:, ::-1].copy()
        return RawMesh.from_arrays(self.positions * factors, indices, self.groups)

    def translated(self, offset) -> "RawMesh":
        offset = np.asarray(offset, dtype=float).reshape(3)
        return RawMesh(self.positions + offset, self.normals, self.indices, dict(self.groups))

    def transformed(self, matrix: np.ndarray) -> "RawMesh":
        """Apply a 4x4 homogeneous transform, keeping outward winding."""
        matrix = np.asarray(matrix, dtype=float)
        positions = trimesh.transformations.transform_points(self.positions, matrix)
        indices = self.indices
        if np.linalg.det(matrix[:3, :3]) < 0:
            indices = indices[:, ::-1].copy()
        return RawMesh.from_arrays(positions, indices, self.groups)

    def to_trimesh(self) -> trimesh.Trimesh:
        """Assemble the renderable mesh; no processing so indices stay as generated."""
        return trimesh.Trimesh(
            vertices=self.positions,
            faces=self.indices,
            vertex_normals=self.normals,
            process=False,
        )
