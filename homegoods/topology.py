"""
Reusable topology builders.

Index conventions used throughout the generators:

* a *loop* is a 1D array of vertex indices ordered counter-clockwise when
  seen from the side its surface should face away from (for rings around
  the Z axis: CCW seen from +Z);
* ``stitch(lower, upper)`` joins two loops with quads whose normals point
  along ``tangent x (upper - lower)``, which is outward for a CCW ring
  below another one and upward for an outer ring stitched to an inner one;
* ``fan(center, loop)`` faces the same way as the loop's CCW side.

Seams are never duplicated: closed loops wrap by index, and caps reuse the
indices of the boundary they close.
"""

import numpy as np

from .mesh import RawMesh


def flip(faces: np.ndarray) -> np.ndarray:
    """Reverse the winding of every triangle."""
    return np.asarray(faces)[:, ::-1].copy()


def stitch(lower: np.ndarray, upper: np.ndarray, closed: bool = True, reverse: bool = False) -> np.ndarray:
    """
    Triangulate the band between two loops of equal length.

    Each quad (a, b, c, d) = (lower[j], lower[j+1], upper[j+1], upper[j])
    becomes triangles (a, b, c) and (a, c, d).
    """
    lower = np.asarray(lower, dtype=np.int64)
    upper = np.asarray(upper, dtype=np.int64)
    if lower.shape != upper.shape:
        raise ValueError("Loops must have the same vertex count to be stitched.")
    if closed:
        a, b = lower, np.roll(lower, -1)
        d, c = upper, np.roll(upper, -1)
    else:
        a, b = lower[:-1], lower[1:]
        d, c = upper[:-1], upper[1:]
    faces = np.empty((2 * len(a), 3), dtype=np.int64)
    faces[0::2] = np.column_stack([a, b, c])
    faces[1::2] = np.column_stack([a, c, d])
    return flip(faces) if reverse else faces


def grid(rows: np.ndarray, closed: bool = True, reverse: bool = False) -> np.ndarray:
    """Stitch every consecutive pair of rows of an (M, N) index grid."""
    rows = np.asarray(rows, dtype=np.int64)
    if len(rows) < 2:
        return np.empty((0, 3), dtype=np.int64)
    return np.vstack([stitch(rows[i], rows[i + 1], closed=closed, reverse=reverse) for i in range(len(rows) - 1)])


def fan(center: int, loop: np.ndarray, closed: bool = True, reverse: bool = False) -> np.ndarray:
    """Cap a loop with triangles sharing ``center``."""
    loop = np.asarray(loop, dtype=np.int64)
    nxt = np.roll(loop, -1) if closed else loop[1:]
    cur = loop if closed else loop[:-1]
    faces = np.column_stack([np.full(len(cur), center, dtype=np.int64), cur, nxt])
    return flip(faces) if reverse else faces


def polygon_fan(loop: np.ndarray, reverse: bool = False) -> np.ndarray:
    """Triangulate a convex polygon given by a CCW loop, fanning from its first vertex."""
    loop = np.asarray(loop, dtype=np.int64)
    faces = np.column_stack([np.full(len(loop) - 2, loop[0]), loop[1:-1], loop[2:]])
    return flip(faces) if reverse else faces


def sweep(sections: np.ndarray, closed: bool = True) -> np.ndarray:
    """
    Side faces of a swept solid.

    ``sections`` is a (K, S) index array: K copies of a closed section loop
    along the path. A section that is CCW when viewed from behind, looking
    along the path, yields outward faces. Open paths leave both end
    sections uncapped.
    """
    sections = np.asarray(sections, dtype=np.int64)
    n = sections.shape[1]
    return np.vstack([stitch(sections[:, m], sections[:, (m + 1) % n], closed=closed) for m in range(n)])


def grid_loop(index_grid: np.ndarray) -> np.ndarray:
    """
    Boundary of an (ny, nx) index grid laid out with x along columns and y
    along rows, returned CCW seen from +Z.
    """
    g = np.asarray(index_grid)
    return np.concatenate([g[0, :], g[1:, -1], g[-1, -2::-1], g[-2:0:-1, 0]])


class MeshBuilder:
    """
    Accumulates vertices and named triangle groups, then freezes them into
    a :class:`RawMesh` with normals recomputed from topology.
    """

    def __init__(self):
        self._points: list[np.ndarray] = []
        self._faces: list[np.ndarray] = []
        self._groups: list[tuple[str, int]] = []
        self._count = 0

    @property
    def vertex_count(self) -> int:
        return self._count

    def add_vertices(self, points) -> np.ndarray:
        """Append points of shape (..., 3); returns their indices with shape (...)."""
        points = np.asarray(points, dtype=float)
        flat = points.reshape(-1, 3)
        idx = np.arange(self._count, self._count + len(flat), dtype=np.int64)
        self._points.append(flat)
        self._count += len(flat)
        return idx.reshape(points.shape[:-1])

    def add_vertex(self, point) -> int:
        return int(self.add_vertices(np.asarray(point, dtype=float).reshape(1, 3))[0])

    def add_faces(self, faces: np.ndarray, group: str | None = None):
        """
        Append triangles, optionally to a named group. Repeating a name is
        allowed only for the most recent group, so every group stays one
        contiguous range.
        """
        group = group or ""
        last = self._groups[-1][0] if self._groups else ""
        if group and group != last and any(name == group for name, _ in self._groups):
            raise ValueError(f"group '{group}' is not contiguous")
        faces = np.asarray(faces, dtype=np.int64).reshape(-1, 3)
        self._faces.append(faces)
        self._groups.append((group, len(faces)))

    def add_mesh(self, mesh: RawMesh, group: str | None = None):
        """Append another closed mesh unchanged, offsetting its indices."""
        offset = self._count
        self.add_vertices(mesh.positions)
        self.add_faces(mesh.indices + offset, group)

    def build(self) -> RawMesh:
        positions = np.vstack(self._points) if self._points else np.empty((0, 3))
        indices = np.vstack(self._faces) if self._faces else np.empty((0, 3), dtype=np.int64)
        groups: dict[str, tuple[int, int]] = {}
        start = 0
        for name, n in self._groups:
            if name:
                prev = groups.get(name)
                groups[name] = (prev[0], start + n) if prev else (start, start + n)
            start += n
        return RawMesh.from_arrays(positions, indices, groups=groups)
