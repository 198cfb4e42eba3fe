"""
STL encoding and decoding.

Export goes through trimesh's binary STL writer; decoding accepts binary or
ASCII STL and yields a :class:`RawMesh` for the uploaded-mesh path.
"""

import io
import logging
from pathlib import Path

import numpy as np
import trimesh
from trimesh.exchange.stl import export_stl as encode_stl

from .errors import MeshDecodeError, MeshExportError
from .mesh import RawMesh

logger = logging.getLogger(__name__)


def export_stl(mesh: RawMesh) -> bytes:
    """Serialize ``mesh`` as binary STL (facet normals recomputed from winding)."""
    if mesh.triangle_count == 0:
        raise MeshExportError("Cannot export a mesh with no triangles")
    try:
        data = encode_stl(mesh.to_trimesh())
    except (ValueError, IndexError) as e:
        raise MeshExportError(f"STL export failed: {e}") from e
    logger.debug("Encoded %d triangles into %d bytes", mesh.triangle_count, len(data))
    return data


def write_stl(mesh: RawMesh, path) -> Path:
    path = Path(path)
    data = export_stl(mesh)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise MeshExportError(f"Could not write {path}: {e}") from e
    logger.info("Wrote %s (%d triangles)", path, mesh.triangle_count)
    return path


def load_stl(data: bytes) -> RawMesh:
    """
    Decode STL bytes into a mesh with coincident vertices merged.

    Raises :class:`MeshDecodeError` for empty or unreadable input and for
    files that contain no triangles.
    """
    if not data:
        raise MeshDecodeError("Empty mesh file")
    try:
        loaded = trimesh.load_mesh(io.BytesIO(data), file_type="stl")
    except Exception as e:
        # trimesh surfaces parse failures as assorted exception types
        raise MeshDecodeError(f"Could not decode STL: {e}") from e
    if isinstance(loaded, trimesh.Scene):
        geometries = list(loaded.geometry.values())
        if not geometries:
            raise MeshDecodeError("STL file contains no geometry")
        loaded = trimesh.util.concatenate(geometries)
    faces = np.asarray(loaded.faces)
    if len(faces) == 0:
        raise MeshDecodeError("STL file contains no triangles")
    logger.debug("Decoded STL: %d vertices, %d triangles", len(loaded.vertices), len(faces))
    return RawMesh.from_trimesh(loaded)
