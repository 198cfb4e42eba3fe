"""Externally supplied meshes, placed on the build plate and rescaled."""

import logging

import numpy as np

from ..errors import MeshDecodeError
from ..export import load_stl
from ..mesh import RawMesh
from ..params import UploadedMeshParams, normalize

logger = logging.getLogger(__name__)


def uploaded_mesh(params: UploadedMeshParams) -> RawMesh:
    """
    Decode the uploaded file, centre it on the XY origin with its lowest
    point at z = 0 and scale it uniformly so its largest extent equals
    ``target_size``.
    """
    p = normalize(params)
    mesh = load_stl(p.data)
    lo, hi = mesh.bounds
    size = float(np.max(hi - lo))
    if not np.isfinite(size) or size <= 0:
        raise MeshDecodeError("Uploaded mesh has zero extent")

    center = (lo + hi) / 2
    placed = mesh.translated((-center[0], -center[1], -lo[2]))
    factor = p.target_size / size
    logger.debug("Uploaded mesh: largest extent %.3f, scale factor %.4f", size, factor)
    return placed.scaled((factor, factor, factor))
