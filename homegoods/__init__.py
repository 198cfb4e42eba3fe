"""
Parametric solid-mesh engine for 3D-printable homegoods.

Example:
    >>> from homegoods import build_product, export_stl
    >>> result = build_product("vase", {"twist": 0.5})
    >>> result.report.is_manifold
    True
    >>> data = export_stl(result.mesh)
"""

__version__ = "0.1.0"

from .catalog import load_catalog
from .errors import CatalogError, HomegoodsError, MeshDecodeError, MeshExportError, UnknownProductError
from .export import export_stl, load_stl, write_stl
from .mesh import RawMesh
from .params import PatternDescriptor, ShapeParams, normalize, params_from_dict
from .pipeline import ModelResult, build_model, build_product
from .repair import RepairReport, repair_mesh

__all__ = [
    "CatalogError",
    "HomegoodsError",
    "MeshDecodeError",
    "MeshExportError",
    "ModelResult",
    "PatternDescriptor",
    "RawMesh",
    "RepairReport",
    "ShapeParams",
    "UnknownProductError",
    "build_model",
    "build_product",
    "export_stl",
    "load_catalog",
    "load_stl",
    "normalize",
    "params_from_dict",
    "repair_mesh",
    "write_stl",
]
