"""Exceptions raised at the I/O and configuration boundaries.

Geometry itself never raises for numeric input: out-of-range values are
clamped by :mod:`homegoods.units`. Only decoding, exporting and catalog
lookups can fail.
"""


class HomegoodsError(Exception):
    """Base class for every error raised by the package."""


class MeshDecodeError(HomegoodsError):
    """An uploaded mesh file could not be decoded into triangles."""


class MeshExportError(HomegoodsError):
    """A mesh could not be serialized or written."""


class CatalogError(HomegoodsError):
    """The product catalog is missing or malformed."""


class UnknownProductError(CatalogError, KeyError):
    """A product id is not present in the catalog."""

    def __init__(self, product_id: str, known: list[str]):
        self.product_id = product_id
        self.known = known
        super().__init__(product_id)

    def __str__(self) -> str:
        return f"Unknown product '{self.product_id}' (known: {', '.join(sorted(self.known))})"
