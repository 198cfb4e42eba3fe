"""
Product catalog: display names, price tiers and default parameters.

The catalog ships as ``data/catalog.json`` and is validated with Pydantic on
load. Defaults are given in the designer's units (inches) using the same
camelCase keys as the configurator.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import CatalogError, UnknownProductError
from .params import TYPE_ALIASES, VARIANTS, ShapeParams, normalize, params_from_dict

logger = logging.getLogger(__name__)

DEFAULT_CATALOG = Path(__file__).parent / "data" / "catalog.json"

SIZES = ("mini", "small", "medium")


class PriceInfo(BaseModel):
    """One purchasable size."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    dimensions: str
    price: float = Field(ge=0)
    price_id: str = Field(alias="priceId")


class CategoryPriceInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    mini: Optional[PriceInfo] = None
    small: Optional[PriceInfo] = None
    medium: Optional[PriceInfo] = None

    def sizes(self) -> dict[str, PriceInfo]:
        return {size: info for size in SIZES if (info := getattr(self, size)) is not None}


class Product(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str
    description: str = ""
    price_info: CategoryPriceInfo = Field(default_factory=CategoryPriceInfo, alias="priceInfo")
    defaults: dict[str, Any]

    @field_validator("defaults")
    @classmethod
    def known_type(cls, v):
        type_name = v.get("type")
        if TYPE_ALIASES.get(type_name, type_name) not in VARIANTS:
            raise ValueError(f"unknown shape type {type_name!r}")
        return v


class Catalog(BaseModel):
    model_config = ConfigDict(extra="ignore")

    products: dict[str, Product]

    def product(self, product_id: str) -> Product:
        try:
            return self.products[product_id]
        except KeyError:
            raise UnknownProductError(product_id, list(self.products)) from None

    def default_params(self, product_id: str, overrides: dict[str, Any] | None = None) -> ShapeParams:
        """Parameters for ``product_id`` with ``overrides`` (camelCase or snake_case) applied."""
        values = dict(self.product(product_id).defaults)
        values.update(overrides or {})
        # the product fixes the shape type
        values["type"] = self.product(product_id).defaults["type"]
        try:
            params = params_from_dict(values)
            # non-numeric values only surface once the fields are clamped
            normalize(params)
        except (TypeError, ValueError) as e:
            raise CatalogError(f"Invalid parameters for '{product_id}': {e}") from e
        return params


@lru_cache(maxsize=8)
def _load(path: Path) -> Catalog:
    try:
        raw = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Could not read catalog {path}: {e}") from e
    try:
        catalog = Catalog.model_validate(raw)
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog {path}: {e}") from e
    logger.debug("Loaded %d products from %s", len(catalog.products), path)
    return catalog


def load_catalog(path=None) -> Catalog:
    """Load and validate a catalog file; the bundled catalog by default."""
    return _load(Path(path).resolve() if path else DEFAULT_CATALOG)
