"""
Tests for the product catalog.
"""

import json

import pytest

from homegoods.catalog import Catalog, load_catalog
from homegoods.errors import CatalogError, UnknownProductError
from homegoods.params import CoasterParams, RadialProfileParams, VARIANTS, params_from_dict


class TestBundledCatalog:
    def test_loads_and_is_cached(self):
        catalog = load_catalog()
        assert isinstance(catalog, Catalog)
        assert load_catalog() is catalog

    def test_original_products_and_prices(self):
        catalog = load_catalog()
        for product_id in ("lampshade", "vase", "bowl", "candleHolder", "wallArt", "coaster"):
            sizes = catalog.product(product_id).price_info.sizes()
            assert list(sizes) == ["mini", "small", "medium"]
            assert [info.price for info in sizes.values()] == [25, 35, 45]
        assert catalog.product("lampshade").price_info.small.price_id == "price_1QmGpfCLoBz9jXRlBcrkWyUj"

    def test_every_variant_has_a_product(self):
        kinds = {type(load_catalog().default_params(pid)).kind for pid in load_catalog().products}
        assert kinds == set(VARIANTS) - {"uploadedMesh"}

    def test_defaults_within_limits(self):
        """Catalog defaults are already inside the designer ranges."""
        for product_id, product in load_catalog().products.items():
            p = params_from_dict(product.defaults)
            for name, (lo, hi) in p.LIMITS.items():
                value = getattr(p, name)
                assert value is None or lo <= value <= hi, f"{product_id}.{name}={value}"

    def test_default_params(self):
        bowl = load_catalog().default_params("bowl")
        assert isinstance(bowl, RadialProfileParams)
        assert bowl.profile == "bowl"
        assert bowl.pattern.kind == "geometric"

    def test_overrides(self):
        p = load_catalog().default_params("coaster", {"patternType": "spiral", "hasBottom": False, "type": "ring"})
        assert isinstance(p, CoasterParams)
        assert p.pattern.kind == "spiral"
        assert p.has_bottom is False

    def test_non_numeric_override(self):
        with pytest.raises(CatalogError, match="vase"):
            load_catalog().default_params("vase", {"height": "abc"})

    def test_unknown_product(self):
        with pytest.raises(UnknownProductError) as exc_info:
            load_catalog().default_params("teapot")
        assert isinstance(exc_info.value, KeyError)
        assert "teapot" in str(exc_info.value)
        assert "vase" in str(exc_info.value)


class TestCatalogFiles:
    def test_custom_catalog(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"products": {"tiny": {"name": "Tiny", "defaults": {"type": "cup", "height": 1}}}}))
        catalog = load_catalog(path)
        assert list(catalog.products) == ["tiny"]
        assert catalog.product("tiny").price_info.sizes() == {}
        assert catalog.default_params("tiny").height == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError):
            load_catalog(tmp_path / "missing.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_unknown_shape_type(self, tmp_path):
        path = tmp_path / "bad_type.json"
        path.write_text(json.dumps({"products": {"x": {"name": "X", "defaults": {"type": "teapot"}}}}))
        with pytest.raises(CatalogError, match="teapot"):
            load_catalog(path)

    def test_negative_price(self, tmp_path):
        path = tmp_path / "bad_price.json"
        tier = {"dimensions": "1", "price": -5, "priceId": "p"}
        path.write_text(
            json.dumps({"products": {"x": {"name": "X", "priceInfo": {"mini": tier}, "defaults": {"type": "vase"}}}})
        )
        with pytest.raises(CatalogError):
            load_catalog(path)
