"""Tests for the price catalog."""

import json
from decimal import Decimal

import pytest

from src.catalog import Catalog, CatalogError, load_catalog, normalize_key
from src.models.ledger import CatalogItem, ItemCategory


class TestCatalogLookup:
    """Tests for name lookup."""

    def test_lookup_ignores_case_and_spaces(self, catalog):
        item = catalog.lookup("  Matcha LATTE ")
        assert item is not None
        assert item.name == "matcha latte"
        assert item.unit_price == Decimal("20")
        assert item.category == ItemCategory.MATCHA

    def test_unknown_item(self, catalog):
        assert catalog.lookup("unicorn frappe") is None
        assert catalog.lookup(None) is None
        assert "unicorn frappe" not in catalog

    def test_no_fuzzy_matching(self, catalog):
        """A near-miss is reported as unknown, never guessed."""
        assert catalog.lookup("lattes") is None

    def test_normalize_key(self):
        assert normalize_key("  Cold Brew ") == "cold brew"
        assert normalize_key(None) == ""


class TestCatalogContents:

    def test_default_menu_size(self, catalog):
        assert len(catalog) == 14
        assert "latte" in catalog
        assert catalog.lookup("latte").unit_price == Decimal("25")

    def test_by_category_keeps_menu_order(self, catalog):
        grouped = catalog.by_category()
        assert list(grouped) == ["Matcha", "Coffee"]
        assert grouped["Matcha"][0].name == "matcha latte"
        assert all(item.category == ItemCategory.COFFEE for item in grouped["Coffee"])

    def test_duplicate_items_rejected(self):
        item = CatalogItem(name="latte", unit_price=Decimal("25"), category=ItemCategory.COFFEE)
        with pytest.raises(CatalogError):
            Catalog([item, item])


class TestMenuFile:
    """Tests for loading a menu from JSON."""

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "menu.json"
        path.write_text(json.dumps({
            "Flat White": {"price": 22, "category": "Coffee"},
            "iced matcha": {"price": "18.5", "category": "Matcha"},
        }))

        catalog = load_catalog(str(path))

        assert len(catalog) == 2
        assert catalog.lookup("flat white").unit_price == Decimal("22")
        assert catalog.lookup("Iced Matcha").unit_price == Decimal("18.5")

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="not found"):
            Catalog.from_json_file(str(tmp_path / "nope.json"))

    def test_bad_entry(self, tmp_path):
        path = tmp_path / "menu.json"
        path.write_text(json.dumps({"latte": {"price": 25, "category": "Tea"}}))
        with pytest.raises(CatalogError, match="Invalid menu entry"):
            Catalog.from_json_file(str(path))

    def test_no_file_gives_default(self):
        assert len(load_catalog(None)) == 14
