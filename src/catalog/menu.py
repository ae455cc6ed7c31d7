"""
Price Catalog

DESIGN DECISION: The catalog is an immutable value built once at startup
and handed to every component that prices items. Nothing reaches for a
module-level menu, so tests can swap in their own catalog freely.

Lookup is exact after trimming and lowercasing. There is no fuzzy
matching: a name we don't know is reported back, never guessed.
"""

import json
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from src.models.ledger import CatalogItem, ItemCategory


# Prices in AED
DEFAULT_MENU: dict[str, tuple[str, ItemCategory]] = {
    "matcha latte": ("20", ItemCategory.MATCHA),
    "usucha matcha": ("20", ItemCategory.MATCHA),
    "coco matcha": ("25", ItemCategory.MATCHA),
    "salted cloudy matcha": ("25", ItemCategory.MATCHA),
    "matcha tonic": ("25", ItemCategory.MATCHA),
    "vietnamese coffee": ("20", ItemCategory.COFFEE),
    "espresso": ("20", ItemCategory.COFFEE),
    "americano": ("20", ItemCategory.COFFEE),
    "espresso/americano": ("20", ItemCategory.COFFEE),
    "cold brew": ("20", ItemCategory.COFFEE),
    "coco coolbrew": ("25", ItemCategory.COFFEE),
    "latte": ("25", ItemCategory.COFFEE),
    "espresso tonic": ("25", ItemCategory.COFFEE),
    "salted cloudy coffee": ("25", ItemCategory.COFFEE),
}


class CatalogError(Exception):
    """Catalog could not be built."""
    pass


def normalize_key(raw_name: Optional[str]) -> str:
    """Catalog key for a raw item name."""
    return (raw_name or "").strip().lower()


class Catalog:
    """
    Read-only mapping of item key to CatalogItem.

    Insertion order of the source menu is preserved so menu listings
    come out in the order the owner wrote them.
    """

    def __init__(self, items: Iterable[CatalogItem]):
        entries: dict[str, CatalogItem] = {}
        for item in items:
            if item.name in entries:
                raise CatalogError(f"Duplicate menu item: {item.name}")
            entries[item.name] = item
        self._items: Mapping[str, CatalogItem] = MappingProxyType(entries)

    def lookup(self, raw_name: Optional[str]) -> Optional[CatalogItem]:
        """Find an item by name, ignoring case and surrounding spaces."""
        return self._items.get(normalize_key(raw_name))

    def __contains__(self, raw_name: object) -> bool:
        return isinstance(raw_name, str) and self.lookup(raw_name) is not None

    def __iter__(self) -> Iterator[CatalogItem]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def by_category(self) -> dict[str, list[CatalogItem]]:
        """Group items by category, categories in enum order."""
        grouped: dict[str, list[CatalogItem]] = {}
        for category in ItemCategory:
            members = [item for item in self if item.category == category]
            if members:
                grouped[category.value] = members
        return grouped

    @classmethod
    def default(cls) -> "Catalog":
        """The bar's built-in menu."""
        return cls(
            CatalogItem(name=name, unit_price=Decimal(price), category=category)
            for name, (price, category) in DEFAULT_MENU.items()
        )

    @classmethod
    def from_json_file(cls, path: str) -> "Catalog":
        """
        Load a menu from JSON.

        Expected shape: {"latte": {"price": 25, "category": "Coffee"}, ...}
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise CatalogError(f"Menu file not found: {path}")
        except json.JSONDecodeError as e:
            raise CatalogError(f"Menu file is not valid JSON: {e}")

        if not isinstance(data, dict):
            raise CatalogError("Menu file must contain a JSON object")

        try:
            return cls(
                CatalogItem(
                    name=name,
                    unit_price=Decimal(str(entry["price"])),
                    category=ItemCategory(entry["category"]),
                )
                for name, entry in data.items()
            )
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"Invalid menu entry: {e}")


def load_catalog(menu_file: Optional[str] = None) -> Catalog:
    """Build the catalog from a menu file if one is configured."""
    if menu_file:
        return Catalog.from_json_file(menu_file)
    return Catalog.default()
