"""Price catalog package."""

from src.catalog.menu import (
    DEFAULT_MENU,
    Catalog,
    CatalogError,
    load_catalog,
    normalize_key,
)

__all__ = [
    "DEFAULT_MENU",
    "Catalog",
    "CatalogError",
    "load_catalog",
    "normalize_key",
]
