"""
Canonical game catalog.
"""

from price_cache.catalog.loader import (
    CatalogEntry,
    CatalogError,
    catalog_steam_ids,
    load_catalog,
)

__all__ = [
    "CatalogEntry",
    "CatalogError",
    "catalog_steam_ids",
    "load_catalog",
]
