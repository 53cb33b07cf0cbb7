"""Releases catalog loading and caching."""

from ble_update_checker.catalog.loader import CatalogLoader
from ble_update_checker.catalog.parser import parse_catalog, parse_catalog_text
from ble_update_checker.catalog.store import CatalogStore, get_catalog_store, reset_catalog_store

__all__ = [
    "CatalogLoader",
    "CatalogStore",
    "get_catalog_store",
    "reset_catalog_store",
    "parse_catalog",
    "parse_catalog_text",
]
