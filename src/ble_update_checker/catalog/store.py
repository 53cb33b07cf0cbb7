"""Process-wide releases catalog cache."""

import logging
from datetime import datetime, timezone
from typing import Optional

from ble_update_checker.models import ReleasesCatalog

logger = logging.getLogger(__name__)


class CatalogStore:
    """Holds the current releases catalog.

    Readers take ``catalog`` without locking. Writers build a complete new
    catalog and hand it to ``publish``, which swaps the reference in a single
    assignment, so readers see either the old catalog or the new one.
    """

    def __init__(self, catalog: Optional[ReleasesCatalog] = None) -> None:
        self._catalog = catalog if catalog is not None else ReleasesCatalog.empty()
        self.last_refreshed: Optional[datetime] = None

    @property
    def catalog(self) -> ReleasesCatalog:
        return self._catalog

    def publish(self, catalog: ReleasesCatalog) -> None:
        """Replace the current catalog."""
        self._catalog = catalog
        self.last_refreshed = datetime.now(timezone.utc)
        logger.info(f"Releases catalog updated ({len(catalog)} boards)")


# Global catalog store instance
catalog_store: Optional[CatalogStore] = None


def get_catalog_store() -> CatalogStore:
    """Get global catalog store, creating an empty one on first use.

    Returns:
        Catalog store instance
    """
    global catalog_store
    if catalog_store is None:
        catalog_store = CatalogStore()
    return catalog_store


def reset_catalog_store() -> None:
    """Drop the global catalog store."""
    global catalog_store
    catalog_store = None
