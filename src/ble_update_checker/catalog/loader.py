"""Releases catalog loader.

Fetches the catalog document from the releases server, parses it and
publishes it to a CatalogStore. Failures leave the current catalog in place
and are reported as False.
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional, Union

import httpx

from ble_update_checker.catalog.parser import parse_catalog_text
from ble_update_checker.catalog.store import CatalogStore, get_catalog_store
from ble_update_checker.exceptions import CatalogError, CatalogUnavailable
from ble_update_checker.models import ReleasesCatalog

logger = logging.getLogger(__name__)

RefreshCompletion = Callable[[bool], None]


class CatalogLoader:
    """Keeps the releases catalog up to date.

    Example:
        >>> loader = CatalogLoader("https://example.com/releases.json")
        >>> ok = await loader.refresh()
        >>> catalog = loader.store.catalog
        >>> await loader.close()
    """

    def __init__(
        self,
        releases_url: str,
        store: Optional[CatalogStore] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        """Initialize catalog loader.

        Args:
            releases_url: URL of the catalog document
            store: Store to publish into (defaults to the global store)
            client: HTTP client to use (one is created and owned if omitted)
            timeout: Request timeout in seconds
        """
        self.releases_url = releases_url
        self.store = store if store is not None else get_catalog_store()
        self.timeout = timeout

        self._client = client
        self._owns_client = client is None
        self._refresh_lock = asyncio.Lock()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this loader created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def refresh(self, completion: Optional[RefreshCompletion] = None) -> bool:
        """Refresh the catalog from the releases server.

        Concurrent calls are serialized; each call performs its own fetch and
        reports its own result.

        Args:
            completion: Optional callback invoked once with the result

        Returns:
            True if a new catalog was published, False otherwise
        """
        async with self._refresh_lock:
            try:
                catalog = await self._fetch()
            except CatalogError as e:
                logger.warning(f"Failed to refresh releases catalog: {e}")
                success = False
            else:
                self.store.publish(catalog)
                success = True

        if completion is not None:
            try:
                completion(success)
            except Exception as e:
                logger.error(f"Refresh completion callback failed: {e}", exc_info=True)

        return success

    async def _fetch(self) -> ReleasesCatalog:
        """Download and parse the catalog document.

        Raises:
            CatalogUnavailable: If the document cannot be downloaded
            CatalogParseError: If the document is malformed
        """
        logger.info(f"Fetching releases catalog from {self.releases_url}")

        try:
            response = await self._get_client().get(self.releases_url)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise CatalogUnavailable(f"{type(e).__name__}: {e}") from e

        return parse_catalog_text(response.text, response.headers.get("content-type"))

    def load_file(self, path: Union[str, Path]) -> bool:
        """Load the catalog from a local document.

        Args:
            path: Path to a JSON or YAML catalog document

        Returns:
            True if a new catalog was published, False otherwise
        """
        path = Path(path).expanduser()
        try:
            text = path.read_text(encoding="utf-8")
            catalog = parse_catalog_text(text, "yaml" if path.suffix in (".yaml", ".yml") else None)
        except (OSError, CatalogError) as e:
            logger.warning(f"Failed to load releases catalog from {path}: {e}")
            return False

        self.store.publish(catalog)
        return True
