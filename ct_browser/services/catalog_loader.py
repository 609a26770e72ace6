from __future__ import annotations

import asyncio
import logging
import time
from functools import partial
from typing import Any, Awaitable, Callable, Dict, Optional

import requests

from ct_browser.core.catalog import Catalog, parse_catalog
from ct_browser.core.exceptions import FetchError, InvalidArgument, SchemaError
from ct_browser.core.paths import strip_trailing_slashes

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_FILE = "data/neurons.json"
DEFAULT_TIMEOUT = 10.0

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
    "Accept": "application/json",
}

FetchJson = Callable[[str], Awaitable[Any]]


class RequestsFetcher:
    """
    Fetches a JSON document with `requests`, off the event loop.

    Caches between us and the dataset host are always bypassed: no-cache
    headers plus a timestamp query parameter.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def fetch_sync(self, url: str) -> Any:
        try:
            response = requests.get(
                url,
                params={"_": int(time.time() * 1000)},
                headers=NO_CACHE_HEADERS,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch catalog {url}: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise SchemaError(f"Catalog {url} is not valid JSON") from e

    async def __call__(self, url: str) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.fetch_sync, url)


class CatalogLoader:
    """
    Loads per-dataset catalogs and memoizes them per base URL.

    - Trailing slashes are stripped from the base URL; the result is both the
      fetch root and the cache key
    - One shared task per key: concurrent and later callers get the same
      outcome, so each dataset is fetched at most once
    - Failed loads are evicted so the next call retries
    - Cache entries are only ever replaced or evicted, never mutated
    """

    def __init__(
            self,
            fetch_json: Optional[FetchJson] = None,
            catalog_file: str = DEFAULT_CATALOG_FILE,
            timeout: float = DEFAULT_TIMEOUT,
    ):
        self._fetch_json = fetch_json or RequestsFetcher(timeout=timeout)
        self.catalog_file = catalog_file.strip("/")
        self._cache: Dict[str, asyncio.Task] = {}

    @staticmethod
    def cache_key(base_url: Optional[str]) -> str:
        return strip_trailing_slashes(base_url)

    def catalog_url(self, base_url: str) -> str:
        return f"{self.cache_key(base_url)}/{self.catalog_file}"

    def is_cached(self, base_url: str) -> bool:
        return self.cache_key(base_url) in self._cache

    def invalidate(self, base_url: Optional[str] = None) -> None:
        """Drop one cached catalog (or all of them). In-flight tasks keep running for their awaiters."""
        if base_url is None:
            self._cache.clear()
            return
        self._cache.pop(self.cache_key(base_url), None)

    async def load(self, base_url: str) -> Catalog:
        """
        Return the catalog for base_url, fetching it only if no load is cached or in flight.

        Raises:
            InvalidArgument: empty base URL (no fetch is issued)
            FetchError: transport failure or non-2xx status
            SchemaError: body is not a catalog document
        """
        key = self.cache_key(base_url)
        if not key:
            raise InvalidArgument("A base_url is required to load a catalog.")

        task = self._cache.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch(key))
            self._cache[key] = task
            task.add_done_callback(partial(self._on_done, key))
        else:
            logger.debug("Catalog cache hit", extra={"base_url": key, "done": task.done()})

        # shield: one awaiter being cancelled must not cancel the shared fetch
        return await asyncio.shield(task)

    async def _fetch(self, key: str) -> Catalog:
        url = f"{key}/{self.catalog_file}"
        logger.info("Fetching catalog", extra={"base_url": key, "url": url})
        try:
            raw = await self._fetch_json(url)
            catalog = parse_catalog(key, raw)
        except Exception:
            self._evict(key, asyncio.current_task())
            raise

        logger.info(
            "Catalog loaded",
            extra={
                "base_url": key,
                "n_names": len(catalog.neuron_types),
                "n_records": len(catalog.neuron_data),
            },
        )
        return catalog

    def _evict(self, key: str, task: Optional[asyncio.Task]) -> None:
        if self._cache.get(key) is task:
            del self._cache[key]

    def _on_done(self, key: str, task: asyncio.Task) -> None:
        if task.cancelled():
            self._evict(key, task)
            return
        error = task.exception()
        if isinstance(error, (FetchError, SchemaError)):
            logger.error("Catalog load failed", extra={"base_url": key, "error": str(error)})
        elif error is not None:
            logger.error(
                "Unexpected error while loading catalog",
                extra={"base_url": key},
                exc_info=(type(error), error, error.__traceback__),
            )
