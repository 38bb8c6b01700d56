"""Per-endpoint memoized item lists."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Protocol

from loguru import logger

from lorekeeper.catalog.client import CatalogError
from lorekeeper.catalog.models import CatalogItem, ItemList
from lorekeeper.catalog.registry import EndpointRegistry


class ItemSource(Protocol):
    async def list_items(self, endpoint: str) -> ItemList: ...


class CacheStore:
    """
    Endpoint -> item list cache with no eviction and no expiry.

    Entries are filled on first read or by preload and stay until clear().
    Concurrent misses on the same endpoint share a single upstream fetch.
    """

    def __init__(self, source: ItemSource, registry: EndpointRegistry | None = None):
        self.source = source
        self.registry = registry or EndpointRegistry()
        self._entries: dict[str, list[CatalogItem]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    async def get_or_fetch(self, endpoint: str) -> list[CatalogItem]:
        """Return cached items for an endpoint, fetching them on a miss."""
        cached = self._entries.get(endpoint)
        if cached is not None:
            return list(cached)

        lock = self._locks.setdefault(endpoint, asyncio.Lock())
        async with lock:
            cached = self._entries.get(endpoint)
            if cached is not None:
                return list(cached)
            try:
                listing = await self.source.list_items(endpoint)
            except CatalogError as e:
                logger.warning("Failed to get data for {}: {}", endpoint, e)
                return []
            finally:
                # Waiters keep their own reference; only in-flight fetches hold a lock entry.
                if self._locks.get(endpoint) is lock:
                    del self._locks[endpoint]
            self._entries[endpoint] = list(listing.items)
            logger.debug("Cached {} items for {}", len(listing.items), endpoint)
            return list(listing.items)

    async def preload(self, endpoints: Iterable[str] | None = None) -> dict[str, int]:
        """Eagerly fill the cache. An empty selection means every registered endpoint."""
        targets = list(endpoints or ()) or self.registry.all_endpoints()
        for endpoint in targets:
            await self.get_or_fetch(endpoint)
        stats = self.stats()
        logger.info(
            "Preloaded {}/{} endpoints ({} items)",
            sum(1 for e in targets if e in stats),
            len(targets),
            sum(stats.get(e, 0) for e in set(targets)),
        )
        return stats

    def clear(self) -> None:
        count = len(self._entries)
        self._entries.clear()
        logger.debug("Cleared {} cached endpoints", count)

    def stats(self) -> dict[str, int]:
        """Item counts for endpoints currently cached; unfetched endpoints are absent."""
        return {endpoint: len(items) for endpoint, items in self._entries.items()}

    def __contains__(self, endpoint: object) -> bool:
        return endpoint in self._entries
