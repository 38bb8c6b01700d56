"""Request-level operations over the catalog client and search engine."""

from __future__ import annotations

import json
import time
from typing import Any

from loguru import logger

from lorekeeper.catalog.client import CatalogClient, CatalogError
from lorekeeper.config.schema import Config
from lorekeeper.search.engine import SearchEngine

DEFAULT_PAGE_SIZE = 20


class QueryGateway:
    """Validate requests, call into the catalog or search engine and shape payloads."""

    def __init__(
        self,
        config: Config | None = None,
        client: CatalogClient | None = None,
        engine: SearchEngine | None = None,
    ):
        self.config = config or Config()
        self.client = client or CatalogClient(self.config.catalog)
        self.registry = self.client.registry
        self.engine = engine or SearchEngine(self.client, self.registry)

    async def handle(self, action: str, **kwargs: Any) -> dict[str, Any]:
        """Dispatch an action name to its operation."""
        action_name = (action or "").strip().lower().replace("-", "_")
        handlers: dict[str, Any] = {
            "endpoints": self.get_endpoints,
            "list": self.get_list,
            "get": self.get_item,
            "search": self.search_items,
            "health": self.health_check,
            "stats": self.cache_stats,
        }
        if action_name not in handlers:
            return self._error("invalid_argument", f"Unsupported action: {action_name}")
        return await handlers[action_name](**kwargs)

    async def get_endpoints(self) -> dict[str, Any]:
        endpoints = self.registry.all_endpoints()
        return {"ok": True, "endpoints": endpoints, "total_count": len(endpoints)}

    async def get_list(
        self,
        endpoint: str,
        page: int = 0,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> dict[str, Any]:
        """Return one page of an endpoint listing, fetched fresh from upstream."""
        if not self.registry.is_valid(endpoint):
            return self._error("invalid_argument", f"Invalid endpoint: {endpoint}")
        if page < 0:
            return self._error("invalid_argument", "page must be >= 0")
        if page_size <= 0:
            return self._error("invalid_argument", "page_size must be >= 1")

        try:
            listing = await self.client.list_items(endpoint)
        except CatalogError as e:
            logger.error("Failed to get list for {}: {}", endpoint, e)
            return self._error("internal", f"Failed to get list: {e}")

        start = page * page_size
        end = min(start + page_size, len(listing.items))
        return {
            "ok": True,
            "endpoint": endpoint,
            "total_count": listing.count,
            "page": page,
            "page_size": page_size,
            "has_more": end < len(listing.items),
            "items": [item.to_dict(endpoint) for item in listing.items[start:end]],
        }

    async def get_item(self, endpoint: str, index: str) -> dict[str, Any]:
        if not self.registry.is_valid(endpoint):
            return self._error("invalid_argument", f"Invalid endpoint: {endpoint}")
        if not (index or "").strip():
            return self._error("invalid_argument", "index must not be empty")

        try:
            record = await self.client.get_item_detail(endpoint, index)
        except CatalogError as e:
            logger.error("Failed to get item {}/{}: {}", endpoint, index, e)
            return self._error("internal", f"Failed to get item: {e}")

        item: dict[str, Any] = {"index": index, "endpoint": endpoint}
        for key in ("name", "url"):
            if key in record:
                item[key] = record[key]
        return {
            "ok": True,
            "item": item,
            "raw_data": json.dumps(record, ensure_ascii=False),
        }

    async def search_items(
        self,
        query: str,
        endpoints: list[str] | None = None,
        max_results: int | None = None,
    ) -> dict[str, Any]:
        if not (query or "").strip():
            return self._error("invalid_argument", "Search query cannot be empty")

        selected = list(endpoints or [])
        invalid = [e for e in selected if not self.registry.is_valid(e)]
        if invalid:
            return self._error("invalid_argument", f"Invalid endpoint: {', '.join(invalid)}")

        limit = self.config.search.default_max_results if max_results is None else max_results
        hits = await self.engine.search(query, selected, limit)
        return {
            "ok": True,
            "query": query,
            "total_found": len(hits),
            "results": [hit.to_dict() for hit in hits],
        }

    async def health_check(self) -> dict[str, Any]:
        serving = len(self.registry) > 0
        return {
            "ok": True,
            "status": "SERVING" if serving else "NOT_SERVING",
            "message": "Server is healthy" if serving else "API client not responding",
            "timestamp": int(time.time() * 1000),
        }

    async def cache_stats(self) -> dict[str, Any]:
        stats = self.engine.get_cache_stats()
        return {
            "ok": True,
            "stats": stats,
            "total_items": sum(stats.values()),
        }

    async def preload(self) -> dict[str, int]:
        """Warm the search cache from the configured preload selection."""
        search_cfg = self.config.search
        if search_cfg.preload_all:
            return await self.engine.preload_data()
        if search_cfg.preload:
            return await self.engine.preload_data(search_cfg.preload)
        return self.engine.get_cache_stats()

    @staticmethod
    def _error(code: str, message: str) -> dict[str, Any]:
        return {
            "ok": False,
            "error": {
                "code": code,
                "message": message,
            },
        }
