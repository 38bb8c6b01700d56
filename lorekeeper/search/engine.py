"""Search across cached catalog endpoints."""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from lorekeeper.catalog.models import CatalogItem, MatchedField, SearchHit
from lorekeeper.catalog.registry import EndpointRegistry
from lorekeeper.search.cache import CacheStore, ItemSource
from lorekeeper.search.scorer import contains, score

DEFAULT_MAX_RESULTS = 100


def _by_relevance(hits: list[SearchHit], max_results: int) -> list[SearchHit]:
    # Stable sort: ties keep upstream list order, then endpoint order.
    ranked = sorted(hits, key=lambda hit: hit.relevance_score, reverse=True)
    return ranked[: max(max_results, 0)]


class SearchEngine:
    """Fetch-or-cache each endpoint, score matching items and rank them."""

    def __init__(
        self,
        source: ItemSource,
        registry: EndpointRegistry | None = None,
        cache: CacheStore | None = None,
    ):
        self.registry = registry or EndpointRegistry()
        self.cache = cache or CacheStore(source, self.registry)

    async def search(
        self,
        query: str,
        endpoints: Iterable[str] | None = None,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> list[SearchHit]:
        """
        Search several endpoints and merge the results.

        Each endpoint is cut to max_results before the global sort, so a
        single endpoint never contributes more than max_results candidates.
        """
        targets = list(endpoints or ()) or self.registry.all_endpoints()

        hits: list[SearchHit] = []
        for endpoint in targets:
            hits.extend(await self.search_in_endpoint(query, endpoint, max_results))

        results = _by_relevance(hits, max_results)
        logger.debug(
            "Search {!r} over {} endpoints: {} candidates, {} returned",
            query,
            len(targets),
            len(hits),
            len(results),
        )
        return results

    async def search_in_endpoint(
        self,
        query: str,
        endpoint: str,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> list[SearchHit]:
        items = await self.cache.get_or_fetch(endpoint)
        hits = [
            hit
            for hit in (self._match_item(item, query, endpoint) for item in items)
            if hit is not None
        ]
        return _by_relevance(hits, max_results)

    async def preload_data(self, endpoints: Iterable[str] | None = None) -> dict[str, int]:
        return await self.cache.preload(endpoints)

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_cache_stats(self) -> dict[str, int]:
        return self.cache.stats()

    @staticmethod
    def _match_item(item: CatalogItem, query: str, endpoint: str) -> SearchHit | None:
        matched_field: MatchedField
        if contains(item.name, query):
            matched_field = "name"
        elif contains(item.index, query):
            matched_field = "index"
        else:
            return None

        return SearchHit(
            item=item,
            matched_field=matched_field,
            relevance_score=score(item, query, matched_field),
            endpoint=endpoint,
        )
