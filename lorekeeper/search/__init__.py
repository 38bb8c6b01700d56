"""Search and cache subsystem."""

from lorekeeper.search.cache import CacheStore, ItemSource
from lorekeeper.search.engine import DEFAULT_MAX_RESULTS, SearchEngine
from lorekeeper.search.scorer import contains, score

__all__ = [
    "CacheStore",
    "DEFAULT_MAX_RESULTS",
    "ItemSource",
    "SearchEngine",
    "contains",
    "score",
]
