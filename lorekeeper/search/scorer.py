"""Substring matching and relevance scoring for catalog items."""

from __future__ import annotations

from lorekeeper.catalog.models import CatalogItem

EXACT_SCORE = 1.0
PREFIX_SCORE = 0.8
CONTAINS_SCORE = 0.6

FIELD_BOOSTS: dict[str, float] = {
    "name": 0.2,
    "index": 0.1,
}


def contains(text: str, query: str) -> bool:
    """Case-insensitive substring test. Empty text or query never matches."""
    if not text or not query:
        return False
    return query.lower() in text.lower()


def score(item: CatalogItem, query: str, matched_field: str) -> float:
    """
    Score how well an item matches a query.

    Exact and prefix tiers compare case-sensitively; the containment tier
    does not, so a query that only matches after lowercasing tops out at
    the containment score plus the field boost.

    Returns:
        Relevance in [0, 1].
    """
    if item.name == query or item.index == query:
        base = EXACT_SCORE
    elif item.name.startswith(query) or item.index.startswith(query):
        base = PREFIX_SCORE
    elif contains(item.name, query) or contains(item.index, query):
        base = CONTAINS_SCORE
    else:
        base = 0.0

    boost = FIELD_BOOSTS.get(matched_field, 0.0)
    # Rounded so 0.6 + 0.2 reports as 0.8.
    return round(min(base + boost, 1.0), 6)
