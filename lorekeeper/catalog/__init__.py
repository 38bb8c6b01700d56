"""Upstream catalog access: item models, endpoint registry and HTTP client."""

from lorekeeper.catalog.client import CatalogClient, CatalogError, InvalidEndpointError
from lorekeeper.catalog.models import CatalogItem, ItemList, MatchedField, SearchHit
from lorekeeper.catalog.registry import DEFAULT_ENDPOINTS, EndpointRegistry

__all__ = [
    "CatalogClient",
    "CatalogError",
    "CatalogItem",
    "DEFAULT_ENDPOINTS",
    "EndpointRegistry",
    "InvalidEndpointError",
    "ItemList",
    "MatchedField",
    "SearchHit",
]
