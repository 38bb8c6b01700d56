"""Data models for catalog items and search hits."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

MatchedField = Literal["name", "index"]


@dataclass(frozen=True, slots=True)
class CatalogItem:
    """Lightweight catalog entry as returned by an endpoint listing."""

    index: str
    name: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CatalogItem":
        return cls(
            index=str(data.get("index") or ""),
            name=str(data.get("name") or ""),
            url=str(data.get("url") or ""),
        )

    def to_dict(self, endpoint: str | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "index": self.index,
            "name": self.name,
            "url": self.url,
        }
        if endpoint is not None:
            payload["endpoint"] = endpoint
        return payload


@dataclass(slots=True)
class ItemList:
    """Parsed endpoint listing."""

    count: int = 0
    items: list[CatalogItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ItemList":
        raw_results = data.get("results")
        items: list[CatalogItem] = []
        if isinstance(raw_results, list):
            items = [CatalogItem.from_dict(raw) for raw in raw_results if isinstance(raw, dict)]
        try:
            count = int(data.get("count", 0) or 0)
        except (TypeError, ValueError):
            count = 0
        return cls(count=count, items=items)


@dataclass(slots=True)
class SearchHit:
    """Scored match of a cached item against a query."""

    item: CatalogItem
    matched_field: MatchedField
    relevance_score: float
    endpoint: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "item": self.item.to_dict(self.endpoint),
            "matched_field": self.matched_field,
            "relevance_score": self.relevance_score,
        }
