"""Fixed set of collections exposed by the upstream catalog."""

from __future__ import annotations

from collections.abc import Iterable

DEFAULT_ENDPOINTS: tuple[str, ...] = (
    "ability-scores",
    "alignments",
    "backgrounds",
    "classes",
    "conditions",
    "damage-types",
    "equipment",
    "equipment-categories",
    "feats",
    "features",
    "languages",
    "magic-items",
    "magic-schools",
    "monsters",
    "proficiencies",
    "races",
    "rule-sections",
    "rules",
    "skills",
    "spells",
    "subclasses",
    "subraces",
    "traits",
    "weapon-properties",
)


class EndpointRegistry:
    """Immutable, ordered registry of valid endpoint names."""

    def __init__(self, endpoints: Iterable[str] | None = None):
        names = [e.strip() for e in (endpoints or ()) if e and e.strip()]
        self._endpoints: tuple[str, ...] = tuple(dict.fromkeys(names)) or DEFAULT_ENDPOINTS
        self._lookup = frozenset(self._endpoints)

    def all_endpoints(self) -> list[str]:
        return list(self._endpoints)

    def is_valid(self, endpoint: str) -> bool:
        return endpoint in self._lookup

    def __len__(self) -> int:
        return len(self._endpoints)

    def __contains__(self, endpoint: object) -> bool:
        return endpoint in self._lookup
