import httpx
import pytest

from lorekeeper.catalog.client import CatalogClient, CatalogError
from lorekeeper.catalog.models import CatalogItem, ItemList
from lorekeeper.catalog.registry import EndpointRegistry
from lorekeeper.config.schema import CatalogConfig
from lorekeeper.search.engine import SearchEngine


class CountingSource:
    def __init__(self, data: dict[str, list[tuple[str, str]]], failing: set[str] | None = None):
        self.data = data
        self.failing = failing or set()
        self.calls: list[str] = []
        self.listings: dict[str, ItemList] = {}

    async def list_items(self, endpoint: str) -> ItemList:
        self.calls.append(endpoint)
        if endpoint in self.failing:
            raise CatalogError(f"{endpoint}: connection refused")
        items = [
            CatalogItem(index=index, name=name, url=f"/api/{endpoint}/{index}")
            for index, name in self.data.get(endpoint, [])
        ]
        listing = ItemList(count=len(items), items=items)
        self.listings[endpoint] = listing
        return listing


SPELLS = [
    ("acid-arrow", "Acid Arrow"),
    ("wall-of-fire", "Wall of Fire"),
    ("fireball", "Fireball"),
    ("fire-bolt", "Fire Bolt"),
    ("delayed-blast-fireball", "Delayed Blast Fireball"),
    ("shield", "Shield"),
]
MONSTERS = [
    ("fire-elemental", "Fire Elemental"),
    ("fire-giant", "Fire Giant"),
    ("goblin", "Goblin"),
]


def _engine(source: CountingSource, endpoints: list[str] | None = None) -> SearchEngine:
    return SearchEngine(source, EndpointRegistry(endpoints or ["spells", "monsters"]))


@pytest.mark.asyncio
async def test_search_in_endpoint_ranks_by_relevance() -> None:
    engine = _engine(CountingSource({"spells": SPELLS}))

    hits = await engine.search_in_endpoint("Fire", "spells")

    assert [hit.item.index for hit in hits] == [
        "fireball",
        "fire-bolt",
        "wall-of-fire",
        "delayed-blast-fireball",
    ]
    assert [hit.relevance_score for hit in hits] == [1.0, 1.0, 0.8, 0.8]
    assert all(hit.endpoint == "spells" for hit in hits)
    assert all(hit.matched_field == "name" for hit in hits)


@pytest.mark.asyncio
async def test_name_takes_precedence_over_index() -> None:
    engine = _engine(CountingSource({"spells": [("fireball", "Fireball")]}))

    hits = await engine.search_in_endpoint("fire", "spells")

    assert len(hits) == 1
    assert hits[0].matched_field == "name"


@pytest.mark.asyncio
async def test_index_only_match_is_tagged_index() -> None:
    engine = _engine(CountingSource({"spells": [("magic-missile", "Magic Missile")]}))

    hits = await engine.search_in_endpoint("magic-m", "spells")

    assert len(hits) == 1
    assert hits[0].matched_field == "index"
    assert hits[0].relevance_score == 0.9


@pytest.mark.asyncio
async def test_hits_share_cached_items() -> None:
    source = CountingSource({"spells": SPELLS})
    engine = _engine(source)

    hits = await engine.search_in_endpoint("Shield", "spells")

    assert hits[0].item is source.listings["spells"].items[5]


@pytest.mark.asyncio
async def test_search_in_endpoint_truncates_to_max_results() -> None:
    engine = _engine(CountingSource({"spells": SPELLS}))

    hits = await engine.search_in_endpoint("fire", "spells", max_results=2)

    assert len(hits) == 2
    scores = [hit.relevance_score for hit in hits]
    assert scores == sorted(scores, reverse=True)


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [0, -1, -50])
async def test_non_positive_limit_returns_nothing(limit: int) -> None:
    engine = _engine(CountingSource({"spells": SPELLS, "monsters": MONSTERS}))

    assert await engine.search_in_endpoint("fire", "spells", max_results=limit) == []
    assert await engine.search("fire", max_results=limit) == []


@pytest.mark.asyncio
async def test_equal_scores_keep_upstream_order() -> None:
    items = [("b-fire", "B fire"), ("a-fire", "A fire"), ("c-fire", "C fire")]
    engine = _engine(CountingSource({"spells": items}))

    hits = await engine.search_in_endpoint("fire", "spells")

    assert [hit.item.index for hit in hits] == ["b-fire", "a-fire", "c-fire"]


@pytest.mark.asyncio
async def test_search_without_endpoints_uses_registry() -> None:
    source = CountingSource({"spells": SPELLS, "monsters": MONSTERS})
    engine = _engine(source)

    hits = await engine.search("Fire")

    assert source.calls == ["spells", "monsters"]
    assert {hit.endpoint for hit in hits} == {"spells", "monsters"}
    assert [hit.relevance_score for hit in hits][:4] == [1.0, 1.0, 1.0, 1.0]
    # Ties across endpoints keep endpoint order.
    assert [hit.item.index for hit in hits[:4]] == [
        "fireball",
        "fire-bolt",
        "fire-elemental",
        "fire-giant",
    ]


@pytest.mark.asyncio
async def test_search_truncates_each_endpoint_before_merge(monkeypatch) -> None:
    data = {
        "a": [(f"fire-a{i}", f"Fire A{i}") for i in range(5)],
        "b": [(f"fire-b{i}", f"Fire B{i}") for i in range(5)],
    }
    engine = _engine(CountingSource(data), ["a", "b"])
    per_endpoint: dict[str, int] = {}
    original = engine.search_in_endpoint

    async def spy(query, endpoint, max_results=100):
        hits = await original(query, endpoint, max_results)
        per_endpoint[endpoint] = len(hits)
        return hits

    monkeypatch.setattr(engine, "search_in_endpoint", spy)

    hits = await engine.search("fire", ["a", "b"], max_results=3)

    assert per_endpoint == {"a": 3, "b": 3}
    assert len(hits) == 3


@pytest.mark.asyncio
async def test_failing_endpoint_does_not_abort_search() -> None:
    source = CountingSource({"spells": SPELLS}, failing={"monsters"})
    engine = _engine(source)

    hits = await engine.search("Fire", ["monsters", "spells"])

    assert {hit.endpoint for hit in hits} == {"spells"}
    assert "monsters" not in engine.get_cache_stats()


@pytest.mark.asyncio
async def test_empty_query_matches_nothing() -> None:
    engine = _engine(CountingSource({"spells": SPELLS}))

    assert await engine.search("", ["spells"]) == []


@pytest.mark.asyncio
async def test_preload_then_stats_reports_upstream_counts() -> None:
    source = CountingSource({"spells": SPELLS, "monsters": MONSTERS}, failing={"broken"})
    engine = _engine(source, ["spells", "monsters", "broken"])

    await engine.preload_data(["spells", "broken"])

    assert engine.get_cache_stats() == {"spells": len(SPELLS)}


@pytest.mark.asyncio
async def test_clear_cache_triggers_refetch_on_next_search() -> None:
    source = CountingSource({"spells": SPELLS})
    engine = _engine(source)

    await engine.search("fire", ["spells"])
    await engine.search("fire", ["spells"])
    assert source.calls == ["spells"]

    engine.clear_cache()
    await engine.search("fire", ["spells"])
    assert source.calls == ["spells", "spells"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "monsters_body",
    [
        b'{"count": 1, "results": [{"name": "\xff\xfe"}]}',
        b"\xff\xfe\x00",
    ],
)
async def test_badly_encoded_endpoint_degrades_to_no_hits(monkeypatch, monsters_body: bytes) -> None:
    spells = b'{"count": 1, "results": [{"index": "fireball", "name": "Fireball", "url": "/api/spells/fireball"}]}'

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/monsters"):
            return httpx.Response(200, content=monsters_body)
        return httpx.Response(200, content=spells)

    real_client = httpx.AsyncClient
    monkeypatch.setattr(
        "lorekeeper.catalog.client.httpx.AsyncClient",
        lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
    )
    client = CatalogClient(CatalogConfig(base_url="https://catalog.example/api"))
    engine = SearchEngine(client, client.registry)

    hits = await engine.search("Fire", ["monsters", "spells"])

    assert [hit.item.index for hit in hits] == ["fireball"]
    assert engine.get_cache_stats() == {"spells": 1}
