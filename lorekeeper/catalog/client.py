"""HTTP client for the upstream reference-data catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from lorekeeper.catalog.models import ItemList
from lorekeeper.catalog.registry import EndpointRegistry

if TYPE_CHECKING:
    from lorekeeper.config.schema import CatalogConfig


class CatalogError(Exception):
    """Raised when the upstream catalog cannot be fetched or parsed."""


class InvalidEndpointError(CatalogError):
    """Raised for endpoint names outside the registry."""


class CatalogClient:
    """Fetch endpoint listings and item detail records."""

    def __init__(
        self,
        config: "CatalogConfig | None" = None,
        registry: EndpointRegistry | None = None,
    ):
        from lorekeeper.config.schema import CatalogConfig

        self.config = config or CatalogConfig()
        self.registry = registry or EndpointRegistry(self.config.endpoints)

    @property
    def base_url(self) -> str:
        return self.config.base_url.rstrip("/")

    async def list_items(self, endpoint: str) -> ItemList:
        """Fetch the item listing for an endpoint."""
        self._check_endpoint(endpoint)
        payload = await self._get_json(f"{self.base_url}/{endpoint}", label=endpoint)
        if not isinstance(payload, dict):
            raise CatalogError(f"{endpoint}: expected a JSON object")
        return ItemList.from_dict(payload)

    async def get_item_detail(self, endpoint: str, index: str) -> dict[str, Any]:
        """Fetch the raw detail record for one item."""
        self._check_endpoint(endpoint)
        label = f"{endpoint}/{index}"
        if index in (".", ".."):
            raise CatalogError(f"{label}: invalid index")
        url = f"{self.base_url}/{endpoint}/{quote(index, safe='')}"
        payload = await self._get_json(url, label=label)
        if not isinstance(payload, dict):
            raise CatalogError(f"{label}: expected a JSON object")
        return payload

    def _check_endpoint(self, endpoint: str) -> None:
        if not self.registry.is_valid(endpoint):
            raise InvalidEndpointError(f"Invalid endpoint: {endpoint}")

    async def _get_json(self, url: str, *, label: str) -> Any:
        # ValueError covers JSONDecodeError and bodies that are not valid UTF-8.
        try:
            async with httpx.AsyncClient(follow_redirects=True) as client:
                response = await client.get(
                    url,
                    headers={
                        "Accept": "application/json",
                        "User-Agent": self.config.user_agent,
                    },
                    timeout=self.config.timeout,
                )
                response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            raise CatalogError(f"{label}: {e}") from e
