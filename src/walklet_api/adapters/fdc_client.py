"""USDA FoodData Central search client."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

# Generic reference foods; branded entries rarely match a plain food name.
SEARCH_DATA_TYPES = ["Foundation", "SR Legacy"]

_logger = logging.getLogger(__name__)


class FdcClient(Protocol):
    """Interface for FoodData Central food search."""

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        """Return the raw search payload for a query."""


@dataclass
class HttpxFdcClient(FdcClient):
    """FDC client over a shared httpx session rooted at the API base URL."""

    api_key: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, api_key: str, base_url: str, timeout_seconds: float = 15.0
    ) -> "HttpxFdcClient":
        return cls(
            api_key=api_key,
            http_client=httpx.AsyncClient(
                base_url=base_url,
                timeout=httpx.Timeout(timeout_seconds, connect=5.0),
            ),
        )

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        """POST /foods/search; raises httpx errors on transport or HTTP failure."""
        response = await self.http_client.post(
            "/foods/search",
            params={"api_key": self.api_key},
            json={
                "query": query,
                "pageSize": page_size,
                "dataType": SEARCH_DATA_TYPES,
            },
        )
        response.raise_for_status()
        payload = response.json()
        _logger.debug("FDC search %r returned %s hits", query, payload.get("totalHits"))
        return payload

    async def close(self) -> None:
        await self.http_client.aclose()
