"""Open Food Facts API client."""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote

import httpx

from food_track.domain.errors import FoodLookupError

PRODUCT_FIELDS = (
    "code,product_name,product_name_fr,product_name_en,brands,nutriments,"
    "image_url,nutriscore_grade"
)


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts API interactions."""

    async def search_products(
        self, query: str, page_size: int = 10
    ) -> dict[str, object]:
        """Search products by free text and return raw API data."""

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product by barcode and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str, user_agent: str) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            user_agent=user_agent,
            http_client=httpx.AsyncClient(),
        )

    async def search_products(
        self, query: str, page_size: int = 10
    ) -> dict[str, object]:
        """Run a full-text product search."""
        response = await self.http_client.get(
            f"{self.base_url}/cgi/search.pl",
            params={
                "search_terms": query,
                "simple": "1",
                "action": "process",
                "json": "1",
                "fields": PRODUCT_FIELDS,
                "page_size": str(page_size),
            },
            headers={"User-Agent": self.user_agent},
            timeout=15,
        )
        response.raise_for_status()
        return _json_object(response)

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Look up a single product by barcode."""
        response = await self.http_client.get(
            f"{self.base_url}/api/v2/product/{quote(barcode, safe='')}.json",
            params={"fields": PRODUCT_FIELDS},
            headers={"User-Agent": self.user_agent},
            timeout=15,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return {"status": 0, "code": barcode}
        response.raise_for_status()
        return _json_object(response)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _json_object(response: httpx.Response) -> dict[str, object]:
    """Decode a JSON object body, failing on HTML error pages or other shapes."""
    try:
        payload = response.json()
    except ValueError as exc:
        raise FoodLookupError(
            f"Non-JSON response from {response.request.url.path}"
        ) from exc
    if not isinstance(payload, dict):
        raise FoodLookupError(
            f"Unexpected {type(payload).__name__} payload from "
            f"{response.request.url.path}"
        )
    return payload
