"""Food lookup service backed by Open Food Facts."""

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import uuid4

from food_track.adapters.openfoodfacts_client import OpenFoodFactsClient
from food_track.domain.errors import FoodLookupError
from food_track.domain.nutrition import Food
from food_track.services.cache import Cache
from food_track.services.nutrition import REFERENCE_QUANTITY_G

_NUTRIMENT_KEYS = {
    "calories": "energy-kcal_100g",
    "proteins": "proteins_100g",
    "carbs": "carbohydrates_100g",
    "fats": "fat_100g",
}

UNNAMED_PRODUCT = "Unnamed product"

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class FoodLookupService:
    """Searches foods by text or barcode, with caching."""

    client: OpenFoodFactsClient
    cache: Cache
    page_size: int = 10
    search_ttl_seconds: int = 3600
    product_ttl_seconds: int = 86400
    debug: bool = False
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str) -> list[Food]:
        """Return foods matching a free-text query."""
        trimmed = query.strip()
        if not trimmed:
            return []
        cache_key = f"off:search:{trimmed.lower()}:{self.page_size}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return list(cached)

        payload = await self._call_with_retry(
            lambda: self.client.search_products(trimmed, page_size=self.page_size),
            action="search",
        )
        products = payload.get("products")
        foods = [
            product_to_food(product)
            for product in (products if isinstance(products, list) else [])
            if isinstance(product, dict)
        ]
        self.cache.set(cache_key, list(foods), ttl_seconds=self.search_ttl_seconds)
        if self.debug:
            _logger.info("Food search: query=%s results=%s", trimmed, len(foods))
        return foods

    async def get_by_barcode(self, barcode: str) -> Food | None:
        """Return the food for a barcode, or None when the product is unknown."""
        code = barcode.strip()
        if not code:
            return None
        cache_key = f"off:product:{code}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, Food):
            return cached

        payload = await self._call_with_retry(
            lambda: self.client.get_product(code),
            action=f"get_product:{code}",
        )
        product = payload.get("product")
        if payload.get("status") != 1 or not isinstance(product, dict):
            if self.debug:
                _logger.info("Barcode not found: %s", code)
            return None
        food = product_to_food(product)
        self.cache.set(cache_key, food, ttl_seconds=self.product_ttl_seconds)
        return food

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                payload = await func()
                if not isinstance(payload, dict):
                    raise FoodLookupError(f"Unexpected payload for {action}")
                return payload
            except Exception as exc:
                attempt += 1
                if self.debug:
                    _logger.warning(
                        "Food lookup %s failed (attempt %s/%s, status=%s): %s",
                        action,
                        attempt,
                        self.retry_attempts + 1,
                        _status_code_from_exception(exc),
                        exc,
                    )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def product_to_food(product: dict[str, object]) -> Food:
    """Map an Open Food Facts product to a food with per-100 g values."""
    nutriments = product.get("nutriments")
    if not isinstance(nutriments, dict):
        nutriments = {}
    code = product.get("code")
    return Food(
        id=str(code) if code else uuid4().hex,
        name=_product_name(product),
        brand=_optional_str(product.get("brands")),
        image_url=_optional_str(product.get("image_url")),
        nutriscore=_optional_str(product.get("nutriscore_grade")),
        calories=_nutriment(nutriments, "calories"),
        proteins=_nutriment(nutriments, "proteins"),
        carbs=_nutriment(nutriments, "carbs"),
        fats=_nutriment(nutriments, "fats"),
        quantity=REFERENCE_QUANTITY_G,
    )


def _product_name(product: dict[str, object]) -> str:
    for key in ("product_name_fr", "product_name_en", "product_name"):
        value = product.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return UNNAMED_PRODUCT


def _nutriment(nutriments: dict[str, object], field: str) -> float:
    value = nutriments.get(_NUTRIMENT_KEYS[field])
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
