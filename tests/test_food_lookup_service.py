"""Tests for the food lookup service."""

import asyncio

import pytest

from food_track.domain.errors import FoodLookupError
from food_track.services.cache import InMemoryCache
from food_track.services.foods import (
    UNNAMED_PRODUCT,
    FoodLookupService,
    product_to_food,
)
from tests.conftest import FakeOpenFoodFactsClient


def _service(client: FakeOpenFoodFactsClient) -> FoodLookupService:
    return FoodLookupService(client, InMemoryCache(), retry_delay_seconds=0)


def test_search_maps_products_and_uses_cache() -> None:
    client = FakeOpenFoodFactsClient()
    service = _service(client)

    foods = asyncio.run(service.search("nutella"))

    assert client.search_calls == 1
    food = foods[0]
    assert food.id == "3017620422003"
    assert food.name == "Pâte à tartiner"
    assert food.brand == "Ferrero"
    assert food.nutriscore == "e"
    assert food.calories == 539
    assert food.fats == 30.9
    assert food.quantity == 100

    cached = asyncio.run(service.search("  NUTELLA "))
    assert cached == foods
    assert client.search_calls == 1


def test_blank_search_skips_the_network() -> None:
    client = FakeOpenFoodFactsClient()

    assert asyncio.run(_service(client).search("   ")) == []
    assert client.search_calls == 0


def test_barcode_lookup_coerces_nutrients() -> None:
    client = FakeOpenFoodFactsClient()

    food = asyncio.run(_service(client).get_by_barcode("5449000000996"))

    assert food is not None
    assert food.name == "Cola"
    assert food.calories == 42
    assert food.proteins == 0
    assert food.fats == 0


def test_unknown_barcode_returns_none() -> None:
    client = FakeOpenFoodFactsClient(product_payload={"status": 0})

    assert asyncio.run(_service(client).get_by_barcode("000")) is None


def test_lookup_retries_once_then_raises() -> None:
    client = FakeOpenFoodFactsClient(failures=1)
    service = _service(client)

    assert asyncio.run(service.search("cola"))
    assert client.search_calls == 2

    failing = FakeOpenFoodFactsClient(failures=5)
    with pytest.raises(RuntimeError):
        asyncio.run(_service(failing).get_by_barcode("123"))
    assert failing.product_calls == 2


def test_product_mapping_fallbacks() -> None:
    food = product_to_food({"product_name": "  ", "nutriments": None})

    assert food.name == UNNAMED_PRODUCT
    assert food.id
    assert (food.calories, food.proteins, food.carbs, food.fats) == (0, 0, 0, 0)
    assert food.brand is None


def test_cached_search_results_are_not_shared() -> None:
    client = FakeOpenFoodFactsClient()
    service = _service(client)

    asyncio.run(service.search("nutella")).clear()

    assert len(asyncio.run(service.search("nutella"))) == 1
    assert client.search_calls == 1


def test_unexpected_payload_raises_lookup_error() -> None:
    client = FakeOpenFoodFactsClient(
        product_payload=["status", 1]  # type: ignore[arg-type]
    )

    with pytest.raises(FoodLookupError):
        asyncio.run(_service(client).get_by_barcode("123"))
