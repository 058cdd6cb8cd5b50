"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from food_track.adapters.memory_kv_store import InMemoryKeyValueStore
from food_track.adapters.openfoodfacts_client import OpenFoodFactsClient
from food_track.config import Settings
from food_track.containers import AppContainer
from food_track.domain.meals import Meal
from food_track.domain.nutrition import Food
from food_track.services.cache import InMemoryCache
from food_track.services.foods import FoodLookupService
from food_track.services.goals import GoalService
from food_track.services.meals import MealService
from food_track.services.stats import StatsService
from food_track.services.storage import CalorieGoalStore, KeyValueStore, MealStore


def make_food(  # noqa: PLR0913
    food_id: str = "food-1",
    name: str = "Apple",
    calories: float | None = 52,
    proteins: float | None = 0.3,
    carbs: float | None = 14,
    fats: float | None = 0.2,
    quantity: float | None = None,
) -> Food:
    return Food(
        id=food_id,
        name=name,
        calories=calories,
        proteins=proteins,
        carbs=carbs,
        fats=fats,
        quantity=quantity,
    )


def make_meal(
    foods: list[Food],
    meal_id: str = "meal-1",
    name: str = "Déjeuner",
    day: str = "2024-05-01",
) -> Meal:
    return Meal(id=meal_id, name=name, date=day, foods=tuple(foods))


@dataclass
class FailingKeyValueStore(KeyValueStore):
    """Store whose backend is always unavailable."""

    def get(self, key: str) -> object | None:
        raise RuntimeError("backend down")

    def set(self, key: str, value: object) -> None:
        raise RuntimeError("backend down")

    def remove(self, key: str) -> None:
        raise RuntimeError("backend down")


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Fake Open Food Facts client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "products": [
                {
                    "code": "3017620422003",
                    "product_name_fr": "Pâte à tartiner",
                    "product_name": "Hazelnut spread",
                    "brands": "Ferrero",
                    "nutriscore_grade": "e",
                    "image_url": "https://images.test/nutella.jpg",
                    "nutriments": {
                        "energy-kcal_100g": 539,
                        "proteins_100g": 6.3,
                        "carbohydrates_100g": 57.5,
                        "fat_100g": 30.9,
                    },
                }
            ]
        }
    )
    product_payload: dict[str, object] = field(
        default_factory=lambda: {
            "status": 1,
            "product": {
                "code": "5449000000996",
                "product_name_en": "Cola",
                "nutriments": {
                    "energy-kcal_100g": "42",
                    "carbohydrates_100g": 10.6,
                },
            },
        }
    )
    failures: int = 0
    search_calls: int = 0
    product_calls: int = 0

    async def search_products(
        self, query: str, page_size: int = 10
    ) -> dict[str, object]:
        self.search_calls += 1
        self._maybe_fail()
        return self.search_payload

    async def get_product(self, barcode: str) -> dict[str, object]:
        self.product_calls += 1
        self._maybe_fail()
        return self.product_payload

    def _maybe_fail(self) -> None:
        if self.failures > 0:
            self.failures -= 1
            raise RuntimeError("network unavailable")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storage_backend="memory",
        off_base_url="https://off.test",
        default_calorie_goal=2000,
    )


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def meal_store(kv_store: InMemoryKeyValueStore) -> MealStore:
    return MealStore(kv_store)


@pytest.fixture
def off_client() -> FakeOpenFoodFactsClient:
    return FakeOpenFoodFactsClient()


@pytest.fixture
def container(
    settings: Settings,
    kv_store: InMemoryKeyValueStore,
    off_client: FakeOpenFoodFactsClient,
) -> AppContainer:
    meal_service = MealService(MealStore(kv_store))
    goal_service = GoalService(
        CalorieGoalStore(kv_store, default_goal=settings.default_calorie_goal)
    )
    food_lookup_service = FoodLookupService(
        client=off_client,
        cache=InMemoryCache(),
        retry_delay_seconds=0,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        food_lookup_service=food_lookup_service,
        meal_service=meal_service,
        goal_service=goal_service,
        stats_service=StatsService(meal_service, goal_service),
        close_resources=close_resources,
    )
