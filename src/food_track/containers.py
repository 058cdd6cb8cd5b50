"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from food_track.adapters.memory_kv_store import InMemoryKeyValueStore
from food_track.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from food_track.adapters.supabase_kv_store import SupabaseKeyValueStore
from food_track.config import Settings, require_supabase_credentials
from food_track.services.cache import InMemoryCache
from food_track.services.foods import FoodLookupService
from food_track.services.goals import GoalService
from food_track.services.meals import MealService
from food_track.services.stats import StatsService
from food_track.services.storage import CalorieGoalStore, KeyValueStore, MealStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    food_lookup_service: FoodLookupService
    meal_service: MealService
    goal_service: GoalService
    stats_service: StatsService
    close_resources: Callable[[], Awaitable[None]]


def build_key_value_store(settings: Settings) -> KeyValueStore:
    """Create the key-value store selected by settings."""
    if settings.storage_backend == "supabase":
        url, key = require_supabase_credentials(settings)
        return SupabaseKeyValueStore(
            client=create_client(url, key),
            namespace=settings.storage_namespace,
        )
    return InMemoryKeyValueStore()


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = build_key_value_store(resolved_settings)
    meal_service = MealService(MealStore(store))
    goal_service = GoalService(
        CalorieGoalStore(store, default_goal=resolved_settings.default_calorie_goal)
    )
    off_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.off_base_url,
        user_agent=resolved_settings.off_user_agent,
    )
    food_lookup_service = FoodLookupService(
        client=off_client,
        cache=InMemoryCache(),
        page_size=resolved_settings.off_page_size,
        debug=resolved_settings.debug,
    )
    stats_service = StatsService(meal_service=meal_service, goal_service=goal_service)

    async def close_resources() -> None:
        await off_client.close()

    return AppContainer(
        settings=resolved_settings,
        food_lookup_service=food_lookup_service,
        meal_service=meal_service,
        goal_service=goal_service,
        stats_service=stats_service,
        close_resources=close_resources,
    )
