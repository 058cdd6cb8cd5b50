"""Persisted meal log, meal draft and calorie goal on top of a key-value store."""

import logging
import math
from dataclasses import dataclass
from typing import Protocol

from food_track.domain.errors import StorageError
from food_track.domain.meals import Meal
from food_track.domain.nutrition import Food

MEALS_KEY = "meals"
CURRENT_MEAL_KEY = "current_meal_foods"
CALORIE_GOAL_KEY = "daily_calorie_goal"

DEFAULT_CALORIE_GOAL = 2000.0

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Persistence interface for JSON-compatible values."""

    def get(self, key: str) -> object | None:
        """Return the stored value or None when unset."""

    def set(self, key: str, value: object) -> None:
        """Store a value, replacing any previous one."""

    def remove(self, key: str) -> None:
        """Delete a value if present."""


@dataclass
class MealStore:
    """Reads and writes the meal log and the in-progress meal draft."""

    store: KeyValueStore

    def get_meals(self) -> list[Meal]:
        """Return all logged meals, or an empty list when unavailable."""
        try:
            raw = self.store.get(MEALS_KEY)
        except Exception:
            _logger.exception("Failed to load meals")
            return []
        if not isinstance(raw, list):
            return []
        return [meal_from_record(row) for row in raw if isinstance(row, dict)]

    def load_meals(self) -> list[Meal]:
        """Return all logged meals for a read-modify-write of the log.

        Raises StorageError when the backend fails or the stored log holds
        records that cannot be read back, so the caller never rewrites the
        log from a partial view.
        """
        try:
            raw = self.store.get(MEALS_KEY)
        except Exception as exc:
            _logger.exception("Failed to load meals")
            raise StorageError("Failed to load meals") from exc
        if raw is None:
            return []
        if not isinstance(raw, list) or not all(
            _is_meal_record(row) for row in raw
        ):
            raise StorageError("Stored meal log is corrupted")
        return [meal_from_record(row) for row in raw]

    def save_meals(self, meals: list[Meal]) -> bool:
        """Replace the meal log; return False when the write fails."""
        try:
            self.store.set(MEALS_KEY, [meal_to_record(meal) for meal in meals])
        except Exception:
            _logger.exception("Failed to save meals", extra={"count": len(meals)})
            return False
        return True

    def get_current_meal_foods(self) -> list[Food]:
        """Return the foods of the meal being composed."""
        try:
            raw = self.store.get(CURRENT_MEAL_KEY)
        except Exception:
            _logger.exception("Failed to load current meal")
            return []
        if not isinstance(raw, list):
            return []
        return [food_from_record(row) for row in raw if isinstance(row, dict)]

    def save_current_meal_foods(self, foods: list[Food]) -> bool:
        """Persist the meal draft."""
        try:
            self.store.set(CURRENT_MEAL_KEY, [food_to_record(food) for food in foods])
        except Exception:
            _logger.exception("Failed to save current meal")
            return False
        return True

    def clear_current_meal_foods(self) -> bool:
        """Drop the meal draft."""
        try:
            self.store.remove(CURRENT_MEAL_KEY)
        except Exception:
            _logger.exception("Failed to clear current meal")
            return False
        return True


@dataclass
class CalorieGoalStore:
    """Reads and writes the daily calorie goal."""

    store: KeyValueStore
    default_goal: float = DEFAULT_CALORIE_GOAL

    def get_goal(self) -> float:
        """Return the stored goal, or the default when unset or corrupted."""
        try:
            raw = self.store.get(CALORIE_GOAL_KEY)
        except Exception:
            _logger.exception("Failed to load calorie goal")
            return self.default_goal
        value = _to_float(raw)
        if value is None or value <= 0:
            return self.default_goal
        return value

    def save_goal(self, goal: float) -> bool:
        """Persist the goal rounded to whole calories."""
        try:
            self.store.set(CALORIE_GOAL_KEY, round(goal))
        except Exception:
            _logger.exception("Failed to save calorie goal")
            return False
        return True


def food_to_record(food: Food) -> dict[str, object]:
    """Serialize a food for storage."""
    return {
        "id": food.id,
        "name": food.name,
        "brand": food.brand,
        "image_url": food.image_url,
        "nutriscore": food.nutriscore,
        "calories": food.calories,
        "proteins": food.proteins,
        "carbs": food.carbs,
        "fats": food.fats,
        "quantity": food.quantity,
    }


def food_from_record(row: dict[str, object]) -> Food:
    """Build a food from a stored record, dropping malformed numbers."""
    return Food(
        id=str(row.get("id", "")),
        name=str(row.get("name") or ""),
        brand=_to_str(row.get("brand")),
        image_url=_to_str(row.get("image_url")),
        nutriscore=_to_str(row.get("nutriscore")),
        calories=_to_float(row.get("calories")),
        proteins=_to_float(row.get("proteins")),
        carbs=_to_float(row.get("carbs")),
        fats=_to_float(row.get("fats")),
        quantity=_to_float(row.get("quantity")),
    )


def meal_to_record(meal: Meal) -> dict[str, object]:
    """Serialize a meal for storage."""
    return {
        "id": meal.id,
        "name": meal.name,
        "date": meal.date,
        "foods": [food_to_record(food) for food in meal.foods],
    }


def meal_from_record(row: dict[str, object]) -> Meal:
    """Build a meal from a stored record."""
    foods = row.get("foods")
    return Meal(
        id=str(row.get("id", "")),
        name=str(row.get("name") or ""),
        date=str(row.get("date") or ""),
        foods=tuple(
            food_from_record(item)
            for item in (foods if isinstance(foods, list) else [])
            if isinstance(item, dict)
        ),
    )


def _is_meal_record(row: object) -> bool:
    if not isinstance(row, dict):
        return False
    foods = row.get("foods", [])
    return isinstance(foods, list) and all(isinstance(item, dict) for item in foods)


def _to_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _to_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number
