"""Meal composition and meal log service."""

import logging
import math
from dataclasses import dataclass
from datetime import date
from uuid import uuid4

from food_track.domain.dates import date_key
from food_track.domain.errors import (
    DuplicateMealError,
    EmptyMealError,
    InvalidMealTypeError,
    InvalidQuantityError,
    MealNotFoundError,
    StorageError,
)
from food_track.domain.meals import Meal, MealType
from food_track.domain.nutrition import Food, NutritionTotals
from food_track.services.nutrition import foods_totals
from food_track.services.storage import MealStore

_logger = logging.getLogger(__name__)


def parse_quantity(raw: object) -> float:
    """Parse a serving quantity in grams, accepting a comma decimal separator."""
    value = parse_positive_number(raw)
    if value is None:
        raise InvalidQuantityError(f"Invalid quantity: {raw!r}")
    return value


def parse_positive_number(raw: object) -> float | None:
    """Return ``raw`` as a finite positive float, or None when it is not one."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int | float):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip().replace(",", "."))
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


@dataclass
class MealService:
    """Builds meals from a persisted draft and manages the meal log."""

    store: MealStore

    def get_draft(self) -> list[Food]:
        """Return the foods of the meal being composed."""
        return self.store.get_current_meal_foods()

    def draft_totals(self) -> NutritionTotals:
        """Return the nutrition of the current draft."""
        return foods_totals(self.get_draft())

    def add_to_draft(self, food: Food, quantity: object) -> list[Food]:
        """Add a food with a validated quantity; a food already present is resized."""
        grams = parse_quantity(quantity)
        entry = food.with_quantity(grams)
        foods = self.get_draft()
        if any(existing.id == food.id for existing in foods):
            foods = [entry if existing.id == food.id else existing for existing in foods]
        else:
            foods.append(entry)
        self._save_draft(foods)
        return foods

    def remove_from_draft(self, food_id: str) -> list[Food]:
        """Remove a food from the draft by id."""
        foods = [food for food in self.get_draft() if food.id != food_id]
        self._save_draft(foods)
        return foods

    def clear_draft(self) -> None:
        """Discard the draft."""
        if not self.store.clear_current_meal_foods():
            raise StorageError("Failed to clear the current meal")

    def save_draft(self, meal_type: str, day: date | str) -> Meal:
        """Turn the draft into a logged meal for ``day``."""
        try:
            name = MealType(meal_type).value
        except ValueError as exc:
            raise InvalidMealTypeError(f"Unknown meal type: {meal_type!r}") from exc
        foods = self.get_draft()
        if not foods:
            raise EmptyMealError("Add at least one food to the meal")
        day_key = day if isinstance(day, str) else date_key(day)

        meals = self.store.load_meals()
        if any(meal.date == day_key and meal.name == name for meal in meals):
            raise DuplicateMealError(name, day_key)

        meal = Meal(id=uuid4().hex, name=name, date=day_key, foods=tuple(foods))
        if not self.store.save_meals([*meals, meal]):
            raise StorageError("Failed to save the meal")
        if not self.store.clear_current_meal_foods():
            _logger.warning("Meal %s saved but the draft was not cleared", meal.id)
        _logger.info("Saved meal %s (%s, %s foods)", meal.id, day_key, len(foods))
        return meal

    def list_meals(self) -> list[Meal]:
        """Return every logged meal."""
        return self.store.get_meals()

    def meals_for_day(self, day: date | str) -> list[Meal]:
        """Return meals logged on a calendar day."""
        day_key = day if isinstance(day, str) else date_key(day)
        return [meal for meal in self.store.get_meals() if meal.date == day_key]

    def get_meal(self, meal_id: str) -> Meal:
        """Return a meal by id."""
        for meal in self.store.get_meals():
            if meal.id == meal_id:
                return meal
        raise MealNotFoundError(meal_id)

    def delete_meal(self, meal_id: str) -> None:
        """Delete a meal by id."""
        meals = self.store.load_meals()
        remaining = [meal for meal in meals if meal.id != meal_id]
        if len(remaining) == len(meals):
            raise MealNotFoundError(meal_id)
        if not self.store.save_meals(remaining):
            raise StorageError("Failed to delete the meal")

    def _save_draft(self, foods: list[Food]) -> None:
        if not self.store.save_current_meal_foods(foods):
            raise StorageError("Failed to save the current meal")
