"""Serving scaling and meal/day aggregation of nutrition values.

Foods carry reference values per 100 g. Scaling turns them into the amounts
actually eaten, and aggregation folds those into meal and day totals. Every
function here is pure: no I/O, no rounding, inputs are never mutated.
"""

import math
from collections.abc import Iterable

from food_track.domain.meals import Meal
from food_track.domain.nutrition import Food, NutritionTotals

REFERENCE_QUANTITY_G = 100.0

_NUTRIENT_FIELDS = ("calories", "proteins", "carbs", "fats")


def nutrition_factor(quantity: float | None = None) -> float:
    """Return the multiplier from reference values to a serving of ``quantity`` g.

    An unset, negative or non-finite quantity falls back to the reference
    quantity. Zero is kept, so a provisional zero serving scales to nothing.
    """
    if not _is_number(quantity):
        return 1.0
    if not math.isfinite(quantity) or quantity < 0:
        return 1.0
    return quantity / REFERENCE_QUANTITY_G


def food_nutrition(food: Food) -> NutritionTotals:
    """Scale a food's reference nutrients to its serving quantity."""
    factor = nutrition_factor(food.quantity)
    return NutritionTotals(
        calories=_amount(food.calories) * factor,
        proteins=_amount(food.proteins) * factor,
        carbs=_amount(food.carbs) * factor,
        fats=_amount(food.fats) * factor,
    )


def foods_totals(foods: Iterable[Food]) -> NutritionTotals:
    """Sum the scaled nutrition of a sequence of foods."""
    total = NutritionTotals.zero()
    for food in foods:
        total = total + food_nutrition(food)
    return total


def meal_totals(meal: Meal) -> NutritionTotals:
    """Return the nutrition of all foods in a meal."""
    return foods_totals(meal.foods)


def daily_totals(meals: Iterable[Meal]) -> NutritionTotals:
    """Return the nutrition summed over meals; filter to one day beforehand."""
    total = NutritionTotals.zero()
    for meal in meals:
        total = total + meal_totals(meal)
    return total


def goal_progress(calories: float, daily_goal: float) -> float:
    """Return calorie intake as a fraction of the goal, clamped to [0, 1]."""
    if not _is_number(daily_goal) or not math.isfinite(daily_goal):
        return 1.0
    if daily_goal <= 0:
        return 1.0
    ratio = _amount(calories) / daily_goal
    return min(max(ratio, 0.0), 1.0)


def has_complete_nutrition(food: Food) -> bool:
    """Return True when all four reference nutrients are present."""
    return all(
        _is_number(value) and math.isfinite(value)
        for value in (getattr(food, name) for name in _NUTRIENT_FIELDS)
    )


def incomplete_food_ids(foods: Iterable[Food]) -> list[str]:
    """Return ids of foods with at least one absent nutrient."""
    return [food.id for food in foods if not has_complete_nutrition(food)]


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _amount(value: object) -> float:
    # Absent, malformed or negative amounts count as zero.
    if not _is_number(value):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return float(value)
