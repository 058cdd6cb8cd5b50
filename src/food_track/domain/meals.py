"""Domain models for meal logging."""

from dataclasses import dataclass, field
from enum import StrEnum

from food_track.domain.nutrition import Food, NutritionTotals


class MealType(StrEnum):
    """Meal slots a user can log, one per type and day."""

    BREAKFAST = "Petit-déjeuner"
    LUNCH = "Déjeuner"
    DINNER = "Dîner"
    SNACK = "Snack"


@dataclass(frozen=True)
class Meal:
    """A named, dated collection of foods consumed together."""

    id: str
    name: str
    date: str
    foods: tuple[Food, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MealSummary:
    """A meal with its computed totals."""

    meal: Meal
    totals: NutritionTotals
    food_count: int
    incomplete_food_ids: list[str]


@dataclass(frozen=True)
class DaySummary:
    """Meals logged for one calendar day with totals and goal progress."""

    day: str
    meals: list[MealSummary]
    totals: NutritionTotals
    calorie_goal: float
    progress: float
    incomplete_food_ids: list[str]
