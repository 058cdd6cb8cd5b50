"""Day and meal summaries against the calorie goal."""

from dataclasses import dataclass
from datetime import date

from food_track.domain.dates import date_key
from food_track.domain.meals import DaySummary, Meal, MealSummary
from food_track.services.goals import GoalService
from food_track.services.meals import MealService
from food_track.services.nutrition import (
    daily_totals,
    goal_progress,
    incomplete_food_ids,
    meal_totals,
)


@dataclass
class StatsService:
    """Service for computing meal and day totals."""

    meal_service: MealService
    goal_service: GoalService

    def get_day(self, day: date | str) -> DaySummary:
        """Return the meals, totals and goal progress for a day."""
        day_key = day if isinstance(day, str) else date_key(day)
        meals = self.meal_service.meals_for_day(day_key)
        summaries = [summarize_meal(meal) for meal in meals]
        totals = daily_totals(meals)
        goal = self.goal_service.get_goal()
        return DaySummary(
            day=day_key,
            meals=summaries,
            totals=totals,
            calorie_goal=goal,
            progress=goal_progress(totals.calories, goal),
            incomplete_food_ids=[
                food_id
                for summary in summaries
                for food_id in summary.incomplete_food_ids
            ],
        )

    def get_meal_summary(self, meal_id: str) -> MealSummary:
        """Return a logged meal with its totals."""
        return summarize_meal(self.meal_service.get_meal(meal_id))


def summarize_meal(meal: Meal) -> MealSummary:
    """Compute the totals of a meal."""
    return MealSummary(
        meal=meal,
        totals=meal_totals(meal),
        food_count=len(meal.foods),
        incomplete_food_ids=incomplete_food_ids(meal.foods),
    )
