"""Daily calorie goal service."""

from dataclasses import dataclass

from food_track.domain.errors import InvalidGoalError, StorageError
from food_track.services.meals import parse_positive_number
from food_track.services.storage import CalorieGoalStore


@dataclass
class GoalService:
    """Service for the daily calorie goal."""

    store: CalorieGoalStore

    def get_goal(self) -> float:
        """Return the goal, or the default when unset."""
        return self.store.get_goal()

    def set_goal(self, raw: object) -> float:
        """Validate and persist a goal; return the stored value."""
        value = parse_positive_number(raw)
        if value is None or round(value) < 1:
            raise InvalidGoalError(f"Invalid calorie goal: {raw!r}")
        if not self.store.save_goal(value):
            raise StorageError("Failed to save the calorie goal")
        return float(round(value))
