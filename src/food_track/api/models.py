"""Pydantic models for API payloads."""

from pydantic import BaseModel, Field

from food_track.domain.nutrition import Food


class FoodPayload(BaseModel):
    """Food as sent by clients, nutrients per 100 g."""

    id: str = Field(min_length=1)
    name: str
    brand: str | None = None
    image_url: str | None = None
    nutriscore: str | None = None
    calories: float | None = None
    proteins: float | None = None
    carbs: float | None = None
    fats: float | None = None
    quantity: float | None = None

    def to_food(self) -> Food:
        """Convert to the domain food."""
        return Food(**self.model_dump())


class DraftFoodRequest(BaseModel):
    """Add a food to the meal being composed."""

    food: FoodPayload
    quantity: float | str = 100


class SaveMealRequest(BaseModel):
    """Save the meal being composed."""

    meal_type: str
    date: str | None = None


class GoalRequest(BaseModel):
    """Update the daily calorie goal."""

    goal: float | str
