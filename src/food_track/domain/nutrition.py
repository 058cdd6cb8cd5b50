"""Nutrition domain models."""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class NutritionTotals:
    """Absolute nutrient amounts for a serving, meal or day."""

    calories: float
    proteins: float
    carbs: float
    fats: float

    @classmethod
    def zero(cls) -> "NutritionTotals":
        """Return the additive identity."""
        return cls(calories=0.0, proteins=0.0, carbs=0.0, fats=0.0)

    def __add__(self, other: "NutritionTotals") -> "NutritionTotals":
        if not isinstance(other, NutritionTotals):
            return NotImplemented
        return NutritionTotals(
            calories=self.calories + other.calories,
            proteins=self.proteins + other.proteins,
            carbs=self.carbs + other.carbs,
            fats=self.fats + other.fats,
        )


@dataclass(frozen=True)
class Food:
    """A food with reference nutrient values per 100 g."""

    id: str
    name: str
    calories: float | None = None
    proteins: float | None = None
    carbs: float | None = None
    fats: float | None = None
    quantity: float | None = None
    brand: str | None = None
    image_url: str | None = None
    nutriscore: str | None = None

    def with_quantity(self, quantity: float | None) -> "Food":
        """Return a copy of the food with a different serving size."""
        return replace(self, quantity=quantity)
