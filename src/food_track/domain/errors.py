"""Errors raised by the meal composition and goal flows."""


class FoodTrackError(Exception):
    """Base class for application errors."""


class InvalidQuantityError(FoodTrackError, ValueError):
    """A serving quantity is missing, non-numeric or not positive."""


class InvalidGoalError(FoodTrackError, ValueError):
    """A daily calorie goal is non-numeric or not positive."""


class InvalidMealTypeError(FoodTrackError, ValueError):
    """The meal name is not one of the known meal types."""


class EmptyMealError(FoodTrackError, ValueError):
    """A meal was saved without any food."""


class DuplicateMealError(FoodTrackError):
    """A meal of the same type already exists on that day."""

    def __init__(self, meal_type: str, day: str) -> None:
        super().__init__(f"A {meal_type} meal already exists on {day}")
        self.meal_type = meal_type
        self.day = day


class MealNotFoundError(FoodTrackError, LookupError):
    """No meal exists with the requested id."""


class StorageError(FoodTrackError):
    """The persisted store reported a failed write."""


class FoodLookupError(FoodTrackError):
    """The food database answered with a payload that cannot be read."""
