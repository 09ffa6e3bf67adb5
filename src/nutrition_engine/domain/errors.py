"""Errors raised by the nutrition engine."""


class NutritionEngineError(Exception):
    """Base class for engine errors."""


class UnparseableQuantityError(NutritionEngineError):
    """A consumed quantity could not be turned into a scale factor."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Could not resolve quantity {text!r}")
        self.text = text


class InvalidReplacementFoodError(NutritionEngineError):
    """A replacement food cannot be scaled to match a calorie target."""

    def __init__(self, name: str, calories: float) -> None:
        super().__init__(
            f"Replacement food {name!r} has invalid calories per portion: {calories}"
        )
        self.name = name
        self.calories = calories
