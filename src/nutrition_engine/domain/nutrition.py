"""Nutrition domain models."""

import math
from dataclasses import dataclass
from enum import Enum


def to_float(value: object, default: float = 0.0) -> float:
    """Coerce a value to a finite float, falling back to a default."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.replace(",", ".").strip())
        except ValueError:
            return default
    else:
        return default
    return number if math.isfinite(number) else default


@dataclass(frozen=True)
class MacroProfile:
    """Calories and macronutrients, per portion or as totals."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float

    @classmethod
    def zero(cls) -> "MacroProfile":
        """Return an empty profile."""
        return cls(0.0, 0.0, 0.0, 0.0)

    def scaled(self, factor: float) -> "MacroProfile":
        """Return the profile multiplied by a scale factor."""
        return MacroProfile(
            calories=self.calories * factor,
            protein_g=self.protein_g * factor,
            carbs_g=self.carbs_g * factor,
            fat_g=self.fat_g * factor,
        )

    def plus(self, other: "MacroProfile") -> "MacroProfile":
        """Return the element-wise sum with another profile."""
        return MacroProfile(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fat_g=self.fat_g + other.fat_g,
        )

    def minus(self, other: "MacroProfile") -> "MacroProfile":
        """Return the element-wise difference with another profile."""
        return MacroProfile(
            calories=self.calories - other.calories,
            protein_g=self.protein_g - other.protein_g,
            carbs_g=self.carbs_g - other.carbs_g,
            fat_g=self.fat_g - other.fat_g,
        )

    def sanitized(self) -> "MacroProfile":
        """Return a copy with non-finite values replaced by zero."""
        return MacroProfile(
            calories=to_float(self.calories),
            protein_g=to_float(self.protein_g),
            carbs_g=to_float(self.carbs_g),
            fat_g=to_float(self.fat_g),
        )

    def rounded(self, digits: int = 1) -> "MacroProfile":
        """Return a copy rounded for display or persistence."""
        return MacroProfile(
            calories=round(self.calories, digits),
            protein_g=round(self.protein_g, digits),
            carbs_g=round(self.carbs_g, digits),
            fat_g=round(self.fat_g, digits),
        )


class Provenance(str, Enum):
    """Where a catalog food came from."""

    LOCAL = "local"
    EXTERNAL = "external"


@dataclass(frozen=True)
class FoodNutrition:
    """A catalog food with macros per one reference portion."""

    name: str
    reference_portion_text: str
    macros: MacroProfile
    provenance: Provenance = Provenance.LOCAL
    food_id: str | None = None


@dataclass(frozen=True)
class ReferencePortion:
    """Parsed reference portion of a food."""

    base_amount: float = 1.0
    unit: str = "unidade"
    has_numeric_base: bool = False
