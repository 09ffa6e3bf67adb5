"""Domain models for generated diet plans."""

from dataclasses import dataclass
from enum import Enum

from nutrition_engine.domain.nutrition import MacroProfile


class Sex(str, Enum):
    """Biological sex used by the energy formulas."""

    MALE = "MALE"
    FEMALE = "FEMALE"


class ActivityLevel(str, Enum):
    """Self-reported physical activity level."""

    SEDENTARY = "SEDENTARY"
    LIGHT = "LIGHT"
    MODERATE = "MODERATE"
    ACTIVE = "ACTIVE"
    VERY_ACTIVE = "VERY_ACTIVE"


class Goal(str, Enum):
    """Body composition goal."""

    WEIGHT_LOSS = "WEIGHT_LOSS"
    MAINTENANCE = "MAINTENANCE"
    MUSCLE_GAIN = "MUSCLE_GAIN"


class MealCategory(str, Enum):
    """Kind of meal, used to pick suitable foods."""

    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
    SNACK = "SNACK"


@dataclass(frozen=True)
class PersonProfile:
    """Anthropometric and lifestyle data of the person being planned for."""

    weight_kg: float
    height_cm: float
    age_years: float
    sex: Sex
    activity_level: ActivityLevel
    goal: Goal


@dataclass(frozen=True)
class MealSlot:
    """A meal of the day and its share of the daily calories."""

    name: str
    time_of_day: str
    calorie_ratio: float
    category: MealCategory


@dataclass(frozen=True)
class MacroRatios:
    """Share of calories from each macronutrient."""

    protein: float
    fat: float
    carbs: float


@dataclass(frozen=True)
class EnergyTargets:
    """Daily energy and macro targets."""

    bmr: float
    tdee: float
    target_calories: float
    ratios: MacroRatios
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class GeneratedFoodLine:
    """A food in a generated meal, sized in reference portions."""

    food_id: str | None
    name: str
    portion_text: str
    quantity_factor: float
    formatted_quantity: str
    per_portion: MacroProfile

    @property
    def totals(self) -> MacroProfile:
        """Macros for the whole line."""
        return self.per_portion.scaled(self.quantity_factor).sanitized()


@dataclass(frozen=True)
class GeneratedMeal:
    """A meal holding up to two generated food lines."""

    name: str
    time_of_day: str
    category: MealCategory
    foods: tuple[GeneratedFoodLine, ...]


@dataclass(frozen=True)
class GeneratedMealPlan:
    """A full day of generated meals with actual totals."""

    targets: EnergyTargets
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    meals: tuple[GeneratedMeal, ...]
