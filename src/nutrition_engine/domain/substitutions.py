"""Domain models for food substitution."""

from dataclasses import dataclass
from uuid import UUID

from nutrition_engine.domain.nutrition import MacroProfile
from nutrition_engine.domain.quantities import ConsumedQuantity


@dataclass(frozen=True)
class OriginalFoodLine:
    """The food line being replaced in a meal.

    ``target_totals`` takes precedence over ``macros`` scaled by ``quantity``.
    """

    macros: MacroProfile
    quantity: ConsumedQuantity | None = None
    portion_text: str = "100g"
    target_totals: MacroProfile | None = None
    name: str = ""


@dataclass(frozen=True)
class SubstitutionResult:
    """Outcome of matching a replacement food against a target."""

    factor: float
    target_totals: MacroProfile
    matched_totals: MacroProfile
    formatted_quantity: str
    deltas: MacroProfile


@dataclass(frozen=True)
class SubstitutionHistoryEntry:
    """Audit record of a performed substitution."""

    student_id: UUID
    meal_id: UUID
    original_food: str
    original_amount: str
    new_food: str
    new_amount: str
    calories_diff: float
