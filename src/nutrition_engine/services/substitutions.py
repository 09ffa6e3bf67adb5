"""Substitution workflow around the pure matcher."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from nutrition_engine.domain.nutrition import FoodNutrition, Provenance, to_float
from nutrition_engine.domain.quantities import Resolved
from nutrition_engine.domain.substitutions import (
    OriginalFoodLine,
    SubstitutionHistoryEntry,
    SubstitutionResult,
)
from nutrition_engine.services.catalog import CatalogService
from nutrition_engine.services.matching import SubstitutionMatcher
from nutrition_engine.services.quantities import format_amount

_logger = logging.getLogger(__name__)


class SubstitutionHistoryRepository(Protocol):
    """Persistence interface for substitution history."""

    def create_entry(self, entry: SubstitutionHistoryEntry) -> None:
        """Create a history row."""


@dataclass
class SubstitutionService:
    """Matches a replacement food and records what was swapped."""

    matcher: SubstitutionMatcher
    catalog_service: CatalogService
    history_repository: SubstitutionHistoryRepository

    def substitute(
        self,
        student_id: UUID,
        meal_id: UUID,
        original: OriginalFoodLine,
        replacement: FoodNutrition,
    ) -> SubstitutionResult:
        """Compute the replacement quantity and log the substitution."""
        result = self.matcher.match(original, replacement)
        if replacement.provenance == Provenance.EXTERNAL:
            try:
                self.catalog_service.remember_external(replacement)
            except Exception:
                _logger.exception(
                    "Failed to store external food %s in the local catalog",
                    replacement.name,
                )

        entry = SubstitutionHistoryEntry(
            student_id=student_id,
            meal_id=meal_id,
            original_food=original.name or "Alimento original",
            original_amount=_describe_amount(original),
            new_food=replacement.name or "Alimento substituído",
            new_amount=result.formatted_quantity,
            calories_diff=to_float(result.deltas.calories),
        )
        try:
            self.history_repository.create_entry(entry)
        except Exception:
            _logger.exception(
                "Failed to record substitution history for meal %s", meal_id
            )
        return result


def _describe_amount(original: OriginalFoodLine) -> str:
    quantity = original.quantity
    if isinstance(quantity, Resolved):
        return f"{format_amount(quantity.factor)}x"
    if quantity is not None and str(quantity).strip():
        return str(quantity)
    return original.portion_text or "?"
