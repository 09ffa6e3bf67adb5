"""Food substitution matching.

A replacement food is scaled so its totals stay as close as possible to the
totals of the food it replaces. The four macro dimensions rarely agree on a
single factor, so candidate factors are generated and scored by a strategy.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from nutrition_engine.domain.errors import InvalidReplacementFoodError
from nutrition_engine.domain.nutrition import FoodNutrition, MacroProfile
from nutrition_engine.domain.quantities import require_factor
from nutrition_engine.domain.substitutions import OriginalFoodLine, SubstitutionResult
from nutrition_engine.services.quantities import (
    format_quantity_from_factor,
    resolve_quantity,
)

MIN_FACTOR = 0.1
MAX_FACTOR = 20.0
BASELINE_FACTOR = 1.0


class MatchStrategy(Protocol):
    """Chooses the replacement factor for a set of target totals."""

    def best_factor(self, target: MacroProfile, per_portion: MacroProfile) -> float:
        """Return the factor of ``per_portion`` that best matches ``target``."""


def relative_diff(current: float, target: float, floor: float) -> float:
    """Absolute deviation relative to the target, never dividing by less than floor."""
    return abs(current - target) / max(abs(target), floor)


def candidate_factors(target: MacroProfile, per_portion: MacroProfile) -> list[float]:
    """Single-dimension exact factors, their mean and the baseline factor."""
    pairs = (
        (target.calories, per_portion.calories),
        (target.protein_g, per_portion.protein_g),
        (target.carbs_g, per_portion.carbs_g),
        (target.fat_g, per_portion.fat_g),
    )
    exact: list[float] = []
    for wanted, available in pairs:
        if available <= 0:
            continue
        factor = wanted / available
        if math.isfinite(factor) and factor > 0 and factor not in exact:
            exact.append(factor)
    mean = sum(exact) / len(exact) if exact else BASELINE_FACTOR
    return [*exact, mean, BASELINE_FACTOR]


@dataclass(frozen=True)
class WeightedDeviationStrategy:
    """Scores candidates by a weighted sum of relative macro deviations."""

    weights: MacroProfile = field(
        default_factory=lambda: MacroProfile(
            calories=0.45, protein_g=0.20, carbs_g=0.20, fat_g=0.15
        )
    )
    floors: MacroProfile = field(
        default_factory=lambda: MacroProfile(
            calories=50.0, protein_g=8.0, carbs_g=8.0, fat_g=5.0
        )
    )
    min_factor: float = MIN_FACTOR
    max_factor: float = MAX_FACTOR

    def score(self, totals: MacroProfile, target: MacroProfile) -> float:
        """Weighted relative deviation of ``totals`` from ``target``."""
        return (
            self.weights.calories
            * relative_diff(totals.calories, target.calories, self.floors.calories)
            + self.weights.protein_g
            * relative_diff(totals.protein_g, target.protein_g, self.floors.protein_g)
            + self.weights.carbs_g
            * relative_diff(totals.carbs_g, target.carbs_g, self.floors.carbs_g)
            + self.weights.fat_g
            * relative_diff(totals.fat_g, target.fat_g, self.floors.fat_g)
        )

    def clamp(self, factor: float) -> float:
        """Clamp a factor into the allowed range."""
        return max(self.min_factor, min(factor, self.max_factor))

    def rank(
        self, candidates: Sequence[float], target: MacroProfile, per_portion: MacroProfile
    ) -> list[tuple[float, float]]:
        """Return ``(factor, score)`` pairs for clamped candidates, in input order."""
        ranked = []
        for candidate in candidates:
            factor = self.clamp(candidate)
            ranked.append((factor, self.score(per_portion.scaled(factor), target)))
        return ranked

    def best_factor(self, target: MacroProfile, per_portion: MacroProfile) -> float:
        """Return the lowest scoring candidate; earlier candidates win ties."""
        best_factor = BASELINE_FACTOR
        best_score = math.inf
        for factor, score in self.rank(
            candidate_factors(target, per_portion), target, per_portion
        ):
            if score < best_score:
                best_factor, best_score = factor, score
        return self.clamp(round(best_factor, 2))


def target_totals_for(original: OriginalFoodLine) -> MacroProfile:
    """Totals the replacement has to match.

    Raises UnparseableQuantityError when the original quantity cannot be
    resolved and no explicit totals were supplied.
    """
    if original.target_totals is not None:
        return original.target_totals.sanitized()
    factor = require_factor(resolve_quantity(original.quantity, original.portion_text))
    return original.macros.sanitized().scaled(factor).sanitized()


@dataclass(frozen=True)
class SubstitutionMatcher:
    """Computes how much of a replacement food preserves an original food line."""

    strategy: MatchStrategy = field(default_factory=WeightedDeviationStrategy)

    def match(
        self, original: OriginalFoodLine, replacement: FoodNutrition
    ) -> SubstitutionResult:
        """Match ``replacement`` against ``original``.

        Raises InvalidReplacementFoodError when the replacement has no usable
        calories per portion.
        """
        per_portion = replacement.macros.sanitized()
        if per_portion.calories <= 0:
            raise InvalidReplacementFoodError(
                replacement.name, replacement.macros.calories
            )
        target = target_totals_for(original)
        factor = self.strategy.best_factor(target, per_portion)
        matched = per_portion.scaled(factor).sanitized()
        return SubstitutionResult(
            factor=factor,
            target_totals=target,
            matched_totals=matched,
            formatted_quantity=format_quantity_from_factor(
                factor, replacement.reference_portion_text
            ),
            deltas=matched.minus(target).sanitized(),
        )


def match_substitution(
    original: OriginalFoodLine,
    replacement: FoodNutrition,
    strategy: MatchStrategy | None = None,
) -> SubstitutionResult:
    """Match a replacement food with the default or a given strategy."""
    matcher = SubstitutionMatcher(strategy) if strategy else SubstitutionMatcher()
    return matcher.match(original, replacement)
