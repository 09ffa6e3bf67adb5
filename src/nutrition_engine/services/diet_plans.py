"""Daily diet plan generation."""

import logging
import math
import random
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from nutrition_engine.domain.nutrition import FoodNutrition, MacroProfile, to_float
from nutrition_engine.domain.plans import (
    EnergyTargets,
    GeneratedFoodLine,
    GeneratedMeal,
    GeneratedMealPlan,
    MealCategory,
    MealSlot,
    PersonProfile,
)
from nutrition_engine.services.energy import calculate_energy_targets
from nutrition_engine.services.portions import DEFAULT_PORTION, normalize_food_name
from nutrition_engine.services.quantities import format_quantity_from_factor

_logger = logging.getLogger(__name__)

TOP_CANDIDATES = 5
SOURCE_CALORIE_SHARE = 0.4
MIN_STAPLE_POOL = 2
QUANTITY_STEP = 0.5
MIN_QUANTITY = 0.5

DEFAULT_MEAL_SLOTS = (
    MealSlot("Café da Manhã", "07:00", 0.25, MealCategory.BREAKFAST),
    MealSlot("Lanche da Manhã", "10:00", 0.10, MealCategory.SNACK),
    MealSlot("Almoço", "13:00", 0.30, MealCategory.LUNCH),
    MealSlot("Lanche da Tarde", "16:00", 0.10, MealCategory.SNACK),
    MealSlot("Jantar", "19:00", 0.20, MealCategory.DINNER),
    MealSlot("Ceia", "22:00", 0.05, MealCategory.SNACK),
)

_MAIN_MEAL_KEYWORDS = (
    "arroz",
    "feijao",
    "frango",
    "carne",
    "patinho",
    "file",
    "peixe",
    "tilapia",
    "salmao",
    "atum",
    "ovo",
    "batata",
    "mandioca",
    "macarrao",
    "lentilha",
    "grao de bico",
    "quinoa",
    "abobora",
    "cenoura",
    "brocolis",
    "legume",
    "salada",
    "azeite",
)

CATEGORY_KEYWORDS: dict[MealCategory, tuple[str, ...]] = {
    MealCategory.BREAKFAST: (
        "ovo",
        "aveia",
        "banana",
        "pao",
        "tapioca",
        "cuscuz",
        "iogurte",
        "leite",
        "queijo",
        "requeijao",
        "granola",
        "mamao",
        "maca",
        "fruta",
        "cafe",
        "whey",
    ),
    MealCategory.LUNCH: _MAIN_MEAL_KEYWORDS,
    MealCategory.DINNER: _MAIN_MEAL_KEYWORDS,
    MealCategory.SNACK: (
        "banana",
        "maca",
        "pera",
        "uva",
        "fruta",
        "iogurte",
        "leite",
        "aveia",
        "granola",
        "amendoim",
        "castanha",
        "tapioca",
        "pao",
        "queijo",
        "ovo",
        "whey",
    ),
}

STAPLE_KEYWORDS: dict[MealCategory, tuple[str, ...]] = {
    MealCategory.BREAKFAST: (
        "ovo",
        "aveia",
        "banana",
        "pao",
        "tapioca",
        "iogurte",
        "maca",
        "queijo",
    ),
    MealCategory.LUNCH: (
        "arroz",
        "feijao",
        "frango",
        "carne",
        "batata",
        "brocolis",
        "azeite",
        "ovo",
        "salada",
        "peixe",
    ),
    MealCategory.DINNER: (
        "arroz",
        "feijao",
        "frango",
        "carne",
        "batata",
        "brocolis",
        "azeite",
        "ovo",
        "salada",
        "peixe",
    ),
    MealCategory.SNACK: (
        "banana",
        "aveia",
        "iogurte",
        "amendoim",
        "maca",
        "tapioca",
        "pao",
        "ovo",
        "whey",
    ),
}


def sanitize_catalog(foods: Iterable[FoodNutrition]) -> list[FoodNutrition]:
    """Drop unnamed foods and foods without positive, finite calories."""
    sanitized = []
    for food in foods:
        if not food.name or not food.name.strip():
            continue
        macros = food.macros.sanitized()
        if macros.calories <= 0:
            continue
        portion_text = food.reference_portion_text or DEFAULT_PORTION
        if macros != food.macros or portion_text != food.reference_portion_text:
            food = FoodNutrition(
                name=food.name,
                reference_portion_text=portion_text,
                macros=macros,
                provenance=food.provenance,
                food_id=food.food_id,
            )
        sanitized.append(food)
    return sanitized


def _matching(
    foods: Sequence[FoodNutrition], keywords: Sequence[str]
) -> list[FoodNutrition]:
    return [
        food
        for food in foods
        if any(keyword in normalize_food_name(food.name) for keyword in keywords)
    ]


def candidate_pool(
    foods: Sequence[FoodNutrition], category: MealCategory
) -> list[FoodNutrition]:
    """Foods suited to a meal category, preferring its staples.

    Falls back from staples to the category subset, and from the category
    subset to the whole catalog, instead of returning an empty pool.
    """
    category_pool = _matching(foods, CATEGORY_KEYWORDS[category])
    if not category_pool:
        if foods:
            _logger.info(
                "No %s foods in catalog of %s, using whole catalog",
                category.value,
                len(foods),
            )
        category_pool = list(foods)

    staples = _matching(category_pool, STAPLE_KEYWORDS[category])
    if len(staples) >= MIN_STAPLE_POOL or not category_pool:
        return staples or category_pool
    _logger.info(
        "Staple pool for %s has %s foods, using category pool of %s",
        category.value,
        len(staples),
        len(category_pool),
    )
    return category_pool


def pick_from_top(
    items: Sequence[FoodNutrition],
    score: Callable[[FoodNutrition], float],
    rng: random.Random,
    top: int = TOP_CANDIDATES,
) -> FoodNutrition | None:
    """Pick uniformly among the ``top`` highest scoring items."""
    if not items:
        return None
    ranked = sorted(items, key=score, reverse=True)[:top]
    return rng.choice(ranked)


def round_quantity(quantity: float) -> float:
    """Round to the nearest half portion, never below half a portion."""
    stepped = math.floor(to_float(quantity) / QUANTITY_STEP + 0.5) * QUANTITY_STEP
    return max(MIN_QUANTITY, stepped)


def _food_line(food: FoodNutrition, calories: float) -> GeneratedFoodLine:
    quantity = round_quantity(calories / food.macros.calories)
    return GeneratedFoodLine(
        food_id=food.food_id,
        name=food.name,
        portion_text=food.reference_portion_text,
        quantity_factor=quantity,
        formatted_quantity=format_quantity_from_factor(
            quantity, food.reference_portion_text
        ),
        per_portion=food.macros,
    )


def _round_total(value: float) -> float:
    return float(math.floor(to_float(value) + 0.5))


@dataclass
class DietPlanGenerator:
    """Builds a daily meal plan from a person's profile and a food catalog."""

    rng: random.Random = field(default_factory=random.Random)
    slots: tuple[MealSlot, ...] = DEFAULT_MEAL_SLOTS
    debug: bool = False

    def generate(
        self, profile: PersonProfile, catalog: Iterable[FoodNutrition]
    ) -> GeneratedMealPlan:
        """Generate a plan; totals are the sum of the generated food lines."""
        targets = calculate_energy_targets(profile)
        foods = sanitize_catalog(catalog)
        meals = tuple(
            self._build_meal(slot, targets.target_calories * slot.calorie_ratio, foods)
            for slot in self.slots
        )
        return _assemble(targets, meals)

    def _build_meal(
        self, slot: MealSlot, meal_calories: float, foods: Sequence[FoodNutrition]
    ) -> GeneratedMeal:
        lines: list[GeneratedFoodLine] = []
        candidates = candidate_pool(foods, slot.category)
        source_calories = meal_calories * SOURCE_CALORIE_SHARE

        protein_source = pick_from_top(
            candidates, lambda food: food.macros.protein_g, self.rng
        )
        if protein_source is not None:
            lines.append(_food_line(protein_source, source_calories))

        carb_candidates = [food for food in candidates if food != protein_source]
        carb_source = pick_from_top(
            carb_candidates, lambda food: food.macros.carbs_g, self.rng
        )
        if carb_source is not None:
            lines.append(_food_line(carb_source, source_calories))

        if self.debug:
            _logger.info(
                "Generated %s: calories=%.1f foods=%s",
                slot.name,
                meal_calories,
                [line.name for line in lines],
            )
        return GeneratedMeal(
            name=slot.name,
            time_of_day=slot.time_of_day,
            category=slot.category,
            foods=tuple(lines),
        )


def _assemble(
    targets: EnergyTargets, meals: tuple[GeneratedMeal, ...]
) -> GeneratedMealPlan:
    total = MacroProfile.zero()
    for meal in meals:
        for line in meal.foods:
            total = total.plus(line.totals)
    return GeneratedMealPlan(
        targets=targets,
        total_calories=_round_total(total.calories),
        total_protein=_round_total(total.protein_g),
        total_carbs=_round_total(total.carbs_g),
        total_fat=_round_total(total.fat_g),
        meals=meals,
    )


def generate_diet_plan(
    profile: PersonProfile,
    catalog: Iterable[FoodNutrition],
    rng: random.Random | None = None,
    seed: int | None = None,
) -> GeneratedMealPlan:
    """Generate a plan, seeding the food choice when ``seed`` is given."""
    generator = DietPlanGenerator(rng=rng or random.Random(seed))
    return generator.generate(profile, catalog)
