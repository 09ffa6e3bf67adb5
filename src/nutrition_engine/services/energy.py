"""Energy expenditure and macro target calculations."""

from nutrition_engine.domain.plans import (
    ActivityLevel,
    EnergyTargets,
    Goal,
    MacroRatios,
    PersonProfile,
    Sex,
)

KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_CARBS = 4
KCAL_PER_GRAM_FAT = 9

ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

GOAL_CALORIE_ADJUSTMENTS = {
    Goal.WEIGHT_LOSS: -500.0,
    Goal.MAINTENANCE: 0.0,
    Goal.MUSCLE_GAIN: 300.0,
}

# Shares sum to exactly 1.0 under math.fsum; a left-to-right float sum of the
# maintenance shares gives 0.9999999999999999.
GOAL_MACRO_RATIOS = {
    Goal.WEIGHT_LOSS: MacroRatios(protein=0.40, fat=0.35, carbs=0.25),
    Goal.MAINTENANCE: MacroRatios(protein=0.30, fat=0.35, carbs=0.35),
    Goal.MUSCLE_GAIN: MacroRatios(protein=0.30, fat=0.20, carbs=0.50),
}


def calculate_bmr(weight_kg: float, height_cm: float, age_years: float, sex: Sex) -> float:
    """Basal metabolic rate by the revised Harris-Benedict equation."""
    if sex == Sex.MALE:
        return 88.362 + 13.397 * weight_kg + 4.799 * height_cm - 5.677 * age_years
    return 447.593 + 9.247 * weight_kg + 3.098 * height_cm - 4.330 * age_years


def calculate_tdee(bmr: float, activity_level: ActivityLevel) -> float:
    """Total daily energy expenditure for an activity level."""
    return bmr * ACTIVITY_MULTIPLIERS[activity_level]


def calculate_target_calories(tdee: float, goal: Goal) -> float:
    """Daily calorie target for a goal."""
    return tdee + GOAL_CALORIE_ADJUSTMENTS[goal]


def macro_ratios_for(goal: Goal) -> MacroRatios:
    """Calorie share of protein, fat and carbohydrates for a goal."""
    return GOAL_MACRO_RATIOS[goal]


def calculate_energy_targets(profile: PersonProfile) -> EnergyTargets:
    """Compute BMR, TDEE, calorie target and macro grams for a person."""
    bmr = calculate_bmr(
        profile.weight_kg, profile.height_cm, profile.age_years, profile.sex
    )
    tdee = calculate_tdee(bmr, profile.activity_level)
    target_calories = calculate_target_calories(tdee, profile.goal)
    ratios = macro_ratios_for(profile.goal)
    return EnergyTargets(
        bmr=bmr,
        tdee=tdee,
        target_calories=target_calories,
        ratios=ratios,
        protein_g=ratios.protein * target_calories / KCAL_PER_GRAM_PROTEIN,
        carbs_g=ratios.carbs * target_calories / KCAL_PER_GRAM_CARBS,
        fat_g=ratios.fat * target_calories / KCAL_PER_GRAM_FAT,
    )
