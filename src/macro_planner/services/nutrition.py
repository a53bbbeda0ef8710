"""Nutrition aggregation helpers."""

from collections.abc import Iterable, Sequence

from macro_planner.domain.macros import (
    MacroGrams,
    MacroPercentages,
    MacroTargets,
    MacroTotals,
    ToleranceReport,
)
from macro_planner.domain.plans import PlanItem
from macro_planner.domain.recipes import IngredientLine
from macro_planner.services.formulas import (
    KCAL_PER_G_CARBS,
    KCAL_PER_G_FAT,
    KCAL_PER_G_PROTEIN,
    round_half_up,
)

DEFAULT_KCAL_TOLERANCE = 0.05
DEFAULT_MACRO_TOLERANCE = 0.08

MIN_SCALED_SERVINGS = 0.25
MAX_SCALED_SERVINGS = 3.0
SERVING_INCREMENT = 0.25


def macro_energy(grams: MacroGrams) -> float:
    """Energy in kcal of protein, carbs and fat grams."""
    return (
        grams.p * KCAL_PER_G_PROTEIN
        + grams.c * KCAL_PER_G_CARBS
        + grams.f * KCAL_PER_G_FAT
    )


def sum_macros(*items: MacroGrams) -> MacroGrams:
    total = MacroGrams(0.0, 0.0, 0.0)
    for item in items:
        total = MacroGrams(p=total.p + item.p, c=total.c + item.c, f=total.f + item.f)
    return total


def macro_percentages(grams: MacroGrams) -> MacroPercentages:
    """Share of energy from each macro, in whole percent."""
    total_kcal = macro_energy(grams)
    if total_kcal == 0:
        return MacroPercentages(pct_p=0, pct_c=0, pct_f=0)
    return MacroPercentages(
        pct_p=round_half_up(grams.p * KCAL_PER_G_PROTEIN / total_kcal * 100),
        pct_c=round_half_up(grams.c * KCAL_PER_G_CARBS / total_kcal * 100),
        pct_f=round_half_up(grams.f * KCAL_PER_G_FAT / total_kcal * 100),
    )


def recipe_per_serving(
    base_servings: float, lines: Iterable[IngredientLine]
) -> MacroTotals:
    """Per-serving macros of a recipe from its per-100g ingredient data.

    ``base_servings`` must be positive.
    """
    kcal = protein = carbs = fat = 0.0
    for line in lines:
        factor = line.grams_per_base / 100
        kcal += line.ingredient.kcal_per_100g * factor
        protein += line.ingredient.protein_per_100g * factor
        carbs += line.ingredient.carbs_per_100g * factor
        fat += line.ingredient.fat_per_100g * factor
    return MacroTotals(
        kcal=kcal / base_servings,
        protein_g=protein / base_servings,
        carbs_g=carbs / base_servings,
        fat_g=fat / base_servings,
    )


def calculate_totals(items: Iterable[PlanItem]) -> MacroTotals:
    """Weighted sum of recipe macros by servings."""
    kcal = protein = carbs = fat = 0.0
    for item in items:
        kcal += item.recipe.kcal_per_serving * item.servings
        protein += item.recipe.protein_per_serving * item.servings
        carbs += item.recipe.carbs_per_serving * item.servings
        fat += item.recipe.fat_per_serving * item.servings
    return MacroTotals(kcal=kcal, protein_g=protein, carbs_g=carbs, fat_g=fat)


def is_within_tolerance(
    current: MacroTotals,
    target: MacroTargets,
    kcal_tol: float = DEFAULT_KCAL_TOLERANCE,
    macro_tol: float = DEFAULT_MACRO_TOLERANCE,
) -> ToleranceReport:
    """Check each axis against a fractional band around the target."""
    kcal_ok = abs(current.kcal - target.kcal) <= target.kcal * kcal_tol
    protein_ok = (
        abs(current.protein_g - target.protein_g) <= target.protein_g * macro_tol
    )
    carbs_ok = abs(current.carbs_g - target.carbs_g) <= target.carbs_g * macro_tol
    fat_ok = abs(current.fat_g - target.fat_g) <= target.fat_g * macro_tol
    return ToleranceReport(
        kcal=kcal_ok,
        protein=protein_ok,
        carbs=carbs_ok,
        fat=fat_ok,
        overall=kcal_ok and protein_ok and carbs_ok and fat_ok,
    )


def format_macros(totals: MacroTotals) -> str:
    return (
        f"{round_half_up(totals.kcal)} kcal, "
        f"{round_half_up(totals.protein_g)}g protein, "
        f"{round_half_up(totals.carbs_g)}g carbs, "
        f"{round_half_up(totals.fat_g)}g fat"
    )


def scale_servings_for_target_kcal(
    kcal_per_serving: float, target_kcal: float
) -> float:
    """Servings of one recipe that best match a slot's kcal target."""
    if kcal_per_serving <= 0:
        return 1.0
    return _clamp_servings(target_kcal / kcal_per_serving)


def rebalance_servings(
    servings: Sequence[float], meal_kcal: Sequence[float], target_kcal: float
) -> list[float]:
    """Scale every meal by a common factor to hit a daily kcal target."""
    current_kcal = sum(meal_kcal)
    if current_kcal == 0:
        return [1.0 for _ in servings]
    factor = target_kcal / current_kcal
    return [_clamp_servings(value * factor) for value in servings]


def _clamp_servings(value: float) -> float:
    snapped = round_half_up(value / SERVING_INCREMENT) * SERVING_INCREMENT
    return max(MIN_SCALED_SERVINGS, min(MAX_SCALED_SERVINGS, snapped))
