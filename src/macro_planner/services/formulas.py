"""BMR, TDEE and macro split formulas.

Lookups by activity or goal label never fail: unknown labels fall back to
sedentary and maintain. Legacy short labels go through
``canonical_activity_label`` / ``canonical_goal_label`` first.
"""

import math
from enum import StrEnum

from macro_planner.domain.clients import ActivityLevel, BmrFormula, ClientProfile, Goal
from macro_planner.domain.macros import MacroGrams

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9
KJ_PER_KCAL = 4.184
MAX_GOAL_DELTA_KCAL = 1000

DEFAULT_ACTIVITY_FACTOR = 1.2
DEFAULT_GOAL_DELTA_KCAL = 0

_ACTIVITY_FACTORS: dict[str, float] = {
    ActivityLevel.BMR: 1.0,
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
    ActivityLevel.EXTRA_ACTIVE: 1.95,
}

_GOAL_DELTAS: dict[str, int] = {
    Goal.MAINTAIN: 0,
    Goal.MILD_LOSS: -250,
    Goal.LOSS: -500,
    Goal.EXTREME_LOSS: -1000,
    Goal.MILD_GAIN: 250,
    Goal.GAIN: 500,
    Goal.EXTREME_GAIN: 1000,
}

_LEGACY_ACTIVITY_LABELS: dict[str, ActivityLevel] = {
    "BMR": ActivityLevel.BMR,
    "Sedentary": ActivityLevel.SEDENTARY,
    "Light": ActivityLevel.LIGHT,
    "Moderate": ActivityLevel.MODERATE,
    "Active": ActivityLevel.ACTIVE,
    "Very Active": ActivityLevel.VERY_ACTIVE,
    "Extra Active": ActivityLevel.EXTRA_ACTIVE,
}

_LEGACY_GOAL_LABELS: dict[str, Goal] = {
    "Maintain": Goal.MAINTAIN,
    "Mild loss": Goal.MILD_LOSS,
    "Loss": Goal.LOSS,
    "Extreme loss": Goal.EXTREME_LOSS,
    "Mild gain": Goal.MILD_GAIN,
    "Gain": Goal.GAIN,
    "Extreme gain": Goal.EXTREME_GAIN,
}


class MacroPreset(StrEnum):
    """Named carbs/protein/fat splits offered to coaches."""

    BALANCED = "balanced"
    LOW_FAT = "low_fat"
    LOW_CARB = "low_carb"
    HIGH_PROTEIN = "high_protein"


# (carbs, protein, fat) percentages
MACRO_PRESETS: dict[MacroPreset, tuple[int, int, int]] = {
    MacroPreset.BALANCED: (50, 25, 25),
    MacroPreset.LOW_FAT: (60, 25, 15),
    MacroPreset.LOW_CARB: (25, 40, 35),
    MacroPreset.HIGH_PROTEIN: (35, 40, 25),
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from negative infinity."""
    return math.floor(value + 0.5)


def bmr_mifflin_st_jeor(
    sex: str, age_years: float, height_cm: float, weight_kg: float
) -> float:
    """Mifflin-St Jeor BMR. Anything other than "male" uses the female form."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age_years
    if sex.lower() == "male":
        return base + 5
    return base - 161


def bmr_harris_benedict(
    sex: str, age_years: float, height_cm: float, weight_kg: float
) -> float:
    """Revised (1984) Harris-Benedict BMR."""
    if sex.lower() == "male":
        return 88.362 + 13.397 * weight_kg + 4.799 * height_cm - 5.677 * age_years
    return 447.593 + 9.247 * weight_kg + 3.098 * height_cm - 4.330 * age_years


def bmr_katch_mcardle(body_fat_pct: float, weight_kg: float) -> float:
    """Katch-McArdle BMR from lean body mass."""
    lean_mass_kg = weight_kg * (1 - body_fat_pct / 100)
    return 370 + 21.6 * lean_mass_kg


def bmr(formula: BmrFormula, profile: ClientProfile) -> float:
    """Compute BMR for a profile with the chosen formula.

    Katch-McArdle needs a body fat percentage; without one the
    Mifflin-St Jeor result is returned instead.
    """
    if formula is BmrFormula.KATCH and profile.body_fat_pct is not None:
        return bmr_katch_mcardle(profile.body_fat_pct, profile.weight_kg)
    if formula is BmrFormula.HARRIS:
        return bmr_harris_benedict(
            profile.sex, profile.age_years, profile.height_cm, profile.weight_kg
        )
    return bmr_mifflin_st_jeor(
        profile.sex, profile.age_years, profile.height_cm, profile.weight_kg
    )


def activity_factor(label: str) -> float:
    """Return the TDEE multiplier for an exact activity label."""
    return _ACTIVITY_FACTORS.get(label, DEFAULT_ACTIVITY_FACTOR)


def goal_delta_kcal(label: str) -> int:
    """Return the daily kcal adjustment for an exact goal label."""
    return _GOAL_DELTAS.get(label, DEFAULT_GOAL_DELTA_KCAL)


def canonical_activity_label(label: str) -> str:
    """Map a legacy short activity label to its canonical form."""
    return str(_LEGACY_ACTIVITY_LABELS.get(label, label))


def canonical_goal_label(label: str) -> str:
    """Map a legacy short goal label to its canonical form."""
    return str(_LEGACY_GOAL_LABELS.get(label, label))


def tdee(bmr_kcal: float, activity_label: str) -> float:
    """Total daily energy expenditure."""
    return bmr_kcal * activity_factor(activity_label)


def target_calories(tdee_kcal: float, goal_label: str) -> int:
    """Goal-adjusted calories, clamped to within 1000 kcal of TDEE."""
    target = tdee_kcal + goal_delta_kcal(goal_label)
    clamped = max(
        tdee_kcal - MAX_GOAL_DELTA_KCAL, min(tdee_kcal + MAX_GOAL_DELTA_KCAL, target)
    )
    return round_half_up(clamped)


def macros_from_percents(
    kcal: float, pct_carb: float, pct_prot: float, pct_fat: float
) -> MacroGrams:
    """Split calories into whole grams of protein, carbs and fat.

    Each macro is rounded on its own, so the energy of the result can drift a
    little from ``kcal``.
    """
    return MacroGrams(
        p=round_half_up(kcal * pct_prot / 100 / KCAL_PER_G_PROTEIN),
        c=round_half_up(kcal * pct_carb / 100 / KCAL_PER_G_CARBS),
        f=round_half_up(kcal * pct_fat / 100 / KCAL_PER_G_FAT),
    )


def macros_from_preset(kcal: float, preset: MacroPreset) -> MacroGrams:
    pct_carb, pct_prot, pct_fat = MACRO_PRESETS[preset]
    return macros_from_percents(kcal, pct_carb, pct_prot, pct_fat)


def scale_grams_to_energy(kcal_target: float, grams: MacroGrams) -> MacroGrams:
    """Scale custom grams so they add up to ``kcal_target``.

    All-zero grams fall back to the balanced split.
    """
    current_kcal = (
        grams.p * KCAL_PER_G_PROTEIN
        + grams.c * KCAL_PER_G_CARBS
        + grams.f * KCAL_PER_G_FAT
    )
    if current_kcal == 0:
        return macros_from_preset(kcal_target, MacroPreset.BALANCED)

    factor = kcal_target / current_kcal
    return MacroGrams(
        p=round_half_up(grams.p * factor),
        c=round_half_up(grams.c * factor),
        f=round_half_up(grams.f * factor),
    )


def kcal_to_kj(kcal: float) -> float:
    return kcal * KJ_PER_KCAL


def feet_inches_to_cm(feet: float, inches: float) -> int:
    """Convert an imperial height to whole centimetres."""
    return round_half_up((feet * 12 + inches) * 2.54)
