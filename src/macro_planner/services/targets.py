"""Daily macro targets from a client profile."""

from dataclasses import dataclass

from macro_planner.domain.clients import BmrFormula, ClientProfile
from macro_planner.domain.macros import MacroGrams, MacroTargets
from macro_planner.services.formulas import (
    MacroPreset,
    bmr,
    canonical_activity_label,
    canonical_goal_label,
    macros_from_preset,
    scale_grams_to_energy,
    target_calories,
    tdee,
)


@dataclass(frozen=True)
class TargetBreakdown:
    """Intermediate values behind a set of macro targets."""

    bmr: float
    tdee: float
    kcal: int
    targets: MacroTargets


def compute_macro_targets(
    profile: ClientProfile,
    formula: BmrFormula = BmrFormula.MIFFLIN,
    preset: MacroPreset = MacroPreset.BALANCED,
    custom_grams: MacroGrams | None = None,
) -> TargetBreakdown:
    """Run BMR -> TDEE -> goal calories -> macro grams for a profile.

    Custom grams, when given, are rescaled to the goal calories instead of
    using the preset split.
    """
    activity = canonical_activity_label(profile.activity_label)
    goal = canonical_goal_label(profile.goal_label)

    bmr_kcal = bmr(formula, profile)
    tdee_kcal = tdee(bmr_kcal, activity)
    kcal = target_calories(tdee_kcal, goal)
    if custom_grams is not None:
        grams = scale_grams_to_energy(kcal, custom_grams)
    else:
        grams = macros_from_preset(kcal, preset)

    return TargetBreakdown(
        bmr=bmr_kcal,
        tdee=tdee_kcal,
        kcal=kcal,
        targets=MacroTargets(
            kcal=kcal, protein_g=grams.p, carbs_g=grams.c, fat_g=grams.f
        ),
    )
