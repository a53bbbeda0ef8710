"""Shopping list aggregation for meal plans."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from uuid import UUID

from macro_planner.domain.macros import MacroTotals
from macro_planner.domain.plans import PlanItem, ShoppingListItem
from macro_planner.domain.recipes import IngredientNutrition, RecipeComposition
from macro_planner.services.formulas import round_half_up

GRAMS_PER_KG = 1000


@dataclass
class _Accumulator:
    ingredient: IngredientNutrition
    total_grams: float = 0.0


def build_shopping_list(
    items: Iterable[PlanItem], compositions: Mapping[UUID, RecipeComposition]
) -> list[ShoppingListItem]:
    """Sum ingredient grams across plan items, scaled by servings."""
    totals: dict[UUID, _Accumulator] = {}
    for item in items:
        composition = compositions.get(item.recipe_id)
        if composition is None:
            continue
        ratio = item.servings / composition.base_servings
        for line in composition.lines:
            entry = totals.setdefault(
                line.ingredient.id, _Accumulator(ingredient=line.ingredient)
            )
            entry.total_grams += line.grams_per_base * ratio

    shopping_list = []
    for ingredient_id, entry in totals.items():
        total_grams = round_half_up(entry.total_grams * 10) / 10
        shopping_list.append(
            ShoppingListItem(
                ingredient_id=ingredient_id,
                ingredient=entry.ingredient.name,
                total_grams=total_grams,
                display_amount=format_amount(total_grams),
                kcal_per_100g=entry.ingredient.kcal_per_100g,
                protein_per_100g=entry.ingredient.protein_per_100g,
                carbs_per_100g=entry.ingredient.carbs_per_100g,
                fat_per_100g=entry.ingredient.fat_per_100g,
            )
        )
    return sorted(shopping_list, key=lambda item: item.ingredient.lower())


def format_amount(grams: float) -> str:
    """Human-friendly amount: kg from 1000 g, mg below 1 g."""
    if grams >= GRAMS_PER_KG:
        kg = round_half_up(grams / 100) / 10
        return f"{kg:g}kg"
    if grams < 1:
        return f"{round_half_up(grams * 1000)}mg"
    return f"{round_half_up(grams)}g"


def shopping_list_nutrition(items: Iterable[ShoppingListItem]) -> MacroTotals:
    """Total macros of everything on a shopping list."""
    kcal = protein = carbs = fat = 0.0
    for item in items:
        factor = item.total_grams / 100
        kcal += item.kcal_per_100g * factor
        protein += item.protein_per_100g * factor
        carbs += item.carbs_per_100g * factor
        fat += item.fat_per_100g * factor
    return MacroTotals(kcal=kcal, protein_g=protein, carbs_g=carbs, fat_g=fat)
