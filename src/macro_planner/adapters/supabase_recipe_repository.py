"""Supabase repository for the recipe catalog."""

from collections.abc import Sequence
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from macro_planner.domain.recipes import (
    IngredientLine,
    IngredientNutrition,
    RecipeComposition,
    RecipeMacroProfile,
    RecipeRecord,
)
from macro_planner.services.meal_plans import RecipeRepository

_RECIPE_COLUMNS = (
    "id, author_id, title, tags, utensils, base_servings, kcal_per_serving, "
    "protein_per_serving, carbs_per_serving, fat_per_serving"
)


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase-backed read access to recipes."""

    client: Client

    def list_recipes(self, author_id: UUID) -> list[RecipeRecord]:
        """Return all recipes authored by a coach."""
        response = (
            self.client.table("recipes")
            .select(_RECIPE_COLUMNS)
            .eq("author_id", str(author_id))
            .order("title", desc=False)
            .execute()
        )
        return [_parse_recipe(row) for row in response.data or []]

    def get_compositions(
        self, recipe_ids: Sequence[UUID]
    ) -> dict[UUID, RecipeComposition]:
        """Return ingredient breakdowns keyed by recipe id."""
        if not recipe_ids:
            return {}
        ids = [str(recipe_id) for recipe_id in recipe_ids]
        recipes_response = (
            self.client.table("recipes")
            .select("id, base_servings")
            .in_("id", ids)
            .execute()
        )
        lines_response = (
            self.client.table("recipe_ingredients")
            .select("recipe_id, grams_per_base, ingredient:ingredients(*)")
            .in_("recipe_id", ids)
            .execute()
        )

        lines: dict[UUID, list[IngredientLine]] = {}
        for row in lines_response.data or []:
            ingredient = row.get("ingredient")
            if not isinstance(ingredient, dict):
                continue
            lines.setdefault(UUID(row["recipe_id"]), []).append(
                IngredientLine(
                    ingredient=_parse_ingredient(ingredient),
                    grams_per_base=float(row.get("grams_per_base") or 0.0),
                )
            )

        compositions = {}
        for row in recipes_response.data or []:
            recipe_id = UUID(row["id"])
            compositions[recipe_id] = RecipeComposition(
                recipe_id=recipe_id,
                base_servings=float(row.get("base_servings") or 1),
                lines=lines.get(recipe_id, []),
            )
        return compositions


def _parse_recipe(row: dict[str, object]) -> RecipeRecord:
    recipe_id = UUID(row["id"])
    title = str(row.get("title", ""))
    return RecipeRecord(
        id=recipe_id,
        author_id=UUID(row["author_id"]),
        title=title,
        tags=tuple(str(tag) for tag in row.get("tags") or []),
        utensils=tuple(str(utensil) for utensil in row.get("utensils") or []),
        base_servings=int(row.get("base_servings") or 1),
        profile=RecipeMacroProfile(
            id=recipe_id,
            title=title,
            kcal_per_serving=float(row.get("kcal_per_serving") or 0.0),
            protein_per_serving=float(row.get("protein_per_serving") or 0.0),
            carbs_per_serving=float(row.get("carbs_per_serving") or 0.0),
            fat_per_serving=float(row.get("fat_per_serving") or 0.0),
        ),
    )


def _parse_ingredient(row: dict[str, object]) -> IngredientNutrition:
    return IngredientNutrition(
        id=UUID(row["id"]),
        name=str(row.get("name", "")),
        kcal_per_100g=float(row.get("kcal_per_100g") or 0.0),
        protein_per_100g=float(row.get("protein_per_100g") or 0.0),
        carbs_per_100g=float(row.get("carbs_per_100g") or 0.0),
        fat_per_100g=float(row.get("fat_per_100g") or 0.0),
    )
