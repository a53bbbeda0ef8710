"""Domain models for the recipe catalog."""

from dataclasses import dataclass, field
from uuid import UUID

from macro_planner.domain.macros import MacroAxis


@dataclass(frozen=True)
class RecipeMacroProfile:
    """Per-serving macro content of a recipe."""

    id: UUID
    title: str
    kcal_per_serving: float
    protein_per_serving: float
    carbs_per_serving: float
    fat_per_serving: float

    def per_serving(self, axis: MacroAxis) -> float:
        """Return the per-serving amount for one macro axis."""
        if axis is MacroAxis.KCAL:
            return self.kcal_per_serving
        if axis is MacroAxis.PROTEIN:
            return self.protein_per_serving
        if axis is MacroAxis.CARBS:
            return self.carbs_per_serving
        return self.fat_per_serving


@dataclass(frozen=True)
class RecipeRecord:
    """Recipe catalog row as delivered by the store."""

    id: UUID
    author_id: UUID
    title: str
    profile: RecipeMacroProfile
    tags: tuple[str, ...] = ()
    utensils: tuple[str, ...] = ()
    base_servings: int = 1


@dataclass(frozen=True)
class IngredientNutrition:
    """Ingredient macros per 100 grams."""

    id: UUID
    name: str
    kcal_per_100g: float
    protein_per_100g: float
    carbs_per_100g: float
    fat_per_100g: float


@dataclass(frozen=True)
class IngredientLine:
    """Ingredient amount used by a recipe at its base servings."""

    ingredient: IngredientNutrition
    grams_per_base: float


@dataclass(frozen=True)
class RecipeComposition:
    """Ingredient breakdown of a recipe."""

    recipe_id: UUID
    base_servings: float
    lines: list[IngredientLine] = field(default_factory=list)
