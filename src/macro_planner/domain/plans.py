"""Domain models for meal plans."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID

from macro_planner.domain.macros import MacroTargets, MacroTotals, ToleranceReport
from macro_planner.domain.recipes import RecipeMacroProfile


@dataclass(frozen=True)
class PlanItem:
    """One meal slot: a recipe snapshot and its serving count."""

    recipe_id: UUID
    recipe: RecipeMacroProfile
    servings: float = 1.0


@dataclass(frozen=True)
class PlanDay:
    """A day of meal slots with derived totals."""

    items: list[PlanItem]
    total_macros: MacroTotals
    tolerance: ToleranceReport


@dataclass(frozen=True)
class MealPlanDraft:
    """Unsaved result of plan generation."""

    client_id: UUID
    days: list[PlanDay]
    target_macros: MacroTargets
    tolerance_pct: float

    @property
    def on_target(self) -> bool:
        """Whether every day landed inside the tolerance band."""
        return all(day.tolerance.overall for day in self.days)


@dataclass(frozen=True)
class SavedMealPlanItem:
    """Persisted meal slot."""

    day_number: int
    meal_number: int
    recipe_id: UUID
    servings: float


@dataclass(frozen=True)
class SavedMealPlan:
    """Persisted meal plan with average daily macros."""

    id: UUID
    client_id: UUID
    coach_id: UUID
    start_date: date
    days: int
    kcal: int
    protein_g: int
    carbs_g: int
    fat_g: int
    items: list[SavedMealPlanItem] = field(default_factory=list)
    created_at: datetime | None = None


@dataclass(frozen=True)
class ShoppingListItem:
    """Aggregated ingredient amount across a plan."""

    ingredient_id: UUID
    ingredient: str
    total_grams: float
    display_amount: str
    kcal_per_100g: float
    protein_per_100g: float
    carbs_per_100g: float
    fat_per_100g: float
