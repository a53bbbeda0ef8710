"""Meal plan generation and persistence service."""

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Protocol
from uuid import UUID

from macro_planner.domain.clients import ClientPreferences, ClientRecord
from macro_planner.domain.macros import MacroTargets, MacroTotals
from macro_planner.domain.plans import (
    MealPlanDraft,
    PlanDay,
    PlanItem,
    SavedMealPlan,
    SavedMealPlanItem,
    ShoppingListItem,
)
from macro_planner.domain.recipes import RecipeComposition, RecipeRecord
from macro_planner.request_models import PlanGenerateRequest
from macro_planner.services.formulas import round_half_up
from macro_planner.services.nutrition import calculate_totals, is_within_tolerance
from macro_planner.services.optimizer import OptimizerConfig, optimize_servings
from macro_planner.services.recipe_filter import filter_recipes
from macro_planner.services.shopping import build_shopping_list
from macro_planner.services.targets import compute_macro_targets

DEFAULT_TOLERANCE_PCT = 5.0

_logger = logging.getLogger(__name__)


class MealPlanError(Exception):
    """Base error for meal plan operations."""


class NoSuitableRecipesError(MealPlanError):
    """No recipe survives the client's food constraints."""

    def __init__(self, client_id: UUID) -> None:
        super().__init__("No suitable recipes found for this client's preferences")
        self.client_id = client_id


class ClientNotFoundError(MealPlanError):
    """Client does not exist or belongs to another coach."""

    def __init__(self, client_id: UUID) -> None:
        super().__init__(f"Client not found: {client_id}")
        self.client_id = client_id


class MealPlanNotFoundError(MealPlanError):
    """Meal plan does not exist or belongs to another coach."""

    def __init__(self, plan_id: UUID) -> None:
        super().__init__(f"Meal plan not found: {plan_id}")
        self.plan_id = plan_id


class GenerationStage(StrEnum):
    """Steps of a single generation run."""

    COLLECTING_CONSTRAINTS = "collecting_constraints"
    FILTERING_RECIPES = "filtering_recipes"
    ASSIGNING_SLOTS = "assigning_slots"
    OPTIMIZING = "optimizing"
    DONE = "done"


class ClientRepository(Protocol):
    """Read access to coaching clients."""

    def get_client(self, coach_id: UUID, client_id: UUID) -> ClientRecord | None:
        """Return a client owned by the coach, if present."""


class RecipeRepository(Protocol):
    """Read access to the recipe catalog."""

    def list_recipes(self, author_id: UUID) -> list[RecipeRecord]:
        """Return all recipes authored by a coach."""

    def get_compositions(
        self, recipe_ids: Sequence[UUID]
    ) -> dict[UUID, RecipeComposition]:
        """Return ingredient breakdowns keyed by recipe id."""


class MealPlanRepository(Protocol):
    """Persistence interface for saved meal plans."""

    def create_meal_plan(  # noqa: PLR0913
        self,
        coach_id: UUID,
        client_id: UUID,
        start_date: date,
        days: int,
        averages: MacroTotals,
        items: list[SavedMealPlanItem],
    ) -> SavedMealPlan:
        """Create a plan with its items and return it."""

    def get_meal_plan(self, coach_id: UUID, plan_id: UUID) -> SavedMealPlan | None:
        """Return a plan with items, if present."""

    def list_meal_plans(
        self, coach_id: UUID, search: str | None
    ) -> list[SavedMealPlan]:
        """Return a coach's plans, newest first, optionally by client name."""

    def delete_meal_plan(self, plan_id: UUID) -> None:
        """Delete a plan and its items."""


def generate_draft(  # noqa: PLR0913
    client_id: UUID,
    recipes: Sequence[RecipeRecord],
    preferences: ClientPreferences,
    targets: MacroTargets,
    days: int,
    meals_per_day: int,
    tolerance_pct: float,
    rng: random.Random,
    config: OptimizerConfig | None = None,
) -> MealPlanDraft:
    """Build an optimized draft plan from a recipe snapshot.

    Raises NoSuitableRecipesError when no recipe passes the client's
    constraints.
    """
    _logger.debug(
        "Generation %s: client=%s", GenerationStage.FILTERING_RECIPES, client_id
    )
    pool = filter_recipes(recipes, preferences)
    if not pool:
        raise NoSuitableRecipesError(client_id)

    _logger.debug(
        "Generation %s: pool=%s slots=%s",
        GenerationStage.ASSIGNING_SLOTS,
        len(pool),
        days * meals_per_day,
    )
    assigned = _assign_slots(pool, days, meals_per_day, rng)

    _logger.debug("Generation %s: days=%s", GenerationStage.OPTIMIZING, days)
    tolerance = tolerance_pct / 100
    plan_days = []
    for day_items in assigned:
        optimized = optimize_servings(day_items, targets, tolerance_pct, config)
        totals = calculate_totals(optimized)
        plan_days.append(
            PlanDay(
                items=optimized,
                total_macros=totals,
                tolerance=is_within_tolerance(totals, targets, tolerance, tolerance),
            )
        )

    draft = MealPlanDraft(
        client_id=client_id,
        days=plan_days,
        target_macros=targets,
        tolerance_pct=tolerance_pct,
    )
    _logger.debug(
        "Generation %s: client=%s on_target=%s",
        GenerationStage.DONE,
        client_id,
        draft.on_target,
    )
    return draft


def _assign_slots(
    pool: Sequence[RecipeRecord], days: int, meals_per_day: int, rng: random.Random
) -> list[list[PlanItem]]:
    """Randomly fill every slot, avoiding the previous slot's recipe if possible."""
    last_recipe_id: UUID | None = None
    assigned: list[list[PlanItem]] = []
    for _ in range(days):
        day_items: list[PlanItem] = []
        for _ in range(meals_per_day):
            candidates = [recipe for recipe in pool if recipe.id != last_recipe_id]
            recipe = rng.choice(candidates or list(pool))
            day_items.append(
                PlanItem(recipe_id=recipe.id, recipe=recipe.profile, servings=1.0)
            )
            last_recipe_id = recipe.id
        assigned.append(day_items)
    return assigned


def average_daily_macros(days: Sequence[PlanDay]) -> MacroTotals:
    """Whole-number average of day totals."""
    count = len(days)
    totals = [day.total_macros for day in days]
    return MacroTotals(
        kcal=round_half_up(sum(total.kcal for total in totals) / count),
        protein_g=round_half_up(sum(total.protein_g for total in totals) / count),
        carbs_g=round_half_up(sum(total.carbs_g for total in totals) / count),
        fat_g=round_half_up(sum(total.fat_g for total in totals) / count),
    )


@dataclass
class MealPlanService:
    """Application service for generating and saving meal plans."""

    client_repository: ClientRepository
    recipe_repository: RecipeRepository
    plan_repository: MealPlanRepository
    rng: random.Random = field(default_factory=random.Random)
    optimizer_config: OptimizerConfig = field(default_factory=OptimizerConfig)
    default_tolerance_pct: float = DEFAULT_TOLERANCE_PCT

    def generate(self, coach_id: UUID, request: PlanGenerateRequest) -> MealPlanDraft:
        """Generate a draft plan for one of the coach's clients."""
        _logger.debug(
            "Generation %s: client=%s",
            GenerationStage.COLLECTING_CONSTRAINTS,
            request.client_id,
        )
        client = self._require_client(coach_id, request.client_id)
        recipes = self.recipe_repository.list_recipes(coach_id)
        targets = self._resolve_targets(client)
        tolerance_pct = (
            request.tolerance_pct
            if request.tolerance_pct is not None
            else self.default_tolerance_pct
        )
        draft = generate_draft(
            client_id=client.id,
            recipes=recipes,
            preferences=client.preferences,
            targets=targets,
            days=request.days,
            meals_per_day=request.meals_per_day,
            tolerance_pct=tolerance_pct,
            rng=self.rng,
            config=self.optimizer_config,
        )
        _logger.info(
            "Generated meal plan draft: client=%s days=%s meals_per_day=%s "
            "on_target=%s",
            client.id,
            request.days,
            request.meals_per_day,
            draft.on_target,
        )
        return draft

    def save(
        self, coach_id: UUID, client_id: UUID, start_date: date, draft: MealPlanDraft
    ) -> SavedMealPlan:
        """Persist a draft with 1-indexed day and meal numbers."""
        self._require_client(coach_id, client_id)
        if not draft.days:
            raise MealPlanError("Cannot save a meal plan without days")

        items = [
            SavedMealPlanItem(
                day_number=day_index,
                meal_number=meal_index,
                recipe_id=item.recipe_id,
                servings=item.servings,
            )
            for day_index, day in enumerate(draft.days, start=1)
            for meal_index, item in enumerate(day.items, start=1)
        ]
        plan = self.plan_repository.create_meal_plan(
            coach_id=coach_id,
            client_id=client_id,
            start_date=start_date,
            days=len(draft.days),
            averages=average_daily_macros(draft.days),
            items=items,
        )
        _logger.info("Saved meal plan: plan=%s client=%s", plan.id, client_id)
        return plan

    def get(self, coach_id: UUID, plan_id: UUID) -> SavedMealPlan:
        plan = self.plan_repository.get_meal_plan(coach_id, plan_id)
        if plan is None:
            raise MealPlanNotFoundError(plan_id)
        return plan

    def list_plans(
        self, coach_id: UUID, search: str | None = None
    ) -> list[SavedMealPlan]:
        """List saved plans, optionally filtered by client name."""
        return self.plan_repository.list_meal_plans(coach_id, search or None)

    def delete(self, coach_id: UUID, plan_id: UUID) -> None:
        self.get(coach_id, plan_id)
        self.plan_repository.delete_meal_plan(plan_id)
        _logger.info("Deleted meal plan: plan=%s", plan_id)

    def shopping_list(self, draft: MealPlanDraft) -> list[ShoppingListItem]:
        """Aggregate ingredients needed for every slot in a draft."""
        items = [item for day in draft.days for item in day.items]
        recipe_ids = list(dict.fromkeys(item.recipe_id for item in items))
        compositions = self.recipe_repository.get_compositions(recipe_ids)
        return build_shopping_list(items, compositions)

    def _require_client(self, coach_id: UUID, client_id: UUID) -> ClientRecord:
        client = self.client_repository.get_client(coach_id, client_id)
        if client is None:
            raise ClientNotFoundError(client_id)
        return client

    @staticmethod
    def _resolve_targets(client: ClientRecord) -> MacroTargets:
        if client.targets is not None:
            return client.targets
        return compute_macro_targets(client.profile).targets
