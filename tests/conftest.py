"""Shared test fixtures."""

import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID, uuid4

import pytest

from macro_planner.config import Settings
from macro_planner.domain.clients import (
    ActivityLevel,
    ClientPreferences,
    ClientProfile,
    ClientRecord,
    Goal,
)
from macro_planner.domain.macros import MacroTargets, MacroTotals
from macro_planner.domain.plans import SavedMealPlan, SavedMealPlanItem
from macro_planner.domain.recipes import (
    RecipeComposition,
    RecipeMacroProfile,
    RecipeRecord,
)
from macro_planner.services.meal_plans import (
    ClientRepository,
    MealPlanRepository,
    MealPlanService,
    RecipeRepository,
)


def make_recipe(  # noqa: PLR0913
    title: str,
    kcal: float,
    protein: float,
    carbs: float,
    fat: float,
    *,
    author_id: UUID | None = None,
    tags: tuple[str, ...] = (),
    utensils: tuple[str, ...] = (),
    base_servings: int = 1,
) -> RecipeRecord:
    """Build a recipe record with a matching macro profile."""
    recipe_id = uuid4()
    return RecipeRecord(
        id=recipe_id,
        author_id=author_id or uuid4(),
        title=title,
        tags=tags,
        utensils=utensils,
        base_servings=base_servings,
        profile=RecipeMacroProfile(
            id=recipe_id,
            title=title,
            kcal_per_serving=kcal,
            protein_per_serving=protein,
            carbs_per_serving=carbs,
            fat_per_serving=fat,
        ),
    )


def make_client(
    coach_id: UUID,
    *,
    preferences: ClientPreferences | None = None,
    targets: MacroTargets | None = None,
) -> ClientRecord:
    """Build a client record with a typical profile."""
    return ClientRecord(
        id=uuid4(),
        coach_id=coach_id,
        name="Jordan Example",
        profile=ClientProfile(
            sex="male",
            age_years=25,
            height_cm=183,
            weight_kg=100,
            activity_label=ActivityLevel.MODERATE,
            goal_label=Goal.LOSS,
        ),
        preferences=preferences or ClientPreferences(),
        targets=targets,
    )


@dataclass
class InMemoryClientRepository(ClientRepository):
    """In-memory client repository for tests."""

    clients: dict[UUID, ClientRecord] = field(default_factory=dict)

    def add(self, client: ClientRecord) -> ClientRecord:
        self.clients[client.id] = client
        return client

    def get_client(self, coach_id: UUID, client_id: UUID) -> ClientRecord | None:
        client = self.clients.get(client_id)
        if client is None or client.coach_id != coach_id:
            return None
        return client


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipe repository for tests."""

    recipes: list[RecipeRecord] = field(default_factory=list)
    compositions: dict[UUID, RecipeComposition] = field(default_factory=dict)
    list_calls: int = 0

    def list_recipes(self, author_id: UUID) -> list[RecipeRecord]:
        self.list_calls += 1
        return [recipe for recipe in self.recipes if recipe.author_id == author_id]

    def get_compositions(
        self, recipe_ids: Sequence[UUID]
    ) -> dict[UUID, RecipeComposition]:
        return {
            recipe_id: self.compositions[recipe_id]
            for recipe_id in recipe_ids
            if recipe_id in self.compositions
        }


@dataclass
class InMemoryMealPlanRepository(MealPlanRepository):
    """In-memory meal plan repository for tests."""

    plans: dict[UUID, SavedMealPlan] = field(default_factory=dict)
    client_names: dict[UUID, str] = field(default_factory=dict)

    def create_meal_plan(  # noqa: PLR0913
        self,
        coach_id: UUID,
        client_id: UUID,
        start_date: date,
        days: int,
        averages: MacroTotals,
        items: list[SavedMealPlanItem],
    ) -> SavedMealPlan:
        plan = SavedMealPlan(
            id=uuid4(),
            client_id=client_id,
            coach_id=coach_id,
            start_date=start_date,
            days=days,
            kcal=int(averages.kcal),
            protein_g=int(averages.protein_g),
            carbs_g=int(averages.carbs_g),
            fat_g=int(averages.fat_g),
            items=list(items),
        )
        self.plans[plan.id] = plan
        return plan

    def get_meal_plan(self, coach_id: UUID, plan_id: UUID) -> SavedMealPlan | None:
        plan = self.plans.get(plan_id)
        if plan is None or plan.coach_id != coach_id:
            return None
        return plan

    def list_meal_plans(
        self, coach_id: UUID, search: str | None
    ) -> list[SavedMealPlan]:
        plans = [plan for plan in self.plans.values() if plan.coach_id == coach_id]
        if search:
            plans = [
                plan
                for plan in plans
                if search.lower() in self.client_names.get(plan.client_id, "").lower()
            ]
        return plans

    def delete_meal_plan(self, plan_id: UUID) -> None:
        self.plans.pop(plan_id, None)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
    )


@pytest.fixture
def coach_id() -> UUID:
    return uuid4()


@pytest.fixture
def client_repository() -> InMemoryClientRepository:
    return InMemoryClientRepository()


@pytest.fixture
def recipe_repository() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def plan_repository() -> InMemoryMealPlanRepository:
    return InMemoryMealPlanRepository()


@pytest.fixture
def meal_plan_service(
    client_repository: InMemoryClientRepository,
    recipe_repository: InMemoryRecipeRepository,
    plan_repository: InMemoryMealPlanRepository,
) -> MealPlanService:
    return MealPlanService(
        client_repository=client_repository,
        recipe_repository=recipe_repository,
        plan_repository=plan_repository,
        rng=random.Random(1234),
    )
