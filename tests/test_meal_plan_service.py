"""Tests for meal plan generation and persistence."""

import random
from datetime import date
from uuid import uuid4

import pytest

from macro_planner.domain.clients import ClientPreferences
from macro_planner.domain.macros import MacroTargets, MacroTotals, ToleranceReport
from macro_planner.domain.plans import MealPlanDraft, PlanDay
from macro_planner.domain.recipes import (
    IngredientLine,
    IngredientNutrition,
    RecipeComposition,
)
from macro_planner.request_models import PlanGenerateRequest
from macro_planner.services.meal_plans import (
    ClientNotFoundError,
    MealPlanError,
    MealPlanNotFoundError,
    MealPlanService,
    NoSuitableRecipesError,
    average_daily_macros,
    generate_draft,
)
from macro_planner.services.nutrition import calculate_totals
from macro_planner.services.optimizer import OptimizerConfig
from macro_planner.services.targets import compute_macro_targets
from tests.conftest import make_client, make_recipe

TARGETS = MacroTargets(kcal=2000, protein_g=150, carbs_g=200, fat_g=67)


def _catalog(author_id):
    return [
        make_recipe("Overnight oats", 420, 20, 60, 12, author_id=author_id),
        make_recipe("Chicken burrito", 650, 45, 70, 18, author_id=author_id),
        make_recipe("Salmon and greens", 520, 40, 15, 30, author_id=author_id),
        make_recipe("Tofu stir fry", 480, 28, 45, 20, author_id=author_id),
    ]


def test_generate_draft_shapes_plan() -> None:
    recipes = _catalog(uuid4())

    draft = generate_draft(
        client_id=uuid4(),
        recipes=recipes,
        preferences=ClientPreferences(),
        targets=TARGETS,
        days=5,
        meals_per_day=4,
        tolerance_pct=5,
        rng=random.Random(42),
    )

    assert len(draft.days) == 5
    assert draft.target_macros == TARGETS
    assert draft.tolerance_pct == 5
    pool_ids = {recipe.id for recipe in recipes}
    for day in draft.days:
        assert len(day.items) == 4
        assert {item.recipe_id for item in day.items} <= pool_ids
        assert day.total_macros == calculate_totals(day.items)
        for item in day.items:
            assert 0.25 <= item.servings <= 20
            assert (item.servings * 4).is_integer()


def test_generate_draft_never_repeats_adjacent_slots() -> None:
    recipes = _catalog(uuid4())[:2]

    draft = generate_draft(
        client_id=uuid4(),
        recipes=recipes,
        preferences=ClientPreferences(),
        targets=TARGETS,
        days=7,
        meals_per_day=3,
        tolerance_pct=5,
        rng=random.Random(3),
    )

    sequence = [item.recipe_id for day in draft.days for item in day.items]
    assert all(first != second for first, second in zip(sequence, sequence[1:]))


def test_generate_draft_single_recipe_fills_every_slot() -> None:
    only = make_recipe("Protein pancakes", 500, 40, 50, 15)

    draft = generate_draft(
        client_id=uuid4(),
        recipes=[only],
        preferences=ClientPreferences(),
        targets=TARGETS,
        days=2,
        meals_per_day=3,
        tolerance_pct=5,
        rng=random.Random(0),
    )

    assert {item.recipe_id for day in draft.days for item in day.items} == {only.id}


def test_generate_draft_is_deterministic_for_seed() -> None:
    recipes = _catalog(uuid4())

    def run() -> list[tuple]:
        draft = generate_draft(
            client_id=uuid4(),
            recipes=recipes,
            preferences=ClientPreferences(),
            targets=TARGETS,
            days=3,
            meals_per_day=3,
            tolerance_pct=5,
            rng=random.Random(99),
        )
        return [
            (item.recipe_id, item.servings) for day in draft.days for item in day.items
        ]

    assert run() == run()


def test_generate_draft_honours_preferences() -> None:
    recipes = _catalog(uuid4())

    draft = generate_draft(
        client_id=uuid4(),
        recipes=recipes,
        preferences=ClientPreferences(allergies=("salmon",), disliked=("tofu",)),
        targets=TARGETS,
        days=3,
        meals_per_day=3,
        tolerance_pct=5,
        rng=random.Random(5),
    )

    titles = {item.recipe.title for day in draft.days for item in day.items}
    assert titles <= {"Overnight oats", "Chicken burrito"}


def test_generate_draft_without_suitable_recipes_raises() -> None:
    client_id = uuid4()
    recipes = [make_recipe("Peanut butter toast", 350, 12, 30, 18)]

    with pytest.raises(NoSuitableRecipesError) as exc_info:
        generate_draft(
            client_id=client_id,
            recipes=recipes,
            preferences=ClientPreferences(allergies=("peanut",)),
            targets=TARGETS,
            days=7,
            meals_per_day=3,
            tolerance_pct=5,
            rng=random.Random(1),
        )

    assert exc_info.value.client_id == client_id
    assert "No suitable recipes" in str(exc_info.value)


def test_generate_draft_respects_optimizer_config() -> None:
    recipes = _catalog(uuid4())

    draft = generate_draft(
        client_id=uuid4(),
        recipes=recipes,
        preferences=ClientPreferences(),
        targets=TARGETS,
        days=2,
        meals_per_day=3,
        tolerance_pct=5,
        rng=random.Random(8),
        config=OptimizerConfig(max_iterations=0),
    )

    assert all(item.servings == 1.0 for day in draft.days for item in day.items)


def test_service_generate_uses_stored_targets(
    meal_plan_service: MealPlanService,
    client_repository,
    recipe_repository,
    coach_id,
) -> None:
    client = client_repository.add(make_client(coach_id, targets=TARGETS))
    recipe_repository.recipes.extend(_catalog(coach_id))

    draft = meal_plan_service.generate(
        coach_id,
        PlanGenerateRequest(client_id=client.id, days=3, meals_per_day=2),
    )

    assert draft.client_id == client.id
    assert draft.target_macros == TARGETS
    assert draft.tolerance_pct == 5.0
    assert [len(day.items) for day in draft.days] == [2, 2, 2]


def test_service_generate_computes_missing_targets(
    meal_plan_service: MealPlanService,
    client_repository,
    recipe_repository,
    coach_id,
) -> None:
    client = client_repository.add(make_client(coach_id))
    recipe_repository.recipes.extend(_catalog(coach_id))

    draft = meal_plan_service.generate(
        coach_id,
        PlanGenerateRequest(client_id=client.id, days=1, tolerance_pct=10),
    )

    assert draft.target_macros == compute_macro_targets(client.profile).targets
    assert draft.tolerance_pct == 10


def test_service_generate_only_uses_coach_recipes(
    meal_plan_service: MealPlanService,
    client_repository,
    recipe_repository,
    coach_id,
) -> None:
    client = client_repository.add(make_client(coach_id, targets=TARGETS))
    recipe_repository.recipes.extend(_catalog(uuid4()))

    with pytest.raises(NoSuitableRecipesError):
        meal_plan_service.generate(coach_id, PlanGenerateRequest(client_id=client.id))


def test_service_generate_unknown_client(
    meal_plan_service: MealPlanService,
    client_repository,
    recipe_repository,
    coach_id,
) -> None:
    other_coach_client = client_repository.add(make_client(uuid4()))

    with pytest.raises(ClientNotFoundError):
        meal_plan_service.generate(
            coach_id, PlanGenerateRequest(client_id=other_coach_client.id)
        )
    assert recipe_repository.list_calls == 0


def _day(kcal: float, protein: float, carbs: float, fat: float) -> PlanDay:
    return PlanDay(
        items=[],
        total_macros=MacroTotals(kcal, protein, carbs, fat),
        tolerance=ToleranceReport(True, True, True, True, True),
    )


def test_average_daily_macros_rounds_half_up() -> None:
    days = [_day(2000, 150, 200, 66), _day(2101, 160, 211, 67)]

    assert average_daily_macros(days) == MacroTotals(
        kcal=2051, protein_g=155, carbs_g=206, fat_g=67
    )


def test_service_save_numbers_slots_from_one(
    meal_plan_service: MealPlanService,
    client_repository,
    recipe_repository,
    plan_repository,
    coach_id,
) -> None:
    client = client_repository.add(make_client(coach_id, targets=TARGETS))
    recipe_repository.recipes.extend(_catalog(coach_id))
    draft = meal_plan_service.generate(
        coach_id, PlanGenerateRequest(client_id=client.id, days=2, meals_per_day=3)
    )

    plan = meal_plan_service.save(coach_id, client.id, date(2026, 3, 2), draft)

    assert plan.id in plan_repository.plans
    assert plan.days == 2
    assert plan.start_date == date(2026, 3, 2)
    assert [(item.day_number, item.meal_number) for item in plan.items] == [
        (1, 1),
        (1, 2),
        (1, 3),
        (2, 1),
        (2, 2),
        (2, 3),
    ]
    assert [item.recipe_id for item in plan.items] == [
        item.recipe_id for day in draft.days for item in day.items
    ]
    averages = average_daily_macros(draft.days)
    assert plan.kcal == averages.kcal
    assert plan.protein_g == averages.protein_g


def test_service_save_rejects_empty_draft(
    meal_plan_service: MealPlanService, client_repository, coach_id
) -> None:
    client = client_repository.add(make_client(coach_id))
    draft = MealPlanDraft(
        client_id=client.id, days=[], target_macros=TARGETS, tolerance_pct=5
    )

    with pytest.raises(MealPlanError):
        meal_plan_service.save(coach_id, client.id, date(2026, 3, 2), draft)


def test_service_get_and_delete(
    meal_plan_service: MealPlanService,
    client_repository,
    recipe_repository,
    plan_repository,
    coach_id,
) -> None:
    client = client_repository.add(make_client(coach_id, targets=TARGETS))
    recipe_repository.recipes.extend(_catalog(coach_id))
    draft = meal_plan_service.generate(
        coach_id, PlanGenerateRequest(client_id=client.id, days=1)
    )
    plan = meal_plan_service.save(coach_id, client.id, date(2026, 3, 2), draft)

    assert meal_plan_service.get(coach_id, plan.id) == plan
    with pytest.raises(MealPlanNotFoundError):
        meal_plan_service.get(uuid4(), plan.id)

    meal_plan_service.delete(coach_id, plan.id)

    assert plan_repository.plans == {}
    with pytest.raises(MealPlanNotFoundError):
        meal_plan_service.delete(coach_id, plan.id)


def test_service_list_plans_filters_by_client_name(
    meal_plan_service: MealPlanService,
    client_repository,
    recipe_repository,
    plan_repository,
    coach_id,
) -> None:
    recipe_repository.recipes.extend(_catalog(coach_id))
    saved = {}
    for name in ("Alex Morgan", "Sam Rivera"):
        client = client_repository.add(make_client(coach_id, targets=TARGETS))
        plan_repository.client_names[client.id] = name
        draft = meal_plan_service.generate(
            coach_id, PlanGenerateRequest(client_id=client.id, days=1)
        )
        saved[name] = meal_plan_service.save(
            coach_id, client.id, date(2026, 3, 2), draft
        )

    assert len(meal_plan_service.list_plans(coach_id)) == 2
    assert len(meal_plan_service.list_plans(coach_id, search="")) == 2
    assert meal_plan_service.list_plans(coach_id, search="rivera") == [
        saved["Sam Rivera"]
    ]
    assert meal_plan_service.list_plans(uuid4()) == []


def test_service_shopping_list_for_draft(
    meal_plan_service: MealPlanService,
    client_repository,
    recipe_repository,
    coach_id,
) -> None:
    oats = IngredientNutrition(
        id=uuid4(),
        name="Rolled oats",
        kcal_per_100g=379,
        protein_per_100g=13,
        carbs_per_100g=68,
        fat_per_100g=6.5,
    )
    recipe = make_recipe("Porridge", 303, 10.4, 54.4, 5.2, author_id=coach_id)
    recipe_repository.recipes.append(recipe)
    recipe_repository.compositions[recipe.id] = RecipeComposition(
        recipe_id=recipe.id,
        base_servings=1,
        lines=[IngredientLine(ingredient=oats, grams_per_base=80)],
    )
    client = client_repository.add(make_client(coach_id, targets=TARGETS))
    draft = meal_plan_service.generate(
        coach_id, PlanGenerateRequest(client_id=client.id, days=2, meals_per_day=2)
    )
    total_servings = sum(item.servings for day in draft.days for item in day.items)

    shopping_list = meal_plan_service.shopping_list(draft)

    assert len(shopping_list) == 1
    assert shopping_list[0].ingredient == "Rolled oats"
    assert shopping_list[0].total_grams == pytest.approx(80 * total_servings)
