"""Dependency container wiring for the application."""

import random
from dataclasses import dataclass

from supabase import create_client

from macro_planner.adapters.supabase_client_repository import SupabaseClientRepository
from macro_planner.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from macro_planner.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from macro_planner.app_logging import configure_logging
from macro_planner.config import Settings
from macro_planner.services.meal_plans import MealPlanService
from macro_planner.services.optimizer import OptimizerConfig


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    meal_plan_service: MealPlanService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(
        resolved_settings.log_level, secrets=[resolved_settings.supabase_service_key]
    )
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    optimizer_config = OptimizerConfig(
        max_iterations=resolved_settings.optimizer_max_iterations,
        step=resolved_settings.optimizer_serving_step,
        max_servings=resolved_settings.optimizer_max_servings,
    )
    meal_plan_service = MealPlanService(
        client_repository=SupabaseClientRepository(supabase_client),
        recipe_repository=SupabaseRecipeRepository(supabase_client),
        plan_repository=SupabaseMealPlanRepository(supabase_client),
        rng=random.Random(resolved_settings.generation_seed),
        optimizer_config=optimizer_config,
        default_tolerance_pct=resolved_settings.default_tolerance_pct,
    )
    return AppContainer(
        settings=resolved_settings,
        meal_plan_service=meal_plan_service,
    )
