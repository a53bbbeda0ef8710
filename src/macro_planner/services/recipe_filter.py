"""Recipe eligibility rules for a client's food constraints."""

from collections.abc import Iterable

from macro_planner.domain.clients import ClientPreferences
from macro_planner.domain.recipes import RecipeRecord


def filter_recipes(
    recipes: Iterable[RecipeRecord], preferences: ClientPreferences
) -> list[RecipeRecord]:
    """Return recipes compatible with the preferences, in input order."""
    restrictions = _normalize(preferences.dietary_restrictions)
    allergies = _normalize(preferences.allergies)
    disliked = _normalize(preferences.disliked)
    hardware = _normalize(preferences.hardware)
    return [
        recipe
        for recipe in recipes
        if is_recipe_allowed(recipe, restrictions, allergies, disliked, hardware)
    ]


def is_recipe_allowed(
    recipe: RecipeRecord,
    restrictions: list[str],
    allergies: list[str],
    disliked: list[str],
    hardware: list[str],
) -> bool:
    """Apply the substring rules to one recipe; inputs must be lowercase."""
    tags = [tag.lower() for tag in recipe.tags]
    title = recipe.title.lower()

    if any(_tag_contains(tags, restriction) for restriction in restrictions):
        return False
    if any(_tag_contains(tags, allergy) or allergy in title for allergy in allergies):
        return False
    if any(item in title or _tag_contains(tags, item) for item in disliked):
        return False
    if hardware:
        utensils = [utensil.lower() for utensil in recipe.utensils]
        for utensil in utensils:
            if not any(hw in utensil or utensil in hw for hw in hardware):
                return False
    return True


def _tag_contains(tags: list[str], needle: str) -> bool:
    return any(needle in tag for tag in tags)


def _normalize(values: Iterable[str]) -> list[str]:
    return [value.strip().lower() for value in values if value.strip()]
