"""Greedy serving-size optimizer for a day of meals.

Each iteration finds the macro axis furthest from target and moves the
serving count of the item with the largest per-serving amount on that axis
by one step. The loop stops when every axis is inside the tolerance band or
after ``max_iterations``; the result may still be off target, which callers
read from the tolerance report rather than an exception.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from macro_planner.domain.macros import MacroAxis, MacroTargets, MacroTotals
from macro_planner.domain.plans import PlanItem
from macro_planner.services.formulas import round_half_up
from macro_planner.services.nutrition import is_within_tolerance

DEFAULT_MAX_ITERATIONS = 50
DEFAULT_SERVING_STEP = 0.25
DEFAULT_MAX_SERVINGS = 20.0

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptimizerConfig:
    """Bounds for the serving adjustment loop.

    The smallest allowed serving is one step.
    """

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    step: float = DEFAULT_SERVING_STEP
    max_servings: float = DEFAULT_MAX_SERVINGS

    def __post_init__(self) -> None:
        if self.max_iterations < 0:
            raise ValueError("max_iterations must not be negative")
        if self.step <= 0:
            raise ValueError("step must be positive")
        if self.max_servings < self.step:
            raise ValueError("max_servings must be at least one step")

    @property
    def min_servings(self) -> float:
        return self.step

    def snap(self, servings: float) -> float:
        """Round a serving count to the nearest step, ties upward."""
        return round_half_up(servings / self.step) * self.step

    def clamp(self, servings: float) -> float:
        return max(self.min_servings, min(self.max_servings, self.snap(servings)))


def optimize_servings(
    items: Sequence[PlanItem],
    target: MacroTargets,
    tolerance_pct: float,
    config: OptimizerConfig | None = None,
) -> list[PlanItem]:
    """Return copies of ``items`` with servings nudged toward ``target``.

    ``tolerance_pct`` is a percentage applied to all four axes.
    """
    resolved = config or OptimizerConfig()
    if not items:
        return []

    tolerance = tolerance_pct / 100
    servings = [resolved.clamp(item.servings) for item in items]
    converged = False
    iterations = 0

    for _ in range(resolved.max_iterations):
        current = _totals(items, servings)
        if is_within_tolerance(current, target, tolerance, tolerance).overall:
            converged = True
            break
        iterations += 1

        axis, delta = _largest_delta(current, target)
        index = _strongest_item(items, axis)
        if delta > 0 and servings[index] < resolved.max_servings:
            servings[index] += resolved.step
        elif delta < 0 and servings[index] > resolved.min_servings:
            servings[index] -= resolved.step
        servings[index] = resolved.clamp(servings[index])
    else:
        converged = is_within_tolerance(
            _totals(items, servings), target, tolerance, tolerance
        ).overall

    _logger.debug(
        "Serving optimizer: items=%s iterations=%s converged=%s",
        len(items),
        iterations,
        converged,
    )
    return [
        replace(item, servings=value)
        for item, value in zip(items, servings, strict=True)
    ]


def _totals(items: Sequence[PlanItem], servings: Sequence[float]) -> MacroTotals:
    kcal = protein = carbs = fat = 0.0
    for item, value in zip(items, servings, strict=True):
        kcal += item.recipe.kcal_per_serving * value
        protein += item.recipe.protein_per_serving * value
        carbs += item.recipe.carbs_per_serving * value
        fat += item.recipe.fat_per_serving * value
    return MacroTotals(kcal=kcal, protein_g=protein, carbs_g=carbs, fat_g=fat)


def _largest_delta(
    current: MacroTotals, target: MacroTargets
) -> tuple[MacroAxis, float]:
    """Axis with the largest absolute shortfall or excess; ties keep the first."""
    best_axis = MacroAxis.KCAL
    best_delta = target.kcal - current.kcal
    for axis in MacroAxis:
        delta = target.value(axis) - current.value(axis)
        if abs(delta) > abs(best_delta):
            best_axis, best_delta = axis, delta
    return best_axis, best_delta


def _strongest_item(items: Sequence[PlanItem], axis: MacroAxis) -> int:
    """Index of the item contributing most per serving on ``axis``."""
    best_index = 0
    best_contribution = 0.0
    for index, item in enumerate(items):
        contribution = item.recipe.per_serving(axis)
        if abs(contribution) > abs(best_contribution):
            best_index, best_contribution = index, contribution
    return best_index
