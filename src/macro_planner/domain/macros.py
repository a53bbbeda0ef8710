"""Macro domain models."""

from dataclasses import dataclass
from enum import StrEnum


class MacroAxis(StrEnum):
    """The four axes a day plan is measured on, in tie-break order."""

    KCAL = "kcal"
    PROTEIN = "protein"
    CARBS = "carbs"
    FAT = "fat"

    @property
    def field_name(self) -> str:
        """Attribute name on MacroTargets and MacroTotals."""
        if self is MacroAxis.KCAL:
            return "kcal"
        return f"{self.value}_g"


@dataclass(frozen=True)
class MacroTargets:
    """Daily macro goal for a client."""

    kcal: float
    protein_g: float
    carbs_g: float
    fat_g: float

    def value(self, axis: MacroAxis) -> float:
        return getattr(self, axis.field_name)


@dataclass(frozen=True)
class MacroTotals:
    """Aggregated macros for a set of plan items."""

    kcal: float
    protein_g: float
    carbs_g: float
    fat_g: float

    def value(self, axis: MacroAxis) -> float:
        return getattr(self, axis.field_name)


@dataclass(frozen=True)
class MacroGrams:
    """Protein, carbs and fat in grams."""

    p: float
    c: float
    f: float


@dataclass(frozen=True)
class MacroPercentages:
    """Share of energy coming from each macro, in whole percent."""

    pct_p: int
    pct_c: int
    pct_f: int


@dataclass(frozen=True)
class ToleranceReport:
    """Per-axis on-target flags."""

    kcal: bool
    protein: bool
    carbs: bool
    fat: bool
    overall: bool
