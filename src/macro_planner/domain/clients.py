"""Domain models for coaching clients."""

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID

from macro_planner.domain.macros import MacroTargets


class ActivityLevel(StrEnum):
    """Canonical activity descriptions."""

    BMR = "Basal Metabolic Rate (BMR)"
    SEDENTARY = "Sedentary: little or no exercise"
    LIGHT = "Light: exercise 1-3 times/week"
    MODERATE = "Moderate: exercise 4-5 times/week"
    ACTIVE = "Active: daily exercise or intense exercise 3-4 times/week"
    VERY_ACTIVE = "Very Active: intense exercise 6-7 times/week"
    EXTRA_ACTIVE = "Extra Active: very intense exercise daily, or physical job"


class Goal(StrEnum):
    """Canonical weight goal descriptions."""

    MAINTAIN = "Maintain Weight"
    MILD_LOSS = "Mild weight loss of 0.25 kg per week"
    LOSS = "Weight loss of 0.5 kg per week"
    EXTREME_LOSS = "Extreme weight loss of 1 kg per week"
    MILD_GAIN = "Mild weight gain of 0.25 kg per week"
    GAIN = "Weight gain of 0.5 kg per week"
    EXTREME_GAIN = "Extreme weight gain of 1 kg per week"


class BmrFormula(StrEnum):
    """Supported BMR equations."""

    MIFFLIN = "mifflin"
    HARRIS = "harris"
    KATCH = "katch"


@dataclass(frozen=True)
class ClientProfile:
    """Body metrics and lifestyle labels used for target calculation."""

    sex: str
    age_years: int
    height_cm: float
    weight_kg: float
    activity_label: str
    goal_label: str
    body_fat_pct: float | None = None


@dataclass(frozen=True)
class ClientPreferences:
    """Food constraints applied when picking recipes."""

    dietary_restrictions: tuple[str, ...] = ()
    allergies: tuple[str, ...] = ()
    disliked: tuple[str, ...] = ()
    hardware: tuple[str, ...] = ()


@dataclass(frozen=True)
class ClientRecord:
    """Client owned by a coach."""

    id: UUID
    coach_id: UUID
    name: str
    profile: ClientProfile
    preferences: ClientPreferences = field(default_factory=ClientPreferences)
    targets: MacroTargets | None = None
