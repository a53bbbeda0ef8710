"""Pydantic models for validated planner inputs."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from macro_planner.domain.clients import BmrFormula, ClientProfile
from macro_planner.domain.macros import MacroGrams


class PlanGenerateRequest(BaseModel):
    """Meal plan generation request."""

    client_id: UUID
    days: int = Field(default=7, ge=1, le=30)
    meals_per_day: int = Field(default=3, ge=1, le=10)
    tolerance_pct: float | None = Field(default=None, ge=0, le=50)


class MacroCalculatorRequest(BaseModel):
    """Body metrics submitted to the macro calculator."""

    sex: Literal["male", "female"]
    age: int = Field(ge=10, le=100)
    height_cm: int = Field(ge=100, le=250)
    weight_kg: float = Field(ge=30, le=300)
    activity: str = Field(min_length=1)
    goal: str = Field(min_length=1)
    formula: BmrFormula = BmrFormula.MIFFLIN
    body_fat_pct: float | None = Field(default=None, ge=0, le=70)

    def to_profile(self) -> ClientProfile:
        return ClientProfile(
            sex=self.sex,
            age_years=self.age,
            height_cm=self.height_cm,
            weight_kg=self.weight_kg,
            activity_label=self.activity,
            goal_label=self.goal,
            body_fat_pct=self.body_fat_pct,
        )


class CustomMacros(BaseModel):
    """Coach-entered macro grams."""

    protein: float = Field(ge=0, le=500)
    carbs: float = Field(ge=0, le=800)
    fat: float = Field(ge=0, le=300)

    def to_grams(self) -> MacroGrams:
        return MacroGrams(p=self.protein, c=self.carbs, f=self.fat)
