"""Supabase repository for saved meal plans."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from macro_planner.domain.macros import MacroTotals
from macro_planner.domain.plans import SavedMealPlan, SavedMealPlanItem
from macro_planner.services.meal_plans import MealPlanRepository

_PLAN_COLUMNS = (
    "id, client_id, coach_id, start_date, days, kcal, protein, carbs, fat, created_at"
)


@dataclass
class SupabaseMealPlanRepository(MealPlanRepository):
    """Supabase implementation for meal plans."""

    client: Client

    def create_meal_plan(  # noqa: PLR0913
        self,
        coach_id: UUID,
        client_id: UUID,
        start_date: date,
        days: int,
        averages: MacroTotals,
        items: list[SavedMealPlanItem],
    ) -> SavedMealPlan:
        """Insert the plan row, then its items; drop the plan if items fail."""
        response = (
            self.client.table("meal_plans")
            .insert(
                {
                    "coach_id": str(coach_id),
                    "client_id": str(client_id),
                    "start_date": start_date.isoformat(),
                    "days": days,
                    "kcal": averages.kcal,
                    "protein": averages.protein_g,
                    "carbs": averages.carbs_g,
                    "fat": averages.fat_g,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal plan")
        row = response.data[0]
        plan_id = UUID(row["id"])

        payload = [
            {
                "meal_plan_id": str(plan_id),
                "day_number": item.day_number,
                "meal_number": item.meal_number,
                "recipe_id": str(item.recipe_id),
                "servings": item.servings,
            }
            for item in items
        ]
        if payload:
            try:
                self.client.table("meal_plan_items").insert(payload).execute()
            except Exception:
                self.delete_meal_plan(plan_id)
                raise
        return _parse_plan(row, items)

    def get_meal_plan(self, coach_id: UUID, plan_id: UUID) -> SavedMealPlan | None:
        """Return a plan with items ordered by day then meal."""
        response = (
            self.client.table("meal_plans")
            .select(_PLAN_COLUMNS)
            .eq("id", str(plan_id))
            .eq("coach_id", str(coach_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        items_response = (
            self.client.table("meal_plan_items")
            .select("day_number, meal_number, recipe_id, servings")
            .eq("meal_plan_id", str(plan_id))
            .order("day_number", desc=False)
            .order("meal_number", desc=False)
            .execute()
        )
        items = [_parse_item(row) for row in items_response.data or []]
        return _parse_plan(response.data[0], items)

    def list_meal_plans(
        self, coach_id: UUID, search: str | None
    ) -> list[SavedMealPlan]:
        """Return a coach's plans, newest first."""
        query = (
            self.client.table("meal_plans")
            .select(f"{_PLAN_COLUMNS}, clients!inner(name)")
            .eq("coach_id", str(coach_id))
        )
        if search:
            query = query.ilike("clients.name", f"%{search}%")
        response = query.order("created_at", desc=True).execute()
        return [_parse_plan(row, []) for row in response.data or []]

    def delete_meal_plan(self, plan_id: UUID) -> None:
        """Delete a plan row and its items."""
        self.client.table("meal_plan_items").delete().eq(
            "meal_plan_id", str(plan_id)
        ).execute()
        self.client.table("meal_plans").delete().eq("id", str(plan_id)).execute()


def _parse_plan(
    row: dict[str, object], items: list[SavedMealPlanItem]
) -> SavedMealPlan:
    created_raw = row.get("created_at")
    return SavedMealPlan(
        id=UUID(row["id"]),
        client_id=UUID(row["client_id"]),
        coach_id=UUID(row["coach_id"]),
        start_date=date.fromisoformat(str(row["start_date"])[:10]),
        days=int(row["days"]),
        kcal=int(row.get("kcal") or 0),
        protein_g=int(row.get("protein") or 0),
        carbs_g=int(row.get("carbs") or 0),
        fat_g=int(row.get("fat") or 0),
        items=items,
        created_at=(
            datetime.fromisoformat(created_raw)
            if isinstance(created_raw, str) and created_raw
            else None
        ),
    )


def _parse_item(row: dict[str, object]) -> SavedMealPlanItem:
    return SavedMealPlanItem(
        day_number=int(row.get("day_number") or 0),
        meal_number=int(row.get("meal_number") or 0),
        recipe_id=UUID(row["recipe_id"]),
        servings=float(row.get("servings") or 0.0),
    )
