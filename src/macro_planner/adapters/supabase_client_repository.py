"""Supabase repository for coaching clients."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from macro_planner.domain.clients import ClientPreferences, ClientProfile, ClientRecord
from macro_planner.domain.macros import MacroTargets
from macro_planner.services.meal_plans import ClientRepository

_CLIENT_COLUMNS = (
    "id, coach_id, name, sex, age, height_cm, weight_kg, activity, goal, "
    "body_fat_pct, kcal_target, protein_target, carbs_target, fat_target, preferences"
)


@dataclass
class SupabaseClientRepository(ClientRepository):
    """Supabase-backed read access to clients."""

    client: Client

    def get_client(self, coach_id: UUID, client_id: UUID) -> ClientRecord | None:
        """Return a client owned by the coach, if present."""
        response = (
            self.client.table("clients")
            .select(_CLIENT_COLUMNS)
            .eq("id", str(client_id))
            .eq("coach_id", str(coach_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_client(response.data[0])


def _parse_client(row: dict[str, object]) -> ClientRecord:
    body_fat = row.get("body_fat_pct")
    profile = ClientProfile(
        sex=str(row.get("sex") or ""),
        age_years=int(row.get("age") or 0),
        height_cm=float(row.get("height_cm") or 0.0),
        weight_kg=float(row.get("weight_kg") or 0.0),
        activity_label=str(row.get("activity") or ""),
        goal_label=str(row.get("goal") or ""),
        body_fat_pct=float(body_fat) if isinstance(body_fat, int | float) else None,
    )
    return ClientRecord(
        id=UUID(row["id"]),
        coach_id=UUID(row["coach_id"]),
        name=str(row.get("name", "")),
        profile=profile,
        preferences=_parse_preferences(row.get("preferences")),
        targets=_parse_targets(row),
    )


def _parse_preferences(raw: object) -> ClientPreferences:
    if not isinstance(raw, dict):
        return ClientPreferences()
    return ClientPreferences(
        dietary_restrictions=_string_tuple(raw.get("dietary_restrictions")),
        allergies=_string_tuple(raw.get("allergies")),
        disliked=_string_tuple(raw.get("disliked")),
        hardware=_string_tuple(raw.get("hardware")),
    )


def _parse_targets(row: dict[str, object]) -> MacroTargets | None:
    """Stored targets, or None when the client has not been through the calculator."""
    values = [
        row.get("kcal_target"),
        row.get("protein_target"),
        row.get("carbs_target"),
        row.get("fat_target"),
    ]
    if any(value is None for value in values):
        return None
    kcal, protein, carbs, fat = (float(value) for value in values)
    return MacroTargets(kcal=kcal, protein_g=protein, carbs_g=carbs, fat_g=fat)


def _string_tuple(raw: object) -> tuple[str, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(str(value) for value in raw if value)
