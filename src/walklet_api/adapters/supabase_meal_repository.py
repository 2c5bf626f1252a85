"""Supabase repository for meal analyses."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from walklet_api.domain.meals import MealAnalysis, MealType
from walklet_api.domain.nutrition import MacroProfile
from walklet_api.services.meals import MealRepository

_COLUMNS = (
    "id, user_id, meal_type, food_name, grams, calories, protein_g, carbs_g, "
    "fat_g, nutrition_source, created_at"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meal analyses."""

    client: Client

    def create_analysis(  # noqa: PLR0913
        self,
        user_id: UUID,
        meal_type: MealType | None,
        food_name: str,
        grams: float,
        macros: MacroProfile,
        nutrition_source: str,
        created_at: datetime,
    ) -> MealAnalysis:
        """Create an analysis row and return it."""
        response = (
            self.client.table("meal_analyses")
            .insert(
                {
                    "user_id": str(user_id),
                    "meal_type": meal_type.value if meal_type else None,
                    "food_name": food_name,
                    "grams": grams,
                    "calories": macros.calories,
                    "protein_g": macros.protein_g,
                    "carbs_g": macros.carbs_g,
                    "fat_g": macros.fat_g,
                    "nutrition_source": nutrition_source,
                    "created_at": created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal analysis")
        return _parse_row(response.data[0])

    def list_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealAnalysis]:
        """Return analyses created in the time range."""
        response = (
            self.client.table("meal_analyses")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("created_at", start.isoformat())
            .lt("created_at", end.isoformat())
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def list_recent(self, user_id: UUID, limit: int) -> list[MealAnalysis]:
        """Return recent analyses for a user."""
        response = (
            self.client.table("meal_analyses")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> MealAnalysis:
    meal_type_raw = row.get("meal_type")
    return MealAnalysis(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        meal_type=MealType(meal_type_raw) if meal_type_raw else None,
        food_name=str(row.get("food_name", "")),
        grams=float(row.get("grams", 0.0)),
        calories=float(row.get("calories", 0.0)),
        protein_g=float(row.get("protein_g", 0.0)),
        carbs_g=float(row.get("carbs_g", 0.0)),
        fat_g=float(row.get("fat_g", 0.0)),
        nutrition_source=str(row.get("nutrition_source", "")),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
