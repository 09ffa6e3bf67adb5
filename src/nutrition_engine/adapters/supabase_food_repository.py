"""Supabase implementation for the local food catalog."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from nutrition_engine.domain.nutrition import (
    FoodNutrition,
    MacroProfile,
    Provenance,
    to_float,
)
from nutrition_engine.services.catalog import FoodRepository


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase-backed repository for catalog foods."""

    client: Client

    def search_foods(self, query: str, limit: int) -> list[FoodNutrition]:
        """Search foods whose name contains the query."""
        response = (
            self.client.table("foods")
            .select("*")
            .ilike("name", f"%{query}%")
            .limit(limit)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def create_food(
        self, food: FoodNutrition, created_by: UUID | None
    ) -> FoodNutrition:
        """Insert a food and return it as a local catalog entry."""
        response = (
            self.client.table("foods")
            .insert(
                {
                    "name": food.name,
                    "portion": food.reference_portion_text or "100g",
                    "calories": round(food.macros.calories, 2),
                    "protein": round(food.macros.protein_g, 2),
                    "carbs": round(food.macros.carbs_g, 2),
                    "fat": round(food.macros.fat_g, 2),
                    "is_system": False,
                    "created_by_id": str(created_by) if created_by else None,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food entry")
        return _parse_food(response.data[0])


def _parse_food(row: dict[str, object]) -> FoodNutrition:
    """Parse a food row into a domain model."""
    food_id = row.get("id")
    return FoodNutrition(
        name=str(row.get("name", "")),
        reference_portion_text=str(row.get("portion") or "100g"),
        macros=MacroProfile(
            calories=to_float(row.get("calories")),
            protein_g=to_float(row.get("protein")),
            carbs_g=to_float(row.get("carbs")),
            fat_g=to_float(row.get("fat")),
        ),
        provenance=Provenance.LOCAL,
        food_id=str(food_id) if food_id is not None else None,
    )
