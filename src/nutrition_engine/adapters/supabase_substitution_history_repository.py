"""Supabase repository for substitution history."""

from dataclasses import dataclass

from supabase import Client

from nutrition_engine.domain.substitutions import SubstitutionHistoryEntry
from nutrition_engine.services.substitutions import SubstitutionHistoryRepository


@dataclass
class SupabaseSubstitutionHistoryRepository(SubstitutionHistoryRepository):
    """Supabase-backed substitution history repository."""

    client: Client

    def create_entry(self, entry: SubstitutionHistoryEntry) -> None:
        """Create a substitution history row."""
        self.client.table("food_substitution_history").insert(
            {
                "student_id": str(entry.student_id),
                "meal_id": str(entry.meal_id),
                "original_food": entry.original_food,
                "original_amount": entry.original_amount,
                "new_food": entry.new_food,
                "new_amount": entry.new_amount,
                "calories_diff": entry.calories_diff,
            }
        ).execute()
