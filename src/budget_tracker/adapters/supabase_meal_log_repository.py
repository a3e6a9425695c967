"""Supabase repository for meal log entries."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from budget_tracker.domain.meals import MealLogEntry, MealType
from budget_tracker.services.aggregator import MealLogRepository

_COLUMNS = (
    "id, user_id, log_date, meal_type, calories, protein_g, carbs_g, fat_g, "
    "food_name, created_at"
)


@dataclass
class SupabaseMealLogRepository(MealLogRepository):
    """Supabase implementation for meal log entries."""

    client: Client

    def get_entry(self, user_id: UUID, entry_id: UUID) -> MealLogEntry | None:
        """Return an entry by id."""
        response = (
            self.client.table("food_logs")
            .select(_COLUMNS)
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def save_entry(self, entry: MealLogEntry) -> None:
        """Insert or replace an entry by id."""
        response = (
            self.client.table("food_logs")
            .upsert(
                {
                    "id": str(entry.id),
                    "user_id": str(entry.user_id),
                    "log_date": entry.log_date.isoformat(),
                    "meal_type": entry.meal_type.value,
                    "calories": entry.calories,
                    "protein_g": entry.protein_g,
                    "carbs_g": entry.carbs_g,
                    "fat_g": entry.fat_g,
                    "food_name": entry.food_name,
                    "created_at": entry.created_at.isoformat(),
                },
                on_conflict="id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save meal log")

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete an entry."""
        self.client.table("food_logs").delete().eq("id", str(entry_id)).eq(
            "user_id", str(user_id)
        ).execute()

    def list_entries(self, user_id: UUID, log_date: date) -> list[MealLogEntry]:
        """Return entries for a calendar date."""
        response = (
            self.client.table("food_logs")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("log_date", log_date.isoformat())
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]


def _parse_entry(row: dict[str, object]) -> MealLogEntry:
    return MealLogEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        log_date=date.fromisoformat(str(row["log_date"])),
        meal_type=MealType(str(row.get("meal_type") or MealType.SNACK.value)),
        calories=float(row.get("calories") or 0.0),
        protein_g=float(row.get("protein_g") or 0.0),
        carbs_g=float(row.get("carbs_g") or 0.0),
        fat_g=float(row.get("fat_g") or 0.0),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        food_name=row.get("food_name"),
    )
