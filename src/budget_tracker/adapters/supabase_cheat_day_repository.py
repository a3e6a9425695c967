"""Supabase repository for planned treat days."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from budget_tracker.domain.cheat_days import PlannedCheatDay
from budget_tracker.services.cheat_days import CheatDayRepository


@dataclass
class SupabaseCheatDayRepository(CheatDayRepository):
    """Supabase implementation for planned treat days."""

    client: Client

    def list_cheat_days(
        self, user_id: UUID, start: date, end: date
    ) -> list[PlannedCheatDay]:
        """Return treat days in ``[start, end]``."""
        response = (
            self.client.table("planned_cheat_days")
            .select("user_id, cheat_date, planned_calories, is_completed")
            .eq("user_id", str(user_id))
            .gte("cheat_date", start.isoformat())
            .lte("cheat_date", end.isoformat())
            .order("cheat_date", desc=False)
            .execute()
        )
        return [
            PlannedCheatDay(
                user_id=UUID(str(row["user_id"])),
                cheat_date=date.fromisoformat(str(row["cheat_date"])),
                planned_calories=int(row.get("planned_calories") or 0),
                is_completed=bool(row.get("is_completed", False)),
            )
            for row in response.data or []
        ]

    def save_cheat_day(self, cheat_day: PlannedCheatDay) -> None:
        """Upsert a treat day keyed by user and date."""
        self.client.table("planned_cheat_days").upsert(
            {
                "user_id": str(cheat_day.user_id),
                "cheat_date": cheat_day.cheat_date.isoformat(),
                "planned_calories": cheat_day.planned_calories,
                "is_completed": cheat_day.is_completed,
            },
            on_conflict="user_id,cheat_date",
        ).execute()

    def delete_cheat_day(self, user_id: UUID, cheat_date: date) -> bool:
        """Delete a treat day and report whether one existed."""
        response = (
            self.client.table("planned_cheat_days")
            .delete()
            .eq("user_id", str(user_id))
            .eq("cheat_date", cheat_date.isoformat())
            .execute()
        )
        return bool(response.data)
