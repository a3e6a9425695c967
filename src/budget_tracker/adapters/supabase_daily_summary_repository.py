"""Supabase repository for daily summaries."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from budget_tracker.domain.meals import DailySummary
from budget_tracker.services.aggregator import DailySummaryRepository

_COLUMNS = (
    "user_id, summary_date, calories_consumed, protein_g, carbs_g, fat_g, "
    "meals_logged, is_logged"
)


@dataclass
class SupabaseDailySummaryRepository(DailySummaryRepository):
    """Supabase implementation for daily summaries."""

    client: Client

    def get_summary(self, user_id: UUID, summary_date: date) -> DailySummary | None:
        """Return the summary for a date."""
        response = (
            self.client.table("daily_summaries")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("summary_date", summary_date.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_summary(response.data[0])

    def save_summary(self, summary: DailySummary) -> None:
        """Upsert the full-day totals keyed by user and date."""
        self.client.table("daily_summaries").upsert(
            {
                "user_id": str(summary.user_id),
                "summary_date": summary.summary_date.isoformat(),
                "calories_consumed": summary.calories_consumed,
                "protein_g": summary.protein_g,
                "carbs_g": summary.carbs_g,
                "fat_g": summary.fat_g,
                "meals_logged": summary.meals_logged,
                "is_logged": summary.is_logged,
            },
            on_conflict="user_id,summary_date",
        ).execute()

    def list_summaries(
        self, user_id: UUID, start: date, end: date
    ) -> list[DailySummary]:
        """Return summaries in ``[start, end]``."""
        response = (
            self.client.table("daily_summaries")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("summary_date", start.isoformat())
            .lte("summary_date", end.isoformat())
            .order("summary_date", desc=False)
            .execute()
        )
        return [_parse_summary(row) for row in response.data or []]


def _parse_summary(row: dict[str, object]) -> DailySummary:
    meals_logged = int(row.get("meals_logged") or 0)
    return DailySummary(
        user_id=UUID(str(row["user_id"])),
        summary_date=date.fromisoformat(str(row["summary_date"])),
        calories_consumed=float(row.get("calories_consumed") or 0.0),
        protein_g=float(row.get("protein_g") or 0.0),
        carbs_g=float(row.get("carbs_g") or 0.0),
        fat_g=float(row.get("fat_g") or 0.0),
        meals_logged=meals_logged,
        is_logged=bool(row.get("is_logged", meals_logged > 0)),
    )
