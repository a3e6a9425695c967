"""Supabase repository for weekly periods."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from budget_tracker.domain.budget import WeeklyPeriod
from budget_tracker.services.budget import WeeklyPeriodRepository

_COLUMNS = (
    "id, user_id, week_start_date, week_end_date, baseline_average_daily, "
    "weekly_budget, created_at"
)


@dataclass
class SupabaseWeeklyPeriodRepository(WeeklyPeriodRepository):
    """Supabase implementation for weekly periods."""

    client: Client

    def latest_period(self, user_id: UUID) -> WeeklyPeriod | None:
        """Return the most recent period for a user."""
        response = (
            self.client.table("weekly_periods")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("week_start_date", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_period(response.data[0])

    def get_period_for_date(self, user_id: UUID, day: date) -> WeeklyPeriod | None:
        """Return the period whose window contains ``day``."""
        response = (
            self.client.table("weekly_periods")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .lte("week_start_date", day.isoformat())
            .gte("week_end_date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_period(response.data[0])

    def create_period(self, period: WeeklyPeriod) -> WeeklyPeriod:
        """Insert a period row and return the stored period."""
        payload = {
            "user_id": str(period.user_id),
            "week_start_date": period.week_start_date.isoformat(),
            "week_end_date": period.week_end_date.isoformat(),
            "baseline_average_daily": period.baseline_average_daily,
            "weekly_budget": period.weekly_budget,
        }
        if period.id is not None:
            payload["id"] = str(period.id)
        response = self.client.table("weekly_periods").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create weekly period")
        return _parse_period(response.data[0])

    def list_periods(self, user_id: UUID) -> list[WeeklyPeriod]:
        """Return all periods for a user ordered by start date."""
        response = (
            self.client.table("weekly_periods")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("week_start_date", desc=False)
            .execute()
        )
        return [_parse_period(row) for row in response.data or []]


def _parse_period(row: dict[str, object]) -> WeeklyPeriod:
    created_raw = row.get("created_at")
    return WeeklyPeriod(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        week_start_date=date.fromisoformat(str(row["week_start_date"])),
        week_end_date=date.fromisoformat(str(row["week_end_date"])),
        baseline_average_daily=float(row.get("baseline_average_daily") or 0.0),
        weekly_budget=int(row.get("weekly_budget") or 0),
        created_at=datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None,
    )
