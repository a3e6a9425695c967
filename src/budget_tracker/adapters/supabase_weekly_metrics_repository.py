"""Supabase repository for weekly metrics."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from budget_tracker.domain.scores import WeeklyMetrics
from budget_tracker.services.scores import WeeklyMetricsRepository


@dataclass
class SupabaseWeeklyMetricsRepository(WeeklyMetricsRepository):
    """Supabase implementation for weekly metrics."""

    client: Client

    def get_metrics(self, weekly_period_id: UUID) -> WeeklyMetrics | None:
        """Return the metrics row for a period."""
        response = (
            self.client.table("weekly_metrics")
            .select(
                "weekly_period_id, calculated_date, balance_score, "
                "consistency_score, drift_score, total_consumed, total_remaining, "
                "calories_reserved, is_final"
            )
            .eq("weekly_period_id", str(weekly_period_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return WeeklyMetrics(
            weekly_period_id=UUID(str(row["weekly_period_id"])),
            calculated_date=date.fromisoformat(str(row["calculated_date"])),
            balance_score=_optional_float(row.get("balance_score")),
            consistency_score=_optional_float(row.get("consistency_score")),
            drift_score=_optional_float(row.get("drift_score")),
            total_consumed=float(row.get("total_consumed") or 0.0),
            total_remaining=float(row.get("total_remaining") or 0.0),
            calories_reserved=int(row.get("calories_reserved") or 0),
            is_final=bool(row.get("is_final", False)),
        )

    def save_metrics(self, user_id: UUID, metrics: WeeklyMetrics) -> None:
        """Upsert the metrics row for a period."""
        self.client.table("weekly_metrics").upsert(
            {
                "user_id": str(user_id),
                "weekly_period_id": str(metrics.weekly_period_id),
                "calculated_date": metrics.calculated_date.isoformat(),
                "balance_score": metrics.balance_score,
                "consistency_score": metrics.consistency_score,
                "drift_score": metrics.drift_score,
                "total_consumed": metrics.total_consumed,
                "total_remaining": metrics.total_remaining,
                "calories_reserved": metrics.calories_reserved,
                "is_final": metrics.is_final,
            },
            on_conflict="weekly_period_id",
        ).execute()


def _optional_float(value: object) -> float | None:
    if isinstance(value, int | float):
        return float(value)
    return None
