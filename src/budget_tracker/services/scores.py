"""Score engine service."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from budget_tracker.domain.budget import WeeklyPeriod
from budget_tracker.domain.cheat_days import PlannedCheatDay
from budget_tracker.domain.meals import DailySummary
from budget_tracker.domain.scores import WeeklyMetrics, compute_weekly_metrics


class WeeklyMetricsRepository(Protocol):
    """Persistence interface for weekly metrics."""

    def get_metrics(self, weekly_period_id: UUID) -> WeeklyMetrics | None:
        """Return the metrics row for a period, if present."""

    def save_metrics(self, user_id: UUID, metrics: WeeklyMetrics) -> None:
        """Insert or replace the metrics row for a period."""


class SummaryReader(Protocol):
    """Read access to daily summaries."""

    def list_summaries(
        self, user_id: UUID, start: date, end: date
    ) -> list[DailySummary]:
        """Return summaries with dates in ``[start, end]``."""


class CheatDayReader(Protocol):
    """Read access to planned treat days."""

    def list_cheat_days(
        self, user_id: UUID, start: date, end: date
    ) -> list[PlannedCheatDay]:
        """Return treat days with dates in ``[start, end]``."""


class PeriodReader(Protocol):
    """Read access to weekly periods."""

    def get_period_for_date(self, user_id: UUID, day: date) -> WeeklyPeriod | None:
        """Return the period containing ``day``, if any."""


@dataclass
class ScoreService:
    """Recomputes and freezes weekly metrics."""

    metrics_repository: WeeklyMetricsRepository
    summaries: SummaryReader
    cheat_days: CheatDayReader
    periods: PeriodReader

    def refresh(self, period: WeeklyPeriod, today: date) -> WeeklyMetrics | None:
        """Recompute metrics for a period unless they are already final."""
        if period.id is None:
            return None
        existing = self.metrics_repository.get_metrics(period.id)
        if existing is not None and existing.is_final:
            return existing
        metrics = compute_weekly_metrics(
            period,
            self.summaries.list_summaries(
                period.user_id, period.week_start_date, period.week_end_date
            ),
            self.cheat_days.list_cheat_days(
                period.user_id, period.week_start_date, period.week_end_date
            ),
            today,
        )
        self.metrics_repository.save_metrics(period.user_id, metrics)
        return metrics

    def refresh_for_day(
        self, user_id: UUID, day: date, today: date
    ) -> WeeklyMetrics | None:
        """Recompute the metrics of whichever period contains ``day``."""
        period = self.periods.get_period_for_date(user_id, day)
        if period is None:
            return None
        return self.refresh(period, today)

    def get_metrics(self, period: WeeklyPeriod) -> WeeklyMetrics | None:
        """Return stored metrics for a period."""
        if period.id is None:
            return None
        return self.metrics_repository.get_metrics(period.id)
