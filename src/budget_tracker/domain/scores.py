"""Weekly adherence scores."""

from dataclasses import dataclass
from datetime import date
from statistics import fmean, pstdev
from uuid import UUID

from budget_tracker.domain.budget import WeeklyPeriod
from budget_tracker.domain.cheat_days import PlannedCheatDay, reserved_calories
from budget_tracker.domain.meals import DailySummary

TRAILING_DAYS = 3


@dataclass(frozen=True)
class WeeklyMetrics:
    """Scores and totals for a weekly period as of ``calculated_date``."""

    weekly_period_id: UUID
    calculated_date: date
    balance_score: float | None
    consistency_score: float | None
    drift_score: float | None
    total_consumed: float
    total_remaining: float
    calories_reserved: int
    is_final: bool = False


def compute_weekly_metrics(
    period: WeeklyPeriod,
    summaries: list[DailySummary],
    cheat_days: list[PlannedCheatDay],
    today: date,
) -> WeeklyMetrics:
    """Score a period over the days elapsed by ``today``.

    Scores are ``None`` when they are undefined: no budget elapsed yet for
    balance, fewer than two logged days for consistency, no logged days for
    drift.
    """
    if period.id is None:
        raise ValueError("Metrics require a persisted weekly period")
    elapsed = [day for day in period.days() if day <= today]
    by_date = {summary.summary_date: summary for summary in summaries}
    consumed = sum(
        by_date[day].calories_consumed for day in elapsed if day in by_date
    )
    in_period = [day for day in cheat_days if period.contains(day.cheat_date)]
    logged = [
        by_date[day].calories_consumed
        for day in elapsed
        if day in by_date and by_date[day].is_logged
    ]

    return WeeklyMetrics(
        weekly_period_id=period.id,
        calculated_date=today,
        balance_score=_balance_score(
            consumed, _budget_to_date(period, in_period, elapsed)
        ),
        consistency_score=_consistency_score(logged),
        drift_score=_drift_score(logged),
        total_consumed=consumed,
        total_remaining=max(0.0, period.weekly_budget - consumed),
        calories_reserved=reserved_calories(in_period),
        is_final=today > period.week_end_date,
    )


def _budget_to_date(
    period: WeeklyPeriod, cheat_days: list[PlannedCheatDay], elapsed: list[date]
) -> float:
    planned = {day.cheat_date: day.planned_calories for day in cheat_days}
    regular_days = len(period.days()) - len(planned)
    regular_daily = (
        (period.weekly_budget - reserved_calories(cheat_days)) / regular_days
        if regular_days > 0
        else 0.0
    )
    return sum(planned.get(day, regular_daily) for day in elapsed)


def _balance_score(consumed: float, budget_to_date: float) -> float | None:
    if budget_to_date <= 0:
        return None
    return _score(1 - abs(consumed - budget_to_date) / budget_to_date)


def _consistency_score(logged: list[float]) -> float | None:
    if len(logged) < 2:  # noqa: PLR2004
        return None
    mean = fmean(logged)
    if mean <= 0:
        return None
    return _score(1 - pstdev(logged) / mean)


def _drift_score(logged: list[float]) -> float | None:
    if not logged:
        return None
    period_average = fmean(logged)
    if period_average <= 0:
        return None
    trailing = fmean(logged[-TRAILING_DAYS:])
    return _score(1 - abs(trailing - period_average) / period_average)


def _score(ratio: float) -> float:
    return round(100 * min(1.0, max(0.0, ratio)), 1)
