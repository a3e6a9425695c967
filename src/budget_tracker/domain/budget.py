"""Weekly budget math and period windows."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from uuid import UUID

from budget_tracker.domain.meals import DailySummary

CALORIES_PER_POUND = 3500
DAYS_PER_WEEK = 7


class Goal(str, Enum):
    """Weight goal selected during onboarding."""

    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


_GOAL_SIGN = {Goal.LOSE: -1, Goal.MAINTAIN: 0, Goal.GAIN: 1}


@dataclass(frozen=True)
class WeeklyPeriod:
    """A Monday-to-Sunday budget window.

    ``id`` is ``None`` for provisional periods computed from the default
    estimate that were never persisted.
    """

    id: UUID | None
    user_id: UUID
    week_start_date: date
    week_end_date: date
    baseline_average_daily: float
    weekly_budget: int
    created_at: datetime | None = None

    def contains(self, day: date) -> bool:
        """Return True when ``day`` falls inside the period."""
        return self.week_start_date <= day <= self.week_end_date

    def days(self) -> list[date]:
        """Return every calendar day of the period."""
        return [
            self.week_start_date + timedelta(days=offset)
            for offset in range((self.week_end_date - self.week_start_date).days + 1)
        ]


def goal_adjustment(goal: Goal, weekly_goal_rate: float) -> float:
    """Return the signed weekly calorie delta for a goal and lb/week rate."""
    return _GOAL_SIGN[goal] * abs(weekly_goal_rate) * CALORIES_PER_POUND


def baseline_average(summaries: Iterable[DailySummary]) -> float | None:
    """Mean calories over logged days; unlogged days are excluded."""
    logged = [summary.calories_consumed for summary in summaries if summary.is_logged]
    if not logged:
        return None
    return sum(logged) / len(logged)


def calculate_weekly_budget(baseline_average_daily: float, adjustment: float) -> int:
    """Return the weekly allowance, never below zero."""
    return max(0, round(baseline_average_daily * DAYS_PER_WEEK + adjustment))


def week_start(day: date) -> date:
    """Return the Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def monday_after(day: date) -> date:
    """Return the first Monday strictly after ``day``."""
    return week_start(day) + timedelta(days=DAYS_PER_WEEK)


def window_for(anchor: date, day: date) -> tuple[date, date]:
    """Return the 7-day window of a Monday-anchored sequence covering ``day``.

    Days before the anchor map to the first window.
    """
    if day < anchor:
        start = anchor
    else:
        weeks = (day - anchor).days // DAYS_PER_WEEK
        start = anchor + timedelta(days=weeks * DAYS_PER_WEEK)
    return start, start + timedelta(days=DAYS_PER_WEEK - 1)
