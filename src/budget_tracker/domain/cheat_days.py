"""Treat-day reservations drawn from a weekly budget."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from enum import Enum
from uuid import UUID

from budget_tracker.domain.budget import DAYS_PER_WEEK, WeeklyPeriod
from budget_tracker.domain.errors import InsufficientBudget

SAFE_DAILY_MINIMUM = 1200
COMFORTABLE_DAILY_MINIMUM = 1400
SPECIAL_DAY_BONUS = 200


@dataclass(frozen=True)
class PlannedCheatDay:
    """Calories reserved for a planned treat day."""

    user_id: UUID
    cheat_date: date
    planned_calories: int
    is_completed: bool = False


class CheatDaySafety(str, Enum):
    """How a reservation leaves the other days of the week."""

    SAFE = "safe"
    CHALLENGING = "challenging"
    UNSAFE = "unsafe"


@dataclass(frozen=True)
class CheatDayRecommendation:
    """Suggested treat-day sizes for a weekly budget."""

    light: int
    moderate: int
    celebration: int
    minimum: int
    maximum: int


@dataclass(frozen=True)
class CheatDayValidation:
    """Outcome of checking a planned amount against the other days."""

    status: CheatDaySafety
    other_days_average: int
    regular_days: int


def reserved_calories(
    cheat_days: Iterable[PlannedCheatDay], exclude: date | None = None
) -> int:
    """Sum planned calories, optionally ignoring one date."""
    return sum(
        day.planned_calories for day in cheat_days if day.cheat_date != exclude
    )


def check_reservation(
    weekly_budget: int,
    existing: list[PlannedCheatDay],
    cheat_date: date,
    planned_calories: int,
) -> None:
    """Raise when ``planned_calories`` exceeds the unreserved budget.

    An existing reservation on the same date is replaced, so its amount is
    not counted against the new one.
    """
    available = weekly_budget - reserved_calories(existing, exclude=cheat_date)
    if planned_calories > available:
        raise InsufficientBudget(
            f"Only {available} kcal left to reserve, {planned_calories} requested"
        )


def effective_daily_allowance(
    period: WeeklyPeriod,
    cheat_days: list[PlannedCheatDay],
    from_date: date | None = None,
    consumed_before: float = 0.0,
) -> float:
    """Daily allowance for the non-reserved days remaining in a period.

    ``consumed_before`` is what was eaten on non-reserved days before
    ``from_date``; it comes out of the pool shared by the remaining days.
    """
    in_period = [day for day in cheat_days if period.contains(day.cheat_date)]
    reserved_dates = {day.cheat_date for day in in_period}
    start = period.week_start_date
    if from_date is not None and from_date > start:
        start = from_date
    remaining = [
        day for day in period.days() if day >= start and day not in reserved_dates
    ]
    if not remaining:
        return 0.0
    pool = period.weekly_budget - reserved_calories(in_period) - consumed_before
    return max(0.0, pool / len(remaining))


def recommend_cheat_day(
    weekly_budget: int, existing: list[PlannedCheatDay]
) -> CheatDayRecommendation:
    """Suggest treat-day sizes relative to the average daily budget."""
    daily_base = weekly_budget / DAYS_PER_WEEK
    remaining_budget = weekly_budget - reserved_calories(existing)
    regular_days = DAYS_PER_WEEK - len(existing)
    max_safe = remaining_budget - (regular_days - 1) * SAFE_DAILY_MINIMUM
    minimum = round(daily_base + SPECIAL_DAY_BONUS)
    return CheatDayRecommendation(
        light=round(daily_base * 1.3),
        moderate=round(daily_base * 1.5),
        celebration=round(daily_base * 1.75),
        minimum=minimum,
        maximum=max(round(max_safe), minimum),
    )


def validate_cheat_day(
    planned_calories: int,
    weekly_budget: int,
    existing: list[PlannedCheatDay],
) -> CheatDayValidation:
    """Classify what a planned amount leaves for the regular days."""
    remaining = weekly_budget - reserved_calories(existing) - planned_calories
    regular_days = DAYS_PER_WEEK - len(existing) - 1
    average = remaining / regular_days if regular_days > 0 else 0.0
    if average < SAFE_DAILY_MINIMUM:
        status = CheatDaySafety.UNSAFE
    elif average < COMFORTABLE_DAILY_MINIMUM:
        status = CheatDaySafety.CHALLENGING
    else:
        status = CheatDaySafety.SAFE
    return CheatDayValidation(
        status=status,
        other_days_average=round(average),
        regular_days=regular_days,
    )
