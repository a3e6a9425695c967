"""Treat-day reserve service."""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Protocol
from uuid import UUID

from budget_tracker.domain.budget import WeeklyPeriod
from budget_tracker.domain.cheat_days import (
    CheatDayRecommendation,
    CheatDayValidation,
    PlannedCheatDay,
    check_reservation,
    effective_daily_allowance,
    recommend_cheat_day,
    reserved_calories,
    validate_cheat_day,
)
from budget_tracker.domain.errors import (
    InsufficientBudget,
    InvalidInput,
    NoActiveBaseline,
    NotFound,
)
from budget_tracker.services.aggregator import DailySummaryRepository
from budget_tracker.services.budget import BudgetService
from budget_tracker.services.locks import UserLocks
from budget_tracker.services.scores import ScoreService

_logger = logging.getLogger(__name__)


class CheatDayRepository(Protocol):
    """Persistence interface for planned treat days."""

    def list_cheat_days(
        self, user_id: UUID, start: date, end: date
    ) -> list[PlannedCheatDay]:
        """Return treat days with dates in ``[start, end]``."""

    def save_cheat_day(self, cheat_day: PlannedCheatDay) -> None:
        """Upsert a treat day keyed by user and date."""

    def delete_cheat_day(self, user_id: UUID, cheat_date: date) -> bool:
        """Delete a treat day; return False when none existed."""


@dataclass(frozen=True)
class CheatDayReservation:
    """Result of reserving a treat day."""

    cheat_day: PlannedCheatDay
    period: WeeklyPeriod
    calories_reserved: int
    effective_daily_allowance: float
    validation: CheatDayValidation


@dataclass(frozen=True)
class DailyAllowance:
    """What each remaining regular day of the period may use."""

    period: WeeklyPeriod
    calories_reserved: int
    daily_allowance: float
    remaining_days: int
    cheat_days: list[PlannedCheatDay]


@dataclass
class CheatDayService:
    """Reserves treat-day calories out of a weekly budget."""

    repository: CheatDayRepository
    budget_service: BudgetService
    summary_repository: DailySummaryRepository
    score_service: ScoreService
    locks: UserLocks = field(default_factory=UserLocks)

    def reserve_cheat_day(
        self, user_id: UUID, cheat_date: date, planned_calories: int, today: date
    ) -> CheatDayReservation:
        """Reserve or replace the planned calories for ``cheat_date``."""
        if planned_calories <= 0:
            raise InvalidInput("planned_calories must be positive")
        if cheat_date < today:
            raise InvalidInput("Treat days can only be planned from today onward")
        with self.locks.for_user(user_id):
            period = self.budget_service.period_for_date(user_id, cheat_date, today)
            existing = self._for_period(period)
            try:
                check_reservation(
                    period.weekly_budget, existing, cheat_date, planned_calories
                )
            except InsufficientBudget:
                _logger.warning(
                    "Treat day rejected: user_id=%s date=%s calories=%s",
                    user_id,
                    cheat_date,
                    planned_calories,
                )
                raise
            others = [day for day in existing if day.cheat_date != cheat_date]
            cheat_day = PlannedCheatDay(
                user_id=user_id,
                cheat_date=cheat_date,
                planned_calories=planned_calories,
            )
            self.repository.save_cheat_day(cheat_day)
            self.score_service.refresh(period, today)
            updated = [*others, cheat_day]
            _logger.info(
                "Treat day reserved: user_id=%s date=%s calories=%s",
                user_id,
                cheat_date,
                planned_calories,
            )
            return CheatDayReservation(
                cheat_day=cheat_day,
                period=period,
                calories_reserved=reserved_calories(updated),
                effective_daily_allowance=effective_daily_allowance(period, updated),
                validation=validate_cheat_day(
                    planned_calories, period.weekly_budget, others
                ),
            )

    def cancel_cheat_day(self, user_id: UUID, cheat_date: date, today: date) -> None:
        """Release a reservation."""
        with self.locks.for_user(user_id):
            if not self.repository.delete_cheat_day(user_id, cheat_date):
                raise NotFound(f"No treat day planned on {cheat_date}")
            period = self.budget_service.current_period(user_id, today)
            if period is not None and period.contains(cheat_date):
                self.score_service.refresh(period, today)

    def daily_allowance(self, user_id: UUID, today: date) -> DailyAllowance:
        """Return the allowance for regular days from ``today`` to period end."""
        with self.locks.for_user(user_id):
            period = self._current(user_id, today)
            cheat_days = self._mark_completed(self._for_period(period), today)
            reserved_dates = {day.cheat_date for day in cheat_days}
            summaries = self.summary_repository.list_summaries(
                user_id, period.week_start_date, period.week_end_date
            )
            consumed_before = sum(
                summary.calories_consumed
                for summary in summaries
                if summary.summary_date < today
                and summary.summary_date not in reserved_dates
            )
            remaining = [
                day
                for day in period.days()
                if day >= today and day not in reserved_dates
            ]
            return DailyAllowance(
                period=period,
                calories_reserved=reserved_calories(cheat_days),
                daily_allowance=effective_daily_allowance(
                    period,
                    cheat_days,
                    from_date=today,
                    consumed_before=consumed_before,
                ),
                remaining_days=len(remaining),
                cheat_days=cheat_days,
            )

    def recommendations(
        self, user_id: UUID, today: date
    ) -> tuple[CheatDayRecommendation, WeeklyPeriod]:
        """Suggest treat-day sizes for the current period."""
        period = self._current(user_id, today)
        existing = self._for_period(period)
        return recommend_cheat_day(period.weekly_budget, existing), period

    def _current(self, user_id: UUID, today: date) -> WeeklyPeriod:
        period = self.budget_service.current_period(user_id, today)
        if period is None:
            raise NoActiveBaseline("No weekly period has been opened yet")
        return period

    def _for_period(self, period: WeeklyPeriod) -> list[PlannedCheatDay]:
        return self.repository.list_cheat_days(
            period.user_id, period.week_start_date, period.week_end_date
        )

    def _mark_completed(
        self, cheat_days: list[PlannedCheatDay], today: date
    ) -> list[PlannedCheatDay]:
        updated = []
        for day in cheat_days:
            if day.cheat_date < today and not day.is_completed:
                day = replace(day, is_completed=True)  # noqa: PLW2901
                self.repository.save_cheat_day(day)
            updated.append(day)
        return updated
