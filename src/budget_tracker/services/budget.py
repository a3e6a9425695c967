"""Weekly budget calculator and period rollover."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID, uuid4

from budget_tracker.domain.budget import (
    DAYS_PER_WEEK,
    WeeklyPeriod,
    calculate_weekly_budget,
    goal_adjustment,
    monday_after,
    window_for,
)
from budget_tracker.domain.errors import EngineWarning, InvalidInput, NoActiveBaseline
from budget_tracker.domain.models import Profile
from budget_tracker.domain.policy import EnginePolicy
from budget_tracker.services.locks import UserLocks
from budget_tracker.services.profiles import ProfileRepository
from budget_tracker.services.scores import ScoreService

MAX_PLANNING_WEEKS = 8

_logger = logging.getLogger(__name__)


class WeeklyPeriodRepository(Protocol):
    """Persistence interface for weekly periods."""

    def latest_period(self, user_id: UUID) -> WeeklyPeriod | None:
        """Return the period with the latest start date."""

    def get_period_for_date(self, user_id: UUID, day: date) -> WeeklyPeriod | None:
        """Return the period containing ``day``, if any."""

    def create_period(self, period: WeeklyPeriod) -> WeeklyPeriod:
        """Persist a new period and return it."""

    def list_periods(self, user_id: UUID) -> list[WeeklyPeriod]:
        """Return all periods for a user ordered by start date."""


@dataclass(frozen=True)
class BudgetResult:
    """Response of a budget recalculation."""

    period: WeeklyPeriod
    created: bool
    warnings: tuple[EngineWarning, ...] = ()


@dataclass
class BudgetService:
    """Derives weekly budgets and keeps periods contiguous."""

    repository: WeeklyPeriodRepository
    profiles: ProfileRepository
    score_service: ScoreService
    policy: EnginePolicy = field(default_factory=EnginePolicy)
    locks: UserLocks = field(default_factory=UserLocks)

    def budget_for(self, profile: Profile, average_daily: float) -> int:
        """Return the weekly budget for a baseline average and the profile goal."""
        return calculate_weekly_budget(
            average_daily, goal_adjustment(profile.goal, profile.weekly_goal_rate)
        )

    def seed_first_period(
        self, profile: Profile, average_daily: float, completed_on: date
    ) -> tuple[WeeklyPeriod, bool]:
        """Open the first period after baseline completion, at most once."""
        with self.locks.for_user(profile.user_id):
            existing = self.repository.latest_period(profile.user_id)
            if existing is not None:
                return existing, False
            start = monday_after(completed_on)
            period = self.repository.create_period(
                WeeklyPeriod(
                    id=uuid4(),
                    user_id=profile.user_id,
                    week_start_date=start,
                    week_end_date=start + timedelta(days=DAYS_PER_WEEK - 1),
                    baseline_average_daily=round(average_daily, 2),
                    weekly_budget=self.budget_for(profile, average_daily),
                    created_at=datetime.now(tz=UTC),
                )
            )
            _logger.info(
                "Weekly period seeded: user_id=%s start=%s budget=%s",
                profile.user_id,
                period.week_start_date,
                period.weekly_budget,
            )
            return period, True

    def current_period(self, user_id: UUID, today: date) -> WeeklyPeriod | None:
        """Return the period covering ``today``, rolling lapsed periods over.

        Before the first period starts, the upcoming first period is returned.
        """
        with self.locks.for_user(user_id):
            latest = self.repository.latest_period(user_id)
            if latest is None:
                return None
            profile = self.profiles.get_profile(user_id)
            while latest.week_end_date < today:
                self.score_service.refresh(latest, today)
                latest = self._open_next(latest, profile)
            return self.repository.get_period_for_date(user_id, today) or latest

    def period_for_date(self, user_id: UUID, day: date, today: date) -> WeeklyPeriod:
        """Return the active or future period containing ``day``.

        Future periods are opened on demand so the sequence stays gap-free.
        """
        with self.locks.for_user(user_id):
            current = self.current_period(user_id, today)
            if current is None:
                raise NoActiveBaseline("No weekly period has been opened yet")
            if day < current.week_start_date:
                raise InvalidInput(f"{day} is before the active weekly period")
            if day > current.week_end_date + timedelta(weeks=MAX_PLANNING_WEEKS):
                raise InvalidInput(f"{day} is too far ahead to plan")
            latest = self.repository.latest_period(user_id) or current
            profile = self.profiles.get_profile(user_id)
            while latest.week_end_date < day:
                latest = self._open_next(latest, profile)
            period = self.repository.get_period_for_date(user_id, day)
            if period is None:
                raise InvalidInput(f"{day} is not covered by a weekly period")
            return period

    def recalculate(self, user_id: UUID, today: date) -> BudgetResult:
        """Return the current period, seeding it if the baseline just completed.

        Safe to call repeatedly. Without a profile or a completed baseline a
        provisional period built from the default estimate is returned.
        """
        with self.locks.for_user(user_id):
            profile = self.profiles.get_profile(user_id)
            if profile is None:
                _logger.warning("Budget fallback, no profile: user_id=%s", user_id)
                return BudgetResult(
                    period=self._provisional_period(user_id, None, today),
                    created=False,
                    warnings=(EngineWarning.NO_PROFILE,),
                )
            if not profile.baseline.complete:
                return BudgetResult(
                    period=self._provisional_period(user_id, profile, today),
                    created=False,
                    warnings=(EngineWarning.NO_ACTIVE_BASELINE,),
                )
            if self.repository.latest_period(user_id) is None:
                period, created = self.seed_first_period(
                    profile,
                    profile.baseline.average_daily
                    or self.policy.default_daily_calories,
                    profile.baseline.completed_at or today,
                )
                return BudgetResult(period=period, created=created)
            period = self.current_period(user_id, today)
            return BudgetResult(period=period, created=False)

    def _open_next(
        self, previous: WeeklyPeriod, profile: Profile | None
    ) -> WeeklyPeriod:
        start = previous.week_end_date + timedelta(days=1)
        budget = (
            self.budget_for(profile, previous.baseline_average_daily)
            if profile is not None
            else previous.weekly_budget
        )
        period = self.repository.create_period(
            WeeklyPeriod(
                id=uuid4(),
                user_id=previous.user_id,
                week_start_date=start,
                week_end_date=start + timedelta(days=DAYS_PER_WEEK - 1),
                baseline_average_daily=previous.baseline_average_daily,
                weekly_budget=budget,
                created_at=datetime.now(tz=UTC),
            )
        )
        _logger.info(
            "Weekly period opened: user_id=%s start=%s",
            previous.user_id,
            period.week_start_date,
        )
        return period

    def _provisional_period(
        self, user_id: UUID, profile: Profile | None, today: date
    ) -> WeeklyPeriod:
        average = self.policy.default_daily_calories
        if profile is None:
            anchor = monday_after(today - timedelta(days=DAYS_PER_WEEK))
            budget = calculate_weekly_budget(average, 0)
        else:
            anchor = monday_after(profile.created_at.date())
            budget = self.budget_for(profile, average)
        start, end = window_for(anchor, today)
        return WeeklyPeriod(
            id=None,
            user_id=user_id,
            week_start_date=start,
            week_end_date=end,
            baseline_average_daily=average,
            weekly_budget=budget,
        )
