"""Baseline tracker service."""

import logging
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from budget_tracker.domain.baseline import (
    BaselineCommand,
    BaselinePhase,
    BaselineState,
    baseline_day,
    baseline_phase,
    transition,
)
from budget_tracker.domain.budget import WeeklyPeriod, baseline_average
from budget_tracker.domain.errors import (
    BudgetEngineError,
    EngineWarning,
    NoActiveBaseline,
)
from budget_tracker.domain.policy import EnginePolicy
from budget_tracker.services.aggregator import DailySummaryRepository
from budget_tracker.services.budget import BudgetService
from budget_tracker.services.locks import UserLocks
from budget_tracker.services.profiles import ProfileService

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BaselineStatus:
    """Read model of a baseline window."""

    phase: BaselinePhase
    start_date: date | None
    day_number: int
    days_target: int
    days_logged: int
    extended: bool
    complete: bool
    can_restart: bool


@dataclass(frozen=True)
class BaselineCompletion:
    """Result of completing a baseline."""

    baseline: BaselineState
    period: WeeklyPeriod
    average_daily: float
    days_used: int
    created: bool
    warnings: tuple[EngineWarning, ...] = ()


@dataclass
class BaselineService:
    """Runs baseline commands for a user."""

    profile_service: ProfileService
    summary_repository: DailySummaryRepository
    budget_service: BudgetService
    policy: EnginePolicy = field(default_factory=EnginePolicy)
    locks: UserLocks = field(default_factory=UserLocks)

    def status(self, user_id: UUID, today: date) -> BaselineStatus:
        """Return the phase and progress of the user's baseline."""
        state = self.profile_service.require(user_id).baseline
        days_logged = self._days_logged(user_id, state, today)
        phase = baseline_phase(state, today)
        return BaselineStatus(
            phase=phase,
            start_date=state.start_date,
            day_number=baseline_day(state, today),
            days_target=state.days_target,
            days_logged=days_logged,
            extended=state.extended,
            complete=state.complete,
            can_restart=phase
            not in {BaselinePhase.NOT_STARTED, BaselinePhase.COMPLETED}
            and days_logged < self.policy.restart_max_logged_days,
        )

    def start(self, user_id: UUID, today: date) -> BaselineState:
        """Open the baseline window on ``today``."""
        return self._apply(user_id, BaselineCommand.START, today)

    def extend(self, user_id: UUID, today: date) -> BaselineState:
        """Extend an elapsed window once, by the configured extension days."""
        return self._apply(user_id, BaselineCommand.EXTEND, today)

    def restart(self, user_id: UUID, today: date) -> BaselineState:
        """Discard a sparse window and start over on ``today``."""
        return self._apply(user_id, BaselineCommand.RESTART, today)

    def complete_now(self, user_id: UUID, today: date) -> BaselineCompletion:
        """Freeze the window, average logged days and seed the first period.

        Completing an already completed baseline returns the existing
        period without creating another one.
        """
        with self.locks.for_user(user_id):
            profile = self.profile_service.require(user_id)
            state = profile.baseline
            if state.complete:
                period, created = self.budget_service.seed_first_period(
                    profile,
                    state.average_daily or self.policy.default_daily_calories,
                    state.completed_at or today,
                )
                return BaselineCompletion(
                    baseline=state,
                    period=period,
                    average_daily=period.baseline_average_daily,
                    days_used=0,
                    created=created,
                )
            if state.start_date is None:
                raise NoActiveBaseline("Baseline has not been started")

            summaries = self.summary_repository.list_summaries(
                user_id, state.start_date, today
            )
            days_used = sum(1 for summary in summaries if summary.is_logged)
            average = baseline_average(summaries)
            if average is None:
                average = self.policy.default_daily_calories
            completed = transition(
                state,
                BaselineCommand.COMPLETE,
                today,
                self.policy,
                days_logged=days_used,
                average_daily=round(average, 2),
            )
            warnings: tuple[EngineWarning, ...] = ()
            if days_used < self.policy.low_confidence_min_days:
                warnings = (EngineWarning.LOW_CONFIDENCE_BASELINE,)
                _logger.warning(
                    "Low-confidence baseline: user_id=%s days_used=%s",
                    user_id,
                    days_used,
                )
            period, created = self.budget_service.seed_first_period(
                profile, average, today
            )
            self.profile_service.repository.save_baseline(user_id, completed)
            _logger.info(
                "Baseline completed: user_id=%s average=%.0f days_used=%s",
                user_id,
                average,
                days_used,
            )
            return BaselineCompletion(
                baseline=completed,
                period=period,
                average_daily=round(average, 2),
                days_used=days_used,
                created=created,
                warnings=warnings,
            )

    def _apply(
        self, user_id: UUID, command: BaselineCommand, today: date
    ) -> BaselineState:
        with self.locks.for_user(user_id):
            state = self.profile_service.require(user_id).baseline
            try:
                updated = transition(
                    state,
                    command,
                    today,
                    self.policy,
                    days_logged=self._days_logged(user_id, state, today),
                )
            except BudgetEngineError as exc:
                _logger.warning(
                    "Baseline %s rejected: user_id=%s reason=%s",
                    command.value,
                    user_id,
                    exc.code,
                )
                raise
            self.profile_service.repository.save_baseline(user_id, updated)
            _logger.info(
                "Baseline %s: user_id=%s start=%s target=%s",
                command.value,
                user_id,
                updated.start_date,
                updated.days_target,
            )
            return updated

    def _days_logged(self, user_id: UUID, state: BaselineState, today: date) -> int:
        end = state.window_end()
        if state.start_date is None or end is None:
            return 0
        summaries = self.summary_repository.list_summaries(
            user_id, state.start_date, min(end, today)
        )
        return sum(1 for summary in summaries if summary.is_logged)
