"""Baseline observation window and its state machine.

The persisted flags (``extended``, ``complete``) are only ever read through
:func:`baseline_phase`; commands go through :func:`transition`, which either
returns the next state or raises without touching the current one.
"""

from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import Enum

from budget_tracker.domain.errors import (
    AlreadyExtended,
    InvalidBaselineTransition,
    NoActiveBaseline,
)
from budget_tracker.domain.policy import EnginePolicy


class BaselinePhase(str, Enum):
    """Lifecycle phase of a user's baseline window."""

    NOT_STARTED = "not_started"
    ACTIVE = "active"
    AWAITING_DECISION = "awaiting_decision"
    EXTENDED = "extended"
    COMPLETED = "completed"


class BaselineCommand(str, Enum):
    """Commands accepted by the baseline state machine."""

    START = "start"
    EXTEND = "extend"
    COMPLETE = "complete"
    RESTART = "restart"


@dataclass(frozen=True)
class BaselineState:
    """Persisted baseline fields of a profile."""

    start_date: date | None = None
    days_target: int = 7
    extended: bool = False
    complete: bool = False
    completed_at: date | None = None
    average_daily: float | None = None

    def window_end(self) -> date | None:
        """Return the last calendar day of the observation window."""
        if self.start_date is None:
            return None
        return self.start_date + timedelta(days=self.days_target - 1)


def baseline_phase(state: BaselineState, today: date) -> BaselinePhase:
    """Derive the phase of a baseline window on ``today``."""
    if state.complete:
        return BaselinePhase.COMPLETED
    if state.start_date is None:
        return BaselinePhase.NOT_STARTED
    if (today - state.start_date).days >= state.days_target:
        return BaselinePhase.AWAITING_DECISION
    if state.extended:
        return BaselinePhase.EXTENDED
    return BaselinePhase.ACTIVE


def baseline_day(state: BaselineState, today: date) -> int:
    """Return the 1-based day number within the window, capped at the target."""
    if state.start_date is None:
        return 0
    elapsed = (today - state.start_date).days + 1
    return max(0, min(elapsed, state.days_target))


def transition(  # noqa: PLR0913
    state: BaselineState,
    command: BaselineCommand,
    today: date,
    policy: EnginePolicy,
    days_logged: int = 0,
    average_daily: float | None = None,
) -> BaselineState:
    """Apply a command to a baseline state and return the next state."""
    phase = baseline_phase(state, today)

    if command is BaselineCommand.START:
        if phase is not BaselinePhase.NOT_STARTED:
            raise InvalidBaselineTransition(f"Baseline already {phase.value}")
        return BaselineState(start_date=today, days_target=policy.baseline_days_target)

    if phase is BaselinePhase.NOT_STARTED:
        raise NoActiveBaseline("Baseline has not been started")

    if command is BaselineCommand.EXTEND:
        if phase is BaselinePhase.COMPLETED:
            raise InvalidBaselineTransition("Baseline is already complete")
        if state.extended:
            raise AlreadyExtended("Baseline can only be extended once")
        if phase is not BaselinePhase.AWAITING_DECISION:
            raise InvalidBaselineTransition(
                "Baseline can only be extended once the window has elapsed"
            )
        return replace(
            state,
            extended=True,
            days_target=state.days_target + policy.baseline_extension_days,
        )

    if command is BaselineCommand.COMPLETE:
        if phase is BaselinePhase.COMPLETED:
            return state
        if phase not in {BaselinePhase.AWAITING_DECISION, BaselinePhase.EXTENDED}:
            raise InvalidBaselineTransition(
                f"Baseline cannot be completed while {phase.value}"
            )
        return replace(
            state,
            complete=True,
            completed_at=today,
            average_daily=average_daily,
        )

    if phase is BaselinePhase.COMPLETED:
        raise InvalidBaselineTransition("Baseline is already complete")
    if days_logged >= policy.restart_max_logged_days:
        raise InvalidBaselineTransition(
            f"Restart is only offered with fewer than "
            f"{policy.restart_max_logged_days} logged days"
        )
    return BaselineState(start_date=today, days_target=policy.baseline_days_target)
