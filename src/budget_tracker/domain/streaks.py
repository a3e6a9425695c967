"""Logging streak state."""

from dataclasses import dataclass
from datetime import date, timedelta


@dataclass(frozen=True)
class StreakState:
    """Consecutive logging day counters stored on the profile."""

    current_streak: int = 0
    longest_streak: int = 0
    last_activity_date: date | None = None


def advance_streak(state: StreakState, logged_day: date) -> StreakState:
    """Advance the streak for a day that just became logged.

    Evaluation only runs forward: a day on or before ``last_activity_date``
    (same day or a backfill) leaves the state untouched.
    """
    last = state.last_activity_date
    if last is not None and logged_day <= last:
        return state
    if last is not None and logged_day == last + timedelta(days=1):
        current = state.current_streak + 1
    else:
        current = 1
    return StreakState(
        current_streak=current,
        longest_streak=max(state.longest_streak, current),
        last_activity_date=logged_day,
    )


def streak_as_of(state: StreakState, today: date) -> StreakState:
    """Return the streak as displayed on ``today``.

    A streak survives until the end of the day after the last log; after
    that the current count reads as zero.
    """
    last = state.last_activity_date
    if last is None or today - last > timedelta(days=1):
        return StreakState(
            current_streak=0,
            longest_streak=state.longest_streak,
            last_activity_date=last,
        )
    return state
