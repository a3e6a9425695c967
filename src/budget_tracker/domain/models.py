"""Domain models for user profiles."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from budget_tracker.domain.baseline import BaselineState
from budget_tracker.domain.budget import Goal
from budget_tracker.domain.streaks import StreakState


@dataclass(frozen=True)
class Profile:
    """Per-user engine state: goal settings, baseline window and streak."""

    user_id: UUID
    created_at: datetime
    timezone: str = "UTC"
    goal: Goal = Goal.MAINTAIN
    weekly_goal_rate: float = 0.0
    coach_id: UUID | None = None
    baseline: BaselineState = field(default_factory=BaselineState)
    streak: StreakState = field(default_factory=StreakState)
