"""Streak tracking service."""

import logging
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from budget_tracker.domain.streaks import StreakState, advance_streak, streak_as_of
from budget_tracker.services.profiles import ProfileRepository

_logger = logging.getLogger(__name__)


@dataclass
class StreakService:
    """Maintains current and longest logging streaks on the profile."""

    repository: ProfileRepository

    def record_logged_day(self, user_id: UUID, logged_day: date) -> StreakState | None:
        """Advance the streak for a day that just became logged."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            _logger.warning("Streak skipped, no profile: user_id=%s", user_id)
            return None
        updated = advance_streak(profile.streak, logged_day)
        if updated != profile.streak:
            self.repository.save_streak(user_id, updated)
        return updated

    def get_streak(self, user_id: UUID, today: date) -> StreakState:
        """Return the streak as it reads on ``today``."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            return StreakState()
        return streak_as_of(profile.streak, today)
