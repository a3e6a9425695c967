"""Profile lookups and per-user calendar dates."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from budget_tracker.domain.baseline import BaselineState
from budget_tracker.domain.errors import NoProfile
from budget_tracker.domain.models import Profile
from budget_tracker.domain.streaks import StreakState


class ProfileRepository(Protocol):
    """Persistence interface for profiles."""

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the profile for a user, if present."""

    def save_baseline(self, user_id: UUID, baseline: BaselineState) -> None:
        """Persist the baseline fields of a profile."""

    def save_streak(self, user_id: UUID, streak: StreakState) -> None:
        """Persist the streak fields of a profile."""

    def list_profiles_for_coach(self, coach_id: UUID) -> list[Profile]:
        """Return the profiles of a coach's clients."""


@dataclass
class ProfileService:
    """Service for reading profiles."""

    repository: ProfileRepository

    def require(self, user_id: UUID) -> Profile:
        """Return the profile or raise NoProfile."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            raise NoProfile(f"No profile for user {user_id}")
        return profile

    def today_for(self, user_id: UUID, now: datetime) -> date:
        """Return the calendar date in the user's timezone, UTC if unknown."""
        profile = self.repository.get_profile(user_id)
        timezone_name = profile.timezone if profile else "UTC"
        try:
            tz = ZoneInfo(timezone_name)
        except (ZoneInfoNotFoundError, ValueError):
            tz = ZoneInfo("UTC")
        return now.astimezone(tz).date()
