"""Supabase repository for profiles."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from budget_tracker.domain.baseline import BaselineState
from budget_tracker.domain.budget import Goal
from budget_tracker.domain.models import Profile
from budget_tracker.domain.streaks import StreakState
from budget_tracker.services.profiles import ProfileRepository

_COLUMNS = (
    "id, created_at, timezone, goal, weekly_goal_rate, coach_id, "
    "baseline_start_date, baseline_days_target, baseline_extended, "
    "baseline_complete, baseline_completed_at, baseline_avg_daily_calories, "
    "current_streak, longest_streak, last_activity_date"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile persistence."""

    client: Client

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the profile for a user id, if present."""
        response = (
            self.client.table("profiles")
            .select(_COLUMNS)
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def save_baseline(self, user_id: UUID, baseline: BaselineState) -> None:
        """Update the baseline columns of a profile."""
        self.client.table("profiles").update(
            {
                "baseline_start_date": _iso(baseline.start_date),
                "baseline_days_target": baseline.days_target,
                "baseline_extended": baseline.extended,
                "baseline_complete": baseline.complete,
                "baseline_completed_at": _iso(baseline.completed_at),
                "baseline_avg_daily_calories": baseline.average_daily,
            }
        ).eq("id", str(user_id)).execute()

    def save_streak(self, user_id: UUID, streak: StreakState) -> None:
        """Update the streak columns of a profile."""
        self.client.table("profiles").update(
            {
                "current_streak": streak.current_streak,
                "longest_streak": streak.longest_streak,
                "last_activity_date": _iso(streak.last_activity_date),
            }
        ).eq("id", str(user_id)).execute()

    def list_profiles_for_coach(self, coach_id: UUID) -> list[Profile]:
        """Return all client profiles linked to a coach."""
        response = (
            self.client.table("profiles")
            .select(_COLUMNS)
            .eq("coach_id", str(coach_id))
            .execute()
        )
        return [_parse_profile(row) for row in response.data or []]


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value else None


def _parse_date(value: object) -> date | None:
    if isinstance(value, str) and value:
        return date.fromisoformat(value[:10])
    return None


def _parse_profile(row: dict[str, object]) -> Profile:
    average = row.get("baseline_avg_daily_calories")
    return Profile(
        user_id=UUID(str(row["id"])),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        timezone=str(row.get("timezone") or "UTC"),
        goal=Goal(str(row.get("goal") or Goal.MAINTAIN.value)),
        weekly_goal_rate=float(row.get("weekly_goal_rate") or 0.0),
        coach_id=UUID(str(row["coach_id"])) if row.get("coach_id") else None,
        baseline=BaselineState(
            start_date=_parse_date(row.get("baseline_start_date")),
            days_target=int(row.get("baseline_days_target") or 7),
            extended=bool(row.get("baseline_extended", False)),
            complete=bool(row.get("baseline_complete", False)),
            completed_at=_parse_date(row.get("baseline_completed_at")),
            average_daily=float(average) if average is not None else None,
        ),
        streak=StreakState(
            current_streak=int(row.get("current_streak") or 0),
            longest_streak=int(row.get("longest_streak") or 0),
            last_activity_date=_parse_date(row.get("last_activity_date")),
        ),
    )
