"""Coach dashboard aggregation over engine outputs."""

from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from budget_tracker.domain.coach import ClientStatus, classify_client
from budget_tracker.domain.models import Profile
from budget_tracker.domain.policy import EnginePolicy
from budget_tracker.domain.scores import WeeklyMetrics
from budget_tracker.domain.streaks import streak_as_of
from budget_tracker.services.profiles import ProfileRepository
from budget_tracker.services.scores import PeriodReader, WeeklyMetricsRepository


@dataclass
class CoachService:
    """Groups a coach's clients by status."""

    profile_repository: ProfileRepository
    periods: PeriodReader
    metrics_repository: WeeklyMetricsRepository
    policy: EnginePolicy = field(default_factory=EnginePolicy)

    def list_clients(self, coach_id: UUID, today: date) -> dict[str, object]:
        """Return clients grouped by status with summary counts."""
        grouped: dict[str, list[dict[str, object]]] = {
            status.value: [] for status in ClientStatus
        }
        for profile in self.profile_repository.list_profiles_for_coach(coach_id):
            metrics = self._metrics_for(profile.user_id, today)
            status = classify_client(profile, metrics, today, self.policy)
            grouped[status.value].append(_serialize_client(profile, metrics, today))
        return {
            "clients": grouped,
            "stats": {
                "total_clients": sum(len(clients) for clients in grouped.values()),
                "on_track_count": len(grouped[ClientStatus.ON_TRACK.value]),
                "need_followup_count": len(grouped[ClientStatus.NEED_FOLLOWUP.value]),
                "in_baseline_count": len(grouped[ClientStatus.IN_BASELINE.value]),
            },
        }

    def _metrics_for(self, user_id: UUID, today: date) -> WeeklyMetrics | None:
        period = self.periods.get_period_for_date(user_id, today)
        if period is None or period.id is None:
            return None
        return self.metrics_repository.get_metrics(period.id)


def _serialize_client(
    profile: Profile, metrics: WeeklyMetrics | None, today: date
) -> dict[str, object]:
    streak = streak_as_of(profile.streak, today)
    return {
        "user_id": str(profile.user_id),
        "baseline_complete": profile.baseline.complete,
        "baseline_start_date": profile.baseline.start_date.isoformat()
        if profile.baseline.start_date
        else None,
        "last_activity_date": streak.last_activity_date.isoformat()
        if streak.last_activity_date
        else None,
        "current_streak": streak.current_streak,
        "balance_score": metrics.balance_score if metrics else None,
    }
