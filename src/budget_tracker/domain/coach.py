"""Coach-facing client classification."""

from datetime import date, timedelta
from enum import Enum

from budget_tracker.domain.models import Profile
from budget_tracker.domain.policy import EnginePolicy
from budget_tracker.domain.scores import WeeklyMetrics


class ClientStatus(str, Enum):
    """Bucket a client is shown under on the coach dashboard."""

    IN_BASELINE = "in_baseline"
    ON_TRACK = "on_track"
    NEED_FOLLOWUP = "need_followup"


def classify_client(
    profile: Profile,
    metrics: WeeklyMetrics | None,
    today: date,
    policy: EnginePolicy,
) -> ClientStatus:
    """Classify a client from the engine's own profile and metrics."""
    if not profile.baseline.complete:
        return ClientStatus.IN_BASELINE
    last_activity = profile.streak.last_activity_date
    if last_activity is None or today - last_activity > timedelta(
        days=policy.followup_inactive_days
    ):
        return ClientStatus.NEED_FOLLOWUP
    if (
        metrics is not None
        and metrics.balance_score is not None
        and metrics.balance_score < policy.followup_balance_threshold
    ):
        return ClientStatus.NEED_FOLLOWUP
    return ClientStatus.ON_TRACK
