"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import create_client

from budget_tracker.adapters.supabase_cheat_day_repository import (
    SupabaseCheatDayRepository,
)
from budget_tracker.adapters.supabase_daily_summary_repository import (
    SupabaseDailySummaryRepository,
)
from budget_tracker.adapters.supabase_meal_log_repository import (
    SupabaseMealLogRepository,
)
from budget_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from budget_tracker.adapters.supabase_weekly_metrics_repository import (
    SupabaseWeeklyMetricsRepository,
)
from budget_tracker.adapters.supabase_weekly_period_repository import (
    SupabaseWeeklyPeriodRepository,
)
from budget_tracker.config import Settings, build_policy
from budget_tracker.domain.policy import EnginePolicy
from budget_tracker.services.aggregator import DailyAggregatorService
from budget_tracker.services.baseline import BaselineService
from budget_tracker.services.budget import BudgetService
from budget_tracker.services.cheat_days import CheatDayService
from budget_tracker.services.coach import CoachService
from budget_tracker.services.locks import UserLocks
from budget_tracker.services.profiles import ProfileService
from budget_tracker.services.scores import ScoreService
from budget_tracker.services.streaks import StreakService


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    policy: EnginePolicy
    profile_service: ProfileService
    aggregator_service: DailyAggregatorService
    baseline_service: BaselineService
    budget_service: BudgetService
    streak_service: StreakService
    cheat_day_service: CheatDayService
    score_service: ScoreService
    coach_service: CoachService
    clock: Callable[[], datetime] = _utc_now


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    policy = build_policy(resolved_settings)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    profile_repository = SupabaseProfileRepository(supabase_client)
    meal_log_repository = SupabaseMealLogRepository(supabase_client)
    summary_repository = SupabaseDailySummaryRepository(supabase_client)
    period_repository = SupabaseWeeklyPeriodRepository(supabase_client)
    metrics_repository = SupabaseWeeklyMetricsRepository(supabase_client)
    cheat_day_repository = SupabaseCheatDayRepository(supabase_client)
    locks = UserLocks()

    profile_service = ProfileService(profile_repository)
    streak_service = StreakService(profile_repository)
    score_service = ScoreService(
        metrics_repository=metrics_repository,
        summaries=summary_repository,
        cheat_days=cheat_day_repository,
        periods=period_repository,
    )
    budget_service = BudgetService(
        repository=period_repository,
        profiles=profile_repository,
        score_service=score_service,
        policy=policy,
        locks=locks,
    )
    aggregator_service = DailyAggregatorService(
        meal_repository=meal_log_repository,
        summary_repository=summary_repository,
        streak_service=streak_service,
        score_service=score_service,
        locks=locks,
    )
    baseline_service = BaselineService(
        profile_service=profile_service,
        summary_repository=summary_repository,
        budget_service=budget_service,
        policy=policy,
        locks=locks,
    )
    cheat_day_service = CheatDayService(
        repository=cheat_day_repository,
        budget_service=budget_service,
        summary_repository=summary_repository,
        score_service=score_service,
        locks=locks,
    )
    coach_service = CoachService(
        profile_repository=profile_repository,
        periods=period_repository,
        metrics_repository=metrics_repository,
        policy=policy,
    )

    return AppContainer(
        settings=resolved_settings,
        policy=policy,
        profile_service=profile_service,
        aggregator_service=aggregator_service,
        baseline_service=baseline_service,
        budget_service=budget_service,
        streak_service=streak_service,
        cheat_day_service=cheat_day_service,
        score_service=score_service,
        coach_service=coach_service,
    )
