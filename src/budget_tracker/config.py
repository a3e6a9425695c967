"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from budget_tracker.domain.policy import EnginePolicy

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"
    default_daily_calories: float = 2000.0
    baseline_days_target: int = 7
    baseline_extension_days: int = 3
    low_confidence_min_days: int = 4
    restart_max_logged_days: int = 4
    followup_inactive_days: int = 2
    followup_balance_threshold: float = 60.0

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def build_policy(settings: Settings) -> EnginePolicy:
    """Build the engine policy from settings."""
    return EnginePolicy(
        default_daily_calories=settings.default_daily_calories,
        baseline_days_target=settings.baseline_days_target,
        baseline_extension_days=settings.baseline_extension_days,
        low_confidence_min_days=settings.low_confidence_min_days,
        restart_max_logged_days=settings.restart_max_logged_days,
        followup_inactive_days=settings.followup_inactive_days,
        followup_balance_threshold=settings.followup_balance_threshold,
    )
