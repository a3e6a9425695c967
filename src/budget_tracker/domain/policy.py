"""Tunable engine policy values."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EnginePolicy:
    """Policy constants passed explicitly into every engine service."""

    default_daily_calories: float = 2000.0
    baseline_days_target: int = 7
    baseline_extension_days: int = 3
    low_confidence_min_days: int = 4
    restart_max_logged_days: int = 4
    followup_inactive_days: int = 2
    followup_balance_threshold: float = 60.0
