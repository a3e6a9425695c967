"""Domain errors and warnings for the budget engine."""

from enum import Enum


class BudgetEngineError(Exception):
    """Base class for errors raised by the budget engine."""

    code = "engine_error"


class InvalidInput(BudgetEngineError):
    """Negative nutrition values, malformed dates or out-of-range requests."""

    code = "invalid_input"


class NotFound(BudgetEngineError):
    """Requested record does not exist for the user."""

    code = "not_found"


class NoProfile(BudgetEngineError):
    """User has no profile row."""

    code = "no_profile"


class NoActiveBaseline(BudgetEngineError):
    """User has no baseline window or weekly period to act on."""

    code = "no_active_baseline"


class AlreadyExtended(BudgetEngineError):
    """Baseline window was already extended once."""

    code = "already_extended"


class InvalidBaselineTransition(BudgetEngineError):
    """Baseline command is not allowed in the current phase."""

    code = "invalid_baseline_transition"


class InsufficientBudget(BudgetEngineError):
    """Treat-day reservation exceeds the unreserved weekly budget."""

    code = "insufficient_budget"


class EngineWarning(str, Enum):
    """Non-fatal conditions attached to otherwise successful results."""

    LOW_CONFIDENCE_BASELINE = "low_confidence_baseline"
    NO_ACTIVE_BASELINE = "no_active_baseline"
    NO_PROFILE = "no_profile"
