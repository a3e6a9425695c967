"""Domain models for meal logging."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from uuid import UUID


class MealType(str, Enum):
    """Meal slot a log entry belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class MealLogEntry:
    """Single logged meal with its macros."""

    id: UUID
    user_id: UUID
    log_date: date
    meal_type: MealType
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    created_at: datetime
    food_name: str | None = None


@dataclass(frozen=True)
class DailySummary:
    """Totals for one user on one calendar date, derived from its entries."""

    user_id: UUID
    summary_date: date
    calories_consumed: float
    protein_g: float
    carbs_g: float
    fat_g: float
    meals_logged: int
    is_logged: bool
