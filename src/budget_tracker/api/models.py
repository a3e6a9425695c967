"""Pydantic models for request payloads."""

from datetime import date

from pydantic import BaseModel, Field

from budget_tracker.domain.meals import MealType


class MealLogRequest(BaseModel):
    """Meal log create or edit payload."""

    log_date: date
    meal_type: MealType
    calories: float = Field(allow_inf_nan=False)
    protein_g: float = Field(default=0.0, allow_inf_nan=False)
    carbs_g: float = Field(default=0.0, allow_inf_nan=False)
    fat_g: float = Field(default=0.0, allow_inf_nan=False)
    food_name: str | None = Field(default=None, max_length=200)


class CheatDayRequest(BaseModel):
    """Treat-day reservation payload."""

    cheat_date: date
    planned_calories: int
