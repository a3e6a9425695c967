"""Daily aggregation of meal log entries."""

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol
from uuid import UUID

from budget_tracker.domain.errors import InvalidInput, NotFound
from budget_tracker.domain.meals import DailySummary, MealLogEntry, MealType
from budget_tracker.services.locks import UserLocks
from budget_tracker.services.scores import ScoreService
from budget_tracker.services.streaks import StreakService

_logger = logging.getLogger(__name__)


class MealLogRepository(Protocol):
    """Persistence interface for meal log entries."""

    def get_entry(self, user_id: UUID, entry_id: UUID) -> MealLogEntry | None:
        """Return an entry by id, if present."""

    def save_entry(self, entry: MealLogEntry) -> None:
        """Insert or replace an entry."""

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete an entry."""

    def list_entries(self, user_id: UUID, log_date: date) -> list[MealLogEntry]:
        """Return all entries for a calendar date."""


class DailySummaryRepository(Protocol):
    """Persistence interface for daily summaries."""

    def get_summary(self, user_id: UUID, summary_date: date) -> DailySummary | None:
        """Return the summary for a date, if present."""

    def save_summary(self, summary: DailySummary) -> None:
        """Upsert the summary keyed by user and date."""

    def list_summaries(
        self, user_id: UUID, start: date, end: date
    ) -> list[DailySummary]:
        """Return summaries with dates in ``[start, end]``."""


@dataclass
class DailyAggregatorService:
    """Keeps one summary per user and date equal to the sum of its entries."""

    meal_repository: MealLogRepository
    summary_repository: DailySummaryRepository
    streak_service: StreakService
    score_service: ScoreService
    locks: UserLocks = field(default_factory=UserLocks)

    def upsert_meal_log(
        self, entry: MealLogEntry, today: date, *, require_existing: bool = False
    ) -> DailySummary:
        """Validate and store an entry, then recompute its day.

        With ``require_existing`` the entry must already belong to the user;
        edits never create rows or touch another user's entries.
        """
        _validate_entry(entry)
        with self.locks.for_user(entry.user_id):
            previous = self.meal_repository.get_entry(entry.user_id, entry.id)
            if previous is None and require_existing:
                raise NotFound(f"Meal log {entry.id} not found")
            self.meal_repository.save_entry(entry)
            if previous is not None and previous.log_date != entry.log_date:
                self.recompute_day(entry.user_id, previous.log_date, today)
            return self.recompute_day(entry.user_id, entry.log_date, today)

    def delete_meal_log(
        self, user_id: UUID, entry_id: UUID, today: date
    ) -> DailySummary:
        """Delete an entry and recompute its day."""
        with self.locks.for_user(user_id):
            entry = self.meal_repository.get_entry(user_id, entry_id)
            if entry is None:
                raise NotFound(f"Meal log {entry_id} not found")
            self.meal_repository.delete_entry(user_id, entry_id)
            return self.recompute_day(user_id, entry.log_date, today)

    def recompute_day(self, user_id: UUID, day: date, today: date) -> DailySummary:
        """Rebuild the summary for a date from its current entries.

        Idempotent: running it again without entry changes writes the same
        summary and triggers nothing new.
        """
        with self.locks.for_user(user_id):
            before = self.summary_repository.get_summary(user_id, day)
            summary = summarize_day(
                user_id, day, self.meal_repository.list_entries(user_id, day)
            )
            self.summary_repository.save_summary(summary)
            if summary.is_logged and not (before and before.is_logged):
                self.streak_service.record_logged_day(user_id, day)
            self.score_service.refresh_for_day(user_id, day, today)
            return summary

    def get_summary(self, user_id: UUID, day: date) -> DailySummary:
        """Return the stored summary or an empty one."""
        summary = self.summary_repository.get_summary(user_id, day)
        if summary is None:
            return summarize_day(user_id, day, [])
        return summary


def summarize_day(
    user_id: UUID, day: date, entries: list[MealLogEntry]
) -> DailySummary:
    """Sum the entries of one day."""
    todays = [entry for entry in entries if entry.log_date == day]
    return DailySummary(
        user_id=user_id,
        summary_date=day,
        calories_consumed=sum(entry.calories for entry in todays),
        protein_g=sum(entry.protein_g for entry in todays),
        carbs_g=sum(entry.carbs_g for entry in todays),
        fat_g=sum(entry.fat_g for entry in todays),
        meals_logged=len(todays),
        is_logged=bool(todays),
    )


def _validate_entry(entry: MealLogEntry) -> None:
    if not isinstance(entry.log_date, date):
        raise InvalidInput("log_date must be a calendar date")
    if not isinstance(entry.meal_type, MealType):
        raise InvalidInput(f"Unknown meal type: {entry.meal_type!r}")
    for name in ("calories", "protein_g", "carbs_g", "fat_g"):
        value = getattr(entry, name)
        if value is None or not math.isfinite(value) or value < 0:
            _logger.warning(
                "Rejected meal log: user_id=%s field=%s value=%s",
                entry.user_id,
                name,
                value,
            )
            raise InvalidInput(f"{name} must be a finite number, zero or greater")
