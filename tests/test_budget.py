"""Tests for weekly budget math and period rollover."""

from datetime import date, timedelta
from uuid import uuid4

import pytest

from budget_tracker.domain.baseline import BaselineState
from budget_tracker.domain.budget import (
    Goal,
    WeeklyPeriod,
    baseline_average,
    calculate_weekly_budget,
    goal_adjustment,
    monday_after,
    window_for,
)
from budget_tracker.domain.errors import EngineWarning, InvalidInput, NoActiveBaseline
from budget_tracker.domain.meals import DailySummary
from tests.conftest import TODAY, logged_summary, make_profile

COMPLETED = BaselineState(
    start_date=date(2023, 12, 25),
    complete=True,
    completed_at=date(2024, 1, 1),
    average_daily=2000.0,
)


def _period(user_id, start: date, budget: int = 14000) -> WeeklyPeriod:
    return WeeklyPeriod(
        id=uuid4(),
        user_id=user_id,
        week_start_date=start,
        week_end_date=start + timedelta(days=6),
        baseline_average_daily=2000.0,
        weekly_budget=budget,
    )


def test_budget_from_average_and_adjustment() -> None:
    assert calculate_weekly_budget(2000, -500) == 13500
    assert goal_adjustment(Goal.LOSE, 1.0) == -3500
    assert goal_adjustment(Goal.GAIN, 0.5) == 1750
    assert goal_adjustment(Goal.MAINTAIN, 2.0) == 0


def test_budget_never_negative() -> None:
    for goal in Goal:
        for rate in (0.0, 0.5, 2.0, 10.0):
            for average in (0.0, 500.0, 2000.0):
                budget = calculate_weekly_budget(
                    average, goal_adjustment(goal, rate)
                )
                assert budget >= 0


def test_baseline_average_excludes_unlogged_days() -> None:
    user_id = uuid4()
    empty = DailySummary(
        user_id=user_id,
        summary_date=date(2024, 1, 3),
        calories_consumed=0.0,
        protein_g=0.0,
        carbs_g=0.0,
        fat_g=0.0,
        meals_logged=0,
        is_logged=False,
    )
    summaries = [
        logged_summary(user_id, date(2024, 1, 1), 1800),
        logged_summary(user_id, date(2024, 1, 2), 2200),
        empty,
    ]

    assert baseline_average(summaries) == 2000
    assert baseline_average([empty]) is None


def test_period_windows() -> None:
    assert monday_after(date(2024, 1, 8)) == date(2024, 1, 15)
    assert monday_after(date(2024, 1, 7)) == date(2024, 1, 8)
    anchor = date(2024, 1, 1)
    assert window_for(anchor, date(2024, 1, 10)) == (
        date(2024, 1, 8),
        date(2024, 1, 14),
    )
    assert window_for(anchor, date(2023, 12, 30)) == (anchor, date(2024, 1, 7))


def test_lazy_rollover_opens_contiguous_periods(container, repositories) -> None:
    profile = repositories.profiles.add(make_profile(baseline=COMPLETED))
    first = repositories.periods.create_period(
        _period(profile.user_id, date(2024, 1, 1))
    )
    repositories.summaries.save_summary(
        logged_summary(profile.user_id, date(2024, 1, 2), 1900)
    )

    current = container.budget_service.current_period(
        profile.user_id, date(2024, 1, 17)
    )

    periods = repositories.periods.list_periods(profile.user_id)
    assert current.week_start_date == date(2024, 1, 15)
    assert [period.week_start_date for period in periods] == [
        date(2024, 1, 1),
        date(2024, 1, 8),
        date(2024, 1, 15),
    ]
    for previous, following in zip(periods, periods[1:], strict=False):
        assert following.week_start_date == previous.week_end_date + timedelta(days=1)
    lapsed = repositories.metrics.get_metrics(first.id)
    assert lapsed.is_final is True
    assert lapsed.total_consumed == 1900


def test_rolled_periods_follow_current_goal(container, repositories) -> None:
    profile = repositories.profiles.add(
        make_profile(baseline=COMPLETED, goal=Goal.LOSE, weekly_goal_rate=1.0)
    )
    repositories.periods.create_period(_period(profile.user_id, date(2024, 1, 1)))

    current = container.budget_service.current_period(profile.user_id, TODAY)

    assert current.weekly_budget == 10500
    assert current.baseline_average_daily == 2000


def test_recalculate_is_idempotent(container, repositories) -> None:
    profile = repositories.profiles.add(make_profile(baseline=COMPLETED))

    first = container.budget_service.recalculate(profile.user_id, TODAY)
    second = container.budget_service.recalculate(profile.user_id, TODAY)

    assert first.created is True
    assert second.created is False
    assert second.period == first.period
    assert first.period.week_start_date == date(2024, 1, 8)
    assert len(repositories.periods.list_periods(profile.user_id)) == 1


def test_recalculate_without_profile_falls_back(container, repositories) -> None:
    result = container.budget_service.recalculate(uuid4(), TODAY)

    assert result.warnings == (EngineWarning.NO_PROFILE,)
    assert result.period.id is None
    assert result.period.weekly_budget == 14000
    assert result.period.week_start_date == date(2024, 1, 8)
    assert repositories.periods.periods == []


def test_recalculate_without_completed_baseline_falls_back(
    container, repositories
) -> None:
    profile = repositories.profiles.add(
        make_profile(
            baseline=BaselineState(start_date=date(2024, 1, 5)),
            goal=Goal.GAIN,
            weekly_goal_rate=0.5,
        )
    )

    result = container.budget_service.recalculate(profile.user_id, TODAY)

    assert result.warnings == (EngineWarning.NO_ACTIVE_BASELINE,)
    assert result.period.weekly_budget == 15750
    assert result.period.week_start_date == date(2024, 1, 8)
    assert result.period.week_end_date == date(2024, 1, 14)


def test_period_for_date_bounds(container, repositories) -> None:
    profile = repositories.profiles.add(make_profile(baseline=COMPLETED))
    repositories.periods.create_period(_period(profile.user_id, date(2024, 1, 8)))
    service = container.budget_service

    future = service.period_for_date(profile.user_id, date(2024, 1, 24), TODAY)

    assert future.week_start_date == date(2024, 1, 22)
    assert len(repositories.periods.list_periods(profile.user_id)) == 3
    with pytest.raises(InvalidInput):
        service.period_for_date(profile.user_id, date(2024, 1, 5), TODAY)
    with pytest.raises(InvalidInput):
        service.period_for_date(profile.user_id, date(2024, 6, 1), TODAY)


def test_period_for_date_requires_a_period(container, repositories) -> None:
    profile = repositories.profiles.add(make_profile())

    with pytest.raises(NoActiveBaseline):
        container.budget_service.period_for_date(profile.user_id, TODAY, TODAY)
