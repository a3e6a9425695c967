"""Tests for container wiring."""

from budget_tracker.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.budget_service is not None
    assert container.policy.baseline_days_target == 7
    assert container.aggregator_service.locks is container.budget_service.locks
    assert container.cheat_day_service.locks is container.baseline_service.locks
