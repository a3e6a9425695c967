"""Tests for coach endpoints."""

from uuid import uuid4

from fastapi.testclient import TestClient

from budget_tracker.api.app import create_app
from tests.conftest import make_profile


def test_coach_clients_requires_token(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/coach/clients", params={"coach_id": str(uuid4())})

    assert response.status_code == 401


def test_coach_clients_endpoint(container, repositories) -> None:
    client = TestClient(create_app(container))
    coach_id = uuid4()
    repositories.profiles.add(make_profile(coach_id=coach_id))

    response = client.get(
        "/coach/clients",
        params={"coach_id": str(coach_id)},
        headers={"X-Admin-Token": "admin-token"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["stats"]["in_baseline_count"] == 1
    assert data["clients"]["in_baseline"][0]["baseline_complete"] is False
