"""ASGI entrypoint for the budget tracker API."""

from budget_tracker.api.app import create_app
from budget_tracker.containers import build_container

app = create_app(build_container())
