"""
Pytest fixtures shared by the form builder tests.
Provides stores wired to in-memory or SQLite persistence and an API client.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from formbuilder.config import Settings
from formbuilder.main import create_app
from formbuilder.services.persistence import InMemoryGateway
from formbuilder.services.store import FormStore


class TickingClock:
    """Clock that advances one second every time it is read."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 6, 14, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        current = self.now
        self.now = current + timedelta(seconds=1)
        return current


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite database."""
    return Settings(database_url=f"sqlite:///{tmp_path / 'forms.db'}", log_level="DEBUG")


@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(gateway, settings, clock):
    """An opened store backed by the in-memory gateway."""
    with FormStore(gateway, settings=settings, clock=clock) as form_store:
        yield form_store


@pytest.fixture
def client(settings):
    """API client running the app lifespan against the SQLite database."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client
