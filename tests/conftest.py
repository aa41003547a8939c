import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SEED_DEMO_DATA", "true")
os.environ["SUPABASE_URL"] = ""
os.environ["GEMINI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from app.services.issue_store import IssueStore, get_store


class FakeClock:
    """Epoch-millis clock the tests move by hand."""

    def __init__(self, start: int = 1_720_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def tick(self, ms: int = 1000) -> int:
        self.now += ms
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return IssueStore.in_memory(clock=clock)


@pytest.fixture
def seeded_store(clock):
    return IssueStore.in_memory(clock=clock, seed=True)


@pytest.fixture
def new_issue():
    """A valid citizen submission."""
    return {
        "title": "Pothole near school",
        "description": "Deep pothole in front of the school gate, cars swerve around it.",
        "type": "Road",
        "location": {"latitude": 34.05, "longitude": -118.24, "address": "12 School Rd"},
        "reported_by_id": "citizen123",
    }


@pytest.fixture
def client(seeded_store):
    from app.main import app

    app.dependency_overrides[get_store] = lambda: seeded_store
    yield TestClient(app)
    app.dependency_overrides = {}
