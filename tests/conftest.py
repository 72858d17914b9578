"""Shared test fixtures."""
from datetime import datetime, timedelta, UTC

import pytest

from clinic_reviews.review_store import ReviewStore
from reviews_api import create_app


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    """Clock frozen at a fixed instant."""
    return FrozenClock(datetime(2025, 9, 1, 12, 0, 0, tzinfo=UTC))


@pytest.fixture
def store(clock) -> ReviewStore:
    """Empty store driven by the frozen clock."""
    return ReviewStore(clock=clock)


@pytest.fixture
def review_data():
    """Build valid create arguments, overridable per test."""
    def _create(**overrides):
        data = {
            "appointment_id": "apt_100",
            "patient_id": "patient_001",
            "doctor_id": "doctor_001",
            "patient_name": "John Doe",
            "doctor_name": "Dr. Priya Sharma",
            "rating": 5,
            "review_text": "Very thorough consultation, felt heard.",
        }
        data.update(overrides)
        return data
    return _create


@pytest.fixture
def client(store):
    """Flask test client serving the test store."""
    app = create_app(store=store)
    app.config["TESTING"] = True
    with app.test_client() as test_client:
        yield test_client
