from datetime import date

import pytest
from fastapi.testclient import TestClient

from tutoring_calendar.config import Settings
from tutoring_calendar.main import create_app
from tutoring_calendar.redis_client import get_redis

MONDAY = date(2024, 6, 3)


class InMemoryRedis:
    """Dict-backed stand-in for the handful of Redis calls the app makes."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
                self.ttls.pop(key, None)
        return removed

    def exists(self, *keys):
        return sum(1 for key in keys if key in self.data)

    def ping(self):
        return True


@pytest.fixture
def fake_redis():
    return InMemoryRedis()


@pytest.fixture
def settings():
    return Settings(
        webhook_url="",
        booking_delay_seconds=0,
        form_debounce_seconds=0.05,
    )


@pytest.fixture
def app(settings, fake_redis):
    app = create_app(settings)
    app.dependency_overrides[get_redis] = lambda: fake_redis
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
