# tests/conftest.py
from datetime import datetime, timedelta, timezone

import pytest

from app.database import InMemoryAuthService, InMemoryDocumentStore
from app.repository import ProductRepository
from app.session import SessionManager

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"


class FakeClock:
    def __init__(self):
        self.now = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds: float):
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def auth():
    a = InMemoryAuthService()
    a.add_account(ADMIN_EMAIL, ADMIN_PASSWORD)
    return a


@pytest.fixture
def store(auth):
    return InMemoryDocumentStore(auth=auth)


@pytest.fixture
def repository(store, clock):
    return ProductRepository(store, "test-app", timeout=1.0, clock=clock)


@pytest.fixture
def session(auth):
    s = SessionManager(auth, timeout=1.0)
    yield s
    s.close()
