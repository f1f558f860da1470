"""
Shared test fixtures for the blogguard test suite.

Time-dependent tests drive the limiter with a FakeClock instead of
sleeping. API tests get a fresh app, limiter and account store each.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from blogguard.accounts import AccountStore
from blogguard.api.app import create_app
from blogguard.config.settings import Settings
from blogguard.ratelimit.limiter import RateLimiter


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock: FakeClock) -> RateLimiter:
    """Default limiter parameters: 5 tokens, 5 per minute, 10 min idle expiry."""
    return RateLimiter(
        capacity=5,
        refill_tokens=5,
        refill_period=60.0,
        expire_after_access=600.0,
        max_entries=10_000,
        clock=clock,
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a temp directory."""
    s = Settings(project_root=tmp_path)
    s.ensure_dirs()
    return s


@pytest.fixture
def account_store() -> AccountStore:
    store = AccountStore()
    store.register(
        email="user@example.com",
        password="Password123",
        confirm_password="Password123",
        name="Test User",
    )
    return store


@pytest.fixture
def app(settings: Settings, limiter: RateLimiter, account_store: AccountStore):
    return create_app(settings, rate_limiter=limiter, account_store=account_store)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)

