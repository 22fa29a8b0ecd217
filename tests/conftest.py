"""Shared test fixtures for the BOPP management core."""

from datetime import datetime, timedelta, timezone

import pytest

from bopp.auth.store import UserStore
from bopp.config import AuthSettings, RateSettings
from bopp.rates.store import RateStore
from bopp.storage.memory import MemoryBackend


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    """Clock frozen at a fixed instant until advanced."""
    return FakeClock(datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def backend() -> MemoryBackend:
    """Empty in-memory backend (nothing ever stored)."""
    return MemoryBackend()


@pytest.fixture
def rate_settings() -> RateSettings:
    return RateSettings()


@pytest.fixture
def auth_settings() -> AuthSettings:
    """Auth settings without pacing delay and with cheap hashing."""
    return AuthSettings(response_delay_seconds=0, password_hash_iterations=1_000)


@pytest.fixture
def rate_store(backend: MemoryBackend, rate_settings: RateSettings, clock: FakeClock) -> RateStore:
    return RateStore(backend, rate_settings, clock=clock)


@pytest.fixture
def user_store(backend: MemoryBackend, auth_settings: AuthSettings, clock: FakeClock) -> UserStore:
    return UserStore(backend, auth_settings, clock=clock)
