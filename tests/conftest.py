from __future__ import annotations

import jwt
import pytest

from src.medhir_portal.medhir_portal.session.manager import SessionManager, SessionSettings
from src.medhir_portal.medhir_portal.storage.memory_storage import InMemoryStorage

SIGNING_KEY = "medhir-portal-test-signing-key-0123456789"
START_MS = 1_700_000_000_000
ONE_HOUR_MS = 60 * 60 * 1000


class FakeClock:
    def __init__(self, start_ms: int):
        self.ms = start_ms

    def now_ms(self) -> int:
        return self.ms

    def now_seconds(self) -> int:
        return self.ms // 1000

    def advance_ms(self, ms: int) -> None:
        self.ms += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(START_MS)


@pytest.fixture
def make_token(clock):
    def _make(*, exp_in_seconds: int = 3600, **claims) -> str:
        payload = {"sub": "EMP-1", "exp": clock.now_seconds() + exp_in_seconds}
        payload.update(claims)
        return jwt.encode(payload, SIGNING_KEY, algorithm="HS256")

    return _make


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def manager(storage, clock) -> SessionManager:
    return SessionManager(
        storage,
        settings=SessionSettings(inactivity_threshold_ms=ONE_HOUR_MS, check_interval_seconds=60),
        now_ms=clock.now_ms,
        now_seconds=clock.now_seconds,
    )
