from __future__ import annotations

from contextlib import asynccontextmanager

import pytest

from pomodoro.core.config import get_settings
from pomodoro.engine import TimerEngine
from shared.repositories.memory import MemoryTimerStore


class FakeClock:
    def __init__(self, now: int = 1000) -> None:
        self.current = now

    def now(self) -> int:
        return self.current

    def advance(self, seconds: int) -> None:
        self.current += seconds


class RecordingScheduler:
    def __init__(self) -> None:
        self.armed_at: int | None = None
        self.arm_calls: list[int] = []
        self.disarm_calls = 0

    def arm(self, at: int) -> None:
        self.armed_at = at
        self.arm_calls.append(at)

    def disarm(self) -> None:
        self.armed_at = None
        self.disarm_calls += 1


class FakeConnection:
    """Records queries issued through an asyncpg-like connection."""

    def __init__(self) -> None:
        self.executed: list[tuple[str, tuple]] = []
        self.value = None
        self.row: dict | None = None
        self.rows: list[dict] = []

    async def fetchval(self, query: str, *args):
        self.executed.append((query, args))
        return self.value

    async def fetchrow(self, query: str, *args):
        self.executed.append((query, args))
        return self.row

    async def fetch(self, query: str, *args):
        self.executed.append((query, args))
        return self.rows

    async def execute(self, query: str, *args):
        self.executed.append((query, args))
        return "INSERT 0 1"

    @asynccontextmanager
    async def transaction(self):
        yield


class FakePool:
    def __init__(self, conn: FakeConnection | None = None) -> None:
        self.conn = conn or FakeConnection()

    @asynccontextmanager
    async def acquire(self, timeout: float | None = None):
        yield self.conn


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def store() -> MemoryTimerStore:
    return MemoryTimerStore()


@pytest.fixture
def engine(store, scheduler, clock) -> TimerEngine:
    return TimerEngine(store, scheduler, clock, tick_interval=None)


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    """Point settings at a temporary data dir and drop the cached instance."""
    for name in ("STORE", "DATABASE_URL", "DEFAULT_TIMER_LENGTH", "LOG_LEVEL", "TICK_INTERVAL"):
        monkeypatch.delenv(f"POMODORO_{name}", raising=False)
    monkeypatch.setenv("POMODORO_DATA_DIR", str(tmp_path))
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()
