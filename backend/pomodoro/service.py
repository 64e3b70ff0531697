"""Timer service: host lifecycle around the engine."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from pomodoro.clock import Clock, SystemClock
from pomodoro.core.config import TimerSettings
from pomodoro.engine import StatusListener, TimerEngine
from pomodoro.render import TimerStatus
from pomodoro.scheduler import AsyncioWakeScheduler, DetachedScheduler
from shared.database import DatabaseManager
from shared.models.timer import DEFAULT_TIMER_LENGTH_MINUTES, TimerState
from shared.repositories.base import TimerStore
from shared.repositories.file import JsonTimerStore
from shared.repositories.timer import PostgresTimerStore

logger = logging.getLogger(__name__)

COMMANDS = ("status", "start", "pause", "stop")


@asynccontextmanager
async def open_store(settings: TimerSettings) -> AsyncIterator[TimerStore]:
    """Yield the store selected by *settings*, closing any pool on exit."""
    if settings.store == "file":
        yield JsonTimerStore(settings.state_file, settings.default_timer_length)
        return

    db = DatabaseManager(settings.database_url)
    await db.connect()
    try:
        yield PostgresTimerStore(db.pool, settings.timer_id, settings.default_timer_length)
    finally:
        await db.disconnect()


class TimerService:
    """Runs the engine through the resume → operate → suspend cycle a host goes through."""

    def __init__(
        self,
        store: TimerStore,
        clock: Clock | None = None,
        *,
        tick_interval: float = 1.0,
        default_timer_length: int = DEFAULT_TIMER_LENGTH_MINUTES,
    ) -> None:
        self.store = store
        self.clock = clock or SystemClock()
        self.tick_interval = tick_interval
        self.default_timer_length = default_timer_length

    def _engine(self, scheduler, tick_interval: float | None) -> TimerEngine:
        return TimerEngine(
            self.store,
            scheduler,
            self.clock,
            tick_interval=tick_interval,
            default_timer_length=self.default_timer_length,
        )

    async def configure(self, minutes: int) -> None:
        if minutes <= 0:
            raise ValueError("timer length must be a positive number of minutes")
        await self.store.set_timer_length(minutes)
        logger.info(f"Timer length set to {minutes} min")

    async def timer_length(self) -> int:
        return await self.store.get_timer_length()

    async def run_command(self, command: str) -> TimerStatus:
        """Apply one of :data:`COMMANDS` as a single resume/suspend cycle."""
        if command not in COMMANDS:
            raise ValueError(f"unknown command {command!r}")

        engine = self._engine(DetachedScheduler(), tick_interval=None)
        now = self.clock.now()
        await engine.resume(now)
        if command != "status":
            await getattr(engine, command)()
        await engine.suspend(now)
        return engine.status

    async def run_foreground(
        self, *, start: bool = False, listener: StatusListener | None = None
    ) -> TimerStatus:
        """Tick in-process until the countdown finishes or the task is cancelled."""
        engine = self._engine(DetachedScheduler(), tick_interval=self.tick_interval)
        if listener is not None:
            engine.add_listener(listener)

        await engine.resume()
        if start:
            await engine.start()
        if engine.state is not TimerState.RUNNING:
            await engine.suspend()
            return engine.status

        finished = _finished_event(engine)
        try:
            await finished.wait()
        finally:
            await engine.suspend()
        return engine.status

    async def wait(self) -> TimerStatus:
        """Suspend a running timer and block until its wake alarm finishes it."""
        scheduler = AsyncioWakeScheduler(self.clock)
        engine = self._engine(scheduler, tick_interval=None)
        scheduler.on_wake = engine.on_wake

        await engine.resume()
        if engine.state is not TimerState.RUNNING:
            await engine.suspend()
            return engine.status

        finished = _finished_event(engine)
        await engine.suspend()
        await finished.wait()
        return engine.status


def _finished_event(engine: TimerEngine) -> asyncio.Event:
    finished = asyncio.Event()

    def on_status(status: TimerStatus) -> None:
        if status.state is TimerState.STOPPED:
            finished.set()

    engine.add_listener(on_status)
    return finished
