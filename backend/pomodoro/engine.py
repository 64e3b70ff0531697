"""Countdown state machine with background reconciliation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from pomodoro.clock import Clock
from pomodoro.render import TimerStatus, format_remaining
from pomodoro.scheduler import WakeScheduler, wake_up_time
from shared.models.timer import DEFAULT_TIMER_LENGTH_MINUTES, TimerSnapshot, TimerState
from shared.repositories.base import TimerStore

LOGGER = logging.getLogger("TimerEngine")

StatusListener = Callable[[TimerStatus], None]


class TimerEngine:
    """A single countdown driven through Stopped / Paused / Running.

    While the host can tick, a one-second loop on the event loop decrements
    the countdown. When the host is about to stop ticking it calls
    :meth:`suspend`, which arms the wake scheduler and persists the snapshot;
    :meth:`resume` reloads the snapshot and subtracts the wall-clock time that
    passed in between.

    Invalid transitions are ignored and store failures are logged, so no
    operation raises to the caller.

    With ``tick_interval=None`` no tick loop is started and the host calls
    :meth:`tick` itself.
    """

    def __init__(
        self,
        store: TimerStore,
        scheduler: WakeScheduler,
        clock: Clock,
        *,
        tick_interval: float | None = 1.0,
        default_timer_length: int = DEFAULT_TIMER_LENGTH_MINUTES,
    ) -> None:
        self.store = store
        self.scheduler = scheduler
        self.clock = clock
        self.tick_interval = tick_interval
        self.default_timer_length = default_timer_length

        self.state = TimerState.STOPPED
        self.total_seconds = 0
        self.remaining_seconds = 0
        self.alarm_set_time = 0

        self._ticking = False
        self._tick_task: asyncio.Task | None = None
        self._listeners: list[StatusListener] = []

    # ==================== Read side ====================

    @property
    def status(self) -> TimerStatus:
        return TimerStatus(
            state=self.state,
            remaining_seconds=max(0, self.remaining_seconds),
            total_seconds=self.total_seconds,
        )

    @property
    def is_ticking(self) -> bool:
        return self._ticking

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            state=self.state,
            total_seconds=self.total_seconds,
            remaining_seconds=max(0, self.remaining_seconds),
            alarm_set_time=self.alarm_set_time,
        )

    def add_listener(self, listener: StatusListener) -> None:
        """Register a callback invoked with the new status after every change."""
        self._listeners.append(listener)

    def _notify(self) -> None:
        status = self.status
        for listener in self._listeners:
            try:
                listener(status)
            except Exception:
                LOGGER.exception("Status listener failed")

    # ==================== Transitions ====================

    async def start(self) -> None:
        if self.state is TimerState.RUNNING:
            LOGGER.debug("start() ignored: already running")
            return

        if self.state is TimerState.STOPPED:
            self.total_seconds = await self._new_timer_length()
            self.remaining_seconds = self.total_seconds

        self._clear_alarm()
        self.state = TimerState.RUNNING
        self._begin_ticking()
        LOGGER.info(f"Timer started with {format_remaining(self.remaining_seconds)} left")
        self._notify()

    async def tick(self) -> None:
        if self.state is not TimerState.RUNNING or not self._ticking:
            return

        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        if self.remaining_seconds == 0:
            await self.finish()
        else:
            self._notify()

    async def pause(self) -> None:
        if self.state is not TimerState.RUNNING:
            LOGGER.debug(f"pause() ignored in state {self.state.value}")
            return

        self._halt_ticking()
        self._clear_alarm()
        self.state = TimerState.PAUSED
        LOGGER.info(f"Timer paused at {format_remaining(self.remaining_seconds)}")
        self._notify()

    async def stop(self) -> None:
        if self.state is TimerState.STOPPED:
            LOGGER.debug("stop() ignored: already stopped")
            return

        LOGGER.info(f"Timer stopped with {format_remaining(self.remaining_seconds)} left")
        await self.finish()

    async def finish(self) -> None:
        """Reset to a fresh full-length countdown in Stopped. Safe to repeat."""
        self._halt_ticking()
        self.state = TimerState.STOPPED
        self.total_seconds = await self._new_timer_length()
        self.remaining_seconds = self.total_seconds
        self._clear_alarm()
        await self._persist()
        self._notify()

    async def on_wake(self) -> None:
        """Handle the wake alarm firing while the engine is suspended."""
        if self._ticking:
            # Resume already reconciled and restarted ticking; the alarm is stale
            LOGGER.debug("Wake alarm ignored: timer is ticking")
            return

        LOGGER.info("Wake alarm fired, timer finished")
        await self.finish()

    # ==================== Lifecycle boundaries ====================

    async def suspend(self, now: int | None = None) -> int | None:
        """Stop ticking in-process and persist; arm the wake alarm if running.

        Returns the epoch second of the armed alarm, or None.
        """
        now = self.clock.now() if now is None else now
        wake_at: int | None = None

        if self.state is TimerState.RUNNING:
            self._halt_ticking()
            # Already suspended: elapsed time counts from the first stamp
            if self.alarm_set_time == 0:
                wake_at = wake_up_time(now, self.remaining_seconds)
                self.scheduler.arm(wake_at)
                self.alarm_set_time = now
                LOGGER.info(f"Suspended with {format_remaining(self.remaining_seconds)} left")

        await self._persist()
        return wake_at

    async def resume(self, now: int | None = None) -> TimerStatus:
        """Reload the snapshot and account for time spent suspended."""
        now = self.clock.now() if now is None else now
        self._halt_ticking()

        snapshot = await self._load()
        self.state = snapshot.state

        if self.state is TimerState.STOPPED:
            self.total_seconds = await self._new_timer_length()
            self.remaining_seconds = self.total_seconds
        else:
            self.total_seconds = max(0, snapshot.total_seconds)
            self.remaining_seconds = min(max(0, snapshot.remaining_seconds), self.total_seconds)

        if snapshot.alarm_armed:
            if self.state is TimerState.RUNNING:
                elapsed = max(0, now - snapshot.alarm_set_time)
                self.remaining_seconds -= elapsed
                LOGGER.debug(f"Reconciled {elapsed}s spent suspended")
            else:
                LOGGER.warning(
                    f"Discarding stale alarm stamp {snapshot.alarm_set_time} "
                    f"in state {self.state.value}"
                )

        if self.remaining_seconds <= 0:
            LOGGER.info("Timer expired while suspended")
            await self.finish()
            return self.status

        self._clear_alarm()
        if snapshot.alarm_armed:
            await self._persist()
        if self.state is TimerState.RUNNING:
            self._begin_ticking()
        self._notify()
        return self.status

    # ==================== Internals ====================

    def _begin_ticking(self) -> None:
        self._ticking = True
        if self.tick_interval is not None:
            self._tick_task = asyncio.create_task(self._tick_loop())

    def _clear_alarm(self) -> None:
        self.alarm_set_time = 0
        self.scheduler.disarm()

    def _halt_ticking(self) -> None:
        self._ticking = False
        task, self._tick_task = self._tick_task, None
        # finish() may run inside the tick loop itself; that loop exits on its own
        if task is not None and task is not asyncio.current_task():
            task.cancel()

    async def _tick_loop(self) -> None:
        me = asyncio.current_task()
        while True:
            await asyncio.sleep(self.tick_interval)
            if self._tick_task is not me:
                return
            await self.tick()

    async def _new_timer_length(self) -> int:
        """Seconds in a fresh timer, read from the configured length."""
        try:
            minutes = await self.store.get_timer_length()
        except Exception:
            LOGGER.exception("Failed to read timer length, using default")
            minutes = self.default_timer_length
        if minutes <= 0:
            LOGGER.warning(f"Ignoring non-positive timer length {minutes}")
            minutes = self.default_timer_length
        return minutes * 60

    async def _load(self) -> TimerSnapshot:
        try:
            snapshot = await self.store.load_snapshot()
        except Exception:
            LOGGER.exception("Failed to load timer snapshot, starting fresh")
            snapshot = None
        return snapshot or TimerSnapshot()

    async def _persist(self) -> None:
        try:
            await self.store.save_snapshot(self.snapshot())
        except Exception:
            LOGGER.exception("Failed to persist timer snapshot")
