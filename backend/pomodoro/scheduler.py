"""One-shot wake alarms for a timer that is not ticking in-process."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Protocol

from pomodoro.clock import Clock

logger = logging.getLogger(__name__)


def wake_up_time(now: int, remaining_seconds: int) -> int:
    """Epoch second at which a countdown with *remaining_seconds* left expires."""
    return now + remaining_seconds


class WakeScheduler(Protocol):
    def arm(self, at: int) -> None:
        """Schedule the single wake callback at epoch second *at*, replacing any armed one."""
        ...

    def disarm(self) -> None: ...


class AsyncioWakeScheduler:
    """Fires ``on_wake`` on the running event loop at an absolute epoch second.

    At most one alarm is outstanding; arming again cancels the previous one.
    The host assigns ``on_wake`` once the engine exists.
    """

    def __init__(
        self,
        clock: Clock,
        on_wake: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self.clock = clock
        self.on_wake = on_wake
        self._handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()
        self.armed_at: int | None = None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def arm(self, at: int) -> None:
        self.disarm()
        delay = max(0, at - self.clock.now())
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire)
        self.armed_at = at
        logger.debug(f"Wake alarm armed for {at} (in {delay}s)")

    def disarm(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            logger.debug("Wake alarm disarmed")
        self.armed_at = None

    def _fire(self) -> None:
        self._handle = None
        self.armed_at = None
        if self.on_wake is None:
            logger.warning("Wake alarm fired with no handler attached")
            return
        task = asyncio.create_task(self.on_wake())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)


class DetachedScheduler:
    """Records the wake time for a host process that is about to exit.

    Nothing fires in-process; an expiry that happens while no process is
    alive is picked up by reconciliation on the next resume.
    """

    def __init__(self) -> None:
        self.armed_at: int | None = None

    def arm(self, at: int) -> None:
        self.armed_at = at
        logger.info(f"Timer due at {datetime.fromtimestamp(at):%H:%M:%S}")

    def disarm(self) -> None:
        self.armed_at = None
