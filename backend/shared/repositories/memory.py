"""Dict-backed timer store."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

from shared.models.timer import DEFAULT_TIMER_LENGTH_MINUTES, TimerSnapshot


class MemoryTimerStore:
    """Keeps the configuration and snapshot in process memory.

    Used by tests and by hosts that embed the engine without durable storage.
    Snapshots are copied on the way in and out so callers never share state
    with the store.
    """

    def __init__(
        self,
        timer_length: int = DEFAULT_TIMER_LENGTH_MINUTES,
        snapshot: TimerSnapshot | None = None,
    ) -> None:
        self.timer_length = timer_length
        self._snapshot = snapshot
        self.saves = 0

    async def get_timer_length(self) -> int:
        return self.timer_length

    async def set_timer_length(self, minutes: int) -> None:
        self.timer_length = minutes

    async def load_snapshot(self) -> TimerSnapshot | None:
        if self._snapshot is None:
            return None
        return replace(self._snapshot)

    async def save_snapshot(self, snapshot: TimerSnapshot) -> None:
        self._snapshot = replace(snapshot, updated_at=datetime.now(timezone.utc))
        self.saves += 1

    @property
    def snapshot(self) -> TimerSnapshot | None:
        return self._snapshot
