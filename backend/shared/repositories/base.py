"""Storage contract shared by every timer store backend."""

from __future__ import annotations

from typing import Protocol

from shared.models.timer import TimerSnapshot


class TimerStore(Protocol):
    async def get_timer_length(self) -> int:
        """Return the configured timer length in minutes."""
        ...

    async def set_timer_length(self, minutes: int) -> None: ...

    async def load_snapshot(self) -> TimerSnapshot | None:
        """Return the persisted snapshot, or None when missing or unreadable."""
        ...

    async def save_snapshot(self, snapshot: TimerSnapshot) -> None: ...
