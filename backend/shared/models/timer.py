"""Timer state models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

DEFAULT_TIMER_LENGTH_MINUTES = 25


class TimerState(str, Enum):
    STOPPED = "Stopped"
    PAUSED = "Paused"
    RUNNING = "Running"


@dataclass
class TimerSnapshot:
    """Last known engine state, the only thing carried across a suspend/resume."""

    state: TimerState = TimerState.STOPPED
    total_seconds: int = 0
    remaining_seconds: int = 0
    # Epoch seconds at which the wake alarm was armed, 0 when none is armed
    alarm_set_time: int = 0
    updated_at: datetime | None = None

    @property
    def alarm_armed(self) -> bool:
        return self.alarm_set_time > 0
