"""Pure projections of engine status for display."""

from __future__ import annotations

from dataclasses import dataclass

from shared.models.timer import TimerState


@dataclass(frozen=True)
class TimerStatus:
    state: TimerState
    remaining_seconds: int
    total_seconds: int


@dataclass(frozen=True)
class ControlState:
    """Which of the start/pause/stop controls accept input."""

    start_enabled: bool
    pause_enabled: bool
    stop_enabled: bool


_CONTROLS = {
    TimerState.RUNNING: ControlState(start_enabled=False, pause_enabled=True, stop_enabled=True),
    TimerState.PAUSED: ControlState(start_enabled=True, pause_enabled=False, stop_enabled=True),
    TimerState.STOPPED: ControlState(start_enabled=True, pause_enabled=False, stop_enabled=False),
}


def controls(state: TimerState) -> ControlState:
    return _CONTROLS[state]


def format_remaining(seconds: int) -> str:
    """Format remaining time as ``m:ss``; minutes are not padded, seconds always are."""
    seconds = max(0, seconds)
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def progress(status: TimerStatus) -> int:
    """Elapsed seconds on a 0..total_seconds scale."""
    remaining = min(max(0, status.remaining_seconds), status.total_seconds)
    return status.total_seconds - remaining
