"""Shared data models for the pomodoro timer."""

from .timer import DEFAULT_TIMER_LENGTH_MINUTES, TimerSnapshot, TimerState

__all__ = [
    "DEFAULT_TIMER_LENGTH_MINUTES",
    "TimerSnapshot",
    "TimerState",
]
