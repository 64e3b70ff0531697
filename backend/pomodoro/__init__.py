"""Headless pomodoro timer."""

from .engine import TimerEngine
from .render import ControlState, TimerStatus, controls, format_remaining, progress
from .scheduler import AsyncioWakeScheduler, DetachedScheduler, wake_up_time
from .service import TimerService

__all__ = [
    "AsyncioWakeScheduler",
    "ControlState",
    "DetachedScheduler",
    "TimerEngine",
    "TimerService",
    "TimerStatus",
    "controls",
    "format_remaining",
    "progress",
    "wake_up_time",
]
