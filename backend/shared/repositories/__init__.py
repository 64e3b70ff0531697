"""Timer store backends."""

from .base import TimerStore
from .file import JsonTimerStore
from .memory import MemoryTimerStore
from .timer import PostgresTimerStore

__all__ = [
    "JsonTimerStore",
    "MemoryTimerStore",
    "PostgresTimerStore",
    "TimerStore",
]
