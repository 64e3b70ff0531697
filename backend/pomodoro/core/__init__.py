"""Core modules for the pomodoro timer."""

from .config import DEFAULT_DATA_DIR, POMODORO_DIR, STATE_FILE_NAME, TimerSettings, get_settings
from .logging import setup_logging

__all__ = [
    # Settings
    "TimerSettings",
    "get_settings",
    # Path Constants
    "POMODORO_DIR",
    "DEFAULT_DATA_DIR",
    "STATE_FILE_NAME",
    # Setup functions
    "setup_logging",
]
