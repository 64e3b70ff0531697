"""Pomodoro timer configuration"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.models.timer import DEFAULT_TIMER_LENGTH_MINUTES

logger = logging.getLogger(__name__)

# === Path Configuration ===
POMODORO_DIR = Path(__file__).parent.parent
DEFAULT_DATA_DIR = Path.home() / ".pomodoro"
STATE_FILE_NAME = "timer_state.json"


class TimerSettings(BaseSettings):
    """Pomodoro timer settings"""

    model_config = SettingsConfigDict(
        env_prefix="POMODORO_",
        env_file=POMODORO_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    store: Literal["file", "postgres"] = Field(default="file", description="Timer store backend")
    data_dir: Path = Field(default=DEFAULT_DATA_DIR, description="Directory for the state file")
    database_url: str = Field(default="", description="PostgreSQL database URL")
    timer_id: str = Field(default="default", description="Timer row key in PostgreSQL")

    # Timer
    default_timer_length: int = Field(
        default=DEFAULT_TIMER_LENGTH_MINUTES, gt=0, description="Length in minutes until configured"
    )
    tick_interval: float = Field(default=1.0, gt=0, description="Seconds between ticks")

    # Environment
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL starts with postgresql://"""
        if v and not v.startswith("postgresql://"):
            raise ValueError("DATABASE_URL must start with 'postgresql://'")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper

    @model_validator(mode="after")
    def require_database_url(self) -> "TimerSettings":
        if self.store == "postgres" and not self.database_url:
            raise ValueError("POMODORO_DATABASE_URL is required when POMODORO_STORE=postgres")
        return self

    @property
    def state_file(self) -> Path:
        return self.data_dir.expanduser() / STATE_FILE_NAME


@lru_cache
def get_settings() -> TimerSettings:
    """Get cached settings instance"""
    return TimerSettings()
