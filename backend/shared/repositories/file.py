"""JSON file timer store."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from shared.models.timer import DEFAULT_TIMER_LENGTH_MINUTES, TimerSnapshot, TimerState

logger = logging.getLogger(__name__)


class TimerFileRecord(BaseModel):
    """On-disk layout of the timer state file."""

    timer_length: int = Field(default=DEFAULT_TIMER_LENGTH_MINUTES, gt=0)
    previous_timer_length: int = Field(default=0, ge=0)
    seconds_remaining: int = Field(default=0, ge=0)
    timer_state: TimerState = TimerState.STOPPED
    alarm_set_time: int = Field(default=0, ge=0)
    has_snapshot: bool = False
    updated_at: datetime | None = None

    def to_snapshot(self) -> TimerSnapshot | None:
        if not self.has_snapshot:
            return None
        return TimerSnapshot(
            state=self.timer_state,
            total_seconds=self.previous_timer_length,
            remaining_seconds=self.seconds_remaining,
            alarm_set_time=self.alarm_set_time,
            updated_at=self.updated_at,
        )


class JsonTimerStore:
    """Stores the configuration and snapshot in a single JSON document.

    A missing file reads as "never run". A file that fails to parse or
    validate is logged and also treated as "never run", except that a valid
    ``timer_length`` is kept; the next save overwrites the rest.
    """

    def __init__(
        self, path: Path, default_timer_length: int = DEFAULT_TIMER_LENGTH_MINUTES
    ) -> None:
        self.path = Path(path)
        self.default_timer_length = default_timer_length

    def _read(self) -> TimerFileRecord | None:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable timer state file {self.path}: {e}")
            return None
        try:
            return TimerFileRecord.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid timer state in {self.path}: {e}")
            return self._salvage(data)

    def _salvage(self, data) -> TimerFileRecord | None:
        """Keep a valid configured length from a record whose snapshot is broken."""
        if not isinstance(data, dict) or "timer_length" not in data:
            return None
        try:
            return TimerFileRecord(timer_length=data["timer_length"])
        except ValidationError:
            return None

    def _write(self, record: TimerFileRecord) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(record.model_dump_json(indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)

    def _current(self) -> TimerFileRecord:
        return self._read() or TimerFileRecord(timer_length=self.default_timer_length)

    async def get_timer_length(self) -> int:
        return self._current().timer_length

    async def set_timer_length(self, minutes: int) -> None:
        # Re-validate so a non-positive length never reaches disk
        record = TimerFileRecord.model_validate(
            {**self._current().model_dump(), "timer_length": minutes}
        )
        self._write(record)
        logger.debug(f"Timer length set to {minutes} min in {self.path}")

    async def load_snapshot(self) -> TimerSnapshot | None:
        record = self._read()
        return record.to_snapshot() if record else None

    async def save_snapshot(self, snapshot: TimerSnapshot) -> None:
        record = self._current()
        record.previous_timer_length = snapshot.total_seconds
        record.seconds_remaining = snapshot.remaining_seconds
        record.timer_state = snapshot.state
        record.alarm_set_time = snapshot.alarm_set_time
        record.has_snapshot = True
        record.updated_at = datetime.now(timezone.utc)
        self._write(record)
