"""Repository for timer_preferences and timer_snapshots tables."""

from __future__ import annotations

import logging

import asyncpg

from shared.models.timer import DEFAULT_TIMER_LENGTH_MINUTES, TimerSnapshot, TimerState

logger = logging.getLogger(__name__)

_SNAPSHOT_COLUMNS = "state, total_seconds, remaining_seconds, alarm_set_time, updated_at"


class PostgresTimerStore:
    """Pure SQL operations for one timer, keyed by *timer_id*."""

    def __init__(
        self,
        pool: asyncpg.Pool,
        timer_id: str = "default",
        default_timer_length: int = DEFAULT_TIMER_LENGTH_MINUTES,
    ) -> None:
        self.pool = pool
        self.timer_id = timer_id
        self.default_timer_length = default_timer_length

    # ==================== Preferences ====================

    async def get_timer_length(self) -> int:
        """Return the configured length in minutes, or the default if unset."""
        async with self.pool.acquire() as conn:
            value = await conn.fetchval(
                "SELECT timer_length FROM timer_preferences WHERE timer_id = $1",
                self.timer_id,
            )
        return value if value is not None else self.default_timer_length

    async def set_timer_length(self, minutes: int) -> None:
        async with self.pool.acquire() as conn:
            await conn.execute(
                """
                INSERT INTO timer_preferences (timer_id, timer_length)
                VALUES ($1, $2)
                ON CONFLICT (timer_id) DO UPDATE SET
                    timer_length = EXCLUDED.timer_length,
                    updated_at   = NOW()
                """,
                self.timer_id,
                minutes,
            )

    # ==================== Snapshot ====================

    async def load_snapshot(self) -> TimerSnapshot | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_SNAPSHOT_COLUMNS} FROM timer_snapshots WHERE timer_id = $1",
                self.timer_id,
            )
        if not row:
            return None
        data = dict(row)
        try:
            data["state"] = TimerState(data["state"])
        except ValueError:
            logger.warning(f"Timer '{self.timer_id}' has unknown state {data['state']!r}")
            return None
        return TimerSnapshot(**data)

    async def save_snapshot(self, snapshot: TimerSnapshot) -> None:
        async with self.pool.acquire() as conn:
            await conn.execute(
                """
                INSERT INTO timer_snapshots
                    (timer_id, state, total_seconds, remaining_seconds, alarm_set_time)
                VALUES ($1, $2, $3, $4, $5)
                ON CONFLICT (timer_id) DO UPDATE SET
                    state             = EXCLUDED.state,
                    total_seconds     = EXCLUDED.total_seconds,
                    remaining_seconds = EXCLUDED.remaining_seconds,
                    alarm_set_time    = EXCLUDED.alarm_set_time,
                    updated_at        = NOW()
                """,
                self.timer_id,
                snapshot.state.value,
                snapshot.total_seconds,
                snapshot.remaining_seconds,
                snapshot.alarm_set_time,
            )
