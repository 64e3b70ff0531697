"""Command line host for the pomodoro timer.

Usage:
    pomodoro status | start | pause | stop
    pomodoro run [--start]        # tick in the foreground, Ctrl+C to detach
    pomodoro wait                 # block until a running timer's alarm fires
    pomodoro config [--minutes N]
    pomodoro migrate [--dry]      # PostgreSQL store only
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, TextColumn
from rich.progress_bar import ProgressBar
from rich.table import Table

from pomodoro.core.config import TimerSettings, get_settings
from pomodoro.core.logging import setup_logging
from pomodoro.render import TimerStatus, controls, format_remaining, progress
from pomodoro.service import COMMANDS, TimerService, open_store
from shared.database import DatabaseManager
from shared.migrations.runner import MigrationRunner

console = Console()

EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pomodoro", description="Pomodoro countdown timer")
    sub = parser.add_subparsers(dest="command", required=True)

    for name in COMMANDS:
        sub.add_parser(name, help=f"{name} the timer" if name != "status" else "show the timer")

    run = sub.add_parser("run", help="tick in the foreground until the timer finishes")
    run.add_argument("--start", action="store_true", help="start the timer first")

    sub.add_parser("wait", help="block until the running timer's wake alarm fires")

    config = sub.add_parser("config", help="show or set the timer length")
    config.add_argument("--minutes", type=int, help="new timer length in minutes")

    migrate = sub.add_parser("migrate", help="apply PostgreSQL migrations")
    migrate.add_argument("--dry", action="store_true", help="list pending migrations only")
    return parser


def render_status(status: TimerStatus) -> Table:
    buttons = controls(status.state)
    enabled = [
        name
        for name, on in (
            ("start", buttons.start_enabled),
            ("pause", buttons.pause_enabled),
            ("stop", buttons.stop_enabled),
        )
        if on
    ]

    table = Table.grid(padding=(0, 2))
    table.add_row(
        f"[bold]{format_remaining(status.remaining_seconds)}[/bold]",
        status.state.value,
        ProgressBar(total=max(status.total_seconds, 1), completed=progress(status), width=30),
    )
    table.add_row("", f"[dim]next: {', '.join(enabled)}[/dim]", "")
    return table


async def _run_foreground(service: TimerService, start: bool) -> TimerStatus:
    with Progress(
        TextColumn("[bold]{task.fields[remaining]}"),
        TextColumn("{task.description}"),
        BarColumn(),
        console=console,
        transient=True,
    ) as bar:
        task_id = bar.add_task("", total=1, remaining="")

        def on_status(status: TimerStatus) -> None:
            bar.update(
                task_id,
                description=status.state.value,
                total=max(status.total_seconds, 1),
                completed=progress(status),
                remaining=format_remaining(status.remaining_seconds),
            )

        return await service.run_foreground(start=start, listener=on_status)


async def _migrate(settings: TimerSettings, dry: bool) -> int:
    if settings.store != "postgres":
        console.print("[red]ERROR[/red] migrate needs POMODORO_STORE=postgres")
        return EXIT_USAGE

    db = DatabaseManager(settings.database_url)
    await db.connect()
    try:
        runner = MigrationRunner(db.pool)
        if dry:
            pending = await runner.pending()
            console.print(f"Pending: {len(pending)}")
            for path in pending:
                console.print(f"  -> {path.stem}")
        else:
            applied = await runner.run_pending()
            console.print(f"Applied {len(applied)} migration(s).")
    finally:
        await db.disconnect()
    return 0


async def run(args: argparse.Namespace, settings: TimerSettings) -> int:
    if args.command == "migrate":
        return await _migrate(settings, args.dry)

    async with open_store(settings) as store:
        service = TimerService(
            store,
            tick_interval=settings.tick_interval,
            default_timer_length=settings.default_timer_length,
        )

        if args.command == "config":
            if args.minutes is not None:
                await service.configure(args.minutes)
            console.print(f"Timer length: {await service.timer_length()} min")
            return 0

        if args.command == "run":
            status = await _run_foreground(service, args.start)
        elif args.command == "wait":
            status = await service.wait()
        else:
            status = await service.run_command(args.command)

    console.print(render_status(status))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[red]ERROR[/red] invalid configuration: {escape(str(e))}")
        return EXIT_USAGE

    setup_logging(settings)

    try:
        return asyncio.run(run(args, settings))
    except ValueError as e:
        console.print(f"[red]ERROR[/red] {escape(str(e))}")
        return EXIT_USAGE
    except KeyboardInterrupt:
        console.print("Detached.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
