"""Logging configuration"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from pomodoro.core.config import TimerSettings


def setup_logging(settings: TimerSettings) -> None:
    """Configure logging with a Rich handler on stderr"""

    level = getattr(logging, settings.log_level, logging.INFO)

    try:
        rich_handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_level=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
        )
        rich_handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%H:%M:%S]"))

        logging.basicConfig(
            level=level,
            format="%(message)s",
            datefmt="[%H:%M:%S]",
            handlers=[rich_handler],
            force=True,
        )
    except Exception as e:
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            force=True,
        )
        logging.getLogger(__name__).warning(f"Rich logging setup failed: {e}, using standard logging")

    logging.getLogger("asyncio").setLevel(logging.ERROR)
    logging.getLogger("asyncpg").setLevel(logging.WARNING)
