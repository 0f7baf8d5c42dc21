"""Logging setup with rich console output."""
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from core.config import config

NOISY_LOGGERS = ("httpx", "httpcore", "openai", "groq", "urllib3", "langsmith")


def setup_logging(level: Optional[str] = None, console: Optional[Console] = None) -> None:
    """Route all log records through a RichHandler on stderr."""
    level_name = (level or config.log_level or "INFO").upper()
    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=config.debug,
        show_path=config.debug,
        markup=False,
    )
    logging.basicConfig(
        level=level_name,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, logging.getLogger().level))
