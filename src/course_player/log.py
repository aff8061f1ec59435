"""Logging setup for the course player."""
import logging

from rich.console import Console
from rich.logging import RichHandler

from course_player.config import LOG_LEVEL

LOGGER_NAME = "course_player"


def configure_logging(level: str | None = None, console: Console | None = None) -> logging.Logger:
    """Attach a rich console handler to the package logger. Safe to call repeatedly."""
    logger = logging.getLogger(LOGGER_NAME)
    if getattr(logger, "_configured", False):
        return logger

    name = (level or LOG_LEVEL or "WARNING").upper()
    logger.setLevel(logging.getLevelNamesMapping().get(name, logging.WARNING))
    handler = RichHandler(console=console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(name)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False

    logger._configured = True  # type: ignore[attr-defined]
    return logger
