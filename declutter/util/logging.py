"""Logging for the CLI and library code.

Tables and results go to stdout, so log records are rendered by Rich on
stderr. A log file, when configured, receives every record down to
DEBUG regardless of the console level.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "declutter"

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _console_handler(level: int, console: Console) -> logging.Handler:
    verbose = level <= logging.DEBUG
    handler = RichHandler(
        console=console,
        level=level,
        show_time=verbose,
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _file_handler(log_file: Path) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console: Optional[Console] = None
) -> logging.Logger:
    """Configure the `declutter` logger.

    Calling it again replaces the handlers of the previous call, so the
    CLI can reconfigure after loading a config file.
    """
    console_level = logging.getLevelName(level.upper())
    if not isinstance(console_level, int):
        raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_console_handler(console_level, console or Console(stderr=True)))
    if log_file is not None:
        logger.addHandler(_file_handler(log_file))

    logger.setLevel(logging.DEBUG if log_file is not None else console_level)
    logger.propagate = False
    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
