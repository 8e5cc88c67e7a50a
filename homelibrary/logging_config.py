"""Logging setup for the home library.

One console handler rendered by Rich; modules ask for their logger with
``get_logger(__name__)`` and never configure handlers themselves.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


_logging_initialized = False


def setup_logging(log_level: str = "INFO") -> None:
    """Install the console handler on the root logger (only once per process).

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR)
    """
    global _logging_initialized

    if _logging_initialized:
        return

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
    )
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.addHandler(console_handler)

    # google-auth and urllib3 chatter on every token refresh
    logging.getLogger("google").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    _logging_initialized = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
