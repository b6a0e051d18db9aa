"""Logging setup shared by the tools."""

import logging
from typing import Union

from rich.console import Console
from rich.logging import RichHandler

# stdout is reserved for tool output
_stderr_console = Console(stderr=True)


def setup_logger(name: str, level: Union[str, int] = "WARNING") -> logging.Logger:
    """
    Configure a logger that writes to stderr through rich.

    Args:
        name: Logger name (usually a package name)
        level: Logging level name or number

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate handlers when called more than once
    logger.handlers.clear()

    handler = RichHandler(
        console=_stderr_console,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""
    return logging.getLogger(name)
