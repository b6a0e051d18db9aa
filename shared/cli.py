"""Console helpers shared by the command-line tools."""

import functools
import sys
from typing import Any, Callable

import click
from rich.console import Console

from shared.logger import get_logger

logger = get_logger(__name__)

# Diagnostics go to stderr so stdout carries only tool output
console = Console(stderr=True, highlight=False)


def error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]✗[/bold red] {message}")


def warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]![/yellow] {message}")


def info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[cyan]ℹ[/cyan] {message}")


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorate a click command so unexpected exceptions end in one error line.

    Click's own control-flow exceptions pass through untouched.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (click.ClickException, click.exceptions.Exit, click.Abort):
            raise
        except KeyboardInterrupt:
            error("Interrupted")
            sys.exit(130)
        except Exception as e:
            logger.debug("Unhandled exception", exc_info=True)
            error(f"Unexpected error: {e}")
            sys.exit(1)

    return wrapper
