"""Shared utilities for CLI commands"""

from __future__ import annotations

import logging
import os

import typer
from rich.console import Console
from rich.logging import RichHandler

console = Console()


def log_level(
    verbose: bool = False,
    quiet: bool = False,
    debug: bool = False,
    silent: bool = False,
) -> int:
    """Pick the log level for the verbosity flags.

    Log levels:
    - Silent (-s): CRITICAL only, no progress bar
    - Quiet (-q): ERROR - failed directives and pages
    - Normal: WARNING - also undefined variables, unknown directives
    - Verbose (-v): INFO - files read and written, includes, copies
    - Debug (-d or SSGEN_DEBUG=1): DEBUG - shows everything
    """
    if debug or os.environ.get("SSGEN_DEBUG"):
        return logging.DEBUG
    if silent:
        return logging.CRITICAL
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.INFO
    return logging.WARNING


def setup_logging(level: int = logging.WARNING) -> None:
    """Configure the ``ssgen`` logger to print through the shared console."""
    handler = RichHandler(
        console=console,
        show_time=level <= logging.INFO,
        show_path=level <= logging.DEBUG,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    ssgen_logger = logging.getLogger("ssgen")
    ssgen_logger.setLevel(level)
    ssgen_logger.handlers = [handler]
    ssgen_logger.propagate = False


def exit_with_error(message: str, code: int = 1) -> None:
    """Print ``message`` in red on stderr and exit with ``code``."""
    typer.secho(f"Error: {message}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=code)
