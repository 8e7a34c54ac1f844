"""ssgen CLI Main Entry Point

ssgen - a static site generator that turns YAML pages into HTML.

Usage:
    ssgen -i site/ -o public/          # Build every .page file in site/
    ssgen -c ssgen.yaml                # Read options from a config file
    ssgen -i site/ --allow-shell git   # Let !SHELL_CMD run git
    ssgen -V                           # Show version
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from ._version import __version__
from .commands import build_command
from .commands.utils import exit_with_error, log_level, setup_logging
from .core import BuildOptions
from .exceptions import SsgenError

typer_app = typer.Typer(add_completion=False)


@typer_app.command()
def cli(
    input: Optional[Path] = typer.Option(
        None, "-i", "--input", help="Input directory for page files."
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Output directory for generated HTML [default: ./]."
    ),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="YAML file with build options."
    ),
    jobs: Optional[int] = typer.Option(
        None, "-j", "--jobs", help="Maximum pages built at once [default: one per page]."
    ),
    fail_fast: bool = typer.Option(
        False, "--fail-fast", help="Abort the build on the first page that fails."
    ),
    allow_shell: Optional[List[str]] = typer.Option(
        None, "--allow-shell", help="Program !SHELL_CMD may run (repeatable)."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show info messages."),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only show errors."),
    debug: bool = typer.Option(False, "-d", "--debug", help="Show debug messages."),
    silent: bool = typer.Option(
        False, "-s", "--silent", help="Only show critical errors, no progress bar."
    ),
    version: bool = typer.Option(False, "-V", "--version", help="Show version and exit."),
) -> None:
    """Build a static site from YAML page files.

    \b
    Examples:
        ssgen -i site -o public        Build site/**/*.page into public/
        ssgen -i site -j 4             Build at most 4 pages at once
        ssgen -c ssgen.yaml -v         Use a config file, log progress
    """
    if version:
        typer.echo(f"ssgen {__version__}")
        raise typer.Exit()

    setup_logging(log_level(verbose=verbose, quiet=quiet, debug=debug, silent=silent))

    overrides = {
        "input": input,
        "output": output,
        "jobs": jobs,
        "allow_shell": allow_shell or None,
        # a flag on the command line only ever turns fail-fast on
        "fail_fast": fail_fast or None,
    }
    try:
        options = BuildOptions.load(config, **overrides)
        report = build_command(options, show_progress=not silent)
    except SsgenError as exc:
        exit_with_error(exc.message, exc.exit_code)
        return

    if report.failed:
        raise typer.Exit(code=1)


def app() -> None:
    """Entry point for the CLI."""
    typer_app()


if __name__ == "__main__":
    app()
