"""External commands for the !SHELL_CMD directive.

Commands run at build time, without a shell, and only when their program is
allow-listed in the build options (``--allow-shell PROGRAM``).
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path

from ssgen.exceptions import ShellCommandError

log = logging.getLogger(__name__)


def is_allowed(program: str, allow: Sequence[str]) -> bool:
    """Return True if ``program`` is spelled exactly as an allow-list entry."""
    return program in allow


def run_command(
    command: str | Sequence[str],
    *,
    allow: Sequence[str],
    cwd: Path,
    timeout: float,
) -> str:
    """Execute ``command`` and return its stdout without trailing newlines.

    Args:
        command: Command line (split with shlex) or argument list.
        allow: Programs permitted to run.
        cwd: Working directory for the command.
        timeout: Seconds before the command is killed.

    Raises:
        ShellCommandError: the program is not allow-listed, cannot be started,
            times out or exits non-zero.
    """
    if isinstance(command, str):
        try:
            argv = shlex.split(command)
        except ValueError as exc:
            raise ShellCommandError(f"Cannot parse command {command!r}: {exc}") from exc
    else:
        argv = list(command)

    if not argv or not argv[0]:
        raise ShellCommandError("Empty command")
    if not is_allowed(argv[0], allow):
        raise ShellCommandError(
            f"Program {argv[0]!r} is not allow-listed (use --allow-shell {argv[0]})"
        )

    log.info(f"Running {shlex.join(argv)} in {cwd}")
    try:
        result = subprocess.run(
            argv,
            cwd=cwd,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
            check=True,
        )
    except subprocess.CalledProcessError as exc:
        raise ShellCommandError(
            f"{argv[0]} exited with status {exc.returncode}: {exc.stderr.strip()}"
        ) from exc
    except subprocess.TimeoutExpired as exc:
        raise ShellCommandError(f"{argv[0]} timed out after {timeout}s") from exc
    except OSError as exc:
        raise ShellCommandError(f"Cannot run {argv[0]}: {exc}") from exc

    return result.stdout.rstrip("\n")
