"""ssgen Exceptions

Custom exceptions for site building and directive evaluation.
"""

from __future__ import annotations

from pathlib import Path


class SsgenError(Exception):
    """Base exception for all ssgen errors."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


class ConfigError(SsgenError):
    """Raised when build options or the config file are invalid."""

    pass


class PageParseError(SsgenError):
    """Raised when a YAML stream cannot be decoded."""

    def __init__(self, path: str | Path, detail: str):
        self.path = str(path)
        self.detail = detail
        super().__init__(f"Error while parsing YAML in {self.path}: {detail}")


class DirectiveError(SsgenError):
    """Raised by a directive that cannot be applied.

    Never escapes the directive boundary: the evaluator logs it and the
    directive contributes nothing to the page.
    """

    pass


class SandboxViolationError(DirectiveError):
    """Raised when a path resolves outside its sandbox root."""

    def __init__(self, path: str | Path, root: Path):
        self.path = str(path)
        self.root = root
        super().__init__(f"Path {self.path} escapes {root}")


class IncludeCycleError(DirectiveError):
    """Raised when a file includes itself, directly or indirectly."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Include cycle detected at {path}")


class ShellCommandError(DirectiveError):
    """Raised when an external command is refused or fails."""

    pass
