"""Path sandbox for file directives.

User-supplied paths are resolved against the site's input or output root and
rejected when the result escapes that root:

  - ``/assets/logo.png`` → rooted at the sandbox root
  - ``logo.png``         → relative to the directory of the file being parsed
                           (the root when no file is active)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from ssgen.exceptions import DirectiveError, SandboxViolationError

log = logging.getLogger(__name__)

_SEPARATORS = ("/", os.sep)


def is_within(path: Path, root: Path) -> bool:
    """Return True if ``path`` is ``root`` or lies below it (lexically)."""
    return path == root or path.is_relative_to(root)


class PathSandbox:
    """Resolves paths inside a canonical input root and output root."""

    def __init__(self, input_root: Path, output_root: Path) -> None:
        self.input_root = input_root
        self.output_root = output_root

    @staticmethod
    def candidate(text: str, root: Path, current_dir: Optional[Path] = None) -> Path:
        """Build the unresolved path ``text`` names under ``root``."""
        if text.startswith(_SEPARATORS):
            return root / text.lstrip("/" + os.sep)
        return (current_dir or root) / text

    def resolve_input(self, text: str, current_dir: Optional[Path] = None) -> Path:
        """Return the canonical path of an existing entry inside the input root.

        Raises:
            SandboxViolationError: the canonical path escapes the input root.
            DirectiveError: nothing exists at the path.
        """
        path = self.candidate(text, self.input_root, current_dir)
        try:
            resolved = path.resolve()
        except (OSError, RuntimeError) as exc:
            raise DirectiveError(f"Unable to resolve {text}: {exc}") from exc

        if not is_within(resolved, self.input_root):
            raise SandboxViolationError(text, self.input_root)
        if not resolved.exists():
            raise DirectiveError(f"No such file or directory: {text} (resolved to {resolved})")

        log.debug(f"Resolved {text} to {resolved}")
        return resolved

    def resolve_output(self, text: str, current_dir: Optional[Path] = None) -> Path:
        """Return the normalised output path ``text`` names.

        The target need not exist, but must stay inside the output root.
        """
        path = Path(os.path.normpath(self.candidate(text, self.output_root, current_dir)))
        if not is_within(path, self.output_root):
            raise SandboxViolationError(text, self.output_root)
        return path

    def mirror(self, source: Path) -> Path:
        """Return the output path mirroring ``source``'s place in the input root."""
        relative = source.relative_to(self.input_root)
        return self.resolve_output("/" + relative.as_posix())
