"""Parser - builds a PageNode tree from YAML.

Each YAML document of a page is walked top-down:

  - null                 → nothing
  - bool/number/string   → interpolated text appended to the current node
  - mapping              → one named child per key; ``_key`` entries become
                           attributes of the current node instead
  - sequence             → one nameless child per element; elements that are
                           mappings of ``_key`` entries only become attributes
                           of the current node
  - tagged value         → directive (see ``directives``)

One Parser handles one document (page) and is not shared between threads.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Optional

from ssgen.core.config import BuildOptions
from ssgen.exceptions import IncludeCycleError
from ssgen.page import PageNode, PathSandbox

from .directives import evaluate
from .loader import Tagged, load_documents, scalar_text

log = logging.getLogger(__name__)


class Parser:
    """Constructs and renders the page tree of one document."""

    def __init__(self, options: BuildOptions, vars: Optional[dict[str, str]] = None):
        """Create an empty parser.

        Args:
            options: Build options, shared read-only between parsers.
            vars: Variables visible to the whole page (copied, e.g. from META.yaml).
        """
        log.debug("Creating new Parser...")
        self.options = options
        self.sandbox = PathSandbox(options.input, options.output)
        self.root_node = PageNode()
        if vars:
            self.root_node.vars.update(vars)
        self.root_dir: Optional[Path] = None
        self._including: set[Path] = set()

    def set_root_dir(self, path: Path) -> None:
        """Set the directory that relative paths in the document resolve against."""
        log.info(f"Setting root directory to {path}")
        self.root_dir = path

    def parse_yaml(self, text: str, source: str | Path = "<string>") -> None:
        """Parse a YAML stream into the root node.

        Raises:
            PageParseError: the stream is malformed.
        """
        log.debug(f"Parsing YAML from {source}...")
        for document in load_documents(text, source):
            self.add_value(self.root_node, document, self.root_dir)

    def parse_file(self, path: Path) -> None:
        """Read and parse a page file, resolving relative paths from its directory.

        Raises:
            OSError: the file cannot be read.
            PageParseError: the file is not valid YAML.
        """
        path = path.resolve()
        text = path.read_text(encoding="utf-8")
        self.set_root_dir(path.parent)
        with self.including(path):
            self.parse_yaml(text, path)

    @contextmanager
    def including(self, path: Path) -> Iterator[None]:
        """Mark ``path`` as being parsed for the duration of the block.

        Raises:
            IncludeCycleError: ``path`` is already being parsed.
        """
        if path in self._including:
            raise IncludeCycleError(path)
        self._including.add(path)
        try:
            yield
        finally:
            self._including.discard(path)

    # Tree construction -----------------------------------------------------

    def add_value(self, target: PageNode, value: Any, directory: Optional[Path]) -> None:
        """Add a loaded YAML value into ``target``."""
        if value is None:
            return
        if isinstance(value, Tagged):
            evaluate(self, target, value, directory)
        elif isinstance(value, list):
            self._add_sequence(target, value, directory)
        elif isinstance(value, dict):
            self._add_mapping(target, self._keyed(target, value, directory), directory)
        else:
            target.add_content(scalar_text(value))

    def render_value(self, target: PageNode, value: Any, directory: Optional[Path]) -> str:
        """Render ``value`` in ``target``'s scope without modifying ``target``."""
        scratch = target.scratch()
        self.add_value(scratch, value, directory)
        return scratch.render()

    def _keyed(
        self, target: PageNode, mapping: dict, directory: Optional[Path]
    ) -> list[tuple[str, Any]]:
        """Pair each rendered key of ``mapping`` with its raw value."""
        return [(self.render_value(target, key, directory), value) for key, value in mapping.items()]

    def _add_sequence(self, target: PageNode, seq: list, directory: Optional[Path]) -> None:
        for item in seq:
            if isinstance(item, Tagged):
                evaluate(self, target, item, directory)
                continue

            if isinstance(item, dict) and item:
                pairs = self._keyed(target, item, directory)
                if all(key.startswith("_") for key, _ in pairs):
                    # metadata-only element collapses into the enclosing node
                    self._add_mapping(target, pairs, directory)
                else:
                    self._add_mapping(target.new_child(), pairs, directory)
            else:
                self.add_value(target.new_child(), item, directory)

    def _add_mapping(
        self, target: PageNode, pairs: list[tuple[str, Any]], directory: Optional[Path]
    ) -> None:
        for key, value in pairs:
            if key.startswith("_"):
                target.add_metadata(key[1:], self.render_value(target, value, directory))
            else:
                child = PageNode(key)
                child.parent = target
                self.add_value(child, value, directory)
                target.add_child(child)

    # Output ----------------------------------------------------------------

    def root_vars(self) -> dict[str, str]:
        """Return a copy of the variables defined at the document root."""
        return dict(self.root_node.vars)

    def render(self) -> str:
        return self.root_node.render()

    def __str__(self) -> str:
        return self.render()
