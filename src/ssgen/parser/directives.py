"""Directives - tagged YAML values that mutate the page tree.

Usage in a page file:

    - !DEF [key, value]                       # define a variable
    - !IF [condition, then, else]             # else is optional
    - !FOREACH [[x, y], template, [1, 2], [3, 4]]
    - !INCLUDE header.page                    # parse another page file here
    - !INCLUDE_RAW snippet.html               # paste a file verbatim
    - !COPY /robots.txt                       # copy a file to the output root
    - !COPY_DIR /assets                       # copy a directory to the output root
    - !SHELL_CMD [git, rev-parse, HEAD]       # allow-listed commands only

A failing directive logs an error and contributes nothing; the rest of the
page is unaffected.
"""

from __future__ import annotations

import logging
import shutil
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Optional

from ssgen.exceptions import DirectiveError
from ssgen.page import PageNode, is_within

from .loader import Tagged, describe, load_documents
from .shell import run_command

if TYPE_CHECKING:
    from .parser import Parser

log = logging.getLogger(__name__)


class Directive(str, Enum):
    DEF = "!DEF"
    IF = "!IF"
    FOREACH = "!FOREACH"
    INCLUDE = "!INCLUDE"
    INCLUDE_RAW = "!INCLUDE_RAW"
    COPY = "!COPY"
    COPY_DIR = "!COPY_DIR"
    SHELL_CMD = "!SHELL_CMD"
    UNKNOWN = ""

    @classmethod
    def from_tag(cls, tag: str) -> "Directive":
        try:
            return cls(tag)
        except ValueError:
            return cls.UNKNOWN


def define(parser: Parser, target: PageNode, value: Any, directory: Optional[Path]) -> None:
    """Define a variable in the target's scope.

    Usage:
        !DEF [key, val]
    """
    if not isinstance(value, list) or len(value) != 2:
        raise DirectiveError(f"Invalid arguments to !DEF directive: {describe(value)}")

    key = parser.render_value(target, value[0], directory)
    val = parser.render_value(target, value[1], directory)
    log.info(f"Registering variable {key}...")
    target.register_var(key, val)


def if_else(parser: Parser, target: PageNode, value: Any, directory: Optional[Path]) -> None:
    """Apply one branch depending on whether the condition renders non-empty.

    Usage:
        !IF [condition, exec if true, ?exec if false]
    """
    if not isinstance(value, list) or not 2 <= len(value) <= 3:
        raise DirectiveError(f"Incorrectly formatted conditional: {describe(value)}")

    log.debug("Evaluating conditional...")
    if parser.render_value(target, value[0], directory):
        parser.add_value(target, value[1], directory)
    elif len(value) == 3:
        parser.add_value(target, value[2], directory)


def foreach(parser: Parser, target: PageNode, value: Any, directory: Optional[Path]) -> None:
    """Apply a template once per row of values.

    Usage:
        !FOREACH [
          [x, y, ..., n],              # variable names for use in template
          "{x} {y} {n}",               # template
          [xval, yval, ..., nval],     # one row of values
          [xval2, yval2, ..., nval2],  # another row
        ]

    Every row must be a sequence as long as the key list, otherwise nothing
    is applied.
    """
    if (
        not isinstance(value, list)
        or len(value) < 3
        or not isinstance(value[0], list)
        or any(not isinstance(row, list) or len(row) != len(value[0]) for row in value[2:])
    ):
        raise DirectiveError(f"Invalid arguments to !FOREACH directive: {describe(value, 100)}")

    log.info("Looping into !FOREACH directive...")
    keys = [parser.render_value(target, key, directory) for key in value[0]]
    template = value[1]
    for row in value[2:]:
        child = target.new_child()
        for key, item in zip(keys, row):
            child.register_var(key, parser.render_value(child, item, directory))
        parser.add_value(child, template, directory)


def _include(
    parser: Parser,
    target: PageNode,
    value: Any,
    directory: Optional[Path],
    raw: bool,
) -> None:
    text = parser.render_value(target, value, directory)
    path = parser.sandbox.resolve_input(text, directory)
    if not path.is_file():
        raise DirectiveError(f"Cannot include {text}: not a file")

    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DirectiveError(f"Error reading file {path} | {exc}") from exc

    if raw:
        log.info(f"Including {path} verbatim")
        target.append_text(source)
        return

    log.info(f"Including {path}")
    with parser.including(path):
        child = PageNode(parent=target)
        for document in load_documents(source, path):
            parser.add_value(child, document, path.parent)
        target.add_child(child)


def include(parser: Parser, target: PageNode, value: Any, directory: Optional[Path]) -> None:
    """Parse another page file into the target.

    Usage:
        !INCLUDE path/relative/to/this/file.page
        !INCLUDE /path/relative/to/input/root.page
    """
    _include(parser, target, value, directory, raw=False)


def include_raw(parser: Parser, target: PageNode, value: Any, directory: Optional[Path]) -> None:
    """Append a file's text to the target without parsing it.

    Usage:
        !INCLUDE_RAW snippet.html
    """
    _include(parser, target, value, directory, raw=True)


def _skip_escaping(parser: Parser) -> Callable[[str, list[str]], set[str]]:
    """copytree ``ignore`` callback dropping entries that leave the input root."""

    def ignore(src: str, names: list[str]) -> set[str]:
        skipped = set()
        for name in names:
            entry = Path(src, name)
            try:
                resolved = entry.resolve()
            except (OSError, RuntimeError) as exc:
                log.warning(f"Not copying {entry}: unable to resolve it ({exc})")
                skipped.add(name)
                continue
            if not is_within(resolved, parser.sandbox.input_root):
                log.warning(f"Not copying {entry}: it points outside the input directory")
                skipped.add(name)
        return skipped

    return ignore


def _copy(
    parser: Parser,
    target: PageNode,
    value: Any,
    directory: Optional[Path],
    as_dir: bool,
) -> None:
    text = parser.render_value(target, value, directory)
    source = parser.sandbox.resolve_input(text, directory)
    destination = parser.sandbox.mirror(source)

    try:
        if as_dir:
            if not source.is_dir():
                raise DirectiveError(f"Cannot copy {text}: not a directory")
            if is_within(parser.sandbox.output_root, source):
                raise DirectiveError(f"Cannot copy {text}: it contains the output directory")
            log.info(f"Copying directory {source} to {destination}")
            shutil.copytree(
                source, destination, ignore=_skip_escaping(parser), dirs_exist_ok=True
            )
        else:
            if not source.is_file():
                raise DirectiveError(f"Cannot copy {text}: not a file")
            log.info(f"Copying {source} to {destination}")
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, destination)
    except (OSError, shutil.Error) as exc:
        raise DirectiveError(f"Error copying {source} | {exc}") from exc


def copy(parser: Parser, target: PageNode, value: Any, directory: Optional[Path]) -> None:
    """Copy a file from the input directory to the same place in the output.

    Usage:
        !COPY /robots.txt
    """
    _copy(parser, target, value, directory, as_dir=False)


def copy_dir(parser: Parser, target: PageNode, value: Any, directory: Optional[Path]) -> None:
    """Copy a directory tree from the input directory to the output.

    Usage:
        !COPY_DIR /assets
    """
    _copy(parser, target, value, directory, as_dir=True)


def shell_command(parser: Parser, target: PageNode, value: Any, directory: Optional[Path]) -> None:
    """Run an allow-listed program and append its standard output.

    Usage:
        !SHELL_CMD date +%Y
        !SHELL_CMD [git, log, -1, '--format=%h']
    """
    if isinstance(value, list):
        argv = [parser.render_value(target, item, directory) for item in value]
    else:
        argv = parser.render_value(target, value, directory)
    output = run_command(
        argv,
        allow=parser.options.allow_shell,
        cwd=directory or parser.sandbox.input_root,
        timeout=parser.options.shell_timeout,
    )
    target.append_text(output)


Handler = Callable[["Parser", PageNode, Any, Optional[Path]], None]

_HANDLERS: dict[Directive, Handler] = {
    Directive.DEF: define,
    Directive.IF: if_else,
    Directive.FOREACH: foreach,
    Directive.INCLUDE: include,
    Directive.INCLUDE_RAW: include_raw,
    Directive.COPY: copy,
    Directive.COPY_DIR: copy_dir,
    Directive.SHELL_CMD: shell_command,
}


def evaluate(parser: Parser, target: PageNode, tagged: Tagged, directory: Optional[Path]) -> None:
    """Follow the directive named by ``tagged.tag`` on ``target``."""
    directive = Directive.from_tag(tagged.tag)
    if directive is Directive.UNKNOWN:
        log.warning(f"No matching directive for {tagged.tag}")
        return

    try:
        _HANDLERS[directive](parser, target, tagged.value, directory)
    except DirectiveError as exc:
        log.error(f"{directive.value}: {exc}")
