"""Variable interpolation for page text.

Any text a page author can write may reference variables:

  - ``{name}``      → value of ``name`` in the node's scope chain
  - ``{{name}}``    → the inner reference resolves first, its result is the
                      name looked up by the outer braces
  - ``\\{``         → literal ``{``
  - ``\\\\``        → literal backslash

Resolved values are inserted as-is; they are never interpolated again.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .node import PageNode

log = logging.getLogger(__name__)

# Deepest nesting of braces inside one variable reference
MAX_NESTING = 32


def _snippet(text: str) -> str:
    return text[:39]


def interpolate(node: PageNode, text: str, _level: int = 0) -> str:
    """Expand variable references in ``text`` using ``node``'s scope.

    An unclosed ``{`` is reported and ends the scan; everything produced
    before it is returned.
    """
    if _level > MAX_NESTING:
        log.error(f"Variable nesting deeper than {MAX_NESTING} in {_snippet(text)}...")
        return ""

    out: list[str] = []
    n = len(text)
    i = 0
    prev = ""
    while i < n:
        c = text[i]
        i += 1
        if c == "{":
            if prev == "\\":
                out.append(c)
            else:
                start = i
                depth = 0
                while True:
                    if i >= n:
                        log.error(f"Unclosed variable delimiter in {_snippet(text)}...")
                        return "".join(out)
                    c = text[i]
                    i += 1
                    if c == "{":
                        depth += 1
                    elif c == "}":
                        if depth == 0:
                            break
                        depth -= 1
                name = interpolate(node, text[start : i - 1], _level + 1)
                out.append(node.get_var(name))
        elif c == "\\":
            if prev == "\\":
                out.append(c)
                # a paired backslash cannot escape what follows
                c = ""
        else:
            out.append(c)
        prev = c
    return "".join(out)
