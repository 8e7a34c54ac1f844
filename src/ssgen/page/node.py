"""PageNode - one HTML element, text run, or virtual node of a page tree.

A tree of PageNodes resolves into a complete HTML document:

    parent = PageNode("HTMLNode")
    parent.add_metadata("class", "SomeClass")
    child = parent.new_child()
    child.add_content("Content")
    str(parent)  # '<HTMLNode class="SomeClass">Content</HTMLNode>'

Children are owned by their parent's ``children`` list. The ``parent`` link is
a weak reference used only for variable lookup, so a subtree never keeps its
ancestors alive.
"""

from __future__ import annotations

import logging
import weakref
from typing import Optional

from .interpolate import interpolate

log = logging.getLogger(__name__)

UNDEFINED = "UNDEFINED"


class PageNode:
    """A node in a page tree.

    Render cases, selected by (has name, has content or children):
      - no name, nothing:           ``content`` verbatim (empty)
      - no name, content/children:  content + rendered children, metadata ignored
      - name, nothing:              ``<name attrs/>``
      - name, content/children:     ``<name attrs>`` content children ``</name>``

    Content and children never coexist on one node: text appended after a
    child goes into a trailing content-only child, and content present when the
    first child arrives moves into a leading content-only child.
    """

    def __init__(self, name: str = "", parent: Optional[PageNode] = None) -> None:
        self.name = name
        self.metadata: list[tuple[str, str]] = []
        self.content = ""
        self.children: list[PageNode] = []
        self.vars: dict[str, str] = {}
        self._parent: Optional[weakref.ref[PageNode]] = None
        if parent is not None:
            self.parent = parent

    @property
    def parent(self) -> Optional[PageNode]:
        if self._parent is None:
            return None
        return self._parent()

    @parent.setter
    def parent(self, node: Optional[PageNode]) -> None:
        self._parent = weakref.ref(node) if node is not None else None

    # Variables -------------------------------------------------------------

    def register_var(self, key: str, value: str) -> None:
        """Bind ``key`` to ``value`` in this node's scope."""
        log.debug(f"Registering variable {key}")
        self.vars[key] = value

    def get_var(self, key: str) -> str:
        """Look ``key`` up in this node, then in each ancestor in turn.

        Returns ``UNDEFINED`` (and warns) when no node on the chain defines it.
        """
        node: Optional[PageNode] = self
        while node is not None:
            if key in node.vars:
                return node.vars[key]
            node = node.parent
        log.warning(f"Undefined variable {key}")
        return UNDEFINED

    def interpolate(self, text: str) -> str:
        """Expand ``{var}`` references in ``text`` using this node's scope."""
        return interpolate(self, text)

    # Tree construction -----------------------------------------------------

    def add_child(self, child: PageNode) -> PageNode:
        """Adopt ``child`` as the last child and return it."""
        if self.content:
            held = PageNode(parent=self)
            held.content = self.content
            self.content = ""
            self.children.append(held)
        child.parent = self
        self.children.append(child)
        return child

    def new_child(self, name: str = "") -> PageNode:
        """Create, adopt and return an empty child."""
        return self.add_child(PageNode(name))

    def scratch(self) -> PageNode:
        """Return a detached node that sees this node's scope.

        Used to render values (directive arguments, attribute values) without
        adding anything to the tree.
        """
        return PageNode(parent=self)

    def add_metadata(self, key: str, value: str) -> None:
        self.metadata.append((key, value))

    def add_content(self, text: str) -> None:
        """Interpolate ``text`` and append it to this node's content."""
        self.append_text(self.interpolate(text))

    def append_text(self, text: str) -> None:
        """Append ``text`` verbatim."""
        if not text:
            return
        if not self.children:
            self.content += text
            return
        last = self.children[-1]
        if not last.name and not last.children:
            last.content += text
        else:
            held = self.new_child()
            held.content = text

    # Rendering -------------------------------------------------------------

    def is_empty(self) -> bool:
        return not self.content and not self.children

    def render(self) -> str:
        """Resolve this node and all its children into text."""
        parts: list[str] = []
        self._render_into(parts)
        return "".join(parts)

    def _render_into(self, parts: list[str]) -> None:
        if not self.name:
            parts.append(self.content)
            for child in self.children:
                child._render_into(parts)
            return

        attrs = "".join(f' {key}="{value}"' for key, value in self.metadata)
        if self.is_empty():
            parts.append(f"<{self.name}{attrs}/>")
            return

        parts.append(f"<{self.name}{attrs}>")
        parts.append(self.content)
        for child in self.children:
            child._render_into(parts)
        parts.append(f"</{self.name}>")

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"PageNode(name={self.name!r}, children={len(self.children)}, "
            f"content={self.content[:20]!r})"
        )
