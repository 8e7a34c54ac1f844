"""YAML loading for page files.

Pages are read with a SafeLoader variant that:
  - keeps local tags (``!DEF``, ``!INCLUDE`` ...) and unknown global tags as
    ``Tagged`` values instead of failing on them
  - only treats ``true``/``false`` as booleans, so ``yes``/``no``/``on``/``off``
    stay text
  - leaves dates and times as text, so ``12:30`` is not read as a base-60 int
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

import yaml

from ssgen.exceptions import PageParseError

_BOOL_TAG = "tag:yaml.org,2002:bool"
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
_INT_TAG = "tag:yaml.org,2002:int"
_FLOAT_TAG = "tag:yaml.org,2002:float"


@dataclass
class Tagged:
    """A value carrying a local YAML tag, e.g. ``!DEF [x, y]``."""

    tag: str
    value: Any


class PageLoader(yaml.SafeLoader):
    """SafeLoader for page files."""

    pass


PageLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag not in (_BOOL_TAG, _TIMESTAMP_TAG, _INT_TAG, _FLOAT_TAG)
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
PageLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)
PageLoader.add_implicit_resolver(
    _INT_TAG,
    re.compile(r"^(?:[-+]?(?:0|[1-9][0-9]*)|0x[0-9a-fA-F]+)$"),
    list("-+0123456789"),
)
PageLoader.add_implicit_resolver(
    _FLOAT_TAG,
    re.compile(
        r"^(?:[-+]?(?:[0-9]+\.[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?"
        r"|[-+]?\.(?:inf|Inf|INF)|\.(?:nan|NaN|NAN))$"
    ),
    list("-+0123456789."),
)


def _construct_tagged(loader: PageLoader, node: yaml.Node) -> Tagged:
    if isinstance(node, yaml.ScalarNode):
        value: Any = loader.construct_scalar(node)
    elif isinstance(node, yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    else:
        value = loader.construct_mapping(node, deep=True)
    return Tagged(tag=node.tag, value=value)


# local tags (!DEF ...) and any global tag SafeLoader has no constructor for
PageLoader.add_constructor(None, _construct_tagged)


def load_documents(text: str, source: str | Path = "<string>") -> Iterator[Any]:
    """Yield each document of a YAML stream.

    Raises:
        PageParseError: the stream is malformed. Documents before the broken
            one have already been yielded.
    """
    try:
        yield from yaml.load_all(text, Loader=PageLoader)
    except yaml.YAMLError as exc:
        raise PageParseError(source, str(exc)) from exc


def scalar_text(value: Any) -> str:
    """Textual form of a primitive YAML value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def value_to_string(value: Any) -> str:
    """Render any loaded value for diagnostics.

    >>> value_to_string({"a": "b", "h": ["i", "j"]})
    '{"a":"b","h":[i,j,],}'
    """
    if value is None:
        return "NULL"
    if isinstance(value, list):
        return "[" + "".join(value_to_string(item) + "," for item in value) + "]"
    if isinstance(value, dict):
        parts = []
        for key, item in value.items():
            if isinstance(item, (list, dict)):
                parts.append(f'"{value_to_string(key)}":{value_to_string(item)},')
            else:
                parts.append(f'"{value_to_string(key)}":"{value_to_string(item)}",')
        return "{" + "".join(parts) + "}"
    if isinstance(value, Tagged):
        return f"{value.tag} {value_to_string(value.value)}"
    return scalar_text(value)


def describe(value: Any, limit: int = 40) -> str:
    """``value_to_string`` truncated to ``limit`` characters."""
    text = value_to_string(value)
    if len(text) > limit:
        return text[:limit] + "..."
    return text
