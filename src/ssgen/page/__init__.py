"""Page tree: nodes, interpolation and the path sandbox"""

from .interpolate import MAX_NESTING, interpolate
from .node import UNDEFINED, PageNode
from .sandbox import PathSandbox, is_within

__all__ = [
    "MAX_NESTING",
    "PageNode",
    "PathSandbox",
    "UNDEFINED",
    "interpolate",
    "is_within",
]
