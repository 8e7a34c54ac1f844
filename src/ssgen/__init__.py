"""ssgen - static site generator for YAML page files

Pages are YAML streams; mappings become HTML elements, ``_key`` entries become
attributes and tagged values (``!DEF``, ``!INCLUDE``, ...) are directives.
"""

from ._version import __version__
from .core.config import BuildOptions
from .parser import Parser
from .core.site import BuildReport, PageResult, SiteBuilder
from .page import PageNode

__all__ = [
    "__version__",
    "BuildOptions",
    "BuildReport",
    "PageNode",
    "PageResult",
    "Parser",
    "SiteBuilder",
]
