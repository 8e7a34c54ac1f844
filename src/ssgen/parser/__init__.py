"""YAML page parsing: loader, tree adapter and directives"""

from .directives import Directive, evaluate
from .loader import PageLoader, Tagged, describe, load_documents, value_to_string
from .parser import Parser

__all__ = [
    "Directive",
    "PageLoader",
    "Parser",
    "Tagged",
    "describe",
    "evaluate",
    "load_documents",
    "value_to_string",
]
