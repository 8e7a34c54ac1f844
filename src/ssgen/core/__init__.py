"""Core utilities: build options and config loading"""

from .config import BuildOptions, load_config_yaml

__all__ = [
    "BuildOptions",
    "load_config_yaml",
]
