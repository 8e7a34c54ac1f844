"""Shared fixtures for ssgen tests."""

import logging

import pytest

from ssgen.core import BuildOptions
from ssgen.parser import Parser


@pytest.fixture(autouse=True)
def reset_ssgen_logger():
    """Undo CLI logging setup so caplog sees ssgen records again."""
    yield
    logger = logging.getLogger("ssgen")
    logger.handlers = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def site_dir(tmp_path):
    """Empty input directory."""
    path = tmp_path / "site"
    path.mkdir()
    return path


@pytest.fixture
def out_dir(tmp_path):
    return tmp_path / "public"


@pytest.fixture
def options(site_dir, out_dir):
    return BuildOptions(input=site_dir, output=out_dir)


@pytest.fixture
def render(options):
    """Parse a YAML string with a fresh parser and return the HTML."""

    def _render(text: str, **option_overrides) -> str:
        opts = options.model_copy(update=option_overrides) if option_overrides else options
        p = Parser(opts)
        p.set_root_dir(opts.input)
        p.parse_yaml(text)
        return p.render()

    return _render
