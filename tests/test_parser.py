"""Tests for the YAML-to-tree parser."""

import logging

import pytest

from ssgen.exceptions import PageParseError
from ssgen.parser import Parser


class TestScalars:
    def test_simple_documents(self, render):
        page = """
string
---
","
---
true
---
","
---
123456789
---
NULL
"""
        assert render(page) == "string,true,123456789"

    def test_float(self, render):
        assert render("1234.56") == "1234.56"

    def test_word_booleans_stay_text(self, render):
        assert render("- yes\n- ' '\n- off\n") == "yes off"


class TestSequences:
    def test_flat_sequence(self, render):
        assert render("- se\n- qu\n- en\n- ce\n") == "sequence"

    def test_nested_sequence(self, render):
        assert render("- [sub,se]\n- qu\n- en\n- ce\n") == "subsequence"

    def test_mixed_value_types(self, render):
        page = """
- mixed value types
- " "
---
- [here, [is, 1], nested, sequence]
- 54321
---
- true
"""
        assert render(page) == "mixed value types hereis1nestedsequence54321true"

    def test_escapes(self, render):
        page = r"""
- \{ escaped brace
- \\ escaped backslash
- \\\\ escaped double backslash
- \\{ unclosed variable
"""
        expected = r"{ escaped brace\ escaped backslash\\ escaped double backslash" + "\\"
        assert render(page) == expected


class TestMappings:
    def test_key_value(self, render):
        assert render("key: value\n") == "<key>value</key>"

    def test_nested_mapping(self, render):
        assert render("key:\n  value: data\n") == "<key><value>data</value></key>"

    def test_metadata_only(self, render):
        assert render("key:\n  _meta: data\n") == '<key meta="data"/>'

    def test_empty_value_is_self_closing(self, render):
        assert render("br:\n") == "<br/>"

    def test_mixed_content(self, render):
        page = """
key:
  - content
  - _meta: data
  - value: data
  - morecontent
"""
        assert render(page) == '<key meta="data">content<value>data</value>morecontent</key>'

    def test_html_document(self, render):
        page = """
html:
  head:
    meta:
      _charset: UTF-8
  body:
    p: test
"""
        assert render(page) == (
            '<html><head><meta charset="UTF-8"/></head><body><p>test</p></body></html>'
        )

    def test_keys_and_metadata_are_interpolated(self, render):
        page = """
- !DEF [tag, section]
- !DEF [cls, wide]
- "{tag}":
    _class: "{cls}"
"""
        assert render(page) == '<section class="wide"/>'

    def test_metadata_value_may_be_a_directive(self, render):
        page = """
- !DEF [x, "1"]
- a:
    _href: !IF ["{x}", yes, no]
"""
        assert render(page) == '<a href="yes"/>'

    def test_repeated_keys_in_sequence(self, render):
        assert render("- li: a\n- li: b\n") == "<li>a</li><li>b</li>"


class TestErrors:
    def test_bad_yaml_raises(self, render):
        with pytest.raises(PageParseError):
            render("bad: yaml\nerror: a: b: c: d: e\n")

    def test_unknown_directive_is_ignored(self, render, caplog):
        with caplog.at_level(logging.WARNING, logger="ssgen"):
            assert render("!INVALIDDIRECTIVE =D\n") == ""
        assert "No matching directive for !INVALIDDIRECTIVE" in caplog.text


class TestParseFile:
    def test_parse_file_sets_root_dir(self, options, site_dir):
        page = site_dir / "blog" / "post.page"
        page.parent.mkdir()
        page.write_text("p: hello\n")

        parser = Parser(options)
        parser.parse_file(page)
        assert parser.root_dir == page.parent.resolve()
        assert str(parser) == "<p>hello</p>"

    def test_parse_file_missing(self, options, site_dir):
        with pytest.raises(OSError):
            Parser(options).parse_file(site_dir / "missing.page")

    def test_initial_vars_are_copied(self, options):
        globals_ = {"site": "ssgen"}
        parser = Parser(options, globals_)
        parser.parse_yaml("- !DEF [site, changed]\n- '{site}'\n")
        assert parser.render() == "changed"
        assert globals_ == {"site": "ssgen"}
        assert parser.root_vars() == {"site": "changed"}
