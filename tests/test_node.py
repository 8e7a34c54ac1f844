"""Tests for PageNode: rendering, scope chain and the content/children rule."""

import gc
import logging

from ssgen.page import UNDEFINED, PageNode


class TestRender:
    def test_nameless_empty_renders_nothing(self):
        assert PageNode().render() == ""

    def test_nameless_with_content(self):
        node = PageNode()
        node.add_metadata("ignored", "yes")
        node.add_content("text")
        assert str(node) == "text"

    def test_named_empty_is_self_closing(self):
        node = PageNode("br")
        assert node.render() == "<br/>"

    def test_named_empty_with_attributes(self):
        node = PageNode("img")
        node.add_metadata("src", "a.png")
        node.add_metadata("alt", "A")
        assert node.render() == '<img src="a.png" alt="A"/>'

    def test_named_with_children(self):
        parent = PageNode("HTMLNode")
        parent.add_metadata("class", "SomeClass")
        child = parent.new_child()
        child.add_content("Content")
        assert str(parent) == '<HTMLNode class="SomeClass">Content</HTMLNode>'

    def test_nested_elements(self):
        html = PageNode("html")
        body = html.new_child("body")
        body.new_child("p").add_content("hi")
        assert html.render() == "<html><body><p>hi</p></body></html>"


class TestContentAndChildren:
    def test_content_moves_into_leading_child(self):
        node = PageNode("key")
        node.add_content("content")
        node.new_child("value").add_content("data")
        assert node.content == ""
        assert node.children[0].content == "content"
        assert node.render() == "<key>content<value>data</value></key>"

    def test_text_after_child_goes_to_trailing_child(self):
        node = PageNode("key")
        node.new_child("value")
        node.add_content("more")
        node.add_content("content")
        assert node.content == ""
        assert len(node.children) == 2
        assert node.render() == "<key><value/>morecontent</key>"

    def test_append_text_is_not_interpolated(self):
        node = PageNode()
        node.register_var("x", "1")
        node.append_text("{x}")
        node.add_content("{x}")
        assert node.render() == "{x}1"

    def test_append_empty_text_is_noop(self):
        node = PageNode("p")
        node.append_text("")
        assert node.is_empty()


class TestVariables:
    def test_lookup_walks_ancestors(self):
        root = PageNode()
        root.register_var("site", "ssgen")
        leaf = root.new_child("div").new_child("p")
        assert leaf.get_var("site") == "ssgen"

    def test_nearest_binding_wins(self):
        root = PageNode()
        root.register_var("x", "outer")
        child = root.new_child()
        child.register_var("x", "inner")
        assert child.get_var("x") == "inner"
        assert root.get_var("x") == "outer"

    def test_undefined_variable_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="ssgen"):
            assert PageNode().get_var("missing") == UNDEFINED
        assert "Undefined variable missing" in caplog.text

    def test_registered_value_is_stored_verbatim(self):
        node = PageNode()
        node.register_var("a", "{b}")
        node.register_var("b", "nope")
        node.add_content("{a}")
        assert node.render() == "{b}"

    def test_scratch_sees_scope_but_is_detached(self):
        root = PageNode()
        root.register_var("x", "1")
        scratch = root.scratch()
        scratch.add_content("{x}")
        assert scratch.render() == "1"
        assert root.children == []


class TestParentLink:
    def test_parent_is_weak(self):
        child = PageNode("p", parent=PageNode("div"))
        gc.collect()
        assert child.parent is None

    def test_add_child_sets_parent(self):
        parent = PageNode("div")
        child = parent.add_child(PageNode("p"))
        assert child.parent is parent
