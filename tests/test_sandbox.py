"""Tests for path sandboxing."""

import pytest

from ssgen.exceptions import DirectiveError, SandboxViolationError
from ssgen.page import PathSandbox, is_within


@pytest.fixture
def sandbox(tmp_path):
    tmp_path = tmp_path.resolve()
    (tmp_path / "in" / "blog").mkdir(parents=True)
    (tmp_path / "in" / "blog" / "post.page").write_text("p: post")
    (tmp_path / "in" / "index.page").write_text("p: index")
    (tmp_path / "outside.txt").write_text("secret")
    return PathSandbox(tmp_path / "in", tmp_path / "out")


def test_is_within(tmp_path):
    assert is_within(tmp_path / "a" / "b", tmp_path)
    assert is_within(tmp_path, tmp_path)
    assert not is_within(tmp_path.parent, tmp_path)
    assert not is_within(tmp_path.parent / (tmp_path.name + "-sibling"), tmp_path)


class TestCandidate:
    def test_rooted(self, tmp_path):
        assert PathSandbox.candidate("/a/b", tmp_path, tmp_path / "x") == tmp_path / "a/b"

    def test_relative_to_current_dir(self, tmp_path):
        assert PathSandbox.candidate("a", tmp_path, tmp_path / "x") == tmp_path / "x" / "a"

    def test_relative_without_current_dir(self, tmp_path):
        assert PathSandbox.candidate("a", tmp_path) == tmp_path / "a"


class TestResolveInput:
    def test_rooted_path(self, sandbox):
        assert sandbox.resolve_input("/index.page") == sandbox.input_root / "index.page"

    def test_relative_path(self, sandbox):
        current = sandbox.input_root / "blog"
        assert sandbox.resolve_input("post.page", current) == current / "post.page"

    def test_dot_dot_inside_root_is_fine(self, sandbox):
        current = sandbox.input_root / "blog"
        assert sandbox.resolve_input("../index.page", current) == sandbox.input_root / "index.page"

    @pytest.mark.parametrize("text", ["/../outside.txt", "../outside.txt", "/../../etc/passwd"])
    def test_escape_is_rejected(self, sandbox, text):
        with pytest.raises(SandboxViolationError):
            sandbox.resolve_input(text)

    def test_escape_is_rejected_before_existence_check(self, sandbox):
        with pytest.raises(SandboxViolationError):
            sandbox.resolve_input("../does-not-exist.txt")

    def test_missing_path(self, sandbox):
        with pytest.raises(DirectiveError) as excinfo:
            sandbox.resolve_input("missing.page")
        assert not isinstance(excinfo.value, SandboxViolationError)


class TestResolveOutput:
    def test_mirror(self, sandbox):
        source = sandbox.input_root / "blog" / "post.page"
        assert sandbox.mirror(source) == sandbox.output_root / "blog" / "post.page"

    def test_normalised(self, sandbox):
        assert sandbox.resolve_output("/a/../b") == sandbox.output_root / "b"

    def test_escape_is_rejected(self, sandbox):
        with pytest.raises(SandboxViolationError):
            sandbox.resolve_output("/../elsewhere")
