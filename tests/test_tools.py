"""Tests for the tool registry and the default toolset."""

import json
import subprocess
import tempfile
from pathlib import Path

import pytest

from agentcode.errors import NotFound, UnknownTool
from agentcode.tools import ToolContract, ToolRegistry, build_toolset, render_error, render_output

EXPECTED_TOOLS = ["read_file", "list_files", "bash", "edit_file", "write_file", "code_search"]


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as td:
        yield Path(td).resolve()


@pytest.fixture
def registry(temp_dir):
    return build_toolset(temp_dir, timeout=2)


def _schema(registry, name):
    return next(t for t in registry.tools_param() if t["name"] == name)["input_schema"]


class TestToolRegistry:
    """Tests for ToolRegistry mechanics."""

    def test_register_and_dispatch(self):
        registry = ToolRegistry([ToolContract("echo", "Echo.", {"type": "object"}, lambda a: a["x"])])

        assert registry.dispatch("echo", {"x": "hi"}) == "hi"

    def test_duplicate_name_rejected(self):
        contract = ToolContract("t", "T.", {"type": "object"}, lambda a: "")
        registry = ToolRegistry([contract])

        with pytest.raises(ValueError):
            registry.register(contract)

    def test_get_unknown_raises(self):
        with pytest.raises(UnknownTool):
            ToolRegistry().get("nope")

    def test_dispatch_unknown_returns_error(self):
        assert ToolRegistry().dispatch("nope", {}) == "error: UnknownTool: Unknown tool: nope"

    def test_dispatch_converts_tool_errors(self):
        def handler(args):
            raise NotFound("File not found: x")

        registry = ToolRegistry([ToolContract("t", "T.", {"type": "object"}, handler)])

        assert registry.dispatch("t", {}) == "error: NotFound: File not found: x"

    def test_dispatch_converts_arbitrary_exceptions(self):
        def handler(args):
            raise RuntimeError("boom")

        registry = ToolRegistry([ToolContract("t", "T.", {"type": "object"}, handler)])

        assert registry.dispatch("t", {}) == "error: RuntimeError: boom"

    def test_dispatch_normalizes_keys(self):
        seen = {}

        def handler(args):
            seen.update(args)
            return "ok"

        registry = ToolRegistry([ToolContract("t", "T.", {"type": "object"}, handler)])
        registry.dispatch("t", {1: "a", "b": 2})

        assert seen == {"1": "a", "b": 2}

    def test_dispatch_accepts_none_input(self):
        registry = ToolRegistry([ToolContract("t", "T.", {"type": "object"}, lambda a: len(a))])

        assert registry.dispatch("t", None) == "0"

    def test_contains_and_len(self, registry):
        assert "bash" in registry
        assert "rm" not in registry
        assert len(registry) == 6


class TestRendering:
    """Tests for output and error rendering."""

    def test_render_output(self):
        assert render_output("text") == "text"
        assert render_output(b"caf\xc3\xa9") == "café"
        assert render_output(b"\xff") == "�"
        assert render_output(["a", "b"]) == '["a", "b"]'
        assert render_output(3) == "3"

    def test_render_error_uses_class_name(self):
        assert render_error(KeyError("path")) == "error: KeyError: 'path'"


class TestToolContracts:
    """Tests for the advertised tool surface."""

    def test_six_tools_in_order(self, registry):
        assert registry.names() == EXPECTED_TOOLS

    def test_tools_param_shape(self, registry):
        for tool in registry.tools_param():
            assert set(tool) == {"name", "description", "input_schema"}
            assert tool["input_schema"]["type"] == "object"

    @pytest.mark.parametrize(
        "name,required,optional",
        [
            ("read_file", ["path"], []),
            ("list_files", [], ["path"]),
            ("bash", ["command"], []),
            ("edit_file", ["path", "new_str"], ["old_str", "ensure_uniqueness"]),
            ("write_file", ["path", "content"], ["create_dirs"]),
            ("code_search", ["pattern"], ["path", "file_type", "case_sensitive"]),
        ],
    )
    def test_required_and_optional_parameters(self, registry, name, required, optional):
        schema = _schema(registry, name)

        assert schema.get("required", []) == required
        assert set(schema["properties"]) == set(required) | set(optional)

    def test_boolean_defaults_advertised(self, registry):
        assert _schema(registry, "edit_file")["properties"]["ensure_uniqueness"]["default"] is True
        assert _schema(registry, "write_file")["properties"]["create_dirs"]["default"] is True


class TestDefaultToolset:
    """Tests for dispatching the six workspace tools."""

    def test_write_then_read(self, registry):
        assert registry.dispatch("write_file", {"path": "notes/a.txt", "content": "hello"}) == (
            "wrote notes/a.txt (5 bytes)"
        )
        assert registry.dispatch("read_file", {"path": "notes/a.txt"}) == "hello"

    def test_write_without_create_dirs(self, registry):
        result = registry.dispatch(
            "write_file", {"path": "a/b.txt", "content": "x", "create_dirs": False}
        )

        assert result.startswith("error: NotFound:")

    def test_list_files_returns_json(self, registry, temp_dir):
        (temp_dir / "b.txt").write_text("")
        (temp_dir / "a.txt").write_text("")

        assert json.loads(registry.dispatch("list_files", {})) == ["a.txt", "b.txt"]

    def test_bash(self, registry):
        output = registry.dispatch("bash", {"command": "echo hi"})

        assert "hi" in output
        assert "(exit 0)" in output

    def test_bash_timeout(self, temp_dir):
        registry = build_toolset(temp_dir, timeout=1)

        assert registry.dispatch("bash", {"command": "sleep 5"}) == "timeout after 1s"

    def test_edit_append_defaults_to_unique(self, registry, temp_dir):
        registry.dispatch("edit_file", {"path": "f.txt", "new_str": "line\n"})
        second = registry.dispatch("edit_file", {"path": "f.txt", "new_str": "line\n"})

        assert second == "no-op: new_str already present"
        assert (temp_dir / "f.txt").read_text() == "line\n"

    def test_edit_uniqueness_can_be_disabled(self, registry, temp_dir):
        registry.dispatch("edit_file", {"path": "f.txt", "new_str": "x"})
        registry.dispatch("edit_file", {"path": "f.txt", "new_str": "x", "ensure_uniqueness": False})

        assert (temp_dir / "f.txt").read_text() == "xx"

    def test_edit_uniqueness_accepts_string_false(self, registry, temp_dir):
        registry.dispatch("edit_file", {"path": "f.txt", "new_str": "x"})
        registry.dispatch("edit_file", {"path": "f.txt", "new_str": "x", "ensure_uniqueness": "false"})

        assert (temp_dir / "f.txt").read_text() == "xx"

    def test_edit_replace_missing_pattern(self, registry, temp_dir):
        (temp_dir / "f.txt").write_text("abc")

        result = registry.dispatch("edit_file", {"path": "f.txt", "old_str": "zzz", "new_str": "y"})

        assert result.startswith("error: PatternNotFound:")
        assert (temp_dir / "f.txt").read_text() == "abc"

    def test_path_escape_is_reported(self, registry):
        result = registry.dispatch("read_file", {"path": "../../etc/passwd"})

        assert result.startswith("error: PathEscape:")

    def test_missing_required_argument_is_reported(self, registry):
        assert registry.dispatch("read_file", {}) == "error: KeyError: 'path'"

    def test_edit_without_new_str_leaves_file(self, registry, temp_dir):
        (temp_dir / "a.py").write_text("keep SECRET keep\n")

        result = registry.dispatch("edit_file", {"path": "a.py", "old_str": "SECRET"})

        assert result == "error: KeyError: 'new_str'"
        assert (temp_dir / "a.py").read_text() == "keep SECRET keep\n"

    @pytest.mark.parametrize(
        "value, expect_insensitive",
        [("true", False), (True, False), ("false", True), (None, True)],
    )
    def test_search_case_flag_accepts_strings(self, registry, monkeypatch, value, expect_insensitive):
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append(cmd)
            stdout = b"ripgrep 14.0.0\n" if cmd[-1] == "--version" else b""
            return subprocess.CompletedProcess(args=cmd, returncode=1, stdout=stdout, stderr=b"")

        monkeypatch.setattr(subprocess, "run", fake_run)
        args = {"pattern": "Needle"}
        if value is not None:
            args["case_sensitive"] = value

        assert registry.dispatch("code_search", args) == ""
        assert ("-i" in calls[-1]) is expect_insensitive

    def test_search_unavailable_is_reported(self, temp_dir):
        registry = build_toolset(temp_dir, rg_executable="no-such-rg-binary")

        result = registry.dispatch("code_search", {"pattern": "x"})

        assert result == "error: ToolUnavailable: ripgrep (rg) not installed"

    def test_read_file_description_mentions_cap(self, registry):
        description = next(t for t in registry.tools_param() if t["name"] == "read_file")["description"]

        assert "1 MiB" in description
