"""Tool contracts and dispatch.

The registry holds the tools advertised to the completion backend. Each tool
is a ToolContract whose handler closes over shared capability instances.
dispatch() never raises on tool failure: every error becomes an
``error: <Kind>: <message>`` string returned to the model as data.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable

from agentcode.capabilities.path_guard import PathGuard
from agentcode.capabilities.process import DEFAULT_TIMEOUT, ProcessRunner
from agentcode.capabilities.search import DEFAULT_MAX_RESULTS, SearchBackend
from agentcode.capabilities.workspace import (
    DEFAULT_MAX_LIST_ENTRIES,
    DEFAULT_MAX_READ_BYTES,
    WorkspaceStore,
)
from agentcode.errors import ToolError, UnknownTool
from agentcode.logging_utils import abbreviate
from agentcode.messages import normalize_input

logger = logging.getLogger(__name__)

ToolHandler = Callable[[dict[str, Any]], Any]


@dataclass(frozen=True)
class ToolContract:
    """A tool the model may call."""

    name: str
    description: str
    input_schema: dict[str, Any]
    handler: ToolHandler

    def to_api(self) -> dict[str, Any]:
        """The fields advertised to the completion backend."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }


def object_schema(
    properties: dict[str, dict[str, Any]],
    required: Iterable[str] = (),
) -> dict[str, Any]:
    """Build a JSON-schema object for a tool's input."""
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    required = list(required)
    if required:
        schema["required"] = required
    return schema


def render_output(value: Any) -> str:
    """Convert a handler's return value to the string sent to the model."""
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return str(value)


def render_error(error: Exception) -> str:
    kind = error.kind if isinstance(error, ToolError) else type(error).__name__
    return f"error: {kind}: {error}"


class ToolRegistry:
    """Ordered collection of tool contracts with keyed dispatch."""

    def __init__(self, contracts: Iterable[ToolContract] = ()):
        self._tools: dict[str, ToolContract] = {}
        for contract in contracts:
            self.register(contract)

    def register(self, contract: ToolContract) -> None:
        if contract.name in self._tools:
            raise ValueError(f"Tool already registered: {contract.name}")
        self._tools[contract.name] = contract

    def get(self, name: str) -> ToolContract:
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownTool(f"Unknown tool: {name}") from None

    def names(self) -> list[str]:
        return list(self._tools)

    def tools_param(self) -> list[dict[str, Any]]:
        """Tool definitions in the shape the Messages API expects."""
        return [contract.to_api() for contract in self._tools.values()]

    def dispatch(self, name: str, tool_input: Any) -> str:
        """Run a tool and return its outcome as a string.

        Failures of any kind are returned as ``error: <Kind>: <message>``.
        """
        try:
            contract = self.get(name)
            arguments = normalize_input(tool_input)
            logger.debug("dispatch tool=%s input=%s", name, abbreviate(json.dumps(arguments, default=str)))
            result = render_output(contract.handler(arguments))
        except Exception as e:
            logger.warning("tool failed tool=%s error=%s", name, render_error(e))
            return render_error(e)
        logger.debug("dispatch tool=%s result=%s", name, abbreviate(result))
        return result

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


def build_toolset(
    root: Path | str,
    timeout: float = DEFAULT_TIMEOUT,
    max_read_bytes: int = DEFAULT_MAX_READ_BYTES,
    max_list_entries: int = DEFAULT_MAX_LIST_ENTRIES,
    max_results: int = DEFAULT_MAX_RESULTS,
    rg_executable: str = "rg",
) -> ToolRegistry:
    """Create the six workspace tools over one shared workspace root.

    Args:
        root: Workspace root directory.
        timeout: Wall-clock limit for bash commands, in seconds.
        max_read_bytes: Byte cap for read_file.
        max_list_entries: Entry cap for list_files.
        max_results: Line cap for code_search.
        rg_executable: Name or path of the ripgrep binary.
    """
    guard = PathGuard(root)
    fs = WorkspaceStore(guard, max_read_bytes=max_read_bytes, max_list_entries=max_list_entries)
    cmd = ProcessRunner(guard, timeout=timeout)
    search = SearchBackend(guard, executable=rg_executable, max_results=max_results)
    logger.debug("toolset root=%s capabilities=%s", guard.root, [fs, cmd, search])

    def read_file(args: dict[str, Any]) -> bytes:
        return fs.read(args["path"])

    def list_files(args: dict[str, Any]) -> list[str]:
        return fs.list(args.get("path") or ".")

    def bash(args: dict[str, Any]) -> str:
        return cmd.run(args["command"])

    def edit_file(args: dict[str, Any]) -> str:
        return fs.edit(
            args["path"],
            old_str=str(args.get("old_str") or ""),
            new_str=str(args["new_str"]),
            ensure_uniqueness=_flag(args, "ensure_uniqueness", True),
        )

    def write_file(args: dict[str, Any]) -> str:
        return fs.write(
            args["path"],
            args["content"],
            create_dirs=_flag(args, "create_dirs", True),
        )

    def code_search(args: dict[str, Any]) -> str:
        return search.search(
            args["pattern"],
            path=args.get("path") or ".",
            file_type=args.get("file_type") or None,
            case_sensitive=_flag(args, "case_sensitive", False),
        )

    return ToolRegistry(
        [
            ToolContract(
                "read_file",
                f"Read up to {_format_size(max_read_bytes)} of a UTF-8 or binary file from the workspace root. "
                "Use to inspect code or data before proposing edits.",
                object_schema(
                    {"path": {"type": "string", "description": "Relative path from workspace root."}},
                    required=["path"],
                ),
                read_file,
            ),
            ToolContract(
                "list_files",
                f"Recursively list files under a directory (max {max_list_entries} entries). "
                "Use to explore the workspace before file-specific actions.",
                object_schema(
                    {"path": {"type": "string", "description": "Directory path, default '.'"}},
                ),
                list_files,
            ),
            ToolContract(
                "bash",
                f"Execute a shell command inside the workspace root with a {timeout:g}s timeout. "
                "Prefer read_file/edit_file for code ops; use bash for git/linters/builds.",
                object_schema(
                    {"command": {"type": "string", "description": "Shell command to run."}},
                    required=["command"],
                ),
                bash,
            ),
            ToolContract(
                "edit_file",
                "Create or modify a file. If old_str is empty, append new_str. Otherwise replace "
                "all occurrences of old_str with new_str. Ensures uniqueness by default.",
                object_schema(
                    {
                        "path": {"type": "string", "description": "Relative file path."},
                        "old_str": {
                            "type": "string",
                            "description": "Text to replace. If empty, append new_str.",
                        },
                        "new_str": {"type": "string", "description": "Replacement or appended text."},
                        "ensure_uniqueness": {
                            "type": "boolean",
                            "description": "Prevent duplicate insertion when appending.",
                            "default": True,
                        },
                    },
                    required=["path", "new_str"],
                ),
                edit_file,
            ),
            ToolContract(
                "write_file",
                "Write or overwrite a file with new content. Creates parent directories automatically.",
                object_schema(
                    {
                        "path": {"type": "string", "description": "Relative file path from workspace root."},
                        "content": {"type": "string", "description": "Content to write to the file."},
                        "create_dirs": {
                            "type": "boolean",
                            "description": "Create parent directories if needed.",
                            "default": True,
                        },
                    },
                    required=["path", "content"],
                ),
                write_file,
            ),
            ToolContract(
                "code_search",
                "Search code with ripgrep. Returns file:line:match lines, case-insensitive by default.",
                object_schema(
                    {
                        "pattern": {"type": "string", "description": "Regex or literal search pattern."},
                        "path": {"type": "string", "description": "Directory to search, default '.'"},
                        "file_type": {
                            "type": "string",
                            "description": "rg -t value (e.g., 'py', 'go', 'js').",
                        },
                        "case_sensitive": {
                            "type": "boolean",
                            "description": "Default false (case-insensitive).",
                        },
                    },
                    required=["pattern"],
                ),
                code_search,
            ),
        ]
    )


def _flag(args: dict[str, Any], key: str, default: bool) -> bool:
    """Read a boolean argument, tolerating string-encoded values."""
    value = args.get(key)
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() not in ("", "false", "0", "no")
    return bool(value)


def _format_size(n: int) -> str:
    if n % (1 << 20) == 0:
        return f"{n >> 20} MiB"
    if n % 1024 == 0:
        return f"{n >> 10} KiB"
    return f"{n} bytes"
