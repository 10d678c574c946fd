"""Error taxonomy for tool execution.

Every failure raised by a workspace component is a ToolError subclass.
The tool registry renders them as ``error: <Kind>: <message>`` strings,
where Kind is the class name.
"""

from __future__ import annotations


class ToolError(Exception):
    """Base class for failures raised inside a tool handler."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class PathEscape(ToolError):
    """A requested path resolves outside the workspace root."""


class NotFound(ToolError):
    """The target is missing or is not a regular file."""


class NotADirectory(ToolError):
    """The target is not a directory."""


class PatternNotFound(ToolError):
    """The text to replace does not occur in the file."""


class UnknownTool(ToolError):
    """No tool is registered under the requested name."""


class ToolUnavailable(ToolError):
    """An external binary needed by a tool cannot be run."""


class SearchError(ToolError):
    """The search subprocess failed without producing results."""


class Timeout(ToolError):
    """A subprocess exceeded its wall-clock deadline."""

    def __init__(self, seconds: float):
        self.seconds = seconds
        super().__init__(f"timeout after {format_seconds(seconds)}s")


def format_seconds(seconds: float) -> str:
    """Format a duration without a trailing ``.0`` for whole numbers."""
    if float(seconds).is_integer():
        return str(int(seconds))
    return str(seconds)


__all__ = [
    "ToolError",
    "PathEscape",
    "NotFound",
    "NotADirectory",
    "PatternNotFound",
    "UnknownTool",
    "ToolUnavailable",
    "SearchError",
    "Timeout",
    "format_seconds",
]
