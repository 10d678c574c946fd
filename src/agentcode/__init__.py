"""agentcode: a command-line coding agent with sandboxed workspace tools.

This package provides:
- Path confinement for every file operation under a single workspace root
- File read/write/list/edit, shell execution with timeout, and ripgrep search
- A tool registry that reports every tool failure back to the model as data
- A conversation loop that feeds tool results back until the model is done

Key Components:
- PathGuard: Resolves relative paths and rejects escapes from the root
- WorkspaceStore, ProcessRunner, SearchBackend: The workspace capabilities
- ToolRegistry: Tool contracts advertised to the model, with keyed dispatch
- CodingAgent: The LLM conversation loop

Example:
    from agentcode import CodingAgent, build_toolset

    agent = CodingAgent(build_toolset("."))
    print(agent.chat("List the Python files in this project"))
"""

from agentcode.agent import AgentConfig, CodingAgent
from agentcode.capabilities import (
    Capability,
    CommandResult,
    PathGuard,
    ProcessRunner,
    SearchBackend,
    WorkspaceStore,
)
from agentcode.errors import (
    NotADirectory,
    NotFound,
    PathEscape,
    PatternNotFound,
    SearchError,
    Timeout,
    ToolError,
    ToolUnavailable,
    UnknownTool,
)
from agentcode.messages import Message, TextBlock, ToolResultBlock, ToolUseBlock
from agentcode.tools import ToolContract, ToolRegistry, build_toolset

__version__ = "0.1.0"

__all__ = [
    # Agent
    "CodingAgent",
    "AgentConfig",
    # Messages
    "Message",
    "TextBlock",
    "ToolUseBlock",
    "ToolResultBlock",
    # Tools
    "ToolContract",
    "ToolRegistry",
    "build_toolset",
    # Capabilities
    "Capability",
    "CommandResult",
    "PathGuard",
    "ProcessRunner",
    "SearchBackend",
    "WorkspaceStore",
    # Errors
    "ToolError",
    "PathEscape",
    "NotFound",
    "NotADirectory",
    "PatternNotFound",
    "UnknownTool",
    "ToolUnavailable",
    "SearchError",
    "Timeout",
]
