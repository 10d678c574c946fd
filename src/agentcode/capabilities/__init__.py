"""Capabilities that give the agent controlled access to its workspace.

Each capability wraps one external resource and confines it to the
workspace root through a shared PathGuard:
- PathGuard: Resolves workspace-relative paths and rejects escapes
- WorkspaceStore: File read/write/list/edit access
- ProcessRunner: Shell command execution with a wall-clock timeout
- SearchBackend: Code search through ripgrep
"""

from agentcode.capabilities.base import Capability
from agentcode.capabilities.path_guard import PathGuard
from agentcode.capabilities.process import CommandResult, ProcessRunner
from agentcode.capabilities.search import SearchBackend
from agentcode.capabilities.workspace import WorkspaceStore

__all__ = [
    "Capability",
    "CommandResult",
    "PathGuard",
    "ProcessRunner",
    "SearchBackend",
    "WorkspaceStore",
]
