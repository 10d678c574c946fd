"""Base class for workspace capabilities.

A Capability is an object that provides controlled access to one external
resource (the workspace filesystem, the shell, the search binary). The tool
registry composes capabilities into tool handlers.

Key concepts:
- Every capability is bound to a single workspace root through a PathGuard
- Limits (timeouts, byte caps) are instance fields, not module globals
"""

from __future__ import annotations

from abc import ABC


class Capability(ABC):
    """Base class for all capabilities.

    Subclasses should:
    - Set `name` and `description` class attributes
    - Implement methods that provide the capability's functionality

    Example:
        class ReadOnlyCapability(Capability):
            name = "ro"
            description = "Read files."

            def read(self, path: str) -> bytes:
                '''Read file contents.'''
                return self.guard.resolve(path).read_bytes()
    """

    name: str = "unnamed_capability"
    description: str = "A capability."

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name='{self.name}')>"
