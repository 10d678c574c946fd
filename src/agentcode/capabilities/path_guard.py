"""Workspace path confinement.

Every file-touching operation resolves its path argument through a PathGuard,
which joins it onto the workspace root, normalizes it lexically, and rejects
anything that lands outside the root.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from agentcode.errors import NotADirectory, PathEscape

logger = logging.getLogger(__name__)


def normalize_root(root: Path | str) -> Path:
    """Return the absolute, symlink-resolved form of a workspace root."""
    resolved = Path(root).expanduser().resolve()
    if not resolved.is_dir():
        raise NotADirectory(f"Workspace root is not a directory: {root}")
    return resolved


def is_within(candidate: Path, root: Path) -> bool:
    """Return True if candidate is root or lies below it."""
    return candidate == root or root in candidate.parents


class PathGuard:
    """Resolve workspace-relative paths and reject escapes.

    The root is fixed at construction and never changes.
    """

    def __init__(self, root: Path | str):
        self._root = normalize_root(root)

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, path: Path | str | None = ".") -> Path:
        """Resolve a path against the root.

        The join is normalized lexically, so ``..`` segments are collapsed
        before the containment check. Empty input means the root itself.

        Raises:
            PathEscape: If the normalized path is outside the root.
        """
        if path is None or str(path) == "":
            path = "."
        candidate = Path(os.path.normpath(self._root / path))
        if not is_within(candidate, self._root):
            logger.debug("path escape rejected path=%s", path)
            raise PathEscape(f"Path escapes workspace root: {path}")
        return candidate

    def relative(self, path: Path) -> str:
        """Return the root-relative string form of a resolved path."""
        if path == self._root:
            return "."
        return path.relative_to(self._root).as_posix()

    def __repr__(self) -> str:
        return f"<PathGuard(root='{self._root}')>"
