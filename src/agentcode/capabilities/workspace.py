"""Workspace file capability.

Provides read/write/list/edit access to files under the workspace root.
All paths are resolved through a PathGuard first.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from agentcode.capabilities.base import Capability
from agentcode.capabilities.path_guard import PathGuard
from agentcode.errors import NotADirectory, NotFound, PatternNotFound

logger = logging.getLogger(__name__)

DEFAULT_MAX_READ_BYTES = 1 << 20  # 1 MiB
DEFAULT_MAX_LIST_ENTRIES = 512


class WorkspaceStore(Capability):
    """Read, write, list and edit files within the workspace root."""

    name = "fs"
    description = "Read, write, list and edit files within the workspace root."

    def __init__(
        self,
        guard: PathGuard,
        max_read_bytes: int = DEFAULT_MAX_READ_BYTES,
        max_list_entries: int = DEFAULT_MAX_LIST_ENTRIES,
    ):
        """Initialize with a path guard and size limits.

        Args:
            guard: Resolves and confines every path argument.
            max_read_bytes: Default cap on bytes returned by read().
            max_list_entries: Default cap on entries returned by list().
        """
        self.guard = guard
        self.max_read_bytes = max_read_bytes
        self.max_list_entries = max_list_entries

    def read(self, path: str, max_bytes: int | None = None) -> bytes:
        """Read up to max_bytes of a file as raw bytes.

        Args:
            path: Path relative to the workspace root.
            max_bytes: Byte cap. Defaults to the configured limit.

        Raises:
            PathEscape: If path is outside the workspace root.
            NotFound: If path is not a regular file.
        """
        resolved = self.guard.resolve(path)
        if not resolved.is_file():
            raise NotFound(f"File not found: {path}")
        limit = self.max_read_bytes if max_bytes is None else max_bytes
        logger.debug("fs read path=%s max_bytes=%s", resolved, limit)
        with open(resolved, "rb") as f:
            return f.read(limit)

    def list(self, path: str = ".", max_entries: int | None = None) -> list[str]:
        """Recursively list entries under a directory.

        Hidden entries are skipped and hidden directories are not descended
        into. Results are relative to the listed directory, sorted, then
        truncated to max_entries.

        Raises:
            PathEscape: If path is outside the workspace root.
            NotADirectory: If path is not a directory.
        """
        resolved = self.guard.resolve(path)
        if not resolved.is_dir():
            raise NotADirectory(f"Not a directory: {path}")
        limit = self.max_list_entries if max_entries is None else max_entries

        entries = []
        for dirpath, dirnames, filenames in os.walk(resolved):
            dirnames[:] = [d for d in dirnames if not d.startswith(".")]
            base = Path(dirpath).relative_to(resolved)
            for name in dirnames + [f for f in filenames if not f.startswith(".")]:
                entries.append((base / name).as_posix())

        entries.sort()
        logger.debug("fs list path=%s found=%s limit=%s", resolved, len(entries), limit)
        return entries[:limit]

    def write(self, path: str, content: str, create_dirs: bool = True) -> str:
        """Replace a file's full content.

        This is a destructive overwrite; previous content is not kept.

        Args:
            path: Path relative to the workspace root.
            content: New file content.
            create_dirs: Create missing parent directories.

        Returns:
            A confirmation including the byte count written.
        """
        resolved = self.guard.resolve(path)
        if create_dirs:
            resolved.parent.mkdir(parents=True, exist_ok=True)
        elif not resolved.parent.is_dir():
            raise NotFound(f"Parent directory not found: {self.guard.relative(resolved.parent)}")

        data = content.encode("utf-8")
        logger.debug("fs write path=%s bytes=%s", resolved, len(data))
        resolved.write_bytes(data)
        return f"wrote {self.guard.relative(resolved)} ({len(data)} bytes)"

    def edit(
        self,
        path: str,
        old_str: str | None,
        new_str: str,
        ensure_uniqueness: bool = True,
    ) -> str:
        """Append to or replace text in a file.

        With an empty old_str, new_str is appended (skipped when already
        present and ensure_uniqueness is set). Otherwise every literal
        occurrence of old_str is replaced with new_str.

        Raises:
            PatternNotFound: If old_str is given but does not occur.
        """
        resolved = self.guard.resolve(path)
        resolved.parent.mkdir(parents=True, exist_ok=True)
        existing = resolved.read_text(encoding="utf-8") if resolved.exists() else ""

        if not old_str:
            if ensure_uniqueness and new_str in existing:
                logger.debug("fs edit no-op path=%s", resolved)
                return "no-op: new_str already present"
            updated = existing + new_str
        else:
            if old_str not in existing:
                raise PatternNotFound(f"old_str not found in {path}")
            updated = existing.replace(old_str, new_str)

        before = len(existing.encode("utf-8"))
        after = len(updated.encode("utf-8"))
        logger.debug("fs edit path=%s before=%s after=%s", resolved, before, after)
        resolved.write_text(updated, encoding="utf-8")
        return f"edited {self.guard.relative(resolved)} ({before}B -> {after}B)"
