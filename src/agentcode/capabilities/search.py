"""Code search capability backed by ripgrep."""

from __future__ import annotations

import logging
import subprocess

from agentcode.capabilities.base import Capability
from agentcode.capabilities.path_guard import PathGuard
from agentcode.errors import NotADirectory, SearchError, ToolUnavailable

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 500


class SearchBackend(Capability):
    """Search workspace files with ripgrep."""

    name = "search"
    description = "Search workspace files with ripgrep."

    def __init__(
        self,
        guard: PathGuard,
        executable: str = "rg",
        max_results: int = DEFAULT_MAX_RESULTS,
    ):
        self.guard = guard
        self.executable = executable
        self.max_results = max_results

    def ensure_available(self) -> None:
        """Check that the search binary runs.

        Raises:
            ToolUnavailable: If the binary is missing or fails to start.
        """
        try:
            result = subprocess.run(
                [self.executable, "--version"],
                capture_output=True,
                timeout=10,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ToolUnavailable("ripgrep (rg) not installed") from e
        if result.returncode != 0:
            raise ToolUnavailable("ripgrep (rg) not installed")

    def build_command(
        self,
        pattern: str,
        file_type: str | None = None,
        case_sensitive: bool = False,
    ) -> list[str]:
        """Build the rg argument vector for a search in the current directory."""
        cmd = [self.executable, "--no-heading", "--line-number", "--hidden", "--glob", "!.git"]
        if not case_sensitive:
            cmd.append("-i")
        if file_type:
            cmd += ["-t", file_type]
        cmd += ["-e", pattern, "."]
        return cmd

    def search(
        self,
        pattern: str,
        path: str = ".",
        file_type: str | None = None,
        case_sensitive: bool = False,
        max_results: int | None = None,
    ) -> str:
        """Search for a pattern and return matching lines.

        Output lines look like ``./file:line:match``. Only the first
        max_results lines are returned.

        Raises:
            PathEscape: If path is outside the workspace root.
            ToolUnavailable: If ripgrep cannot be run.
            NotADirectory: If path is not a directory.
            SearchError: If ripgrep fails without producing output.
        """
        directory = self.guard.resolve(path)
        if not directory.is_dir():
            raise NotADirectory(f"Not a directory: {path}")
        self.ensure_available()

        cmd = self.build_command(pattern, file_type, case_sensitive)
        logger.debug("search command=%s cwd=%s", cmd, directory)
        result = subprocess.run(cmd, cwd=directory, capture_output=True)
        stdout = result.stdout.decode("utf-8", errors="replace")
        stderr = result.stderr.decode("utf-8", errors="replace")

        if result.returncode != 0 and not stdout and stderr.strip():
            raise SearchError(f"rg error: {stderr.strip()}")

        limit = self.max_results if max_results is None else max_results
        lines = stdout.splitlines(keepends=True)
        logger.debug("search matches=%s limit=%s", len(lines), limit)
        return "".join(lines[:limit])
