"""Shell command capability.

Runs shell commands inside the workspace root with a wall-clock timeout.
There is no command allowlist: the operator who launches the agent is the
trust boundary.
"""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from dataclasses import dataclass

from agentcode.capabilities.base import Capability
from agentcode.capabilities.path_guard import PathGuard
from agentcode.errors import Timeout

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
# Seconds allowed to collect output after the process group is killed.
DRAIN_TIMEOUT = 1.0


@dataclass
class CommandResult:
    """Result of a command execution."""

    command: str
    exit_code: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        """Echoed command, non-empty streams, then the exit status."""
        parts = [f"$ {self.command}", self.stdout.rstrip("\n"), self.stderr.rstrip("\n")]
        parts.append(f"(exit {self.exit_code})")
        return "\n".join(p for p in parts if p)


class ProcessRunner(Capability):
    """Execute shell commands in the workspace root with a timeout."""

    name = "cmd"
    description = "Execute shell commands in the workspace root with a timeout."

    def __init__(self, guard: PathGuard, timeout: float = DEFAULT_TIMEOUT):
        """Initialize process runner.

        Args:
            guard: Supplies the workspace root used as working directory.
            timeout: Default wall-clock limit in seconds.
        """
        self.guard = guard
        self.timeout = timeout

    @staticmethod
    def environment() -> dict[str, str]:
        """Process environment with a fixed C locale."""
        env = dict(os.environ)
        env["LC_ALL"] = "C"
        env["LANG"] = "C"
        return env

    def execute(self, command: str, timeout: float | None = None) -> CommandResult:
        """Run a command and capture its streams.

        The command runs in its own session so the shell and all of its
        children can be killed together.

        Raises:
            Timeout: If the command does not finish before the deadline.
        """
        limit = self.timeout if timeout is None else timeout
        logger.debug("cmd run command=%s cwd=%s timeout=%s", command, self.guard.root, limit)
        proc = subprocess.Popen(
            command,
            shell=True,
            cwd=self.guard.root,
            env=self.environment(),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            start_new_session=True,
        )
        try:
            stdout, stderr = proc.communicate(timeout=limit)
        except subprocess.TimeoutExpired:
            _kill_group(proc)
            _drain(proc)
            logger.debug("cmd timeout seconds=%s pid=%s", limit, proc.pid)
            raise Timeout(limit) from None

        logger.debug("cmd result exit_code=%s", proc.returncode)
        return CommandResult(
            command=command,
            exit_code=proc.returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )

    def run(self, command: str, timeout: float | None = None) -> str:
        """Run a shell command and return its formatted output.

        Returns ``timeout after <n>s`` instead of partial output when the
        deadline passes.
        """
        try:
            return str(self.execute(command, timeout))
        except Timeout as e:
            return str(e)


def _kill_group(proc: subprocess.Popen) -> None:
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


def _drain(proc: subprocess.Popen) -> None:
    """Reap a killed shell without waiting on pipes held by escaped descendants."""
    try:
        proc.communicate(timeout=DRAIN_TIMEOUT)
    except subprocess.TimeoutExpired:
        logger.debug("cmd pipes still open after kill pid=%s", proc.pid)
        for stream in (proc.stdout, proc.stderr):
            if stream is not None:
                stream.close()
        proc.wait()
