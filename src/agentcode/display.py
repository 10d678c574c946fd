"""Terminal output for the interactive agent."""

from __future__ import annotations

import json
import sys
from typing import Any, TextIO

RESET = "\033[0m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
MAGENTA = "\033[35m"
GREY = "\033[38;5;8m"

PREVIEW_CHARS = 200
VERBOSE_RESULT_CHARS = 500


class Display:
    """Render agent activity to a text stream.

    In verbose mode tool calls are echoed with their full input and results
    with up to 500 characters; otherwise a one-line preview is shown.
    Color codes are only emitted when the stream is a terminal.
    """

    def __init__(
        self,
        verbose: bool = False,
        stream: TextIO | None = None,
        color: bool | None = None,
    ):
        self.verbose = verbose
        self.stream = stream or sys.stdout
        if color is None:
            isatty = getattr(self.stream, "isatty", None)
            color = bool(isatty and isatty())
        self.color = color

    def _paint(self, text: str, code: str) -> str:
        return f"{code}{text}{RESET}" if self.color else text

    def _write(self, text: str = "") -> None:
        print(text, file=self.stream)

    def banner(self, root: Any = None) -> None:
        self._write(self._paint("Chat with Claude (ctrl-c to quit)", GREEN))
        if root is not None:
            self._write(self._paint(f"└─ workspace: {root}", GREY))
        self._write()

    def prompt_text(self) -> str:
        return "You: "

    def agent_text(self, text: str) -> None:
        if not text:
            return
        if self.verbose:
            self._write(f"\nassistant(text): {text}\n")
        else:
            self._write(f"{self._paint('Claude:', YELLOW)} {text}")

    def tool_call(self, name: str, tool_input: dict[str, Any]) -> None:
        if self.verbose:
            self._write(f"tool: {name}({json.dumps(tool_input, default=str)})")
        else:
            self._write(f"  {self._paint('→', BLUE)} {self._paint(f'Running {name}...', GREY)}")

    def tool_result(self, result: str) -> None:
        if self.verbose:
            self._write(f"result: {result[:VERBOSE_RESULT_CHARS]}")
            return
        preview = result.strip().replace("\n", " ")
        if len(preview) > PREVIEW_CHARS:
            preview = f"{preview[:PREVIEW_CHARS]}..."
        self._write(f"  {self._paint('←', MAGENTA)} {self._paint(preview, GREY)}")

    def error(self, message: str) -> None:
        print(self._paint(message, RED), file=sys.stderr)

    def goodbye(self) -> None:
        self._write(f"\n{self._paint('Goodbye!', YELLOW)}")
