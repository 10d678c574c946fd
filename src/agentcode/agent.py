"""Coding agent with tool use.

The agent orchestrates:
1. Conversation with the LLM
2. Tool-use extraction from LLM responses
3. Sequential dispatch of each tool call through the ToolRegistry
4. Feeding tool results back until the model answers with text only

Tool results are correlated to their requests by id. The inner loop has no
iteration cap: it ends when the model stops requesting tools.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Callable

import anthropic

from agentcode.display import Display
from agentcode.messages import (
    Message,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    block_from_api,
)
from agentcode.tools import ToolRegistry

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"
MODEL_ENV = "AGENTCODE_MODEL"

# Stored in place of an empty final reply; the API rejects empty text blocks.
EMPTY_REPLY = "(no response)"


def default_model() -> str:
    return os.getenv(MODEL_ENV) or DEFAULT_MODEL


@dataclass
class AgentConfig:
    """Configuration for the agent."""

    model: str = field(default_factory=default_model)
    max_tokens: int = 1024
    system_prompt: str | None = None
    verbose: bool = False


class CodingAgent:
    """A coding agent that acts on a workspace through tools.

    The agent:
    1. Appends the user's message to the history
    2. Sends the history and tool definitions to the LLM
    3. Runs every tool the response asks for, in order
    4. Sends the tool results back and repeats
    5. Returns the final text once no tools are requested
    """

    def __init__(
        self,
        registry: ToolRegistry,
        config: AgentConfig | None = None,
        client: Any | None = None,
        display: Display | None = None,
    ):
        """Initialize the agent.

        Args:
            registry: Tools advertised to and dispatched for the model.
            config: Agent configuration. If None, uses defaults.
            client: Anthropic client. If None, one is created from the environment.
            display: Output renderer. If None, nothing is rendered.
        """
        self.registry = registry
        self.config = config or AgentConfig()
        self.display = display
        self.messages: list[Message] = []
        self._client = client if client is not None else anthropic.Anthropic()

    # =========================================================================
    # Main conversation interface
    # =========================================================================

    def chat(self, user_message: str) -> str:
        """Send a message and get the model's final text response.

        Tool calls requested along the way are executed and their results fed
        back to the model before this returns.
        """
        self.messages.append(Message.user_text(user_message))

        while True:
            response = self._call_llm()
            blocks = [b for b in (block_from_api(raw) for raw in response.content) if b is not None]
            text_blocks = [b for b in blocks if isinstance(b, TextBlock) and b.text]
            tool_uses = [b for b in blocks if isinstance(b, ToolUseBlock)]
            text = "".join(b.text for b in text_blocks)

            if self.display and text:
                self.display.agent_text(text)

            if not tool_uses:
                self.messages.append(Message.assistant_text(text or EMPTY_REPLY))
                return text

            results = self._run_tools(tool_uses)
            self.messages.append(Message(role="assistant", content=[*text_blocks, *tool_uses]))
            self.messages.append(Message(role="user", content=results))

    def run(self, read_input: Callable[[], str]) -> None:
        """Interactive loop: read a line, answer it, repeat until EOF.

        Blank lines are skipped. KeyboardInterrupt propagates to the caller.
        """
        while True:
            try:
                line = read_input()
            except EOFError:
                return
            user = line.strip()
            if not user:
                continue
            self.chat(user)

    def reset(self) -> None:
        """Clear the conversation history."""
        self.messages = []

    # =========================================================================
    # Internal methods
    # =========================================================================

    def _call_llm(self) -> Any:
        logger.info("model call model=%s messages=%s", self.config.model, len(self.messages))
        kwargs: dict[str, Any] = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "messages": [m.to_api() for m in self.messages],
            "tools": self.registry.tools_param(),
        }
        if self.config.system_prompt:
            kwargs["system"] = self.config.system_prompt
        response = self._client.messages.create(**kwargs)
        logger.info("model response stop_reason=%s", getattr(response, "stop_reason", None))
        return response

    def _run_tools(self, tool_uses: list[ToolUseBlock]) -> list[ToolResultBlock]:
        """Dispatch tool calls sequentially, keeping each result tied to its id."""
        results = []
        for tool_use in tool_uses:
            if self.display:
                self.display.tool_call(tool_use.name, tool_use.input)
            outcome = self.registry.dispatch(tool_use.name, tool_use.input)
            if self.display:
                self.display.tool_result(outcome)
            results.append(ToolResultBlock(tool_use_id=tool_use.id, content=outcome))
        return results
