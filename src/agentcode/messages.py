"""Conversation history types.

A conversation is an ordered list of Message objects. Each message carries an
ordered list of content blocks:
- TextBlock: plain text from the user or the model
- ToolUseBlock: a model-issued request to run a named tool
- ToolResultBlock: the string outcome of a tool call, keyed by the call's id
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass
class TextBlock:
    """Plain text content."""

    text: str

    def to_api(self) -> dict:
        return {"type": "text", "text": self.text}


@dataclass
class ToolUseBlock:
    """A request from the model to invoke a tool."""

    id: str
    name: str
    input: dict[str, Any] = field(default_factory=dict)

    def to_api(self) -> dict:
        return {"type": "tool_use", "id": self.id, "name": self.name, "input": self.input}


@dataclass
class ToolResultBlock:
    """The outcome of a tool call, correlated to its request by id."""

    tool_use_id: str
    content: str

    def to_api(self) -> dict:
        return {"type": "tool_result", "tool_use_id": self.tool_use_id, "content": self.content}


ContentBlock = Union[TextBlock, ToolUseBlock, ToolResultBlock]


@dataclass
class Message:
    """A message in the conversation history."""

    role: str  # "user", "assistant"
    content: list[ContentBlock] = field(default_factory=list)

    @classmethod
    def user_text(cls, text: str) -> "Message":
        return cls(role="user", content=[TextBlock(text)])

    @classmethod
    def assistant_text(cls, text: str) -> "Message":
        return cls(role="assistant", content=[TextBlock(text)])

    @property
    def text(self) -> str:
        """Concatenated text of all text blocks."""
        return "".join(b.text for b in self.content if isinstance(b, TextBlock))

    @property
    def tool_uses(self) -> list[ToolUseBlock]:
        return [b for b in self.content if isinstance(b, ToolUseBlock)]

    @property
    def tool_results(self) -> list[ToolResultBlock]:
        return [b for b in self.content if isinstance(b, ToolResultBlock)]

    def to_api(self) -> dict:
        """Convert to Anthropic API format."""
        return {"role": self.role, "content": [b.to_api() for b in self.content]}


def block_from_api(block: Any) -> ContentBlock | None:
    """Convert a backend response block (SDK object or dict) to a content block.

    Returns None for block types the loop does not act on (e.g. thinking).
    """
    block_type = _field(block, "type")
    if block_type == "text":
        return TextBlock(text=_field(block, "text") or "")
    if block_type == "tool_use":
        return ToolUseBlock(
            id=_field(block, "id"),
            name=_field(block, "name"),
            input=normalize_input(_field(block, "input")),
        )
    return None


def _field(block: Any, key: str) -> Any:
    if isinstance(block, dict):
        return block.get(key)
    return getattr(block, key, None)


def normalize_input(value: Any) -> dict[str, Any]:
    """Coerce a model-issued tool input into a string-keyed dict.

    Depending on the transport, the payload may be a pydantic model or a
    mapping with non-string keys.
    """
    if value is None:
        return {}
    if hasattr(value, "model_dump"):
        value = value.model_dump()
    if not isinstance(value, dict):
        value = dict(value)
    return {str(k): v for k, v in value.items()}


__all__ = [
    "ContentBlock",
    "Message",
    "TextBlock",
    "ToolResultBlock",
    "ToolUseBlock",
    "block_from_api",
    "normalize_input",
]
