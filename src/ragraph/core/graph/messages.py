"""Chat message state for message graphs.

A message graph is a state graph whose state is the conversation so far,
a list of Message values. Actions take the history and return a new,
longer history.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any


class MessageRole(Enum):
    """Author of a chat message (OpenAI chat roles)."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class Message:
    """A single chat message."""

    role: MessageRole
    content: str

    @classmethod
    def system(cls, content: str) -> Message:
        return cls(MessageRole.SYSTEM, content)

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(MessageRole.USER, content)

    @classmethod
    def assistant(cls, content: str) -> Message:
        return cls(MessageRole.ASSISTANT, content)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the chat completions wire format."""
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        return cls(MessageRole(data["role"]), data.get("content") or "")


def last_message(messages: Sequence[Message]) -> Message:
    """Return the most recent message.

    Raises:
        ValueError: If the history is empty.
    """
    if not messages:
        raise ValueError("message history is empty")
    return messages[-1]
