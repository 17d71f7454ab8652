"""Chat message variants exchanged with the client and the generation model."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Role(str, Enum):
    """Author of a text message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True)
class TextMessage:
    """Plain text authored by the visitor or the assistant."""

    role: Role
    content: str


@dataclass(frozen=True)
class ToolCallMessage:
    """The assistant asked for a tool to be executed."""

    call_id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResultMessage:
    """Result of an executed tool, fed back to the model."""

    call_id: str
    name: str
    result: dict[str, Any] = field(default_factory=dict)


Message = TextMessage | ToolCallMessage | ToolResultMessage


def last_user_text(messages: Sequence[Message]) -> str:
    """Return the text of the most recent user message.

    Args:
        messages: Conversation history, oldest first.

    Returns:
        Content of the latest user text message, or "" if there is none.
    """
    for message in reversed(messages):
        if isinstance(message, TextMessage) and message.role == Role.USER:
            return message.content
    return ""
