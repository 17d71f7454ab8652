"""Conversation state machine, tool manifest and stream event models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .messages import ToolCallMessage, ToolResultMessage


class ConversationState(str, Enum):
    """Lifecycle of a single chat request.

    RECEIVED -> INTENT_DETECTED -> CONTEXT_RETRIEVED -> GENERATING -> COMPLETED | ABORTED
    """

    RECEIVED = "received"
    INTENT_DETECTED = "intent_detected"
    CONTEXT_RETRIEVED = "context_retrieved"
    GENERATING = "generating"
    COMPLETED = "completed"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (ConversationState.COMPLETED, ConversationState.ABORTED)


@dataclass(frozen=True)
class ToolSpec:
    """A callable capability advertised to the generation model.

    Attributes:
        name: Tool name as the model sees it.
        description: When the model should call it.
        parameters: JSON schema of the arguments object (None for no arguments).
    """

    name: str
    description: str
    parameters: dict[str, Any] | None = None


@dataclass(frozen=True)
class TextDelta:
    """A fragment of generated text."""

    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "text-delta", "text": self.text}


@dataclass(frozen=True)
class ToolCallEvent:
    """The model invoked a tool."""

    call: ToolCallMessage

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "tool-call",
            "toolCallId": self.call.call_id,
            "toolName": self.call.name,
            "input": self.call.arguments,
        }


@dataclass(frozen=True)
class ToolResultEvent:
    """A tool finished; the UI decides how to render the result."""

    result: ToolResultMessage

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "tool-result",
            "toolCallId": self.result.call_id,
            "toolName": self.result.name,
            "output": self.result.result,
        }


@dataclass(frozen=True)
class FinishEvent:
    """Final event of a stream."""

    state: ConversationState
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def aborted(self) -> bool:
        return self.state == ConversationState.ABORTED

    def to_dict(self) -> dict[str, Any]:
        return {"type": "finish", "state": self.state.value, **self.metadata}


StreamEvent = TextDelta | ToolCallEvent | ToolResultEvent | FinishEvent

# What a generation model yields while streaming
GenerationChunk = TextDelta | ToolCallMessage
