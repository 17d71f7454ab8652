"""Domain models for the chat resume service.

Models are organized by area:

- document: Document, Chunk, ChunkMatch and RetrievedContext for the knowledge base
- component: ComponentDescriptor and IntentDecision for UI component routing
- messages: the TextMessage / ToolCallMessage / ToolResultMessage variants
- conversation: ConversationState, ToolSpec and stream events

    from chat_resume.core.domain import Document, RetrievedContext, IntentDecision
"""

from .component import ComponentDescriptor, IntentDecision
from .conversation import (
    ConversationState,
    FinishEvent,
    GenerationChunk,
    StreamEvent,
    TextDelta,
    ToolCallEvent,
    ToolResultEvent,
    ToolSpec,
)
from .document import Chunk, ChunkMatch, Document, DocumentStatus, RetrievedContext
from .messages import (
    Message,
    Role,
    TextMessage,
    ToolCallMessage,
    ToolResultMessage,
    last_user_text,
)

__all__ = [
    # Document models
    "Document",
    "DocumentStatus",
    "Chunk",
    "ChunkMatch",
    "RetrievedContext",
    # Component models
    "ComponentDescriptor",
    "IntentDecision",
    # Messages
    "Message",
    "Role",
    "TextMessage",
    "ToolCallMessage",
    "ToolResultMessage",
    "last_user_text",
    # Conversation
    "ConversationState",
    "ToolSpec",
    "TextDelta",
    "ToolCallEvent",
    "ToolResultEvent",
    "FinishEvent",
    "StreamEvent",
    "GenerationChunk",
]
