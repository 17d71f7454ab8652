"""Pydantic models for API requests and responses."""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ....core.domain import (
    ComponentDescriptor,
    Document,
    IntentDecision,
    Message,
    RetrievedContext,
    Role,
    TextMessage,
    ToolCallMessage,
    ToolResultMessage,
)


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON with the frontend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Chat messages
# =============================================================================


class TextMessageModel(CamelModel):
    """Plain text from the visitor or the assistant."""

    type: Literal["text"] = "text"
    role: Literal["user", "assistant", "system"] = Field(..., description="Author of the message")
    content: str = Field(..., description="Message text")

    def to_domain(self) -> Message:
        return TextMessage(Role(self.role), self.content)


class ToolCallMessageModel(CamelModel):
    """A tool invocation from an earlier assistant turn."""

    type: Literal["tool_call"] = "tool_call"
    tool_call_id: str
    tool_name: str
    input: dict[str, Any] = Field(default_factory=dict)

    def to_domain(self) -> Message:
        return ToolCallMessage(self.tool_call_id, self.tool_name, dict(self.input))


class ToolResultMessageModel(CamelModel):
    """The result of an earlier tool invocation."""

    type: Literal["tool_result"] = "tool_result"
    tool_call_id: str
    tool_name: str
    output: dict[str, Any] = Field(default_factory=dict)

    def to_domain(self) -> Message:
        return ToolResultMessage(self.tool_call_id, self.tool_name, dict(self.output))


ChatMessage = Annotated[
    TextMessageModel | ToolCallMessageModel | ToolResultMessageModel,
    Field(discriminator="type"),
]


class ChatRequest(BaseModel):
    """Request model for a chat turn."""

    messages: list[ChatMessage] = Field(..., description="Conversation history, oldest first")


# =============================================================================
# Knowledge base
# =============================================================================


class RagQueryRequest(BaseModel):
    """Request model for a diagnostic knowledge-base query."""

    query: str = Field(..., description="Text to search for")
    limit: int = Field(5, ge=1, le=50, description="Maximum number of contexts")


class ContextInfo(BaseModel):
    """A retrieved context."""

    content: str
    source: str
    similarity: float = Field(..., ge=0, le=1)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, context: RetrievedContext) -> "ContextInfo":
        return cls(**context.to_dict())


class RagQueryResponse(BaseModel):
    contexts: list[ContextInfo]


class DocumentInfo(CamelModel):
    """Document metadata (content excluded)."""

    id: str
    title: str
    file_type: str
    file_name: str
    file_size: int
    uploaded_by: str
    status: str
    created_at: datetime

    @classmethod
    def from_domain(cls, document: Document) -> "DocumentInfo":
        return cls(
            id=document.id,
            title=document.title,
            file_type=document.file_type,
            file_name=document.file_name,
            file_size=document.file_size,
            uploaded_by=document.uploaded_by,
            status=document.status.value,
            created_at=document.created_at,
        )


class DocumentListResponse(BaseModel):
    documents: list[DocumentInfo]


class UploadResponse(BaseModel):
    document: DocumentInfo


# =============================================================================
# Intent and components
# =============================================================================


class IntentRequest(BaseModel):
    message: str = Field(..., description="Visitor message to classify")


class IntentInfo(CamelModel):
    should_render_component: bool
    confidence: int = Field(..., ge=0, le=100)
    component_name: str | None = None
    component_path: str | None = None
    reasoning: str | None = None

    @classmethod
    def from_domain(cls, decision: IntentDecision) -> "IntentInfo":
        return cls(
            should_render_component=decision.should_render_component,
            confidence=decision.confidence,
            component_name=decision.component_name,
            component_path=decision.component_path,
            reasoning=decision.reasoning,
        )


class IntentResponse(BaseModel):
    intent: IntentInfo


class ComponentInfo(CamelModel):
    id: str | None = None
    name: str
    display_name: str
    description: str
    intent: list[str] = Field(default_factory=list)
    component_path: str
    priority: int = 0
    is_active: bool = True

    @classmethod
    def from_domain(cls, component: ComponentDescriptor) -> "ComponentInfo":
        return cls(
            id=component.id,
            name=component.name,
            display_name=component.display_name,
            description=component.description,
            intent=list(component.intent),
            component_path=component.component_path,
            priority=component.priority,
            is_active=component.is_active,
        )


class ComponentCreateRequest(CamelModel):
    """Request model for registering a UI component."""

    name: str
    display_name: str
    description: str
    intent: list[str] = Field(default_factory=list)
    component_path: str
    priority: int = 0
    is_active: bool = True

    def to_domain(self) -> ComponentDescriptor:
        return ComponentDescriptor(
            name=self.name.strip(),
            display_name=self.display_name.strip(),
            description=self.description.strip(),
            intent=[tag.strip() for tag in self.intent if tag.strip()],
            component_path=self.component_path.strip(),
            priority=self.priority,
            is_active=self.is_active,
        )


class ComponentListResponse(BaseModel):
    components: list[ComponentInfo]


# =============================================================================
# Suggestions and health
# =============================================================================


class SuggestionResponse(BaseModel):
    suggestions: list[str]


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    vector_store: str = Field(..., description="Vector store backend status")
    chunks: int | None = Field(None, description="Stored chunk count")
    documents: int | None = Field(None, description="Stored document count")


# =============================================================================
# Errors
# =============================================================================


class ErrorDetail(BaseModel):
    """Structured error detail information."""

    type: str = Field(..., description="Exception type name")
    code: str = Field(..., description="Error code (e.g., CR_VEC_002)")
    message: str = Field(..., description="Human-readable error message")


class ErrorLocation(BaseModel):
    """Source location where error occurred."""

    model_config = ConfigDict(populate_by_name=True)

    class_name: str = Field(..., alias="class", description="Class name or <module>")
    method: str = Field(..., description="Method/function name")
    file: str = Field(..., description="Source file name")
    line: int = Field(..., description="Line number")
    timestamp: str | None = Field(None, description="When the error occurred")


class ErrorResponse(BaseModel):
    """Response model for structured errors.

    Example:
        {
            "error": {"type": "StorageUnavailableError", "code": "CR_VEC_002", "message": "..."},
            "location": {"class": "QdrantAdapter", "method": "_get_client", ...},
            "context": {"url": "https://..."},
            "stack_trace": ["Traceback...", ...]  # Only in debug mode
        }
    """

    error: ErrorDetail = Field(..., description="Error details including type, code, and message")
    location: ErrorLocation | None = Field(None, description="Source location of the error")
    context: dict | None = Field(None, description="Additional debugging context")
    cause: dict | None = Field(None, description="Underlying exception that caused this error")
    stack_trace: list[str] | None = Field(None, description="Stack trace (debug mode only)")
