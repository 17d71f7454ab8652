"""UI component registry and intent decision models."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass
class ComponentDescriptor:
    """A renderable UI capability the intent router may select.

    Descriptors are managed by an admin process; the conversation core only
    reads the active ones, highest priority first.

    Attributes:
        name: Unique machine name (e.g. "work-timeline").
        display_name: Label shown to visitors.
        description: What the component displays.
        intent: Trigger tags describing messages that should surface it.
        component_path: Frontend path of the component implementation.
        priority: Ordering weight, higher first.
        is_active: Whether the router may select it.
    """

    name: str
    display_name: str
    description: str
    intent: list[str] = field(default_factory=list)
    component_path: str = ""
    priority: int = 0
    is_active: bool = True
    id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "displayName": self.display_name,
            "description": self.description,
            "intent": list(self.intent),
            "componentPath": self.component_path,
            "priority": self.priority,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass
class IntentDecision:
    """Whether a message should surface a UI component instead of a plain answer.

    Attributes:
        should_render_component: True if a component should be shown.
        confidence: Model confidence from 0 to 100.
        component_name: Name of a registered component, never an unchecked model guess.
        component_path: Frontend path of the matched component.
        reasoning: Short explanation from the model.
    """

    should_render_component: bool
    confidence: int
    component_name: str | None = None
    component_path: str | None = None
    reasoning: str | None = None

    @classmethod
    def no_component(cls) -> "IntentDecision":
        """Default decision used when detection is skipped or fails."""
        return cls(should_render_component=False, confidence=0)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "shouldRenderComponent": self.should_render_component,
            "componentName": self.component_name,
            "componentPath": self.component_path,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
        }
