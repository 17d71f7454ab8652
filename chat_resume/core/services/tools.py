"""Tools the generation model may call while answering."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from ..domain import ToolCallMessage, ToolResultMessage, ToolSpec
from ..domain.exceptions import ChatResumeError
from .ingestion_service import IngestionService

logger = logging.getLogger(__name__)

SHOW_WORK_TIMELINE = "showWorkTimeline"
SHOW_EDUCATION = "showEducation"
SHOW_PERSONAL_PASSIONS = "showPersonalPassions"
UPLOAD_RAW_TEXT = "uploadRawTextToRag"

ToolHandler = Callable[[dict[str, Any]], dict[str, Any]]


@dataclass(frozen=True)
class Tool:
    """A tool specification bound to its handler.

    Attributes:
        spec: What the model sees.
        handler: Called with the model's arguments; returns a small confirmation object.
        component: Registry name of the UI component this tool displays, if any.
    """

    spec: ToolSpec
    handler: ToolHandler
    component: str | None = None


class ToolRegistry:
    """Named tools available to the conversation."""

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: dict[str, Tool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        self._tools[tool.spec.name] = tool

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def specs(self, exclude: Iterable[str] = ()) -> list[ToolSpec]:
        excluded = set(exclude)
        return [tool.spec for name, tool in self._tools.items() if name not in excluded]

    def tool_for_component(self, component_name: str | None) -> Tool | None:
        """Find the tool that displays a registered component."""
        if not component_name:
            return None
        return next((t for t in self._tools.values() if t.component == component_name), None)

    def describe(self, exclude: Iterable[str] = ()) -> str:
        """Render the tool manifest for the system prompt."""
        return "\n".join(f"- {spec.name}: {spec.description}" for spec in self.specs(exclude))

    def execute(self, call: ToolCallMessage) -> ToolResultMessage:
        """Run a tool call and wrap its result.

        Unknown tools and tool failures produce an ``error`` result instead of
        raising, so the model can recover in its next turn.
        """
        tool = self._tools.get(call.name)
        if tool is None:
            logger.warning("Model requested unknown tool %s", call.name)
            return ToolResultMessage(call.call_id, call.name, {"error": f"Unknown tool: {call.name}"})

        logger.info("Executing tool %s", call.name)
        try:
            result = tool.handler(dict(call.arguments))
        except ChatResumeError as e:
            logger.error("Tool %s failed: %s", call.name, e)
            result = {"error": e.message}
        except Exception as e:
            logger.exception("Tool %s raised unexpectedly", call.name)
            result = {"error": f"{type(e).__name__}: {e}"}
        return ToolResultMessage(call.call_id, call.name, result)


def _show(component: str) -> ToolHandler:
    def handler(arguments: dict[str, Any]) -> dict[str, Any]:
        return {"displayed": True, "component": component}

    return handler


def build_resume_tools(
    ingestion: IngestionService,
    persona: str = "the site owner",
    raw_text_min_length: int = 1000,
) -> ToolRegistry:
    """Create the standard tool set: three component views and raw-text upload.

    Args:
        ingestion: Pipeline used to store pasted text.
        persona: Name used in tool descriptions.
        raw_text_min_length: Minimum length accepted by the upload tool.
    """

    def upload_raw_text(arguments: dict[str, Any]) -> dict[str, Any]:
        text = str(arguments.get("text") or "")
        if len(text) < raw_text_min_length:
            return {
                "uploaded": False,
                "error": f"Text must be at least {raw_text_min_length} characters for upload.",
            }
        document = ingestion.register_pasted_text(text)
        return {"uploaded": True, "documentId": document.id}

    return ToolRegistry(
        [
            Tool(
                ToolSpec(
                    SHOW_WORK_TIMELINE,
                    f"Display {persona}'s work experience timeline with interactive career history",
                ),
                _show("work-timeline"),
                component="work-timeline",
            ),
            Tool(
                ToolSpec(
                    SHOW_EDUCATION,
                    f"Display {persona}'s educational background with undergraduate and graduate details",
                ),
                _show("education-selector"),
                component="education-selector",
            ),
            Tool(
                ToolSpec(
                    SHOW_PERSONAL_PASSIONS,
                    f"Display {persona}'s personal interests and social media connections",
                ),
                _show("social-links"),
                component="social-links",
            ),
            Tool(
                ToolSpec(
                    UPLOAD_RAW_TEXT,
                    "Upload pasted raw text (such as long documents or data) to the knowledge base. "
                    "Use when a visitor pastes a long block of text without instructions.",
                    parameters={
                        "type": "object",
                        "properties": {
                            "text": {
                                "type": "string",
                                "description": f"The pasted text, at least {raw_text_min_length} characters",
                            }
                        },
                        "required": ["text"],
                    },
                ),
                upload_raw_text,
            ),
        ]
    )
