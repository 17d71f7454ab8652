"""Intent router: decide between a UI component and a knowledge-base answer."""

import logging

from pydantic import BaseModel, Field

from ..domain import ComponentDescriptor, IntentDecision
from ..domain.utils import normalize_text
from ..ports.llm_port import LLMPort
from ..ports.repository_port import ComponentRegistryPort
from .prompts import INTENT_SYSTEM_PROMPT, INTENT_USER_PROMPT

logger = logging.getLogger(__name__)


class IntentOutput(BaseModel):
    """Structured output requested from the model."""

    should_render_component: bool = Field(description="Whether a component should be rendered")
    component_name: str | None = Field(default=None, description="Exact name of the component to render")
    confidence: int = Field(description="Confidence from 0 to 100")
    reasoning: str = Field(description="Brief reasoning for the decision")


def build_component_manifest(components: list[ComponentDescriptor]) -> str:
    """Describe the registered components for the intent prompt."""
    blocks = []
    for component in components:
        blocks.append(
            f"Component: {component.name}\n"
            f"Display Name: {component.display_name}\n"
            f"Description: {component.description}\n"
            f"Triggers: {', '.join(component.intent)}"
        )
    return "\n\n".join(blocks)


class IntentRouter:
    """Asks the structured-generation model which component, if any, fits a message.

    Detection never raises: an empty registry, a failed model call or an
    unparseable answer all yield ``IntentDecision.no_component()``.
    """

    def __init__(
        self,
        llm: LLMPort,
        components: ComponentRegistryPort,
        persona: str = "the site owner",
        timeout: float | None = 15.0,
    ) -> None:
        self.llm = llm
        self.components = components
        self.persona = persona
        self.timeout = timeout

    def detect_intent(self, message: str) -> IntentDecision:
        """Decide whether a message should surface a registered component.

        Args:
            message: The visitor's latest message.

        Returns:
            IntentDecision whose component name, when set, is guaranteed to be
            an active registered component.
        """
        clean_message = normalize_text(message).strip()
        if not clean_message:
            return IntentDecision.no_component()

        try:
            components = self.components.list_active_components()
        except Exception as e:
            logger.warning("Component registry unavailable, skipping intent detection: %s", e)
            return IntentDecision.no_component()

        if not components:
            return IntentDecision.no_component()

        try:
            output = self.llm.generate_structured(
                system_prompt=INTENT_SYSTEM_PROMPT.format(
                    persona=self.persona,
                    components=build_component_manifest(components),
                ),
                user_prompt=INTENT_USER_PROMPT.format(message=clean_message),
                schema=IntentOutput,
                timeout=self.timeout,
            )
        except Exception as e:
            logger.warning("Intent detection failed, defaulting to a plain answer: %s", e)
            return IntentDecision.no_component()

        return self._validate(output, components)

    def _validate(self, output: IntentOutput, components: list[ComponentDescriptor]) -> IntentDecision:
        """Check the model's component name against the registry."""
        match = next((c for c in components if c.name == output.component_name), None)
        if output.component_name and match is None:
            logger.info("Model named unknown component %r; treating as no match", output.component_name)

        decision = IntentDecision(
            should_render_component=output.should_render_component and match is not None,
            confidence=max(0, min(100, output.confidence)),
            component_name=match.name if match else None,
            component_path=match.component_path if match else None,
            reasoning=output.reasoning,
        )
        logger.debug("Intent decision: %s", decision)
        return decision
