"""Unit tests for the intent router."""

from unittest.mock import MagicMock

import pytest

from chat_resume.core.domain import ComponentDescriptor
from chat_resume.core.domain.exceptions import LLMTimeoutError, StorageUnavailableError
from chat_resume.core.services.intent_service import IntentOutput, IntentRouter, build_component_manifest

pytestmark = pytest.mark.unit


@pytest.fixture
def components():
    registry = MagicMock()
    registry.list_active_components.return_value = [
        ComponentDescriptor(
            name="work-timeline",
            display_name="Work Timeline",
            description="Career history",
            intent=["work", "career"],
            component_path="components/work-timeline",
            priority=30,
        ),
        ComponentDescriptor(
            name="education-selector",
            display_name="Education",
            description="Degrees",
            intent=["education"],
            component_path="components/education-selector",
            priority=20,
        ),
    ]
    return registry


def _answer(**overrides):
    answer = {
        "should_render_component": True,
        "component_name": "work-timeline",
        "confidence": 92,
        "reasoning": "Direct question about work history",
    }
    answer.update(overrides)
    return answer


class TestDetectIntent:
    def test_matching_component_is_returned(self, make_llm, components):
        llm = make_llm(structured=[_answer()])
        router = IntentRouter(llm, components, persona="Mac", timeout=7.5)

        decision = router.detect_intent("Tell me about your work")

        assert decision.should_render_component is True
        assert decision.component_name == "work-timeline"
        assert decision.component_path == "components/work-timeline"
        assert decision.confidence == 92
        call = llm.structured_calls[0]
        assert call["schema"] is IntentOutput
        assert call["timeout"] == 7.5
        assert "Component: education-selector" in call["system_prompt"]
        assert '"Tell me about your work"' in call["user_prompt"]

    def test_unknown_component_name_is_never_surfaced(self, make_llm, components):
        llm = make_llm(structured=[_answer(component_name="skills-radar")])

        decision = IntentRouter(llm, components).detect_intent("What are your skills?")

        assert decision.should_render_component is False
        assert decision.component_name is None
        assert decision.component_path is None

    def test_confidence_is_clamped(self, make_llm, components):
        llm = make_llm(structured=[_answer(confidence=140), _answer(confidence=-3)])
        router = IntentRouter(llm, components)

        assert router.detect_intent("work").confidence == 100
        assert router.detect_intent("work").confidence == 0

    def test_plain_answer_decision(self, make_llm, components):
        llm = make_llm(structured=[_answer(should_render_component=False, component_name=None, confidence=80)])

        decision = IntentRouter(llm, components).detect_intent("What did you do at Google?")

        assert decision.should_render_component is False
        assert decision.confidence == 80
        assert decision.reasoning == "Direct question about work history"

    def test_empty_registry_skips_the_model(self, make_llm):
        llm = make_llm()
        registry = MagicMock()
        registry.list_active_components.return_value = []

        decision = IntentRouter(llm, registry).detect_intent("Tell me about your work")

        assert decision.should_render_component is False
        assert decision.confidence == 0
        assert llm.structured_calls == []

    def test_blank_message_skips_everything(self, make_llm, components):
        llm = make_llm()

        decision = IntentRouter(llm, components).detect_intent("  \ufeff ")

        assert decision.should_render_component is False
        components.list_active_components.assert_not_called()

    def test_model_failure_defaults_to_no_component(self, make_llm, components):
        llm = make_llm(structured=[LLMTimeoutError("intent timed out")])

        decision = IntentRouter(llm, components).detect_intent("Tell me about your work")

        assert decision.should_render_component is False
        assert decision.confidence == 0

    def test_registry_failure_defaults_to_no_component(self, make_llm):
        registry = MagicMock()
        registry.list_active_components.side_effect = StorageUnavailableError("db locked")
        llm = make_llm()

        decision = IntentRouter(llm, registry).detect_intent("Tell me about your work")

        assert decision.should_render_component is False
        assert llm.structured_calls == []


def test_manifest_lists_every_component(components):
    manifest = build_component_manifest(components.list_active_components())

    assert manifest.count("Component: ") == 2
    assert "Triggers: work, career" in manifest
