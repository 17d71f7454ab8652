"""Conversation orchestrator: intent + retrieval + streamed, tool-using generation."""

import logging
import re
import threading
import uuid
from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from ..domain import (
    ConversationState,
    FinishEvent,
    IntentDecision,
    Message,
    RetrievedContext,
    StreamEvent,
    TextDelta,
    ToolCallEvent,
    ToolCallMessage,
    ToolResultEvent,
    last_user_text,
)
from ..domain.exceptions import LLMError
from ..ports.llm_port import LLMPort
from .intent_service import IntentRouter
from .prompts import (
    ANSWER_DECISION,
    CHAT_SYSTEM_PROMPT,
    COMPONENT_DECISION,
    PASTE_FAILED_DECISION,
    PASTE_STORED_DECISION,
)
from .retrieval_service import RetrievalService, format_context_for_prompt
from .tools import UPLOAD_RAW_TEXT, ToolRegistry

logger = logging.getLogger(__name__)

_INSTRUCTION = re.compile(
    r"^\s*(summari[sz]e|explain|translate|analy[sz]e|rewrite|what|how|why|"
    r"can you|could you|please|tell me)\b",
    re.IGNORECASE,
)
_EDGE_WINDOW = 200


def is_raw_paste(text: str, min_length: int = 1000) -> bool:
    """Heuristic for a large block of pasted text with no instruction attached.

    The stripped text must reach ``min_length`` and neither its opening nor its
    closing window may contain a question or start with an instruction.
    """
    stripped = text.strip()
    if len(stripped) < min_length:
        return False

    head = stripped[:_EDGE_WINDOW]
    tail = stripped[-_EDGE_WINDOW:]
    if "?" in head or "?" in tail:
        return False

    last_line = stripped.splitlines()[-1]
    return not (_INSTRUCTION.match(head) or _INSTRUCTION.match(last_line))


@dataclass
class ConversationTurn:
    """Tracks one chat request through its states."""

    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    state: ConversationState = ConversationState.RECEIVED

    def advance(self, state: ConversationState) -> None:
        logger.debug("Turn %s: %s -> %s", self.id, self.state.value, state.value)
        self.state = state


class ConversationService:
    """Top-level chat handler.

    Every request runs RECEIVED -> INTENT_DETECTED -> CONTEXT_RETRIEVED ->
    GENERATING and ends COMPLETED or ABORTED. Intent and retrieval failures
    never reach the visitor; they only remove context or component hints.
    """

    def __init__(
        self,
        llm: LLMPort,
        retriever: RetrievalService,
        intent_router: IntentRouter,
        tools: ToolRegistry,
        persona: str = "the site owner",
        top_k: int = 5,
        raw_text_min_length: int = 1000,
        max_tool_rounds: int = 3,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            llm: Streaming generation capability.
            retriever: Knowledge-base retriever.
            intent_router: Component intent detector.
            tools: Tools advertised to the model.
            persona: Name of the person the resume belongs to.
            top_k: Contexts retrieved per request.
            raw_text_min_length: Threshold for treating a message as a raw paste.
            max_tool_rounds: Model turns that may request tools before a text-only turn.
        """
        self.llm = llm
        self.retriever = retriever
        self.intent_router = intent_router
        self.tools = tools
        self.persona = persona
        self.top_k = top_k
        self.raw_text_min_length = raw_text_min_length
        self.max_tool_rounds = max_tool_rounds

    def _gather(self, query: str) -> tuple[IntentDecision, list[RetrievedContext]]:
        """Run intent detection and retrieval concurrently."""
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="turn") as pool:
            intent_future = pool.submit(self.intent_router.detect_intent, query)
            context_future = pool.submit(self.retriever.retrieve, query, self.top_k)

            try:
                intent = intent_future.result()
            except Exception as e:
                logger.warning("Intent detection crashed, using default: %s", e)
                intent = IntentDecision.no_component()

            try:
                contexts = context_future.result()
            except Exception as e:
                logger.warning("Retrieval crashed, answering without context: %s", e)
                contexts = []

        return intent, contexts

    def _decision_for_intent(self, intent: IntentDecision) -> str:
        tool = self.tools.tool_for_component(intent.component_name)
        if intent.should_render_component and tool is not None:
            return COMPONENT_DECISION.format(
                component=intent.component_name,
                confidence=intent.confidence,
                reasoning=intent.reasoning or "n/a",
                tool=tool.spec.name,
            )
        return ANSWER_DECISION.format(
            confidence=intent.confidence,
            reasoning=intent.reasoning or "n/a",
            min_length=self.raw_text_min_length,
        )

    def build_system_prompt(
        self,
        contexts: list[RetrievedContext],
        decision: str,
        exclude_tools: Sequence[str] = (),
    ) -> str:
        """Assemble persona, context block, tool manifest and decision instructions."""
        return CHAT_SYSTEM_PROMPT.format(
            persona=self.persona,
            context=format_context_for_prompt(contexts),
            tools=self.tools.describe(exclude=exclude_tools) or "None",
            decision=decision,
        )

    def stream_reply(
        self,
        messages: Sequence[Message],
        cancel_event: threading.Event | None = None,
    ) -> Iterator[StreamEvent]:
        """Answer the latest user message as a stream of events.

        Args:
            messages: Full conversation history, oldest first.
            cancel_event: Set by the caller to stop the stream. Closing the
                returned iterator has the same effect.

        Yields:
            TextDelta, ToolCallEvent and ToolResultEvent items, then one FinishEvent.
        """
        cancel = cancel_event or threading.Event()
        turn = ConversationTurn()
        history = list(messages)
        query = last_user_text(history)
        logger.info("Turn %s received (%d messages)", turn.id, len(history))

        intent, contexts = self._gather(query)
        turn.advance(ConversationState.INTENT_DETECTED)
        turn.advance(ConversationState.CONTEXT_RETRIEVED)

        if cancel.is_set():
            turn.advance(ConversationState.ABORTED)
            yield FinishEvent(turn.state)
            return

        exclude_tools: list[str] = []
        if is_raw_paste(query, self.raw_text_min_length):
            call = ToolCallMessage(call_id=f"call_{uuid.uuid4().hex}", name=UPLOAD_RAW_TEXT, arguments={"text": query})
            yield ToolCallEvent(call)
            result = self.tools.execute(call)
            yield ToolResultEvent(result)
            exclude_tools.append(UPLOAD_RAW_TEXT)
            if result.result.get("uploaded"):
                decision = PASTE_STORED_DECISION.format(document_id=result.result.get("documentId"))
            else:
                decision = PASTE_FAILED_DECISION
        else:
            decision = self._decision_for_intent(intent)

        system_prompt = self.build_system_prompt(contexts, decision, exclude_tools)
        turn.advance(ConversationState.GENERATING)
        yield from self._generate(turn, system_prompt, history, exclude_tools, cancel)

    def _generate(
        self,
        turn: ConversationTurn,
        system_prompt: str,
        history: list[Message],
        exclude_tools: Sequence[str],
        cancel: threading.Event,
    ) -> Iterator[StreamEvent]:
        tool_specs = self.tools.specs(exclude=exclude_tools)

        for round_number in range(self.max_tool_rounds + 1):
            # The last round is text-only so the model always gets to answer
            round_tools = tool_specs if round_number < self.max_tool_rounds else []
            calls: list[ToolCallMessage] = []

            stream = self.llm.stream_with_tools(system_prompt, history, round_tools)
            try:
                for chunk in stream:
                    if cancel.is_set():
                        logger.info("Turn %s cancelled mid-stream", turn.id)
                        turn.advance(ConversationState.ABORTED)
                        yield FinishEvent(turn.state)
                        return
                    if isinstance(chunk, TextDelta):
                        yield chunk
                    else:
                        calls.append(chunk)
                        yield ToolCallEvent(chunk)
            except LLMError as e:
                logger.error("Generation failed for turn %s: %s", turn.id, e)
                turn.advance(ConversationState.ABORTED)
                yield FinishEvent(turn.state, {"error": e.message})
                return
            finally:
                close = getattr(stream, "close", None)
                if close is not None:
                    close()

            if not calls:
                break

            results = []
            for call in calls:
                if cancel.is_set():
                    turn.advance(ConversationState.ABORTED)
                    yield FinishEvent(turn.state)
                    return
                result = self.tools.execute(call)
                results.append(result)
                yield ToolResultEvent(result)
            history = [*history, *calls, *results]

        turn.advance(ConversationState.COMPLETED)
        logger.info("Turn %s completed", turn.id)
        yield FinishEvent(turn.state)
