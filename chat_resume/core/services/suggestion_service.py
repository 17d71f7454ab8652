"""Follow-up prompt suggestions for the chat input."""

import hashlib
import json
import logging

from pydantic import BaseModel, Field

from ..ports.cache_port import CachePort
from ..ports.llm_port import LLMPort
from .prompts import SUGGESTION_SYSTEM_PROMPT, SUGGESTION_USER_PROMPT

logger = logging.getLogger(__name__)

SUGGESTION_COUNT = 4
_FINGERPRINT_DEPTH = 3

DEFAULT_SUGGESTIONS = [
    "Tell me about your work experience",
    "What's your educational background?",
    "What are your personal interests?",
    "How can I connect with you?",
]

CONTEXTUAL_FALLBACKS: dict[str, tuple[tuple[str, ...], list[str]]] = {
    "work": (
        ("work", "career", "job"),
        [
            "What about your education?",
            "Tell me about your personal interests",
            "Show me your career highlights",
            "What projects have you worked on?",
        ],
    ),
    "education": (
        ("education", "school", "university"),
        [
            "Tell me about your work experience",
            "What are your research interests?",
            "Show me your career timeline",
            "What skills have you developed?",
        ],
    ),
    "personal": (
        ("interest", "hobby", "social"),
        [
            "What's your professional background?",
            "Tell me about your education",
            "Show me your work timeline",
            "How can I reach out to you?",
        ],
    ),
}


class SuggestionOutput(BaseModel):
    suggestions: list[str] = Field(
        min_length=SUGGESTION_COUNT,
        max_length=SUGGESTION_COUNT,
        description="Four suggested follow-up prompts",
    )


def contextual_fallback(history: list[str]) -> list[str]:
    """Pick a canned suggestion set from the most recent prompt."""
    if not history:
        return list(DEFAULT_SUGGESTIONS)

    recent = history[0].lower()
    for keywords, suggestions in CONTEXTUAL_FALLBACKS.values():
        if any(keyword in recent for keyword in keywords):
            return list(suggestions)
    return list(DEFAULT_SUGGESTIONS)


def history_fingerprint(history: list[str]) -> str:
    payload = json.dumps(history[:_FINGERPRINT_DEPTH], ensure_ascii=False)
    return "suggestions:" + hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _format_history(history: list[str]) -> str:
    if not history:
        return "No history yet - this is the visitor's first prompt"
    return "\n".join(f'{i}. "{prompt}"' for i, prompt in enumerate(history, 1))


class SuggestionService:
    """Generates four follow-up prompts, cached by recent history.

    Always returns exactly four suggestions; model failures fall back to
    a canned set chosen from the latest prompt.
    """

    def __init__(
        self,
        llm: LLMPort,
        cache: CachePort,
        persona: str = "the site owner",
        timeout: float | None = 10.0,
        cache_ttl_seconds: float = 300.0,
    ) -> None:
        self.llm = llm
        self.cache = cache
        self.persona = persona
        self.timeout = timeout
        self.cache_ttl_seconds = cache_ttl_seconds

    def suggest(self, history: list[str]) -> list[str]:
        """Suggest follow-up prompts.

        Args:
            history: The visitor's prompts, most recent first.

        Returns:
            Exactly four suggestions.
        """
        key = history_fingerprint(history)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Suggestion cache hit")
            return list(cached)

        try:
            output = self.llm.generate_structured(
                SUGGESTION_SYSTEM_PROMPT.format(persona=self.persona),
                SUGGESTION_USER_PROMPT.format(history=_format_history(history)),
                SuggestionOutput,
                timeout=self.timeout,
            )
        except Exception as e:
            logger.warning("Suggestion generation failed, using fallback: %s", e)
            return contextual_fallback(history)

        suggestions = [s.strip() for s in output.suggestions if s and s.strip()]
        if len(suggestions) != SUGGESTION_COUNT:
            logger.warning("Model returned %d usable suggestions, using fallback", len(suggestions))
            return contextual_fallback(history)

        self.cache.set(key, suggestions, self.cache_ttl_seconds)
        return suggestions
