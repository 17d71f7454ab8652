"""LLM Port Interface."""

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from typing import TypeVar

from pydantic import BaseModel

from ..domain import GenerationChunk, Message, ToolSpec

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class LLMPort(ABC):
    """Abstract interface for the generation capabilities."""

    @abstractmethod
    def generate_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: type[SchemaT],
        timeout: float | None = None,
    ) -> SchemaT:
        """Generate an object matching ``schema``.

        Raises:
            LLMTimeoutError: If the call exceeds ``timeout`` seconds.
            LLMGenerationError: If the output cannot be parsed into ``schema``.
        """
        ...

    @abstractmethod
    def stream_with_tools(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        tools: Sequence[ToolSpec],
    ) -> Iterator[GenerationChunk]:
        """Stream text deltas and tool-call requests for one model turn.

        Closing the returned iterator cancels the underlying request.
        """
        ...
