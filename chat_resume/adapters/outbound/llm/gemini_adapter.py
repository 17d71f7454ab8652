"""Gemini adapter implementing the LLM port with the google-genai SDK."""

import logging
import uuid
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

if TYPE_CHECKING:
    from google import genai
    from google.genai import types

from ....common.rate_limiter import RateLimiter
from ....core.domain import (
    GenerationChunk,
    Message,
    Role,
    TextDelta,
    TextMessage,
    ToolCallMessage,
    ToolResultMessage,
    ToolSpec,
)
from ....core.domain.exceptions import (
    LLMConnectionError,
    LLMError,
    LLMGenerationError,
    LLMRateLimitError,
    LLMTimeoutError,
    MissingAPIKeyError,
)
from ....core.domain.utils import normalize_text
from ....core.ports.llm_port import LLMPort, SchemaT

logger = logging.getLogger(__name__)


def translate_error(error: Exception, model: str) -> LLMError:
    """Map a google-genai or transport failure onto the LLM error taxonomy."""
    context = {"model": model}
    message = str(error).lower()

    if "timeout" in type(error).__name__.lower() or "timed out" in message or isinstance(error, TimeoutError):
        return LLMTimeoutError("Model call timed out", cause=error, context=context)
    if getattr(error, "code", None) == 429 or "quota" in message or "resource_exhausted" in message:
        return LLMRateLimitError("Model rate limit reached", cause=error, context=context)
    return LLMConnectionError(f"Model call failed: {error}", cause=error, context=context)


def to_contents(messages: Sequence[Message]) -> list["types.Content"]:
    """Convert conversation messages to Gemini contents.

    Adjacent messages from the same side are merged into one content so
    parallel tool calls and their results stay grouped. Client-supplied
    system messages are dropped; the server owns the system instruction.
    """
    from google.genai import types

    contents: list[types.Content] = []
    for message in messages:
        if isinstance(message, TextMessage):
            if message.role == Role.SYSTEM or not message.content:
                continue
            role = "model" if message.role == Role.ASSISTANT else "user"
            part = types.Part.from_text(text=normalize_text(message.content))
        elif isinstance(message, ToolCallMessage):
            role = "model"
            part = types.Part(
                function_call=types.FunctionCall(id=message.call_id, name=message.name, args=dict(message.arguments))
            )
        else:
            role = "user"
            part = types.Part(
                function_response=types.FunctionResponse(
                    id=message.call_id, name=message.name, response=dict(message.result)
                )
            )

        if contents and contents[-1].role == role:
            contents[-1].parts.append(part)
        else:
            contents.append(types.Content(role=role, parts=[part]))
    return contents


def to_function_declarations(tools: Sequence[ToolSpec]) -> list["types.FunctionDeclaration"]:
    from google.genai import types

    declarations = []
    for spec in tools:
        kwargs: dict[str, Any] = {"name": spec.name, "description": spec.description}
        if spec.parameters:
            kwargs["parameters_json_schema"] = spec.parameters
        declarations.append(types.FunctionDeclaration(**kwargs))
    return declarations


class GeminiLLMAdapter(LLMPort):
    """Gemini-backed generation for structured answers and tool-using chat streams."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        structured_model: str | None = None,
        rate_limiter: RateLimiter | None = None,
        temperature: float = 0.7,
    ) -> None:
        """Initialize the adapter.

        Args:
            api_key: Google AI API key.
            model: Model used for chat streaming.
            structured_model: Model used for structured output (defaults to ``model``).
            rate_limiter: Optional limiter acquired before every request.
            temperature: Sampling temperature for chat streaming.
        """
        self.api_key = api_key
        self.model_name = model
        self.structured_model = structured_model or model
        self.rate_limiter = rate_limiter
        self.temperature = temperature
        self._client: genai.Client | None = None

    def _get_client(self) -> "genai.Client":
        """Lazy load the Gemini client."""
        if self._client is None:
            if not self.api_key:
                raise MissingAPIKeyError(
                    "Google API key not set. Get one at https://aistudio.google.com/ "
                    "and set GOOGLE_API_KEY in your .env file."
                )

            from google import genai

            self._client = genai.Client(api_key=self.api_key)
            logger.info("Gemini client initialized for model: %s", self.model_name)

        return self._client

    def generate_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: type[SchemaT],
        timeout: float | None = None,
    ) -> SchemaT:
        from google.genai import types

        client = self._get_client()
        config = types.GenerateContentConfig(
            system_instruction=normalize_text(system_prompt),
            response_mime_type="application/json",
            response_schema=schema,
            temperature=0.2,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)) if timeout else None,
        )

        if self.rate_limiter:
            self.rate_limiter.acquire()
        try:
            response = client.models.generate_content(
                model=self.structured_model,
                contents=normalize_text(user_prompt),
                config=config,
            )
        except Exception as e:
            raise translate_error(e, self.structured_model) from e

        if isinstance(response.parsed, schema):
            return response.parsed

        try:
            return schema.model_validate_json(response.text or "")
        except PydanticValidationError as e:
            raise LLMGenerationError(
                "Model output did not match the requested schema",
                cause=e,
                context={"model": self.structured_model, "schema": schema.__name__},
            ) from e

    def stream_with_tools(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        tools: Sequence[ToolSpec],
    ) -> Iterator[GenerationChunk]:
        from google.genai import types

        client = self._get_client()
        config = types.GenerateContentConfig(
            system_instruction=normalize_text(system_prompt),
            temperature=self.temperature,
            tools=[types.Tool(function_declarations=to_function_declarations(tools))] if tools else None,
            automatic_function_calling=types.AutomaticFunctionCallingConfig(disable=True),
        )

        if self.rate_limiter:
            self.rate_limiter.acquire()

        stream = None
        try:
            stream = client.models.generate_content_stream(
                model=self.model_name,
                contents=to_contents(messages),
                config=config,
            )
            for chunk in stream:
                if not chunk.candidates or not chunk.candidates[0].content:
                    continue
                for part in chunk.candidates[0].content.parts or []:
                    if part.function_call:
                        call = part.function_call
                        yield ToolCallMessage(
                            call_id=call.id or f"call_{uuid.uuid4().hex}",
                            name=call.name or "",
                            arguments=dict(call.args or {}),
                        )
                    elif part.text and not part.thought:
                        yield TextDelta(normalize_text(part.text))
        except Exception as e:
            raise translate_error(e, self.model_name) from e
        finally:
            close = getattr(stream, "close", None)
            if close is not None:
                close()
