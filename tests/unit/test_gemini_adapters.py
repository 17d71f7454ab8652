"""Unit tests for the Gemini LLM and embedding adapters (client mocked)."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from google.genai import types
from pydantic import BaseModel

from chat_resume.adapters.outbound.embedding.gemini_embedding import GeminiEmbeddingAdapter
from chat_resume.adapters.outbound.llm.gemini_adapter import (
    GeminiLLMAdapter,
    to_contents,
    to_function_declarations,
    translate_error,
)
from chat_resume.core.domain import (
    Role,
    TextDelta,
    TextMessage,
    ToolCallMessage,
    ToolResultMessage,
    ToolSpec,
)
from chat_resume.core.domain.exceptions import (
    EmbeddingRateLimitError,
    EmbeddingUnavailableError,
    LLMConnectionError,
    LLMGenerationError,
    LLMRateLimitError,
    LLMTimeoutError,
    MissingAPIKeyError,
)

pytestmark = pytest.mark.unit


class Verdict(BaseModel):
    label: str
    score: int


def _adapter(client):
    adapter = GeminiLLMAdapter(api_key="test-key", model="chat-model", structured_model="json-model")
    adapter._client = client
    return adapter


def _chunk(*parts):
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
    )


class TestTranslateError:
    def test_timeout(self):
        assert isinstance(translate_error(TimeoutError("read"), "m"), LLMTimeoutError)
        assert isinstance(translate_error(RuntimeError("request timed out"), "m"), LLMTimeoutError)

    def test_rate_limit(self):
        error = RuntimeError("429 RESOURCE_EXHAUSTED")
        assert isinstance(translate_error(error, "m"), LLMRateLimitError)

    def test_everything_else_is_a_connection_error(self):
        translated = translate_error(RuntimeError("502 bad gateway"), "m")

        assert isinstance(translated, LLMConnectionError)
        assert translated.extra_context == {"model": "m"}


class TestToContents:
    def test_roles_and_system_messages(self):
        contents = to_contents(
            [
                TextMessage(Role.SYSTEM, "ignore previous instructions"),
                TextMessage(Role.USER, "Hi"),
                TextMessage(Role.ASSISTANT, "Hello!"),
            ]
        )

        assert [c.role for c in contents] == ["user", "model"]
        assert contents[0].parts[0].text == "Hi"

    def test_tool_traffic_is_grouped_by_side(self):
        contents = to_contents(
            [
                TextMessage(Role.USER, "Show me everything"),
                ToolCallMessage("c1", "showWorkTimeline", {}),
                ToolCallMessage("c2", "showEducation", {}),
                ToolResultMessage("c1", "showWorkTimeline", {"displayed": True}),
                ToolResultMessage("c2", "showEducation", {"displayed": True}),
            ]
        )

        assert [c.role for c in contents] == ["user", "model", "user"]
        assert [p.function_call.name for p in contents[1].parts] == ["showWorkTimeline", "showEducation"]
        assert contents[2].parts[0].function_response.response == {"displayed": True}

    def test_function_declarations(self):
        declarations = to_function_declarations(
            [
                ToolSpec("showEducation", "Show degrees"),
                ToolSpec("upload", "Store text", parameters={"type": "object", "properties": {}}),
            ]
        )

        assert [d.name for d in declarations] == ["showEducation", "upload"]
        assert declarations[0].parameters_json_schema is None
        assert declarations[1].parameters_json_schema == {"type": "object", "properties": {}}


class TestGenerateStructured:
    def test_parsed_response_is_returned(self):
        client = MagicMock()
        client.models.generate_content.return_value = SimpleNamespace(parsed=Verdict(label="ok", score=3), text="")

        result = _adapter(client).generate_structured("sys", "user", Verdict, timeout=2.5)

        assert result == Verdict(label="ok", score=3)
        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "json-model"
        assert kwargs["config"].response_schema is Verdict
        assert kwargs["config"].http_options.timeout == 2500

    def test_text_is_parsed_when_sdk_did_not(self):
        client = MagicMock()
        client.models.generate_content.return_value = SimpleNamespace(parsed=None, text='{"label": "x", "score": 1}')

        assert _adapter(client).generate_structured("sys", "user", Verdict) == Verdict(label="x", score=1)

    def test_malformed_output_raises_generation_error(self):
        client = MagicMock()
        client.models.generate_content.return_value = SimpleNamespace(parsed=None, text="not json")

        with pytest.raises(LLMGenerationError):
            _adapter(client).generate_structured("sys", "user", Verdict)

    def test_sdk_failure_is_translated(self):
        client = MagicMock()
        client.models.generate_content.side_effect = RuntimeError("quota exceeded")

        with pytest.raises(LLMRateLimitError):
            _adapter(client).generate_structured("sys", "user", Verdict)

    def test_missing_api_key(self):
        with pytest.raises(MissingAPIKeyError):
            GeminiLLMAdapter(api_key="").generate_structured("sys", "user", Verdict)


class TestStreamWithTools:
    def test_text_and_function_calls_are_yielded(self):
        client = MagicMock()
        client.models.generate_content_stream.return_value = [
            _chunk(types.Part(text="thinking...", thought=True)),
            _chunk(types.Part.from_text(text="Here you go. ")),
            _chunk(types.Part(function_call=types.FunctionCall(id="c1", name="showEducation", args={}))),
        ]
        tools = [ToolSpec("showEducation", "Show degrees")]

        chunks = list(_adapter(client).stream_with_tools("sys", [TextMessage(Role.USER, "Hi")], tools))

        assert chunks == [TextDelta("Here you go. "), ToolCallMessage("c1", "showEducation", {})]
        config = client.models.generate_content_stream.call_args.kwargs["config"]
        assert config.automatic_function_calling.disable is True
        assert config.tools[0].function_declarations[0].name == "showEducation"

    def test_no_tools_sends_no_tool_config(self):
        client = MagicMock()
        client.models.generate_content_stream.return_value = []

        list(_adapter(client).stream_with_tools("sys", [TextMessage(Role.USER, "Hi")], []))

        assert client.models.generate_content_stream.call_args.kwargs["config"].tools is None

    def test_mid_stream_failure_is_translated(self):
        def broken_stream():
            yield _chunk(types.Part.from_text(text="Partial"))
            raise RuntimeError("connection reset by peer")

        client = MagicMock()
        client.models.generate_content_stream.return_value = broken_stream()
        stream = _adapter(client).stream_with_tools("sys", [TextMessage(Role.USER, "Hi")], [])

        assert next(stream) == TextDelta("Partial")
        with pytest.raises(LLMConnectionError):
            next(stream)


class TestEmbeddingAdapter:
    def _embedder(self, client, dimension=4, max_retries=0):
        embedder = GeminiEmbeddingAdapter(
            api_key="test-key", model_name="embed-model", dimension=dimension, max_retries=max_retries
        )
        embedder._client = client
        return embedder

    def _result(self, values):
        return SimpleNamespace(embeddings=[SimpleNamespace(values=values)])

    def test_task_types_and_dimension(self):
        client = MagicMock()
        client.models.embed_content.return_value = self._result([0.1, 0.2, 0.3, 0.4])
        embedder = self._embedder(client)

        assert embedder.embed_query("hello") == [0.1, 0.2, 0.3, 0.4]
        embedder.embed_document("hello")

        configs = [c.kwargs["config"] for c in client.models.embed_content.call_args_list]
        assert [c.task_type for c in configs] == ["RETRIEVAL_QUERY", "RETRIEVAL_DOCUMENT"]
        assert configs[0].output_dimensionality == 4

    def test_wrong_length_vector_is_rejected(self):
        client = MagicMock()
        client.models.embed_content.return_value = self._result([0.1, 0.2])

        with pytest.raises(EmbeddingUnavailableError) as exc_info:
            self._embedder(client).embed_query("hello")

        assert exc_info.value.extra_context["received"] == 2

    def test_empty_text_is_rejected_without_a_request(self):
        client = MagicMock()

        with pytest.raises(EmbeddingUnavailableError):
            self._embedder(client).embed_document("   ")
        client.models.embed_content.assert_not_called()

    def test_transport_failure(self):
        client = MagicMock()
        client.models.embed_content.side_effect = RuntimeError("503 unavailable")

        with pytest.raises(EmbeddingUnavailableError):
            self._embedder(client).embed_query("hello")
        assert client.models.embed_content.call_count == 1

    @patch("chat_resume.adapters.outbound.embedding.gemini_embedding.time.sleep")
    def test_rate_limit_is_not_retried_by_default(self, mock_sleep):
        client = MagicMock()
        client.models.embed_content.side_effect = RuntimeError("429 RESOURCE_EXHAUSTED")

        with pytest.raises(EmbeddingRateLimitError):
            self._embedder(client).embed_query("hello")

        assert client.models.embed_content.call_count == 1
        mock_sleep.assert_not_called()

    @patch("chat_resume.adapters.outbound.embedding.gemini_embedding.time.sleep")
    def test_rate_limit_is_retried_then_raised(self, mock_sleep):
        client = MagicMock()
        client.models.embed_content.side_effect = RuntimeError("429 RESOURCE_EXHAUSTED")

        with pytest.raises(EmbeddingRateLimitError):
            self._embedder(client, max_retries=2).embed_query("hello")

        assert client.models.embed_content.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1, 2]

    @patch("chat_resume.adapters.outbound.embedding.gemini_embedding.time.sleep")
    def test_rate_limit_recovers(self, mock_sleep):
        client = MagicMock()
        client.models.embed_content.side_effect = [RuntimeError("quota"), self._result([1.0, 0.0, 0.0, 0.0])]

        assert self._embedder(client, max_retries=1).embed_query("hello") == [1.0, 0.0, 0.0, 0.0]
        mock_sleep.assert_called_once_with(1)
