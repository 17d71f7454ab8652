"""
Pytest configuration and shared fixtures.
"""

import hashlib
import math
import re
from collections.abc import Iterator, Sequence
from typing import Any

import pytest

from chat_resume.adapters.outbound.sqlite_adapter import SQLiteAdapter
from chat_resume.adapters.outbound.vector_store.qdrant_adapter import QdrantAdapter
from chat_resume.core.domain import GenerationChunk, Message, ToolSpec
from chat_resume.core.domain.exceptions import EmbeddingUnavailableError
from chat_resume.core.ports import EmbeddingPort, LLMPort
from chat_resume.core.services.chunker import Chunker
from chat_resume.core.services.ingestion_service import IngestionService
from chat_resume.core.services.retrieval_service import RetrievalService

TEST_DIMENSION = 32


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (HTTP layer with fakes)")


class HashEmbedder(EmbeddingPort):
    """Deterministic bag-of-words embedder.

    Identical texts get identical unit vectors, texts sharing words point in
    similar directions. ``fail_after`` makes every call after the first N raise.
    """

    def __init__(self, dimension: int = TEST_DIMENSION, fail_after: int | None = None) -> None:
        self._dimension = dimension
        self.fail_after = fail_after
        self.calls: list[str] = []

    @property
    def dimension(self) -> int:
        return self._dimension

    def _vector(self, text: str) -> list[float]:
        if self.fail_after is not None and len(self.calls) >= self.fail_after:
            raise EmbeddingUnavailableError("embedding backend down")
        self.calls.append(text)

        vector = [0.0] * self._dimension
        for token in re.findall(r"\w+", text.lower()):
            digest = hashlib.md5(token.encode("utf-8")).digest()
            vector[digest[0] % self._dimension] += 1.0
        norm = math.sqrt(sum(v * v for v in vector))
        if norm == 0:
            vector[0] = 1.0
            return vector
        return [v / norm for v in vector]

    def embed_query(self, text: str) -> list[float]:
        return self._vector(text)

    def embed_document(self, text: str) -> list[float]:
        return self._vector(text)


class ScriptedLLM(LLMPort):
    """Generation fake that replays scripted answers and records every call.

    ``structured`` items are returned (or raised, for exceptions) in order.
    ``turns`` holds one list of chunks per streamed model turn.
    """

    def __init__(
        self,
        structured: Sequence[Any] = (),
        turns: Sequence[Sequence[GenerationChunk]] = (),
    ) -> None:
        self.structured = list(structured)
        self.turns = [list(turn) for turn in turns]
        self.structured_calls: list[dict[str, Any]] = []
        self.stream_calls: list[dict[str, Any]] = []
        self.closed_streams = 0

    def generate_structured(self, system_prompt, user_prompt, schema, timeout=None):
        self.structured_calls.append(
            {"system_prompt": system_prompt, "user_prompt": user_prompt, "schema": schema, "timeout": timeout}
        )
        if not self.structured:
            raise AssertionError("unexpected structured call")
        item = self.structured.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, dict):
            return schema(**item)
        return item

    def stream_with_tools(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        tools: Sequence[ToolSpec],
    ) -> Iterator[GenerationChunk]:
        self.stream_calls.append({"system_prompt": system_prompt, "messages": list(messages), "tools": list(tools)})
        turn = self.turns.pop(0) if self.turns else []
        return self._replay(turn)

    def _replay(self, turn: list[GenerationChunk]) -> Iterator[GenerationChunk]:
        try:
            for chunk in turn:
                if isinstance(chunk, Exception):
                    raise chunk
                yield chunk
        finally:
            self.closed_streams += 1


@pytest.fixture
def embedder():
    return HashEmbedder()


@pytest.fixture
def vector_store():
    """Qdrant running in-process."""
    return QdrantAdapter(collection_name="test_chunks", dimension=TEST_DIMENSION, path=":memory:")


@pytest.fixture
def repository(tmp_path):
    return SQLiteAdapter(tmp_path / "test.db")


@pytest.fixture
def chunker():
    return Chunker(chunk_size=1000, chunk_overlap=200)


@pytest.fixture
def ingestion(chunker, embedder, vector_store, repository):
    return IngestionService(chunker, embedder, vector_store, repository)


@pytest.fixture
def retrieval(embedder, vector_store, repository):
    return RetrievalService(embedder, vector_store, repository)


@pytest.fixture
def sample_resume_text():
    """Roughly 2500 characters of resume prose."""
    paragraph = (
        "Mac Anderson worked as a senior data engineer at Northwind Analytics, building "
        "streaming pipelines and mentoring a team of five engineers. "
    )
    text = (paragraph * 30)[:2500]
    assert len(text) == 2500
    return text


@pytest.fixture
def make_embedder():
    """Factory for HashEmbedder instances (e.g. ``make_embedder(fail_after=2)``)."""
    return HashEmbedder


@pytest.fixture
def make_llm():
    """Factory for ScriptedLLM instances."""
    return ScriptedLLM


@pytest.fixture
def dimension():
    return TEST_DIMENSION
