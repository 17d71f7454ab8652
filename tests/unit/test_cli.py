"""Unit tests for the Typer CLI (services patched)."""

import logging
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from chat_resume.adapters.inbound.cli.commands import app, render_events
from chat_resume.config import settings
from chat_resume.core.domain import (
    ConversationState,
    FinishEvent,
    TextDelta,
    ToolCallEvent,
    ToolCallMessage,
    ToolResultEvent,
    ToolResultMessage,
)

pytestmark = pytest.mark.unit

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "data_dir", tmp_path / "data")
    monkeypatch.setattr(settings, "database_path", tmp_path / "data" / "test.db")
    monkeypatch.setattr(settings, "qdrant_path", tmp_path / "qdrant")
    monkeypatch.setattr(settings, "qdrant_url", "")
    monkeypatch.setattr(settings, "google_api_key", "test-key")
    yield
    # The callback attaches handlers bound to the runner's captured stdout
    logging.getLogger("chat_resume").handlers.clear()


def test_render_events_returns_text():
    events = [
        TextDelta("Hello "),
        ToolCallEvent(ToolCallMessage("c1", "showEducation")),
        ToolResultEvent(ToolResultMessage("c1", "showEducation", {"displayed": True})),
        TextDelta("world"),
        FinishEvent(ConversationState.COMPLETED),
    ]

    assert render_events(iter(events)) == "Hello world"


def test_ask_streams_answer():
    service = MagicMock()
    service.stream_reply.return_value = iter([TextDelta("I build pipelines."), FinishEvent(ConversationState.COMPLETED)])

    with patch("chat_resume.composition.container.get_conversation_service", return_value=service):
        result = runner.invoke(app, ["ask", "What do you do"])

    assert result.exit_code == 0
    assert "I build pipelines." in result.output
    history = service.stream_reply.call_args.args[0]
    assert history[0].content == "What do you do"


def test_ask_closes_generator_stream():
    closed = []

    def events():
        try:
            yield TextDelta("Partial")
            yield FinishEvent(ConversationState.COMPLETED)
        finally:
            closed.append(True)

    service = MagicMock()
    service.stream_reply.return_value = events()

    with patch("chat_resume.composition.container.get_conversation_service", return_value=service):
        result = runner.invoke(app, ["ask", "Hi"])

    assert result.exit_code == 0
    assert closed == [True]


def test_ask_requires_api_key(monkeypatch):
    monkeypatch.setattr(settings, "google_api_key", "")

    result = runner.invoke(app, ["ask", "Hello"])

    assert result.exit_code == 1
    assert "GOOGLE_API_KEY" in result.output


def test_ingest_rejects_unsupported_files(tmp_path):
    sheet = tmp_path / "cv.xlsx"
    sheet.write_bytes(b"binary")

    result = runner.invoke(app, ["ingest", str(sheet)])

    assert result.exit_code == 1
    assert "Unsupported file type" in result.output


def test_ingest_registers_documents(tmp_path):
    resume = tmp_path / "resume.md"
    resume.write_text("# Experience\nData engineer at Northwind", encoding="utf-8")
    ingestion = MagicMock()
    ingestion.register_document.return_value.id = "doc-1"

    with patch("chat_resume.composition.container.get_ingestion_service", return_value=ingestion):
        result = runner.invoke(app, ["ingest", str(resume), "--title", "CV"])

    assert result.exit_code == 0
    kwargs = ingestion.register_document.call_args.kwargs
    assert kwargs["title"] == "CV"
    assert kwargs["file_type"] == "md"
    assert kwargs["uploaded_by"] == "cli"


def test_seed_components(repository):
    with patch("chat_resume.composition.container.get_repository", return_value=repository):
        first = runner.invoke(app, ["seed-components"])
        second = runner.invoke(app, ["seed-components"])

    assert "work-timeline" in first.output
    assert "already registered" in second.output
