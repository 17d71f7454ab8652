"""Unit tests for SQLiteAdapter."""

import sqlite3
from datetime import UTC, datetime, timedelta

import pytest

from chat_resume.adapters.outbound.sqlite_adapter import SQLiteAdapter
from chat_resume.core.domain import ComponentDescriptor, Document, DocumentStatus
from chat_resume.core.domain.exceptions import InvalidComponentError

pytestmark = pytest.mark.unit


def _document(document_id, created_at=None, title="Resume"):
    return Document(
        id=document_id,
        title=title,
        content="Full resume text",
        file_type="pdf",
        file_name=f"{document_id}.pdf",
        file_size=2048,
        uploaded_by="admin",
        created_at=created_at or datetime.now(UTC),
    )


def test_init_db(tmp_path):
    """Test database initialization and schema creation."""
    db_file = tmp_path / "test.db"
    SQLiteAdapter(db_file)

    with sqlite3.connect(db_file) as conn:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"documents", "component_registry"} <= tables


def test_create_and_get_document(repository):
    repository.create_document(_document("doc-1"))

    stored = repository.get_document("doc-1")

    assert stored.title == "Resume"
    assert stored.content == "Full resume text"
    assert stored.file_size == 2048
    assert stored.status == DocumentStatus.PENDING
    assert stored.created_at.tzinfo is not None


def test_get_missing_document_returns_none(repository):
    assert repository.get_document("nope") is None


def test_set_document_status(repository):
    repository.create_document(_document("doc-1"))

    repository.set_document_status("doc-1", DocumentStatus.READY)

    assert repository.get_document("doc-1").status == DocumentStatus.READY


def test_get_documents_by_ids_skips_missing(repository):
    repository.create_document(_document("doc-1", title="CV"))
    repository.create_document(_document("doc-2", title="Cover letter"))

    found = repository.get_documents_by_ids(["doc-1", "doc-2", "ghost", "doc-1"])

    assert set(found) == {"doc-1", "doc-2"}
    assert found["doc-2"].title == "Cover letter"
    assert repository.get_documents_by_ids([]) == {}


def test_list_documents_newest_first_without_content(repository):
    now = datetime.now(UTC)
    repository.create_document(_document("old", created_at=now - timedelta(days=1)))
    repository.create_document(_document("new", created_at=now))

    documents = repository.list_documents()

    assert [d.id for d in documents] == ["new", "old"]
    assert all(d.content == "" for d in documents)
    assert repository.count_documents() == 2


class TestComponentRegistry:
    def _component(self, name, priority=0, is_active=True):
        return ComponentDescriptor(
            name=name,
            display_name=name.title(),
            description=f"{name} component",
            intent=["career", "jobs"],
            component_path=f"components/{name}",
            priority=priority,
            is_active=is_active,
        )

    def test_active_components_ordered_by_priority(self, repository):
        repository.create_component(self._component("low", priority=1))
        repository.create_component(self._component("high", priority=9))
        repository.create_component(self._component("hidden", priority=50, is_active=False))

        names = [c.name for c in repository.list_active_components()]

        assert names == ["high", "low"]

    def test_intent_tags_round_trip_as_list(self, repository):
        created = repository.create_component(self._component("work-timeline"))

        stored = repository.get_component_by_name("work-timeline")

        assert created.id is not None
        assert stored.intent == ["career", "jobs"]
        assert stored.is_active is True

    def test_inactive_component_is_not_returned_by_name(self, repository):
        repository.create_component(self._component("hidden", is_active=False))

        assert repository.get_component_by_name("hidden") is None

    def test_duplicate_name_is_rejected(self, repository):
        repository.create_component(self._component("work-timeline"))

        with pytest.raises(InvalidComponentError):
            repository.create_component(self._component("work-timeline"))
