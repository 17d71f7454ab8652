"""SQLite adapter for document records and the UI component registry."""

import json
import logging
import sqlite3
import uuid
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ...core.domain import ComponentDescriptor, Document, DocumentStatus
from ...core.domain.exceptions import InvalidComponentError, StorageUnavailableError
from ...core.ports.repository_port import ComponentRegistryPort, DocumentRepositoryPort

logger = logging.getLogger(__name__)

_DOCUMENT_COLUMNS = "id, title, content, file_type, file_name, file_size, uploaded_by, status, created_at"
_LIST_COLUMNS = "id, title, '' AS content, file_type, file_name, file_size, uploaded_by, status, created_at"
_COMPONENT_COLUMNS = "id, name, display_name, description, intent, component_path, priority, is_active, created_at"


def _parse_timestamp(value: str | None) -> datetime:
    if not value:
        return datetime.now(UTC)
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


class SQLiteAdapter(DocumentRepositoryPort, ComponentRegistryPort):
    """Adapter for SQLite database operations.

    A new connection is opened for every call, so one adapter instance can
    be shared across request threads.
    """

    def __init__(self, db_path: str | Path = "data/chat_resume.db") -> None:
        """Initialize the SQLite adapter.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._ensure_db_dir()
        self._init_db()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        """Initialize the database schema."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()

                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS documents (
                        id TEXT PRIMARY KEY,
                        title TEXT NOT NULL,
                        content TEXT NOT NULL,
                        file_type TEXT NOT NULL,
                        file_name TEXT NOT NULL,
                        file_size INTEGER NOT NULL DEFAULT 0,
                        uploaded_by TEXT NOT NULL,
                        status TEXT NOT NULL DEFAULT 'pending',
                        created_at TEXT NOT NULL
                    )
                """)

                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS component_registry (
                        id TEXT PRIMARY KEY,
                        name TEXT NOT NULL UNIQUE,
                        display_name TEXT NOT NULL,
                        description TEXT NOT NULL,
                        intent TEXT NOT NULL DEFAULT '[]',
                        component_path TEXT NOT NULL,
                        priority INTEGER NOT NULL DEFAULT 0,
                        is_active INTEGER NOT NULL DEFAULT 1,
                        created_at TEXT NOT NULL
                    )
                """)

                cursor.execute("""
                    CREATE INDEX IF NOT EXISTS idx_documents_created_at
                    ON documents(created_at)
                """)

                conn.commit()

        except sqlite3.Error as e:
            logger.error("Failed to initialize database: %s", e)
            raise StorageUnavailableError(
                "Failed to initialize database",
                cause=e,
                context={"db_path": str(self.db_path)},
            ) from e

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    @staticmethod
    def _row_to_document(row: sqlite3.Row) -> Document:
        return Document(
            id=row["id"],
            title=row["title"],
            content=row["content"],
            file_type=row["file_type"],
            file_name=row["file_name"],
            file_size=row["file_size"],
            uploaded_by=row["uploaded_by"],
            status=DocumentStatus(row["status"]),
            created_at=_parse_timestamp(row["created_at"]),
        )

    def create_document(self, document: Document) -> Document:
        try:
            with self._connect() as conn:
                conn.execute(
                    f"INSERT INTO documents ({_DOCUMENT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        document.id,
                        document.title,
                        document.content,
                        document.file_type,
                        document.file_name,
                        document.file_size,
                        document.uploaded_by,
                        document.status.value,
                        document.created_at.isoformat(),
                    ),
                )
                conn.commit()
        except sqlite3.Error as e:
            logger.error("Failed to insert document %s: %s", document.id, e)
            raise StorageUnavailableError(
                "Failed to insert document",
                cause=e,
                context={"document_id": document.id},
            ) from e
        return document

    def get_document(self, document_id: str) -> Document | None:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    f"SELECT {_DOCUMENT_COLUMNS} FROM documents WHERE id = ?", (document_id,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageUnavailableError("Failed to read document", cause=e) from e
        return self._row_to_document(row) if row else None

    def get_documents_by_ids(self, document_ids: Iterable[str]) -> dict[str, Document]:
        ids = list(dict.fromkeys(document_ids))
        if not ids:
            return {}

        placeholders = ", ".join("?" for _ in ids)
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    f"SELECT {_LIST_COLUMNS} FROM documents WHERE id IN ({placeholders})", ids
                ).fetchall()
        except sqlite3.Error as e:
            raise StorageUnavailableError("Failed to read documents", cause=e) from e
        return {row["id"]: self._row_to_document(row) for row in rows}

    def list_documents(self) -> list[Document]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    f"SELECT {_LIST_COLUMNS} FROM documents ORDER BY created_at DESC"
                ).fetchall()
        except sqlite3.Error as e:
            raise StorageUnavailableError("Failed to list documents", cause=e) from e
        return [self._row_to_document(row) for row in rows]

    def set_document_status(self, document_id: str, status: DocumentStatus) -> None:
        try:
            with self._connect() as conn:
                conn.execute("UPDATE documents SET status = ? WHERE id = ?", (status.value, document_id))
                conn.commit()
        except sqlite3.Error as e:
            raise StorageUnavailableError(
                "Failed to update document status",
                cause=e,
                context={"document_id": document_id, "status": status.value},
            ) from e

    def count_documents(self) -> int:
        try:
            with self._connect() as conn:
                return conn.execute("SELECT COUNT(*) FROM documents").fetchone()[0]
        except sqlite3.Error as e:
            logger.warning("Failed to count documents: %s", e)
            return 0

    # ------------------------------------------------------------------
    # Component registry
    # ------------------------------------------------------------------

    @staticmethod
    def _row_to_component(row: sqlite3.Row) -> ComponentDescriptor:
        return ComponentDescriptor(
            id=row["id"],
            name=row["name"],
            display_name=row["display_name"],
            description=row["description"],
            intent=json.loads(row["intent"] or "[]"),
            component_path=row["component_path"],
            priority=row["priority"],
            is_active=bool(row["is_active"]),
            created_at=_parse_timestamp(row["created_at"]),
        )

    def list_active_components(self) -> list[ComponentDescriptor]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    f"SELECT {_COMPONENT_COLUMNS} FROM component_registry "
                    "WHERE is_active = 1 ORDER BY priority DESC, name ASC"
                ).fetchall()
        except sqlite3.Error as e:
            raise StorageUnavailableError("Failed to list components", cause=e) from e
        return [self._row_to_component(row) for row in rows]

    def get_component_by_name(self, name: str) -> ComponentDescriptor | None:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    f"SELECT {_COMPONENT_COLUMNS} FROM component_registry WHERE name = ? AND is_active = 1",
                    (name,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageUnavailableError("Failed to read component", cause=e) from e
        return self._row_to_component(row) if row else None

    def create_component(self, component: ComponentDescriptor) -> ComponentDescriptor:
        component.id = component.id or str(uuid.uuid4())
        try:
            with self._connect() as conn:
                conn.execute(
                    f"INSERT INTO component_registry ({_COMPONENT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        component.id,
                        component.name,
                        component.display_name,
                        component.description,
                        json.dumps(component.intent),
                        component.component_path,
                        component.priority,
                        int(component.is_active),
                        component.created_at.isoformat(),
                    ),
                )
                conn.commit()
        except sqlite3.IntegrityError as e:
            raise InvalidComponentError(
                f"Component '{component.name}' already exists",
                cause=e,
                context={"name": component.name},
            ) from e
        except sqlite3.Error as e:
            raise StorageUnavailableError("Failed to insert component", cause=e) from e
        return component
