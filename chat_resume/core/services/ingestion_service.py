"""Ingestion pipeline: chunk, embed and store a document's text."""

import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from ..domain import Chunk, Document, DocumentStatus
from ..domain.exceptions import ChatResumeError, DataIngestionError, EmptyQueryError
from ..domain.utils import normalize_text
from ..ports.embedding_port import EmbeddingPort
from ..ports.repository_port import DocumentRepositoryPort
from ..ports.vector_store_port import VectorStorePort
from .chunker import Chunker

logger = logging.getLogger(__name__)


class IngestionService:
    """Adds documents to the knowledge base.

    Ingestion is fail-fast and all-or-nothing per document: if any chunk
    cannot be embedded or stored, chunks already written for that document
    are deleted, the document is marked failed, and the error propagates.
    """

    def __init__(
        self,
        chunker: Chunker,
        embedder: EmbeddingPort,
        vector_store: VectorStorePort,
        documents: DocumentRepositoryPort,
    ) -> None:
        self.chunker = chunker
        self.embedder = embedder
        self.vector_store = vector_store
        self.documents = documents

    def ingest(self, document_id: str, full_text: str, metadata: dict[str, Any] | None = None) -> int:
        """Chunk, embed and store a document's full text.

        Args:
            document_id: Id of an existing document record.
            full_text: Plain text to index.
            metadata: Tags copied onto every chunk (title, fileType, source...).

        Returns:
            Number of chunks stored.

        Raises:
            EmbeddingUnavailableError: If a chunk could not be embedded.
            VectorStoreError: If a chunk could not be stored.
        """
        pieces = self.chunker.chunk(full_text)
        total = len(pieces)
        base_metadata = dict(metadata or {})
        logger.info("Ingesting document %s as %d chunks", document_id, total)

        try:
            for index, piece in enumerate(pieces):
                embedding = self.embedder.embed_document(piece)
                self.vector_store.insert(
                    Chunk(
                        id=str(uuid.uuid4()),
                        document_id=document_id,
                        content=piece,
                        embedding=embedding,
                        metadata={**base_metadata, "chunkIndex": index, "totalChunks": total},
                    )
                )
                logger.debug("Stored chunk %d/%d of %s", index + 1, total, document_id)
        except Exception as e:
            logger.error("Ingestion of %s failed at chunk %d/%d: %s", document_id, index + 1, total, e)
            self._rollback(document_id)
            raise

        self.documents.set_document_status(document_id, DocumentStatus.READY)
        logger.info("Document %s ready (%d chunks)", document_id, total)
        return total

    def _rollback(self, document_id: str) -> None:
        """Remove partial chunks and flag the document as failed."""
        try:
            self.vector_store.delete_document_chunks(document_id)
        except ChatResumeError as e:
            logger.error("Could not remove partial chunks of %s: %s", document_id, e)
        try:
            self.documents.set_document_status(document_id, DocumentStatus.FAILED)
        except ChatResumeError as e:
            logger.error("Could not mark %s as failed: %s", document_id, e)

    def register_document(
        self,
        *,
        title: str,
        content: str,
        file_type: str,
        file_name: str,
        file_size: int,
        uploaded_by: str,
        metadata: dict[str, Any] | None = None,
    ) -> Document:
        """Create a document record and ingest its content.

        Args:
            title: Title shown as the context source.
            content: Extracted plain text.
            file_type: Lowercase extension.
            file_name: Original file name.
            file_size: Size in bytes.
            uploaded_by: Uploader identifier.
            metadata: Extra tags copied onto every chunk.

        Returns:
            The stored document with its final status.

        Raises:
            EmptyQueryError: If the content is blank.
            DataIngestionError: If the document record cannot be created.
        """
        clean_content = normalize_text(content)
        if not clean_content.strip():
            raise EmptyQueryError("Document content cannot be empty", context={"file_name": file_name})

        try:
            document = self.documents.create_document(
                Document(
                    id=str(uuid.uuid4()),
                    title=title,
                    content=clean_content,
                    file_type=file_type,
                    file_name=file_name,
                    file_size=file_size,
                    uploaded_by=uploaded_by,
                )
            )
        except ChatResumeError as e:
            raise DataIngestionError(
                f"Could not create document record for {file_name}",
                cause=e,
                context={"file_name": file_name},
            ) from e

        chunk_metadata = {"title": document.title, "fileType": document.file_type, **(metadata or {})}
        self.ingest(document.id, clean_content, chunk_metadata)
        document.status = DocumentStatus.READY
        return document

    def register_pasted_text(self, text: str, now: datetime | None = None) -> Document:
        """Store text pasted into the chat as a new document.

        The title and file name are derived from the current time.
        """
        now = now or datetime.now(UTC)
        return self.register_document(
            title=f"Pasted text {now.isoformat()}",
            content=text,
            file_type="txt",
            file_name=f"pasted-{int(now.timestamp() * 1000)}.txt",
            file_size=len(text.encode("utf-8")),
            uploaded_by="anonymous",
            metadata={"source": "chat"},
        )
