"""Document, chunk and retrieval models for the RAG knowledge base."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class DocumentStatus(str, Enum):
    """Ingestion state of a stored document.

    Attributes:
        PENDING: Document row exists, chunks are still being written.
        READY: Every chunk of the document has been stored.
        FAILED: Ingestion aborted; stored chunks were removed.
    """

    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


@dataclass
class Document:
    """A source document captured by upload or pasted into the chat.

    Documents are immutable once created; only their ingestion status moves.

    Attributes:
        id: Unique document identifier.
        title: Human-readable title shown as the context source.
        content: Full extracted text.
        file_type: Lowercase extension (md, txt, pdf, docx).
        file_name: Original file name.
        file_size: Size of the original upload in bytes.
        uploaded_by: Identifier of the uploader ("anonymous" for chat pastes).
        created_at: Creation timestamp (UTC).
        status: Ingestion state.
    """

    id: str
    title: str
    content: str
    file_type: str
    file_name: str
    file_size: int
    uploaded_by: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    status: DocumentStatus = DocumentStatus.PENDING


@dataclass
class Chunk:
    """A bounded substring of a document with its embedding.

    Attributes:
        id: Unique chunk identifier.
        document_id: Back-reference to the owning document.
        content: Substring of the document content.
        embedding: Fixed-length embedding vector.
        metadata: Chunk index, total chunk count and source tags.
    """

    id: str
    document_id: str
    content: str
    embedding: list[float]
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ChunkMatch:
    """A chunk returned by a similarity search.

    Attributes:
        chunk_id: Identifier of the matched chunk.
        content: Chunk text.
        document_id: Owning document identifier.
        metadata: Stored chunk metadata.
        similarity: 1 - cosine distance, clamped to [0, 1].
    """

    chunk_id: str
    content: str
    document_id: str
    metadata: dict[str, Any]
    similarity: float


@dataclass
class RetrievedContext:
    """A chunk joined back to its document title for prompt assembly.

    Produced per query and discarded once the answer is generated.
    """

    content: str
    source: str
    similarity: float
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "content": self.content,
            "source": self.source,
            "similarity": self.similarity,
            "metadata": self.metadata,
        }
