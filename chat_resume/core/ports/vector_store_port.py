"""Vector Store Port Interface."""

from abc import ABC, abstractmethod

from ..domain import Chunk, ChunkMatch


class VectorStorePort(ABC):
    """Abstract interface for chunk storage and similarity search.

    Only appends, deletes by document and read-only queries are offered, so
    concurrent ingestion and search never race on an update in place.
    """

    @abstractmethod
    def insert(self, chunk: Chunk) -> None:
        """Append one chunk. Raises VectorStoreError on failure."""
        ...

    @abstractmethod
    def search(self, query_embedding: list[float], limit: int = 5) -> list[ChunkMatch]:
        """Return the closest chunks, most similar first; [] on any failure."""
        ...

    @abstractmethod
    def delete_document_chunks(self, document_id: str) -> None:
        """Remove every chunk that belongs to a document."""
        ...

    @abstractmethod
    def count(self) -> int:
        """Number of stored chunks."""
        ...
