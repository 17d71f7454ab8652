"""Qdrant vector store for document chunks.

Chunks live in a single cosine-distance collection whose vector size is
fixed when the collection is created. Qdrant Cloud is used when a URL is
configured, otherwise local on-disk storage (or ``:memory:`` for tests).
"""

import logging
import uuid
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from qdrant_client import QdrantClient

from ....core.domain import Chunk, ChunkMatch
from ....core.domain.exceptions import EmbeddingDimensionError, StorageUnavailableError
from ....core.ports.vector_store_port import VectorStorePort

logger = logging.getLogger(__name__)


class QdrantAdapter(VectorStorePort):
    """Qdrant-backed chunk store.

    Point ids are the chunk ids (UUIDs); the payload carries the chunk text,
    the owning document id and the chunk metadata.
    """

    def __init__(
        self,
        collection_name: str = "document_chunks",
        dimension: int = 768,
        url: str = "",
        api_key: str = "",
        path: str | Path | None = None,
        client: "QdrantClient | None" = None,
    ) -> None:
        """Initialize the Qdrant vector store.

        Args:
            collection_name: Collection holding the chunks.
            dimension: Fixed embedding length of the collection.
            url: Qdrant Cloud cluster URL; takes precedence over ``path``.
            api_key: Qdrant API key.
            path: Local storage directory, or ":memory:".
            client: Pre-built client, mainly for tests.
        """
        self.collection_name = collection_name
        self.dimension = dimension
        self.url = url
        self.api_key = api_key
        self.path = path
        self._client = client
        self._collection_ready = False

    def _get_client(self) -> "QdrantClient":
        """Get or create Qdrant client connection."""
        if self._client is None:
            from qdrant_client import QdrantClient

            try:
                if self.url:
                    self._client = QdrantClient(url=self.url, api_key=self.api_key or None)
                    logger.info("Connected to Qdrant at: %s", self.url)
                elif self.path is None or str(self.path) == ":memory:":
                    self._client = QdrantClient(location=":memory:")
                    logger.info("Using in-memory Qdrant")
                else:
                    self._client = QdrantClient(path=str(self.path))
                    logger.info("Using local Qdrant storage at: %s", self.path)
            except Exception as e:
                raise StorageUnavailableError(
                    "Failed to connect to Qdrant",
                    cause=e,
                    context={"url": self.url, "path": str(self.path)},
                ) from e

        if not self._collection_ready:
            self._ensure_collection(self._client)
        return self._client

    def _ensure_collection(self, client: "QdrantClient") -> None:
        """Create the collection and its document_id index if missing."""
        from qdrant_client.http import models

        try:
            if not client.collection_exists(self.collection_name):
                logger.info("Creating collection %s (dimension %d)", self.collection_name, self.dimension)
                client.create_collection(
                    collection_name=self.collection_name,
                    vectors_config=models.VectorParams(size=self.dimension, distance=models.Distance.COSINE),
                )
                # Used by delete-by-document filters
                client.create_payload_index(
                    collection_name=self.collection_name,
                    field_name="document_id",
                    field_schema=models.PayloadSchemaType.KEYWORD,
                )
        except Exception as e:
            raise StorageUnavailableError(
                f"Failed to prepare collection {self.collection_name}",
                cause=e,
                context={"collection": self.collection_name},
            ) from e
        self._collection_ready = True

    def insert(self, chunk: Chunk) -> None:
        from qdrant_client.models import PointStruct

        if len(chunk.embedding) != self.dimension:
            raise EmbeddingDimensionError(
                "Chunk embedding does not match the collection dimension",
                context={"expected": self.dimension, "received": len(chunk.embedding), "chunk_id": chunk.id},
            )

        client = self._get_client()
        point = PointStruct(
            id=chunk.id if _is_uuid(chunk.id) else str(uuid.uuid5(uuid.NAMESPACE_URL, chunk.id)),
            vector=chunk.embedding,
            payload={
                "chunk_id": chunk.id,
                "content": chunk.content,
                "document_id": chunk.document_id,
                "metadata": chunk.metadata,
            },
        )
        try:
            client.upsert(collection_name=self.collection_name, points=[point])
        except Exception as e:
            raise StorageUnavailableError(
                "Failed to store chunk",
                cause=e,
                context={"chunk_id": chunk.id, "document_id": chunk.document_id},
            ) from e

    def search(self, query_embedding: list[float], limit: int = 5) -> list[ChunkMatch]:
        if limit <= 0 or len(query_embedding) != self.dimension:
            logger.warning(
                "Skipping search: limit=%d, embedding length %d (expected %d)",
                limit,
                len(query_embedding),
                self.dimension,
            )
            return []

        try:
            client = self._get_client()
            # query_points returns QueryResponse with .points attribute
            results = client.query_points(
                collection_name=self.collection_name,
                query=query_embedding,
                limit=limit,
                with_payload=True,
            )
        except Exception as e:
            logger.warning("Vector search failed: %s", e)
            return []

        matches = []
        for hit in results.points:
            payload = dict(hit.payload) if hit.payload else {}
            matches.append(
                ChunkMatch(
                    chunk_id=payload.get("chunk_id", str(hit.id)),
                    content=payload.get("content", ""),
                    document_id=payload.get("document_id", ""),
                    metadata=dict(payload.get("metadata") or {}),
                    similarity=min(max(float(hit.score), 0.0), 1.0),
                )
            )
        return matches

    def delete_document_chunks(self, document_id: str) -> None:
        from qdrant_client.http import models

        client = self._get_client()
        try:
            client.delete(
                collection_name=self.collection_name,
                points_selector=models.FilterSelector(
                    filter=models.Filter(
                        must=[models.FieldCondition(key="document_id", match=models.MatchValue(value=document_id))]
                    )
                ),
            )
        except Exception as e:
            raise StorageUnavailableError(
                "Failed to delete document chunks",
                cause=e,
                context={"document_id": document_id},
            ) from e
        logger.info("Deleted chunks of document %s", document_id)

    def count(self) -> int:
        try:
            client = self._get_client()
            return client.count(collection_name=self.collection_name, exact=True).count
        except Exception as e:
            logger.warning("Failed to count chunks: %s", e)
            return 0


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True
