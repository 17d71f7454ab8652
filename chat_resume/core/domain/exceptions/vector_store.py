"""Vector store and persistence exceptions."""

from .base import ChatResumeError


class VectorStoreError(ChatResumeError):
    """Base error for vector store and persistence operations."""

    error_code = "CR_VEC_001"


class StorageUnavailableError(VectorStoreError):
    """Backing store could not be reached or rejected the operation.

    Common causes:
    - Invalid Qdrant URL or API key
    - Local storage directory locked by another process
    - SQLite database file not writable
    """

    error_code = "CR_VEC_002"


class EmbeddingDimensionError(VectorStoreError):
    """Embedding length differs from the collection's fixed dimension."""

    error_code = "CR_VEC_003"
