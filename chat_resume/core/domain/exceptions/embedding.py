"""Embedding exceptions."""

from .base import ChatResumeError


class EmbeddingError(ChatResumeError):
    """Failed to generate embeddings."""

    error_code = "CR_EMB_001"


class EmbeddingUnavailableError(EmbeddingError):
    """The embedding capability did not return a usable vector.

    Common causes:
    - Network failure or non-2xx response
    - Malformed or empty payload
    """

    error_code = "CR_EMB_002"


class EmbeddingRateLimitError(EmbeddingError):
    """Embedding API rate limit exceeded."""

    error_code = "CR_EMB_003"
