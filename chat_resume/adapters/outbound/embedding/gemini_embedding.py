"""Gemini embedding adapter implementing the embedding port."""

import logging
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from google import genai

from ....common.rate_limiter import RateLimiter
from ....core.domain.exceptions import (
    EmbeddingRateLimitError,
    EmbeddingUnavailableError,
    MissingAPIKeyError,
)
from ....core.domain.utils import normalize_text
from ....core.ports.embedding_port import EmbeddingPort

logger = logging.getLogger(__name__)

def _is_rate_limit(error: Exception) -> bool:
    code = getattr(error, "code", None)
    if code == 429:
        return True
    message = str(error).lower()
    return "quota" in message or "rate" in message or "resource_exhausted" in message


class GeminiEmbeddingAdapter(EmbeddingPort):
    """Embeds text with Google Gemini using the google-genai SDK.

    Queries and documents are embedded with different task types, and the
    output dimensionality is pinned so every vector fits the collection.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-embedding-001",
        dimension: int = 768,
        rate_limiter: RateLimiter | None = None,
        max_retries: int = 0,
    ) -> None:
        """Initialize the embedding adapter.

        Args:
            api_key: Google AI API key.
            model_name: Embedding model identifier.
            dimension: Requested output dimensionality.
            rate_limiter: Optional limiter acquired before every request.
            max_retries: Extra attempts after a rate-limit failure, with exponential
                backoff. 0 makes a single attempt.
        """
        self.api_key = api_key
        self.model_name = model_name
        self._dimension = dimension
        self.rate_limiter = rate_limiter
        self.max_retries = max(max_retries, 0)
        self._client: genai.Client | None = None

    @property
    def dimension(self) -> int:
        return self._dimension

    def _get_client(self) -> "genai.Client":
        """Lazy load the genai client."""
        if self._client is None:
            if not self.api_key:
                raise MissingAPIKeyError(
                    "Google API key not set. Get one at https://aistudio.google.com/ "
                    "and set GOOGLE_API_KEY in your .env file."
                )

            from google import genai

            self._client = genai.Client(api_key=self.api_key)
            logger.info("Gemini embedding client initialized for model: %s", self.model_name)

        return self._client

    def embed_query(self, text: str) -> list[float]:
        return self._embed(text, task_type="RETRIEVAL_QUERY")

    def embed_document(self, text: str) -> list[float]:
        return self._embed(text, task_type="RETRIEVAL_DOCUMENT")

    def _embed(self, text: str, task_type: str) -> list[float]:
        """Embed one text, retrying rate-limit failures only when max_retries is set.

        Raises:
            EmbeddingUnavailableError: If no vector of the expected length is returned.
            EmbeddingRateLimitError: If the quota is exhausted (after any configured retries).
        """
        from google.genai import types

        clean = normalize_text(text)
        if not clean.strip():
            raise EmbeddingUnavailableError("Cannot embed empty text")

        client = self._get_client()
        config = types.EmbedContentConfig(task_type=task_type, output_dimensionality=self._dimension)

        attempts = self.max_retries + 1
        for attempt in range(attempts):
            if self.rate_limiter:
                self.rate_limiter.acquire()
            try:
                result = client.models.embed_content(model=self.model_name, contents=clean, config=config)
            except Exception as e:
                if not _is_rate_limit(e):
                    raise EmbeddingUnavailableError(
                        "Embedding request failed",
                        cause=e,
                        context={"model": self.model_name, "task_type": task_type},
                    ) from e
                if attempt == attempts - 1:
                    raise EmbeddingRateLimitError(
                        "Embedding quota exhausted",
                        cause=e,
                        context={"model": self.model_name},
                    ) from e
                wait_time = 2**attempt
                logger.warning("Embedding rate limit hit, retrying in %ss", wait_time)
                time.sleep(wait_time)
                continue

            values = result.embeddings[0].values if result and result.embeddings else None
            if not values or len(values) != self._dimension:
                raise EmbeddingUnavailableError(
                    "Embedding response had no usable vector",
                    context={
                        "model": self.model_name,
                        "expected": self._dimension,
                        "received": len(values) if values else 0,
                    },
                )
            return list(values)

        raise EmbeddingUnavailableError("Embedding failed after retries")
