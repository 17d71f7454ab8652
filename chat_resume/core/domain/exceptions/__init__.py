"""Exception hierarchy for the chat resume service.

Each exception carries an error code, its raise location, an optional
cause and a JSON-ready form. Import from this package directly:

    from chat_resume.core.domain.exceptions import ChatResumeError, StorageUnavailableError
"""

from .auth import AdminDisabledError, UnauthorizedError
from .base import ChatResumeError, ExceptionContext
from .configuration import (
    ConfigurationError,
    InvalidConfigurationError,
    MissingAPIKeyError,
)
from .embedding import (
    EmbeddingError,
    EmbeddingRateLimitError,
    EmbeddingUnavailableError,
)
from .ingestion import (
    DataIngestionError,
    DocumentNotFoundError,
    TextExtractionError,
    UnsupportedInputError,
)
from .llm import (
    LLMConnectionError,
    LLMError,
    LLMGenerationError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from .validation import (
    EmptyQueryError,
    InvalidComponentError,
    ValidationError,
)
from .vector_store import (
    EmbeddingDimensionError,
    StorageUnavailableError,
    VectorStoreError,
)

__all__ = [
    # Base
    "ExceptionContext",
    "ChatResumeError",
    # Configuration
    "ConfigurationError",
    "MissingAPIKeyError",
    "InvalidConfigurationError",
    # Vector store / persistence
    "VectorStoreError",
    "StorageUnavailableError",
    "EmbeddingDimensionError",
    # Embedding
    "EmbeddingError",
    "EmbeddingUnavailableError",
    "EmbeddingRateLimitError",
    # LLM
    "LLMError",
    "LLMConnectionError",
    "LLMRateLimitError",
    "LLMGenerationError",
    "LLMTimeoutError",
    # Ingestion
    "DataIngestionError",
    "UnsupportedInputError",
    "TextExtractionError",
    "DocumentNotFoundError",
    # Validation
    "ValidationError",
    "EmptyQueryError",
    "InvalidComponentError",
    # Auth
    "UnauthorizedError",
    "AdminDisabledError",
]
