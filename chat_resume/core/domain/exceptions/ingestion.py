"""Document ingestion exceptions."""

from .base import ChatResumeError


class DataIngestionError(ChatResumeError):
    """Error while adding a document to the knowledge base."""

    error_code = "CR_ING_001"


class UnsupportedInputError(DataIngestionError):
    """File type is not accepted by the ingestion pipeline."""

    error_code = "CR_ING_002"


class TextExtractionError(DataIngestionError):
    """Failed to extract plain text from a supported file."""

    error_code = "CR_ING_003"


class DocumentNotFoundError(DataIngestionError):
    """Referenced document does not exist."""

    error_code = "CR_ING_004"
