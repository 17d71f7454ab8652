"""Text extraction from uploaded resume documents."""

import io
import logging

from docx import Document as DocxDocument
from pypdf import PdfReader

from ...core.domain.exceptions import TextExtractionError, UnsupportedInputError
from ...core.domain.utils import normalize_text

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("md", "txt", "pdf", "docx", "doc")


def get_file_type(file_name: str) -> str:
    """Lowercase extension without the dot, or "" if there is none."""
    if "." not in file_name:
        return ""
    return file_name.rsplit(".", 1)[-1].lower()


def is_supported_file(file_name: str) -> bool:
    return get_file_type(file_name) in SUPPORTED_EXTENSIONS


def _extract_pdf(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    text_parts = []
    for page in reader.pages:
        text = page.extract_text()
        if text:
            normalized = normalize_text(text)
            if normalized.strip():
                text_parts.append(normalized)
    return "\n\n".join(text_parts)


def _extract_docx(data: bytes) -> str:
    doc = DocxDocument(io.BytesIO(data))
    return "\n".join(paragraph.text for paragraph in doc.paragraphs)


def extract_text(file_name: str, data: bytes) -> str:
    """Extract plain text from an uploaded file.

    Args:
        file_name: Original file name; its extension selects the extractor.
        data: Raw file bytes.

    Returns:
        Normalized text content.

    Raises:
        UnsupportedInputError: If the extension is not supported.
        TextExtractionError: If a supported file cannot be read.
    """
    file_type = get_file_type(file_name)
    if file_type not in SUPPORTED_EXTENSIONS:
        raise UnsupportedInputError(
            f"Unsupported file type: {file_type or 'none'}",
            context={"file_name": file_name, "supported": list(SUPPORTED_EXTENSIONS)},
        )

    try:
        if file_type in ("md", "txt"):
            text = data.decode("utf-8-sig")
        elif file_type == "pdf":
            text = _extract_pdf(data)
        else:
            text = _extract_docx(data)
    except Exception as e:
        logger.warning("Failed to extract text from %s: %s", file_name, e)
        raise TextExtractionError(
            f"Could not extract text from {file_name}",
            cause=e,
            context={"file_name": file_name, "file_type": file_type},
        ) from e

    return normalize_text(text)
