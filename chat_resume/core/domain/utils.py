"""Text helpers shared by the domain services.

Incoming documents and user inputs have BOM markers stripped at the
boundary so chunking, embedding and prompt assembly never see them.
"""

import unicodedata


def normalize_text(text: str) -> str:
    """Remove BOM and replacement characters and apply NFKC normalization.

    Args:
        text: Input text that may contain BOM or special characters.

    Returns:
        Cleaned text. Whitespace is preserved so chunk offsets stay meaningful.
    """
    if not text:
        return ""

    cleaned = text.replace("\ufeff", "").replace("\ufffd", "")
    return unicodedata.normalize("NFKC", cleaned)


def single_line(text: str) -> str:
    """Collapse all whitespace runs (including newlines) into single spaces."""
    return " ".join(text.split())
