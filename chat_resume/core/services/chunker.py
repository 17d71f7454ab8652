"""Fixed-size overlapping text chunker."""

from ..domain.exceptions import InvalidConfigurationError


def validate_chunking(chunk_size: int, chunk_overlap: int) -> None:
    """Reject sizes that would stall or skip text.

    Raises:
        InvalidConfigurationError: Unless 0 < chunk_overlap < chunk_size.
    """
    if chunk_size <= 0:
        raise InvalidConfigurationError(
            "chunk_size must be positive",
            context={"chunk_size": chunk_size},
        )
    if chunk_overlap <= 0 or chunk_overlap >= chunk_size:
        raise InvalidConfigurationError(
            "chunk_overlap must be positive and less than chunk_size",
            context={"chunk_size": chunk_size, "chunk_overlap": chunk_overlap},
        )


def chunk_text(text: str, chunk_size: int = 1000, chunk_overlap: int = 200) -> list[str]:
    """Split text into overlapping fixed-size windows.

    Each window is ``text[start:start + chunk_size]`` (clipped to the text) and
    the next window starts ``chunk_overlap`` characters before the previous
    end. Splitting stops as soon as the next start would not move forward, so
    a 2500 character text with size 1000 and overlap 200 yields windows at
    0, 800, 1600 and 2300.

    Args:
        text: Text to chunk.
        chunk_size: Window length in characters.
        chunk_overlap: Characters shared by consecutive windows.

    Returns:
        Ordered list of substrings; [] for empty text, [text] when it fits one window.

    Raises:
        InvalidConfigurationError: If the sizes are invalid.
    """
    validate_chunking(chunk_size, chunk_overlap)

    if not text:
        return []

    if len(text) <= chunk_size:
        return [text]

    chunks = []
    start = 0
    while start < len(text):
        end = min(start + chunk_size, len(text))
        chunks.append(text[start:end])
        next_start = end - chunk_overlap
        if next_start <= start:
            break
        start = next_start
    return chunks


class Chunker:
    """Chunker bound to a validated size/overlap pair."""

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 200) -> None:
        validate_chunking(chunk_size, chunk_overlap)
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def chunk(self, text: str) -> list[str]:
        return chunk_text(text, self.chunk_size, self.chunk_overlap)
