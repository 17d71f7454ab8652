"""Embedding Port Interface."""

from abc import ABC, abstractmethod


class EmbeddingPort(ABC):
    """Abstract interface for the external embedding capability.

    Implementations raise EmbeddingUnavailableError when no usable vector
    can be produced; callers decide whether that is fatal.
    """

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Fixed length of every vector this embedder returns."""
        ...

    @abstractmethod
    def embed_query(self, text: str) -> list[float]: ...

    @abstractmethod
    def embed_document(self, text: str) -> list[float]: ...
