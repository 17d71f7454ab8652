"""Cache Port Interface."""

from abc import ABC, abstractmethod
from typing import Any


class CachePort(ABC):
    """Best-effort key/value cache with per-entry expiry.

    Entries may vanish at any time; callers must be able to recompute them.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None: ...

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: float) -> None: ...

    @abstractmethod
    def delete(self, key: str) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...
