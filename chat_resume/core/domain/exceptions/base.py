"""Base exception for the chat resume service.

Every domain error carries a stable error code, the place it was raised,
an optional underlying cause and free-form context. ``to_dict`` turns all
of that into the JSON body used by the API error handlers and the
structured log lines.
"""

import inspect
import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import PurePath
from typing import Any


@dataclass
class ExceptionContext:
    """Where an error was raised."""

    class_name: str
    method_name: str
    file_name: str
    line_number: int
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    def to_dict(self) -> dict[str, Any]:
        return {
            "class": self.class_name,
            "method": self.method_name,
            "file": self.file_name,
            "line": self.line_number,
            "timestamp": self.timestamp,
        }


UNKNOWN_LOCATION = ("<unknown>", "<unknown>", "<unknown>", 0)


class ChatResumeError(Exception):
    """Root of the chat resume exception hierarchy.

    Adapters wrap library failures at the boundary and keep the original
    exception as ``cause``:

        try:
            client.models.embed_content(...)
        except Exception as e:
            raise EmbeddingUnavailableError(
                "Embedding request failed",
                cause=e,
                context={"model": model_name},
            ) from e
    """

    error_code: str = "CR_ERR_001"

    def __init__(
        self,
        message: str,
        *,
        cause: Exception | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Create the error.

        Args:
            message: Human-readable message, safe to show to API clients.
            cause: Library or transport exception being wrapped.
            context: Identifiers useful for debugging (document id, model, path...).
        """
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.extra_context = context or {}
        self.location = self._capture_location()
        self.stack_trace = traceback.format_exc() if cause else None

    def _capture_location(self) -> ExceptionContext:
        """Find the first frame outside this exception's own constructors."""
        frame = inspect.currentframe()
        while frame is not None and (frame.f_code.co_filename == __file__ or frame.f_locals.get("self") is self):
            frame = frame.f_back

        if frame is None:
            return ExceptionContext(*UNKNOWN_LOCATION)

        owner = frame.f_locals.get("self")
        return ExceptionContext(
            class_name=type(owner).__name__ if owner is not None else "<module>",
            method_name=frame.f_code.co_name,
            file_name=PurePath(frame.f_code.co_filename).name,
            line_number=frame.f_lineno,
        )

    def to_dict(self, include_trace: bool = False) -> dict[str, Any]:
        """Render the error as a JSON-ready dictionary.

        Args:
            include_trace: Add the formatted traceback of the cause (debug mode only).
        """
        result: dict[str, Any] = {
            "error": {
                "type": type(self).__name__,
                "code": self.error_code,
                "message": self.message,
            },
            "location": self.location.to_dict(),
        }

        if self.extra_context:
            result["context"] = self.extra_context
        if self.cause is not None:
            result["cause"] = {"type": type(self.cause).__name__, "message": str(self.cause)}
        if include_trace and self.stack_trace:
            result["stack_trace"] = [line for line in self.stack_trace.splitlines() if line.strip()]

        return result
