"""Exception formatting, logging and HTTP status mapping.

Used by the FastAPI exception handlers and the CLI so both surfaces
report errors in the same structured shape.
"""

import json
import logging
import traceback
from pathlib import PurePath
from typing import Any

from ..core.domain.exceptions import (
    AdminDisabledError,
    ChatResumeError,
    DocumentNotFoundError,
    EmbeddingRateLimitError,
    EmbeddingUnavailableError,
    LLMRateLimitError,
    LLMTimeoutError,
    StorageUnavailableError,
    TextExtractionError,
    UnauthorizedError,
    UnsupportedInputError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STANDARD_ERROR_CODE = "PYTHON_ERR"

# First match wins; AdminDisabledError must precede its UnauthorizedError parent
_STATUS_BY_TYPE: tuple[tuple[tuple[type[Exception], ...], int], ...] = (
    ((ValidationError, UnsupportedInputError, TextExtractionError), 400),
    ((AdminDisabledError,), 403),
    ((UnauthorizedError,), 401),
    ((DocumentNotFoundError,), 404),
    ((LLMRateLimitError, EmbeddingRateLimitError), 429),
    ((LLMTimeoutError,), 504),
    ((StorageUnavailableError, EmbeddingUnavailableError), 503),
    ((ChatResumeError,), 500),
    ((ValueError,), 400),
    ((ConnectionError, TimeoutError), 503),
)


def _standard_error_json(exc: Exception, include_trace: bool) -> dict[str, Any]:
    frames = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    last = frames[-1] if frames else None

    result: dict[str, Any] = {
        "error": {"type": type(exc).__name__, "code": STANDARD_ERROR_CODE, "message": str(exc)},
        "location": {
            "class": "<unknown>",
            "method": last.name if last else "<unknown>",
            "file": PurePath(last.filename).name if last else "<unknown>",
            "line": last.lineno if last else 0,
        },
    }
    if include_trace:
        result["stack_trace"] = [
            line.strip() for line in traceback.format_exception(exc) if line.strip()
        ]
    return result


def format_exception_json(
    exc: Exception,
    include_trace: bool = False,
    extra_context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Render any exception in the ``ChatResumeError.to_dict`` shape.

    Args:
        exc: Domain or standard exception.
        include_trace: Include the stack trace.
        extra_context: Request details merged into ``context``.
    """
    if isinstance(exc, ChatResumeError):
        result = exc.to_dict(include_trace=include_trace)
    else:
        result = _standard_error_json(exc, include_trace)

    if extra_context:
        result["context"] = {**result.get("context", {}), **extra_context}
    return result


def log_exception(
    exc: Exception,
    log: logging.Logger | None = None,
    level: int = logging.ERROR,
    extra_context: dict[str, Any] | None = None,
) -> None:
    """Log an exception as an indented JSON document, trace included."""
    payload = format_exception_json(exc, include_trace=True, extra_context=extra_context)
    (log or logger).log(level, json.dumps(payload, indent=2, default=str))


def get_error_code(exc: Exception) -> str:
    """``CR_*`` code of a domain error, ``PYTHON_ERR`` otherwise."""
    return exc.error_code if isinstance(exc, ChatResumeError) else STANDARD_ERROR_CODE


def get_http_status_code(exc: Exception) -> int:
    """Map an exception to the HTTP status the API responds with (500 if unmapped)."""
    for types, status in _STATUS_BY_TYPE:
        if isinstance(exc, types):
            return status
    return 500
