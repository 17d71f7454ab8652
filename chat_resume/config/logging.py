"""Logging setup: one ``chat_resume`` logger tree, plain-text or JSON output."""

import json
import logging
import sys
from pathlib import Path
from typing import Any

ROOT_LOGGER_NAME = "chat_resume"

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(module)s:%(funcName)s | %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# SDK loggers that log every HTTP round-trip at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "qdrant_client", "urllib3")

# Attributes every LogRecord has; anything else came in through ``extra=``
_RECORD_FIELDS = set(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


class JSONExceptionFormatter(logging.Formatter):
    """One JSON object per record, with exception details when present.

    Values passed through ``extra=`` (for example ``document_id``) are
    copied into a ``context`` object.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "file": record.filename,
                "function": record.funcName,
                "line": record.lineno,
            },
        }

        context = {key: value for key, value in record.__dict__.items() if key not in _RECORD_FIELDS}
        if context:
            entry["context"] = context

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str)


def _build_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return JSONExceptionFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    json_format: bool = False,
) -> logging.Logger:
    """Configure the ``chat_resume`` logger.

    Safe to call more than once (the API lifespan and the CLI callback both
    do); previous handlers are replaced, not stacked.

    Args:
        level: Level name such as DEBUG or INFO. Unknown names fall back to INFO.
        log_file: Optional UTF-8 file that receives the same records.
        json_format: Emit JSON lines instead of the pipe-delimited text format.

    Returns:
        The configured ``chat_resume`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    formatter = _build_formatter(json_format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the ``chat_resume`` logger or one of its children."""
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)
