"""Validation exceptions."""

from .base import ChatResumeError


class ValidationError(ChatResumeError):
    """Input validation failed."""

    error_code = "CR_VAL_001"


class EmptyQueryError(ValidationError):
    """Query cannot be empty or whitespace only."""

    error_code = "CR_VAL_002"


class InvalidComponentError(ValidationError):
    """Component descriptor is malformed or duplicates an existing name."""

    error_code = "CR_VAL_003"
