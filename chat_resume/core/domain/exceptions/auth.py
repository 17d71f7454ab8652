"""Authorization exceptions raised by the HTTP layer."""

from .base import ChatResumeError


class UnauthorizedError(ChatResumeError):
    """Caller is not allowed to use an admin operation."""

    error_code = "CR_AUTH_001"


class AdminDisabledError(UnauthorizedError):
    """Admin operations are disabled because no admin key is configured."""

    error_code = "CR_AUTH_002"
