"""LLM exceptions."""

from .base import ChatResumeError


class LLMError(ChatResumeError):
    """Base error for LLM operations."""

    error_code = "CR_LLM_001"


class LLMConnectionError(LLMError):
    """Failed to connect to LLM provider.

    Common causes:
    - Invalid API key
    - Network issues
    - Service unavailable
    """

    error_code = "CR_LLM_002"


class LLMRateLimitError(LLMError):
    """Rate limit exceeded on LLM provider."""

    error_code = "CR_LLM_003"


class LLMGenerationError(LLMError):
    """Failed to generate an LLM response.

    Common causes:
    - Content filtered by safety settings
    - Output did not match the requested schema
    """

    error_code = "CR_LLM_004"


class LLMTimeoutError(LLMError):
    """LLM call did not finish within its deadline."""

    error_code = "CR_LLM_005"
