"""Configuration-related exceptions."""

from .base import ChatResumeError


class ConfigurationError(ChatResumeError):
    """Configuration or environment variable errors.

    Raised when required configuration is missing or invalid.
    """

    error_code = "CR_CFG_001"


class MissingAPIKeyError(ConfigurationError):
    """Required API key is not configured."""

    error_code = "CR_CFG_002"


class InvalidConfigurationError(ConfigurationError):
    """Configuration value is invalid (e.g. chunk overlap not below chunk size)."""

    error_code = "CR_CFG_003"
