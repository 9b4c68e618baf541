"""Configuration defaults, YAML overrides and validation."""

from .defaults import DefaultConfig, LoggingParams, MessageParams, get_default_config
from .loader import ConfigLoader
from .validation import ConfigValidator, ValidationError, format_errors

__all__ = [
    "ConfigLoader",
    "ConfigValidator",
    "DefaultConfig",
    "LoggingParams",
    "MessageParams",
    "ValidationError",
    "get_default_config",
    "format_errors",
]
