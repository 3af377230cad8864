"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid or inconsistent."""


class MissingConfigurationError(ConfigurationError):
    """Raised when a required configuration entry is absent or blank."""
