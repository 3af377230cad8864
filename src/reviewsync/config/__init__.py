"""Application configuration helpers."""

from __future__ import annotations

from .apps import (
    CONFIG_SHEET_NAME,
    AndroidApp,
    AppleApp,
    AppsConfig,
    CustomerApps,
    SheetsConfig,
    load_apps_config,
)
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import data_dir, http_cache_path

__all__ = [
    "CONFIG_SHEET_NAME",
    "AndroidApp",
    "AppleApp",
    "AppsConfig",
    "CacheConfig",
    "ConfigurationError",
    "CustomerApps",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SheetsConfig",
    "configure_logging",
    "data_dir",
    "http_cache_path",
    "load_apps_config",
]
