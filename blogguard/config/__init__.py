"""Settings and logging setup."""

from blogguard.config.logging_config import setup_logging, setup_logging_from_settings
from blogguard.config.settings import (
    ApiSettings,
    ConfigError,
    LoggingSettings,
    RateLimitSettings,
    Settings,
    get_settings,
)

__all__ = [
    "ApiSettings",
    "ConfigError",
    "LoggingSettings",
    "RateLimitSettings",
    "Settings",
    "get_settings",
    "setup_logging",
    "setup_logging_from_settings",
]
