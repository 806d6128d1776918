"""Configuration management using pydantic-settings."""

from .settings import (
    BackoffSettings,
    IdempotencySettings,
    LoggingSettings,
    RetrySettings,
    StoreguardSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "BackoffSettings",
    "IdempotencySettings",
    "LoggingSettings",
    "RetrySettings",
    "StoreguardSettings",
    "clear_settings_cache",
    "get_settings",
]
