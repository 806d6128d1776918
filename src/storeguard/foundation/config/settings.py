"""Environment-based configuration using pydantic-settings.

Every option of the retry layer can be set independently from the
environment (or a .env file) with the ``STOREGUARD_`` prefix.

Example:
    >>> from storeguard.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.kind
    'limited-time'
    >>> settings.backoff.scaling_factor
    2.0

    # Or with environment variables:
    # STOREGUARD_RETRY_KIND=limited-error-count
    # STOREGUARD_RETRY_MAXIMUM_FAILURES=5
    # STOREGUARD_BACKOFF_JITTER=false
    # STOREGUARD_IDEMPOTENCY_KIND=always
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Self

from pydantic import (
    Field,
    NonNegativeFloat,
    PositiveFloat,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrySettings(BaseSettings):
    """Which retry policy to build and its limit."""

    model_config = SettingsConfigDict(
        env_prefix="STOREGUARD_RETRY_",
        extra="ignore",
    )

    kind: Literal["limited-error-count", "limited-time"] = "limited-time"
    maximum_failures: int = Field(default=3, description="Retryable failures tolerated per call")
    maximum_duration: NonNegativeFloat = Field(default=300.0, description="Retry budget in seconds")


class BackoffSettings(BaseSettings):
    """Exponential backoff parameters."""

    model_config = SettingsConfigDict(
        env_prefix="STOREGUARD_BACKOFF_",
        extra="ignore",
    )

    initial_delay: NonNegativeFloat = Field(default=1.0, description="First delay in seconds")
    maximum_delay: PositiveFloat = Field(default=300.0, description="Delay cap in seconds")
    scaling_factor: float = Field(default=2.0, gt=1.0, description="Growth factor per retry")
    jitter: bool = True

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        if self.initial_delay > self.maximum_delay:
            raise ValueError(
                f"initial_delay ({self.initial_delay}) must not exceed maximum_delay ({self.maximum_delay})"
            )
        return self


class IdempotencySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOREGUARD_IDEMPOTENCY_",
        extra="ignore",
    )

    kind: Literal["strict", "always"] = "strict"


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOREGUARD_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"


class StoreguardSettings(BaseSettings):
    """Root settings.

    Loads configuration from environment variables with STOREGUARD_ prefix.
    Nested sections read their own prefixed variables, or the root can be
    given nested values with the ``__`` delimiter (STOREGUARD_RETRY__KIND).
    """

    model_config = SettingsConfigDict(
        env_prefix="STOREGUARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    retry: RetrySettings = Field(default_factory=RetrySettings)
    backoff: BackoffSettings = Field(default_factory=BackoffSettings)
    idempotency: IdempotencySettings = Field(default_factory=IdempotencySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> StoreguardSettings:
    """Get the global settings instance (cached)."""
    return StoreguardSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    The next get_settings() call reloads configuration from the environment.
    """
    get_settings.cache_clear()
