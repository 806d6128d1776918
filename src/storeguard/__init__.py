"""storeguard - retry, backoff and idempotency for storage calls.

Runs storage requests (buckets, objects, ACLs, notifications) through a
single-attempt transport and decides, after each failure, whether to wait
and try again or to surface the failure. Every outcome is a value:
``Ok(payload)`` or ``Err(Status)``.

Quick Start:
    >>> from storeguard import (
    ...     RetryClient, LimitedErrorCountRetryPolicy, ExponentialBackoffPolicy,
    ... )
    >>> from storeguard.storage import GetObjectMetadataRequest
    >>>
    >>> client = RetryClient(
    ...     transport,  # any RawClient implementation
    ...     LimitedErrorCountRetryPolicy(3),
    ...     ExponentialBackoffPolicy(initial_delay=0.5, maximum_delay=30.0, scaling_factor=2.0),
    ... )
    >>> result = client.call(GetObjectMetadataRequest(bucket_name="b", object_name="o"))
    >>> result.match(ok=lambda meta: meta.size, err=lambda status: status.reason)

Configuration from the environment:
    >>> client = RetryClient.from_settings(transport)  # STOREGUARD_* variables
"""

from __future__ import annotations

from storeguard.foundation.config import StoreguardSettings, clear_settings_cache, get_settings
from storeguard.foundation.errors import (
    Err,
    Ok,
    Result,
    Status,
    StatusCode,
    StatusError,
    StatusOr,
    TerminationReason,
    value_or_raise,
)
from storeguard.runtime.observability import configure_logging, get_logger
from storeguard.runtime.retry import (
    AlwaysRetryIdempotencyPolicy,
    BackoffPolicy,
    ExponentialBackoffPolicy,
    IdempotencyPolicy,
    LimitedErrorCountRetryPolicy,
    LimitedTimeRetryPolicy,
    RequestKind,
    RetryPolicy,
    StrictIdempotencyPolicy,
    execute,
    execute_async,
)
from storeguard.storage import AsyncRawClient, AsyncRetryClient, RawClient, RetryClient, StorageRequest

__version__ = "0.1.0"

__all__ = [
    # Status & Result
    "Status", "StatusCode", "StatusError", "TerminationReason", "value_or_raise",
    "Result", "Ok", "Err", "StatusOr",
    # Policies
    "RetryPolicy", "LimitedErrorCountRetryPolicy", "LimitedTimeRetryPolicy",
    "BackoffPolicy", "ExponentialBackoffPolicy",
    "IdempotencyPolicy", "StrictIdempotencyPolicy", "AlwaysRetryIdempotencyPolicy", "RequestKind",
    # Execution
    "execute", "execute_async",
    # Config & logging
    "StoreguardSettings", "get_settings", "clear_settings_cache",
    "configure_logging", "get_logger",
    # Storage
    "RetryClient", "AsyncRetryClient", "RawClient", "AsyncRawClient", "StorageRequest",
]
