"""Retry machinery for storage calls.

Three independent policies plus the loop that combines them:

- RetryPolicy: may another attempt be made after this failure?
- BackoffPolicy: how long to wait before it?
- IdempotencyPolicy: is this request safe to send twice at all?
- execute/execute_async: the per-call retry loop

Example:
    >>> from storeguard.runtime.retry import (
    ...     ExponentialBackoffPolicy, LimitedErrorCountRetryPolicy,
    ...     StrictIdempotencyPolicy, execute,
    ... )
    >>> result = execute(
    ...     request,
    ...     lambda: transport.get_object_metadata(request),
    ...     LimitedErrorCountRetryPolicy(3),
    ...     ExponentialBackoffPolicy(0.1, 5.0, 2.0),
    ...     StrictIdempotencyPolicy(),
    ... )
"""

from .backoff import BackoffPolicy, ExponentialBackoffPolicy, backoff_policy_from_settings
from .executor import OnRetry, execute, execute_async
from .idempotency import (
    AlwaysRetryIdempotencyPolicy,
    IdempotencyFacts,
    IdempotencyPolicy,
    RequestKind,
    StrictIdempotencyPolicy,
    idempotency_policy_from_settings,
)
from .policy import (
    DEFAULT_RETRYABLE_CODES,
    LimitedErrorCountRetryPolicy,
    LimitedTimeRetryPolicy,
    RetryPolicy,
    is_permanent_failure,
    retry_policy_from_settings,
)

__all__ = [
    # Retry policies
    "RetryPolicy", "LimitedErrorCountRetryPolicy", "LimitedTimeRetryPolicy",
    "DEFAULT_RETRYABLE_CODES", "is_permanent_failure", "retry_policy_from_settings",
    # Backoff
    "BackoffPolicy", "ExponentialBackoffPolicy", "backoff_policy_from_settings",
    # Idempotency
    "IdempotencyPolicy", "IdempotencyFacts", "RequestKind",
    "StrictIdempotencyPolicy", "AlwaysRetryIdempotencyPolicy", "idempotency_policy_from_settings",
    # Execution
    "execute", "execute_async", "OnRetry",
]
