"""Retry policies: decide whether another attempt is allowed.

A retry policy tracks the failure history of a single call. It knows nothing
about delays (see backoff) or request safety (see idempotency).

Two variants:
- LimitedErrorCountRetryPolicy: tolerate up to N retryable failures
- LimitedTimeRetryPolicy: keep retrying until a wall-clock budget is spent

Policies are prototypes: clients hold one instance and ``clone()`` it for
every top-level call, so counters are never shared between calls.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import timedelta
from typing import TYPE_CHECKING, Callable, Protocol, runtime_checkable

from storeguard.foundation.errors import Status, StatusCode

if TYPE_CHECKING:
    from storeguard.foundation.config import RetrySettings


# Transient service conditions that may succeed on a later attempt
DEFAULT_RETRYABLE_CODES: frozenset[StatusCode] = frozenset({
    StatusCode.DEADLINE_EXCEEDED,
    StatusCode.INTERNAL,
    StatusCode.RESOURCE_EXHAUSTED,
    StatusCode.UNAVAILABLE,
})


def is_permanent_failure(
    status: Status,
    retryable_codes: frozenset[StatusCode] = DEFAULT_RETRYABLE_CODES,
) -> bool:
    """True for a failed status that retrying cannot fix."""
    return not status.ok() and status.code not in retryable_codes


def _seconds(value: float | timedelta) -> float:
    return value.total_seconds() if isinstance(value, timedelta) else float(value)


@runtime_checkable
class RetryPolicy(Protocol):
    """Decides, from the failure history of one call, whether to try again."""

    def is_exhausted(self) -> bool:
        """True when no further attempt is allowed."""
        ...

    def on_failure(self, status: Status) -> bool:
        """Record a failed attempt. Returns True iff the caller may retry."""
        ...

    def is_permanent_failure(self, status: Status) -> bool:
        ...

    def clone(self) -> RetryPolicy:
        """Fresh policy with the same limits and no recorded failures."""
        ...


@dataclass(slots=True)
class LimitedErrorCountRetryPolicy:
    """Allow up to ``maximum_failures`` retryable failures per call.

    A limit of zero or less turns every call into a single attempt.

    Example:
        >>> policy = LimitedErrorCountRetryPolicy(2)
        >>> transient = Status(StatusCode.UNAVAILABLE, "try again")
        >>> policy.on_failure(transient), policy.on_failure(transient)
        (True, True)
        >>> policy.on_failure(transient)
        False
    """

    maximum_failures: int
    retryable_codes: frozenset[StatusCode] = DEFAULT_RETRYABLE_CODES
    _failure_count: int = field(default=0, init=False, repr=False)

    @property
    def failure_count(self) -> int:
        return self._failure_count

    def is_exhausted(self) -> bool:
        return self._failure_count > self.maximum_failures

    def on_failure(self, status: Status) -> bool:
        if self.is_permanent_failure(status):
            return False
        self._failure_count += 1
        return not self.is_exhausted()

    def is_permanent_failure(self, status: Status) -> bool:
        return is_permanent_failure(status, self.retryable_codes)

    def clone(self) -> LimitedErrorCountRetryPolicy:
        return LimitedErrorCountRetryPolicy(self.maximum_failures, self.retryable_codes)


@dataclass(slots=True)
class LimitedTimeRetryPolicy:
    """Allow retries until ``maximum_duration`` has elapsed since creation.

    The deadline starts when the policy (or its clone) is created, so clone
    right before the call it governs.

    Attributes:
        maximum_duration: Budget in seconds (or a timedelta)
        clock: Monotonic time source in seconds (injectable for tests)
    """

    maximum_duration: float | timedelta
    retryable_codes: frozenset[StatusCode] = DEFAULT_RETRYABLE_CODES
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    _deadline: float = field(default=0.0, init=False, repr=False)

    def __post_init__(self) -> None:
        self._deadline = self.clock() + _seconds(self.maximum_duration)

    @property
    def deadline(self) -> float:
        return self._deadline

    def is_exhausted(self) -> bool:
        return self.clock() > self._deadline

    def on_failure(self, status: Status) -> bool:
        if self.is_permanent_failure(status):
            return False
        return not self.is_exhausted()

    def is_permanent_failure(self, status: Status) -> bool:
        return is_permanent_failure(status, self.retryable_codes)

    def clone(self) -> LimitedTimeRetryPolicy:
        return LimitedTimeRetryPolicy(self.maximum_duration, self.retryable_codes, self.clock)


def retry_policy_from_settings(settings: RetrySettings) -> RetryPolicy:
    """Build the retry policy prototype described by configuration."""
    if settings.kind == "limited-error-count":
        return LimitedErrorCountRetryPolicy(settings.maximum_failures)
    return LimitedTimeRetryPolicy(settings.maximum_duration)
