"""Retrying storage client.

Wraps a single-attempt transport and runs every request through the retry
loop. The client keeps one prototype of each stateful policy and clones it
per call, so concurrent calls never share attempt counters or delays.

Example:
    >>> client = RetryClient(
    ...     transport,
    ...     LimitedErrorCountRetryPolicy(3),
    ...     ExponentialBackoffPolicy(0.5, 30.0, 2.0),
    ... )
    >>> result = client.call(DeleteObjectRequest(bucket_name="b", object_name="o", generation=7))
    >>> if result.is_err():
    ...     print(result.unwrap_err().reason)
"""

from __future__ import annotations

import asyncio
import threading
import time
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from storeguard.foundation.config import StoreguardSettings, get_settings
from storeguard.foundation.errors import Err, Status, StatusCode, StatusOr
from storeguard.runtime.retry import (
    ExponentialBackoffPolicy,
    LimitedTimeRetryPolicy,
    StrictIdempotencyPolicy,
    backoff_policy_from_settings,
    execute,
    execute_async,
    idempotency_policy_from_settings,
    retry_policy_from_settings,
)

if TYPE_CHECKING:
    from storeguard.runtime.retry import BackoffPolicy, IdempotencyPolicy, OnRetry, RetryPolicy

    from .requests import StorageRequest
    from .transport import AsyncRawClient, RawClient

DEFAULT_MAXIMUM_RETRY_PERIOD = timedelta(minutes=5)
DEFAULT_INITIAL_BACKOFF_DELAY = timedelta(seconds=1)
DEFAULT_MAXIMUM_BACKOFF_DELAY = timedelta(minutes=5)
DEFAULT_BACKOFF_SCALING = 2.0


class _RetryingBase:
    __slots__ = ("_raw", "_retry_policy", "_backoff_policy", "_idempotency_policy", "_on_retry")

    def __init__(
        self,
        raw: Any,
        retry_policy: RetryPolicy | None = None,
        backoff_policy: BackoffPolicy | None = None,
        idempotency_policy: IdempotencyPolicy | None = None,
        *,
        on_retry: OnRetry | None = None,
    ) -> None:
        self._raw = raw
        self._retry_policy = retry_policy or LimitedTimeRetryPolicy(DEFAULT_MAXIMUM_RETRY_PERIOD)
        self._backoff_policy = backoff_policy or ExponentialBackoffPolicy(
            DEFAULT_INITIAL_BACKOFF_DELAY, DEFAULT_MAXIMUM_BACKOFF_DELAY, DEFAULT_BACKOFF_SCALING,
        )
        self._idempotency_policy = idempotency_policy or StrictIdempotencyPolicy()
        self._on_retry = on_retry

    @property
    def raw(self) -> Any:
        """The underlying single-attempt transport."""
        return self._raw

    @property
    def idempotency_policy(self) -> IdempotencyPolicy:
        return self._idempotency_policy

    @classmethod
    def _policies_from_settings(
        cls, settings: StoreguardSettings | None,
    ) -> tuple[RetryPolicy, BackoffPolicy, IdempotencyPolicy]:
        settings = settings or get_settings()
        return (
            retry_policy_from_settings(settings.retry),
            backoff_policy_from_settings(settings.backoff),
            idempotency_policy_from_settings(settings.idempotency),
        )

    def _method(self, request: StorageRequest) -> Callable[[StorageRequest], Any] | None:
        method = getattr(self._raw, request.rpc, None)
        return method if callable(method) else None

    @staticmethod
    def _unimplemented(request: StorageRequest) -> StatusOr[Any]:
        return Err(Status(StatusCode.UNIMPLEMENTED, f"transport does not implement {request.rpc}"))


class RetryClient(_RetryingBase):
    """Blocking client: backoff waits block the calling thread only."""

    __slots__ = ("_sleep",)

    def __init__(
        self,
        raw: RawClient,
        retry_policy: RetryPolicy | None = None,
        backoff_policy: BackoffPolicy | None = None,
        idempotency_policy: IdempotencyPolicy | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        on_retry: OnRetry | None = None,
    ) -> None:
        super().__init__(raw, retry_policy, backoff_policy, idempotency_policy, on_retry=on_retry)
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        raw: RawClient,
        settings: StoreguardSettings | None = None,
        **kwargs: Any,
    ) -> RetryClient:
        """Build a client whose policies come from configuration."""
        return cls(raw, *cls._policies_from_settings(settings), **kwargs)

    def call(self, request: StorageRequest, *, cancel: threading.Event | None = None) -> StatusOr[Any]:
        """Execute ``request`` on the transport with retries.

        Setting ``cancel`` from another thread stops the call before its next
        attempt and returns Err(CANCELLED).
        """
        method = self._method(request)
        if method is None:
            return self._unimplemented(request)
        return execute(
            request,
            lambda: method(request),
            self._retry_policy.clone(),
            self._backoff_policy.clone(),
            self._idempotency_policy,
            sleep=self._sleep,
            on_retry=self._on_retry,
            cancel=cancel,
        )


class AsyncRetryClient(_RetryingBase):
    """Asyncio client: backoff waits suspend only the calling task."""

    __slots__ = ("_sleep",)

    def __init__(
        self,
        raw: AsyncRawClient,
        retry_policy: RetryPolicy | None = None,
        backoff_policy: BackoffPolicy | None = None,
        idempotency_policy: IdempotencyPolicy | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_retry: OnRetry | None = None,
    ) -> None:
        super().__init__(raw, retry_policy, backoff_policy, idempotency_policy, on_retry=on_retry)
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        raw: AsyncRawClient,
        settings: StoreguardSettings | None = None,
        **kwargs: Any,
    ) -> AsyncRetryClient:
        return cls(raw, *cls._policies_from_settings(settings), **kwargs)

    async def call(self, request: StorageRequest) -> StatusOr[Any]:
        """Execute ``request`` on the transport with retries."""
        method = self._method(request)
        if method is None:
            return self._unimplemented(request)
        return await execute_async(
            request,
            lambda: method(request),
            self._retry_policy.clone(),
            self._backoff_policy.clone(),
            self._idempotency_policy,
            sleep=self._sleep,
            on_retry=self._on_retry,
        )
