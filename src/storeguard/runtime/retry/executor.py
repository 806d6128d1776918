"""The retry loop: run one storage call through its policies.

``execute`` and ``execute_async`` drive a single top-level call:

1. classify the request's idempotency once
2. attempt the operation; return on success
3. on failure, stop if the status is permanent, if the request is not safe
   to repeat, or if the retry policy is spent
4. otherwise wait for the backoff delay and attempt again

Every outcome comes back as a ``StatusOr``. Terminal failures keep the code
and message of the last attempt and record why the loop stopped in
``Status.reason``.

A blocking call can be cancelled from another thread through a
``threading.Event``; async calls are cancelled by cancelling their task.
"""

from __future__ import annotations

import asyncio
import threading
import time
from typing import TYPE_CHECKING, Any, Awaitable, Callable, TypeVar

from storeguard.foundation.errors import (
    Err,
    Result,
    Status,
    StatusCode,
    StatusOr,
    TerminationReason,
    status_from_exception,
)
from storeguard.runtime.observability import get_logger

if TYPE_CHECKING:
    from .backoff import BackoffPolicy
    from .idempotency import IdempotencyFacts, IdempotencyPolicy
    from .policy import RetryPolicy

T = TypeVar("T")

OnRetry = Callable[[int, Status, float], None]

log = get_logger("storeguard.retry")


def _label(request: object, name: str | None) -> str:
    if name:
        return name
    return getattr(request, "rpc", None) or type(request).__name__


def _succeeded(result: Any) -> bool:
    return isinstance(result, Result) and result.is_ok()


def _check_failure(
    result: Any,
    retry_policy: RetryPolicy,
    idempotent: bool,
) -> tuple[Status, TerminationReason | None]:
    """Classify a failed attempt; a reason means the loop must stop."""
    if not isinstance(result, Result):
        return (
            Status(StatusCode.INTERNAL, f"transport returned {type(result).__name__}, not a Result"),
            TerminationReason.CONTRACT_VIOLATION,
        )
    status = result.unwrap_err()
    if not isinstance(status, Status) or status.ok():
        return (
            Status(StatusCode.INTERNAL, "transport returned a failure without an error status"),
            TerminationReason.CONTRACT_VIOLATION,
        )
    if retry_policy.is_permanent_failure(status):
        return status, TerminationReason.PERMANENT_ERROR
    if not idempotent:
        return status, TerminationReason.NON_IDEMPOTENT
    if not retry_policy.on_failure(status) or retry_policy.is_exhausted():
        return status, TerminationReason.POLICY_EXHAUSTED
    return status, None


def _terminate(status: Status, reason: TerminationReason, label: str, attempts: int) -> StatusOr[T]:
    log.warning(
        "call failed",
        rpc=label,
        reason=reason.value,
        attempts=attempts,
        code=str(status.code),
        message=status.message,
    )
    return Err(status.with_reason(reason))


def _cancelled(label: str, attempts: int) -> StatusOr[T]:
    status = Status(StatusCode.CANCELLED, f"call cancelled after {attempts} attempt(s)")
    return _terminate(status, TerminationReason.CANCELLED, label, attempts)


def _wait(delay: float, sleep: Callable[[float], None], cancel: threading.Event | None) -> bool:
    """Wait out a backoff delay; True if ``cancel`` was set meanwhile."""
    if cancel is None:
        sleep(delay)
        return False
    if sleep is time.sleep:
        return cancel.wait(delay)
    sleep(delay)
    return cancel.is_set()


def _invoke(operation: Callable[[], StatusOr[T]]) -> Any:
    try:
        return operation()
    except Exception as exc:  # noqa: BLE001 - transport bugs surface as Status
        return Err(status_from_exception(exc))


def execute(
    request: IdempotencyFacts,
    operation: Callable[[], StatusOr[T]],
    retry_policy: RetryPolicy,
    backoff_policy: BackoffPolicy,
    idempotency_policy: IdempotencyPolicy,
    *,
    name: str | None = None,
    sleep: Callable[[float], None] = time.sleep,
    on_retry: OnRetry | None = None,
    cancel: threading.Event | None = None,
) -> StatusOr[T]:
    """Run ``operation`` with retries, blocking the calling thread between attempts.

    Args:
        request: The request being executed (for idempotency classification)
        operation: Zero-argument single attempt, bound to a transport method
        retry_policy: Owned by this call; mutated as failures accumulate
        backoff_policy: Owned by this call; advanced once per retry
        idempotency_policy: Shared, stateless classifier
        name: Label for logs (defaults to the request's rpc)
        sleep: Blocking wait, injectable for tests
        on_retry: Called with (attempt, status, delay) before each wait
        cancel: Once set, no further attempt is dispatched. With the default
            ``sleep`` the backoff wait wakes as soon as it is set.

    Returns:
        Ok with the payload, or Err with the last Status and its reason.
        A cancelled call returns Err(CANCELLED) with reason CANCELLED.
    """
    label = _label(request, name)
    idempotent = idempotency_policy.is_idempotent(request)
    attempt = 1

    while True:
        if cancel is not None and cancel.is_set():
            return _cancelled(label, attempt - 1)

        result = _invoke(operation)
        if _succeeded(result):
            return result

        status, reason = _check_failure(result, retry_policy, idempotent)
        if reason is not None:
            return _terminate(status, reason, label, attempt)

        delay = backoff_policy.on_completion()
        log.info("retrying", rpc=label, attempt=attempt, code=str(status.code), delay=delay)
        if on_retry:
            on_retry(attempt, status, delay)
        if _wait(delay, sleep, cancel):
            return _cancelled(label, attempt)
        attempt += 1


async def _invoke_async(operation: Callable[[], Awaitable[StatusOr[T]]]) -> Any:
    try:
        return await operation()
    except Exception as exc:  # noqa: BLE001 - transport bugs surface as Status
        return Err(status_from_exception(exc))


async def execute_async(
    request: IdempotencyFacts,
    operation: Callable[[], Awaitable[StatusOr[T]]],
    retry_policy: RetryPolicy,
    backoff_policy: BackoffPolicy,
    idempotency_policy: IdempotencyPolicy,
    *,
    name: str | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    on_retry: OnRetry | None = None,
) -> StatusOr[T]:
    """Async version of ``execute``; the backoff wait yields to the event loop.

    Cancelling the task during the wait raises ``asyncio.CancelledError`` out
    of this coroutine and no further attempt is dispatched.
    """
    label = _label(request, name)
    idempotent = idempotency_policy.is_idempotent(request)
    attempt = 1

    while True:
        result = await _invoke_async(operation)
        if _succeeded(result):
            return result

        status, reason = _check_failure(result, retry_policy, idempotent)
        if reason is not None:
            return _terminate(status, reason, label, attempt)

        delay = backoff_policy.on_completion()
        log.info("retrying", rpc=label, attempt=attempt, code=str(status.code), delay=delay)
        if on_retry:
            on_retry(attempt, status, delay)
        await sleep(delay)
        await asyncio.sleep(0)  # Cancellation checkpoint before the next dispatch
        attempt += 1
