"""Tests for the asyncio retry loop."""

from __future__ import annotations

import asyncio

import pytest

from storeguard.foundation.errors import Err, Ok, StatusCode, TerminationReason
from storeguard.foundation.testing import (
    AsyncMockTransport,
    AsyncRecordingSleeper,
    permanent_error,
    transient_error,
)
from storeguard.runtime.retry import (
    ExponentialBackoffPolicy,
    LimitedErrorCountRetryPolicy,
    StrictIdempotencyPolicy,
    execute_async,
)
from storeguard.storage import AsyncRetryClient, GetObjectMetadataRequest, ObjectMetadata, ReadObjectRequest

READ = GetObjectMetadataRequest(bucket_name="test-bucket", object_name="test-object")
METADATA = ObjectMetadata(bucket="test-bucket", name="test-object")


def _backoff() -> ExponentialBackoffPolicy:
    return ExponentialBackoffPolicy(0.001, 0.004, 2.0, jitter=False)


@pytest.mark.asyncio
async def test_async_transients_then_success() -> None:
    """The async loop follows the same schedule as the blocking one."""
    transport = AsyncMockTransport()
    sleeper = AsyncRecordingSleeper()
    transport.on("get_object_metadata", Err(transient_error()), Err(transient_error()), Ok(METADATA))

    result = await execute_async(
        READ,
        lambda: transport.get_object_metadata(READ),
        LimitedErrorCountRetryPolicy(3),
        _backoff(),
        StrictIdempotencyPolicy(),
        sleep=sleeper,
    )

    assert result == Ok(METADATA)
    assert sleeper.delays == [0.001, 0.002]
    assert transport.call_count() == 3


@pytest.mark.asyncio
async def test_async_permanent_error() -> None:
    transport = AsyncMockTransport()
    sleeper = AsyncRecordingSleeper()
    transport.on("get_object_metadata", Err(permanent_error()))

    result = await execute_async(
        READ,
        lambda: transport.get_object_metadata(READ),
        LimitedErrorCountRetryPolicy(3),
        _backoff(),
        StrictIdempotencyPolicy(),
        sleep=sleeper,
    )

    assert result.unwrap_err().reason is TerminationReason.PERMANENT_ERROR
    assert sleeper.delays == []


@pytest.mark.asyncio
async def test_async_timeout_is_retried() -> None:
    """A timeout raised by the transport is DEADLINE_EXCEEDED and gets another attempt."""
    transport = AsyncMockTransport()
    sleeper = AsyncRecordingSleeper()
    transport.on("get_object_metadata", TimeoutError("socket timed out"), Ok(METADATA))

    result = await execute_async(
        READ,
        lambda: transport.get_object_metadata(READ),
        LimitedErrorCountRetryPolicy(3),
        _backoff(),
        StrictIdempotencyPolicy(),
        sleep=sleeper,
    )

    assert result == Ok(METADATA)
    assert transport.call_count() == 2
    assert sleeper.delays == [0.001]


@pytest.mark.asyncio
async def test_async_transport_exception_becomes_status() -> None:
    transport = AsyncMockTransport()
    transport.on("get_object_metadata", KeyError("generation"))

    result = await execute_async(
        READ,
        lambda: transport.get_object_metadata(READ),
        LimitedErrorCountRetryPolicy(3),
        _backoff(),
        StrictIdempotencyPolicy(),
        sleep=AsyncRecordingSleeper(),
    )

    status = result.unwrap_err()
    assert status.code is StatusCode.UNKNOWN
    assert status.message == "KeyError: 'generation'"


@pytest.mark.asyncio
async def test_async_non_result_reply_is_a_contract_violation() -> None:
    transport = AsyncMockTransport()
    transport.on("get_object_metadata", then=lambda request: None)

    result = await execute_async(
        READ,
        lambda: transport.get_object_metadata(READ),
        LimitedErrorCountRetryPolicy(3),
        _backoff(),
        StrictIdempotencyPolicy(),
        sleep=AsyncRecordingSleeper(),
    )

    assert result.unwrap_err().reason is TerminationReason.CONTRACT_VIOLATION
    assert transport.call_count() == 1


@pytest.mark.asyncio
async def test_cancellation_during_backoff_stops_further_attempts() -> None:
    """Cancelling while waiting raises CancelledError and dispatches nothing more."""
    transport = AsyncMockTransport()
    sleeper = AsyncRecordingSleeper(block=True)
    transport.on("get_object_metadata", then=Err(transient_error()))

    task = asyncio.create_task(execute_async(
        READ,
        lambda: transport.get_object_metadata(READ),
        LimitedErrorCountRetryPolicy(10),
        _backoff(),
        StrictIdempotencyPolicy(),
        sleep=sleeper,
    ))
    await sleeper.waiting.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert transport.call_count() == 1
    assert sleeper.delays == [0.001]


@pytest.mark.asyncio
async def test_concurrent_calls_have_independent_policies() -> None:
    """Concurrent calls through one client never share failure counters."""
    transport = AsyncMockTransport(latency=0.001)
    transport.on("get_object_metadata", Err(transient_error()), Err(transient_error()), Ok(METADATA))
    transport.on("read_object", then=Err(transient_error()))
    client = AsyncRetryClient(
        transport,
        LimitedErrorCountRetryPolicy(2),
        _backoff(),
        sleep=AsyncRecordingSleeper(),
    )

    metadata, contents = await asyncio.gather(
        client.call(READ),
        client.call(ReadObjectRequest(bucket_name="test-bucket", object_name="test-object")),
    )

    assert metadata == Ok(METADATA)
    assert contents.unwrap_err().reason is TerminationReason.POLICY_EXHAUSTED
    assert transport.call_count("get_object_metadata") == 3
    assert transport.call_count("read_object") == 3


@pytest.mark.asyncio
async def test_backoff_does_not_block_other_tasks() -> None:
    """While one call waits in backoff, another call on the same loop completes."""
    transport = AsyncMockTransport()
    blocked = AsyncRecordingSleeper(block=True)
    transport.on("read_object", then=Err(transient_error()))
    transport.on("get_object_metadata", Ok(METADATA))

    waiting = asyncio.create_task(
        AsyncRetryClient(transport, LimitedErrorCountRetryPolicy(5), _backoff(), sleep=blocked).call(
            ReadObjectRequest(bucket_name="test-bucket", object_name="test-object"),
        )
    )
    await blocked.waiting.wait()

    result = await AsyncRetryClient(transport, sleep=AsyncRecordingSleeper()).call(READ)

    assert result == Ok(METADATA)
    waiting.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiting
