"""Tests for the retrying storage client."""

from __future__ import annotations

import threading

import pytest

from storeguard.foundation.config import (
    BackoffSettings,
    IdempotencySettings,
    RetrySettings,
    StoreguardSettings,
)
from storeguard.foundation.errors import Err, Ok, StatusCode, TerminationReason
from storeguard.foundation.testing import MockTransport, RecordingSleeper, permanent_error, transient_error
from storeguard.runtime.retry import (
    AlwaysRetryIdempotencyPolicy,
    ExponentialBackoffPolicy,
    LimitedErrorCountRetryPolicy,
    LimitedTimeRetryPolicy,
    StrictIdempotencyPolicy,
)
from storeguard.storage import (
    CreateBucketRequest,
    CreateNotificationRequest,
    DeleteNotificationRequest,
    DeleteObjectRequest,
    EmptyResponse,
    GetBucketMetadataRequest,
    GetObjectMetadataRequest,
    InsertObjectMediaRequest,
    ListNotificationsRequest,
    ListNotificationsResponse,
    NotificationMetadata,
    ObjectMetadata,
    PatchObjectAclRequest,
    RetryClient,
    StorageRequest,
    UpdateBucketAclRequest,
)


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def sleeper() -> RecordingSleeper:
    return RecordingSleeper()


@pytest.fixture
def client(transport: MockTransport, sleeper: RecordingSleeper) -> RetryClient:
    """Client tolerating three transient failures with microsecond backoff."""
    return RetryClient(
        transport,
        LimitedErrorCountRetryPolicy(3),
        ExponentialBackoffPolicy(0.000001, 0.000002, 2.0),
        sleep=sleeper,
    )


IDEMPOTENT = [
    GetBucketMetadataRequest(bucket_name="test-bucket"),
    CreateBucketRequest(project_id="test-project", bucket_name="test-bucket"),
    GetObjectMetadataRequest(bucket_name="test-bucket", object_name="test-object"),
    DeleteObjectRequest(bucket_name="test-bucket", object_name="test-object", generation=7),
    InsertObjectMediaRequest(
        bucket_name="test-bucket", object_name="test-object", contents=b"x", if_generation_match=0,
    ),
    UpdateBucketAclRequest(bucket_name="test-bucket", entity="user-x", role="READER"),
    ListNotificationsRequest(bucket_name="test-bucket"),
    DeleteNotificationRequest(bucket_name="test-bucket", notification_id="n1"),
]

NOT_IDEMPOTENT = [
    DeleteObjectRequest(bucket_name="test-bucket", object_name="test-object"),
    InsertObjectMediaRequest(bucket_name="test-bucket", object_name="test-object", contents=b"x"),
    PatchObjectAclRequest(bucket_name="test-bucket", object_name="test-object", entity="user-x", role="READER"),
    CreateNotificationRequest(bucket_name="test-bucket", topic="projects/p/topics/t"),
]


def _id(request: StorageRequest) -> str:
    return request.rpc


# ═════════════════════════════════════════════════════════════════════════════
# Error handling per operation
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize("request_", IDEMPOTENT + NOT_IDEMPOTENT, ids=_id)
def test_permanent_error_handling(
    request_: StorageRequest, client: RetryClient, transport: MockTransport,
) -> None:
    """Every operation gives up after one attempt on a permanent error."""
    transport.on(request_.rpc, then=Err(permanent_error()))

    result = client.call(request_)

    assert result.unwrap_err() == permanent_error()
    assert result.unwrap_err().reason is TerminationReason.PERMANENT_ERROR
    assert transport.call_count(request_.rpc) == 1


@pytest.mark.parametrize("request_", IDEMPOTENT, ids=_id)
def test_too_many_transients_handling(
    request_: StorageRequest, client: RetryClient, transport: MockTransport, sleeper: RecordingSleeper,
) -> None:
    """Idempotent operations are attempted limit + 1 times before giving up."""
    transport.on(request_.rpc, then=Err(transient_error()))

    result = client.call(request_)

    assert result.unwrap_err() == transient_error()
    assert result.unwrap_err().reason is TerminationReason.POLICY_EXHAUSTED
    assert transport.call_count(request_.rpc) == 4
    assert len(sleeper.delays) == 3
    assert all(delay <= 0.000002 for delay in sleeper.delays)


@pytest.mark.parametrize("request_", NOT_IDEMPOTENT, ids=_id)
def test_non_idempotent_error_handling(
    request_: StorageRequest, client: RetryClient, transport: MockTransport,
) -> None:
    """Unguarded mutations get exactly one attempt under the strict policy."""
    transport.on(request_.rpc, then=Err(transient_error()))

    result = client.call(request_)

    assert result.unwrap_err() == transient_error()
    assert result.unwrap_err().reason is TerminationReason.NON_IDEMPOTENT
    assert transport.call_count(request_.rpc) == 1


# ═════════════════════════════════════════════════════════════════════════════
# Success and payloads
# ═════════════════════════════════════════════════════════════════════════════


def test_payload_is_returned_unchanged(client: RetryClient, transport: MockTransport) -> None:
    metadata = ObjectMetadata(bucket="test-bucket", name="test-object", generation=3, size=11)
    transport.on("get_object_metadata", Err(transient_error()), Ok(metadata))

    result = client.call(GetObjectMetadataRequest(bucket_name="test-bucket", object_name="test-object"))

    assert result.unwrap() is metadata


def test_notifications_parse_service_payload(client: RetryClient, transport: MockTransport) -> None:
    """Notification payloads accept the service's camelCase self link."""
    notification = NotificationMetadata.model_validate({
        "id": "n1",
        "topic": "projects/p/topics/t",
        "payload_format": "JSON_API_V1",
        "selfLink": "https://storage.example/b/test-bucket/notificationConfigs/n1",
        "kind": "storage#notification",
    })
    transport.on("list_notifications", Ok(ListNotificationsResponse(items=[notification])))

    result = client.call(ListNotificationsRequest(bucket_name="test-bucket"))

    items = result.unwrap().items
    assert [n.id for n in items] == ["n1"]
    assert items[0].self_link.endswith("/n1")


def test_delete_returns_empty_response(client: RetryClient, transport: MockTransport) -> None:
    transport.on("delete_notification", Ok(EmptyResponse()))

    result = client.call(DeleteNotificationRequest(bucket_name="test-bucket", notification_id="n1"))

    assert result == Ok(EmptyResponse())


# ═════════════════════════════════════════════════════════════════════════════
# Policy ownership and construction
# ═════════════════════════════════════════════════════════════════════════════


def test_policies_are_cloned_per_call(transport: MockTransport, sleeper: RecordingSleeper) -> None:
    """A call that spends its budget leaves the next call's budget untouched."""
    prototype = LimitedErrorCountRetryPolicy(2)
    client = RetryClient(transport, prototype, ExponentialBackoffPolicy(0.0, 1.0, 2.0), sleep=sleeper)
    request = GetObjectMetadataRequest(bucket_name="test-bucket", object_name="test-object")
    transport.on(
        "get_object_metadata",
        *[Err(transient_error())] * 3,
        Err(transient_error()), Err(transient_error()), Ok(ObjectMetadata(bucket="b", name="o")),
    )

    assert client.call(request).unwrap_err().reason is TerminationReason.POLICY_EXHAUSTED
    assert client.call(request).is_ok()
    assert prototype.failure_count == 0
    assert transport.call_count() == 6


def test_unimplemented_rpc(sleeper: RecordingSleeper) -> None:
    """A transport without the request's method yields UNIMPLEMENTED without retrying."""

    class MetadataOnly:
        def __init__(self) -> None:
            self.calls = 0

        def get_object_metadata(self, request: GetObjectMetadataRequest) -> Ok:
            self.calls += 1
            return Ok(ObjectMetadata(bucket=request.bucket_name, name=request.object_name))

    raw = MetadataOnly()
    client = RetryClient(raw, LimitedErrorCountRetryPolicy(3), sleep=sleeper)

    result = client.call(DeleteNotificationRequest(bucket_name="test-bucket", notification_id="n1"))

    assert result.unwrap_err().code is StatusCode.UNIMPLEMENTED
    assert sleeper.delays == []
    assert raw.calls == 0
    assert client.raw is raw


def test_default_policies() -> None:
    """Without explicit policies the client uses time-limited strict retries."""
    client = RetryClient(MockTransport())
    assert isinstance(client.idempotency_policy, StrictIdempotencyPolicy)
    assert isinstance(client._retry_policy, LimitedTimeRetryPolicy)
    assert isinstance(client._backoff_policy, ExponentialBackoffPolicy)


def test_from_settings(transport: MockTransport, sleeper: RecordingSleeper) -> None:
    """Policies built from configuration govern the calls."""
    settings = StoreguardSettings(
        retry=RetrySettings(kind="limited-error-count", maximum_failures=1),
        backoff=BackoffSettings(initial_delay=0.0, maximum_delay=1.0, jitter=False),
        idempotency=IdempotencySettings(kind="always"),
    )
    client = RetryClient.from_settings(transport, settings, sleep=sleeper)
    transport.on("delete_object", then=Err(transient_error()))

    result = client.call(DeleteObjectRequest(bucket_name="test-bucket", object_name="test-object"))

    assert isinstance(client.idempotency_policy, AlwaysRetryIdempotencyPolicy)
    assert result.unwrap_err().reason is TerminationReason.POLICY_EXHAUSTED
    assert transport.call_count() == 2
    assert sleeper.delays == [0.0]


def test_cancel_stops_call_before_next_attempt(transport: MockTransport, sleeper: RecordingSleeper) -> None:
    """Setting the event while the call backs off ends it with CANCELLED."""
    cancel = threading.Event()
    client = RetryClient(
        transport,
        LimitedErrorCountRetryPolicy(5),
        ExponentialBackoffPolicy(0.5, 1.0, 2.0, jitter=False),
        sleep=sleeper,
        on_retry=lambda attempt, status, delay: cancel.set(),
    )
    request = GetObjectMetadataRequest(bucket_name="test-bucket", object_name="test-object")
    transport.on("get_object_metadata", then=Err(transient_error()))

    result = client.call(request, cancel=cancel)

    assert result.unwrap_err().code is StatusCode.CANCELLED
    assert result.unwrap_err().reason is TerminationReason.CANCELLED
    assert transport.call_count() == 1
    assert sleeper.delays == [0.5]

    assert client.call(request, cancel=cancel).unwrap_err().reason is TerminationReason.CANCELLED
    assert transport.call_count() == 1
