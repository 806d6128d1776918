"""Testing utilities for code built on the retry layer."""

from .mock import (
    AsyncMockTransport,
    AsyncRecordingSleeper,
    FakeClock,
    Invocation,
    MockTransport,
    RecordingSleeper,
    Reply,
    permanent_error,
    transient_error,
)

__all__ = [
    "MockTransport", "AsyncMockTransport", "Invocation", "Reply",
    "RecordingSleeper", "AsyncRecordingSleeper", "FakeClock",
    "transient_error", "permanent_error",
]
