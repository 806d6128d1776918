"""Status codes and the Status value used as the return channel for every call.

StatusCode values match the well-known gRPC codes so statuses can be mapped
to and from remote responses without translation tables.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

if TYPE_CHECKING:
    from .result import Result


class StatusCode(IntEnum):
    """Well-known remote-call outcomes (gRPC-compatible values)."""
    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    UNAUTHENTICATED = 16
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15

    def __str__(self) -> str:
        return self.name


class TerminationReason(StrEnum):
    """Why the retry loop stopped on a failure."""
    PERMANENT_ERROR = "PERMANENT_ERROR"
    NON_IDEMPOTENT = "NON_IDEMPOTENT"
    POLICY_EXHAUSTED = "POLICY_EXHAUSTED"
    CONTRACT_VIOLATION = "CONTRACT_VIOLATION"
    CANCELLED = "CANCELLED"


class Status(BaseModel):
    """Code and message describing the outcome of a remote request.

    Immutable. Equality compares ``code`` and ``message`` only; ``reason`` is
    an annotation attached by the retry loop when it gives up on a call.
    An OK status never carries a message; one given is dropped.

    Example:
        >>> Status(StatusCode.UNAVAILABLE, "try again").ok()
        False
        >>> str(Status(StatusCode.NOT_FOUND, "no such object"))
        'no such object [NOT_FOUND]'
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        revalidate_instances="never",
        json_schema_extra={
            "title": "Status",
            "examples": [{"code": 14, "message": "service unavailable"}],
        },
    )

    code: StatusCode = StatusCode.OK
    message: str = ""
    reason: TerminationReason | None = Field(default=None, repr=False)

    def __init__(
        self,
        code: StatusCode = StatusCode.OK,
        message: str = "",
        /,
        **data: Any,
    ) -> None:
        data.setdefault("code", code)
        data.setdefault("message", message)
        super().__init__(**data)

    @model_validator(mode="before")
    @classmethod
    def _ok_has_no_message(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("code", StatusCode.OK) == StatusCode.OK:
            return {**data, "message": ""}
        return data

    @classmethod
    def success(cls) -> Status:
        return cls(StatusCode.OK, "")

    def ok(self) -> bool:
        return self.code == StatusCode.OK

    def with_reason(self, reason: TerminationReason) -> Status:
        """Return a copy annotated with the reason the call terminated."""
        return self.model_copy(update={"reason": reason})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Status):
            return NotImplemented
        return self.code == other.code and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.code, self.message))

    def __str__(self) -> str:
        return f"{self.message} [{self.code}]"


class StatusError(Exception):
    """Exception carrying a failed Status, for callers that prefer raising."""

    def __init__(self, status: Status) -> None:
        super().__init__(str(status))
        self.status = status


def status_from_exception(exc: Exception) -> Status:
    """Map an exception escaping a transport call to a Status.

    Timeouts and connection-level OSErrors are transient network conditions
    (DEADLINE_EXCEEDED, UNAVAILABLE). Anything else is UNKNOWN.
    """
    if isinstance(exc, StatusError):
        return exc.status
    message = f"{type(exc).__name__}: {exc}"
    if isinstance(exc, TimeoutError):
        return Status(StatusCode.DEADLINE_EXCEEDED, message)
    if isinstance(exc, OSError):
        return Status(StatusCode.UNAVAILABLE, message)
    return Status(StatusCode.UNKNOWN, message)


def value_or_raise(result: Result[Any, Status]) -> Any:
    """Return the success value, or raise StatusError with the failure."""
    if result.is_ok():
        return result.unwrap()
    raise StatusError(result.unwrap_err())
