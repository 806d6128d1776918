"""Idempotency policies: is it safe to send this request more than once?

The classification is consulted once per call, before the first attempt.
Policies hold no state and can be shared freely across threads and tasks.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from storeguard.foundation.config import IdempotencySettings


class RequestKind(StrEnum):
    """Broad shape of a storage operation."""
    READ = "read"
    CREATE = "create"
    DELETE = "delete"
    UPDATE = "update"


@runtime_checkable
class IdempotencyFacts(Protocol):
    """What a request must expose for idempotency classification."""

    @property
    def kind(self) -> RequestKind: ...

    @property
    def replay_safe(self) -> bool: ...

    def has_precondition(self) -> bool: ...


@runtime_checkable
class IdempotencyPolicy(Protocol):
    def is_idempotent(self, request: IdempotencyFacts) -> bool: ...


class StrictIdempotencyPolicy:
    """Only retry requests whose repetition cannot change the end state.

    A request qualifies when it is read-only, when replaying it is harmless by
    construction (e.g. creating a bucket fails with ALREADY_EXISTS instead of
    duplicating it), or when it carries a generation/metageneration/etag
    precondition that makes a second application fail rather than apply twice.
    """

    __slots__ = ()

    def is_idempotent(self, request: IdempotencyFacts) -> bool:
        if request.kind is RequestKind.READ:
            return True
        return request.replay_safe or request.has_precondition()

    def __repr__(self) -> str:
        return "StrictIdempotencyPolicy()"


class AlwaysRetryIdempotencyPolicy:
    """Treat every request as idempotent; for callers that accept duplicates."""

    __slots__ = ()

    def is_idempotent(self, request: IdempotencyFacts) -> bool:
        return True

    def __repr__(self) -> str:
        return "AlwaysRetryIdempotencyPolicy()"


def idempotency_policy_from_settings(settings: IdempotencySettings) -> IdempotencyPolicy:
    if settings.kind == "always":
        return AlwaysRetryIdempotencyPolicy()
    return StrictIdempotencyPolicy()
