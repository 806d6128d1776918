"""Value-or-failure return channel.

Every transport method and the retry loop return ``StatusOr[T]``, an alias
for ``Result[T, Status]``. A result is exactly one of two variants:

- ``Ok(value)``: the call produced a payload
- ``Err(error)``: the call failed; for storage calls the error is a Status

Both variants support structural pattern matching:

    >>> match client.call(request):
    ...     case Ok(meta):
    ...         print(meta.generation)
    ...     case Err(status):
    ...         print(status.reason)
"""

from __future__ import annotations

from typing import Any, Callable, Generic, NoReturn, TypeAlias, TypeVar

from .status import Status

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")


class Result(Generic[T, E]):
    """Common interface of ``Ok`` and ``Err``. Not instantiated directly."""

    __slots__ = ()

    def is_ok(self) -> bool:
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        return isinstance(self, Err)

    def unwrap(self) -> T:
        """Payload of an Ok; RuntimeError for an Err."""
        raise NotImplementedError

    def unwrap_err(self) -> E:
        """Error of an Err; RuntimeError for an Ok."""
        raise NotImplementedError

    def unwrap_or(self, default: T) -> T:
        raise NotImplementedError

    def ok(self) -> T | None:
        raise NotImplementedError

    def err(self) -> E | None:
        raise NotImplementedError

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        raise NotImplementedError

    def map_err(self, f: Callable[[E], F]) -> Result[T, F]:
        raise NotImplementedError

    def flat_map(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Chain a step that can itself fail; an Err skips it."""
        raise NotImplementedError

    def and_then(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return self.flat_map(f)

    def match(self, *, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        raise NotImplementedError


class Ok(Result[T, Any]):
    __slots__ = ("value",)
    __match_args__ = ("value",)

    def __init__(self, value: T) -> None:
        self.value = value

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise RuntimeError(f"unwrap_err() called on {self!r}")

    def unwrap_or(self, default: T) -> T:
        return self.value

    def ok(self) -> T:
        return self.value

    def err(self) -> None:
        return None

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))

    def map_err(self, f: Callable[[Any], F]) -> Ok[T]:
        return self

    def flat_map(self, f: Callable[[T], Result[U, Any]]) -> Result[U, Any]:
        return f(self.value)

    def match(self, *, ok: Callable[[T], U], err: Callable[[Any], U]) -> U:
        return ok(self.value)

    def __bool__(self) -> bool:
        return True

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Ok) and self.value == other.value

    def __hash__(self) -> int:
        return hash((Ok, self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


class Err(Result[Any, E]):
    __slots__ = ("error",)
    __match_args__ = ("error",)

    def __init__(self, error: E) -> None:
        self.error = error

    def unwrap(self) -> NoReturn:
        raise RuntimeError(f"unwrap() called on {self!r}")

    def unwrap_err(self) -> E:
        return self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def ok(self) -> None:
        return None

    def err(self) -> E:
        return self.error

    def map(self, f: Callable[[Any], U]) -> Err[E]:
        return self

    def map_err(self, f: Callable[[E], F]) -> Err[F]:
        return Err(f(self.error))

    def flat_map(self, f: Callable[[Any], Result[U, E]]) -> Err[E]:
        return self

    def match(self, *, ok: Callable[[Any], U], err: Callable[[E], U]) -> U:
        return err(self.error)

    def __bool__(self) -> bool:
        return False

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Err) and self.error == other.error

    def __hash__(self) -> int:
        return hash((Err, self.error))

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


StatusOr: TypeAlias = Result[T, Status]
