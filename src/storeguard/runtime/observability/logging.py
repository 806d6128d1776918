"""Structured logging for storage calls with context propagation.

- Key-value context bound to loggers (``bind``) or to a scope (``log_context``)
- Human-readable console output for development, JSON Lines for production

Quick Start:
    >>> from storeguard.runtime.observability import get_logger, configure_logging
    >>>
    >>> configure_logging(format="console")  # or "json" for production
    >>> log = get_logger("storeguard.retry")
    >>> log.info("retrying", attempt=2, delay=0.5)
    >>>
    >>> with log_context(request_id="abc123"):
    ...     log.info("processing")  # includes request_id
"""

from __future__ import annotations

import logging
import sys
import time
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, NamedTuple, Protocol, TextIO, runtime_checkable

import orjson

if TYPE_CHECKING:
    from types import TracebackType

    from storeguard.foundation.config import LoggingSettings

JsonDict = dict[str, Any]

# Context var for scoped context (persists across async calls)
_log_context: ContextVar[JsonDict] = ContextVar("log_context", default={})


# ─────────────────────────────────────────────────────────────────────────────
# Core Logger
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class BoundLogger:
    """Structured logger with bound context.

    Immutable - bind() returns a new logger with merged context.

    Example:
        >>> log = BoundLogger(context={"logger": "storeguard.retry"})
        >>> log.bind(rpc="delete_object").warning("call failed", attempts=1)
        # => 10:30:45.123 [warning] call failed attempts=1 logger="storeguard.retry" rpc="delete_object"
    """

    context: JsonDict = field(default_factory=dict)
    _renderer: LogRenderer | None = None
    _level: int | None = None

    def bind(self, **kw: Any) -> BoundLogger:
        """Create new logger with additional bound context."""
        return BoundLogger(
            context={**self.context, **kw},
            _renderer=self._renderer,
            _level=self._level,
        )

    def unbind(self, *keys: str) -> BoundLogger:
        return BoundLogger(
            context={k: v for k, v in self.context.items() if k not in keys},
            _renderer=self._renderer,
            _level=self._level,
        )

    def is_enabled_for(self, level: int) -> bool:
        return level >= (self._level if self._level is not None else _default_level)

    def _log(self, level: int, event: str, **kw: Any) -> None:
        if not self.is_enabled_for(level):
            return

        # Merge contexts: scoped -> bound -> call-site
        merged = {**_log_context.get(), **self.context, **kw}
        entry = LogEntry(
            timestamp=time.time(),
            level=logging.getLevelName(level).lower(),
            event=event,
            context=merged,
        )
        (self._renderer or _get_renderer()).render(entry)

    def debug(self, event: str, **kw: Any) -> None:
        self._log(logging.DEBUG, event, **kw)

    def info(self, event: str, **kw: Any) -> None:
        self._log(logging.INFO, event, **kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._log(logging.WARNING, event, **kw)

    def error(self, event: str, **kw: Any) -> None:
        self._log(logging.ERROR, event, **kw)


@dataclass(slots=True)
class LogEntry:
    """One log line: level, event name and merged key-value context."""

    timestamp: float
    level: str
    event: str
    context: JsonDict

    def as_dict(self) -> JsonDict:
        return {
            "timestamp": datetime.fromtimestamp(self.timestamp, tz=UTC).isoformat(),
            "level": self.level,
            "event": self.event,
            **self.context,
        }

    def clock(self) -> str:
        """Wall time as HH:MM:SS.mmm (UTC)."""
        return datetime.fromtimestamp(self.timestamp, tz=UTC).strftime("%H:%M:%S.%f")[:-3]


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


@runtime_checkable
class LogRenderer(Protocol):
    def render(self, entry: LogEntry) -> None: ...


class _Palette(NamedTuple):
    reset: str = ""
    dim: str = ""
    key: str = ""
    debug: str = ""
    info: str = ""
    warning: str = ""
    error: str = ""

    def level(self, name: str) -> str:
        return getattr(self, name, "")


_ANSI = _Palette(
    reset="\033[0m",
    dim="\033[2m",
    key="\033[36m",
    debug="\033[2m",
    info="\033[32m",
    warning="\033[33m",
    error="\033[31m",
)
_PLAIN = _Palette()

# Keys shown first on console lines, in this order
_LEADING_KEYS = ("rpc", "attempt", "attempts", "reason", "code", "delay")


@dataclass(slots=True)
class ConsoleRenderer:
    """Development output: ``12:00:01.250 [info] retrying rpc="read_object" attempt=1 ...``"""

    output: TextIO = field(default_factory=lambda: sys.stderr)
    colors: bool | None = None  # None = colors iff output is a TTY
    show_timestamp: bool = True

    def __post_init__(self) -> None:
        if self.colors is None:
            isatty = getattr(self.output, "isatty", None)
            self.colors = bool(isatty and isatty())

    def render(self, entry: LogEntry) -> None:
        p = _ANSI if self.colors else _PLAIN
        head = f"{p.level(entry.level)}[{entry.level}]{p.reset} {entry.event}"
        if self.show_timestamp:
            head = f"{p.dim}{entry.clock()}{p.reset} {head}"
        pairs = " ".join(f"{p.key}{k}{p.reset}={_format_value(v)}" for k, v in _ordered(entry.context))
        print(f"{head} {pairs}" if pairs else head, file=self.output)


@dataclass(slots=True)
class JsonRenderer:
    """JSON Lines output; values orjson cannot encode fall back to str()."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        line = orjson.dumps(entry.as_dict(), default=str, option=orjson.OPT_NON_STR_KEYS)
        self.output.write(line.decode() + "\n")


@dataclass(slots=True)
class NoOpRenderer:
    """Discards everything."""

    def render(self, entry: LogEntry) -> None:
        pass


# ─────────────────────────────────────────────────────────────────────────────
# Global Configuration
# ─────────────────────────────────────────────────────────────────────────────


_renderer: LogRenderer | None = None
_default_level: int = logging.INFO


def configure_logging(
    format: str = "console",  # noqa: A002 - matches settings field name
    level: str = "INFO",
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
) -> LogRenderer:
    """Configure process-wide structured logging.

    Args:
        format: "console" (human), "json" (machine), or "none"
        level: Minimum level - DEBUG, INFO, WARNING, ERROR
        output: Stream (default: stderr for console, stdout for json)
        colors: Force colors on/off (None = auto-detect)

    Raises:
        ValueError: On an unknown format
    """
    global _renderer, _default_level

    renderer: LogRenderer
    if format == "console":
        renderer = ConsoleRenderer(output=output or sys.stderr, colors=colors)
    elif format == "json":
        renderer = JsonRenderer(output=output or sys.stdout)
    elif format == "none":
        renderer = NoOpRenderer()
    else:
        raise ValueError(f"Unknown format: {format}. Use 'console', 'json', or 'none'")

    _default_level = getattr(logging, level.upper(), logging.INFO)
    _renderer = renderer
    return renderer


def configure_logging_from_settings(settings: LoggingSettings) -> LogRenderer:
    return configure_logging(format=settings.format, level=settings.level)


def get_logger(name: str | None = None, **initial_context: Any) -> BoundLogger:
    """Get a structured logger; ``name`` is bound as the 'logger' key."""
    ctx = dict(initial_context)
    if name:
        ctx["logger"] = name
    return BoundLogger(context=ctx)


def _get_renderer() -> LogRenderer:
    global _renderer
    if _renderer is None:
        _renderer = ConsoleRenderer()
    return _renderer


class log_context:
    """Context manager adding key-value pairs to every entry in its scope.

    Example:
        >>> with log_context(request_id="abc123"):
        ...     log.info("processing")  # includes request_id
    """

    __slots__ = ("_ctx", "_token")

    def __init__(self, **kw: Any) -> None:
        self._ctx: JsonDict = dict(kw)
        self._token: object | None = None

    def __enter__(self) -> log_context:
        self._token = _log_context.set({**_log_context.get(), **self._ctx})
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._token is not None:
            _log_context.reset(self._token)  # type: ignore[arg-type]


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


def _ordered(context: JsonDict) -> list[tuple[str, Any]]:
    leading = [(k, context[k]) for k in _LEADING_KEYS if k in context]
    rest = sorted((k, v) for k, v in context.items() if k not in _LEADING_KEYS)
    return leading + rest


def _format_value(v: object) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, Enum):
        return str(v)
    if isinstance(v, str):
        return f'"{v}"'
    if isinstance(v, float):
        return f"{v:.3f}"
    return str(v)
