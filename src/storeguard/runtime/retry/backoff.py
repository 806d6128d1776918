"""Backoff policies: how long to wait before the next attempt.

ExponentialBackoffPolicy grows the delay by ``scaling_factor`` after every
use and caps it at ``maximum_delay``. With jitter enabled each delay is drawn
uniformly from the upper half of the current bound, which keeps many callers
from retrying in lockstep. A jittered delay is never shorter than the one
before it, so the schedule stays non-decreasing for any scaling factor.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import timedelta
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from storeguard.foundation.config import BackoffSettings


@runtime_checkable
class BackoffPolicy(Protocol):
    """Computes the delay before the next retry of one call."""

    def on_completion(self) -> float:
        """Delay in seconds to wait, advancing the internal schedule."""
        ...

    def clone(self) -> BackoffPolicy:
        """Fresh policy with the same parameters and a reset schedule."""
        ...


def _seconds(value: float | timedelta) -> float:
    return value.total_seconds() if isinstance(value, timedelta) else float(value)


@dataclass(slots=True)
class ExponentialBackoffPolicy:
    """Exponential backoff with an upper bound and optional jitter.

    Delay = min(initial * scaling^n, maximum), jittered into
    [max(delay/2, previous), delay]

    Attributes:
        initial_delay: First delay in seconds (or timedelta)
        maximum_delay: Cap in seconds (or timedelta)
        scaling_factor: Growth per attempt, must be > 1
        jitter: Randomize within the current bound (default: True)
        rng: Random source (injectable for deterministic tests)

    Raises:
        ValueError: On invalid parameters; nothing is silently clamped.
    """

    initial_delay: float | timedelta
    maximum_delay: float | timedelta
    scaling_factor: float = 2.0
    jitter: bool = True
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)
    _initial: float = field(default=0.0, init=False, repr=False)
    _maximum: float = field(default=0.0, init=False, repr=False)
    _current: float = field(default=0.0, init=False, repr=False)
    _previous: float = field(default=0.0, init=False, repr=False)

    def __post_init__(self) -> None:
        self._initial = _seconds(self.initial_delay)
        self._maximum = _seconds(self.maximum_delay)
        if self.scaling_factor <= 1.0:
            raise ValueError(f"scaling_factor must be > 1.0, got {self.scaling_factor}")
        if self._initial < 0:
            raise ValueError(f"initial_delay must be >= 0, got {self._initial}")
        if self._initial > self._maximum:
            raise ValueError(
                f"initial_delay ({self._initial}s) must not exceed maximum_delay ({self._maximum}s)"
            )
        self._current = self._initial

    @property
    def current_delay(self) -> float:
        return self._current

    def on_completion(self) -> float:
        bound = min(self._current, self._maximum)
        if self.jitter:
            delay = self.rng.uniform(min(max(bound / 2, self._previous), bound), bound)
        else:
            delay = bound
        self._previous = delay
        self._current = min(self._current * self.scaling_factor, self._maximum)
        return min(delay, self._maximum)

    def clone(self) -> ExponentialBackoffPolicy:
        return ExponentialBackoffPolicy(
            self.initial_delay, self.maximum_delay, self.scaling_factor, self.jitter, self.rng,
        )


def backoff_policy_from_settings(settings: BackoffSettings) -> BackoffPolicy:
    """Build the backoff policy prototype described by configuration."""
    return ExponentialBackoffPolicy(
        initial_delay=settings.initial_delay,
        maximum_delay=settings.maximum_delay,
        scaling_factor=settings.scaling_factor,
        jitter=settings.jitter,
    )
