"""Tests for the exponential backoff policy."""

from __future__ import annotations

import random
from datetime import timedelta

import pytest

from storeguard.runtime.retry import BackoffPolicy, ExponentialBackoffPolicy


def test_delays_grow_by_scaling_factor() -> None:
    """Without jitter the schedule is initial * scaling^n."""
    policy = ExponentialBackoffPolicy(1.0, 100.0, 2.0, jitter=False)
    assert [policy.on_completion() for _ in range(5)] == [1.0, 2.0, 4.0, 8.0, 16.0]


def test_delays_are_capped_at_maximum() -> None:
    """The delay stops growing once it reaches maximum_delay."""
    policy = ExponentialBackoffPolicy(1.0, 5.0, 3.0, jitter=False)
    assert [policy.on_completion() for _ in range(4)] == [1.0, 3.0, 5.0, 5.0]


def test_never_exceeds_maximum_after_many_calls() -> None:
    """Even after 1000 calls the delay stays within the cap."""
    for jitter in (False, True):
        policy = ExponentialBackoffPolicy(0.001, 2.0, 1.5, jitter=jitter, rng=random.Random(7))
        delays = [policy.on_completion() for _ in range(1000)]
        assert max(delays) <= 2.0
        assert policy.current_delay == 2.0


def test_delays_are_monotonic_without_jitter() -> None:
    policy = ExponentialBackoffPolicy(0.01, 1.0, 1.7, jitter=False)
    delays = [policy.on_completion() for _ in range(50)]
    assert delays == sorted(delays)


def test_jitter_draws_within_upper_half_of_bound() -> None:
    """Jittered delays fall in [bound/2, bound] of the current step."""
    policy = ExponentialBackoffPolicy(1.0, 64.0, 2.0, jitter=True, rng=random.Random(1234))
    for bound in (1.0, 2.0, 4.0, 8.0, 16.0, 32.0, 64.0, 64.0):
        delay = policy.on_completion()
        assert bound / 2 <= delay <= bound


@pytest.mark.parametrize("seed", [3, 11, 2024])
def test_jittered_delays_never_shrink_with_slow_scaling(seed: int) -> None:
    """With scaling below 2 the halves of consecutive bounds overlap; delays still never decrease."""
    policy = ExponentialBackoffPolicy(1.0, 50.0, 1.5, jitter=True, rng=random.Random(seed))
    bound = 1.0
    previous = 0.0
    for _ in range(40):
        delay = policy.on_completion()
        assert delay >= previous
        assert bound / 2 <= delay <= bound
        previous = delay
        bound = min(bound * 1.5, 50.0)


def test_clone_resets_jitter_floor() -> None:
    """A clone starts its jittered schedule from the initial bound again."""
    policy = ExponentialBackoffPolicy(1.0, 8.0, 2.0, jitter=True, rng=random.Random(5))
    for _ in range(10):
        policy.on_completion()
    assert policy.clone().on_completion() <= 1.0


def test_accepts_timedelta() -> None:
    policy = ExponentialBackoffPolicy(timedelta(milliseconds=500), timedelta(seconds=2), 2.0, jitter=False)
    assert [policy.on_completion() for _ in range(3)] == [0.5, 1.0, 2.0]


@pytest.mark.parametrize("scaling", [1.0, 0.5, 0.0, -2.0])
def test_rejects_scaling_factor_not_above_one(scaling: float) -> None:
    with pytest.raises(ValueError, match="scaling_factor"):
        ExponentialBackoffPolicy(1.0, 10.0, scaling)


def test_rejects_initial_above_maximum() -> None:
    """Inverted bounds fail at construction instead of being clamped."""
    with pytest.raises(ValueError, match="must not exceed"):
        ExponentialBackoffPolicy(10.0, 1.0, 2.0)


def test_rejects_negative_initial_delay() -> None:
    with pytest.raises(ValueError):
        ExponentialBackoffPolicy(-1.0, 1.0, 2.0)


def test_clone_restarts_schedule() -> None:
    """Clones start from initial_delay regardless of the prototype's progress."""
    prototype = ExponentialBackoffPolicy(1.0, 100.0, 2.0, jitter=False)
    for _ in range(4):
        prototype.on_completion()

    fresh = prototype.clone()
    assert isinstance(fresh, BackoffPolicy)
    assert fresh.on_completion() == 1.0
    assert prototype.on_completion() == 16.0
