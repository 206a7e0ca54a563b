"""Utility helpers for pathcontraction."""

import numbers
import time
from typing import Any, Callable, Hashable, Optional

import numpy as np


class Timer:
    """High-resolution timer for engine runs and benchmarks."""

    def __init__(self):
        self.start_ns = 0
        self.end_ns = 0

    def __enter__(self):
        self.start_ns = time.perf_counter_ns()
        return self

    def __exit__(self, *exc):
        self.end_ns = time.perf_counter_ns()

    @property
    def elapsed_ns(self) -> int:
        return self.end_ns - self.start_ns

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed_ns / 1_000_000.0

    @property
    def elapsed_s(self) -> float:
        return self.elapsed_ns / 1_000_000_000.0


def identity_key(state: Any) -> Hashable:
    """Default state key: the state itself."""
    return state


def ndarray_key(state: np.ndarray) -> Hashable:
    """
    Hashable key for a numpy array state.

    Arrays are unhashable and compare elementwise, so grid-shaped puzzle
    states are keyed by shape, dtype and raw bytes instead. Two arrays map
    to the same key exactly when they are equal and share a dtype.
    """
    arr = np.ascontiguousarray(state)
    return (arr.shape, arr.dtype.str, arr.tobytes())


def resolve_key(key: Optional[Callable[[Any], Hashable]]) -> Callable[[Any], Hashable]:
    """Return the state key to use, defaulting to identity_key."""
    if key is None:
        return identity_key
    if not callable(key):
        raise TypeError(f"key must be callable, got {type(key).__name__}")
    return key


def check_count(value: Any, name: str, minimum: int) -> int:
    """Validate an integer argument and return it as a plain int."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    value = int(value)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def check_transition(f: Any) -> None:
    """Reject a transition that cannot be called."""
    if not callable(f):
        raise TypeError(f"transition must be callable, got {type(f).__name__}")


def format_ns(ns: float) -> str:
    """Format nanoseconds into a human-readable string."""
    if ns < 1_000:
        return f"{ns:.0f} ns"
    elif ns < 1_000_000:
        return f"{ns / 1_000:.1f} µs"
    elif ns < 1_000_000_000:
        return f"{ns / 1_000_000:.2f} ms"
    else:
        return f"{ns / 1_000_000_000:.3f} s"


def format_speedup(baseline_ns: float, optimized_ns: float) -> str:
    """Format a speedup ratio."""
    if optimized_ns <= 0:
        return "∞x"
    ratio = baseline_ns / optimized_ns
    if ratio >= 1:
        return f"{ratio:.2f}x faster"
    else:
        return f"{1/ratio:.2f}x slower"
