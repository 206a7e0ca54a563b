"""Timing, formatting and state-key helpers."""

from pathcontraction.utils.helpers import (
    Timer,
    check_count,
    check_transition,
    format_ns,
    format_speedup,
    identity_key,
    ndarray_key,
    resolve_key,
)

__all__ = [
    'Timer',
    'check_count',
    'check_transition',
    'format_ns',
    'format_speedup',
    'identity_key',
    'ndarray_key',
    'resolve_key',
]
