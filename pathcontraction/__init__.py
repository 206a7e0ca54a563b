"""
pathcontraction: Evaluating Huge Iteration Counts of Deterministic Transitions
==============================================================================

Puzzles and simulations often ask for the state after applying a
transition a billion (or 10¹⁸) times. Any deterministic transition over
a finite state space eventually cycles, so the long tail of applications
collapses to a modular offset into the cycle.

Core Components:
    - cycles: Brent cycle detection, trace-based path contraction,
      shortcut contraction, state-distribution iteration
    - utils: timing, formatting and state-key helpers

Usage:
    >>> import pathcontraction
    >>> pathcontraction.apply_n_times(1, lambda x: (x * 2) % 7, 1_000_000)
    2
    >>> pathcontraction.detect_cycle(1, lambda x: (x * 2) % 7)
    CycleInfo(preperiod=0, period=3)
"""

__version__ = "1.0.0"

from pathcontraction.cycles import (
    DEFAULT_MAX_STEPS,
    CycleDetector,
    CycleInfo,
    DetectionResult,
    DetectionStatus,
    NotFound,
    detect_cycle,
    ContractionResult,
    ContractionStatus,
    Orbit,
    PathContraction,
    apply_n_times,
    ShortcutContraction,
    contract_path,
    iterate_states,
    state_iteration,
)
from pathcontraction.utils import Timer, ndarray_key

__all__ = [
    'DEFAULT_MAX_STEPS',
    'CycleDetector',
    'CycleInfo',
    'DetectionResult',
    'DetectionStatus',
    'NotFound',
    'detect_cycle',
    'ContractionResult',
    'ContractionStatus',
    'Orbit',
    'PathContraction',
    'apply_n_times',
    'ShortcutContraction',
    'contract_path',
    'iterate_states',
    'state_iteration',
    'Timer',
    'ndarray_key',
]
