"""
Cycle Detector
==============

Finds the pre-period and period of the orbit of a deterministic transition.

Theoretical Foundation:
    Let f: S → S be a function and x₀ ∈ S. The orbit

        x₀, f(x₀), f²(x₀), ...

    of any point in a finite state space is eventually periodic: there
    are unique minimal μ ≥ 0 and λ ≥ 1 such that

        x_μ = x_{μ+λ}

    μ is the pre-period (length of the tail leading into the cycle) and
    λ is the period (length of the cycle itself).

Brent's algorithm:
    Phase 1 moves a single hare forward and compares it against a
    checkpoint (the tortoise). The tortoise is teleported to the hare
    whenever the number of steps since the last teleport reaches the
    current power of two, and the power doubles. The first time the hare
    meets the tortoise, the steps since the last teleport are exactly λ.

    Phase 2 restarts two cursors at x₀, advances one of them λ steps,
    then moves both in lockstep until they agree. The number of lockstep
    moves is μ.

    Compared with Floyd's tortoise-and-hare it evaluates f roughly half
    as often, since only one pointer advances in phase 1.

    Cost: O(μ + λ) evaluations of f and O(1) memory.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Hashable, Optional, TypeVar, Union

from pathcontraction.utils.helpers import Timer, check_count, check_transition, resolve_key

S = TypeVar('S')
logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 10_000_000


@dataclass(frozen=True)
class CycleInfo:
    """Minimal pre-period and period of an orbit."""
    preperiod: int
    period: int

    def __post_init__(self):
        if self.preperiod < 0:
            raise ValueError(f"preperiod must be non-negative, got {self.preperiod}")
        if self.period < 1:
            raise ValueError(f"period must be positive, got {self.period}")

    @property
    def tail_length(self) -> int:
        """Number of distinct states on the orbit (prefix plus cycle)."""
        return self.preperiod + self.period

    def reduce(self, n: int) -> int:
        """
        Map a step count onto the recorded orbit.

        Returns the smallest index i < preperiod + period such that
        fⁱ(x₀) == fⁿ(x₀).
        """
        if n < self.preperiod:
            return n
        return self.preperiod + (n - self.preperiod) % self.period


@dataclass(frozen=True)
class NotFound:
    """
    The step bound ran out before a repeat was recognised.

    Either the bound is too small or the transition does not cycle
    within a practical horizon. For trace-based contraction the bound is
    reached only if no state repeats within max_steps calls. Brent's
    search notices a repeat later than that (see CycleDetector), so a
    detector can return NotFound on an orbit that an Orbit with the same
    bound resolves. Falsy, so ``if not result`` works.
    """
    steps: int
    max_steps: int

    def __bool__(self) -> bool:
        return False


class DetectionStatus(Enum):
    """Outcome of a cycle detection run."""
    FOUND = auto()        # CycleInfo available
    NOT_FOUND = auto()    # Step bound exhausted before a repeat was recognised


@dataclass
class DetectionResult:
    """Result of a cycle detection run."""
    status: DetectionStatus
    cycle: Optional[CycleInfo]
    transition_calls: int      # Both phases
    search_calls: int          # Phase 1 only, the part capped by max_steps
    max_steps: int
    wall_time_seconds: float

    @property
    def outcome(self) -> Union[CycleInfo, NotFound]:
        """The CycleInfo when found, otherwise a NotFound carrying the call count."""
        if self.cycle is None:
            return NotFound(steps=self.transition_calls, max_steps=self.max_steps)
        return self.cycle


class CycleDetector:
    """
    Brent cycle detection with a bounded search.

    max_steps caps the phase-1 calls only. Phase 1 recognises the cycle
    once the checkpoint sits on it and the trial length has reached λ.
    The checkpoint moves at step 2ᵏ - 1 for the first power 2ᵏ with
    2ᵏ > μ and 2ᵏ ≥ λ, so phase 1 ends after 2ᵏ - 1 + λ calls: more than
    μ + λ, and for λ just above a power of two close to 3λ. Phase 2 then
    adds exactly λ + 2μ uncapped calls.

    Example: for f(x) = (x + 1) % 1000 from 0 (μ = 0, λ = 1000) the
    checkpoint resets at step 1023 and the hare meets it at step 2023,
    so max_steps must be at least 2023, although the first repeat
    already occurs at step 1000.

    Usage:
        detector = CycleDetector(max_steps=1000)
        info = detector.detect(1, lambda x: (x * 2) % 7)
        print(info.preperiod, info.period)   # 0 3
    """

    def __init__(
        self,
        max_steps: int = DEFAULT_MAX_STEPS,
        key: Optional[Callable[[Any], Hashable]] = None,
    ):
        self.max_steps = check_count(max_steps, 'max_steps', 1)
        self.key = resolve_key(key)

    def detect(self, x0: S, f: Callable[[S], S]) -> Union[CycleInfo, NotFound]:
        """Return the CycleInfo of the orbit of x0, or NotFound."""
        return self.run(x0, f).outcome

    def run(self, x0: S, f: Callable[[S], S]) -> DetectionResult:
        """
        Run Brent's algorithm.

        Args:
            x0: Starting state
            f: Deterministic transition S → S

        Returns:
            DetectionResult with status, cycle info and call count
        """
        check_transition(f)
        key = self.key

        with Timer() as timer:
            period, calls = self._find_period(x0, f, key)
            search_calls = calls
            if period is None:
                cycle = None
            else:
                preperiod, extra = self._find_preperiod(x0, f, key, period)
                calls += extra
                cycle = CycleInfo(preperiod=preperiod, period=period)

        if cycle is None:
            logger.debug(
                f"No cycle within {self.max_steps} steps ({calls} transition calls)"
            )
            status = DetectionStatus.NOT_FOUND
        else:
            logger.debug(
                f"Found cycle: preperiod={cycle.preperiod} period={cycle.period} "
                f"({calls} transition calls)"
            )
            status = DetectionStatus.FOUND

        return DetectionResult(
            status=status,
            cycle=cycle,
            transition_calls=calls,
            search_calls=search_calls,
            max_steps=self.max_steps,
            wall_time_seconds=timer.elapsed_s,
        )

    def _find_period(self, x0, f, key):
        """Phase 1: returns (λ or None, transition calls)."""
        power = 1
        period = 1
        tortoise = key(x0)
        hare = f(x0)
        calls = 1
        hare_key = key(hare)

        while tortoise != hare_key:
            if calls >= self.max_steps:
                return None, calls
            if power == period:
                # Start a new power of two
                tortoise = hare_key
                power *= 2
                period = 0
            hare = f(hare)
            hare_key = key(hare)
            calls += 1
            period += 1

        return period, calls

    def _find_preperiod(self, x0, f, key, period):
        """Phase 2: returns (μ, transition calls)."""
        tortoise = x0
        hare = x0
        calls = 0
        for _ in range(period):
            hare = f(hare)
            calls += 1

        preperiod = 0
        while key(tortoise) != key(hare):
            tortoise = f(tortoise)
            hare = f(hare)
            calls += 2
            preperiod += 1

        return preperiod, calls


def detect_cycle(
    x0: S,
    f: Callable[[S], S],
    max_steps: int = DEFAULT_MAX_STEPS,
    key: Optional[Callable[[Any], Hashable]] = None,
) -> Union[CycleInfo, NotFound]:
    """
    Detect the cycle in the orbit of x0 under f.

    Returns CycleInfo(preperiod=μ, period=λ), or NotFound if Brent's
    search phase does not recognise a repeat within max_steps calls.
    That phase can need two to three times μ + λ calls: with max_steps=1000,
    f(x) = (x + 1) % 1000 yields NotFound although the orbit repeats at
    step 1000. Use Orbit(x0, f, max_steps).explore() when the bound
    must mean "no repeat within max_steps steps".
    """
    return CycleDetector(max_steps=max_steps, key=key).detect(x0, f)
