"""
Path Contraction
================

Evaluates fⁿ(x₀) for astronomically large n without performing n steps.

Theoretical Foundation:
    A deterministic transition f over a finite state space sends every
    orbit into a cycle after a pre-period μ, with period λ:

        x_{μ+λ} = x_μ

    Hence for every n ≥ μ:

        fⁿ(x₀) = f^{μ + ((n - μ) mod λ)}(x₀)

    and the right-hand exponent is always < μ + λ.

Procedure:
    The orbit is simulated once while every state is recorded in a trace
    and in a mapping state → step index. Either n is reached first (the
    answer is simply the last recorded state) or a state repeats. The
    earlier index of the repeated state is μ and the current index is
    μ + λ, so cycle detection falls out of the same pass. The reduced
    index lies inside the recorded trace, so no further simulation is
    needed.

    Cost: O(min(n, μ + λ)) evaluations of f and O(min(n, μ + λ)) memory.

Step bound:
    Unbounded state spaces never repeat. Every query is capped by
    max_steps transition calls, and a cap breach yields NotFound instead
    of a guessed state.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Dict, Generic, Hashable, List, Optional, TypeVar, Union

from pathcontraction.cycles.cycle_detector import (
    DEFAULT_MAX_STEPS,
    CycleInfo,
    NotFound,
)
from pathcontraction.utils.helpers import Timer, check_count, check_transition, resolve_key

S = TypeVar('S')
logger = logging.getLogger(__name__)


class ContractionStatus(Enum):
    """How a contraction query was answered."""
    DIRECT = auto()          # n reached by plain simulation
    CYCLE_REDUCED = auto()   # n reduced modulo the period
    SHORTCUT = auto()        # n reached through composed shortcuts
    NOT_FOUND = auto()       # Step bound exhausted first


@dataclass
class ContractionResult:
    """Result of a single contraction query."""
    status: ContractionStatus
    state: Any
    n: int
    cycle: Optional[CycleInfo]
    transition_calls: int
    max_steps: int
    wall_time_seconds: float

    @property
    def found(self) -> bool:
        return self.status is not ContractionStatus.NOT_FOUND

    @property
    def outcome(self) -> Union[Any, NotFound]:
        if not self.found:
            return NotFound(steps=self.transition_calls, max_steps=self.max_steps)
        return self.state


class Orbit(Generic[S]):
    """
    The recorded orbit of one starting state under one transition.

    The trace grows lazily, so an Orbit can be kept around and queried
    for many step counts; each state is computed at most once.

    Usage:
        orbit = Orbit(1, lambda x: (x * 2) % 7)
        orbit.state_at(1_000_000)   # 2
        orbit.cycle                 # CycleInfo(preperiod=0, period=3)
    """

    def __init__(
        self,
        x0: S,
        f: Callable[[S], S],
        max_steps: int = DEFAULT_MAX_STEPS,
        key: Optional[Callable[[Any], Hashable]] = None,
    ):
        check_transition(f)
        self.f = f
        self.max_steps = check_count(max_steps, 'max_steps', 1)
        self.key = resolve_key(key)
        self.trace: List[S] = [x0]
        self.cycle: Optional[CycleInfo] = None
        self.transition_calls = 0
        self._index: Dict[Hashable, int] = {self.key(x0): 0}

    def __len__(self) -> int:
        return len(self.trace)

    @property
    def start(self) -> S:
        return self.trace[0]

    @property
    def exhausted(self) -> bool:
        """True once the step bound is spent without finding a cycle."""
        return self.cycle is None and self.transition_calls >= self.max_steps

    def state_at(self, n: int) -> Union[S, NotFound]:
        """Return fⁿ(x₀), or NotFound if the bound runs out first."""
        n = check_count(n, 'n', 0)

        while n >= len(self.trace) and self._advance():
            pass

        if n < len(self.trace):
            return self.trace[n]
        if self.cycle is not None:
            return self.trace[self.cycle.reduce(n)]

        logger.debug(
            f"Step bound {self.max_steps} exhausted before step {n} "
            f"without a repeated state"
        )
        return NotFound(steps=self.transition_calls, max_steps=self.max_steps)

    def explore(self) -> Union[CycleInfo, NotFound]:
        """Simulate until the first repeat and return the CycleInfo."""
        while self._advance():
            pass
        if self.cycle is None:
            return NotFound(steps=self.transition_calls, max_steps=self.max_steps)
        return self.cycle

    def index_of(self, state: S) -> Optional[int]:
        """Step index at which a state was first recorded, if any."""
        return self._index.get(self.key(state))

    def _advance(self) -> bool:
        """Record the next state. False when the trace can no longer grow."""
        if self.cycle is not None or self.transition_calls >= self.max_steps:
            return False

        nxt = self.f(self.trace[-1])
        self.transition_calls += 1
        k = self.key(nxt)

        seen = self._index.get(k)
        if seen is not None:
            self.cycle = CycleInfo(preperiod=seen, period=len(self.trace) - seen)
            logger.debug(
                f"Orbit repeats: preperiod={self.cycle.preperiod} "
                f"period={self.cycle.period} after {self.transition_calls} steps"
            )
            return False

        self._index[k] = len(self.trace)
        self.trace.append(nxt)
        return True


class PathContraction:
    """
    Answers "what is the state after n applications of f" for huge n.

    Usage:
        contraction = PathContraction(max_steps=100_000)
        contraction.apply(1, lambda x: (x * 2) % 7, 10**18)   # 2

        result = contraction.run(1, lambda x: (x * 2) % 7, 10**18)
        result.status    # ContractionStatus.CYCLE_REDUCED
        result.cycle     # CycleInfo(preperiod=0, period=3)
    """

    def __init__(
        self,
        max_steps: int = DEFAULT_MAX_STEPS,
        key: Optional[Callable[[Any], Hashable]] = None,
    ):
        self.max_steps = check_count(max_steps, 'max_steps', 1)
        self.key = resolve_key(key)

    def orbit(self, x0: S, f: Callable[[S], S]) -> Orbit[S]:
        """Create a reusable Orbit with this engine's bound and key."""
        return Orbit(x0, f, max_steps=self.max_steps, key=self.key)

    def apply(self, x0: S, f: Callable[[S], S], n: int) -> Union[S, NotFound]:
        return self.run(x0, f, n).outcome

    def run(self, x0: S, f: Callable[[S], S], n: int) -> ContractionResult:
        """
        Compute fⁿ(x₀).

        Args:
            x0: Starting state
            f: Deterministic transition S → S
            n: Number of applications (n ≥ 0, arbitrarily large)

        Returns:
            ContractionResult describing the answer and how it was found
        """
        n = check_count(n, 'n', 0)
        check_transition(f)

        with Timer() as timer:
            orbit = self.orbit(x0, f)
            state = orbit.state_at(n)

        if isinstance(state, NotFound):
            status = ContractionStatus.NOT_FOUND
            state = None
        elif n < len(orbit):
            status = ContractionStatus.DIRECT
        else:
            status = ContractionStatus.CYCLE_REDUCED

        return ContractionResult(
            status=status,
            state=state,
            n=n,
            cycle=orbit.cycle,
            transition_calls=orbit.transition_calls,
            max_steps=self.max_steps,
            wall_time_seconds=timer.elapsed_s,
        )


def apply_n_times(
    x0: S,
    f: Callable[[S], S],
    n: int,
    max_steps: int = DEFAULT_MAX_STEPS,
    key: Optional[Callable[[Any], Hashable]] = None,
) -> Union[S, NotFound]:
    """
    Return the state after applying f to x0 exactly n times.

    Returns NotFound if neither n steps nor a repeated state are reached
    within max_steps transition calls.
    """
    return PathContraction(max_steps=max_steps, key=key).apply(x0, f, n)
