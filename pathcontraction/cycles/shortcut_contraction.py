"""
Shortcut Contraction
====================

An alternative to trace-based contraction that never computes μ or λ.

Idea:
    Walking a path A → B → C → D → E, once the moves A → B and B → C are
    known, a shortcut A ⇒ C (length 2) can be recorded. Shortcuts compose
    like edges: standing on A again with shortcuts A ⇒ C and C ⇒ E
    already known yields A ⇒ E (length 4). This mirrors the contraction
    hierarchies used in road-network routing.

    Every shortcut stores the number of transitions it skips so progress
    towards n stays exact. When even the next single shortcut would
    overshoot n, all shortcuts are discarded and the walk continues with
    plain steps, building new, shorter shortcuts from there.

    Shortcut hops never call f. On an eventually periodic orbit the same
    states are revisited on every lap, so after the first lap most moves
    are hops and the number of transition calls stays far below n.
"""

import logging
from typing import Any, Callable, Dict, Hashable, Optional, Tuple, TypeVar, Union

from pathcontraction.cycles.cycle_detector import (
    DEFAULT_MAX_STEPS,
    NotFound,
)
from pathcontraction.cycles.path_contraction import ContractionResult, ContractionStatus
from pathcontraction.utils.helpers import Timer, check_count, check_transition, resolve_key

S = TypeVar('S')
logger = logging.getLogger(__name__)


class _BoundExhausted(Exception):
    pass


class ShortcutContraction:
    """
    Computes fⁿ(x₀) by composing shortcuts.

    max_steps caps the number of calls to f; shortcut hops are free.

    Usage:
        engine = ShortcutContraction()
        engine.apply(0, lambda x: (x + 1) % 10, 101)   # 1
    """

    def __init__(
        self,
        max_steps: int = DEFAULT_MAX_STEPS,
        key: Optional[Callable[[Any], Hashable]] = None,
    ):
        self.max_steps = check_count(max_steps, 'max_steps', 1)
        self.key = resolve_key(key)

    def apply(self, x0: S, f: Callable[[S], S], n: int) -> Union[S, NotFound]:
        return self.run(x0, f, n).outcome

    def run(self, x0: S, f: Callable[[S], S], n: int) -> ContractionResult:
        n = check_count(n, 'n', 0)
        check_transition(f)

        key = self.key
        shortcuts: Dict[Hashable, Tuple[S, int]] = {}
        calls = 0
        clears = 0

        def step(state):
            nonlocal calls
            if calls >= self.max_steps:
                raise _BoundExhausted
            calls += 1
            return f(state)

        def hop(state, state_key):
            """Follow a shortcut if one exists, otherwise take one step."""
            known = shortcuts.get(state_key)
            if known is not None:
                return known
            return step(state), 1

        cur = x0
        done = 0

        with Timer() as timer:
            try:
                while done < n:
                    cur_key = key(cur)
                    next1, len1 = hop(cur, cur_key)

                    if done + len1 > n:
                        # Shortcut overshoots: single step and start over
                        cur = step(cur)
                        done += 1
                        shortcuts.clear()
                        clears += 1
                        continue

                    if done + len1 < n:
                        next2, len2 = hop(next1, key(next1))
                        if done + len1 + len2 <= n:
                            shortcuts[cur_key] = (next2, len1 + len2)
                            cur = next2
                            done += len1 + len2
                            continue

                    shortcuts[cur_key] = (next1, len1)
                    cur = next1
                    done += len1
            except _BoundExhausted:
                pass

        if done == n:
            status = ContractionStatus.DIRECT if calls >= n else ContractionStatus.SHORTCUT
            state = cur
            logger.debug(
                f"Reached step {n} with {calls} transition calls "
                f"({clears} shortcut resets)"
            )
        else:
            status = ContractionStatus.NOT_FOUND
            state = None
            logger.debug(
                f"Step bound {self.max_steps} exhausted at step {done} of {n}"
            )

        return ContractionResult(
            status=status,
            state=state,
            n=n,
            cycle=None,
            transition_calls=calls,
            max_steps=self.max_steps,
            wall_time_seconds=timer.elapsed_s,
        )


def contract_path(
    x0: S,
    f: Callable[[S], S],
    n: int,
    max_steps: int = DEFAULT_MAX_STEPS,
    key: Optional[Callable[[Any], Hashable]] = None,
) -> Union[S, NotFound]:
    """Return fⁿ(x₀) using shortcut composition, or NotFound."""
    return ShortcutContraction(max_steps=max_steps, key=key).apply(x0, f, n)
