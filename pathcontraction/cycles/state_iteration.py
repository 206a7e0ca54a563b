"""
State-Distribution Iteration
============================

Steps a branching transition over a weighted multiset of states.

Where path contraction follows a single deterministic orbit, here every
state may have several successors (a non-deterministic finite state
machine, or a puzzle where each move branches). The distribution is a
mapping state → count, and one step sends the count of every state to
each of its successors, summing counts that land on the same state:

    count'(t) = Σ_{s : t ∈ δ(s, input)} count(s) · multiplicity(t in δ(s))

Counting how many paths end in an accepting state after n steps is the
typical use. This is direct simulation with per-step aggregation; there
is no cycle shortcutting.
"""

import logging
from collections import Counter
from typing import Any, Callable, Hashable, Iterable, Mapping, TypeVar

from pathcontraction.utils.helpers import check_count, check_transition

S = TypeVar('S', bound=Hashable)
logger = logging.getLogger(__name__)


def state_iteration(
    states: Mapping[S, int],
    transition: Callable[[S, Any], Iterable[S]],
    input: Any = None,
) -> Counter:
    """
    Apply a branching transition to every state once.

    Args:
        states: Current distribution, state → count
        transition: δ(state, input) yielding successor states; a
            successor yielded twice receives the count twice
        input: Extra value handed to every transition call

    Returns:
        New distribution as a Counter
    """
    check_transition(transition)
    new_states: Counter = Counter()
    for state, count in states.items():
        for new_state in transition(state, input):
            new_states[new_state] += count
    return new_states


def iterate_states(
    states: Mapping[S, int],
    transition: Callable[[S, Any], Iterable[S]],
    steps: int,
    input: Any = None,
) -> Counter:
    """
    Apply state_iteration repeatedly.

    Stops early once the distribution is empty, since no state can be
    reached from nothing.
    """
    steps = check_count(steps, 'steps', 0)
    check_transition(transition)

    current = Counter(states)
    for i in range(steps):
        current = state_iteration(current, transition, input)
        if not current:
            logger.debug(f"State distribution died out after {i + 1} steps")
            break
    return current
