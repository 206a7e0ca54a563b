"""
Tests for trace-based path contraction.

Validates:
  - Exact equivalence with naive simulation on periodic transitions
  - Pre-period boundary and phase consistency
  - Self-loops and n = 0
  - Very large n (10**18 and beyond)
  - Orbit reuse as an explicit cache
  - Bound exhaustion yields NotFound, never a wrong state
  - Argument validation
"""

import random

import numpy as np
import pytest

from pathcontraction.cycles.cycle_detector import CycleInfo, NotFound, detect_cycle
from pathcontraction.cycles.path_contraction import (
    ContractionStatus,
    Orbit,
    PathContraction,
    apply_n_times,
)
from pathcontraction.utils.helpers import ndarray_key


def naive(x0, f, n):
    x = x0
    for _ in range(n):
        x = f(x)
    return x


def tail_into_cycle(x):
    # 0 → 1 → 2 → 3 → 4 → 5 → 6 → 3 ...
    return x + 1 if x < 6 else 3


# ═══════════════════════════════════════════════════════════════════
#  apply_n_times
# ═══════════════════════════════════════════════════════════════════

class TestApplyNTimes:
    def test_doubling_mod_seven(self):
        assert apply_n_times(1, lambda x: (x * 2) % 7, 1_000_000) == 2

    def test_zero_steps_returns_start(self):
        start = (1, 2, 3)
        assert apply_n_times(start, lambda s: s[::-1], 0) is start

    def test_single_step(self):
        assert apply_n_times(1, lambda x: (x * 2) % 7, 1) == 2

    def test_matches_naive_over_five_periods(self):
        info = detect_cycle(0, tail_into_cycle)
        limit = 5 * info.period + info.preperiod
        for n in range(limit + 1):
            assert apply_n_times(0, tail_into_cycle, n) == naive(0, tail_into_cycle, n)

    @pytest.mark.parametrize("seed", range(10))
    def test_matches_naive_on_random_tables(self, seed):
        rng = random.Random(seed)
        size = 40
        table = [rng.randrange(size) for _ in range(size)]
        f = table.__getitem__
        x0 = rng.randrange(size)
        info = detect_cycle(x0, f)
        for n in range(info.preperiod + 5 * info.period + 1):
            assert apply_n_times(x0, f, n) == naive(x0, f, n)

    def test_phase_consistency(self):
        info = detect_cycle(0, tail_into_cycle)
        mu, lam = info.preperiod, info.period
        assert apply_n_times(0, tail_into_cycle, mu) == apply_n_times(0, tail_into_cycle, mu + lam)
        assert apply_n_times(0, tail_into_cycle, mu) == apply_n_times(0, tail_into_cycle, mu + 7 * lam)

    def test_last_prefix_state_is_not_reduced(self):
        info = detect_cycle(0, tail_into_cycle)
        n = info.preperiod - 1
        assert apply_n_times(0, tail_into_cycle, n) == n

    def test_self_loop_for_every_n(self):
        for n in [0, 1, 2, 17, 10**9, 10**18]:
            assert apply_n_times("x", lambda s: s, n) == "x"

    def test_huge_n(self):
        n = 10**18 + 7
        expected = 3 + (n - 3) % 4
        assert apply_n_times(0, tail_into_cycle, n) == expected

    def test_beyond_machine_integers(self):
        n = 2**200 + 1
        assert apply_n_times(0, lambda x: (x + 1) % 10, n) == n % 10

    def test_numpy_integer_step_count(self):
        assert apply_n_times(1, lambda x: (x * 2) % 7, np.int64(4)) == 2

    def test_ndarray_states(self):
        start = np.array([[1, 2], [3, 4]])
        result = apply_n_times(start, np.rot90, 10**12 + 1, key=ndarray_key)
        assert np.array_equal(result, np.rot90(start))

    def test_transition_not_called_beyond_first_repeat(self):
        calls = []

        def f(x):
            calls.append(x)
            return (x + 1) % 5

        assert apply_n_times(0, f, 10**15) == 10**15 % 5
        assert len(calls) == 5


class TestBoundExhaustion:
    def test_increasing_counter(self):
        result = apply_n_times(0, lambda x: x + 1, 10**9, max_steps=100)
        assert isinstance(result, NotFound)
        assert result.steps == 100

    def test_n_within_bound_is_answered_directly(self):
        assert apply_n_times(0, lambda x: x + 1, 100, max_steps=100) == 100

    def test_one_past_bound(self):
        assert not apply_n_times(0, lambda x: x + 1, 101, max_steps=100)


class TestArgumentValidation:
    def test_negative_n(self):
        with pytest.raises(ValueError):
            apply_n_times(0, lambda x: x, -1)

    def test_zero_bound(self):
        with pytest.raises(ValueError):
            apply_n_times(0, lambda x: x, 5, max_steps=0)

    def test_float_n(self):
        with pytest.raises(TypeError):
            apply_n_times(0, lambda x: x, 2.0)

    def test_non_callable(self):
        with pytest.raises(TypeError):
            apply_n_times(0, None, 2)

    def test_validation_happens_before_simulation(self):
        calls = []
        with pytest.raises(ValueError):
            apply_n_times(0, lambda x: calls.append(x) or x, -3)
        assert calls == []


# ═══════════════════════════════════════════════════════════════════
#  PathContraction engine
# ═══════════════════════════════════════════════════════════════════

class TestPathContraction:
    def setup_method(self):
        self.engine = PathContraction(max_steps=10_000)

    def test_direct_status(self):
        result = self.engine.run(0, tail_into_cycle, 4)
        assert result.status == ContractionStatus.DIRECT
        assert result.state == 4
        assert result.found

    def test_cycle_reduced_status(self):
        result = self.engine.run(0, tail_into_cycle, 1000)
        assert result.status == ContractionStatus.CYCLE_REDUCED
        assert result.cycle == CycleInfo(preperiod=3, period=4)
        assert result.state == naive(0, tail_into_cycle, 1000)
        assert result.transition_calls == 7

    def test_not_found_status(self):
        result = self.engine.run(0, lambda x: x + 1, 10**6)
        assert result.status == ContractionStatus.NOT_FOUND
        assert result.state is None
        assert not result.found
        assert result.outcome == NotFound(steps=10_000, max_steps=10_000)

    def test_apply(self):
        assert self.engine.apply(1, lambda x: (x * 2) % 7, 10**18) == 2

    def test_engine_key_is_used(self):
        engine = PathContraction(key=ndarray_key)
        start = np.zeros(4, dtype=np.uint8)
        start[0] = 1
        assert engine.run(start, lambda a: np.roll(a, 1), 10).cycle == CycleInfo(0, 4)


# ═══════════════════════════════════════════════════════════════════
#  Orbit
# ═══════════════════════════════════════════════════════════════════

class TestOrbit:
    def test_lazy_growth(self):
        orbit = Orbit(0, tail_into_cycle)
        assert len(orbit) == 1
        assert orbit.state_at(2) == 2
        assert len(orbit) == 3
        assert orbit.cycle is None

    def test_reuse_for_many_queries(self):
        calls = []

        def f(x):
            calls.append(x)
            return tail_into_cycle(x)

        orbit = Orbit(0, f)
        answers = [orbit.state_at(n) for n in (10, 10**6, 3, 10**18)]
        assert answers == [naive(0, tail_into_cycle, n) for n in (10, 10**6, 3)] + [
            3 + (10**18 - 3) % 4
        ]
        assert len(calls) == 7

    def test_explore(self):
        orbit = Orbit(1, lambda x: (x * 2) % 7)
        assert orbit.explore() == CycleInfo(preperiod=0, period=3)
        assert orbit.trace == [1, 2, 4]

    def test_explore_bounded(self):
        orbit = Orbit(0, lambda x: x + 1, max_steps=50)
        assert isinstance(orbit.explore(), NotFound)
        assert orbit.exhausted

    def test_index_of(self):
        orbit = Orbit(0, tail_into_cycle)
        orbit.explore()
        assert orbit.index_of(5) == 5
        assert orbit.index_of(99) is None

    def test_start(self):
        assert Orbit("a", lambda s: s).start == "a"

    def test_engine_factory_shares_config(self):
        engine = PathContraction(max_steps=3)
        orbit = engine.orbit(0, lambda x: x + 1)
        assert orbit.max_steps == 3
        assert not orbit.state_at(4)
        assert orbit.state_at(3) == 3
