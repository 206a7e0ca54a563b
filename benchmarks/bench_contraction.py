"""
╔════════════════════════════════════════════════════════════════════════════╗
║  Path Contraction Benchmark Suite                                          ║
║                                                                            ║
║  Benchmarks:                                                               ║
║   1. Naive simulation vs trace contraction for growing n                   ║
║   2. Trace contraction vs shortcut contraction (transition calls, time)    ║
║   3. Brent detection cost vs orbit length                                  ║
╚════════════════════════════════════════════════════════════════════════════╝
"""

import sys
import os

# Ensure pathcontraction is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from pathcontraction.cycles.cycle_detector import CycleDetector
from pathcontraction.cycles.path_contraction import PathContraction
from pathcontraction.cycles.shortcut_contraction import ShortcutContraction
from pathcontraction.utils.helpers import Timer, format_ns, format_speedup


# ═══════════════════════════════════════════════════════════════════
#  Benchmark Targets
# ═══════════════════════════════════════════════════════════════════

def lcg(modulus):
    """Linear congruential step; orbit length depends on the modulus."""
    def step(x):
        return (x * 1103515245 + 12345) % modulus
    return step


def tail_then_ring(tail, ring):
    """Walks `tail` states, then loops on a ring of `ring` states."""
    def step(x):
        x += 1
        if x >= tail + ring:
            return tail
        return x
    return step


def naive(x0, f, n):
    x = x0
    for _ in range(n):
        x = f(x)
    return x


# ═══════════════════════════════════════════════════════════════════
#  Benchmarks
# ═══════════════════════════════════════════════════════════════════

def bench_naive_vs_contraction():
    print("\n── 1. Naive simulation vs trace contraction ──")
    f = tail_then_ring(500, 1_000)
    engine = PathContraction()
    for n in [10**3, 10**4, 10**5, 10**6]:
        with Timer() as t_naive:
            expected = naive(0, f, n)
        with Timer() as t_fast:
            result = engine.run(0, f, n)
        assert result.state == expected
        print(
            f"  n={n:>9,}  naive {format_ns(t_naive.elapsed_ns):>10}  "
            f"contracted {format_ns(t_fast.elapsed_ns):>10}  "
            f"({format_speedup(t_naive.elapsed_ns, t_fast.elapsed_ns)}, "
            f"{result.status.name})"
        )


def bench_trace_vs_shortcut():
    print("\n── 2. Trace vs shortcut contraction ──")
    trace = PathContraction()
    shortcut = ShortcutContraction()
    for ring in [10, 100, 1_000]:
        f = tail_then_ring(ring // 2, ring)
        n = 10**15
        a = trace.run(0, f, n)
        b = shortcut.run(0, f, n)
        assert a.state == b.state
        print(
            f"  ring={ring:>5}  trace: {a.transition_calls:>6} calls "
            f"{format_ns(a.wall_time_seconds * 1e9):>10}   "
            f"shortcut: {b.transition_calls:>6} calls "
            f"{format_ns(b.wall_time_seconds * 1e9):>10}"
        )


def bench_brent_detection():
    print("\n── 3. Brent detection cost ──")
    detector = CycleDetector()
    for modulus in [2**10, 2**14, 2**18]:
        result = detector.run(1, lcg(modulus))
        cycle = result.cycle
        print(
            f"  modulus={modulus:>7}  preperiod={cycle.preperiod:>6}  "
            f"period={cycle.period:>7}  calls={result.transition_calls:>7}  "
            f"{format_ns(result.wall_time_seconds * 1e9)}"
        )


def run_benchmarks():
    bench_naive_vs_contraction()
    bench_trace_vs_shortcut()
    bench_brent_detection()


if __name__ == "__main__":
    run_benchmarks()
