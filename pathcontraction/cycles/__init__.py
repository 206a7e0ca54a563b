"""
Cycle-based iteration
=====================

1. **Cycle detection** (Brent): the pre-period μ and period λ of an orbit.

2. **Path contraction**: fⁿ(x₀) for huge n by recording the orbit once
   and reducing n modulo the period.

3. **Shortcut contraction**: fⁿ(x₀) by composing shortcuts that skip
   ever longer stretches of the orbit.

4. **State-distribution iteration**: stepping a branching transition
   over a weighted multiset of states.
"""

from pathcontraction.cycles.cycle_detector import (
    DEFAULT_MAX_STEPS,
    CycleDetector,
    CycleInfo,
    DetectionResult,
    DetectionStatus,
    NotFound,
    detect_cycle,
)
from pathcontraction.cycles.path_contraction import (
    ContractionResult,
    ContractionStatus,
    Orbit,
    PathContraction,
    apply_n_times,
)
from pathcontraction.cycles.shortcut_contraction import (
    ShortcutContraction,
    contract_path,
)
from pathcontraction.cycles.state_iteration import (
    iterate_states,
    state_iteration,
)

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
]
