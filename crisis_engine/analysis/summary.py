"""
History summary statistics.

Computes scalar summaries over a sequence of HistoryRecord objects.  All
functions accept a list of records and return scalars or dicts.  No side
effects.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import numpy as np

from ..core.phase import Phase
from ..core.record import HistoryRecord
from ..systems.zones import DualPullRegime, classify_w_acc


def mean_theta(history: List[HistoryRecord]) -> float:
    if not history:
        return 0.0
    return float(np.mean([r.theta for r in history]))


def max_theta(history: List[HistoryRecord]) -> float:
    if not history:
        return 0.0
    return float(np.max([r.theta for r in history]))


def red_zone_fraction(history: List[HistoryRecord]) -> float:
    """Fraction of ticks with Θ > 1.

    Returns:
        Fraction ∈ [0, 1].
    """
    if not history:
        return 0.0
    return sum(1 for r in history if r.threshold_crossed) / len(history)


def resistance_fraction(history: List[HistoryRecord]) -> float:
    """Fraction of ticks spent in the SIP Trap (W_acc < 0)."""
    if not history:
        return 0.0
    count = sum(
        1 for r in history if classify_w_acc(r.w_acc) is DualPullRegime.RESISTANCE
    )
    return count / len(history)


def first_recovery_tick(history: List[HistoryRecord]) -> Optional[int]:
    """Tick of the first record at or below the threshold, or None."""
    for record in history:
        if not record.threshold_crossed:
            return record.tick
    return None


def ticks_per_phase(history: List[HistoryRecord]) -> Dict[str, int]:
    """Number of ticks run under each phase label (every phase present)."""
    counts = {phase.label: 0 for phase in Phase}
    for record in history:
        counts[record.phase] += 1
    return counts


def summary_statistics(history: List[HistoryRecord]) -> Dict[str, float]:
    """Compute a comprehensive summary over a history.

    first_recovery_tick is reported as -1.0 when Θ never drops to 1.

    Args:
        history: Ordered list of HistoryRecord objects.

    Returns:
        Dictionary of metric name → scalar value.
    """
    recovery = first_recovery_tick(history)
    final: Optional[HistoryRecord] = history[-1] if history else None
    return {
        "n_ticks": float(len(history)),
        "mean_theta": mean_theta(history),
        "max_theta": max_theta(history),
        "final_theta": final.theta if final else 0.0,
        "red_zone_fraction": red_zone_fraction(history),
        "first_recovery_tick": float(recovery) if recovery is not None else -1.0,
        "mean_w_acc": float(np.mean([r.w_acc for r in history])) if history else 0.0,
        "resistance_fraction": resistance_fraction(history),
        "final_regime_payoff": final.regime_payoff if final else 0.0,
        "final_opposition_payoff": final.opposition_payoff if final else 0.0,
        "final_population_payoff": final.population_payoff if final else 0.0,
    }
